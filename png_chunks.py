from typing import NamedTuple, Union

#rekordy dla trzech obslugiwanych chunkow, kazdy trzyma tez surowy payload (raw)
#TYPE to 4-bajtowy identyfikator chunka, po nim dispatch zamiast isinstance


class IhdrChunk(NamedTuple):
    TYPE = b'IHDR'

    width: int
    height: int
    bit_depth: int
    colour_type: int
    compression_method: int
    filter_method: int
    interlace_method: int
    raw: bytes


class TextChunk(NamedTuple):
    TYPE = b'tEXt'

    keyword: str
    text_string: str
    raw: bytes


#przy compression_flag == 1 pole text to nadal skompresowane bajty (chyba ze dekoder dostal inflate_text)
class ItxtChunk(NamedTuple):
    TYPE = b'iTXt'

    keyword: str
    compression_flag: int
    compression_method: int
    language_tag: str
    translated_keyword: str
    text: str
    raw: bytes


Chunk = Union[IhdrChunk, TextChunk, ItxtChunk]
