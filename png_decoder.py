import logging
import struct
import zlib
from functools import partial
from typing import List, Optional, Union

from png_chunks import Chunk, IhdrChunk, ItxtChunk, TextChunk

logger = logging.getLogger(__name__)

#1 stale specyficzne dla formatu PNG
PngSignature: bytes = b'\x89PNG\r\n\x1a\n'   #8 bajtowy naglowek PNG
IEND = b'IEND'
IHDR_LENGTH = 13     #width(4) height(4) + 5 pol po 1 bajcie
CRC_LENGTH = 4
MAX_INFLATED_TEXT = 16 * 1024 * 1024   #limit dla rozpakowanego tekstu iTXt


#2 bledy dekodowania, wszystkie dziedzicza po DecoderError
class DecoderError(ValueError):
    def __init__(self, message: str, tag: Optional[bytes] = None, offset: Optional[int] = None):
        super().__init__(message)
        self.tag = tag
        self.offset = offset


class NotPngImage(DecoderError):
    pass


class IhdrWrongSize(DecoderError):
    pass


class UnterminatedField(DecoderError):
    pass


class TruncatedChunk(DecoderError):
    pass


class ChecksumMismatch(DecoderError):
    pass


class CompressedTextError(DecoderError):
    pass


def tagName(tag: bytes) -> str:
    return tag.decode('ascii', errors='replace')


def lenient(data: bytes) -> str:
    #niepoprawne sekwencje zamieniane na U+FFFD, nigdy wyjatek
    return data.decode('utf-8', errors='replace')


#3 kursor = bufor (niezmienny) + offset, ktory tylko rosnie
#chunk_offset = poczatek biezacego chunka (pole length), ten offset trafia do bledow
class Cursor:
    def __init__(self, buffer: bytes):
        self.buffer = buffer
        self.offset = 0
        self.chunk_offset = 0

    @property
    def remaining(self) -> int:
        return len(self.buffer) - self.offset

    def need(self, n: int, what: str, tag: Optional[bytes] = None):
        if n > self.remaining:
            raise TruncatedChunk(
                f'buffer ends inside {what}: need {n} bytes at offset {self.offset}, '
                f'{self.remaining} left',
                tag=tag, offset=self.chunk_offset)

    def take(self, n: int, what: str, tag: Optional[bytes] = None) -> bytes:
        self.need(n, what, tag)
        data = self.buffer[self.offset:self.offset + n]
        self.offset += n
        return data

    #tylko przesuwa offset, bez kopiowania pominietych bajtow (np. IDAT)
    def skip(self, n: int, what: str, tag: Optional[bytes] = None):
        self.need(n, what, tag)
        self.offset += n

    def readUint32(self, what: str) -> int:
        value, = struct.unpack('>I', self.take(4, what))
        return value


#dlugosc pola zakonczonego nullbyte liczona razem z nullbyte (pusty keyword = 1 bajt)
#szukamy tylko w payloadzie chunka, nigdy dalej
def fieldLength(raw: bytes, start: int, field: str, tag: bytes, offset: int) -> int:
    end = raw.find(b'\x00', start)
    if end == -1:
        raise UnterminatedField(f'{tagName(tag)}: {field} has no null terminator',
                                tag=tag, offset=offset)
    return end - start + 1


#4 ekstraktory, kazdy zjada dokladnie `length` bajtow payloadu (bez CRC)
def parseIHDR(cursor: Cursor, length: int) -> IhdrChunk:
    if length != IHDR_LENGTH:
        raise IhdrWrongSize(f'IHDR length is {length}, expected {IHDR_LENGTH}',
                            tag=IhdrChunk.TYPE, offset=cursor.chunk_offset)
    raw = cursor.take(length, 'IHDR payload', IhdrChunk.TYPE)
    w, h, bitd, colort, compm, filterm, interlacem = struct.unpack('>IIBBBBB', raw)
    return IhdrChunk(w, h, bitd, colort, compm, filterm, interlacem, raw)


#tEXt: <keyword>\0<text do konca chunka>
def parseTEXT(cursor: Cursor, length: int) -> TextChunk:
    start = cursor.chunk_offset
    raw = cursor.take(length, 'tEXt payload', TextChunk.TYPE)

    keyword_len = fieldLength(raw, 0, 'keyword', TextChunk.TYPE, start)
    keyword = lenient(raw[:keyword_len - 1])
    text_string = lenient(raw[keyword_len:])   #length - keyword_len bajtow
    return TextChunk(keyword, text_string, raw)


#rozpakowanie z limitem, zeby maly chunk nie rozdmuchal sie do gigabajtow
def inflateText(data: bytes, keyword: str, tag: bytes, offset: int) -> bytes:
    d = zlib.decompressobj()
    try:
        text = d.decompress(data, MAX_INFLATED_TEXT + 1)
    except zlib.error as e:
        raise CompressedTextError(f'{tagName(tag)}: cannot inflate text for keyword {keyword!r}: {e}',
                                  tag=tag, offset=offset) from e
    if len(text) > MAX_INFLATED_TEXT:
        raise CompressedTextError(f'{tagName(tag)}: text for keyword {keyword!r} inflates past '
                                  f'{MAX_INFLATED_TEXT} bytes', tag=tag, offset=offset)
    if not d.eof:
        raise CompressedTextError(f'{tagName(tag)}: compressed text for keyword {keyword!r} is truncated',
                                  tag=tag, offset=offset)
    return text


#iTXt: <keyword>\0 <flag 1B> <method 1B> <language>\0 <translated keyword>\0 <text>
def parseITXT(cursor: Cursor, length: int, inflate_text: bool = False) -> ItxtChunk:
    tag = ItxtChunk.TYPE
    start = cursor.chunk_offset
    raw = cursor.take(length, 'iTXt payload', tag)

    pos = fieldLength(raw, 0, 'keyword', tag, start)
    keyword = lenient(raw[:pos - 1])

    if pos + 2 > length:
        raise UnterminatedField('iTXt: keyword is not followed by compression flag and method',
                                tag=tag, offset=start)
    compression_flag, compression_method = raw[pos], raw[pos + 1]
    pos += 2

    lang_len = fieldLength(raw, pos, 'language tag', tag, start)
    language_tag = lenient(raw[pos:pos + lang_len - 1])
    pos += lang_len

    tkey_len = fieldLength(raw, pos, 'translated keyword', tag, start)
    translated_keyword = lenient(raw[pos:pos + tkey_len - 1])
    pos += tkey_len

    text = raw[pos:]
    #domyslnie nie rozpakowujemy, zwracamy surowe bajty tak jak sa
    if inflate_text and compression_flag == 1 and compression_method == 0:
        text = inflateText(text, keyword, tag, start)

    return ItxtChunk(keyword, compression_flag, compression_method, language_tag,
                     translated_keyword, lenient(text), raw)


def checkCrc(tag: bytes, raw: bytes, crc_bytes: bytes, offset: int):
    chunk_crc, = struct.unpack('>I', crc_bytes)
    calc_crc = zlib.crc32(raw, zlib.crc32(tag))
    if chunk_crc != calc_crc:
        raise ChecksumMismatch(f'{tagName(tag)}: checksum {chunk_crc:08x} != computed {calc_crc:08x}',
                               tag=tag, offset=offset)


#5 dekoder: sygnatura, potem petla po chunkach az do IEND
class Decoder:
    def __init__(self, buffer: Union[bytes, bytearray, memoryview],
                 verify_crc: bool = False, inflate_text: bool = False):
        self.buffer = bytes(buffer)
        self.verify_crc = verify_crc
        self.extractors = {
            IhdrChunk.TYPE: parseIHDR,
            TextChunk.TYPE: parseTEXT,
            ItxtChunk.TYPE: partial(parseITXT, inflate_text=inflate_text),
        }

    def decode(self) -> List[Chunk]:
        #walidacja przed jakimkolwiek innym odczytem
        if self.buffer[:len(PngSignature)] != PngSignature:
            raise NotPngImage('not a PNG image', offset=0)

        cursor = Cursor(self.buffer)
        cursor.skip(len(PngSignature), 'signature')
        chunks: List[Chunk] = []

        while True:
            #chunk = [4B length][4B type][payload][4B CRC]
            chunk_offset = cursor.chunk_offset = cursor.offset
            length = cursor.readUint32('chunk length')
            tag = cursor.take(4, 'chunk type')

            if tag == IEND:
                break  #koniec, nic wiecej nie czytamy (ani length ani CRC)

            extractor = self.extractors.get(tag)
            if extractor is None:
                logger.debug('skipping %s chunk at offset %d (%d bytes)', tagName(tag), chunk_offset, length)
                cursor.skip(length + CRC_LENGTH, f'{tagName(tag)} chunk', tag)
                continue

            chunk = extractor(cursor, length)
            crc_bytes = cursor.take(CRC_LENGTH, f'{tagName(tag)} checksum', tag)
            if self.verify_crc:
                checkCrc(tag, chunk.raw, crc_bytes, chunk_offset)
            chunks.append(chunk)

        logger.debug('decoded %d chunks, stopped at offset %d', len(chunks), cursor.offset)
        return chunks


def decode(buffer: Union[bytes, bytearray, memoryview], **options) -> List[Chunk]:
    return Decoder(buffer, **options).decode()
