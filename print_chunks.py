from png_chunks import Chunk, IhdrChunk, ItxtChunk, TextChunk

#1 etykiety kodow z IHDR (RFC 2083), nieznane kody wypisujemy jako Unknown
COLOUR_TYPES = {
    0: 'Greyscale',
    2: 'RGB',
    3: 'Indexed color',
    4: 'Greyscale Alpha',
    6: 'RGBA',
}
INTERLACE_METHODS = {
    0: 'No interlace',
    1: 'Adam7',
}


def colourType(code: int) -> str:
    return f"{COLOUR_TYPES.get(code, 'Unknown colour type')}({code})"


def compressionMethod(code: int) -> str:
    return f"DEFLATE({code})" if code == 0 else f"Unknown compression method({code})"


def filterMethod(code: int) -> str:
    return f"Adaptive({code})" if code == 0 else f"Unknown filter method({code})"


def interlaceMethod(code: int) -> str:
    return f"{INTERLACE_METHODS.get(code, 'Unknown interlace method')}({code})"


def itxtCompressionMethod(flag: int, method: int) -> str:
    #metoda ma znaczenie tylko gdy flaga mowi ze tekst jest skompresowany
    if method == 0 and flag == 1:
        return f"Zlib compression method({method})"
    return f"Uncompressed({method})"


def itxtCompressionFlag(flag: int) -> str:
    if flag == 0:
        return f"Uncompressed({flag})"
    if flag == 1:
        return f"Compressed({flag})"
    return f"Unknown compression flag({flag})"


def formatIHDR(c: IhdrChunk) -> str:
    return (f"Width:  {c.width} pixels\n"
            f"height: {c.height} pixels\n"
            f"Bit Depth: {c.bit_depth} bits per channel\n"
            f"colour_type: {colourType(c.colour_type)}\n"
            f"compression_method: {compressionMethod(c.compression_method)}\n"
            f"filter_method: {filterMethod(c.filter_method)}\n"
            f"interlace_method: {interlaceMethod(c.interlace_method)}")


def formatTEXT(c: TextChunk) -> str:
    return (f"\nKeyword: {c.keyword}\n"
            f"Text String: {c.text_string}")


def formatITXT(c: ItxtChunk) -> str:
    return (f"\nKeyword: {c.keyword}\n"
            f"Compression flag: {itxtCompressionFlag(c.compression_flag)}\n"
            f"Compression method: {itxtCompressionMethod(c.compression_flag, c.compression_method)}\n"
            f"Language Tag: {c.language_tag}\n"
            f"Translated Keyword: {c.translated_keyword}\n"
            f"Text: {c.text}")


FORMATTERS = {
    IhdrChunk.TYPE: formatIHDR,
    TextChunk.TYPE: formatTEXT,
    ItxtChunk.TYPE: formatITXT,
}


#2 pretty printer dla rekordu zwroconego przez png_decoder.decode()
def formatChunk(chunk: Chunk) -> str:
    return FORMATTERS[chunk.TYPE](chunk)


def printChunk(chunk: Chunk):
    print(formatChunk(chunk))


def printChunks(chunks):
    for chunk in chunks:
        printChunk(chunk)
