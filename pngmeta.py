import argparse
import logging
import os
import sys

from png_decoder import DecoderError, decode
from print_chunks import printChunks

logger = logging.getLogger(__name__)

HELP_TEXT = "Usage:\n    pngmeta [image_path]"

#domyslne wartosci mozna ustawic przez zmienne srodowiskowe
LOG_LEVEL = os.getenv("PNGMETA_LOG_LEVEL", "INFO")
VERIFY_CRC = os.getenv("PNGMETA_VERIFY_CRC", "0").lower() in ("1", "true", "yes")


#1 czyta caly plik do pamieci i oddaje bajty dekoderowi (dekoder nie zna sciezek)
def readPNG(file_path, verify_crc=False, inflate_text=False):
    with open(file_path, 'rb') as f:
        content = f.read()
    logger.debug("read %d bytes from %s", len(content), file_path)
    return decode(content, verify_crc=verify_crc, inflate_text=inflate_text)


#nieznana nazwa poziomu (np. PNGMETA_LOG_LEVEL=foo) -> INFO zamiast wyjatku z basicConfig
def logLevel(name):
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def buildParser():
    parser = argparse.ArgumentParser(prog="pngmeta", description="Print PNG header and text metadata")
    parser.add_argument("image_path", nargs="?", help="PNG file to inspect")
    parser.add_argument("--verify-crc", action="store_true", default=VERIFY_CRC,
                        help="check the CRC of every parsed chunk")
    parser.add_argument("--no-verify-crc", dest="verify_crc", action="store_false",
                        help="skip CRC checks even when PNGMETA_VERIFY_CRC is set")
    parser.add_argument("--inflate", action="store_true",
                        help="decompress zlib-compressed iTXt text")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv=None):
    args = buildParser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logLevel(LOG_LEVEL),
                        format="%(levelname)s %(name)s: %(message)s")

    if args.image_path is None:
        print(HELP_TEXT)
        return 0

    try:
        chunks = readPNG(args.image_path, verify_crc=args.verify_crc, inflate_text=args.inflate)
    except OSError as e:
        print(f"error: cannot read {args.image_path}: {e}", file=sys.stderr)
        return 1
    except DecoderError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    printChunks(chunks)
    return 0


if __name__ == '__main__':
    sys.exit(main())
