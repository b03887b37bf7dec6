import argparse
import logging
import sys
from typing import Optional, Sequence

from . import __version__
from .converter import png_to_qoi, qoi_to_png, read_qoi_header
from .errors import QOIError


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Convert images to and from QOI - the Quite OK Image format."""
    parser = argparse.ArgumentParser(prog="qoicodec", description=main.__doc__)
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    encode_parser = subparsers.add_parser("encode", help="convert an image (PNG, JPEG, RAW, ...) to QOI")
    encode_parser.add_argument("infile")
    encode_parser.add_argument("outfile")

    decode_parser = subparsers.add_parser("decode", help="convert a QOI file to PNG (or any Pillow format)")
    decode_parser.add_argument("infile")
    decode_parser.add_argument("outfile")
    decode_parser.add_argument(
        "-c", "--channels", type=int, choices=(3, 4), default=4, help="output channels"
    )

    info_parser = subparsers.add_parser("info", help="print the header of a QOI file")
    info_parser.add_argument("infile")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "encode":
            size = png_to_qoi(args.infile, args.outfile)
            print(f"Encoded {args.infile} to {args.outfile} ({size} bytes)")
        elif args.command == "decode":
            decoded = qoi_to_png(args.infile, args.outfile, channels=args.channels)
            print(f"Decoded {args.infile} ({decoded.width}x{decoded.height}) to {args.outfile}")
        else:
            header = read_qoi_header(args.infile)
            print(
                f"{args.infile}: {header.width}x{header.height} "
                f"Channels: {header.channels} Colorspace: {header.colorspace}"
            )
    except (QOIError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
