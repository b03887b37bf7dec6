__version__ = "0.1.0"

from .decoder import QOIDecoder, decode, decode_header_only
from .encoder import QOIEncoder, encode
from .errors import (
    InvalidFormat,
    InvalidGeometry,
    InvalidTrailer,
    IoFailure,
    QOIError,
    TrailingData,
    UnexpectedEndOfStream,
)
from .header import QOIHeader, decode_header, encode_header
from .image import Pixel, PixelGrid, PixelSource
from .qoi import Op, PixelCache, hash_pixel
from .utils import load_image

__all__ = [
    "QOIEncoder",
    "QOIDecoder",
    "QOIHeader",
    "encode",
    "decode",
    "decode_header",
    "decode_header_only",
    "encode_header",
    "hash_pixel",
    "Op",
    "PixelCache",
    "Pixel",
    "PixelGrid",
    "PixelSource",
    "load_image",
    "QOIError",
    "InvalidGeometry",
    "InvalidFormat",
    "UnexpectedEndOfStream",
    "InvalidTrailer",
    "TrailingData",
    "IoFailure",
]
