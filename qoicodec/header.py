import struct
from dataclasses import dataclass

from .errors import InvalidFormat, InvalidGeometry, UnexpectedEndOfStream
from .qoi import QOI_CHANNELS, QOI_HEADER_SIZE, QOI_MAGIC, QOI_PIXELS_MAX, QOI_SRGB

# > : Big Endian
# 4s: magic
# I : width, height (uint32)
# B : channels, colorspace (uint8)
HEADER_STRUCT = struct.Struct(">4sIIBB")


@dataclass(frozen=True)
class QOIHeader:
    width: int
    height: int
    channels: int = QOI_CHANNELS
    colorspace: int = QOI_SRGB

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


def validate_geometry(width: int, height: int, prefix: str = "QOI.encode") -> None:
    """Raise InvalidGeometry unless width and height describe a storable image."""
    if not (0 < width < 4294967296):
        raise InvalidGeometry(f"{prefix}: Invalid width {width}")

    if not (0 < height < 4294967296):
        raise InvalidGeometry(f"{prefix}: Invalid height {height}")

    if width * height > QOI_PIXELS_MAX:
        raise InvalidGeometry(
            f"{prefix}: {width}x{height} exceeds the maximum of {QOI_PIXELS_MAX} pixels"
        )


def encode_header(width: int, height: int) -> bytes:
    """
    Build the 14-byte QOI header.

    Channels and colorspace are always written as 4 (RGBA) and 0 (sRGB); the
    pixel data itself is stored losslessly either way.
    """
    validate_geometry(width, height)
    return HEADER_STRUCT.pack(QOI_MAGIC, width, height, QOI_CHANNELS, QOI_SRGB)


def decode_header(data) -> QOIHeader:
    """
    Parse and validate the first 14 bytes of a QOI stream.

    :param data: Bytes-like object starting with the QOI header. Extra bytes are ignored.
    :return: QOIHeader with width, height, channels and colorspace.
    """
    if len(data) < QOI_HEADER_SIZE:
        raise UnexpectedEndOfStream(
            f"QOI.decode: File too short for header ({len(data)} of {QOI_HEADER_SIZE} bytes)"
        )

    magic, width, height, channels, colorspace = HEADER_STRUCT.unpack_from(data, 0)

    if magic != QOI_MAGIC:
        raise InvalidFormat("QOI.decode: The signature of the QOI file is invalid")

    if channels not in (3, 4):
        raise InvalidFormat(
            f"QOI.decode: The number of channels declared in the file is invalid ({channels})"
        )

    if colorspace not in (0, 1):
        raise InvalidFormat(
            f"QOI.decode: The colorspace declared in the file is invalid ({colorspace})"
        )

    validate_geometry(width, height, prefix="QOI.decode")

    return QOIHeader(width, height, channels, colorspace)
