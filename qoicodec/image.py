from typing import Protocol, Tuple, runtime_checkable

import numpy as np
from PIL import Image

from .errors import InvalidFormat

Pixel = Tuple[int, int, int, int]


@runtime_checkable
class PixelSource(Protocol):
    """Anything the encoder can read: a width, a height and RGBA pixels by position."""

    width: int
    height: int

    def pixel_at(self, x: int, y: int) -> Pixel: ...


class PixelGrid:
    """
    A width x height image stored as flat, row-major RGBA bytes.

    This is what the decoder produces and what the other input formats are
    converted into before encoding.
    """

    def __init__(self, width: int, height: int, data: bytearray = None):
        self.width = width
        self.height = height
        if data is None:
            data = bytearray(width * height * 4)
        if len(data) != width * height * 4:
            raise InvalidFormat(
                f"PixelGrid: expected {width * height * 4} bytes of RGBA data, got {len(data)}"
            )
        self.data = data

    def pixel_at(self, x: int, y: int) -> Pixel:
        pos = (y * self.width + x) * 4
        return tuple(self.data[pos : pos + 4])

    def set_pixel(self, x: int, y: int, pixel: Pixel) -> None:
        pos = (y * self.width + x) * 4
        self.data[pos : pos + 4] = bytes(pixel)

    def __eq__(self, other):
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.data == other.data
        )

    def __repr__(self):
        return f"PixelGrid({self.width}x{self.height})"

    def to_bytes(self, channels: int = 4) -> bytes:
        """Interleaved RGBA bytes, or RGB bytes with alpha dropped when channels == 3."""
        if channels == 4:
            return bytes(self.data)
        if channels == 3:
            return self.to_array()[:, :, :3].tobytes()
        raise InvalidFormat(f"PixelGrid: The number of channels for the output is invalid ({channels})")

    def to_array(self) -> np.ndarray:
        """H x W x 4 uint8 array (a writable copy)."""
        return np.array(self.data, dtype=np.uint8).reshape(
            self.height, self.width, 4
        )

    def to_pil(self) -> Image.Image:
        return Image.frombytes("RGBA", (self.width, self.height), bytes(self.data))

    @classmethod
    def from_bytes(cls, color_data, width: int, height: int, channels: int = 4) -> "PixelGrid":
        """
        Build a grid from interleaved RGB or RGBA bytes. RGB pixels get alpha 255.

        :param color_data: Bytes-like object (bytes, bytearray, list of ints) containing pixel data.
        """
        if channels not in (3, 4):
            raise InvalidFormat(f"PixelGrid: Invalid channels {channels}, must be 3 or 4")

        if len(color_data) != width * height * channels:
            raise InvalidFormat("PixelGrid: The length of colorData is incorrect")

        if channels == 4:
            return cls(width, height, bytearray(color_data))

        rgb = np.frombuffer(bytes(color_data), dtype=np.uint8).reshape(-1, 3)
        rgba = np.full((rgb.shape[0], 4), 255, dtype=np.uint8)
        rgba[:, :3] = rgb
        return cls(width, height, bytearray(rgba.tobytes()))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelGrid":
        """Build a grid from an H x W x 3 or H x W x 4 uint8 array."""
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise InvalidFormat(
                f"PixelGrid: expected an HxWx3 or HxWx4 array, got shape {array.shape}"
            )
        if array.dtype != np.uint8:
            raise InvalidFormat(f"PixelGrid: expected a uint8 array, got {array.dtype}")

        height, width, channels = array.shape
        return cls.from_bytes(
            np.ascontiguousarray(array).tobytes(), width, height, channels
        )

    @classmethod
    def from_pil(cls, img: Image.Image) -> "PixelGrid":
        """Build a grid from a Pillow image, converting it to non-premultiplied RGBA."""
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        width, height = img.size
        return cls(width, height, bytearray(img.tobytes()))


def as_pixel_source(obj) -> PixelSource:
    """Adapt numpy arrays and Pillow images; pass pixel sources through untouched."""
    if isinstance(obj, np.ndarray):
        return PixelGrid.from_array(obj)
    if isinstance(obj, Image.Image):
        return PixelGrid.from_pil(obj)
    if isinstance(obj, PixelSource):
        return obj
    raise InvalidFormat(f"QOI.encode: Cannot read pixels from {type(obj).__name__}")
