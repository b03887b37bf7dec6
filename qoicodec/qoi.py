import enum

# QOI Constants
QOI_MAGIC = b"qoif"
QOI_HEADER_SIZE = 14
QOI_PIXELS_MAX = 400_000_000  # worst case is ~5 bytes per pixel
QOI_END_MARKER = b"\x00\x00\x00\x00\x00\x00\x00\x01"
QOI_MAX_RUN = 62
QOI_CACHE_SIZE = 64

QOI_CHANNELS = 4
QOI_SRGB = 0
QOI_LINEAR = 1

QOI_MASK_2 = 0xC0
QOI_MASK_4 = 0x0F
QOI_MASK_6 = 0x3F

# Seed values for every encode/decode pass
QOI_START_PIXEL = (0, 0, 0, 255)
QOI_EMPTY_PIXEL = (0, 0, 0, 0)


class Op(enum.IntEnum):
    """
    Chunk opcodes. INDEX, DIFF, LUMA and RUN are 2-bit tags in the top bits of
    the first byte; RGB and RGBA are full 8-bit literals.
    """

    INDEX = 0x00  # 00xxxxxx
    DIFF = 0x40  # 01xxxxxx
    LUMA = 0x80  # 10xxxxxx
    RUN = 0xC0  # 11xxxxxx
    RGB = 0xFE  # 11111110
    RGBA = 0xFF  # 11111111

    @classmethod
    def from_byte(cls, b1: int) -> "Op":
        """Classify a control byte. The two literals win over the RUN tag."""
        if b1 >= cls.RGB:
            return cls(b1)
        return cls(b1 & QOI_MASK_2)


def hash_pixel(pixel) -> int:
    """
    Index position of a pixel in the color cache:
    (r * 3 + g * 5 + b * 7 + a * 11) % 64

    64 divides 256, so wrapping each term to 8 bits first gives the same slot.
    """
    r, g, b, a = pixel
    return (r * 3 + g * 5 + b * 7 + a * 11) % QOI_CACHE_SIZE


class PixelCache:
    """
    The 64-slot color cache. Encoder and decoder each own one per call and
    update it with the same pixels at the same points in the stream.
    """

    __slots__ = ("_slots",)

    def __init__(self):
        self._slots = [QOI_EMPTY_PIXEL] * QOI_CACHE_SIZE

    def __getitem__(self, index: int):
        return self._slots[index]

    def __len__(self):
        return QOI_CACHE_SIZE

    def lookup(self, pixel):
        """Return (slot, hit) for a pixel."""
        index_pos = hash_pixel(pixel)
        return index_pos, self._slots[index_pos] == pixel

    def store(self, pixel) -> int:
        index_pos = hash_pixel(pixel)
        self._slots[index_pos] = pixel
        return index_pos


def to_signed(value: int) -> int:
    """Byte-wrap a channel difference and shift it into -128..127."""
    value &= 0xFF
    if value > 127:
        value -= 256
    return value
