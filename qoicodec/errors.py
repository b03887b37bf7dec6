"""Exceptions raised by the QOI codec."""


class QOIError(ValueError):
    """Base class for every QOI encode/decode failure."""


class InvalidGeometry(QOIError):
    """Width or height is zero, too large, or their product exceeds QOI_PIXELS_MAX."""


class InvalidFormat(QOIError):
    """Bad magic bytes, channel count or colorspace, or an unusable pixel source."""


class UnexpectedEndOfStream(QOIError, EOFError):
    """The data ended before the header, a chunk or the end marker was complete."""


class InvalidTrailer(QOIError):
    """The 8 bytes after the last pixel are not the QOI end marker."""


class TrailingData(QOIError):
    """There are bytes left over after the end marker."""


# Underlying read/write errors are propagated unchanged.
IoFailure = OSError
