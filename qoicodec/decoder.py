import logging

from .errors import InvalidTrailer, TrailingData, UnexpectedEndOfStream
from .header import QOIHeader, decode_header
from .image import PixelGrid
from .qoi import (
    QOI_END_MARKER,
    QOI_HEADER_SIZE,
    QOI_MASK_4,
    QOI_MASK_6,
    QOI_START_PIXEL,
    Op,
    PixelCache,
)

logger = logging.getLogger(__name__)


class QOIDecoder:
    """
    A class to decode QOI (Quite OK Image) files into RGBA pixel grids.
    """

    @staticmethod
    def decode_header(file_data) -> QOIHeader:
        """Validate and return the header without decoding any pixels."""
        return decode_header(file_data)

    @staticmethod
    def decode(file_data) -> PixelGrid:
        """
        Decode a QOI file given as a bytes-like object.

        :param file_data: Bytes containing exactly one QOI file.
        :return: PixelGrid with width * height RGBA pixels.
        """
        data = memoryview(file_data).cast("B")
        header = decode_header(data)
        width, height = header.width, header.height

        result = PixelGrid(width, height)
        pixels = result.data

        index = PixelCache()
        r, g, b, a = QOI_START_PIXEL

        data_len = len(data)
        read_pos = QOI_HEADER_SIZE
        run = 0

        def need(count, chunk_pos):
            if read_pos + count > data_len:
                raise UnexpectedEndOfStream(
                    f"QOI.decode: Chunk at byte {chunk_pos} needs {count} more "
                    f"bytes, {data_len - read_pos} left"
                )

        # --- Decoding Loop ---
        for write_pos in range(0, width * height * 4, 4):

            # Pixels covered by a run are emitted without reading
            if run > 0:
                run -= 1
                pixels[write_pos : write_pos + 4] = bytes((r, g, b, a))
                continue

            chunk_pos = read_pos
            need(1, chunk_pos)
            b1 = data[read_pos]
            read_pos += 1
            op = Op.from_byte(b1)

            if op is Op.RGB:
                need(3, chunk_pos)
                r, g, b = data[read_pos : read_pos + 3]
                read_pos += 3

            elif op is Op.RGBA:
                need(4, chunk_pos)
                r, g, b, a = data[read_pos : read_pos + 4]
                read_pos += 4

            elif op is Op.INDEX:
                r, g, b, a = index[b1 & QOI_MASK_6]

            elif op is Op.DIFF:
                r = (r + ((b1 >> 4) & 0x03) - 2) & 0xFF
                g = (g + ((b1 >> 2) & 0x03) - 2) & 0xFF
                b = (b + (b1 & 0x03) - 2) & 0xFF

            elif op is Op.LUMA:
                need(1, chunk_pos)
                b2 = data[read_pos]
                read_pos += 1

                vg = (b1 & QOI_MASK_6) - 32
                r = (r + vg - 8 + ((b2 >> 4) & QOI_MASK_4)) & 0xFF
                g = (g + vg) & 0xFF
                b = (b + vg - 8 + (b2 & QOI_MASK_4)) & 0xFF

            else:  # Op.RUN
                # Repeats after the pixel written below
                run = b1 & QOI_MASK_6

            px = (r, g, b, a)
            pixels[write_pos : write_pos + 4] = bytes(px)
            index.store(px)

        # --- End Marker ---
        trailer = bytes(data[read_pos : read_pos + len(QOI_END_MARKER)])
        if len(trailer) < len(QOI_END_MARKER):
            raise UnexpectedEndOfStream(
                f"QOI.decode: Missing end marker, {len(trailer)} of {len(QOI_END_MARKER)} bytes present"
            )
        if trailer != QOI_END_MARKER:
            raise InvalidTrailer(f"QOI.decode: Invalid end marker {trailer.hex()}")

        read_pos += len(QOI_END_MARKER)
        if read_pos < data_len:
            raise TrailingData(
                f"QOI.decode: {data_len - read_pos} unexpected bytes after the end marker"
            )

        logger.debug(
            "Decoded %dx%d image (channels=%d, colorspace=%d) from %d bytes",
            width,
            height,
            header.channels,
            header.colorspace,
            data_len,
        )
        return result

    @classmethod
    def read(cls, fp) -> PixelGrid:
        """Decode the remaining contents of a binary file object."""
        return cls.decode(fp.read())


def decode(file_data) -> PixelGrid:
    return QOIDecoder.decode(file_data)


def decode_header_only(file_data):
    """Return (width, height) for callers that do not need the pixels."""
    header = decode_header(file_data)
    return header.width, header.height

