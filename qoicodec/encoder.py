import logging

from .header import encode_header, validate_geometry
from .image import PixelGrid, as_pixel_source
from .qoi import QOI_END_MARKER, QOI_MAX_RUN, QOI_START_PIXEL, Op, PixelCache, to_signed

logger = logging.getLogger(__name__)


def _iter_pixels(source):
    """Yield the pixels of a source in row-major order (x fastest)."""
    if isinstance(source, PixelGrid):
        data = source.data
        for i in range(0, len(data), 4):
            yield (data[i], data[i + 1], data[i + 2], data[i + 3])
        return

    # Channels may be numpy scalars; plain ints keep the delta math unbounded
    for y in range(source.height):
        for x in range(source.width):
            r, g, b, a = source.pixel_at(x, y)
            yield (int(r), int(g), int(b), int(a))


class QOIEncoder:
    @staticmethod
    def encode(source) -> bytes:
        """
        Encode an image in QOI format.

        :param source: A PixelSource (width, height, pixel_at(x, y) -> RGBA),
                       an HxWx3/HxWx4 uint8 numpy array or a Pillow image.
        :return: bytes object containing the QOI file content.
        """
        source = as_pixel_source(source)
        width, height = source.width, source.height

        # Nothing is produced for an image that cannot be stored
        validate_geometry(width, height)

        result = bytearray(encode_header(width, height))

        # --- Encoding State ---
        px_prev = QOI_START_PIXEL
        run = 0
        index = PixelCache()

        last_pixel = width * height - 1

        # --- Pixel Loop ---
        for px_pos, px in enumerate(_iter_pixels(source)):
            if px == px_prev:
                run += 1
                # Max run length or the very last pixel
                if run == QOI_MAX_RUN or px_pos == last_pixel:
                    result.append(Op.RUN | (run - 1))
                    run = 0
                continue

            # A run ended before this pixel
            if run > 0:
                result.append(Op.RUN | (run - 1))
                run = 0

            index_pos, hit = index.lookup(px)
            if hit:
                result.append(Op.INDEX | index_pos)
                px_prev = px
                continue

            index.store(px)

            r, g, b, a = px
            if a != px_prev[3]:
                result.append(Op.RGBA)
                result.extend(px)
                px_prev = px
                continue

            vr = to_signed(r - px_prev[0])
            vg = to_signed(g - px_prev[1])
            vb = to_signed(b - px_prev[2])

            vg_r = vr - vg
            vg_b = vb - vg

            if -2 <= vr <= 1 and -2 <= vg <= 1 and -2 <= vb <= 1:
                result.append(Op.DIFF | ((vr + 2) << 4) | ((vg + 2) << 2) | (vb + 2))

            elif -32 <= vg <= 31 and -8 <= vg_r <= 7 and -8 <= vg_b <= 7:
                result.append(Op.LUMA | (vg + 32))
                result.append(((vg_r + 8) << 4) | (vg_b + 8))

            else:
                result.append(Op.RGB)
                result.extend((r, g, b))

            px_prev = px

        if run > 0:
            result.append(Op.RUN | (run - 1))

        # --- End Marker ---
        result.extend(QOI_END_MARKER)

        logger.debug("Encoded %dx%d image into %d bytes", width, height, len(result))
        return bytes(result)

    @classmethod
    def encode_raw(cls, color_data, description: dict) -> bytes:
        """
        Encode interleaved pixel bytes.

        :param color_data: Bytes-like object (bytes, bytearray, list of ints) containing pixel data.
        :param description: Dictionary containing 'width', 'height' and 'channels' (3 or 4).
        """
        width = description.get("width")
        height = description.get("height")
        channels = description.get("channels", 4)

        validate_geometry(width, height)

        return cls.encode(PixelGrid.from_bytes(color_data, width, height, channels))

    @classmethod
    def write(cls, fp, source) -> int:
        """
        Encode source and write it to a binary file object in one call.

        Nothing is written unless encoding succeeds. Write errors propagate.
        """
        encoded = cls.encode(source)
        fp.write(encoded)
        return len(encoded)


def encode(source) -> bytes:
    return QOIEncoder.encode(source)
