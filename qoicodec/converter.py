"""File-level helpers: the only part of qoicodec that touches the filesystem."""
import logging

from .decoder import QOIDecoder
from .encoder import QOIEncoder
from .header import QOIHeader, decode_header
from .image import PixelGrid
from .qoi import QOI_HEADER_SIZE
from .utils import load_image, save_image

logger = logging.getLogger(__name__)


def write_qoi(qoi_path, source) -> int:
    """Encode source and write it to qoi_path. Returns the number of bytes written."""
    # Encode before opening so a failed encode leaves no file behind
    encoded = QOIEncoder.encode(source)
    with open(qoi_path, "wb") as f:
        f.write(encoded)
    return len(encoded)


def read_qoi(qoi_path) -> PixelGrid:
    with open(qoi_path, "rb") as f:
        return QOIDecoder.read(f)


def read_qoi_header(qoi_path) -> QOIHeader:
    with open(qoi_path, "rb") as f:
        return decode_header(f.read(QOI_HEADER_SIZE))


def png_to_qoi(png_path, qoi_path) -> int:
    pixel_data, desc = load_image(png_path)
    size = write_qoi(qoi_path, PixelGrid.from_array(pixel_data))
    logger.info(
        "Converted %s (%dx%d) to %s, %d bytes", png_path, desc["width"], desc["height"], qoi_path, size
    )
    return size


def qoi_to_png(qoi_path, png_path, channels: int = 4) -> PixelGrid:
    decoded = read_qoi(qoi_path)
    save_image(decoded, png_path, channels=channels)
    logger.info("Converted %s (%dx%d) to %s", qoi_path, decoded.width, decoded.height, png_path)
    return decoded
