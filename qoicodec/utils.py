import logging

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

RAW_EXTENSIONS = ("dng", "cr2", "nef", "arw", "raw")


def load_image(filepath: str) -> tuple[np.ndarray, dict]:
    """Load an image and return pixel data as numpy array + description."""

    ext = str(filepath).lower().split(".")[-1]

    if ext in RAW_EXTENSIONS:
        # RAW formats - requires rawpy (the "raw" extra)
        import rawpy

        with rawpy.imread(str(filepath)) as raw:
            rgb = raw.postprocess()
        img = Image.fromarray(rgb)
    else:
        # Standard formats (PNG, JPEG, etc.)
        img = Image.open(filepath)

    # Convert to RGB or RGBA
    if img.mode == "RGBA":
        channels = 4
    elif "A" in img.getbands() or "transparency" in img.info:
        img = img.convert("RGBA")
        channels = 4
    else:
        img = img.convert("RGB")
        channels = 3

    logger.debug("Loaded %s: %dx%d, %d channels", filepath, img.size[0], img.size[1], channels)

    return np.array(img), {
        "width": img.size[0],
        "height": img.size[1],
        "channels": channels,
        "colorspace": 0,
    }


def save_image(grid, filepath: str, channels: int = 4) -> None:
    """Save a decoded PixelGrid with Pillow; the format follows the file extension."""
    if channels == 4:
        img = grid.to_pil()
    else:
        img = Image.frombytes("RGB", (grid.width, grid.height), grid.to_bytes(3))
    img.save(filepath)
