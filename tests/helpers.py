from pathlib import Path

import numpy as np
from PIL import Image as PILImage


def make_pixels(width: int, height: int, alpha: int = 128) -> np.ndarray:
    """Distinct, non-zero RGBA pixels so offsets are easy to check."""
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :, 0] = (xs * 7 + 1) % 256
    pixels[:, :, 1] = (ys * 11 + 1) % 256
    pixels[:, :, 2] = ((xs + ys) * 3 + 1) % 256
    pixels[:, :, 3] = alpha
    return pixels


def write_image(path: Path, width: int = 6, height: int = 5, mode: str = "RGBA") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    img = PILImage.fromarray(make_pixels(width, height)).convert(mode)
    if path.suffix.lower() in (".jpg", ".jpeg"):
        img.convert("RGB").save(path, format="JPEG")
    else:
        img.save(path, format="PNG")
    return path
