from __future__ import annotations

from io import BytesIO
import os

import numpy as np
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..models.image import DecodedImage
from ..models.conversion_options import TargetFormat
from ..models.errors import UnsupportedFormatError

# Load environment variables
load_dotenv()


class EncodingService:
    """
    Serialises RGBA pixel buffers to PNG or JPG bytes.
    *   No file I/O here; returns bytes only.
    *   Output is deterministic for fixed settings (no timestamps, no metadata).
    """

    def __init__(self,
                 jpeg_quality: int = None,
                 png_compress_level: int = None):
        """
        Args:
            jpeg_quality: JPEG quality 1-95 (defaults to env var JPEG_QUALITY, then 75)
            png_compress_level: zlib level 0-9 (defaults to env var PNG_COMPRESS_LEVEL, then 6)
        """
        self.jpeg_quality = int(jpeg_quality if jpeg_quality is not None
                                else os.getenv("JPEG_QUALITY", "75"))
        self.png_compress_level = int(png_compress_level if png_compress_level is not None
                                      else os.getenv("PNG_COMPRESS_LEVEL", "6"))

    @staticmethod
    def _rgba(image: DecodedImage) -> np.ndarray:
        pixels = image.pixels
        if pixels.ndim != 3 or pixels.shape[2] != 4 or pixels.dtype != np.uint8:
            raise ValueError(f"Expected (H, W, 4) uint8 RGBA pixels, got {pixels.shape} {pixels.dtype}")
        return np.ascontiguousarray(pixels)

    def encode_png(self, image: DecodedImage, preserve_transparency: bool = True) -> bytes:
        rgba = self._rgba(image)
        if preserve_transparency:
            pil_img = PILImage.fromarray(rgba)
        else:
            # alpha forced opaque: the channel is simply not stored
            pil_img = PILImage.fromarray(np.ascontiguousarray(rgba[:, :, :3]))

        out = BytesIO()
        pil_img.save(out, format="PNG", optimize=False, compress_level=self.png_compress_level)
        return out.getvalue()

    def encode_jpg(self, image: DecodedImage) -> bytes:
        # straight channel removal, no compositing against a background
        rgb = np.ascontiguousarray(self._rgba(image)[:, :, :3])
        pil_img = PILImage.fromarray(rgb)

        out = BytesIO()
        pil_img.save(out, format="JPEG", quality=self.jpeg_quality)
        return out.getvalue()

    def encode(self,
               image: DecodedImage,
               target_format: TargetFormat,
               preserve_transparency: bool = True) -> bytes:
        """
        Encode `image` in `target_format`.

        `preserve_transparency` only matters for PNG; JPG never carries alpha.

        Raises:
            UnsupportedFormatError: for anything outside TargetFormat.
        """
        if target_format is TargetFormat.PNG:
            return self.encode_png(image, preserve_transparency)
        if target_format is TargetFormat.JPG:
            return self.encode_jpg(image)
        raise UnsupportedFormatError(f"Unsupported target format: {target_format!r}")
