from pathlib import Path
from typing import Union
import numpy as np
import cv2
from ..models.image import DecodedImage
from ..models.errors import ImageDecodeError


class ImageService:
    """Decoding helpers.  Everything comes out as RGBA uint8."""

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> DecodedImage:
        if path is None:
            return DecodedImage(pixels)
        return DecodedImage(pixels=pixels, path=Path(path))

    @staticmethod
    def _to_uint8(arr: np.ndarray) -> np.ndarray:
        # 16-bit PNGs keep the high byte
        if arr.dtype == np.uint16:
            return (arr >> 8).astype(np.uint8)
        if arr.dtype != np.uint8:
            raise ImageDecodeError(f"Unsupported sample type: {arr.dtype}")
        return arr

    @classmethod
    def to_rgba(cls, arr: np.ndarray) -> np.ndarray:
        """
        Normalise an OpenCV array (GRAY, GRAY+A, BGR or BGRA) to (H, W, 4) RGBA.
        """
        arr = cls._to_uint8(arr)
        if arr.ndim == 2:
            return cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)

        channels = arr.shape[2]
        if channels == 1:
            return cv2.cvtColor(arr[:, :, 0], cv2.COLOR_GRAY2RGBA)
        if channels == 2:
            # OpenCV has no GRAY+ALPHA conversion code
            rgba = cv2.cvtColor(np.ascontiguousarray(arr[:, :, 0]), cv2.COLOR_GRAY2RGBA)
            rgba[:, :, 3] = arr[:, :, 1]
            return rgba
        if channels == 3:
            return cv2.cvtColor(arr, cv2.COLOR_BGR2RGBA)
        if channels == 4:
            return cv2.cvtColor(arr, cv2.COLOR_BGRA2RGBA)
        raise ImageDecodeError(f"Unsupported channel count: {channels}")

    def decode(self, data: bytes, path: Union[str, Path] = None) -> DecodedImage:
        """
        Decode PNG/JPG bytes into a DecodedImage.

        Args:
            data: Encoded file contents.
            path: Source path, kept for bookkeeping and error messages.

        Raises:
            ImageDecodeError: if the bytes are not a decodable image.
        """
        if not data:
            raise ImageDecodeError(f"Empty image file: {path}")

        buf = np.frombuffer(data, dtype=np.uint8)
        arr = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise ImageDecodeError(f"Image not decodable: {path}")

        return self.create_image(np.ascontiguousarray(self.to_rgba(arr)), path)
