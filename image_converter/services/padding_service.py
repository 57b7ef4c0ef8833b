import numpy as np
from ..models.image import DecodedImage


def round_up_to_multiple(value: int, multiple: int) -> int:
    return -(-value // multiple) * multiple


class PaddingService:
    """
    Grows the canvas to the next multiple of `multiple` pixels on each axis.
    Pixels are never scaled; the new border is transparent black.
    """

    def __init__(self, multiple: int = 4):
        if multiple < 1:
            raise ValueError(f"multiple must be positive, got {multiple}")
        self.multiple = multiple

    def get_padded_size(self, image: DecodedImage):
        return (round_up_to_multiple(image.width, self.multiple),
                round_up_to_multiple(image.height, self.multiple))

    def get_offsets(self, image: DecodedImage):
        new_width, new_height = self.get_padded_size(image)
        # floor division: an odd leftover pixel goes right / bottom
        return (new_width - image.width) // 2, (new_height - image.height) // 2

    def pad(self, image: DecodedImage) -> DecodedImage:
        """
        Return a padded copy of `image`, or `image` itself when already aligned.
        """
        new_width, new_height = self.get_padded_size(image)
        if new_width == image.width and new_height == image.height:
            return image

        offset_x, offset_y = self.get_offsets(image)
        channels = image.pixels.shape[2]
        padded = np.zeros((new_height, new_width, channels), dtype=image.pixels.dtype)
        padded[offset_y:offset_y + image.height, offset_x:offset_x + image.width] = image.pixels

        return DecodedImage(pixels=padded, path=image.path)
