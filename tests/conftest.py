import pytest

from image_converter.models.image import DecodedImage
from tests.helpers import make_pixels, write_image


@pytest.fixture
def image_factory():
    def _make(width: int, height: int, alpha: int = 128) -> DecodedImage:
        return DecodedImage(pixels=make_pixels(width, height, alpha))
    return _make


@pytest.fixture
def image_tree(tmp_path):
    """
    src/
        a.png
        sub/b.jpg
        sub/c.txt
    """
    root = tmp_path / "src"
    write_image(root / "a.png", 10, 10)
    write_image(root / "sub" / "b.jpg", 7, 5)
    (root / "sub" / "c.txt").write_text("not an image")
    return root
