import numpy as np
import pytest

from image_converter.services.padding_service import PaddingService, round_up_to_multiple


@pytest.mark.parametrize("value, expected", [(1, 4), (4, 4), (5, 8), (10, 12), (12, 12), (13, 16)])
def test_round_up_to_multiple(value, expected):
    assert round_up_to_multiple(value, 4) == expected


def test_ten_by_ten_becomes_twelve_by_twelve(image_factory):
    image = image_factory(10, 10)

    padded = PaddingService().pad(image)

    assert (padded.width, padded.height) == (12, 12)
    np.testing.assert_array_equal(padded.pixels[1:11, 1:11], image.pixels)
    border = np.ones((12, 12), dtype=bool)
    border[1:11, 1:11] = False
    assert not padded.pixels[border].any()


def test_aligned_image_is_returned_unchanged(image_factory):
    image = image_factory(8, 4)

    assert PaddingService().pad(image) is image


@pytest.mark.parametrize("width, height", [(1, 1), (3, 7), (5, 6), (9, 2), (13, 13), (16, 15)])
def test_padded_dimensions_and_offset(image_factory, width, height):
    image = image_factory(width, height)

    padded = PaddingService().pad(image)

    assert padded.width % 4 == 0 and padded.height % 4 == 0
    assert 0 <= padded.width - width <= 3
    assert 0 <= padded.height - height <= 3
    off_x = (padded.width - width) // 2
    off_y = (padded.height - height) // 2
    np.testing.assert_array_equal(padded.pixels[off_y:off_y + height, off_x:off_x + width], image.pixels)


def test_odd_delta_puts_extra_pixel_right_and_bottom(image_factory):
    # 5x5 -> 8x8: delta 3, offset 1, so one column/row left/top and two right/bottom
    image = image_factory(5, 5, alpha=255)

    padded = PaddingService().pad(image)

    assert PaddingService().get_offsets(image) == (1, 1)
    assert not padded.pixels[:, 0].any()
    assert padded.pixels[:, 1, 3].any()
    assert not padded.pixels[:, 6:].any()
    assert not padded.pixels[6:, :].any()


def test_pad_does_not_mutate_input(image_factory):
    image = image_factory(3, 3)
    before = image.pixels.copy()

    PaddingService().pad(image)

    np.testing.assert_array_equal(image.pixels, before)


def test_padding_is_idempotent(image_factory):
    service = PaddingService()
    once = service.pad(image_factory(7, 9))

    assert service.pad(once) is once


def test_invalid_multiple():
    with pytest.raises(ValueError):
        PaddingService(multiple=0)
