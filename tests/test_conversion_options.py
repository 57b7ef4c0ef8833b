import pytest

from image_converter.models.conversion_options import ConversionOptions, TargetFormat
from image_converter.models.errors import UnsupportedFormatError
from image_converter.models.progress import RunStatus


@pytest.mark.parametrize("name, expected", [
    ("png", TargetFormat.PNG),
    ("PNG", TargetFormat.PNG),
    ("jpg", TargetFormat.JPG),
    (".jpg", TargetFormat.JPG),
    ("jpeg", TargetFormat.JPG),
])
def test_parse_target_format(name, expected):
    assert TargetFormat.parse(name) is expected


@pytest.mark.parametrize("name", ["bmp", "", None, "webp"])
def test_parse_unsupported_format(name):
    with pytest.raises(UnsupportedFormatError):
        TargetFormat.parse(name)


def test_jpg_never_keeps_alpha():
    assert ConversionOptions(TargetFormat.PNG, preserve_transparency=True).keeps_alpha
    assert not ConversionOptions(TargetFormat.PNG, preserve_transparency=False).keeps_alpha
    assert not ConversionOptions(TargetFormat.JPG, preserve_transparency=True).keeps_alpha


def test_options_are_immutable():
    options = ConversionOptions()
    with pytest.raises(AttributeError):
        options.pad_to_multiple_of_four = True


def test_status_values_and_messages():
    assert [s.value for s in RunStatus] == [
        "not-started", "started", "completed", "cancelled", "missing-input",
    ]
    assert RunStatus.COMPLETED.message == "Conversion completed."
    assert RunStatus.MISSING_INPUT.message == "Please select both input and output folders."
