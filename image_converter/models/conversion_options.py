from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .errors import UnsupportedFormatError


class TargetFormat(Enum):
    PNG = "png"
    JPG = "jpg"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "TargetFormat":
        """
        Case-insensitive lookup; "jpeg" is accepted as an alias of "jpg".
        """
        key = (name or "").strip().lower().lstrip(".")
        if key == "jpeg":
            key = "jpg"
        try:
            return cls(key)
        except ValueError as exc:
            raise UnsupportedFormatError(f"Unsupported target format: {name!r}") from exc


@dataclass(frozen=True)
class ConversionOptions:
    """
    Value-object with the settings of one conversion run.
    """
    target_format: TargetFormat = TargetFormat.PNG
    preserve_transparency: bool = True   # PNG only
    pad_to_multiple_of_four: bool = False

    @property
    def keeps_alpha(self) -> bool:
        return self.target_format is TargetFormat.PNG and self.preserve_transparency
