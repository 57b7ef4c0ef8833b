from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ImageTask:
    """
    One source file to convert.
    `relative_path` is mirrored under the output root.
    """
    source_path: Path
    relative_path: Path
