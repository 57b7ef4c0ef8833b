from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List

from .image_task import ImageTask


class RunStatus(Enum):
    IDLE = "not-started"
    RUNNING = "started"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    MISSING_INPUT = "missing-input"

    @property
    def message(self) -> str:
        return _STATUS_MESSAGES[self]


_STATUS_MESSAGES = {
    RunStatus.IDLE: "",
    RunStatus.RUNNING: "Conversion started.",
    RunStatus.COMPLETED: "Conversion completed.",
    RunStatus.CANCELLED: "Conversion cancelled.",
    RunStatus.MISSING_INPUT: "Please select both input and output folders.",
}


@dataclass(frozen=True)
class ProgressEvent:
    """
    Emitted once per processed task.
    Exactly one of `output_path` / `error` is set.
    """
    index: int   # 1-based
    total: int
    task: ImageTask
    output_path: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ConversionResult:
    """
    Data object summarising a finished run.
    """
    status: RunStatus
    total: int = 0
    written: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)  # one log line per failed file

    @property
    def processed(self) -> int:
        return len(self.written) + len(self.errors)
