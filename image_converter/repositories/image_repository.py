from __future__ import annotations
from pathlib import Path
from typing import Union, Iterable, List
import logging
import os
from dotenv import load_dotenv
from ..models.image_task import ImageTask
from ..models.errors import DirectoryUnreadableError, FileIOError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O for conversion tasks: directory walk, raw reads and writes.
    """
    def __init__(self, exts: Iterable[str] | None = None):
        raw = os.getenv("VALID_IMAGE_EXTENSIONS", ".png,.jpg,.jpeg")
        self.VALID_EXTS = self._normalise_exts(exts if exts is not None else raw.split(","))

    @staticmethod
    def _normalise_exts(exts: Iterable[str]) -> set:
        normalised = set()
        for ext in exts:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalised.add(ext if ext.startswith(".") else f".{ext}")
        return normalised

    def is_image_file(self, path: Union[str, Path]) -> bool:
        return Path(path).suffix.lower() in self.VALID_EXTS

    def collect(self, root: Union[str, Path]) -> List[ImageTask]:
        """
        Walk `root` depth-first and return one ImageTask per image file.

        Files of a directory come before the contents of its subdirectories.
        Entries are sorted by name at every level.

        Raises:
            DirectoryUnreadableError: if `root` or any subdirectory cannot be listed.
        """
        root = Path(root)
        if not root.is_dir():
            raise DirectoryUnreadableError(f"Not a readable directory: {root}")

        tasks: List[ImageTask] = []
        self._collect_into(root, root, tasks, {root.resolve()})
        logger.info(f"Collected {len(tasks)} image(s) under {root}")
        return tasks

    def _collect_into(self, root: Path, folder: Path, tasks: List[ImageTask], visited: set) -> None:
        try:
            entries = sorted(folder.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            raise DirectoryUnreadableError(f"Cannot list directory {folder}: {exc}") from exc

        subdirs = []
        for p in entries:
            if p.is_dir():
                # symlinks may point back up the tree; walk each real directory once
                real = p.resolve()
                if real in visited:
                    logger.debug(f"Skipping already visited directory: {p}")
                    continue
                visited.add(real)
                subdirs.append(p)
            elif p.is_file() and self.is_image_file(p):
                tasks.append(ImageTask(source_path=p, relative_path=p.relative_to(root)))
            else:
                logger.debug(f"Skipping due to extension: {p}")

        for sub in subdirs:
            self._collect_into(root, sub, tasks, visited)

    @staticmethod
    def read_bytes(path: Union[str, Path]) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as exc:
            raise FileIOError(f"Error reading file {path}: {exc}") from exc

    @staticmethod
    def write_bytes(path: Union[str, Path], data: bytes) -> Path:
        """
        Write `data` to `path`, creating missing parent directories first.
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise FileIOError(f"Error writing file {path}: {exc}") from exc
        return path
