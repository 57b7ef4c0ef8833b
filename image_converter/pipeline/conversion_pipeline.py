"""
Conversion Pipeline
Reads every collected image, pads it if requested, re-encodes it and writes
it under the output root, mirroring the source tree.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Iterator, List, Union

from ..models.conversion_options import ConversionOptions
from ..models.errors import FileIOError, PipelineBusyError
from ..models.image_task import ImageTask
from ..models.progress import ConversionResult, ProgressEvent, RunStatus
from ..repositories.image_repository import ImageRepository
from ..services.encoding_service import EncodingService
from ..services.image_service import ImageService
from ..services.padding_service import PaddingService

logger = logging.getLogger(__name__)


def _noop(path: Path) -> None:
    pass


class CancelToken:
    """
    Cooperative cancellation flag.
    Safe to set from a signal handler or another thread.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class RunSteps:
    """
    Iterator over the ProgressEvents of one run.
    Closing it ends the run, even before the first step.
    """

    def __init__(self, pipeline: "ConversionPipeline", steps: Iterator[ProgressEvent]):
        self._pipeline = pipeline
        self._steps = steps
        self._finished = False

    def __iter__(self):
        return self

    def __next__(self) -> ProgressEvent:
        try:
            return next(self._steps)
        except BaseException:
            self._finished = True
            raise

    def close(self) -> None:
        self._steps.close()
        if self._finished:
            return
        self._finished = True
        # an unstarted generator skips its own cleanup
        if self._pipeline.status is RunStatus.RUNNING:
            self._pipeline.status = RunStatus.IDLE


class ConversionPipeline:
    """
    Runs one conversion at a time.

    State machine: IDLE -> RUNNING -> (COMPLETED | CANCELLED).
    Tasks are processed sequentially; cancellation is checked before each task,
    so a task that has started always finishes.
    """

    def __init__(self,
                 *,
                 image_repository: ImageRepository = None,
                 image_service: ImageService = None,
                 padding_service: PaddingService = None,
                 encoding_service: EncodingService = None,
                 on_file_written: Callable[[Path], None] = None):
        self.image_repository = image_repository or ImageRepository()
        self.image_service = image_service or ImageService()
        self.padding_service = padding_service or PaddingService()
        self.encoding_service = encoding_service or EncodingService()
        self.on_file_written = on_file_written or _noop
        self.status = RunStatus.IDLE

    @property
    def is_running(self) -> bool:
        return self.status is RunStatus.RUNNING

    @staticmethod
    def output_path_for(task: ImageTask, output_root: Union[str, Path], options: ConversionOptions) -> Path:
        relative = Path(task.relative_path)
        file_name = f"{relative.stem}.{options.target_format.extension}"
        return Path(output_root) / relative.parent / file_name

    def convert_task(self, task: ImageTask, options: ConversionOptions, output_root: Union[str, Path]) -> Path:
        """
        Convert a single task and return the written path.

        Raises:
            FileIOError: if the source cannot be read or the output cannot be written.
        """
        data = self.image_repository.read_bytes(task.source_path)
        image = self.image_service.decode(data, task.source_path)

        if options.pad_to_multiple_of_four:
            image = self.padding_service.pad(image)

        encoded = self.encoding_service.encode(image, options.target_format, options.preserve_transparency)

        out_path = self.output_path_for(task, output_root, options)
        self.image_repository.write_bytes(out_path, encoded)
        logger.debug(f"Wrote {out_path} ({image.width}x{image.height})")
        return out_path

    def iter_run(self,
                 tasks: List[ImageTask],
                 options: ConversionOptions,
                 output_root: Union[str, Path],
                 cancel_token: CancelToken = None) -> RunSteps:
        """
        Start a run and return an iterator that converts one task per step.

        The pipeline is RUNNING as soon as this returns. Control goes back to
        the caller after every task, which lets an interactive host stay
        responsive and cancel between files.

        Raises:
            PipelineBusyError: if a run is already in flight.
        """
        if self.is_running:
            raise PipelineBusyError("A conversion is already running")

        self.status = RunStatus.RUNNING
        logger.info(f"{self.status.message} {len(tasks)} file(s) -> {output_root} "
                    f"({options.target_format.extension}, "
                    f"alpha={'keep' if options.keeps_alpha else 'drop'}, "
                    f"pad={options.pad_to_multiple_of_four})")
        return RunSteps(self, self._steps(list(tasks), options, output_root, cancel_token or CancelToken()))

    def _steps(self, tasks, options, output_root, cancel_token) -> Iterator[ProgressEvent]:
        total = len(tasks)
        try:
            for index, task in enumerate(tasks, 1):
                if cancel_token.cancelled:
                    self.status = RunStatus.CANCELLED
                    logger.warning(f"Conversion cancelled after {index - 1}/{total} file(s)")
                    return

                try:
                    out_path = self.convert_task(task, options, output_root)
                except FileIOError as err:
                    logger.error(f"Error reading or writing file: {err}")
                    yield ProgressEvent(index=index, total=total, task=task, error=str(err))
                    continue

                self.on_file_written(out_path)
                yield ProgressEvent(index=index, total=total, task=task, output_path=out_path)

            # a cancel arriving during the last task has nothing left to skip
            self.status = RunStatus.COMPLETED
            logger.info(f"Conversion completed: {total} file(s)")
        finally:
            if self.status is RunStatus.RUNNING:
                # aborted by an exception or closed early by the caller
                self.status = RunStatus.IDLE

    def run(self,
            tasks: List[ImageTask],
            options: ConversionOptions,
            output_root: Union[str, Path],
            cancel_token: CancelToken = None,
            on_progress: Callable[[ProgressEvent], None] = None) -> ConversionResult:
        """
        Process every task in a plain loop and summarise the outcome.
        """
        result = ConversionResult(status=RunStatus.RUNNING, total=len(tasks))
        for event in self.iter_run(tasks, options, output_root, cancel_token):
            if event.ok:
                result.written.append(event.output_path)
            else:
                result.errors.append(event.error)
            if on_progress is not None:
                on_progress(event)

        result.status = self.status
        return result


def convert_directory(
    input_root: Union[str, Path, None],
    output_root: Union[str, Path, None],
    options: ConversionOptions,
    *,
    pipeline: ConversionPipeline = None,
    cancel_token: CancelToken = None,
    on_progress: Callable[[ProgressEvent], None] = None,
) -> ConversionResult:
    """
    Collect every image under `input_root` and convert it into `output_root`.

    Args:
        input_root: Folder to scan recursively.
        output_root: Folder receiving the mirrored tree.
        options: Target format and flags for the run.
        pipeline: Pipeline to use (a fresh one by default).
        cancel_token: Set it to stop between files.
        on_progress: Called with each ProgressEvent.

    Returns:
        ConversionResult; status MISSING_INPUT when either folder is not given.

    Raises:
        DirectoryUnreadableError: if the input tree cannot be listed.
    """
    if not input_root or not output_root:
        logger.warning(RunStatus.MISSING_INPUT.message)
        return ConversionResult(status=RunStatus.MISSING_INPUT)

    pipeline = pipeline or ConversionPipeline()
    tasks = pipeline.image_repository.collect(input_root)
    return pipeline.run(tasks, options, output_root, cancel_token=cancel_token, on_progress=on_progress)
