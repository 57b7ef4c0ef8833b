#!/usr/bin/env python3
"""
Image Converter command line
Converts a folder of PNG/JPG images into a mirrored folder of PNG or JPG files.
"""

import argparse
import logging
import os
import signal
import sys
import threading
from pathlib import Path

from dotenv import load_dotenv
from tqdm import tqdm

from ..models.conversion_options import ConversionOptions, TargetFormat
from ..models.errors import DirectoryUnreadableError, UnsupportedFormatError
from ..models.progress import RunStatus
from ..pipeline.conversion_pipeline import CancelToken, ConversionPipeline, convert_directory

# Load environment variables first
load_dotenv()

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNREADABLE = 1
EXIT_USAGE = 2
EXIT_CANCELLED = 130


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


# ---------------------------------------------------------------------------
# CLI handling
# ---------------------------------------------------------------------------
def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="image-converter",
        description="Batch-convert a folder tree of PNG/JPG images to PNG or JPG.",
    )
    parser.add_argument("input", nargs="?", default=os.getenv("CONVERTER_INPUT_DIR"),
                        help="Image folder (default: $CONVERTER_INPUT_DIR)")
    parser.add_argument("output", nargs="?", default=os.getenv("CONVERTER_OUTPUT_DIR"),
                        help="Output folder (default: $CONVERTER_OUTPUT_DIR)")
    parser.add_argument("--format", dest="target_format", default=os.getenv("CONVERTER_FORMAT", "png"),
                        help="Target format: png or jpg (default: png)")
    parser.add_argument("--no-transparency", action="store_true",
                        help="PNG only: force every pixel fully opaque")
    parser.add_argument("--multiple-of-four", action="store_true",
                        help="Pad width and height up to a multiple of four, content centred")
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"),
                        help="Logging level (default: INFO)")
    parser.add_argument("--no-progress", action="store_true",
                        help="Disable the progress bar")

    return parser.parse_args(argv)


def build_options(args) -> ConversionOptions:
    return ConversionOptions(
        target_format=TargetFormat.parse(args.target_format),
        preserve_transparency=not args.no_transparency,
        pad_to_multiple_of_four=args.multiple_of_four,
    )


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        options = build_options(args)
    except UnsupportedFormatError as err:
        print(str(err), file=sys.stderr)
        return EXIT_USAGE

    token = CancelToken()

    def _request_cancel(signum, frame):
        # second Ctrl+C falls back to the default handler
        logger.warning("Cancel requested; finishing the current file...")
        token.cancel()
        signal.signal(signal.SIGINT, signal.default_int_handler)

    # signal handlers can only be installed from the main thread
    in_main_thread = threading.current_thread() is threading.main_thread()
    previous_handler = signal.signal(signal.SIGINT, _request_cancel) if in_main_thread else None

    pipeline = ConversionPipeline(
        on_file_written=lambda path: logger.debug(f"Written: {path}")
    )

    bar = None

    def _on_progress(event):
        nonlocal bar
        if args.no_progress:
            return
        if bar is None:
            bar = tqdm(total=event.total, unit="img", desc="Converting")
        bar.update(1)

    try:
        result = convert_directory(
            Path(args.input) if args.input else None,
            Path(args.output) if args.output else None,
            options,
            pipeline=pipeline,
            cancel_token=token,
            on_progress=_on_progress,
        )
    except DirectoryUnreadableError as err:
        logger.error(str(err))
        return EXIT_UNREADABLE
    finally:
        if bar is not None:
            bar.close()
        if in_main_thread:
            signal.signal(signal.SIGINT, previous_handler)

    print(result.status.message)
    if result.errors:
        print(f"{len(result.errors)} file(s) failed, see log above.")

    if result.status is RunStatus.MISSING_INPUT:
        return EXIT_USAGE
    if result.status is RunStatus.CANCELLED:
        return EXIT_CANCELLED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
