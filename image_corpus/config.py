"""Command-line configuration for the corpus builder."""
from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from .codec import SUPPORTED_OUTPUT_TYPES
from .geometry import Dimensions

DEFAULT_ROWS = 480
DEFAULT_COLUMNS = 640
OUTPUT_SUFFIX = ".corpus"
PROGRAM_NAME = "image-corpus"
PROGRAM_VERSION = "1.0"


class UsageError(Exception):
    """Raised when the command line does not describe a runnable batch.

    ``exit_code`` is ``0`` when nothing is wrong beyond there being no work to
    do (help requested, no source directory given) and ``1`` for invalid input.
    """

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(frozen=True)
class CorpusConfig:
    """Validated settings for one batch run."""

    source_dir: Path
    output_dir: Path
    target: Dimensions = Dimensions(DEFAULT_ROWS, DEFAULT_COLUMNS)
    preserve_aspect: bool = False
    greyscale: bool = False
    output_type: str = ""
    verbose: bool = False

    @property
    def report_path(self) -> Path:
        return self.output_dir / "metadata.txt"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description=(
            f"ImageBrowser v{PROGRAM_VERSION}: normalize the size of every image in a "
            "directory tree and collect the metadata stored in matching .xml files."
        ),
        add_help=False,
    )
    parser.add_argument(
        "-h",
        "--help",
        "--usage",
        "-?",
        action="help",
        default=argparse.SUPPRESS,
        help="Show this message and exit.",
    )
    parser.add_argument(
        "source_dir",
        nargs="?",
        type=Path,
        help="Directory of images to normalize.",
    )
    parser.add_argument(
        "output_dir",
        nargs="?",
        type=Path,
        help=f"Where the mirrored tree is written (default: <source_dir>{OUTPUT_SUFFIX}).",
    )
    parser.add_argument(
        "--rows",
        type=int,
        default=DEFAULT_ROWS,
        help=f"Number of rows in the output images (default: {DEFAULT_ROWS}).",
    )
    parser.add_argument(
        "--columns",
        type=int,
        default=DEFAULT_COLUMNS,
        help=f"Number of columns in the output images (default: {DEFAULT_COLUMNS}).",
    )
    parser.add_argument(
        "-a",
        "--preserve-aspect",
        action="store_true",
        help="Preserve the aspect ratio, fitting each image inside rows x columns.",
    )
    parser.add_argument(
        "-g",
        "--greyscale",
        action="store_true",
        help="Decode images as greyscale.",
    )
    parser.add_argument(
        "--type",
        dest="output_type",
        default="",
        metavar="{" + ",".join(SUPPORTED_OUTPUT_TYPES) + "}",
        help="Output image format (default: keep each source file's extension).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def default_output_dir(source_dir: Path) -> Path:
    """Return ``<source_dir>.corpus`` next to ``source_dir``.

    Raises :class:`UsageError` for paths without a name, such as ``/``.
    """
    source_dir = Path(source_dir)
    if not source_dir.name:
        source_dir = source_dir.resolve()
    if not source_dir.name:
        raise UsageError(
            f"Cannot derive an output directory from {source_dir}; pass one explicitly"
        )
    return source_dir.with_name(f"{source_dir.name}{OUTPUT_SUFFIX}")


def resolve_config(args: argparse.Namespace) -> CorpusConfig:
    """Validate parsed arguments and turn them into a :class:`CorpusConfig`.

    Raises
    ------
    UsageError
        When no source directory was given (exit code 0) or when an argument
        value is unusable (exit code 1).
    """

    if args.source_dir is None:
        raise UsageError("No source directory given.", exit_code=0)

    output_type = args.output_type or ""
    if output_type and output_type not in SUPPORTED_OUTPUT_TYPES:
        raise UsageError(
            f"Invalid type specified: {args.output_type!r} "
            f"(choose from {', '.join(SUPPORTED_OUTPUT_TYPES)})"
        )

    if args.rows <= 0 or args.columns <= 0:
        raise UsageError(
            f"Rows and columns must be positive, got {args.rows}x{args.columns}"
        )

    source_dir = Path(args.source_dir)
    if not source_dir.is_dir():
        raise UsageError(f"Source directory not found: {source_dir}")

    output_dir = Path(args.output_dir) if args.output_dir else default_output_dir(source_dir)
    if output_dir.resolve() == source_dir.resolve():
        raise UsageError("The output directory must differ from the source directory.")
    if output_dir.exists() and not output_dir.is_dir():
        raise UsageError(f"Output path {output_dir} exists and is not a directory.")

    return CorpusConfig(
        source_dir=source_dir,
        output_dir=output_dir,
        target=Dimensions(rows=args.rows, columns=args.columns),
        preserve_aspect=bool(args.preserve_aspect),
        greyscale=bool(args.greyscale),
        output_type=output_type,
        verbose=bool(getattr(args, "verbose", False)),
    )


__all__ = [
    "CorpusConfig",
    "DEFAULT_COLUMNS",
    "DEFAULT_ROWS",
    "UsageError",
    "build_parser",
    "default_output_dir",
    "resolve_config",
]
