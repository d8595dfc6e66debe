"""Resize every discovered image and collect its metadata into one report."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, TextIO, Union

from .codec import (
    AffineTransformer,
    DecodeError,
    EncodeError,
    ImageCodec,
    OpenCVAffineTransformer,
    OpenCVImageCodec,
    TransformError,
)
from .config import CorpusConfig
from .geometry import Dimensions, InvalidImageError, compute_scale_plan
from .metadata import Metadata, MetadataReader, XmlMetadataReader, sidecar_path
from .walker import FileEntry, mirror_path

log = logging.getLogger(__name__)

FALLBACK_OUTPUT_TYPE = "png"


class FatalProcessingError(Exception):
    """An image could not be transformed or written; the batch stops."""

    def __init__(self, path: Path, cause: Exception) -> None:
        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause


@dataclass(frozen=True)
class ImageRecord:
    index: int
    source_path: Path
    output_path: Path
    dimensions: Dimensions
    metadata: Metadata


@dataclass(frozen=True)
class Processed:
    record: ImageRecord


@dataclass(frozen=True)
class Skipped:
    path: Path
    reason: str


FileOutcome = Union[Processed, Skipped]


@dataclass
class BatchSummary:
    """Counts reported once a batch finishes."""

    processed: int = 0
    skipped: int = 0
    report_path: Optional[Path] = None


def effective_output_type(source_path: Path, output_type: str = "") -> str:
    """Return the configured format, or the source extension when none is set."""
    if output_type:
        return output_type
    return source_path.suffix.lstrip(".") or FALLBACK_OUTPUT_TYPE


def format_report_line(record: ImageRecord) -> str:
    """Render ``record`` as one line of ``metadata.txt``.

    Values are written verbatim; spaces or labels inside a value are not escaped.
    """

    parts = [f"image: {record.index} {record.output_path}"]
    parts.extend(f"{key}: {value}" for key, value in record.metadata.items())
    return " ".join(parts) + "\n"


def iter_outcomes(
    files: Iterable[FileEntry],
    config: CorpusConfig,
    *,
    codec: ImageCodec,
    transformer: AffineTransformer,
    metadata_reader: MetadataReader,
) -> Iterator[FileOutcome]:
    """Transform ``files`` one at a time, yielding a :class:`FileOutcome` each.

    Files that cannot be decoded are yielded as :class:`Skipped`. Indices are
    assigned only to processed images, in order.

    Raises
    ------
    FatalProcessingError
        As soon as an image fails to transform or to be written.
    """

    index = 0
    for entry in files:
        source_path = Path(entry.path)
        try:
            image = codec.decode(source_path, greyscale=config.greyscale)
            plan = compute_scale_plan(
                Dimensions.from_shape(image.shape),
                config.target,
                config.preserve_aspect,
            )
        except (DecodeError, InvalidImageError) as exc:
            yield Skipped(source_path, str(exc))
            continue

        if config.preserve_aspect:
            log.debug("Preserving aspect ratio, scale ratio is %.6g", plan.row_scale)
        fmt = effective_output_type(source_path, config.output_type)
        output_dir = mirror_path(source_path.parent, config.source_dir, config.output_dir)
        output_path = output_dir / f"{source_path.stem}.{fmt}"

        try:
            scaled = transformer.resize(image, plan)
            codec.encode(output_path, scaled, fmt)
        except (TransformError, EncodeError) as exc:
            raise FatalProcessingError(source_path, exc) from exc
        log.info("Scaled image size : %s -> %s", plan.output, output_path)

        descriptor = sidecar_path(source_path)
        metadata = metadata_reader.read(descriptor)
        for key, value in metadata.items():
            log.debug("%s %s: %s", descriptor.name, key, value)

        yield Processed(
            ImageRecord(
                index=index,
                source_path=source_path,
                output_path=output_path,
                dimensions=plan.output,
                metadata=metadata,
            )
        )
        index += 1


def _write_outcomes(outcomes: Iterable[FileOutcome], report: TextIO, summary: BatchSummary) -> None:
    for outcome in outcomes:
        if isinstance(outcome, Skipped):
            summary.skipped += 1
            log.warning("Skipping %s: %s", outcome.path, outcome.reason)
            continue
        report.write(format_report_line(outcome.record))
        summary.processed += 1


def process_images(
    files: Iterable[FileEntry],
    config: CorpusConfig,
    *,
    codec: Optional[ImageCodec] = None,
    transformer: Optional[AffineTransformer] = None,
    metadata_reader: Optional[MetadataReader] = None,
) -> BatchSummary:
    """Run the batch and write ``metadata.txt`` under ``config.output_dir``.

    The report is closed on every exit path, so after a
    :class:`FatalProcessingError` it holds exactly the lines of the images
    processed before the failing one.
    """

    codec = codec or OpenCVImageCodec()
    transformer = transformer or OpenCVAffineTransformer()
    metadata_reader = metadata_reader or XmlMetadataReader()

    config.output_dir.mkdir(parents=True, exist_ok=True)
    summary = BatchSummary(report_path=config.report_path)
    outcomes = iter_outcomes(
        files,
        config,
        codec=codec,
        transformer=transformer,
        metadata_reader=metadata_reader,
    )
    with config.report_path.open("w", encoding="utf8") as report:
        _write_outcomes(outcomes, report, summary)
    return summary


__all__ = [
    "BatchSummary",
    "FatalProcessingError",
    "FileOutcome",
    "ImageRecord",
    "Processed",
    "Skipped",
    "effective_output_type",
    "format_report_line",
    "iter_outcomes",
    "process_images",
]
