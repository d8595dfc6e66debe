"""Sidecar metadata descriptors stored next to each source image."""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Protocol, Union
from xml.etree import ElementTree as ET

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

METADATA_SUFFIX = ".xml"


@dataclass(frozen=True)
class Metadata:
    """Acquisition details for one image. Absent values are empty strings."""

    date_acquisition: str = ""
    modality_acquisition: str = ""
    copyright: str = ""
    annotation: str = ""

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def items(self) -> list[tuple[str, str]]:
        return [(key, getattr(self, key)) for key in self.keys()]


class MetadataReader(Protocol):
    def read(self, path: PathLike) -> Metadata:
        ...


def sidecar_path(image_path: PathLike) -> Path:
    """Return the descriptor path that accompanies ``image_path``."""
    image_path = Path(image_path)
    return image_path.with_name(f"{image_path.stem}{METADATA_SUFFIX}")


def _node_text(element: Optional[ET.Element]) -> str:
    if element is None or element.text is None:
        return ""
    text = element.text.strip()
    # cv::FileStorage wraps strings containing spaces in double quotes.
    if len(text) >= 2 and text[0] == text[-1] == '"':
        text = text[1:-1]
    return text


class XmlMetadataReader:
    """Read ``cv::FileStorage`` style XML descriptors.

    The descriptor is expected to look like::

        <?xml version="1.0"?>
        <opencv_storage>
        <date_acquisition>2022-09-26</date_acquisition>
        <annotation>"left knee"</annotation>
        </opencv_storage>

    Only direct children of the root are consulted. Any problem reading the
    file yields empty fields instead of an error.
    """

    def read(self, path: PathLike) -> Metadata:
        path = Path(path)
        if not path.is_file():
            log.debug("No metadata descriptor at %s", path)
            return Metadata()
        try:
            root = ET.parse(path).getroot()
        except (ET.ParseError, OSError) as exc:
            log.debug("Ignoring unreadable metadata descriptor %s: %s", path, exc)
            return Metadata()

        values = {key: _node_text(root.find(key)) for key in Metadata.keys()}
        return Metadata(**values)


__all__ = ["METADATA_SUFFIX", "Metadata", "MetadataReader", "XmlMetadataReader", "sidecar_path"]
