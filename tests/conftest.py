from __future__ import annotations

import sys
from pathlib import Path

import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def write_image(path: Path, size: tuple[int, int] = (2, 2), color="white", mode: str = "RGB") -> Path:
    """Save a solid ``size`` (width, height) image to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size, color=color).save(path)
    return path


def write_descriptor(path: Path, **values: str) -> Path:
    """Write an ``opencv_storage`` metadata descriptor holding ``values``."""
    body = "".join(f"<{key}>{value}</{key}>\n" for key, value in values.items())
    path.write_text(
        f'<?xml version="1.0"?>\n<opencv_storage>\n{body}</opencv_storage>\n',
        encoding="utf8",
    )
    return path


@pytest.fixture
def image_factory():
    return write_image


@pytest.fixture
def descriptor_factory():
    return write_descriptor
