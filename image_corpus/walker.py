"""Recursive directory walk that mirrors the source tree into a destination."""
from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


class EntryKind(enum.Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class FileEntry:
    """A path discovered during the walk."""

    path: Path
    kind: EntryKind = EntryKind.FILE


def _resolve_quietly(path: Path) -> Path:
    try:
        return path.resolve()
    except OSError:
        return path.absolute()


def mirror_path(path: PathLike, source_root: PathLike, dest_root: PathLike) -> Path:
    """Map ``path`` below ``source_root`` onto the same location below ``dest_root``.

    Paths are compared component-wise, so trailing separators on either root
    make no difference.
    """

    relative = Path(path).relative_to(Path(source_root))
    return Path(dest_root) / relative


def walk_directory(source_root: PathLike, dest_root: PathLike) -> List[FileEntry]:
    """Return every regular file below ``source_root`` in walk order.

    Entries are visited in case-sensitive name order, depth first. Each
    subdirectory gets its counterpart created under ``dest_root`` before it is
    entered, and its files are spliced into the result where the subdirectory
    was encountered. Directories that cannot be listed contribute no files.
    Symbolic links and special files are skipped.
    """

    source_root = Path(source_root)
    dest_root = Path(dest_root)
    return _walk(source_root, dest_root, exclude=_resolve_quietly(dest_root))


def _walk(directory: Path, mirror: Path, *, exclude: Optional[Path]) -> List[FileEntry]:
    try:
        with os.scandir(directory) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        log.warning("Cannot open %s (%s)", directory, exc.strerror or exc)
        return []

    files: List[FileEntry] = []
    for entry in entries:
        path = directory / entry.name
        try:
            if entry.is_symlink():
                log.warning("Skipping symbolic link %s", path)
            elif entry.is_file(follow_symlinks=False):
                files.append(FileEntry(path, EntryKind.FILE))
            elif entry.is_dir(follow_symlinks=False):
                if exclude is not None and _resolve_quietly(path) == exclude:
                    log.debug("Not descending into output directory %s", path)
                    continue
                child_mirror = mirror_path(path, directory, mirror)
                child_mirror.mkdir(parents=True, exist_ok=True)
                files.extend(_walk(path, child_mirror, exclude=exclude))
            else:
                log.warning("Unsupported file or folder type: %s", path)
        except OSError as exc:
            log.warning("Cannot inspect %s (%s)", path, exc)
    return files


__all__ = ["EntryKind", "FileEntry", "mirror_path", "walk_directory"]
