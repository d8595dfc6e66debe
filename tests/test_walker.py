import os
from pathlib import Path

import pytest

from image_corpus import walker
from image_corpus.walker import EntryKind, mirror_path, walk_directory


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"data")
    return path


def _relative(entries, root):
    return [entry.path.relative_to(root).as_posix() for entry in entries]


def test_walk_interleaves_subdirectories_in_name_order(tmp_path):
    source = tmp_path / "photos"
    _touch(source / "a.png")
    _touch(source / "b" / "x.png")
    _touch(source / "c.png")
    _touch(source / "b" / "nested" / "y.png")
    _touch(source / "b" / "z.png")

    entries = walk_directory(source, tmp_path / "out")

    assert _relative(entries, source) == [
        "a.png",
        "b/nested/y.png",
        "b/x.png",
        "b/z.png",
        "c.png",
    ]
    assert all(entry.kind is EntryKind.FILE for entry in entries)


def test_walk_sorts_case_sensitively(tmp_path):
    source = tmp_path / "src"
    for name in ("b.png", "B.png", "a.png", "A.png"):
        _touch(source / name)

    entries = walk_directory(source, tmp_path / "dst")

    assert _relative(entries, source) == ["A.png", "B.png", "a.png", "b.png"]


def test_walk_counts_files_and_mirrors_every_directory(tmp_path):
    source = tmp_path / "src"
    dest = tmp_path / "dst"
    dest.mkdir()
    _touch(source / "one.png")
    _touch(source / "notes.xml")
    _touch(source / "left" / "two.png")
    _touch(source / "left" / "deeper" / "three.png")
    (source / "empty").mkdir()

    entries = walk_directory(source, dest)

    assert len(entries) == 4
    created = sorted(path.relative_to(dest).as_posix() for path in dest.rglob("*"))
    assert created == ["empty", "left", "left/deeper"]


def test_walk_is_idempotent_when_destination_exists(tmp_path):
    source = tmp_path / "src"
    dest = tmp_path / "dst"
    _touch(source / "sub" / "image.png")
    (dest / "sub").mkdir(parents=True)

    first = walk_directory(source, dest)
    second = walk_directory(source, dest)

    assert first == second
    assert (dest / "sub").is_dir()


def test_walk_single_file(tmp_path):
    source = tmp_path / "src"
    _touch(source / "only.png")

    entries = walk_directory(source, tmp_path / "dst")

    assert len(entries) == 1
    assert entries[0].path.name == "only.png"


def test_walk_missing_source_returns_nothing(tmp_path, caplog):
    entries = walk_directory(tmp_path / "missing", tmp_path / "dst")

    assert entries == []
    assert "Cannot open" in caplog.text


def test_unreadable_subdirectory_does_not_abort_walk(tmp_path, monkeypatch, caplog):
    source = tmp_path / "src"
    _touch(source / "a.png")
    _touch(source / "locked" / "hidden.png")
    _touch(source / "open" / "visible.png")
    locked = source / "locked"

    real_scandir = os.scandir

    def fake_scandir(path):
        if Path(path) == locked:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(walker.os, "scandir", fake_scandir)

    entries = walk_directory(source, tmp_path / "dst")

    assert _relative(entries, source) == ["a.png", "open/visible.png"]
    assert "Permission denied" in caplog.text


def test_symlinks_are_skipped(tmp_path, caplog):
    source = tmp_path / "src"
    target = _touch(tmp_path / "elsewhere" / "real.png")
    _touch(source / "plain.png")
    try:
        (source / "link.png").symlink_to(target)
        (source / "linkdir").symlink_to(target.parent, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not supported on this platform")

    entries = walk_directory(source, tmp_path / "dst")

    assert _relative(entries, source) == ["plain.png"]
    assert not (tmp_path / "dst" / "linkdir").exists()
    assert "symbolic link" in caplog.text


def test_output_directory_inside_source_is_not_walked(tmp_path):
    source = tmp_path / "src"
    dest = source / "out"
    _touch(source / "a.png")
    _touch(source / "sub" / "b.png")
    _touch(dest / "previous.png")

    entries = walk_directory(source, dest)

    assert _relative(entries, source) == ["a.png", "sub/b.png"]
    assert (dest / "sub").is_dir()
    assert not (dest / "out").exists()


def test_mirror_path_ignores_trailing_separators(tmp_path):
    source = str(tmp_path / "src") + os.sep
    dest = str(tmp_path / "dst") + os.sep

    assert mirror_path(tmp_path / "src" / "a" / "b", source, dest) == tmp_path / "dst" / "a" / "b"
    assert mirror_path(tmp_path / "src", source, dest) == tmp_path / "dst"
