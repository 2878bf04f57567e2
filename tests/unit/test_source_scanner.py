from pathlib import Path

import pytest

from photo_chrono.core import SourceScanner


def test_scanner_lists_files_sorted(tmp_path: Path) -> None:
    (tmp_path / "b.jpg").write_bytes(b"b")
    (tmp_path / "a.jpg").write_bytes(b"a")
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.png").write_bytes(b"c")

    results = SourceScanner().scan(tmp_path)

    assert [item.name for item in results] == ["a.jpg", "b.jpg", "notes.txt", "sub/c.png"]
    assert results[0].read_bytes() == b"a"


def test_scanner_skips_hidden(tmp_path: Path) -> None:
    hidden_dir = tmp_path / ".cache"
    hidden_dir.mkdir()
    (hidden_dir / "x.jpg").write_bytes(b"x")
    (tmp_path / ".DS_Store").write_bytes(b"x")
    (tmp_path / "keep.jpg").write_bytes(b"k")

    results = SourceScanner().scan(tmp_path)
    assert [item.name for item in results] == ["keep.jpg"]


def test_scanner_skips_symlinks(tmp_path: Path) -> None:
    target = tmp_path / "target"
    target.mkdir()
    (target / "sample.jpg").write_bytes(b"s")

    link = tmp_path / "link"
    try:
        link.symlink_to(target, target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("此環境無法建立 symlink")

    results = SourceScanner().scan(tmp_path)
    assert all(not item.name.startswith("link") for item in results)


def test_scanner_missing_root(tmp_path: Path) -> None:
    assert SourceScanner().scan(tmp_path / "missing") == []
