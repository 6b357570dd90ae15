from pathlib import Path

import pytest

from discovery.errors import ValidationError
from discovery.scanner import scan_for_gguf


def test_matches_extension_case_insensitively(cache_dir):
    matching = ["a.gguf", "B.GGUF", "c.Gguf"]
    other = ["notes.txt", "model.gguf.part", "gguf", "readme.md"]
    for name in matching + other:
        (cache_dir / name).write_bytes(b"x")
    (cache_dir / "folder.gguf").mkdir()

    found = scan_for_gguf(cache_dir)

    assert len(found) == len(matching)
    assert {Path(p).name for p in found} == set(matching)


def test_returns_absolute_paths_in_name_order(cache_dir):
    for name in ["zeta.gguf", "alpha.gguf", "mid.gguf"]:
        (cache_dir / name).write_bytes(b"x")

    found = scan_for_gguf(cache_dir)

    assert [Path(p).name for p in found] == ["alpha.gguf", "mid.gguf", "zeta.gguf"]
    assert all(Path(p).is_absolute() for p in found)


def test_does_not_descend_into_subdirectories(cache_dir):
    nested = cache_dir / "org" / "repo"
    nested.mkdir(parents=True)
    (nested / "hidden.gguf").write_bytes(b"x")
    assert scan_for_gguf(cache_dir) == []


def test_missing_directory_is_empty(tmp_path):
    assert scan_for_gguf(tmp_path / "does-not-exist") == []


def test_empty_directory(cache_dir):
    assert scan_for_gguf(cache_dir) == []


def test_regular_file_is_an_error(tmp_path):
    f = tmp_path / "cache"
    f.write_text("not a dir")
    with pytest.raises(ValidationError, match="not a directory"):
        scan_for_gguf(f)


def test_permission_error_is_not_reported_as_missing(cache_dir, monkeypatch):
    def denied(self):
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "iterdir", denied)
    with pytest.raises(ValidationError, match="failed to read cache directory") as exc:
        scan_for_gguf(cache_dir)
    assert not isinstance(exc.value, FileNotFoundError)
    assert isinstance(exc.value.__cause__, PermissionError)


def test_accepts_trailing_separator(cache_dir):
    (cache_dir / "m.gguf").write_bytes(b"x")
    assert len(scan_for_gguf(str(cache_dir) + "/")) == 1
