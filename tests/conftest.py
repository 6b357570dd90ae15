"""
Pytest configuration and fixtures for the auto-discovery tests.
"""

from pathlib import Path
from typing import Any, Dict

import gguf
import pytest


class FakeGgufReader:
    """In-memory stand-in for discovery.gguf_reader.GgufFileReader."""

    def __init__(self, values: Dict[str, Any]):
        self.values = values
        self.closed = False

    def get_string(self, key: str) -> str:
        value = self.values[key]
        if isinstance(value, Exception):
            raise value
        if not isinstance(value, str):
            raise TypeError(f"{key} is not a string")
        return value

    def get_int(self, key: str) -> int:
        value = self.values[key]
        if isinstance(value, Exception):
            raise value
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{key} is not an integer")
        return value

    def close(self) -> None:
        self.closed = True


class FakeOpener:
    """
    Reader factory keyed by file name.

    A dict entry yields a FakeGgufReader, an exception entry is raised from
    open, and unknown names fail like a corrupt file would.
    """

    def __init__(self, files: Dict[str, Any]):
        self.files = files
        self.opened: list = []

    def __call__(self, path: str) -> FakeGgufReader:
        name = Path(path).name
        entry = self.files.get(name)
        if entry is None:
            raise ValueError("GGUF magic invalid")
        if isinstance(entry, Exception):
            raise entry
        reader = FakeGgufReader(entry)
        self.opened.append(reader)
        return reader


@pytest.fixture
def env(tmp_path):
    """Deterministic environment with an empty PATH and a private cache."""
    return {
        "LLAMA_CACHE": str(tmp_path / "cache"),
        "HOME": str(tmp_path / "home"),
        "PATH": "",
    }


@pytest.fixture
def cache_dir(env):
    path = Path(env["LLAMA_CACHE"])
    path.mkdir(parents=True)
    return path


@pytest.fixture
def server_bin(tmp_path):
    path = tmp_path / "bin" / "llama-server"
    path.parent.mkdir(parents=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


@pytest.fixture
def make_opener():
    return FakeOpener


@pytest.fixture
def llama_metadata():
    return {
        "general.architecture": "llama",
        "general.name": "LLaMA 3.1",
        "general.size_label": "8B",
        "general.finetune": "Instruct",
        "llama.context_length": 131072,
        "llama.embedding_length": 4096,
    }


@pytest.fixture
def write_gguf():
    """Write a real, tensor-less GGUF file with the given metadata."""

    def _write(path: Path, arch: str = "llama", strings: Dict[str, str] | None = None,
               ints: Dict[str, int] | None = None) -> Path:
        writer = gguf.GGUFWriter(str(path), arch)
        for key, value in (strings or {}).items():
            writer.add_string(key, value)
        for key, value in (ints or {}).items():
            writer.add_uint32(key, value)
        writer.write_header_to_file()
        writer.write_kv_data_to_file()
        writer.write_tensors_to_file()
        writer.close()
        return path

    return _write
