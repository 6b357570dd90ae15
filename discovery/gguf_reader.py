from __future__ import annotations
from pathlib import Path
from typing import Any

import numpy as np
from gguf import GGUFReader, GGUFValueType

_INT_TYPES = {
    GGUFValueType.UINT8,
    GGUFValueType.INT8,
    GGUFValueType.UINT16,
    GGUFValueType.INT16,
    GGUFValueType.UINT32,
    GGUFValueType.INT32,
    GGUFValueType.UINT64,
    GGUFValueType.INT64,
}


class GgufFileReader:
    """Adapter from gguf.GGUFReader fields to plain str/int lookups."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._reader: GGUFReader | None = GGUFReader(self.path, "r")

    def _field(self, key: str) -> Any:
        if self._reader is None:
            raise ValueError(f"GGUF reader already closed: {self.path}")
        field = self._reader.fields.get(key)
        if field is None or not field.types or not field.data:
            raise KeyError(key)
        return field

    def get_string(self, key: str) -> str:
        field = self._field(key)
        if field.types[0] != GGUFValueType.STRING:
            raise TypeError(f"{key} is {field.types[0].name}, not STRING")
        return bytes(field.parts[field.data[0]]).decode("utf-8")

    def get_int(self, key: str) -> int:
        field = self._field(key)
        if field.types[0] not in _INT_TYPES:
            raise TypeError(f"{key} is {field.types[0].name}, not an integer")
        value = field.parts[field.data[0]][0]
        if not isinstance(value, (int, np.integer)):
            raise TypeError(f"{key} has unexpected value type {type(value).__name__}")
        return int(value)

    def close(self) -> None:
        # GGUFReader keeps a numpy memmap; dropping it releases the file
        self._reader = None

    def __enter__(self) -> "GgufFileReader":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def open_gguf(path: str | Path) -> GgufFileReader:
    return GgufFileReader(path)
