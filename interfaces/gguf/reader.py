from __future__ import annotations

from typing import Protocol


class GgufMetadataReader(Protocol):
    """
    Typed key/value view over one open GGUF file.

    Lookups raise KeyError for a missing key and TypeError when the stored
    value has a different type.
    """

    def get_string(self, key: str) -> str:
        ...

    def get_int(self, key: str) -> int:
        ...

    def close(self) -> None:
        ...
