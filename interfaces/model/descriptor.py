from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelDescriptor:
    file_path: str
    file_name: str
    architecture: str
    name: str = ""
    size_label: str = ""
    context_length: int = 0
    embedding_length: int = 0
    finetune: str = ""
