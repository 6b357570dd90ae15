from __future__ import annotations
from pathlib import Path
from typing import Callable
import logging
import os

from config.discovery_config import DEFAULT_CONFIG, DiscoveryConfig
from discovery.errors import AggregateError, FormatError
from discovery.gguf_reader import open_gguf
from discovery.identity import infer_name_from_filename
from discovery.scanner import scan_for_gguf
from interfaces.gguf.reader import GgufMetadataReader
from interfaces.model.descriptor import ModelDescriptor

logger = logging.getLogger(__name__)

ReaderFactory = Callable[[str], GgufMetadataReader]

ARCHITECTURE_KEY = "general.architecture"
NAME_KEY = "general.name"
SIZE_LABEL_KEY = "general.size_label"
FINETUNE_KEY = "general.finetune"


def _optional_string(reader: GgufMetadataReader, key: str) -> str:
    try:
        return reader.get_string(key)
    except (KeyError, TypeError, ValueError):
        return ""


def _optional_int(reader: GgufMetadataReader, key: str) -> int:
    try:
        return reader.get_int(key)
    except (KeyError, TypeError, ValueError, OverflowError):
        return 0


def extract_metadata(path: str, open_reader: ReaderFactory = open_gguf) -> ModelDescriptor:
    """
    Read one GGUF file into a ModelDescriptor.

    Only general.architecture is mandatory. Everything else falls back to an
    empty string or zero; a missing name is inferred from the file name.
    """
    try:
        reader = open_reader(path)
    except Exception as e:
        raise FormatError(f"failed to open GGUF file: {e}") from e

    try:
        try:
            arch = reader.get_string(ARCHITECTURE_KEY)
        except (KeyError, TypeError, ValueError) as e:
            raise FormatError(f"missing {ARCHITECTURE_KEY}: {e}") from e
        if not arch:
            raise FormatError(f"missing {ARCHITECTURE_KEY}: empty value")

        file_name = os.path.basename(path)
        name = _optional_string(reader, NAME_KEY) or infer_name_from_filename(file_name)

        meta = ModelDescriptor(
            file_path=path,
            file_name=file_name,
            architecture=arch,
            name=name,
            size_label=_optional_string(reader, SIZE_LABEL_KEY),
            context_length=_optional_int(reader, f"{arch}.context_length"),
            embedding_length=_optional_int(reader, f"{arch}.embedding_length"),
            finetune=_optional_string(reader, FINETUNE_KEY),
        )
    except FormatError:
        raise
    except Exception as e:
        # malformed field layouts surface as IndexError and friends from the parser
        raise FormatError(f"malformed GGUF metadata: {e!r}") from e
    finally:
        reader.close()

    logger.debug("Extracted metadata from %s: %s", path, meta)
    return meta


def discover_models(
    cache_dir: str | Path,
    open_reader: ReaderFactory = open_gguf,
    cfg: DiscoveryConfig = DEFAULT_CONFIG,
) -> list[ModelDescriptor]:
    """
    Scan `cache_dir` and extract metadata from every GGUF file found.

    Partial failure is tolerated on purpose: files that cannot be parsed are
    logged and dropped as long as at least one file succeeds. Only when every
    file fails does this raise, with an AggregateError listing each file and
    its error. An empty or missing cache returns an empty list.
    """
    files = scan_for_gguf(cache_dir, cfg)
    if not files:
        return []

    models: list[ModelDescriptor] = []
    failures: list[str] = []
    errors: list[Exception] = []

    for file_path in files:
        try:
            models.append(extract_metadata(file_path, open_reader))
        except FormatError as e:
            failures.append(f"{os.path.basename(file_path)}: {e}")
            errors.append(e)

    if models:
        for failure in failures:
            logger.warning("Skipping unreadable GGUF file %s", failure)
        return models

    raise AggregateError(f"failed to parse any GGUF files: {'; '.join(failures)}", errors)
