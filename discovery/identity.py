from __future__ import annotations
import re

from config.discovery_config import DEFAULT_CONFIG
from interfaces.model.descriptor import ModelDescriptor

_QUANT_TOKENS = (
    "Q4_K_M", "Q4_K_S", "Q4_0", "Q4_1",
    "Q5_K_M", "Q5_K_S", "Q5_0", "Q5_1",
    "Q6_K", "Q8_0", "F16", "F32",
)

# Hyphen forms first, then underscore forms
QUANT_SUFFIXES: tuple[str, ...] = tuple(
    sep + token for sep in ("-", "_") for token in _QUANT_TOKENS
)

_INVALID_ID_CHARS = re.compile(r"[^a-z0-9.\-]")
_HYPHEN_RUNS = re.compile(r"-+")


def strip_extension(filename: str, ext: str = DEFAULT_CONFIG.model_extension) -> str:
    if filename.lower().endswith(ext.lower()):
        return filename[: -len(ext)]
    return filename


def infer_name_from_filename(filename: str) -> str:
    """
    Derive a model name from a GGUF file name.

    Drops the extension and at most one trailing quantization token, so
    "Llama-3.1-8B-Instruct-Q4_K_M.gguf" becomes "Llama-3.1-8B-Instruct" and
    "model-Q4_K_M-Q5_K_S.gguf" becomes "model-Q4_K_M".
    """
    name = strip_extension(filename)
    for suffix in QUANT_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name


def _name_parts(meta: ModelDescriptor) -> list[str]:
    return [p for p in (meta.name, meta.size_label, meta.finetune) if p]


def sanitize_model_id(raw: str) -> str:
    s = raw.lower().replace(" ", "-").replace("_", "-")
    s = _INVALID_ID_CHARS.sub("", s)
    s = _HYPHEN_RUNS.sub("-", s)
    return s.strip("-")


def generate_model_id(meta: ModelDescriptor) -> str:
    """Slug such as 'llama-3.1-8b-instruct'. Collisions are resolved by the config generator."""
    parts = _name_parts(meta) or [infer_name_from_filename(meta.file_name)]
    model_id = sanitize_model_id("-".join(parts))
    if not model_id:
        # metadata made only of symbols, e.g. a name written in another script
        model_id = sanitize_model_id(infer_name_from_filename(meta.file_name)) or "model"
    return model_id


def generate_display_name(meta: ModelDescriptor) -> str:
    parts = _name_parts(meta)
    if not parts:
        return infer_name_from_filename(meta.file_name)
    return " ".join(parts)


def base_identity_key(meta: ModelDescriptor) -> str:
    return infer_name_from_filename(meta.file_name).lower()


def deduplicate_models(models: list[ModelDescriptor]) -> list[ModelDescriptor]:
    """
    Keep the first model of each base identity key, in the given order.

    Quantization variants of one release share a key and collapse to a single
    entry; metadata fields are not consulted.
    """
    seen: set[str] = set()
    result: list[ModelDescriptor] = []
    for meta in models:
        key = base_identity_key(meta)
        if key in seen:
            continue
        seen.add(key)
        result.append(meta)
    return result
