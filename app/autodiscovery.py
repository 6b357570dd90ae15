from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, Mapping
import logging
import os

from app.config_gen import generate_config
from config.discovery_config import DEFAULT_CONFIG, DiscoveryConfig
from config.generated_config import GeneratedConfig
from discovery.binary import find_llama_server
from discovery.cache import resolve_cache_dir
from discovery.errors import DiscoveryError, NotFoundError, wrap_error
from discovery.gguf_metadata import ReaderFactory, discover_models
from discovery.gguf_reader import open_gguf
from discovery.identity import deduplicate_models

logger = logging.getLogger(__name__)


def auto_discover_config(
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
    open_reader: ReaderFactory = open_gguf,
    cfg: DiscoveryConfig = DEFAULT_CONFIG,
) -> GeneratedConfig:
    """
    Build a proxy config from the GGUF files in the llama.cpp cache.

    Stages: resolve cache dir -> scan + extract -> deduplicate ->
    find llama-server -> generate. Each failure is re-raised with the stage
    name in front and the original error chained.
    """
    env = os.environ if env is None else env

    try:
        cache_dir = resolve_cache_dir(env, platform, cfg)
    except DiscoveryError as e:
        raise wrap_error(e, "failed to get cache directory") from e

    # Discover models from cache
    logger.info("Scanning llama.cpp cache directory %s for GGUF files...", cache_dir)
    try:
        models = discover_models(cache_dir, open_reader, cfg)
    except DiscoveryError as e:
        raise wrap_error(e, "failed to discover models") from e

    if not models:
        raise NotFoundError(f"no GGUF models found in llama.cpp cache directory {cache_dir}")

    logger.info("Found %d GGUF file(s) in cache", len(models))

    # Keep only the first of each quantization variant
    unique = deduplicate_models(models)
    if len(unique) < len(models):
        logger.info("After deduplication: %d unique model(s)", len(unique))

    logger.info("Searching for llama-server binary...")
    try:
        server_path = find_llama_server(env, platform, cfg)
    except DiscoveryError as e:
        raise wrap_error(
            e,
            f"failed to find llama-server (set {cfg.server_path_env} environment variable "
            f"or ensure llama-server is in PATH)",
        ) from e
    logger.info("Found llama-server at: %s", server_path)

    try:
        generated = generate_config(unique, server_path, cfg)
        generated.validate()
    except (DiscoveryError, ValueError) as e:
        raise wrap_error(e, "failed to generate config") from e

    logger.info("Auto-discovered %d model(s):", len(generated.models))
    for model_id in generated.models:
        logger.info("  - %s", model_id)

    return generated


def _has_models(loaded: Any) -> bool:
    models = loaded.get("models") if isinstance(loaded, Mapping) else getattr(loaded, "models", None)
    return bool(models)


def load_config_or_discover(
    path: str | Path,
    load_config: Callable[[Path], Any],
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
    open_reader: ReaderFactory = open_gguf,
    cfg: DiscoveryConfig = DEFAULT_CONFIG,
) -> Any:
    """
    Load the proxy config at `path`, falling back to auto-discovery.

    Discovery runs when the file doesn't exist or defines no models. Any
    other loader error is propagated unchanged.
    """
    p = Path(path)
    if not p.exists():
        logger.info("Config file not found at %s, attempting auto-discovery from llama.cpp cache...", p)
        return auto_discover_config(env, platform, open_reader, cfg)

    loaded = load_config(p)
    if not _has_models(loaded):
        logger.info("Config file has no models defined, attempting auto-discovery from llama.cpp cache...")
        return auto_discover_config(env, platform, open_reader, cfg)

    return loaded
