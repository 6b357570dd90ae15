from __future__ import annotations
import logging
import shlex

from config.discovery_config import DEFAULT_CONFIG, DiscoveryConfig
from config.generated_config import GeneratedConfig, ModelEntry
from discovery.errors import ValidationError
from discovery.identity import generate_display_name, generate_model_id
from interfaces.model.descriptor import ModelDescriptor

logger = logging.getLogger(__name__)


def build_command(meta: ModelDescriptor, server_path: str, cfg: DiscoveryConfig = DEFAULT_CONFIG) -> str:
    # The port placeholder is substituted by the proxy, so it stays unquoted
    cmd = [
        shlex.quote(server_path),
        "--model", shlex.quote(meta.file_path),
        "--port", cfg.port_placeholder,
    ]
    if meta.context_length > 0:
        cmd += ["--ctx-size", str(meta.context_length)]
    return " ".join(cmd)


def describe(meta: ModelDescriptor) -> str:
    if meta.size_label:
        return f"Auto-discovered {meta.architecture} {meta.size_label} model"
    return f"Auto-discovered {meta.architecture} model"


def generate_model_entry(
    meta: ModelDescriptor,
    server_path: str,
    cfg: DiscoveryConfig = DEFAULT_CONFIG,
) -> ModelEntry:
    if not server_path:
        raise ValidationError("server path cannot be empty")
    return ModelEntry(
        cmd=build_command(meta, server_path, cfg),
        name=generate_display_name(meta),
        description=describe(meta),
    )


def generate_config(
    models: list[ModelDescriptor],
    server_path: str,
    cfg: DiscoveryConfig = DEFAULT_CONFIG,
) -> GeneratedConfig:
    """
    Build a proxy config with one entry per model.

    The first model with a given ID keeps it; later ones get "-1", "-2", ...
    """
    if not models:
        raise ValidationError("no models provided")
    if not server_path:
        raise ValidationError("server path cannot be empty")

    entries: dict[str, ModelEntry] = {}
    used_ids: dict[str, int] = {}

    for meta in models:
        base_id = generate_model_id(meta)
        model_id = base_id
        if base_id in used_ids or base_id in entries:
            # a suffixed ID can also clash with another model's bare ID
            n = used_ids.get(base_id, 0)
            while model_id in entries:
                n += 1
                model_id = f"{base_id}-{n}"
            used_ids[base_id] = n
        else:
            used_ids[base_id] = 0

        entries[model_id] = generate_model_entry(meta, server_path, cfg)
        logger.debug("Generated config for %s from %s", model_id, meta.file_name)

    return GeneratedConfig(
        health_check_timeout=cfg.health_check_timeout,
        start_port=cfg.start_port,
        log_level=cfg.log_level,
        metrics_max_in_memory=cfg.metrics_max_in_memory,
        models=entries,
    )
