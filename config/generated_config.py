from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import re

_MODEL_ID_RE = re.compile(r"^[a-z0-9.\-]+$")

@dataclass(frozen=True, slots=True)
class ModelEntry:
    cmd: str
    name: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {"cmd": self.cmd, "name": self.name, "description": self.description}


@dataclass(frozen=True, slots=True)
class GeneratedConfig:
    """
    Proxy configuration produced by auto-discovery.

    `models` maps a unique model ID to the command used to launch it. The
    scalar fields are the proxy defaults that a hand-written config would
    otherwise supply.
    """
    health_check_timeout: int
    start_port: int
    log_level: str
    metrics_max_in_memory: int
    models: dict[str, ModelEntry] = field(default_factory=dict)

    def validate(self) -> None:
        if not self.models:
            raise ValueError("GeneratedConfig.models must not be empty.")
        for model_id, entry in self.models.items():
            if not _MODEL_ID_RE.match(model_id):
                raise ValueError(f"GeneratedConfig model id is not a valid slug: {model_id!r}")
            if not entry.cmd.strip():
                raise ValueError(f"GeneratedConfig model {model_id} has an empty cmd.")
        if self.health_check_timeout <= 0:
            raise ValueError("GeneratedConfig.health_check_timeout must be a positive integer.")
        if self.start_port <= 0:
            raise ValueError("GeneratedConfig.start_port must be a positive integer.")

    def to_dict(self) -> dict[str, Any]:
        """Render in the key layout of the proxy's YAML config."""
        return {
            "healthCheckTimeout": self.health_check_timeout,
            "startPort": self.start_port,
            "logLevel": self.log_level,
            "metricsMaxInMemory": self.metrics_max_in_memory,
            "models": {model_id: entry.to_dict() for model_id, entry in self.models.items()},
        }
