from __future__ import annotations
from dataclasses import dataclass

@dataclass(frozen=True, slots=True)
class DiscoveryConfig:
    """
    Constants used while discovering models and generating a proxy config.

    The proxy defaults (timeout, start port, log level, metrics cap) are copied
    into every generated config. Environment variable names are kept here so
    the locators and tests agree on them.
    """
    health_check_timeout: int = 120
    start_port: int = 5800
    log_level: str = "info"
    metrics_max_in_memory: int = 1000

    model_extension: str = ".gguf"
    server_binary: str = "llama-server"
    cache_app_dir: str = "llama.cpp"
    port_placeholder: str = "${PORT}"

    cache_env: str = "LLAMA_CACHE"
    server_path_env: str = "LLAMA_SERVER_PATH"

    def server_binary_name(self, platform: str) -> str:
        return self.server_binary + ".exe" if platform == "win32" else self.server_binary

    def validate(self) -> None:
        if not isinstance(self.health_check_timeout, int) or self.health_check_timeout <= 0:
            raise ValueError("DiscoveryConfig.health_check_timeout must be a positive integer.")
        if not isinstance(self.start_port, int) or not (0 < self.start_port < 65536):
            raise ValueError("DiscoveryConfig.start_port must be a valid TCP port.")
        if self.log_level not in {"debug", "info", "warn", "error"}:
            raise ValueError("DiscoveryConfig.log_level must be one of debug, info, warn, error.")
        if not isinstance(self.metrics_max_in_memory, int) or self.metrics_max_in_memory <= 0:
            raise ValueError("DiscoveryConfig.metrics_max_in_memory must be a positive integer.")
        if not self.model_extension.startswith(".") or len(self.model_extension) < 2:
            raise ValueError("DiscoveryConfig.model_extension must look like '.ext'.")
        if not isinstance(self.server_binary, str) or not self.server_binary.strip():
            raise ValueError("DiscoveryConfig.server_binary must be a non-empty string.")
        if not isinstance(self.cache_app_dir, str) or not self.cache_app_dir.strip():
            raise ValueError("DiscoveryConfig.cache_app_dir must be a non-empty string.")

    @staticmethod
    def from_strings(
        health_check_timeout: int = 120,
        start_port: int = 5800,
        log_level: str = "info",
        metrics_max_in_memory: int = 1000,
    ) -> "DiscoveryConfig":
        """
        Convenience constructor for CLI/env usage. Only the proxy defaults are
        configurable; the rest mirror llama.cpp's own conventions.
        """
        cfg = DiscoveryConfig(
            health_check_timeout=int(health_check_timeout),
            start_port=int(start_port),
            log_level=str(log_level).strip().lower(),
            metrics_max_in_memory=int(metrics_max_in_memory),
        )
        cfg.validate()
        return cfg


DEFAULT_CONFIG = DiscoveryConfig()
