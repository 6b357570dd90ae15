from __future__ import annotations
from pathlib import Path
from shutil import which
from typing import Mapping
import logging
import os

from config.discovery_config import DEFAULT_CONFIG, DiscoveryConfig
from discovery.cache import platform_key
from discovery.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _home_dir(env: Mapping[str, str]) -> str | None:
    return env.get("HOME") or env.get("USERPROFILE") or None


def common_server_locations(env: Mapping[str, str], platform: str) -> list[Path]:
    """Directories where llama-server usually ends up when it isn't on PATH."""
    locations = [
        Path("/usr/local/bin"),
        Path("/usr/bin"),
        Path("/opt/llama.cpp/bin"),
    ]

    home = _home_dir(env)
    if home:
        locations += [
            Path(home) / "llama.cpp" / "build" / "bin",
            Path(home) / ".local" / "bin",
            Path(home) / "bin",
        ]

    if platform == "darwin":
        locations += [
            Path("/opt/homebrew/bin"),
            Path("/usr/local/opt/llama.cpp/bin"),
        ]
    elif platform == "win32":
        program_files = env.get("ProgramFiles")
        if program_files:
            locations.append(Path(program_files) / "llama.cpp" / "bin")

    return locations


def _from_override(server_path: str, env_name: str) -> str:
    p = Path(server_path)
    if not p.exists():
        raise NotFoundError(f"{env_name} file not found: {server_path}")
    if p.is_dir():
        raise ValidationError(f"{env_name} points to a directory: {server_path}")
    return os.path.abspath(p)


def find_llama_server(
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
    cfg: DiscoveryConfig = DEFAULT_CONFIG,
) -> str:
    """
    Locate the llama-server executable and return its absolute path.

    Search order:
     - LLAMA_SERVER_PATH (must exist and must not be a directory)
     - PATH
     - common installation locations
    """
    env = os.environ if env is None else env
    key = platform_key(platform)

    override = env.get(cfg.server_path_env)
    if override:
        return _from_override(override, cfg.server_path_env)

    name = cfg.server_binary_name(key)

    found = which(name, path=env.get("PATH", ""))
    if found:
        logger.debug("Found %s on PATH: %s", name, found)
        return os.path.abspath(found)

    for location in common_server_locations(env, key):
        candidate = location / name
        if candidate.exists() and not candidate.is_dir():
            logger.debug("Found %s in common location: %s", name, candidate)
            return os.path.abspath(candidate)

    raise NotFoundError(f"{cfg.server_binary} not found (checked PATH and common locations)")
