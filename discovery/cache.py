from __future__ import annotations
from pathlib import Path
from typing import Callable, Mapping
import logging
import os
import re
import sys

from config.discovery_config import DEFAULT_CONFIG, DiscoveryConfig
from discovery.errors import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)

# Strategy signature: (env, cfg) -> cache dir without trailing separator
CacheStrategy = Callable[[Mapping[str, str], DiscoveryConfig], str]


def platform_key(platform: str | None = None) -> str:
    """Normalize sys.platform values such as 'freebsd14' down to 'freebsd'."""
    key = platform or sys.platform
    # only the BSDs carry a release number; win32 must stay as-is
    if key.startswith(("freebsd", "openbsd")):
        return re.sub(r"\d+$", "", key)
    return key


def ensure_trailing_separator(path: str) -> str:
    if path and path[-1] not in (os.sep, os.altsep or os.sep):
        return path + os.sep
    return path


def _user_database_home() -> str:
    # Only reached on Unix-likes, where pwd is always importable
    import pwd
    try:
        return pwd.getpwuid(os.getuid()).pw_dir
    except KeyError as e:
        raise ConfigurationError(f"failed to find HOME directory: {e}") from e


def _home(env: Mapping[str, str]) -> str:
    return env.get("HOME") or _user_database_home()


def _unix_cache(env: Mapping[str, str], cfg: DiscoveryConfig) -> str:
    base = env.get("XDG_CACHE_HOME") or os.path.join(_home(env), ".cache")
    return os.path.join(base, cfg.cache_app_dir)


def _darwin_cache(env: Mapping[str, str], cfg: DiscoveryConfig) -> str:
    return os.path.join(_home(env), "Library", "Caches", cfg.cache_app_dir)


def _windows_cache(env: Mapping[str, str], cfg: DiscoveryConfig) -> str:
    local_app_data = env.get("LOCALAPPDATA")
    if not local_app_data:
        raise ConfigurationError("LOCALAPPDATA environment variable not set")
    return os.path.join(local_app_data, cfg.cache_app_dir)


CACHE_STRATEGIES: dict[str, CacheStrategy] = {
    "linux": _unix_cache,
    "freebsd": _unix_cache,
    "openbsd": _unix_cache,
    "aix": _unix_cache,
    "darwin": _darwin_cache,
    "win32": _windows_cache,
}


def resolve_cache_dir(
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
    cfg: DiscoveryConfig = DEFAULT_CONFIG,
) -> str:
    """
    Return the llama.cpp model cache directory, always with a trailing separator.

    Priority order:
     - LLAMA_CACHE, used as-is
     - the platform convention (XDG / Library/Caches / LOCALAPPDATA)
    """
    env = os.environ if env is None else env

    override = env.get(cfg.cache_env)
    if override:
        return ensure_trailing_separator(override)

    key = platform_key(platform)
    strategy = CACHE_STRATEGIES.get(key)
    if strategy is None:
        raise ConfigurationError(f"unsupported platform: {key}")

    cache_dir = strategy(env, cfg)
    logger.debug("Resolved cache directory for %s: %s", key, cache_dir)
    return ensure_trailing_separator(cache_dir)


def ensure_cache_file(
    filename: str,
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
    cfg: DiscoveryConfig = DEFAULT_CONFIG,
) -> str:
    """
    Return the absolute path of `filename` inside the cache directory.

    The name must be a bare file name. The cache directory is created
    (owner-only) if it doesn't exist yet.
    """
    if os.path.basename(filename) != filename:
        raise ValidationError(f"filename must not contain directory separators: {filename}")
    if filename in {"", ".", ".."}:
        raise ValidationError(f"invalid cache file name: {filename!r}")

    cache_dir = Path(resolve_cache_dir(env, platform, cfg))
    cache_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    return str((cache_dir / filename).absolute())
