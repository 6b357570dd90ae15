from __future__ import annotations
from pathlib import Path
import logging

from config.discovery_config import DEFAULT_CONFIG, DiscoveryConfig
from discovery.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def scan_for_gguf(cache_dir: str | Path, cfg: DiscoveryConfig = DEFAULT_CONFIG) -> list[str]:
    """
    List the model files directly inside `cache_dir`.

    A missing cache directory just means nothing has been downloaded yet, so
    it yields an empty list. A path that exists but isn't a directory is an
    error. Sub-directories are not descended into.
    """
    root = Path(cache_dir).absolute()

    try:
        if not root.exists():
            logger.debug("Cache directory does not exist yet: %s", root)
            return []
        if not root.is_dir():
            raise ValidationError(f"cache path is not a directory: {root}")
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except FileNotFoundError as e:
        # removed between the exists() check and the listing
        raise NotFoundError(f"failed to read cache directory: {e}") from e
    except OSError as e:
        raise ValidationError(f"failed to read cache directory: {e}") from e

    ext = cfg.model_extension.lower()
    found = [
        str(entry)
        for entry in entries
        if entry.name.lower().endswith(ext) and not entry.is_dir()
    ]
    logger.debug("Scanned %s: %d candidate(s) out of %d entries", root, len(found), len(entries))
    return found
