"""Disk cache for downloaded datasets, keyed on the source URL.

Each entry is a data file named after the dataset and a digest of its URL,
plus a ``.meta`` sidecar recording the URL, the download time and the
payload size. An entry is served only for the URL that produced it, while
it is younger than the caller's TTL and while its size matches the sidecar.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from pathlib import Path

logger = logging.getLogger(__name__)

_CACHE_DIR = Path.home() / ".cache" / "impact-timeline"

# TTLs in seconds
CATALOG_TTL = 86400  # 24 hours
COUNTRIES_TTL = 2592000  # 30 days
INFRASTRUCTURE_TTL = 604800  # 7 days


def get_cache_dir() -> Path:
    """Return the cache directory, creating it if needed."""
    _CACHE_DIR.mkdir(parents=True, exist_ok=True)
    return _CACHE_DIR


def cache_key(source: str, name: str) -> str:
    """File name for the dataset *name* downloaded from *source*.

    ``cache_key("https://example.org/c.csv", "countries.csv")`` gives
    ``countries-<12 hex digits>.csv``.
    """
    stem, dot, suffix = name.rpartition(".")
    if not dot:
        stem, suffix = name, ""
    digest = hashlib.sha256(source.encode("utf-8")).hexdigest()[:12]
    return f"{stem}-{digest}{dot}{suffix}"


def _entry_paths(source: str, name: str) -> tuple[Path, Path]:
    key = cache_key(source, name)
    cache_dir = get_cache_dir()
    return cache_dir / key, cache_dir / f"{key}.meta"


def cache_get(source: str, name: str, max_age_seconds: int) -> bytes | None:
    """Return the cached payload of *source* if it is fresh and intact."""
    data_path, meta_path = _entry_paths(source, name)
    if not (data_path.is_file() and meta_path.is_file()):
        return None

    try:
        meta = json.loads(meta_path.read_text())
    except json.JSONDecodeError:
        logger.debug("Unreadable cache metadata for %s", data_path.name)
        return None
    if not isinstance(meta, dict) or meta.get("source") != source:
        logger.debug("Cache entry %s belongs to another source", data_path.name)
        return None

    stored_at = meta.get("timestamp")
    if not isinstance(stored_at, (int, float)):
        return None
    age = time.time() - stored_at
    if age > max_age_seconds:
        logger.debug("Cache expired for %s (%.0fs old)", source, age)
        return None

    data = data_path.read_bytes()
    if len(data) != meta.get("size"):
        logger.debug("Cache entry %s is truncated", data_path.name)
        return None

    logger.debug("Cache hit for %s", source)
    return data


def cache_put(source: str, name: str, data: bytes) -> Path:
    """Store the payload of *source* and return the data file path."""
    data_path, meta_path = _entry_paths(source, name)
    data_path.write_bytes(data)
    meta_path.write_text(
        json.dumps({"source": source, "timestamp": time.time(), "size": len(data)})
    )
    logger.debug("Cached %s as %s (%d bytes)", source, data_path.name, len(data))
    return data_path
