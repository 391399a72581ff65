"""Asteroid catalog loader.

Accepts a JSON list of asteroid records, or an object with an ``asteroids``
list. Each record needs a name, a diameter (``diameter_m``, ``size`` in
metres, or ``diameter_km``) and a velocity (``velocity_km_s``, ``velocity``
in km/s, or ``velocity_m_s``). Density comes from ``density_kg_m3``, from
``mass_kg`` and the diameter, or from ``composition``.
"""

from __future__ import annotations

import json
import logging
import math
import re
from pathlib import Path
from typing import Any

from requests import Session

from impact_timeline.cache import CATALOG_TTL
from impact_timeline.data.asteroids import BUILTIN_ASTEROIDS
from impact_timeline.errors import DataUnavailableError
from impact_timeline.http import download_bytes, is_url
from impact_timeline.models import AsteroidSpec

logger = logging.getLogger(__name__)

_CACHE_NAME = "catalog.json"


def _number(record: dict[str, Any], key: str) -> float | None:
    value = record.get(key)
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) and number > 0 else None


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")


def _diameter_m(record: dict[str, Any]) -> float | None:
    for key, scale in (("diameter_m", 1.0), ("size", 1.0), ("diameter_km", 1000.0)):
        value = _number(record, key)
        if value is not None:
            return value * scale
    return None


def _velocity_km_s(record: dict[str, Any]) -> float | None:
    for key, scale in (("velocity_km_s", 1.0), ("velocity", 1.0), ("velocity_m_s", 0.001)):
        value = _number(record, key)
        if value is not None:
            return value * scale
    return None


def parse_asteroid(record: dict[str, Any]) -> AsteroidSpec:
    """Build an AsteroidSpec from one catalog record.

    Raises:
        DataUnavailableError: if the name, diameter or velocity is missing.
    """
    name = str(record.get("name") or "").strip()
    if not name:
        raise DataUnavailableError("Asteroid record has no name")

    diameter = _diameter_m(record)
    if diameter is None:
        raise DataUnavailableError(f"{name} has no valid diameter")
    velocity = _velocity_km_s(record)
    if velocity is None:
        raise DataUnavailableError(f"{name} has no valid velocity")

    density = _number(record, "density_kg_m3")
    mass = _number(record, "mass_kg")
    if density is None and mass is not None:
        radius = diameter / 2
        density = mass / ((4.0 / 3.0) * math.pi * radius * radius * radius)

    return AsteroidSpec(
        id=str(record.get("id") or _slug(name)),
        name=name,
        diameter_m=diameter,
        velocity_km_s=velocity,
        composition=str(record.get("composition") or "default"),
        density_kg_m3=density,
        threat_level=str(record.get("threat_level") or "unknown"),
        description=str(record.get("description") or ""),
    )


def _records(payload: Any) -> list[Any]:
    if isinstance(payload, dict):
        payload = payload.get("asteroids", [])
    if not isinstance(payload, list):
        raise DataUnavailableError("Catalog must be a list or contain an 'asteroids' list")
    return payload


def load_catalog(
    source: str | Path | None = None,
    session: Session | None = None,
    timeout: int = 60,
    use_cache: bool = True,
) -> tuple[AsteroidSpec, ...]:
    """Load an asteroid catalog from a JSON path or URL.

    Returns the built-in catalog when *source* is None. Malformed records are
    skipped with a warning; a malformed document raises.

    Raises:
        DataUnavailableError: if the document is not a catalog.
    """
    if source is None:
        return BUILTIN_ASTEROIDS

    source = str(source)
    if is_url(source):
        raw = download_bytes(
            source, _CACHE_NAME, CATALOG_TTL, session=session, timeout=timeout, use_cache=use_cache,
        )
    else:
        raw = Path(source).read_bytes()

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DataUnavailableError(f"{source} is not valid JSON: {exc}") from exc

    asteroids: list[AsteroidSpec] = []
    for record in _records(payload):
        if not isinstance(record, dict):
            logger.warning("Skipping non-object catalog entry: %r", record)
            continue
        try:
            asteroids.append(parse_asteroid(record))
        except DataUnavailableError as exc:
            logger.warning("Skipping asteroid: %s", exc)

    logger.info("Loaded %d asteroids from %s", len(asteroids), source)
    return tuple(asteroids)


def find_in_catalog(catalog: tuple[AsteroidSpec, ...], asteroid_id: str) -> AsteroidSpec | None:
    """Look up an asteroid by id, case-insensitively."""
    key = asteroid_id.strip().lower()
    for asteroid in catalog:
        if asteroid.id.lower() == key:
            return asteroid
    return None
