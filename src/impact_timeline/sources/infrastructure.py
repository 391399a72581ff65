"""Infrastructure dataset loader."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import get_args

import pandas as pd
from requests import Session

from impact_timeline.cache import INFRASTRUCTURE_TTL
from impact_timeline.data.infrastructure import BUILTIN_INFRASTRUCTURE
from impact_timeline.errors import DataUnavailableError
from impact_timeline.models import GeoPoint, InfrastructurePoint, InfrastructureType
from impact_timeline.sources.tabular import optional_float, read_csv_source

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "type", "latitude", "longitude")

INFRASTRUCTURE_TYPES: frozenset[str] = frozenset(get_args(InfrastructureType))

_CACHE_NAME = "infrastructure.csv"


def _parse_facility(row: pd.Series) -> InfrastructurePoint:
    name = str(row["name"]).strip() if pd.notna(row["name"]) else ""
    if not name:
        raise DataUnavailableError("Facility row has no name")

    kind = str(row["type"]).strip().lower() if pd.notna(row["type"]) else ""
    if kind not in INFRASTRUCTURE_TYPES:
        raise DataUnavailableError(f"{name} has unknown type {kind!r}")

    lat = optional_float(row["latitude"])
    lon = optional_float(row["longitude"])
    location = GeoPoint(lat, lon) if lat is not None and lon is not None else None

    return InfrastructurePoint(
        name=name,
        type=kind,  # type: ignore[arg-type]
        location=location,
        capacity=optional_float(row.get("capacity")) or 0.0,
    )


def load_infrastructure(
    source: str | Path | None = None,
    session: Session | None = None,
    timeout: int = 60,
    use_cache: bool = True,
) -> tuple[InfrastructurePoint, ...]:
    """Load facilities from a CSV path or URL (built-in sample when None).

    Columns: name, type, latitude, longitude, capacity.
    """
    if source is None:
        return BUILTIN_INFRASTRUCTURE

    df = read_csv_source(
        source,
        _CACHE_NAME,
        INFRASTRUCTURE_TTL,
        REQUIRED_COLUMNS,
        session=session,
        timeout=timeout,
        use_cache=use_cache,
    )

    facilities: list[InfrastructurePoint] = []
    for _, row in df.iterrows():
        try:
            facilities.append(_parse_facility(row))
        except DataUnavailableError as exc:
            logger.warning("Skipping facility row: %s", exc)

    logger.info("Loaded %d facilities from %s", len(facilities), source)
    return tuple(facilities)
