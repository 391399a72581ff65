"""World dataset loader: country centroids, population and density."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from requests import Session

from impact_timeline.cache import COUNTRIES_TTL
from impact_timeline.data.countries import BUILTIN_COUNTRIES
from impact_timeline.errors import DataUnavailableError
from impact_timeline.models import CountryData, GeoPoint
from impact_timeline.sources.tabular import optional_float, read_csv_source

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "latitude", "longitude", "population")

_CACHE_NAME = "countries.csv"


def _parse_country(row: pd.Series) -> CountryData:
    """Build a CountryData from a CSV row.

    A blank centroid is kept as ``None`` so the aggregator reports the
    country as skipped; a missing name or population rejects the row.
    """
    name = str(row["name"]).strip() if pd.notna(row["name"]) else ""
    if not name:
        raise DataUnavailableError("Country row has no name")

    population = optional_float(row["population"])
    if population is None or population < 0:
        raise DataUnavailableError(f"{name} has no valid population")

    lat = optional_float(row["latitude"])
    lon = optional_float(row["longitude"])
    centroid = GeoPoint(lat, lon) if lat is not None and lon is not None else None

    density = optional_float(row.get("population_density")) or 0.0
    code = row.get("code")
    return CountryData(
        name=name,
        code=str(code).strip() if code is not None and pd.notna(code) else "",
        centroid=centroid,
        population=int(population),
        population_density=max(density, 0.0),
    )


def load_countries(
    source: str | Path | None = None,
    session: Session | None = None,
    timeout: int = 60,
    use_cache: bool = True,
) -> tuple[CountryData, ...]:
    """Load the world dataset from a CSV path or URL.

    Columns: name, code, latitude, longitude, population, population_density.
    Returns the built-in table when *source* is None. Rows that cannot be
    parsed are skipped with a warning.
    """
    if source is None:
        return BUILTIN_COUNTRIES

    df = read_csv_source(
        source,
        _CACHE_NAME,
        COUNTRIES_TTL,
        REQUIRED_COLUMNS,
        session=session,
        timeout=timeout,
        use_cache=use_cache,
    )

    countries: list[CountryData] = []
    for _, row in df.iterrows():
        try:
            countries.append(_parse_country(row))
        except DataUnavailableError as exc:
            logger.warning("Skipping country row: %s", exc)

    logger.info("Loaded %d countries from %s", len(countries), source)
    return tuple(countries)
