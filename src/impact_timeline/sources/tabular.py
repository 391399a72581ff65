"""CSV reading shared by the dataset loaders."""

from __future__ import annotations

import io
import logging
import math
from pathlib import Path

import pandas as pd
from requests import Session

from impact_timeline.errors import DataUnavailableError
from impact_timeline.http import download_bytes, is_url

logger = logging.getLogger(__name__)

# Only blank cells are missing; "NA" is Namibia.
_READ_OPTIONS = {"keep_default_na": False, "na_values": [""]}


def read_csv_source(
    source: str | Path,
    cache_name: str,
    ttl_seconds: int,
    required_columns: tuple[str, ...],
    session: Session | None = None,
    timeout: int = 60,
    use_cache: bool = True,
) -> pd.DataFrame:
    """Read a CSV from a local path or an HTTP(S) URL.

    URLs go through the retrying session and the disk cache.

    Raises:
        DataUnavailableError: if a required column is missing.
    """
    source = str(source)
    if is_url(source):
        content = download_bytes(
            source,
            cache_name,
            ttl_seconds,
            session=session,
            timeout=timeout,
            use_cache=use_cache,
        )
        df = pd.read_csv(io.BytesIO(content), **_READ_OPTIONS)
    else:
        df = pd.read_csv(source, **_READ_OPTIONS)

    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in required_columns if c not in df.columns]
    if missing:
        raise DataUnavailableError(f"{source} is missing columns: {', '.join(missing)}")

    logger.debug("Read %d rows from %s", len(df), source)
    return df


def optional_float(value: object) -> float | None:
    """Convert a cell to a finite float; blanks, junk and inf/nan become None."""
    if value is None or pd.isna(value):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None
