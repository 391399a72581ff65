"""Shared HTTP session with retry/backoff, and cached downloads."""

from __future__ import annotations

import logging

from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from impact_timeline.cache import cache_get, cache_put

logger = logging.getLogger(__name__)

USER_AGENT = "impact-timeline"


def create_session(
    retries: int = 3,
    backoff_factor: float = 0.5,
    status_forcelist: tuple[int, ...] = (429, 500, 502, 503, 504),
) -> Session:
    """Create a requests Session that retries idempotent GETs with backoff."""
    retry = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=status_forcelist,
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session = Session()
    session.headers["User-Agent"] = USER_AGENT
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def download_bytes(
    url: str,
    cache_name: str,
    ttl_seconds: int,
    session: Session | None = None,
    timeout: int = 60,
    use_cache: bool = True,
) -> bytes:
    """GET *url*, serving from and populating the disk cache.

    Raises:
        requests.HTTPError: on a non-2xx response after retries.
    """
    if use_cache:
        cached = cache_get(url, cache_name, ttl_seconds)
        if cached is not None:
            return cached

    if session is None:
        session = create_session()

    logger.info("Downloading %s", url)
    resp = session.get(url, timeout=timeout)
    resp.raise_for_status()

    if use_cache:
        cache_put(url, cache_name, resp.content)
    return resp.content
