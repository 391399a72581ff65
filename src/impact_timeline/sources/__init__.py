"""Loaders for the asteroid catalog and the world and infrastructure datasets."""

from impact_timeline.sources.catalog import load_catalog
from impact_timeline.sources.countries import load_countries
from impact_timeline.sources.infrastructure import load_infrastructure

__all__ = ["load_catalog", "load_countries", "load_infrastructure"]
