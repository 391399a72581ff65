"""Asteroid impact effects and temporal projection engine."""

from impact_timeline.effects import compute_immediate_effects
from impact_timeline.errors import DataUnavailableError, ImpactError, ValidationError
from impact_timeline.exposure import aggregate_exposure
from impact_timeline.projection import project_at
from impact_timeline.timeline import build_timeline

__version__ = "0.1.0"

__all__ = [
    "DataUnavailableError",
    "ImpactError",
    "ValidationError",
    "aggregate_exposure",
    "build_timeline",
    "compute_immediate_effects",
    "project_at",
]
