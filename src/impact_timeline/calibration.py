"""Comparison of the scaling constants against documented impact events.

The blast, thermal, crater and seismic coefficients in ``ImpactConfig`` are
empirical. ``calibrate`` runs each reference event through the calculator
and reports the modelled/observed ratio for every observed quantity.

References:
    Boslough & Crawford (2008), Tunguska airburst modelling.
    Brown et al. (2013), Popova et al. (2013), Chelyabinsk.
    Kring (2007), Barringer Meteorite Crater.
    Hildebrand et al. (1991), Chicxulub.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from impact_timeline.config import ImpactConfig
from impact_timeline.effects import compute_immediate_effects
from impact_timeline.models import ImmediateEffects, ImpactParameters

logger = logging.getLogger(__name__)

Metric = str

_METRICS: dict[Metric, str] = {
    "tnt_megatons": "Energy (Mt)",
    "crater_diameter_km": "Crater diameter (km)",
    "blast_radius_km": "1 psi radius (km)",
    "thermal_radius_km": "Thermal radius (km)",
    "seismic_magnitude": "Seismic magnitude",
}


@dataclass(frozen=True)
class ReferenceEvent:
    """A documented impact with estimated impactor and observed effects.

    ``observed`` maps a metric to (value, tolerance factor): a modelled value
    is acceptable when observed / factor <= modelled <= observed * factor.
    Seismic magnitude uses an absolute tolerance in magnitude units instead.
    """

    name: str
    year: int
    params: ImpactParameters
    observed: dict[Metric, tuple[float, float]] = field(default_factory=dict)


@dataclass(frozen=True)
class CalibrationResult:
    event: str
    metric: Metric
    observed: float
    modelled: float
    ratio: float
    within_tolerance: bool


REFERENCE_EVENTS: tuple[ReferenceEvent, ...] = (
    ReferenceEvent(
        name="Tunguska",
        year=1908,
        params=ImpactParameters(
            asteroid_diameter_m=60.0,
            velocity_km_s=20.0,
            density_kg_m3=3000.0,
            impact_angle_deg=45.0,
            latitude=60.886,
            longitude=101.893,
        ),
        observed={
            "tnt_megatons": (12.0, 2.0),
            "blast_radius_km": (30.0, 2.0),
            "thermal_radius_km": (15.0, 2.0),
            "seismic_magnitude": (5.0, 0.75),
        },
    ),
    ReferenceEvent(
        name="Chelyabinsk",
        year=2013,
        params=ImpactParameters(
            asteroid_diameter_m=19.0,
            velocity_km_s=19.0,
            density_kg_m3=3300.0,
            impact_angle_deg=18.0,
            latitude=55.15,
            longitude=61.41,
        ),
        observed={
            "tnt_megatons": (0.5, 2.0),
            "blast_radius_km": (90.0, 3.0),
        },
    ),
    ReferenceEvent(
        name="Barringer",
        year=-50000,
        params=ImpactParameters(
            asteroid_diameter_m=50.0,
            velocity_km_s=12.8,
            density_kg_m3=7800.0,
            impact_angle_deg=45.0,
            latitude=35.027,
            longitude=-111.022,
        ),
        observed={
            "tnt_megatons": (10.0, 2.0),
            "crater_diameter_km": (1.186, 2.0),
        },
    ),
    ReferenceEvent(
        name="Chicxulub",
        year=-66_000_000,
        params=ImpactParameters(
            asteroid_diameter_m=10000.0,
            velocity_km_s=20.0,
            density_kg_m3=2000.0,
            impact_angle_deg=60.0,
            target_type="water",
            latitude=21.4,
            longitude=-89.517,
        ),
        observed={
            "crater_diameter_km": (180.0, 2.0),
            "seismic_magnitude": (10.0, 1.0),
        },
    ),
)


def modelled_value(effects: ImmediateEffects, metric: Metric) -> float:
    """Extract a calibration metric from computed effects."""
    if metric == "tnt_megatons":
        return effects.tnt_megatons
    if metric == "crater_diameter_km":
        return effects.crater.diameter_m / 1000
    if metric == "blast_radius_km":
        return effects.airblast.psi_1_km
    if metric == "thermal_radius_km":
        return effects.thermal_radius_km
    if metric == "seismic_magnitude":
        return effects.seismic_magnitude
    raise ValueError(f"Unknown calibration metric: {metric}")


def _within(metric: Metric, observed: float, modelled: float, tolerance: float) -> bool:
    if metric == "seismic_magnitude":
        return abs(modelled - observed) <= tolerance
    return observed / tolerance <= modelled <= observed * tolerance


def calibrate(
    events: tuple[ReferenceEvent, ...] = REFERENCE_EVENTS,
    config: ImpactConfig | None = None,
) -> list[CalibrationResult]:
    """Compare modelled effects against each reference event's observations."""
    config = config or ImpactConfig()
    results: list[CalibrationResult] = []
    for event in events:
        effects = compute_immediate_effects(event.params, config)
        for metric, (observed, tolerance) in event.observed.items():
            modelled = modelled_value(effects, metric)
            ratio = modelled / observed if observed else 0.0
            ok = _within(metric, observed, modelled, tolerance)
            if not ok:
                logger.info(
                    "%s %s outside tolerance: modelled %.3g vs observed %.3g",
                    event.name,
                    _METRICS.get(metric, metric),
                    modelled,
                    observed,
                )
            results.append(
                CalibrationResult(
                    event=event.name,
                    metric=metric,
                    observed=observed,
                    modelled=round(modelled, 4),
                    ratio=round(ratio, 3),
                    within_tolerance=ok,
                )
            )
    return results


def metric_label(metric: Metric) -> str:
    return _METRICS.get(metric, metric)
