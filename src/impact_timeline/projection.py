"""Temporal projection of impact consequences from approach to +50 years.

Every curve is a closed-form function of (effects, exposure, t), so the same
inputs always give bit-identical snapshots:

    casualties(t)  = C0 + Cs (1 - e^(-t/ts)) + Cf F(t)
    displaced(t)   = (1 - e^(-k t)) (D_floor + (D_peak - D_floor) e^(-t/tr))
    temperature(t) = -A (1 - e^(-t/t_on)) e^(-t/t_decay)
    food(t)        = 100 - S (1 - e^(-t/t_food_on)) e^(-t/t_food_rec)
    habitable(t)   = 100 - (P + (L0 - P) e^(-t/t_hab))

F(t) is the share of the food deficit realised since harvests began to fail
(``famine_onset_years``), so famine deaths lag the food curve and add nothing
in the first weeks. Casualties and habitable area step at t = 0; everything
else is continuous.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from impact_timeline.config import ImpactConfig
from impact_timeline.errors import ValidationError
from impact_timeline.geo import disc_area_km2
from impact_timeline.models import (
    ExposureSet,
    ImmediateEffects,
    NarrativeBand,
    TimelineSnapshot,
)

logger = logging.getLogger(__name__)

HOUR = 1 / 8760
DAY = 1 / 365
WEEK = 1 / 52
MONTH = 1 / 12

# Upper bound (years, inclusive) of each post-impact band; beyond the last is "decade".
_BANDS: tuple[tuple[float, NarrativeBand], ...] = (
    (12 * HOUR, "hours"),
    (3 * DAY, "day"),
    (0.05, "weeks"),
    (0.5, "months"),
    (5.0, "year"),
)

NARRATIVES: dict[NarrativeBand, str] = {
    "approach": (
        "Asteroid on final approach, {days:.0f} days out. Conditions are normal: "
        "habitable area {habitable:.0f}%, food production {food:.0f}%."
    ),
    "impact": (
        "Impact releases {megatons:,.0f} Mt of energy. The fireball and shockwave "
        "kill an estimated {casualties:,} people instantly."
    ),
    "hours": (
        "Shockwave and firestorms spread outward. {casualties:,} dead and "
        "{displaced:,} fleeing the blast zone. Dust is rising into the atmosphere."
    ),
    "day": (
        "Rescue operations hampered by collapsed infrastructure. {casualties:,} dead, "
        "{displaced:,} displaced. Global temperature {temperature:+.1f} C."
    ),
    "weeks": (
        "The dust veil spreads worldwide and temperature falls to {temperature:+.1f} C. "
        "Evacuations continue with {displaced:,} displaced; food production at {food:.0f}%."
    ),
    "months": (
        "Sunlight reduced and crops failing: food production at {food:.0f}%, "
        "temperature {temperature:+.1f} C. Refugee crisis with {displaced:,} displaced."
    ),
    "year": (
        "Dust settling but climate altered ({temperature:+.1f} C). Cumulative casualties "
        "{casualties:,}. Habitable area {habitable:.1f}%, food production {food:.0f}%."
    ),
    "decade": (
        "Long-term recovery. Climate anomaly {temperature:+.1f} C, food production at "
        "{food:.0f}%. {displaced:,} people remain displaced."
    ),
}

CHECKPOINT_LABELS: dict[float, str] = {
    -0.5: "t-6mo",
    0.0: "t0",
    HOUR: "t+1h",
    DAY: "t+24h",
    WEEK: "t+1w",
    MONTH: "t+1mo",
    1.0: "t+1y",
    10.0: "t+10y",
}


def narrative_band(time_years: float) -> NarrativeBand:
    """Which narrative band a time offset falls into."""
    if time_years < 0:
        return "approach"
    if time_years == 0:
        return "impact"
    for upper, band in _BANDS:
        if time_years <= upper:
            return band
    return "decade"


def _short(value: float) -> str:
    rounded = round(value, 1)
    return f"{rounded:g}" if rounded else f"{value:.2g}"


def format_time_label(time_years: float) -> str:
    """Human label for an offset: ``t0``, ``t+1h``, ``t+3.5y``, ``t-6mo``."""
    if time_years in CHECKPOINT_LABELS:
        return CHECKPOINT_LABELS[time_years]
    sign = "+" if time_years > 0 else "-"
    span = abs(time_years)
    if span < HOUR:
        return f"t{sign}{_short(span * 525_600)}min"
    if span < DAY:
        return f"t{sign}{_short(span * 8760)}h"
    if span < MONTH:
        return f"t{sign}{_short(span * 365)}d"
    if span < 1:
        return f"t{sign}{_short(span * 12)}mo"
    return f"t{sign}{_short(span)}y"


def _saturate(time_years: float, timescale: float) -> float:
    """1 - e^(-t/tau), accurate for small t."""
    return -math.expm1(-time_years / timescale)


def _deficit_integral(time_years: float, onset: float, recovery: float) -> float:
    """Integral over [0, t] of (1 - e^(-u/onset)) e^(-u/recovery) du."""
    blend = onset * recovery / (onset + recovery)
    return recovery * _saturate(time_years, recovery) - blend * _saturate(time_years, blend)


def famine_progress(time_years: float, config: ImpactConfig | None = None) -> float:
    """Share of eventual famine deaths that have occurred by *time_years*.

    Zero until ``famine_onset_years``; afterwards it follows the food deficit
    accumulated since then, reaching 1 only as food production recovers.
    """
    config = config or ImpactConfig()
    start = config.famine_onset_years
    if time_years <= start:
        return 0.0
    onset = config.food_onset_years
    recovery = config.food_recovery_years
    before = _deficit_integral(start, onset, recovery)
    total = recovery - onset * recovery / (onset + recovery) - before
    if total <= 0:
        return 1.0
    realised = _deficit_integral(time_years, onset, recovery) - before
    return max(0.0, min(1.0, realised / total))


def anomaly_ceiling(effects: ImmediateEffects, config: ImpactConfig | None = None) -> float:
    """Peak cooling magnitude (C) for an impact.

    Aerosol load is a fraction of the ejecta mass, boosted for ocean impacts;
    cooling grows with its logarithm and never exceeds ``max_anomaly_c``.
    """
    config = config or ImpactConfig()
    aerosol_kg = effects.ejecta_mass_kg * config.aerosol_fraction
    if effects.params.target_type == "water":
        aerosol_kg *= config.water_aerosol_multiplier
    aerosol_tg = aerosol_kg / 1e9
    return min(config.max_anomaly_c, config.anomaly_per_decade_c * math.log10(1.0 + aerosol_tg))


@dataclass(frozen=True)
class _Drivers:
    """Time-independent amplitudes of every curve."""

    immediate_casualties: int
    secondary_casualties: float
    famine_casualties: float
    displaced_peak: float
    displaced_floor: float
    anomaly: float
    food_loss: float
    initial_loss_pct: float
    permanent_loss_pct: float
    megatons: float


def _drivers(
    effects: ImmediateEffects,
    exposure: ExposureSet,
    config: ImpactConfig,
) -> _Drivers:
    c0 = exposure.immediate_casualties

    near_tiers = ("severe", "moderate")
    near_population = exposure.population_in(*near_tiers)
    near_casualties = sum(
        c.estimated_casualties for c in exposure.countries if c.tier in near_tiers
    )
    secondary = min(
        config.secondary_casualty_fraction * near_population,
        max(0, near_population - near_casualties),
    )

    anomaly = anomaly_ceiling(effects, config)
    food_loss = min(100.0, config.food_loss_per_degree * anomaly)
    survivors = max(0.0, exposure.total_population - c0 - secondary)
    famine = config.famine_fraction * (food_loss / 100.0) * survivors

    floor = config.permanent_displacement_fraction * max(exposure.population_in("destroyed"), c0)
    if c0 > 0:
        floor = max(1.0, floor)
    peak = max(config.evacuation_fraction * near_population, floor)

    blast_reach_km = max(effects.airblast.psi_1_km, effects.thermal_radius_km)
    initial = min(100.0, 100.0 * disc_area_km2(blast_reach_km) / config.reference_area_km2)
    crater_km = effects.crater.diameter_m / 2000
    permanent = min(100.0, 100.0 * disc_area_km2(crater_km) / config.reference_area_km2)
    if c0 > 0:
        permanent = max(permanent, config.min_permanent_loss_pct)
    initial = max(initial, permanent)

    return _Drivers(
        immediate_casualties=c0,
        secondary_casualties=secondary,
        famine_casualties=famine,
        displaced_peak=peak,
        displaced_floor=floor,
        anomaly=anomaly,
        food_loss=food_loss,
        initial_loss_pct=initial,
        permanent_loss_pct=permanent,
        megatons=effects.tnt_megatons,
    )


def _clamp_pct(value: float) -> float:
    return max(0.0, min(100.0, value))


def _check_time(time_years: float, config: ImpactConfig) -> float:
    if not math.isfinite(time_years):
        raise ValidationError(f"time_years must be finite, got {time_years}")
    if time_years > config.max_time_years:
        logger.warning(
            "Time offset %.2f y beyond horizon, clamping to %.1f y",
            time_years,
            config.max_time_years,
        )
        return config.max_time_years
    if time_years < config.min_time_years:
        logger.warning(
            "Time offset %.2f y before approach window, clamping to %.1f y",
            time_years,
            config.min_time_years,
        )
        return config.min_time_years
    return float(time_years)


def project_at(
    effects: ImmediateEffects,
    exposure: ExposureSet,
    time_years: float,
    config: ImpactConfig | None = None,
) -> TimelineSnapshot:
    """Project the state of the world *time_years* after impact.

    Negative offsets are the pre-impact approach. Offsets outside the
    configured window are clamped to its edges.

    Raises:
        ValidationError: if *time_years* is not finite.
    """
    config = config or ImpactConfig()
    t = _check_time(time_years, config)
    band = narrative_band(t)
    d = _drivers(effects, exposure, config)

    if t < 0:
        casualties = 0
        displaced = 0
        temperature = 0.0
        habitable = 100.0
        food = 100.0
    else:
        casualties = round(
            d.immediate_casualties
            + d.secondary_casualties * _saturate(t, config.secondary_timescale_years)
            + d.famine_casualties * famine_progress(t, config)
        )
        resettling = d.displaced_floor + (d.displaced_peak - d.displaced_floor) * math.exp(
            -t / config.resettlement_timescale_years
        )
        displaced = round(_saturate(t, 1 / config.evacuation_rate_per_year) * resettling)

        temperature = 0.0 - d.anomaly * _saturate(t, config.anomaly_onset_years) * math.exp(
            -t / config.anomaly_decay_years
        )
        food = _clamp_pct(
            100.0
            - d.food_loss
            * _saturate(t, config.food_onset_years)
            * math.exp(-t / config.food_recovery_years)
        )
        loss = d.permanent_loss_pct + (d.initial_loss_pct - d.permanent_loss_pct) * math.exp(
            -t / config.habitable_recovery_years
        )
        habitable = _clamp_pct(100.0 - loss)

    description = NARRATIVES[band].format(
        casualties=casualties,
        displaced=displaced,
        temperature=temperature,
        habitable=habitable,
        food=food,
        megatons=d.megatons,
        days=abs(t) * 365,
    )
    return TimelineSnapshot(
        time_years=t,
        label=format_time_label(t),
        band=band,
        casualties=max(0, casualties),
        displaced=max(0, displaced),
        temperature_anomaly_c=temperature,
        habitable_area_pct=habitable,
        food_production_index=food,
        description=description,
    )
