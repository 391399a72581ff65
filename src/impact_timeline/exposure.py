"""Geographic aggregation: exposure tiers for countries and infrastructure."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from impact_timeline.config import ImpactConfig
from impact_timeline.errors import DataUnavailableError
from impact_timeline.geo import disc_area_km2, haversine
from impact_timeline.models import (
    CountryData,
    CountryExposure,
    EconomicLoss,
    ExposureSet,
    ExposureTier,
    GeoPoint,
    ImmediateEffects,
    InfrastructureExposure,
    InfrastructurePoint,
)

logger = logging.getLogger(__name__)

# Which effect radius takes a facility of each type out of service.
GOVERNING_RADIUS: dict[str, str] = {
    "power": "thermal",
    "communications": "thermal",
    "transport": "psi_5",
    "water": "psi_5",
    "civilian": "psi_5",
    "military": "psi_10",
}

_MIN_INFRASTRUCTURE_SEVERITY = 0.1


def classify_tier(distance_km: float, effects: ImmediateEffects) -> ExposureTier:
    """Classify a distance from ground zero into an exposure tier."""
    blast = effects.airblast
    if distance_km <= blast.psi_20_km:
        return "destroyed"
    if distance_km <= blast.psi_10_km:
        return "severe"
    if distance_km <= blast.psi_5_km:
        return "moderate"
    if distance_km <= blast.psi_1_km:
        return "light"
    if distance_km <= effects.thermal_radius_km:
        return "thermal_only"
    return "unaffected"


def severity_fraction(
    tier: ExposureTier,
    population_density: float,
    config: ImpactConfig | None = None,
) -> float:
    """Fatality fraction for a tier, amplified by density but capped.

    Denser regions saturate faster: the amplification approaches
    ``1 + density_weight`` asymptotically and the result never exceeds
    ``severity_cap``.
    """
    config = config or ImpactConfig()
    base = config.tier_fatality.get(tier, 0.0)
    if base <= 0:
        return 0.0
    density = max(population_density, 0.0)
    modifier = 1.0 + config.density_weight * (1.0 - math.exp(-density / config.density_reference))
    return min(config.severity_cap, base * modifier)


def _locate(name: str, point: GeoPoint | None) -> GeoPoint:
    if point is None:
        raise DataUnavailableError(f"{name} has no location")
    if not (math.isfinite(point.latitude) and math.isfinite(point.longitude)):
        raise DataUnavailableError(f"{name} has a non-finite location")
    return point


def _governing_radius(facility_type: str, effects: ImmediateEffects) -> float:
    key = GOVERNING_RADIUS.get(facility_type, "psi_5")
    if key == "thermal":
        return effects.thermal_radius_km
    return getattr(effects.airblast, f"{key}_km")


def assess_country(
    country: CountryData,
    point: GeoPoint,
    effects: ImmediateEffects,
    config: ImpactConfig | None = None,
) -> CountryExposure:
    """Exposure of a single country, treated as a point at its centroid."""
    centroid = _locate(country.name, country.centroid)
    d = haversine(point.latitude, point.longitude, centroid.latitude, centroid.longitude)
    tier = classify_tier(d, effects)
    fraction = severity_fraction(tier, country.population_density, config)
    population = max(int(country.population), 0)
    return CountryExposure(
        name=country.name,
        code=country.code,
        latitude=centroid.latitude,
        longitude=centroid.longitude,
        distance_km=round(d, 1),
        tier=tier,
        population=population,
        severity_fraction=round(fraction, 4),
        estimated_casualties=int(population * fraction),
    )


def assess_facility(
    facility: InfrastructurePoint,
    point: GeoPoint,
    effects: ImmediateEffects,
) -> InfrastructureExposure:
    """Disruption state of a single facility.

    Inside the crater rim a facility is gone (severity 1.0). Within its
    governing radius severity falls linearly from 1.0 to 0.1 at the edge.
    """
    location = _locate(facility.name, facility.location)
    d = haversine(point.latitude, point.longitude, location.latitude, location.longitude)
    radius = _governing_radius(facility.type, effects)
    crater_radius_km = effects.crater.diameter_m / 2000

    if d <= crater_radius_km:
        severity = 1.0
    elif radius > 0 and d <= radius:
        severity = max(_MIN_INFRASTRUCTURE_SEVERITY, 1.0 - 0.9 * d / radius)
    else:
        severity = 0.0

    return InfrastructureExposure(
        name=facility.name,
        type=facility.type,
        latitude=location.latitude,
        longitude=location.longitude,
        distance_km=round(d, 1),
        governing_radius_km=round(radius, 1),
        disrupted=severity > 0,
        severity=round(severity, 3),
        capacity=facility.capacity,
    )


def estimate_economic_loss(
    effects: ImmediateEffects,
    casualties: int,
    facilities: Iterable[InfrastructureExposure] = (),
    config: ImpactConfig | None = None,
) -> EconomicLoss:
    """Direct and indirect economic loss of an impact.

    Direct loss is the value of lives lost, the built environment inside the
    5 psi radius, and disrupted facilities weighted by severity. Indirect
    loss is a fixed multiple of the direct loss. Components are scaled down
    together when the total exceeds ``max_economic_loss_usd``.
    """
    config = config or ImpactConfig()
    casualty = max(casualties, 0) * config.value_of_statistical_life_usd
    built = disc_area_km2(effects.airblast.psi_5_km) * config.infrastructure_value_per_km2_usd
    facility = sum(f.severity for f in facilities if f.disrupted) * config.facility_loss_usd
    direct = casualty + built + facility
    indirect = direct * config.indirect_loss_multiplier

    total = direct + indirect
    if total > config.max_economic_loss_usd:
        logger.warning(
            "Economic loss %.3g USD exceeds %.3g, scaling down",
            total,
            config.max_economic_loss_usd,
        )
        scale = config.max_economic_loss_usd / total
        casualty, built, facility, indirect = (
            casualty * scale, built * scale, facility * scale, indirect * scale,
        )
        total = config.max_economic_loss_usd

    return EconomicLoss(
        casualty_usd=casualty,
        infrastructure_usd=built,
        facility_usd=facility,
        indirect_usd=indirect,
        total_usd=total,
    )


def aggregate_exposure(
    point: GeoPoint,
    effects: ImmediateEffects,
    countries: Iterable[CountryData],
    infrastructure: Iterable[InfrastructurePoint] = (),
    config: ImpactConfig | None = None,
) -> ExposureSet:
    """Compute per-entity exposure around *point*.

    The datasets are read once into tuples so a concurrent refresh by the
    caller cannot produce a torn read. Records that cannot be placed are
    skipped and reported in ``ExposureSet.skipped``; the supplied records are
    never modified.
    """
    config = config or ImpactConfig()
    country_snapshot = tuple(countries)
    facility_snapshot = tuple(infrastructure)

    if not country_snapshot:
        logger.warning("No country records supplied; casualties will be zero")

    skipped: list[str] = []

    exposed_countries: list[CountryExposure] = []
    for country in country_snapshot:
        try:
            exposed_countries.append(assess_country(country, point, effects, config))
        except DataUnavailableError as exc:
            logger.warning("Skipping country: %s", exc)
            skipped.append(country.name)

    exposed_facilities: list[InfrastructureExposure] = []
    for facility in facility_snapshot:
        try:
            exposed_facilities.append(assess_facility(facility, point, effects))
        except DataUnavailableError as exc:
            logger.warning("Skipping facility: %s", exc)
            skipped.append(facility.name)

    exposed_countries.sort(key=lambda c: c.distance_km)
    exposed_facilities.sort(key=lambda f: f.distance_km)
    immediate = sum(c.estimated_casualties for c in exposed_countries)

    exposure = ExposureSet(
        impact_point=point,
        countries=tuple(exposed_countries),
        infrastructure=tuple(exposed_facilities),
        skipped=tuple(skipped),
        economic_loss=estimate_economic_loss(effects, immediate, exposed_facilities, config),
    )
    logger.info(
        "Exposure: %d countries, %d facilities (%d disrupted), %d skipped, %.3g USD loss",
        len(exposure.countries),
        len(exposure.infrastructure),
        len(exposure.disrupted_infrastructure),
        len(exposure.skipped),
        exposure.economic_loss.total_usd,
    )
    return exposure
