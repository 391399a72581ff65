"""Pipeline orchestrator: asteroid + location -> effects -> exposure -> timeline."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from impact_timeline.config import ImpactConfig
from impact_timeline.data.countries import BUILTIN_COUNTRIES
from impact_timeline.data.infrastructure import BUILTIN_INFRASTRUCTURE
from impact_timeline.effects import compute_immediate_effects, validate_parameters
from impact_timeline.exposure import aggregate_exposure
from impact_timeline.geo import reverse_geocode
from impact_timeline.models import (
    AsteroidSpec,
    CountryData,
    ImpactReport,
    InfrastructurePoint,
)
from impact_timeline.physics import impact_parameters_for
from impact_timeline.timeline import build_timeline

logger = logging.getLogger(__name__)


def run_simulation(
    asteroid: AsteroidSpec,
    latitude: float,
    longitude: float,
    config: ImpactConfig | None = None,
    countries: Iterable[CountryData] | None = None,
    infrastructure: Iterable[InfrastructurePoint] | None = None,
) -> ImpactReport:
    """Simulate *asteroid* striking (latitude, longitude).

    Steps:
    1. Resolve physical parameters (density from composition if needed)
    2. Validate and compute immediate effects
    3. Aggregate exposure over the world and infrastructure datasets
    4. Build the checkpoint timeline
    5. Label ground zero with its nearest country code

    Impact angle and target type come from *config*. The built-in datasets
    are used when *countries* or *infrastructure* is None.

    Raises:
        ValidationError: if the resulting parameters are invalid.
    """
    config = config or ImpactConfig()

    # Step 1: Resolve parameters
    params = impact_parameters_for(
        asteroid,
        latitude,
        longitude,
        impact_angle_deg=config.impact_angle_deg,
        target_type=config.target_type,
    )
    validate_parameters(params)
    logger.info(
        "Simulating %s (%.0f m, %.1f km/s, %.0f kg/m3) at (%.3f, %.3f), %s, %.0f deg",
        asteroid.name,
        params.asteroid_diameter_m,
        params.velocity_km_s,
        params.density_kg_m3,
        params.latitude,
        params.longitude,
        params.target_type,
        params.impact_angle_deg,
    )

    # Step 2: Immediate effects
    effects = compute_immediate_effects(params, config)
    logger.info(
        "Energy %.3g Mt, crater %.2f km, magnitude %.1f",
        effects.tnt_megatons,
        effects.crater.diameter_m / 1000,
        effects.seismic_magnitude,
    )

    # Step 3: Exposure
    exposure = aggregate_exposure(
        params.point,
        effects,
        BUILTIN_COUNTRIES if countries is None else countries,
        BUILTIN_INFRASTRUCTURE if infrastructure is None else infrastructure,
        config,
    )

    # Step 4: Timeline
    timeline = build_timeline(effects, exposure, config)
    logger.info(
        "Timeline: %d immediate casualties, %d at +10 years",
        timeline.t0.casualties,
        timeline.t10_years.casualties,
    )

    report = ImpactReport(
        params=params,
        effects=effects,
        exposure=exposure,
        timeline=timeline,
        asteroid=asteroid,
    )

    if exposure.skipped:
        report.warnings.append(
            f"{len(exposure.skipped)} records without a usable location were skipped: "
            + ", ".join(exposure.skipped)
        )

    # Step 5: Ground zero label
    if config.reverse_geocode:
        report.ground_zero_country_code = reverse_geocode(latitude, longitude)
        logger.info("Ground zero nearest country: %s", report.ground_zero_country_code or "-")

    return report
