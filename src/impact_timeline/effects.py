"""Immediate impact effects: crater, airblast, thermal, seismic and tsunami.

Scaling laws follow the structure of Collins et al. (2005), "Earth Impact
Effects Program", with proportionality constants taken from ``ImpactConfig``.
"""

from __future__ import annotations

import logging
import math
import sys

from impact_timeline.config import ImpactConfig
from impact_timeline.errors import ValidationError
from impact_timeline.geo import felt_radius_km
from impact_timeline.models import (
    AirblastRadii,
    Crater,
    ImmediateEffects,
    ImpactParameters,
    Tsunami,
)
from impact_timeline.physics import resolve_physical_properties

logger = logging.getLogger(__name__)

JOULES_PER_MEGATON = 4.184e15


def validate_parameters(params: ImpactParameters) -> None:
    """Raise ValidationError if *params* violate a domain constraint."""
    for name, value in (
        ("asteroid_diameter_m", params.asteroid_diameter_m),
        ("velocity_km_s", params.velocity_km_s),
        ("density_kg_m3", params.density_kg_m3),
    ):
        if not math.isfinite(value) or value <= 0:
            raise ValidationError(f"{name} must be a positive finite number, got {value}")

    angle = params.impact_angle_deg
    if not math.isfinite(angle) or not 0 < angle <= 90:
        raise ValidationError(f"impact_angle_deg must be in (0, 90], got {angle}")

    if params.target_type not in ("land", "water"):
        raise ValidationError(f"target_type must be 'land' or 'water', got {params.target_type!r}")

    if not math.isfinite(params.latitude) or not -90 <= params.latitude <= 90:
        raise ValidationError(f"latitude must be in [-90, 90], got {params.latitude}")
    if not math.isfinite(params.longitude) or not -180 <= params.longitude <= 180:
        raise ValidationError(f"longitude must be in [-180, 180], got {params.longitude}")


def _bounded(name: str, value: float, upper: float = sys.float_info.max) -> float:
    """Substitute the nearest valid boundary for a degenerate value.

    NaN maps to zero, infinities and values above *upper* map to *upper*,
    negatives map to zero. Substitutions are logged, never raised.
    """
    if math.isnan(value):
        logger.warning("%s is NaN, substituting 0", name)
        return 0.0
    if value > upper:
        logger.warning("%s = %g exceeds %g, clamping", name, value, upper)
        return upper
    if value < 0:
        logger.warning("%s = %g is negative, substituting 0", name, value)
        return 0.0
    return value


def angle_efficiency(impact_angle_deg: float, config: ImpactConfig | None = None) -> float:
    """Fraction of kinetic energy coupled into the target.

    1.0 at or above the optimal angle (45 degrees); below it the coupled
    energy falls off with sin(angle). Degenerate angles are replaced by the
    minimum valid angle.
    """
    config = config or ImpactConfig()
    angle = impact_angle_deg
    if not math.isfinite(angle) or angle <= 0:
        logger.warning(
            "Degenerate impact angle %s, substituting %.1f degrees",
            impact_angle_deg,
            config.min_impact_angle_deg,
        )
        angle = config.min_impact_angle_deg
    angle = min(angle, 90.0)
    ratio = math.sin(math.radians(angle)) / math.sin(math.radians(config.optimal_angle_deg))
    return min(1.0, ratio)


def crater_dimensions(
    kinetic_energy_j: float,
    impact_angle_deg: float,
    config: ImpactConfig | None = None,
) -> Crater:
    """Simple-crater diameter, depth and volume from cube-root energy scaling."""
    config = config or ImpactConfig()
    coupled = kinetic_energy_j * angle_efficiency(impact_angle_deg, config)
    diameter = _bounded(
        "crater diameter",
        config.crater_coefficient * math.pow(coupled, 1 / 3),
        upper=config.max_crater_diameter_m,
    )
    depth = diameter * config.crater_depth_ratio
    radius = diameter / 2
    volume = math.pi * radius * radius * depth / 3
    return Crater(diameter_m=diameter, depth_m=depth, volume_m3=volume)


def airblast_radii(tnt_megatons: float, config: ImpactConfig | None = None) -> AirblastRadii:
    """Overpressure radii (km) from cube-root blast scaling.

    The shared yield factor is capped so the 1 psi radius never exceeds the
    farthest surface distance and the thresholds stay strictly ordered.
    """
    config = config or ImpactConfig()
    limit = config.max_surface_radius_km / config.airblast_1psi_km
    yield_factor = _bounded("blast yield factor", math.pow(tnt_megatons, 1 / 3), limit)
    return AirblastRadii(
        psi_20_km=config.airblast_20psi_km * yield_factor,
        psi_10_km=config.airblast_10psi_km * yield_factor,
        psi_5_km=config.airblast_5psi_km * yield_factor,
        psi_1_km=config.airblast_1psi_km * yield_factor,
    )


def thermal_radius(tnt_megatons: float, config: ImpactConfig | None = None) -> float:
    """Third-degree burn radius (km); inverse-square falloff gives sqrt scaling."""
    config = config or ImpactConfig()
    return _bounded(
        "thermal radius",
        config.thermal_coefficient_km * math.sqrt(tnt_megatons),
        config.max_surface_radius_km,
    )


def seismic_magnitude(kinetic_energy_j: float, config: ImpactConfig | None = None) -> float:
    """Richter-like magnitude, M = 2/3 log10(E) - offset, clamped to [0, max]."""
    config = config or ImpactConfig()
    if kinetic_energy_j <= 0:
        return 0.0
    magnitude = (2 / 3) * math.log10(kinetic_energy_j) - config.seismic_offset
    return max(0.0, min(magnitude, config.max_seismic_magnitude))


def tsunami_effects(crater: Crater, config: ImpactConfig | None = None) -> Tsunami:
    """Wave height at the cavity rim and the length of coastline it reaches.

    The initial amplitude scales with the transient cavity and cannot exceed
    the water depth.
    """
    config = config or ImpactConfig()
    wave_height = min(crater.diameter_m * config.tsunami_cavity_ratio, config.water_depth_m)
    coastline = min(
        config.max_coastline_km,
        config.coastline_base_km + config.coastline_per_meter_km * wave_height,
    )
    return Tsunami(max_wave_height_m=wave_height, affected_coastline_km=coastline)


def compute_immediate_effects(
    params: ImpactParameters,
    config: ImpactConfig | None = None,
) -> ImmediateEffects:
    """Compute every immediate effect of an impact.

    Raises:
        ValidationError: if *params* violate a domain constraint.
    """
    validate_parameters(params)
    config = config or ImpactConfig()

    props = resolve_physical_properties(
        params.asteroid_diameter_m,
        params.velocity_km_s,
        density_kg_m3=params.density_kg_m3,
    )
    mass = _bounded("mass", props.mass_kg)
    energy = _bounded("kinetic energy", props.kinetic_energy_j)
    tnt = energy / JOULES_PER_MEGATON

    crater = crater_dimensions(energy, params.impact_angle_deg, config)
    magnitude = seismic_magnitude(energy, config)
    ejecta_mass = _bounded("ejecta mass", crater.volume_m3 * config.target_density_kg_m3)

    tsunami = tsunami_effects(crater, config) if params.target_type == "water" else None

    effects = ImmediateEffects(
        params=params,
        mass_kg=mass,
        kinetic_energy_j=energy,
        tnt_megatons=tnt,
        crater=crater,
        airblast=airblast_radii(tnt, config),
        thermal_radius_km=thermal_radius(tnt, config),
        seismic_magnitude=magnitude,
        seismic_felt_radius_km=felt_radius_km(magnitude),
        ejecta_mass_kg=ejecta_mass,
        tsunami=tsunami,
    )
    logger.debug(
        "Impact at (%.3f, %.3f): %.3g Mt, crater %.0f m, M%.1f",
        params.latitude,
        params.longitude,
        tnt,
        crater.diameter_m,
        magnitude,
    )
    return effects
