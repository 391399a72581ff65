"""Physical property resolution: raw asteroid attributes to mass and energy."""

from __future__ import annotations

import logging
import math

from impact_timeline.errors import ValidationError
from impact_timeline.models import (
    AsteroidSpec,
    ImpactParameters,
    PhysicalProperties,
    TargetType,
)

logger = logging.getLogger(__name__)

# Bulk densities in kg/m^3.
COMPOSITION_DENSITY: dict[str, float] = {
    "stony": 3000.0,
    "iron": 7800.0,
    "metallic": 7800.0,
    "carbonaceous": 2000.0,
    "stony-iron": 5000.0,
    "basaltic": 2900.0,
    "default": 3000.0,
}


def resolve_density(composition: str, density_kg_m3: float | None = None) -> float:
    """Return the bulk density for an asteroid.

    An explicit density wins. Otherwise the composition is looked up in
    ``COMPOSITION_DENSITY``; unknown keys fall back to the ``default`` row
    with a warning so typos do not pass unnoticed.
    """
    if density_kg_m3 is not None:
        if not math.isfinite(density_kg_m3) or density_kg_m3 <= 0:
            raise ValidationError(f"Density must be positive, got {density_kg_m3}")
        return float(density_kg_m3)

    key = (composition or "default").strip().lower()
    if key not in COMPOSITION_DENSITY:
        logger.warning(
            "Unknown composition %r, using default density %.0f kg/m3",
            composition,
            COMPOSITION_DENSITY["default"],
        )
        key = "default"
    return COMPOSITION_DENSITY[key]


def _require_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{name} must be a positive finite number, got {value}")


def resolve_physical_properties(
    diameter_m: float,
    velocity_km_s: float,
    density_kg_m3: float | None = None,
    composition: str = "default",
) -> PhysicalProperties:
    """Compute mass (kg) and kinetic energy (J) of a spherical impactor.

    mass = rho * 4/3 * pi * (d/2)^3
    energy = 1/2 * mass * (v * 1000)^2
    """
    _require_positive("Diameter", diameter_m)
    _require_positive("Velocity", velocity_km_s)
    density = resolve_density(composition, density_kg_m3)

    radius = diameter_m / 2.0
    # Multiplication overflows to inf instead of raising like float ** does.
    mass = density * (4.0 / 3.0) * math.pi * radius * radius * radius
    velocity_m_s = velocity_km_s * 1000.0
    energy = 0.5 * mass * velocity_m_s * velocity_m_s
    return PhysicalProperties(mass_kg=mass, kinetic_energy_j=energy, density_kg_m3=density)


def resolve_asteroid(asteroid: AsteroidSpec) -> PhysicalProperties:
    """Resolve the physical properties of a catalog asteroid."""
    return resolve_physical_properties(
        asteroid.diameter_m,
        asteroid.velocity_km_s,
        density_kg_m3=asteroid.density_kg_m3,
        composition=asteroid.composition,
    )


def impact_parameters_for(
    asteroid: AsteroidSpec,
    latitude: float,
    longitude: float,
    impact_angle_deg: float = 45.0,
    target_type: TargetType = "land",
) -> ImpactParameters:
    """Build ImpactParameters for an asteroid striking the given location."""
    density = resolve_density(asteroid.composition, asteroid.density_kg_m3)
    return ImpactParameters(
        asteroid_diameter_m=asteroid.diameter_m,
        velocity_km_s=asteroid.velocity_km_s,
        density_kg_m3=density,
        impact_angle_deg=impact_angle_deg,
        target_type=target_type,
        latitude=latitude,
        longitude=longitude,
    )
