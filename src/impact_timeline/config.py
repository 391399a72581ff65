"""Configuration model for the impact effects and timeline engine."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from impact_timeline.models import TargetType

OutputFormat = Literal["json", "csv", "markdown", "geojson"]


def _default_tier_fatality() -> dict[str, float]:
    return {
        "destroyed": 0.9,
        "severe": 0.5,
        "moderate": 0.15,
        "light": 0.02,
        "thermal_only": 0.005,
        "unaffected": 0.0,
    }


class ImpactConfig(BaseSettings):
    """Every tunable constant of the engine, plus run options.

    The scaling coefficients are empirical calibration values, not derived
    constants; see ``impact_timeline.calibration`` for how they compare with
    reference events.

    Values can be set via constructor arguments, environment variables
    prefixed with IMPACT_TIMELINE_, or defaults.
    """

    model_config = {"env_prefix": "IMPACT_TIMELINE_", "frozen": True}

    # -- Immediate effects --
    crater_coefficient: float = Field(
        default=0.002, gt=0.0,
        description="Crater diameter (m) per cube root of coupled energy (J).",
    )
    crater_depth_ratio: float = Field(
        default=0.2, gt=0.0, le=1.0, description="Simple-crater depth/diameter ratio.",
    )
    optimal_angle_deg: float = Field(
        default=45.0, gt=0.0, le=90.0,
        description="Impact angle at or above which energy couples fully.",
    )
    min_impact_angle_deg: float = Field(
        default=1.0, gt=0.0, le=90.0,
        description="Substituted for degenerate (zero/negative) angles.",
    )
    target_density_kg_m3: float = Field(
        default=2500.0, gt=0.0, description="Target rock density for ejecta mass.",
    )
    airblast_20psi_km: float = Field(
        default=1.5, gt=0.0, description="20 psi radius (km) per Mt^(1/3).",
    )
    airblast_10psi_km: float = Field(
        default=2.2, gt=0.0, description="10 psi radius (km) per Mt^(1/3).",
    )
    airblast_5psi_km: float = Field(
        default=3.5, gt=0.0, description="5 psi radius (km) per Mt^(1/3).",
    )
    airblast_1psi_km: float = Field(
        default=9.0, gt=0.0, description="1 psi radius (km) per Mt^(1/3).",
    )
    thermal_coefficient_km: float = Field(
        default=6.0, gt=0.0, description="Thermal radius (km) per Mt^(1/2).",
    )
    seismic_offset: float = Field(
        default=5.87, description="M = 2/3 log10(E) - offset.",
    )
    max_seismic_magnitude: float = Field(
        default=10.0, gt=0.0, description="Upper clamp for seismic magnitude.",
    )
    water_depth_m: float = Field(
        default=4000.0, gt=0.0, description="Assumed ocean depth at the impact point.",
    )
    tsunami_cavity_ratio: float = Field(
        default=1 / 14.1, gt=0.0,
        description="Initial wave amplitude as a fraction of crater diameter.",
    )
    coastline_base_km: float = Field(
        default=100.0, ge=0.0, description="Coastline affected by any tsunami (km).",
    )
    coastline_per_meter_km: float = Field(
        default=10.0, ge=0.0, description="Extra coastline (km) per metre of wave height.",
    )
    max_coastline_km: float = Field(
        default=10000.0, gt=0.0, description="Upper bound on affected coastline (km).",
    )
    max_surface_radius_km: float = Field(
        default=20015.0, gt=0.0, description="Half the Earth's circumference (km).",
    )
    max_crater_diameter_m: float = Field(
        default=12_742_000.0, gt=0.0, description="Earth's diameter (m).",
    )

    # -- Economic loss --
    value_of_statistical_life_usd: float = Field(
        default=7.5e6, ge=0.0, description="Economic value assigned to each immediate death.",
    )
    infrastructure_value_per_km2_usd: float = Field(
        default=1.0e7, ge=0.0,
        description="Built-environment loss (USD) per km2 inside the 5 psi radius.",
    )
    facility_loss_usd: float = Field(
        default=1.0e9, ge=0.0,
        description="Replacement cost of a fully destroyed facility (scaled by severity).",
    )
    indirect_loss_multiplier: float = Field(
        default=0.5, ge=0.0,
        description="Business interruption and supply-chain loss per dollar of direct loss.",
    )
    max_economic_loss_usd: float = Field(
        default=4.5e14, gt=0.0, description="Upper bound on the loss estimate (global wealth).",
    )

    # -- Geographic aggregation --
    tier_fatality: dict[str, float] = Field(
        default_factory=_default_tier_fatality,
        description="Fatality fraction per exposure tier.",
    )
    density_reference: float = Field(
        default=500.0, gt=0.0,
        description="Population density (per km2) at which saturation is ~63%.",
    )
    density_weight: float = Field(
        default=0.5, ge=0.0, description="Maximum density amplification of fatality.",
    )
    severity_cap: float = Field(
        default=0.95, gt=0.0, le=1.0, description="Cap on any country's fatality fraction.",
    )

    # -- Temporal projection --
    min_time_years: float = Field(default=-0.5, description="Earliest projected offset.")
    max_time_years: float = Field(default=50.0, gt=0.0, description="Latest projected offset.")
    secondary_casualty_fraction: float = Field(
        default=0.05, ge=0.0, le=1.0,
        description="Secondary deaths as a fraction of severe+moderate population.",
    )
    secondary_timescale_years: float = Field(
        default=2 / 365, gt=0.0, description="Time constant of secondary casualties.",
    )
    famine_fraction: float = Field(
        default=0.05, ge=0.0, le=1.0,
        description="Famine deaths among survivors at total food loss.",
    )
    famine_onset_years: float = Field(
        default=0.25, ge=1 / 52,
        description="Delay before famine deaths begin (harvest failure, at least a week).",
    )
    evacuation_fraction: float = Field(
        default=0.8, ge=0.0, le=1.0,
        description="Peak displaced as a fraction of severe+moderate population.",
    )
    evacuation_rate_per_year: float = Field(
        default=182.5, gt=0.0, description="Saturation rate of the evacuation ramp.",
    )
    permanent_displacement_fraction: float = Field(
        default=0.25, ge=0.0, le=1.0,
        description="Permanently displaced as a fraction of destroyed-zone population.",
    )
    resettlement_timescale_years: float = Field(
        default=3.0, gt=0.0, description="Time constant of resettlement.",
    )
    aerosol_fraction: float = Field(
        default=0.01, ge=0.0, le=1.0,
        description="Fraction of ejecta mass lofted as stratospheric aerosol.",
    )
    water_aerosol_multiplier: float = Field(
        default=3.0, ge=1.0, description="Extra aerosol from ocean impacts.",
    )
    anomaly_per_decade_c: float = Field(
        default=2.0, ge=0.0, description="Cooling (C) per decade of aerosol Tg.",
    )
    max_anomaly_c: float = Field(
        default=15.0, gt=0.0, description="Hard ceiling on cooling magnitude (C).",
    )
    anomaly_onset_years: float = Field(
        default=0.04, gt=0.0, description="Time constant of the initial cooling.",
    )
    anomaly_decay_years: float = Field(
        default=3.0, gt=0.0, description="Time constant of climate relaxation.",
    )
    food_loss_per_degree: float = Field(
        default=8.0, ge=0.0, description="Food production points lost per C of cooling.",
    )
    food_onset_years: float = Field(
        default=0.25, gt=0.0, description="Lag of food production behind cooling.",
    )
    food_recovery_years: float = Field(
        default=4.0, gt=0.0, description="Time constant of agricultural recovery.",
    )
    reference_area_km2: float = Field(
        default=148_940_000.0, gt=0.0, description="Reference habitable area (km2).",
    )
    habitable_recovery_years: float = Field(
        default=5.0, gt=0.0, description="Time constant of habitable area recovery.",
    )
    min_permanent_loss_pct: float = Field(
        default=1e-9, gt=0.0,
        description="Smallest permanent habitable loss once casualties occurred.",
    )

    # -- Run options --
    impact_angle_deg: float = Field(
        default=45.0, gt=0.0, le=90.0, description="Default impact angle (degrees).",
    )
    target_type: TargetType = Field(default="land", description="Default target medium.")
    output_file: Path = Field(
        default=Path("impact_report.json"), description="Output file path.",
    )
    output_format: OutputFormat = Field(
        default="json", description="Output format: json, csv, markdown, or geojson.",
    )
    request_timeout: int = Field(
        default=60, ge=5, le=300, description="HTTP request timeout in seconds.",
    )
    cache_enabled: bool = Field(
        default=True, description="Enable disk caching for remote datasets.",
    )
    reverse_geocode: bool = Field(
        default=True, description="Label ground zero with its nearest country code.",
    )
    catalog_source: str | None = Field(
        default=None, description="Asteroid catalog JSON path or URL (built-in if unset).",
    )
    countries_source: str | None = Field(
        default=None, description="Country dataset CSV path or URL (built-in if unset).",
    )
    infrastructure_source: str | None = Field(
        default=None, description="Infrastructure CSV path or URL (built-in if unset).",
    )

    @model_validator(mode="after")
    def _check_ordering(self) -> ImpactConfig:
        coefficients = [
            self.airblast_20psi_km,
            self.airblast_10psi_km,
            self.airblast_5psi_km,
            self.airblast_1psi_km,
        ]
        if coefficients != sorted(set(coefficients)):
            raise ValueError("Airblast coefficients must increase strictly from 20 to 1 psi")
        if self.min_time_years >= 0:
            raise ValueError("min_time_years must be negative (pre-impact approach)")
        return self
