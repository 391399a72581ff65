"""Data models for the impact effects and timeline engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Composition = Literal[
    "stony", "iron", "metallic", "carbonaceous", "stony-iron", "basaltic", "default",
]
TargetType = Literal["land", "water"]
ExposureTier = Literal[
    "destroyed", "severe", "moderate", "light", "thermal_only", "unaffected",
]
InfrastructureType = Literal[
    "power", "water", "transport", "communications", "military", "civilian",
]
NarrativeBand = Literal[
    "approach", "impact", "hours", "day", "weeks", "months", "year", "decade",
]



@dataclass(frozen=True)
class GeoPoint:
    """A point on the Earth's surface in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class AsteroidSpec:
    """An asteroid from the catalog, as selected by the user."""

    id: str
    name: str
    diameter_m: float
    velocity_km_s: float
    composition: str = "default"
    density_kg_m3: float | None = None
    threat_level: str = "unknown"
    description: str = ""


@dataclass(frozen=True)
class ImpactParameters:
    """Everything the engine needs to compute an impact."""

    asteroid_diameter_m: float
    velocity_km_s: float
    density_kg_m3: float
    impact_angle_deg: float = 45.0
    target_type: TargetType = "land"
    latitude: float = 0.0
    longitude: float = 0.0

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)


@dataclass(frozen=True)
class PhysicalProperties:
    """Mass and kinetic energy resolved from raw asteroid attributes."""

    mass_kg: float
    kinetic_energy_j: float
    density_kg_m3: float


@dataclass(frozen=True)
class Crater:
    diameter_m: float
    depth_m: float
    volume_m3: float


@dataclass(frozen=True)
class AirblastRadii:
    """Ground distance (km) at which peak overpressure exceeds each threshold."""

    psi_20_km: float
    psi_10_km: float
    psi_5_km: float
    psi_1_km: float


@dataclass(frozen=True)
class Tsunami:
    max_wave_height_m: float
    affected_coastline_km: float


@dataclass(frozen=True)
class ImmediateEffects:
    """Effects at the instant of impact. Derived, read-only."""

    params: ImpactParameters
    mass_kg: float
    kinetic_energy_j: float
    tnt_megatons: float
    crater: Crater
    airblast: AirblastRadii
    thermal_radius_km: float
    seismic_magnitude: float
    seismic_felt_radius_km: float
    ejecta_mass_kg: float
    tsunami: Tsunami | None = None


@dataclass(frozen=True)
class CountryData:
    """A country record from the externally owned world dataset."""

    name: str
    centroid: GeoPoint | None
    population: int
    population_density: float
    code: str = ""


@dataclass(frozen=True)
class InfrastructurePoint:
    """A facility from the externally owned infrastructure dataset."""

    name: str
    type: InfrastructureType
    location: GeoPoint | None
    capacity: float = 0.0


@dataclass(frozen=True)
class CountryExposure:
    """A country's exposure tier and estimated immediate casualties."""

    name: str
    code: str
    latitude: float
    longitude: float
    distance_km: float
    tier: ExposureTier
    population: int
    severity_fraction: float
    estimated_casualties: int


@dataclass(frozen=True)
class InfrastructureExposure:
    """A facility's disruption state at the instant of impact."""

    name: str
    type: InfrastructureType
    latitude: float
    longitude: float
    distance_km: float
    governing_radius_km: float
    disrupted: bool
    severity: float
    capacity: float = 0.0


@dataclass(frozen=True)
class EconomicLoss:
    """Estimated economic loss (USD) at the instant of impact, by component."""

    casualty_usd: float = 0.0
    infrastructure_usd: float = 0.0
    facility_usd: float = 0.0
    indirect_usd: float = 0.0
    total_usd: float = 0.0


@dataclass(frozen=True)
class ExposureSet:
    """Per-entity exposure around an impact point."""

    impact_point: GeoPoint
    countries: tuple[CountryExposure, ...] = ()
    infrastructure: tuple[InfrastructureExposure, ...] = ()
    skipped: tuple[str, ...] = ()
    economic_loss: EconomicLoss = field(default_factory=EconomicLoss)

    @property
    def immediate_casualties(self) -> int:
        return sum(c.estimated_casualties for c in self.countries)

    @property
    def total_population(self) -> int:
        return sum(c.population for c in self.countries)

    def population_in(self, *tiers: ExposureTier) -> int:
        """Total population of countries classified into any of *tiers*."""
        return sum(c.population for c in self.countries if c.tier in tiers)

    @property
    def disrupted_infrastructure(self) -> tuple[InfrastructureExposure, ...]:
        return tuple(i for i in self.infrastructure if i.disrupted)


@dataclass(frozen=True)
class TimelineSnapshot:
    """State of the world at a single time offset. Never mutated."""

    time_years: float
    label: str
    band: NarrativeBand
    casualties: int
    displaced: int
    temperature_anomaly_c: float
    habitable_area_pct: float
    food_production_index: float
    description: str


@dataclass(frozen=True)
class Timeline:
    """The canonical checkpoints, plus the pre-impact approach."""

    approach: TimelineSnapshot
    t0: TimelineSnapshot
    t1_hour: TimelineSnapshot
    t24_hours: TimelineSnapshot
    t1_week: TimelineSnapshot
    t1_month: TimelineSnapshot
    t1_year: TimelineSnapshot
    t10_years: TimelineSnapshot

    def checkpoints(self) -> list[tuple[str, TimelineSnapshot]]:
        """The seven post-impact checkpoints in chronological order."""
        return [
            ("t0", self.t0),
            ("t1_hour", self.t1_hour),
            ("t24_hours", self.t24_hours),
            ("t1_week", self.t1_week),
            ("t1_month", self.t1_month),
            ("t1_year", self.t1_year),
            ("t10_years", self.t10_years),
        ]


@dataclass
class ImpactReport:
    """Complete result of one simulation run, as handed to the presentation layer."""

    params: ImpactParameters
    effects: ImmediateEffects
    exposure: ExposureSet
    timeline: Timeline
    asteroid: AsteroidSpec | None = None
    ground_zero_country_code: str = ""
    warnings: list[str] = field(default_factory=list)
