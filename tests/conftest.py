"""Shared fixtures for impact_timeline tests.

The synthetic world sits on the equator east of an impact at (0, 0), where
one degree of longitude is 111.19 km. For the 1 km reference impactor the
effect radii are roughly 63 km (20 psi), 93 km (10 psi), 148 km (5 psi),
380 km (1 psi) and 1644 km (thermal), so each country lands in a
different exposure tier.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from impact_timeline.config import ImpactConfig
from impact_timeline.effects import compute_immediate_effects
from impact_timeline.exposure import aggregate_exposure
from impact_timeline.models import (
    AsteroidSpec,
    CountryData,
    ExposureSet,
    GeoPoint,
    ImmediateEffects,
    ImpactParameters,
    ImpactReport,
    InfrastructurePoint,
)
from impact_timeline.timeline import build_timeline

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def default_config(tmp_path: Path) -> ImpactConfig:
    """Config with defaults, writing to tmp_path and without geocoding."""
    return ImpactConfig(output_file=tmp_path / "report.json", reverse_geocode=False)


@pytest.fixture
def reference_params() -> ImpactParameters:
    """1 km stony impactor at 20 km/s, 45 degrees, on land at (0, 0)."""
    return ImpactParameters(
        asteroid_diameter_m=1000.0,
        velocity_km_s=20.0,
        density_kg_m3=3000.0,
        impact_angle_deg=45.0,
        target_type="land",
        latitude=0.0,
        longitude=0.0,
    )


@pytest.fixture
def reference_asteroid() -> AsteroidSpec:
    return AsteroidSpec(
        id="ref_1km",
        name="Reference 1 km",
        diameter_m=1000.0,
        velocity_km_s=20.0,
        composition="stony",
        density_kg_m3=3000.0,
        threat_level="high",
    )


@pytest.fixture
def reference_effects(
    reference_params: ImpactParameters, default_config: ImpactConfig,
) -> ImmediateEffects:
    return compute_immediate_effects(reference_params, default_config)


@pytest.fixture
def sample_countries() -> list[CountryData]:
    """One country per exposure tier plus one without a centroid."""
    return [
        CountryData("Centralia", GeoPoint(0.0, 0.3), 1_000_000, 100.0, code="CE"),
        CountryData("Severia", GeoPoint(0.0, 0.7), 2_000_000, 1000.0, code="SV"),
        CountryData("Midland", GeoPoint(0.0, 1.0), 5_000_000, 500.0, code="MD"),
        CountryData("Farland", GeoPoint(0.0, 3.0), 10_000_000, 50.0, code="FL"),
        CountryData("Glowland", GeoPoint(0.0, 10.0), 20_000_000, 20.0, code="GL"),
        CountryData("Remotia", GeoPoint(0.0, 60.0), 50_000_000, 80.0, code="RM"),
        CountryData("Nowhere", None, 3_000_000, 10.0, code="NW"),
    ]


@pytest.fixture
def sample_infrastructure() -> list[InfrastructurePoint]:
    return [
        InfrastructurePoint("Central Grid", "power", GeoPoint(0.0, 0.05), 1200.0),
        InfrastructurePoint("Harbor", "transport", GeoPoint(0.0, 1.0), 40.0),
        InfrastructurePoint("Fort Edge", "military", GeoPoint(0.0, 1.0)),
        InfrastructurePoint("Far Relay", "communications", GeoPoint(0.0, 20.0)),
        InfrastructurePoint("Ghost Reservoir", "water", None),
    ]


@pytest.fixture
def reference_exposure(
    reference_effects: ImmediateEffects,
    sample_countries: list[CountryData],
    sample_infrastructure: list[InfrastructurePoint],
    default_config: ImpactConfig,
) -> ExposureSet:
    return aggregate_exposure(
        GeoPoint(0.0, 0.0),
        reference_effects,
        sample_countries,
        sample_infrastructure,
        default_config,
    )


@pytest.fixture
def empty_exposure() -> ExposureSet:
    return ExposureSet(impact_point=GeoPoint(0.0, 0.0))


@pytest.fixture
def sample_report(
    reference_params: ImpactParameters,
    reference_asteroid: AsteroidSpec,
    reference_effects: ImmediateEffects,
    reference_exposure: ExposureSet,
    default_config: ImpactConfig,
) -> ImpactReport:
    """Pre-built ImpactReport for exporter tests."""
    return ImpactReport(
        params=reference_params,
        effects=reference_effects,
        exposure=reference_exposure,
        timeline=build_timeline(reference_effects, reference_exposure, default_config),
        asteroid=reference_asteroid,
        ground_zero_country_code="CE",
        warnings=["1 records without a usable location were skipped: Nowhere"],
    )
