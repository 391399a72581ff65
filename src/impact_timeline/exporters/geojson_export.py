"""GeoJSON exporter for impact reports."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from impact_timeline.geo import circle_ring
from impact_timeline.models import (
    CountryExposure,
    ImpactReport,
    InfrastructureExposure,
)


def _point(latitude: float, longitude: float) -> dict[str, Any]:
    return {"type": "Point", "coordinates": [longitude, latitude]}


def _make_ground_zero_feature(report: ImpactReport) -> dict[str, Any]:
    """Create a GeoJSON Feature for the impact point."""
    effects = report.effects
    return {
        "type": "Feature",
        "geometry": _point(report.params.latitude, report.params.longitude),
        "properties": {
            "feature_type": "ground_zero",
            "asteroid": report.asteroid.name if report.asteroid else "",
            "country_code": report.ground_zero_country_code,
            "target_type": report.params.target_type,
            "tnt_megatons": effects.tnt_megatons,
            "crater_diameter_m": effects.crater.diameter_m,
            "seismic_magnitude": effects.seismic_magnitude,
            "tsunami_wave_height_m": (
                effects.tsunami.max_wave_height_m if effects.tsunami else None
            ),
        },
    }


def _effect_radii(report: ImpactReport) -> list[tuple[str, float]]:
    """(ring name, radius km) from the outermost to the innermost."""
    effects = report.effects
    blast = effects.airblast
    return [
        ("seismic_felt", effects.seismic_felt_radius_km),
        ("thermal", effects.thermal_radius_km),
        ("psi_1", blast.psi_1_km),
        ("psi_5", blast.psi_5_km),
        ("psi_10", blast.psi_10_km),
        ("psi_20", blast.psi_20_km),
        ("crater", effects.crater.diameter_m / 2000),
    ]


def _make_ring_feature(report: ImpactReport, name: str, radius_km: float) -> dict[str, Any]:
    """Create a GeoJSON Polygon approximating an effect radius."""
    return {
        "type": "Feature",
        "geometry": {
            "type": "Polygon",
            "coordinates": [
                circle_ring(report.params.latitude, report.params.longitude, radius_km),
            ],
        },
        "properties": {
            "feature_type": "effect_ring",
            "effect": name,
            "radius_km": round(radius_km, 3),
        },
    }


def _make_country_feature(country: CountryExposure) -> dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": _point(country.latitude, country.longitude),
        "properties": {
            "feature_type": "country",
            "name": country.name,
            "code": country.code,
            "tier": country.tier,
            "distance_km": country.distance_km,
            "population": country.population,
            "severity_fraction": country.severity_fraction,
            "estimated_casualties": country.estimated_casualties,
        },
    }


def _make_facility_feature(facility: InfrastructureExposure) -> dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": _point(facility.latitude, facility.longitude),
        "properties": {
            "feature_type": "infrastructure",
            "name": facility.name,
            "infrastructure_type": facility.type,
            "distance_km": facility.distance_km,
            "governing_radius_km": facility.governing_radius_km,
            "disrupted": facility.disrupted,
            "severity": facility.severity,
        },
    }


def export_geojson(
    report: ImpactReport,
    output_path: Path,
) -> Path:
    """Export an impact report as a GeoJSON FeatureCollection.

    Feature types:
    - "ground_zero": the impact point with headline effects
    - "effect_ring": a polygon per effect radius, outermost first
    - "country": exposed countries (tier other than "unaffected")
    - "infrastructure": disrupted facilities

    GeoJSON coordinates are [longitude, latitude] per RFC 7946.
    """
    features: list[dict[str, Any]] = [_make_ground_zero_feature(report)]

    for name, radius_km in _effect_radii(report):
        if radius_km > 0:
            features.append(_make_ring_feature(report, name, radius_km))

    exposed = [c for c in report.exposure.countries if c.tier != "unaffected"]
    features.extend(_make_country_feature(c) for c in exposed)

    disrupted = report.exposure.disrupted_infrastructure
    features.extend(_make_facility_feature(f) for f in disrupted)

    geojson = {
        "type": "FeatureCollection",
        "metadata": {
            "generated": datetime.now(tz=timezone.utc).isoformat(),
            "source": "impact-timeline",
            "country_count": len(exposed),
            "infrastructure_count": len(disrupted),
            "immediate_casualties": report.exposure.immediate_casualties,
            "economic_loss_usd": report.exposure.economic_loss.total_usd,
        },
        "features": features,
    }

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(geojson, f, indent=2, ensure_ascii=False)

    return output_path
