"""Tests for geographic aggregation."""

from __future__ import annotations

import logging
import math
from dataclasses import replace

import pytest

from impact_timeline.config import ImpactConfig
from impact_timeline.effects import compute_immediate_effects
from impact_timeline.exposure import (
    aggregate_exposure,
    assess_facility,
    classify_tier,
    estimate_economic_loss,
    severity_fraction,
)
from impact_timeline.models import CountryData, GeoPoint, InfrastructurePoint

ORIGIN = GeoPoint(0.0, 0.0)


class TestClassifyTier:
    def test_tier_boundaries(self, reference_effects):
        blast = reference_effects.airblast
        assert classify_tier(0.0, reference_effects) == "destroyed"
        assert classify_tier(blast.psi_20_km, reference_effects) == "destroyed"
        assert classify_tier(blast.psi_20_km + 0.1, reference_effects) == "severe"
        assert classify_tier(blast.psi_5_km, reference_effects) == "moderate"
        assert classify_tier(blast.psi_1_km, reference_effects) == "light"
        assert classify_tier(reference_effects.thermal_radius_km, reference_effects) == "thermal_only"
        assert classify_tier(reference_effects.thermal_radius_km + 1, reference_effects) == "unaffected"


class TestSeverityFraction:
    def test_unaffected_is_zero(self):
        assert severity_fraction("unaffected", 10_000.0) == 0.0

    def test_density_amplifies(self):
        sparse = severity_fraction("moderate", 1.0)
        dense = severity_fraction("moderate", 5000.0)
        assert dense > sparse >= 0.15

    def test_amplification_saturates(self):
        assert severity_fraction("light", 1e9) == pytest.approx(0.02 * 1.5)

    def test_capped(self):
        assert severity_fraction("destroyed", 1e6) == 0.95

    def test_negative_density_treated_as_zero(self):
        assert severity_fraction("severe", -50.0) == pytest.approx(0.5)


class TestAggregateExposure:
    def test_each_country_in_expected_tier(self, reference_exposure):
        tiers = {c.name: c.tier for c in reference_exposure.countries}
        assert tiers == {
            "Centralia": "destroyed",
            "Severia": "severe",
            "Midland": "moderate",
            "Farland": "light",
            "Glowland": "thermal_only",
            "Remotia": "unaffected",
        }

    def test_missing_centroid_is_skipped(self, reference_exposure):
        assert "Nowhere" in reference_exposure.skipped
        assert "Nowhere" not in {c.name for c in reference_exposure.countries}

    def test_sorted_by_distance(self, reference_exposure):
        distances = [c.distance_km for c in reference_exposure.countries]
        assert distances == sorted(distances)

    def test_casualties_follow_severity(self, reference_exposure):
        for c in reference_exposure.countries:
            expected = c.population * c.severity_fraction
            # severity_fraction is reported rounded to 4 decimals
            assert abs(c.estimated_casualties - expected) <= c.population * 1e-4 + 1
        remote = next(c for c in reference_exposure.countries if c.name == "Remotia")
        assert remote.estimated_casualties == 0

    def test_immediate_casualties_is_sum(self, reference_exposure):
        assert reference_exposure.immediate_casualties == sum(
            c.estimated_casualties for c in reference_exposure.countries
        )
        assert reference_exposure.immediate_casualties > 0

    def test_population_in_tiers(self, reference_exposure):
        assert reference_exposure.population_in("severe", "moderate") == 7_000_000
        assert reference_exposure.population_in("destroyed") == 1_000_000

    def test_empty_dataset_warns(self, reference_effects, caplog):
        with caplog.at_level(logging.WARNING, logger="impact_timeline.exposure"):
            exposure = aggregate_exposure(ORIGIN, reference_effects, [])
        assert exposure.countries == ()
        assert exposure.immediate_casualties == 0
        assert "No country records" in caplog.text

    def test_non_finite_centroid_skipped(self, reference_effects):
        countries = [
            CountryData("Broken", GeoPoint(float("nan"), 0.0), 100, 1.0),
            CountryData("Fine", GeoPoint(0.0, 0.1), 100, 1.0),
        ]
        exposure = aggregate_exposure(ORIGIN, reference_effects, countries)
        assert exposure.skipped == ("Broken",)
        assert [c.name for c in exposure.countries] == ["Fine"]

    def test_inputs_not_mutated(self, reference_effects, sample_countries):
        before = list(sample_countries)
        aggregate_exposure(ORIGIN, reference_effects, sample_countries)
        assert sample_countries == before

    def test_accepts_generators(self, reference_effects, sample_countries):
        exposure = aggregate_exposure(ORIGIN, reference_effects, (c for c in sample_countries))
        assert len(exposure.countries) == 6


class TestInfrastructure:
    def _by_name(self, exposure):
        return {f.name: f for f in exposure.infrastructure}

    def test_inside_crater_fully_destroyed(self, reference_exposure):
        grid = self._by_name(reference_exposure)["Central Grid"]
        assert grid.severity == 1.0
        assert grid.disrupted

    def test_transport_uses_five_psi(self, reference_exposure, reference_effects):
        harbor = self._by_name(reference_exposure)["Harbor"]
        assert harbor.governing_radius_km == pytest.approx(reference_effects.airblast.psi_5_km, abs=0.05)
        assert harbor.disrupted
        assert 0.1 <= harbor.severity < 1.0

    def test_military_uses_ten_psi(self, reference_exposure):
        fort = self._by_name(reference_exposure)["Fort Edge"]
        assert not fort.disrupted
        assert fort.severity == 0.0

    def test_far_facility_untouched(self, reference_exposure):
        relay = self._by_name(reference_exposure)["Far Relay"]
        assert not relay.disrupted

    def test_disrupted_subset(self, reference_exposure):
        names = {f.name for f in reference_exposure.disrupted_infrastructure}
        assert names == {"Central Grid", "Harbor"}

    def test_missing_location_skipped(self, reference_exposure):
        assert "Ghost Reservoir" in reference_exposure.skipped

    def test_power_uses_thermal_radius(self, reference_effects):
        plant = InfrastructurePoint("Plant", "power", GeoPoint(0.0, 10.0))
        result = assess_facility(plant, ORIGIN, reference_effects)
        assert result.disrupted
        assert result.governing_radius_km == pytest.approx(reference_effects.thermal_radius_km, abs=0.05)


class TestEconomicLoss:
    def test_components_sum_to_total(self, reference_exposure):
        loss = reference_exposure.economic_loss
        parts = loss.casualty_usd + loss.infrastructure_usd + loss.facility_usd + loss.indirect_usd
        assert loss.total_usd == pytest.approx(parts)
        assert loss.total_usd > 0

    def test_casualty_component(self, reference_exposure):
        loss = reference_exposure.economic_loss
        assert loss.casualty_usd == pytest.approx(reference_exposure.immediate_casualties * 7.5e6)

    def test_built_environment_inside_five_psi(self, reference_effects, reference_exposure):
        radius = reference_effects.airblast.psi_5_km
        expected = math.pi * radius * radius * 1.0e7
        assert reference_exposure.economic_loss.infrastructure_usd == pytest.approx(expected)

    def test_facilities_weighted_by_severity(self, reference_exposure):
        severity = sum(f.severity for f in reference_exposure.disrupted_infrastructure)
        assert reference_exposure.economic_loss.facility_usd == pytest.approx(severity * 1.0e9)

    def test_indirect_is_half_of_direct(self, reference_exposure):
        loss = reference_exposure.economic_loss
        direct = loss.casualty_usd + loss.infrastructure_usd + loss.facility_usd
        assert loss.indirect_usd == pytest.approx(0.5 * direct)

    def test_unpopulated_impact_still_costs(self, reference_effects):
        exposure = aggregate_exposure(GeoPoint(0.0, 0.0), reference_effects, [])
        loss = exposure.economic_loss
        assert loss.casualty_usd == 0
        assert loss.facility_usd == 0
        assert loss.total_usd == pytest.approx(1.5 * loss.infrastructure_usd)

    def test_constants_come_from_config(self, reference_effects):
        config = ImpactConfig(
            value_of_statistical_life_usd=1.0,
            infrastructure_value_per_km2_usd=0.0,
            indirect_loss_multiplier=0.0,
        )
        assert estimate_economic_loss(reference_effects, 100, config=config).total_usd == 100.0

    def test_capped_for_planetary_impact(self, reference_params, caplog):
        effects = compute_immediate_effects(replace(reference_params, asteroid_diameter_m=1e110))
        with caplog.at_level(logging.WARNING, logger="impact_timeline.exposure"):
            loss = estimate_economic_loss(effects, 8_000_000_000)
        assert loss.total_usd == 4.5e14
        parts = loss.casualty_usd + loss.infrastructure_usd + loss.facility_usd + loss.indirect_usd
        assert parts == pytest.approx(loss.total_usd)
        assert "scaling down" in caplog.text
