"""Tests for the temporal projector."""

from __future__ import annotations

import logging
import math
from dataclasses import replace

import pytest

from impact_timeline.config import ImpactConfig
from impact_timeline.effects import compute_immediate_effects
from impact_timeline.errors import ValidationError
from impact_timeline.exposure import aggregate_exposure
from impact_timeline.models import GeoPoint
from impact_timeline.projection import (
    DAY,
    HOUR,
    MONTH,
    WEEK,
    anomaly_ceiling,
    famine_progress,
    format_time_label,
    narrative_band,
    project_at,
)

NUMERIC_FIELDS = (
    "casualties",
    "displaced",
    "temperature_anomaly_c",
    "habitable_area_pct",
    "food_production_index",
)


class TestApproach:
    @pytest.mark.parametrize("t", [-0.5, -0.25, -1e-6])
    def test_pre_impact_is_baseline(self, reference_effects, reference_exposure, t):
        snap = project_at(reference_effects, reference_exposure, t)
        assert snap.casualties == 0
        assert snap.displaced == 0
        assert snap.habitable_area_pct == 100.0
        assert snap.food_production_index == 100.0
        assert snap.temperature_anomaly_c == 0.0
        assert snap.band == "approach"

    def test_approach_label(self, reference_effects, reference_exposure):
        assert project_at(reference_effects, reference_exposure, -0.5).label == "t-6mo"


class TestImpactInstant:
    def test_casualties_step_to_immediate(self, reference_effects, reference_exposure):
        snap = project_at(reference_effects, reference_exposure, 0.0)
        assert snap.casualties == reference_exposure.immediate_casualties
        assert snap.displaced == 0
        assert snap.habitable_area_pct < 100.0
        assert snap.band == "impact"
        assert snap.label == "t0"

    def test_step_only_at_zero(self, reference_effects, reference_exposure):
        before = project_at(reference_effects, reference_exposure, -1e-9)
        at = project_at(reference_effects, reference_exposure, 0.0)
        assert before.casualties == 0
        assert at.casualties > 0


class TestCurves:
    def test_casualties_non_decreasing(self, reference_effects, reference_exposure):
        times = [0.0, HOUR, DAY, WEEK, MONTH, 0.5, 1.0, 5.0, 10.0, 50.0]
        casualties = [project_at(reference_effects, reference_exposure, t).casualties for t in times]
        assert casualties == sorted(casualties)

    def test_displaced_rises_then_falls(self, reference_effects, reference_exposure):
        hour = project_at(reference_effects, reference_exposure, HOUR).displaced
        week = project_at(reference_effects, reference_exposure, WEEK).displaced
        decade = project_at(reference_effects, reference_exposure, 10.0).displaced
        assert 0 < hour < week
        assert decade < week

    def test_displacement_floor_persists(self, reference_effects, reference_exposure):
        snap = project_at(reference_effects, reference_exposure, 50.0)
        assert snap.displaced > 0

    def test_habitable_recovers_but_never_complete(self, reference_effects, reference_exposure):
        values = [
            project_at(reference_effects, reference_exposure, t).habitable_area_pct
            for t in (0.0, 1.0, 10.0, 50.0)
        ]
        assert values == sorted(values)
        assert values[-1] < 100.0

    def test_cooling_then_relaxation(self, reference_effects, reference_exposure):
        month = project_at(reference_effects, reference_exposure, MONTH).temperature_anomaly_c
        decade = project_at(reference_effects, reference_exposure, 10.0).temperature_anomaly_c
        assert month < 0
        assert month < decade <= 0

    def test_food_dips_then_recovers(self, reference_effects, reference_exposure):
        food = {
            t: project_at(reference_effects, reference_exposure, t).food_production_index
            for t in (0.0, 1.0, 10.0)
        }
        assert food[1.0] <= food[0.0]
        assert food[1.0] < food[10.0] <= 100.0

    def test_clamped_ranges(self, reference_effects, reference_exposure):
        config = ImpactConfig()
        for t in (0.0, DAY, 0.3, 2.0, 50.0):
            snap = project_at(reference_effects, reference_exposure, t)
            assert 0.0 <= snap.habitable_area_pct <= 100.0
            assert 0.0 <= snap.food_production_index <= 100.0
            assert abs(snap.temperature_anomaly_c) <= config.max_anomaly_c
            assert snap.casualties >= 0
            assert snap.displaced >= 0

    @pytest.mark.parametrize("t", [HOUR, DAY, 0.1, 1.0, 7.3, 30.0])
    def test_continuous_away_from_zero(self, reference_effects, reference_exposure, t):
        a = project_at(reference_effects, reference_exposure, t)
        b = project_at(reference_effects, reference_exposure, t + 1e-9)
        for field in NUMERIC_FIELDS:
            va, vb = getattr(a, field), getattr(b, field)
            assert abs(va - vb) <= max(3.0, 1e-6 * abs(va)), field

    def test_deterministic(self, reference_effects, reference_exposure):
        first = project_at(reference_effects, reference_exposure, 2.75)
        second = project_at(reference_effects, reference_exposure, 2.75)
        assert first == second


class TestFirstWeek:
    def test_bounded_by_immediate_and_secondary(self, reference_effects, reference_exposure):
        config = ImpactConfig()
        immediate = reference_exposure.immediate_casualties
        secondary = config.secondary_casualty_fraction * reference_exposure.population_in(
            "severe", "moderate"
        )
        for t in (1e-6, HOUR, DAY, 3 * DAY, WEEK):
            snap = project_at(reference_effects, reference_exposure, t)
            assert immediate <= snap.casualties <= immediate + secondary + 1

    def test_far_impact_has_no_early_deaths(self, reference_effects, sample_countries):
        exposure = aggregate_exposure(GeoPoint(0.0, -120.0), reference_effects, sample_countries)
        assert exposure.immediate_casualties == 0
        for t in (HOUR, DAY, WEEK, MONTH):
            assert project_at(reference_effects, exposure, t).casualties == 0
        assert project_at(reference_effects, exposure, 10.0).casualties > 0


class TestFamineProgress:
    def test_zero_before_harvests_fail(self):
        config = ImpactConfig()
        for t in (0.0, HOUR, WEEK, MONTH, config.famine_onset_years):
            assert famine_progress(t, config) == 0.0

    def test_non_decreasing_and_bounded(self):
        times = [0.25 + 0.05 * i for i in range(1000)]
        values = [famine_progress(t) for t in times]
        assert all(b >= a for a, b in zip(values, values[1:]))
        assert all(0.0 <= v <= 1.0 for v in values)

    def test_complete_at_horizon(self):
        assert famine_progress(50.0) == pytest.approx(1.0, abs=1e-3)

    def test_later_onset_delays_deaths(self):
        late = ImpactConfig(famine_onset_years=1.0)
        assert famine_progress(0.5, late) == 0.0
        assert famine_progress(0.5) > 0.0


class TestNoExposure:
    def test_zero_casualties_everywhere(self, reference_effects, empty_exposure):
        for t in (0.0, 1.0, 50.0):
            snap = project_at(reference_effects, empty_exposure, t)
            assert snap.casualties == 0
            assert snap.displaced == 0

    def test_climate_still_responds(self, reference_effects, empty_exposure):
        snap = project_at(reference_effects, empty_exposure, 1.0)
        assert snap.temperature_anomaly_c < 0
        assert snap.food_production_index < 100.0


class TestTimeDomain:
    def test_beyond_horizon_clamped(self, reference_effects, reference_exposure, caplog):
        with caplog.at_level(logging.WARNING, logger="impact_timeline.projection"):
            snap = project_at(reference_effects, reference_exposure, 500.0)
        assert snap.time_years == 50.0
        assert "beyond horizon" in caplog.text

    def test_before_window_clamped(self, reference_effects, reference_exposure):
        assert project_at(reference_effects, reference_exposure, -3.0).time_years == -0.5

    @pytest.mark.parametrize("t", [math.nan, math.inf, -math.inf])
    def test_non_finite_time_raises(self, reference_effects, reference_exposure, t):
        with pytest.raises(ValidationError):
            project_at(reference_effects, reference_exposure, t)


class TestAnomaly:
    def test_water_impact_cools_more(self, reference_params, reference_effects):
        water = compute_immediate_effects(replace(reference_params, target_type="water"))
        assert anomaly_ceiling(water) > anomaly_ceiling(reference_effects)

    def test_bounded_for_planetary_impact(self, reference_params, sample_countries):
        effects = compute_immediate_effects(replace(reference_params, asteroid_diameter_m=1e110))
        assert anomaly_ceiling(effects) == 15.0

        exposure = aggregate_exposure(GeoPoint(0.0, 0.0), effects, sample_countries)
        for t in (0.0, HOUR, 1.0, 50.0):
            snap = project_at(effects, exposure, t)
            for field in NUMERIC_FIELDS:
                assert math.isfinite(getattr(snap, field))
            assert snap.food_production_index >= 0.0
            assert snap.habitable_area_pct >= 0.0


class TestLabelsAndBands:
    @pytest.mark.parametrize(
        ("t", "band"),
        [
            (-0.1, "approach"),
            (0.0, "impact"),
            (HOUR, "hours"),
            (DAY, "day"),
            (WEEK, "weeks"),
            (MONTH, "months"),
            (1.0, "year"),
            (10.0, "decade"),
        ],
    )
    def test_narrative_band(self, t, band):
        assert narrative_band(t) == band

    @pytest.mark.parametrize(
        ("t", "label"),
        [
            (0.0, "t0"),
            (HOUR, "t+1h"),
            (10.0, "t+10y"),
            (6 * HOUR, "t+6h"),
            (3 * DAY, "t+3d"),
            (0.25, "t+3mo"),
            (2.5, "t+2.5y"),
            (-0.25, "t-3mo"),
            (HOUR / 2, "t+30min"),
        ],
    )
    def test_format_time_label(self, t, label):
        assert format_time_label(t) == label

    def test_tiny_offset_not_rounded_to_zero(self):
        label = format_time_label(1e-12)
        assert label != "t+0h"
        assert label.endswith("min")

    def test_description_mentions_values(self, reference_effects, reference_exposure):
        snap = project_at(reference_effects, reference_exposure, 0.0)
        assert f"{snap.casualties:,}" in snap.description
        assert "Impact releases" in snap.description
