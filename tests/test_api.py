"""Tests for the FastAPI wrapper."""

from __future__ import annotations

import csv
import io
from collections.abc import Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from impact_timeline.api import app


@pytest.fixture(scope="module")
def client() -> Generator[TestClient, None, None]:
    """TestClient with lifespan entered so app.state is initialised."""
    with (
        patch("impact_timeline.geo.rg.search", return_value=[{"cc": "NG"}]),
        TestClient(app) as c,
    ):
        yield c


class TestHealthEndpoint:
    def test_returns_ok(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert "version" in data
        assert "uptime_seconds" in data
        assert data["datasets"]["asteroids"] == 8
        assert data["datasets"]["countries"] > 0
        assert data["datasets"]["infrastructure"] > 0

    def test_run_count_increments(self, client: TestClient) -> None:
        before = client.get("/health").json()["run_count"]
        client.get("/simulate", params={"latitude": 0, "longitude": 0, "asteroid": "tunguska"})
        data = client.get("/health").json()
        assert data["run_count"] == before + 1
        assert data["last_run"] is not None


class TestAsteroidsEndpoint:
    def test_lists_builtin_catalog(self, client: TestClient) -> None:
        resp = client.get("/asteroids")
        assert resp.status_code == 200
        entries = resp.json()
        assert len(entries) == 8
        ids = {e["id"] for e in entries}
        assert {"apophis", "bennu", "chicxulub"} <= ids
        for entry in entries:
            assert entry["mass_kg"] > 0
            assert entry["tnt_megatons"] > 0


class TestSimulateEndpoint:
    def test_json_format_default(self, client: TestClient) -> None:
        resp = client.get(
            "/simulate", params={"latitude": 6.5, "longitude": 3.4, "asteroid": "apophis"},
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/json")
        data = resp.json()
        assert data["asteroid"]["id"] == "apophis"
        assert data["ground_zero_country_code"] == "NG"
        assert data["summary"]["tnt_megatons"] > 0
        assert "t10_years" in data["timeline"]

    def test_custom_impactor(self, client: TestClient) -> None:
        resp = client.get(
            "/simulate",
            params={
                "latitude": 0,
                "longitude": 0,
                "diameter": 1000,
                "velocity": 20,
                "density": 3000,
                "target": "water",
                "angle": 60,
            },
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["params"]["impact_angle_deg"] == 60
        assert data["effects"]["tsunami"] is not None
        assert data["summary"]["tnt_megatons"] == pytest.approx(75_086, rel=1e-3)

    def test_csv_format(self, client: TestClient) -> None:
        resp = client.get(
            "/simulate",
            params={"latitude": 0, "longitude": 0, "asteroid": "bennu", "format": "csv"},
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        rows = list(csv.DictReader(io.StringIO(resp.text)))
        assert len(rows) == 8

    def test_markdown_format(self, client: TestClient) -> None:
        resp = client.get(
            "/simulate",
            params={"latitude": 0, "longitude": 0, "asteroid": "bennu", "format": "markdown"},
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/markdown")
        assert resp.text.startswith("# Impact Report: ")
        assert "## Timeline" in resp.text

    def test_geojson_format(self, client: TestClient) -> None:
        resp = client.get(
            "/simulate",
            params={"latitude": 0, "longitude": 0, "asteroid": "bennu", "format": "geojson"},
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/geo+json")
        data = resp.json()
        assert data["type"] == "FeatureCollection"
        assert data["features"][0]["properties"]["feature_type"] == "ground_zero"

    def test_unknown_asteroid_returns_404(self, client: TestClient) -> None:
        resp = client.get(
            "/simulate", params={"latitude": 0, "longitude": 0, "asteroid": "no_such_rock"},
        )
        assert resp.status_code == 404
        assert "no_such_rock" in resp.json()["detail"]

    def test_missing_impactor_returns_422(self, client: TestClient) -> None:
        resp = client.get("/simulate", params={"latitude": 0, "longitude": 0, "diameter": 100})
        assert resp.status_code == 422

    def test_zero_angle_returns_422(self, client: TestClient) -> None:
        resp = client.get(
            "/simulate",
            params={"latitude": 0, "longitude": 0, "asteroid": "apophis", "angle": 0},
        )
        assert resp.status_code == 422
        assert "impact_angle_deg" in resp.json()["detail"]

    def test_out_of_range_latitude_returns_422(self, client: TestClient) -> None:
        resp = client.get(
            "/simulate", params={"latitude": 120, "longitude": 0, "asteroid": "apophis"},
        )
        assert resp.status_code == 422

    def test_invalid_format_returns_422(self, client: TestClient) -> None:
        resp = client.get(
            "/simulate",
            params={"latitude": 0, "longitude": 0, "asteroid": "apophis", "format": "xml"},
        )
        assert resp.status_code == 422


class TestProjectEndpoint:
    def test_returns_sorted_snapshots(self, client: TestClient) -> None:
        resp = client.get(
            "/project",
            params={
                "latitude": 0,
                "longitude": 0,
                "asteroid": "apophis",
                "years": [1.0, -0.25, 0.0],
            },
        )
        assert resp.status_code == 200
        snapshots = resp.json()
        assert [s["time_years"] for s in snapshots] == [-0.25, 0.0, 1.0]
        assert snapshots[0]["band"] == "approach"
        assert snapshots[0]["casualties"] == 0

    def test_offsets_clamped_to_window(self, client: TestClient) -> None:
        resp = client.get(
            "/project",
            params={"latitude": 0, "longitude": 0, "asteroid": "apophis", "years": [500, -3]},
        )
        assert resp.status_code == 200
        assert [s["time_years"] for s in resp.json()] == [-0.5, 50.0]

    def test_years_required(self, client: TestClient) -> None:
        resp = client.get("/project", params={"latitude": 0, "longitude": 0, "asteroid": "apophis"})
        assert resp.status_code == 422


class TestSeriesEndpoint:
    def test_linear_series(self, client: TestClient) -> None:
        resp = client.get(
            "/series",
            params={"latitude": 0, "longitude": 0, "asteroid": "apophis", "num": 5, "stop": 1.5},
        )
        assert resp.status_code == 200
        times = [s["time_years"] for s in resp.json()]
        assert times == pytest.approx([-0.5, 0.0, 0.5, 1.0, 1.5])

    def test_log_spaced_series(self, client: TestClient) -> None:
        resp = client.get(
            "/series",
            params={
                "latitude": 0,
                "longitude": 0,
                "asteroid": "apophis",
                "num": 6,
                "log_spaced": True,
            },
        )
        assert resp.status_code == 200
        snapshots = resp.json()
        assert len(snapshots) == 6
        assert [s["band"] for s in snapshots[:2]] == ["approach", "impact"]
        assert snapshots[-1]["time_years"] == pytest.approx(50.0)

    def test_single_point_returns_422(self, client: TestClient) -> None:
        resp = client.get(
            "/series", params={"latitude": 0, "longitude": 0, "asteroid": "apophis", "num": 1},
        )
        assert resp.status_code == 422

    def test_empty_window_returns_422(self, client: TestClient) -> None:
        resp = client.get(
            "/series",
            params={"latitude": 0, "longitude": 0, "asteroid": "apophis", "start": 2, "stop": 1},
        )
        assert resp.status_code == 422
