"""FastAPI wrapper for the impact simulation pipeline."""

from __future__ import annotations

import logging
import tempfile
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse, Response

from impact_timeline import __version__
from impact_timeline.config import ImpactConfig, OutputFormat
from impact_timeline.effects import JOULES_PER_MEGATON
from impact_timeline.exporters import export_csv, export_geojson, export_markdown, report_to_dict
from impact_timeline.models import AsteroidSpec, ImpactReport, TargetType
from impact_timeline.physics import resolve_asteroid
from impact_timeline.pipeline import run_simulation
from impact_timeline.projection import project_at
from impact_timeline.sources import load_catalog, load_countries, load_infrastructure
from impact_timeline.sources.catalog import find_in_catalog
from impact_timeline.timeline import sample_series

logger = logging.getLogger(__name__)

_CONTENT_TYPES: dict[str, str] = {
    "json": "application/json",
    "geojson": "application/geo+json",
    "csv": "text/csv; charset=utf-8",
    "markdown": "text/markdown; charset=utf-8",
}

_SUFFIX: dict[str, str] = {
    "geojson": ".geojson",
    "csv": ".csv",
    "markdown": ".md",
}

_EXPORTERS: dict[str, Any] = {
    "geojson": export_geojson,
    "csv": export_csv,
    "markdown": export_markdown,
}


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncGenerator[None, None]:
    """Load the datasets once and store startup state.

    Requests read whole tuples from ``app.state``, so a reload that swaps
    them never exposes a half-updated dataset.
    """
    config = ImpactConfig()
    application.state.config = config
    application.state.catalog = load_catalog(
        config.catalog_source, timeout=config.request_timeout, use_cache=config.cache_enabled,
    )
    application.state.countries = load_countries(
        config.countries_source, timeout=config.request_timeout, use_cache=config.cache_enabled,
    )
    application.state.infrastructure = load_infrastructure(
        config.infrastructure_source,
        timeout=config.request_timeout,
        use_cache=config.cache_enabled,
    )
    application.state.start_time = datetime.now(tz=timezone.utc)
    application.state.last_run = None
    application.state.run_count = 0
    logger.info(
        "Loaded %d asteroids, %d countries, %d facilities",
        len(application.state.catalog),
        len(application.state.countries),
        len(application.state.infrastructure),
    )
    yield


app = FastAPI(
    title="Impact Timeline API",
    description="Asteroid impact effects and consequence timelines.",
    version=__version__,
    lifespan=lifespan,
)


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


def _export(report: ImpactReport, fmt: OutputFormat) -> Response:
    """Serialize an impact report into the requested format."""
    if fmt == "json":
        return JSONResponse(content=report_to_dict(report))

    exporter = _EXPORTERS[fmt]
    suffix = _SUFFIX[fmt]

    with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as tmp:
        tmp_path = Path(tmp.name)
    try:
        exporter(report, tmp_path)
        content = tmp_path.read_text(encoding="utf-8")
    finally:
        tmp_path.unlink(missing_ok=True)

    return Response(content=content, media_type=_CONTENT_TYPES[fmt])


def _simulate(
    asteroid_id: str | None,
    diameter: float | None,
    velocity: float | None,
    density: float | None,
    composition: str,
    latitude: float,
    longitude: float,
    angle: float,
    target: TargetType,
) -> ImpactReport | JSONResponse:
    """Run one simulation, or return the error response for bad input."""
    if asteroid_id is not None:
        asteroid = find_in_catalog(app.state.catalog, asteroid_id)
        if asteroid is None:
            return _error(404, f"Unknown asteroid: {asteroid_id}")
    elif diameter is not None and velocity is not None:
        asteroid = AsteroidSpec(
            id="custom",
            name="Custom impactor",
            diameter_m=diameter,
            velocity_km_s=velocity,
            composition=composition,
            density_kg_m3=density,
        )
    else:
        return _error(422, "Give an asteroid id or both diameter and velocity")

    try:
        config = app.state.config.model_copy(
            update={"impact_angle_deg": angle, "target_type": target},
        )
        # model_copy skips validation; building parameters re-checks the angle.
        report = run_simulation(
            asteroid,
            latitude,
            longitude,
            config,
            app.state.countries,
            app.state.infrastructure,
        )
    except ValueError as exc:
        return _error(422, str(exc))

    app.state.last_run = datetime.now(tz=timezone.utc)
    app.state.run_count += 1
    return report


@app.get("/health")
def health() -> dict[str, Any]:
    """Server health check with uptime, version, run count and dataset sizes."""
    now = datetime.now(tz=timezone.utc)
    return {
        "status": "ok",
        "version": __version__,
        "uptime_seconds": round((now - app.state.start_time).total_seconds(), 1),
        "last_run": app.state.last_run.isoformat() if app.state.last_run else None,
        "run_count": app.state.run_count,
        "datasets": {
            "asteroids": len(app.state.catalog),
            "countries": len(app.state.countries),
            "infrastructure": len(app.state.infrastructure),
        },
    }


@app.get("/asteroids")
def list_asteroids() -> list[dict[str, Any]]:
    """The asteroid catalog, with each entry's mass and impact energy."""
    entries = []
    for asteroid in app.state.catalog:
        props = resolve_asteroid(asteroid)
        entry = asdict(asteroid)
        entry["mass_kg"] = props.mass_kg
        entry["tnt_megatons"] = props.kinetic_energy_j / JOULES_PER_MEGATON
        entries.append(entry)
    return entries


@app.get("/simulate")
def simulate(
    latitude: Annotated[float, Query(description="Impact latitude.")],
    longitude: Annotated[float, Query(description="Impact longitude.")],
    asteroid: Annotated[
        str | None, Query(description="Catalog asteroid id."),
    ] = None,
    diameter: Annotated[
        float | None, Query(description="Custom impactor diameter (m)."),
    ] = None,
    velocity: Annotated[
        float | None, Query(description="Custom impactor velocity (km/s)."),
    ] = None,
    density: Annotated[
        float | None, Query(description="Custom impactor density (kg/m3)."),
    ] = None,
    composition: Annotated[
        str, Query(description="Custom impactor composition."),
    ] = "default",
    angle: Annotated[
        float, Query(description="Impact angle from horizontal, (0, 90]."),
    ] = 45.0,
    target: Annotated[
        TargetType, Query(description="Target medium."),
    ] = "land",
    format: Annotated[
        OutputFormat, Query(description="Output format."),
    ] = "json",
) -> Response:
    """Simulate an impact and return the full report.

    The ``format`` param controls the response content type (json, csv,
    markdown, geojson). Invalid parameters return 422, an unknown asteroid 404.
    """
    result = _simulate(
        asteroid, diameter, velocity, density, composition, latitude, longitude, angle, target,
    )
    if isinstance(result, JSONResponse):
        return result
    return _export(result, format)


@app.get("/project")
def project(
    latitude: Annotated[float, Query(description="Impact latitude.")],
    longitude: Annotated[float, Query(description="Impact longitude.")],
    years: Annotated[
        list[float], Query(description="Time offsets in years (repeatable)."),
    ],
    asteroid: Annotated[
        str | None, Query(description="Catalog asteroid id."),
    ] = None,
    diameter: Annotated[
        float | None, Query(description="Custom impactor diameter (m)."),
    ] = None,
    velocity: Annotated[
        float | None, Query(description="Custom impactor velocity (km/s)."),
    ] = None,
    density: Annotated[
        float | None, Query(description="Custom impactor density (kg/m3)."),
    ] = None,
    composition: Annotated[
        str, Query(description="Custom impactor composition."),
    ] = "default",
    angle: Annotated[
        float, Query(description="Impact angle from horizontal, (0, 90]."),
    ] = 45.0,
    target: Annotated[
        TargetType, Query(description="Target medium."),
    ] = "land",
) -> Response:
    """Project the state of the world at arbitrary time offsets.

    Offsets outside [-0.5, 50] years are clamped to the window.
    """
    result = _simulate(
        asteroid, diameter, velocity, density, composition, latitude, longitude, angle, target,
    )
    if isinstance(result, JSONResponse):
        return result

    try:
        snapshots = [
            project_at(result.effects, result.exposure, t, app.state.config)
            for t in sorted(years)
        ]
    except ValueError as exc:
        return _error(422, str(exc))

    return JSONResponse(content=[asdict(s) for s in snapshots])


@app.get("/series")
def series(
    latitude: Annotated[float, Query(description="Impact latitude.")],
    longitude: Annotated[float, Query(description="Impact longitude.")],
    asteroid: Annotated[
        str | None, Query(description="Catalog asteroid id."),
    ] = None,
    diameter: Annotated[
        float | None, Query(description="Custom impactor diameter (m)."),
    ] = None,
    velocity: Annotated[
        float | None, Query(description="Custom impactor velocity (km/s)."),
    ] = None,
    density: Annotated[
        float | None, Query(description="Custom impactor density (kg/m3)."),
    ] = None,
    composition: Annotated[
        str, Query(description="Custom impactor composition."),
    ] = "default",
    angle: Annotated[
        float, Query(description="Impact angle from horizontal, (0, 90]."),
    ] = 45.0,
    target: Annotated[
        TargetType, Query(description="Target medium."),
    ] = "land",
    start: Annotated[
        float, Query(description="First offset in years."),
    ] = -0.5,
    stop: Annotated[
        float, Query(description="Last offset in years."),
    ] = 50.0,
    num: Annotated[
        int, Query(ge=2, le=1000, description="Number of snapshots."),
    ] = 50,
    log_spaced: Annotated[
        bool, Query(description="Spread post-impact offsets geometrically."),
    ] = False,
) -> Response:
    """Evenly (or log-) spaced snapshots for scrubbing through a timeline."""
    result = _simulate(
        asteroid, diameter, velocity, density, composition, latitude, longitude, angle, target,
    )
    if isinstance(result, JSONResponse):
        return result

    try:
        snapshots = sample_series(
            result.effects,
            result.exposure,
            start=start,
            stop=stop,
            num=num,
            log_spaced=log_spaced,
            config=app.state.config,
        )
    except ValueError as exc:
        return _error(422, str(exc))

    return JSONResponse(content=[asdict(s) for s in snapshots])
