"""CLI interface using Typer."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from impact_timeline import __version__
from impact_timeline.calibration import calibrate as run_calibration
from impact_timeline.calibration import metric_label
from impact_timeline.config import ImpactConfig, OutputFormat
from impact_timeline.effects import JOULES_PER_MEGATON
from impact_timeline.errors import DataUnavailableError, ValidationError
from impact_timeline.exporters import export_csv, export_geojson, export_json, export_markdown
from impact_timeline.models import AsteroidSpec, ImpactReport, TargetType, TimelineSnapshot
from impact_timeline.physics import resolve_asteroid
from impact_timeline.pipeline import run_simulation
from impact_timeline.projection import project_at
from impact_timeline.sources import load_catalog, load_countries, load_infrastructure
from impact_timeline.sources.catalog import find_in_catalog
from impact_timeline.timeline import sample_series

Exporter = Callable[[ImpactReport, Path], Path]

EXPORTERS: dict[str, Exporter] = {
    "json": export_json,
    "csv": export_csv,
    "markdown": export_markdown,
    "geojson": export_geojson,
}

app = typer.Typer(
    name="impact-timeline",
    help="Asteroid impact effects and consequence timelines.",
    add_completion=False,
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"impact-timeline {__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Impact Timeline: asteroid impact effects and their consequences over time."""


def _select_asteroid(
    asteroid_id: str | None,
    catalog_source: str | None,
    diameter: float | None,
    velocity: float | None,
    density: float | None,
    composition: str,
    use_cache: bool,
) -> AsteroidSpec:
    if asteroid_id is None:
        if diameter is None or velocity is None:
            console.print(
                "[red]Give an asteroid id or both --diameter and --velocity.[/red]"
            )
            raise typer.Exit(code=1)
        return AsteroidSpec(
            id="custom",
            name="Custom impactor",
            diameter_m=diameter,
            velocity_km_s=velocity,
            composition=composition,
            density_kg_m3=density,
        )

    catalog = load_catalog(catalog_source, use_cache=use_cache)
    asteroid = find_in_catalog(catalog, asteroid_id)
    if asteroid is None:
        console.print(f"[red]Unknown asteroid:[/red] {asteroid_id}")
        console.print("Run [bold]impact-timeline catalog[/bold] to list available ids.")
        raise typer.Exit(code=1)
    return asteroid


def _timeline_table(title: str, snapshots: list[TimelineSnapshot]) -> Table:
    table = Table(title=title)
    table.add_column("Time", style="bold")
    table.add_column("Casualties", justify="right", style="red")
    table.add_column("Displaced", justify="right")
    table.add_column("Temp.", justify="right", style="cyan")
    table.add_column("Habitable", justify="right")
    table.add_column("Food", justify="right", style="green")
    for snap in snapshots:
        table.add_row(
            snap.label,
            f"{snap.casualties:,}",
            f"{snap.displaced:,}",
            f"{snap.temperature_anomaly_c:+.2f} C",
            f"{snap.habitable_area_pct:.4f}%",
            f"{snap.food_production_index:.1f}",
        )
    return table


@app.command()
def simulate(
    asteroid_id: Annotated[
        str | None,
        typer.Argument(help="Catalog asteroid id (see 'catalog'). Omit for a custom impactor."),
    ] = None,
    latitude: Annotated[
        float,
        typer.Option("--lat", help="Impact latitude in decimal degrees."),
    ] = 0.0,
    longitude: Annotated[
        float,
        typer.Option("--lon", help="Impact longitude in decimal degrees."),
    ] = 0.0,
    angle: Annotated[
        float,
        typer.Option("--angle", "-a", help="Impact angle from horizontal, (0, 90]."),
    ] = 45.0,
    target: Annotated[
        TargetType,
        typer.Option("--target", "-t", help="Target medium: land or water."),
    ] = "land",
    diameter: Annotated[
        float | None,
        typer.Option("--diameter", help="Custom impactor diameter in metres."),
    ] = None,
    velocity: Annotated[
        float | None,
        typer.Option("--velocity", help="Custom impactor velocity in km/s."),
    ] = None,
    density: Annotated[
        float | None,
        typer.Option("--density", help="Custom impactor density in kg/m3."),
    ] = None,
    composition: Annotated[
        str,
        typer.Option("--composition", help="Custom impactor composition."),
    ] = "default",
    catalog_source: Annotated[
        str | None,
        typer.Option("--catalog", help="Asteroid catalog JSON path or URL."),
    ] = None,
    countries_source: Annotated[
        str | None,
        typer.Option("--countries", help="Country dataset CSV path or URL."),
    ] = None,
    infrastructure_source: Annotated[
        str | None,
        typer.Option("--infrastructure", help="Infrastructure CSV path or URL."),
    ] = None,
    at: Annotated[
        list[float] | None,
        typer.Option("--at", help="Extra time offsets in years to project (repeatable)."),
    ] = None,
    series_points: Annotated[
        int | None,
        typer.Option(
            "--series", min=2, help="Also show N log-spaced snapshots from approach to +50 years.",
        ),
    ] = None,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output file path."),
    ] = Path("impact_report.json"),
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format: json, csv, markdown, geojson."),
    ] = "json",
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
    no_cache: Annotated[
        bool,
        typer.Option("--no-cache", help="Disable disk caching for remote datasets."),
    ] = False,
    no_geocode: Annotated[
        bool,
        typer.Option("--no-geocode", help="Skip labelling ground zero with a country code."),
    ] = False,
) -> None:
    """Simulate an impact and write its report and timeline."""
    _setup_logging(verbose)

    try:
        config = ImpactConfig(
            impact_angle_deg=angle,
            target_type=target,
            output_file=output,
            output_format=output_format,
            cache_enabled=not no_cache,
            reverse_geocode=not no_geocode,
        )
    except ValueError as exc:
        console.print(f"[red]Invalid options:[/red] {exc}")
        raise typer.Exit(code=1) from None

    try:
        asteroid = _select_asteroid(
            asteroid_id,
            catalog_source or config.catalog_source,
            diameter,
            velocity,
            density,
            composition,
            use_cache=config.cache_enabled,
        )
        countries = load_countries(
            countries_source or config.countries_source, use_cache=config.cache_enabled,
        )
        infrastructure = load_infrastructure(
            infrastructure_source or config.infrastructure_source,
            use_cache=config.cache_enabled,
        )
        report = run_simulation(
            asteroid, latitude, longitude, config, countries, infrastructure,
        )
        extra = [
            project_at(report.effects, report.exposure, t, config) for t in sorted(at or [])
        ]
        sampled = (
            sample_series(
                report.effects, report.exposure, num=series_points, log_spaced=True, config=config,
            )
            if series_points
            else []
        )
    except ValidationError as exc:
        console.print(f"[red]Invalid impact parameters:[/red] {exc}")
        raise typer.Exit(code=1) from None
    except DataUnavailableError as exc:
        console.print(f"[red]Dataset unavailable:[/red] {exc}")
        raise typer.Exit(code=1) from None

    EXPORTERS[config.output_format](report, config.output_file)

    effects = report.effects
    console.print()
    summary = Table(title=f"Immediate Effects: {asteroid.name}")
    summary.add_column("Effect", style="bold")
    summary.add_column("Value", justify="right")
    summary.add_row("TNT equivalent", f"{effects.tnt_megatons:,.2f} Mt")
    summary.add_row("Crater diameter", f"{effects.crater.diameter_m / 1000:,.2f} km")
    summary.add_row("Fireball/thermal radius", f"{effects.thermal_radius_km:,.1f} km")
    summary.add_row("1 psi radius", f"{effects.airblast.psi_1_km:,.1f} km")
    summary.add_row("Seismic magnitude", f"{effects.seismic_magnitude:.1f}")
    if effects.tsunami is not None:
        summary.add_row("Tsunami wave", f"{effects.tsunami.max_wave_height_m:,.0f} m")
    summary.add_row(
        "Economic loss", f"{report.exposure.economic_loss.total_usd / 1e9:,.1f} billion USD",
    )
    console.print(summary)

    timeline = report.timeline
    snapshots = [timeline.approach] + [snap for _, snap in timeline.checkpoints()]
    console.print(_timeline_table("Timeline", snapshots))

    if extra:
        console.print(_timeline_table("Requested offsets", extra))

    if sampled:
        console.print(_timeline_table("Sampled timeline", sampled))

    for warning in report.warnings:
        console.print(f"[yellow]{warning}[/yellow]")

    console.print(
        f"\n{config.output_format.upper()} written to [bold]{config.output_file}[/bold]"
    )
    exposed = sum(1 for c in report.exposure.countries if c.tier != "unaffected")
    console.print(f"Countries exposed: {exposed}")
    console.print(f"Infrastructure disrupted: {len(report.exposure.disrupted_infrastructure)}")


@app.command()
def catalog(
    source: Annotated[
        str | None,
        typer.Option("--source", "-s", help="Asteroid catalog JSON path or URL."),
    ] = None,
    no_cache: Annotated[
        bool,
        typer.Option("--no-cache", help="Disable disk caching for remote catalogs."),
    ] = False,
) -> None:
    """List the asteroids available for simulation."""
    try:
        asteroids = load_catalog(source or ImpactConfig().catalog_source, use_cache=not no_cache)
    except DataUnavailableError as exc:
        console.print(f"[red]Catalog unavailable:[/red] {exc}")
        raise typer.Exit(code=1) from None

    table = Table(title="Asteroid Catalog")
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Diameter", justify="right")
    table.add_column("Velocity", justify="right")
    table.add_column("Composition", style="dim")
    table.add_column("Energy", justify="right", style="red")
    table.add_column("Threat")

    for a in asteroids:
        props = resolve_asteroid(a)
        table.add_row(
            a.id,
            a.name,
            f"{a.diameter_m:,.0f} m",
            f"{a.velocity_km_s:.1f} km/s",
            a.composition,
            f"{props.kinetic_energy_j / JOULES_PER_MEGATON:,.3g} Mt",
            a.threat_level,
        )

    console.print(table)
    console.print(f"Total asteroids: {len(asteroids)}")


@app.command()
def calibrate() -> None:
    """Compare the scaling constants against documented impact events."""
    results = run_calibration()

    table = Table(title="Calibration Against Reference Events")
    table.add_column("Event", style="bold")
    table.add_column("Quantity")
    table.add_column("Observed", justify="right")
    table.add_column("Modelled", justify="right")
    table.add_column("Ratio", justify="right")
    table.add_column("OK")

    for r in results:
        table.add_row(
            r.event,
            metric_label(r.metric),
            f"{r.observed:,.3g}",
            f"{r.modelled:,.3g}",
            f"{r.ratio:.2f}",
            "[green]yes[/green]" if r.within_tolerance else "[red]no[/red]",
        )

    console.print(table)
    passed = sum(1 for r in results if r.within_tolerance)
    console.print(f"{passed}/{len(results)} quantities within tolerance")
