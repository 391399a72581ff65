"""Markdown exporter for impact reports."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from impact_timeline.models import ImpactReport


def _fmt_km(value: float) -> str:
    return f"{value:,.1f} km"


def _fmt_usd(value: float) -> str:
    if value >= 1e12:
        return f"${value / 1e12:,.2f}T"
    if value >= 1e9:
        return f"${value / 1e9:,.2f}B"
    return f"${value:,.0f}"


def export_markdown(
    report: ImpactReport,
    output_path: Path,
) -> Path:
    """Export an impact report as Markdown: effects, exposure and timeline tables."""
    timestamp = datetime.now(tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    params = report.params
    effects = report.effects
    title = report.asteroid.name if report.asteroid else "Custom impactor"

    lines: list[str] = [
        f"# Impact Report: {title}",
        f"Generated: {timestamp}",
        "",
        "## Impact Parameters",
        "",
        f"- **Diameter**: {params.asteroid_diameter_m:,.0f} m",
        f"- **Velocity**: {params.velocity_km_s:.1f} km/s",
        f"- **Density**: {params.density_kg_m3:,.0f} kg/m3",
        f"- **Angle**: {params.impact_angle_deg:.0f} degrees",
        f"- **Target**: {params.target_type}",
        f"- **Location**: {params.latitude:.3f}, {params.longitude:.3f}"
        + (f" ({report.ground_zero_country_code})" if report.ground_zero_country_code else ""),
        "",
    ]

    # -- Immediate effects --
    lines.extend([
        "## Immediate Effects",
        "",
        "| Effect | Value |",
        "|:-------|------:|",
        f"| Kinetic energy | {effects.kinetic_energy_j:.3e} J |",
        f"| TNT equivalent | {effects.tnt_megatons:,.2f} Mt |",
        f"| Crater diameter | {effects.crater.diameter_m:,.0f} m |",
        f"| Crater depth | {effects.crater.depth_m:,.0f} m |",
        f"| 20 psi radius | {_fmt_km(effects.airblast.psi_20_km)} |",
        f"| 10 psi radius | {_fmt_km(effects.airblast.psi_10_km)} |",
        f"| 5 psi radius | {_fmt_km(effects.airblast.psi_5_km)} |",
        f"| 1 psi radius | {_fmt_km(effects.airblast.psi_1_km)} |",
        f"| Thermal radius | {_fmt_km(effects.thermal_radius_km)} |",
        f"| Seismic magnitude | {effects.seismic_magnitude:.1f} |",
        f"| Felt radius (MMI V) | {_fmt_km(effects.seismic_felt_radius_km)} |",
    ])
    if effects.tsunami is not None:
        lines.extend([
            f"| Tsunami wave height | {effects.tsunami.max_wave_height_m:,.0f} m |",
            f"| Affected coastline | {_fmt_km(effects.tsunami.affected_coastline_km)} |",
        ])
    lines.append("")

    # -- Exposed countries --
    exposed = [c for c in report.exposure.countries if c.tier != "unaffected"]
    lines.extend(["## Exposed Countries", ""])
    if exposed:
        lines.extend([
            "| Country | Code | Distance | Tier | Population | Severity | Casualties |",
            "|:--------|:-----|---------:|:-----|-----------:|---------:|-----------:|",
        ])
        for c in exposed:
            lines.append(
                f"| {c.name} | {c.code or '-'} | {_fmt_km(c.distance_km)} | {c.tier}"
                f" | {c.population:,} | {c.severity_fraction:.2%} | {c.estimated_casualties:,} |"
            )
    else:
        lines.append("No country centroid lies within the effect radii.")
    lines.append("")

    # -- Infrastructure --
    disrupted = report.exposure.disrupted_infrastructure
    if disrupted:
        lines.extend([
            "## Disrupted Infrastructure",
            "",
            "| Facility | Type | Distance | Severity |",
            "|:---------|:-----|---------:|---------:|",
        ])
        for f in disrupted:
            lines.append(
                f"| {f.name} | {f.type} | {_fmt_km(f.distance_km)} | {f.severity:.0%} |"
            )
        lines.append("")

    # -- Economic loss --
    loss = report.exposure.economic_loss
    lines.extend([
        "## Economic Loss",
        "",
        "| Component | Loss |",
        "|:----------|----:|",
        f"| Lives lost | {_fmt_usd(loss.casualty_usd)} |",
        f"| Built environment (5 psi) | {_fmt_usd(loss.infrastructure_usd)} |",
        f"| Facilities | {_fmt_usd(loss.facility_usd)} |",
        f"| Indirect | {_fmt_usd(loss.indirect_usd)} |",
        f"| **Total** | **{_fmt_usd(loss.total_usd)}** |",
        "",
    ])

    # -- Timeline --
    timeline = report.timeline
    lines.extend([
        "## Timeline",
        "",
        "| Time | Casualties | Displaced | Temp. | Habitable | Food |",
        "|:-----|-----------:|----------:|------:|----------:|-----:|",
    ])
    rows = [timeline.approach] + [snap for _, snap in timeline.checkpoints()]
    for snap in rows:
        lines.append(
            f"| {snap.label} | {snap.casualties:,} | {snap.displaced:,}"
            f" | {snap.temperature_anomaly_c:+.2f} C | {snap.habitable_area_pct:.4f}%"
            f" | {snap.food_production_index:.1f} |"
        )
    lines.append("")
    for snap in rows:
        lines.append(f"- **{snap.label}**: {snap.description}")
    lines.append("")

    if report.warnings:
        lines.extend(["## Warnings", ""])
        lines.extend(f"- {w}" for w in report.warnings)
        lines.append("")

    with open(output_path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))

    return output_path
