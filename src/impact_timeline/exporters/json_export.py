"""JSON exporter for impact reports."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from impact_timeline.models import ImpactReport


def report_to_dict(report: ImpactReport) -> dict[str, Any]:
    """Plain-dict view of a report, with a headline summary block."""
    data = asdict(report)
    exposure = report.exposure
    data["summary"] = {
        "tnt_megatons": report.effects.tnt_megatons,
        "crater_diameter_km": report.effects.crater.diameter_m / 1000,
        "seismic_magnitude": report.effects.seismic_magnitude,
        "immediate_casualties": exposure.immediate_casualties,
        "casualties_10_years": report.timeline.t10_years.casualties,
        "countries_affected": sum(1 for c in exposure.countries if c.tier != "unaffected"),
        "infrastructure_disrupted": len(exposure.disrupted_infrastructure),
        "economic_loss_usd": exposure.economic_loss.total_usd,
    }
    return data


def export_json(
    report: ImpactReport,
    output_path: Path,
    indent: int = 2,
) -> Path:
    """Export an impact report to a JSON file."""
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(report_to_dict(report), f, indent=indent, ensure_ascii=False)
    return output_path
