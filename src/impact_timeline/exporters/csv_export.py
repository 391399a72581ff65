"""CSV exporter for impact reports."""

from __future__ import annotations

import csv
from pathlib import Path

from impact_timeline.models import ImpactReport

FIELDNAMES = [
    "checkpoint",
    "label",
    "time_years",
    "band",
    "casualties",
    "displaced",
    "temperature_anomaly_c",
    "habitable_area_pct",
    "food_production_index",
    "description",
]


def export_csv(
    report: ImpactReport,
    output_path: Path,
) -> Path:
    """Export the timeline as a flat CSV with one row per snapshot."""
    timeline = report.timeline
    rows = [("approach", timeline.approach), *timeline.checkpoints()]

    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for name, snap in rows:
            writer.writerow({
                "checkpoint": name,
                "label": snap.label,
                "time_years": snap.time_years,
                "band": snap.band,
                "casualties": snap.casualties,
                "displaced": snap.displaced,
                "temperature_anomaly_c": round(snap.temperature_anomaly_c, 3),
                "habitable_area_pct": round(snap.habitable_area_pct, 6),
                "food_production_index": round(snap.food_production_index, 3),
                "description": snap.description,
            })

    return output_path
