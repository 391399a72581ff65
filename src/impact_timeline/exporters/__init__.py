"""Exporters for impact reports."""

from impact_timeline.exporters.csv_export import export_csv
from impact_timeline.exporters.geojson_export import export_geojson
from impact_timeline.exporters.json_export import export_json, report_to_dict
from impact_timeline.exporters.markdown_export import export_markdown

__all__ = ["export_csv", "export_geojson", "export_json", "export_markdown", "report_to_dict"]
