"""Output renderers."""

from cyberguard.output.console import build_report_renderable, render_console_report
from cyberguard.output.json_export import export_json_report
from cyberguard.output.pdf_export import ExportError, ReportExporter, report_filename
from cyberguard.output.summary import format_summary_report, render_summary_report, severity_counts

__all__ = [
    "ExportError",
    "ReportExporter",
    "build_report_renderable",
    "export_json_report",
    "format_summary_report",
    "render_console_report",
    "render_summary_report",
    "report_filename",
    "severity_counts",
]
