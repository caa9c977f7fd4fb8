from __future__ import annotations

from datetime import date

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from cyberguard.models.findings import Severity, Vulnerability
from cyberguard.models.reports import VulnerabilityReport
from cyberguard.output.summary import severity_counts

SEVERITY_STYLES = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "bold dark_orange",
    Severity.MEDIUM: "bold yellow",
    Severity.LOW: "bold blue",
    Severity.INFORMATIONAL: "bold grey70",
}

ACCENT = "medium_purple1"


def _heading(title: str) -> Text:
    return Text.assemble(("┃", ACCENT), (f" {title}", "bold white"))


def _severity_badge(severity: Severity) -> Text:
    style = SEVERITY_STYLES.get(severity, SEVERITY_STYLES[Severity.INFORMATIONAL])
    return Text(f" {severity.value} ", style=f"{style} reverse")


def _findings_summary(report: VulnerabilityReport) -> Table:
    table = Table(expand=True, show_edge=True, box=None, padding=(0, 2))
    counts = severity_counts(report)
    for severity in counts:
        table.add_column(severity.value, justify="center", header_style="grey62")
    table.add_row(*[Text(str(count), style=SEVERITY_STYLES[severity]) for severity, count in counts.items()])
    return table


def _vulnerability_panel(vuln: Vulnerability) -> Panel:
    header = Table.grid(expand=True)
    header.add_column(ratio=1)
    header.add_column(justify="right")
    header.add_row(Text(f"{vuln.id}: {vuln.title}", style=f"bold {ACCENT}"), _severity_badge(vuln.severity))
    header.add_row(Text(vuln.standard.value, style="grey62"), "")

    body = Group(
        header,
        Rule(style="grey30"),
        Text("Description", style="bold"),
        Text(vuln.description, style="grey74"),
        Text(""),
        Text("Impact", style="bold"),
        Text(vuln.impact, style="grey74"),
        Text(""),
        Text("Remediation", style="bold"),
        Panel(Text(vuln.remediation, style="grey74"), border_style="grey23"),
    )
    return Panel(body, border_style="grey35")


def build_report_renderable(
    report: VulnerabilityReport,
    target_url: str,
    *,
    scan_date: date | None = None,
) -> RenderableType:
    """Build the full report view shared by the terminal and the PDF export."""
    scan_date = scan_date or date.today()
    parts: list[RenderableType] = [
        Text("Vulnerability Assessment Report", style="bold white"),
        Text.assemble(("Target: ", "grey62"), (target_url, ACCENT)),
        Text.assemble(("Scan Date: ", "grey62"), (scan_date.isoformat(), "white")),
        Rule(style="grey35"),
        _heading("Executive Summary"),
        Text(report.executive_summary, style="grey82"),
        Text(""),
        _heading("Findings Summary"),
        _findings_summary(report),
        Text(""),
        _heading("Detailed Vulnerabilities"),
    ]
    if not report.vulnerabilities:
        parts.append(Text("No vulnerabilities reported.", style="grey62"))
    parts.extend(_vulnerability_panel(vuln) for vuln in report.vulnerabilities)
    return Panel(Group(*parts), border_style="grey35", padding=(1, 2))


def render_console_report(
    report: VulnerabilityReport,
    target_url: str,
    *,
    no_color: bool = False,
    console: Console | None = None,
) -> None:
    console = console or Console(no_color=no_color)
    console.print(build_report_renderable(report, target_url))
