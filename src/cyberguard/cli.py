from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from cyberguard import __version__
from cyberguard.analyzers.report_generator import ReportGenerator
from cyberguard.config import Settings, load_settings
from cyberguard.controller import ScanController, ScanState
from cyberguard.models.reports import VulnerabilityReport
from cyberguard.models.targets import ScanOptions
from cyberguard.output.console import render_console_report
from cyberguard.output.json_export import export_json_report
from cyberguard.output.pdf_export import ExportError, ReportExporter
from cyberguard.output.summary import render_summary_report
from cyberguard.providers import available_providers, create_provider

app = typer.Typer(
    help=(
        "AI-powered vulnerability assessment reports for web applications. "
        "Use `doctor` for API-key setup hints (GEMINI_API_KEY, OPENAI_API_KEY)."
    ),
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger(__name__)

FOOTER = "CyberGuard Vulnerability Scanner. For demonstration purposes only."
QUIT_ANSWERS = {"q", "quit"}


@app.callback(invoke_without_command=True)
def callback(
    version: bool = typer.Option(False, "--version", help="Show version and exit.", is_eager=True)
) -> None:
    if version:
        console.print(__version__)
        raise typer.Exit()


@app.command()
def providers() -> None:
    names = available_providers()
    if not names:
        console.print("No providers are currently registered.")
        return
    console.print("Available providers:")
    for name in names:
        console.print(f"- {name}")


@app.command()
def doctor(
    provider: str | None = typer.Option(None, help="Provider name override (env: CYBERGUARD_PROVIDER)."),
    model: str | None = typer.Option(None, help="Model override (env: CYBERGUARD_MODEL)."),
    check: bool = typer.Option(False, "--check", help="Run a live provider/API check."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logs."),
) -> None:
    _configure_logging(verbose)
    settings = load_settings(provider=provider, model=model)

    console.print(f"provider={settings.provider}")
    console.print(f"model={settings.model}")
    console.print(f"GEMINI_API_KEY={'set' if settings.gemini_api_key else 'missing'}")
    console.print(f"OPENAI_API_KEY={'set' if settings.openai_api_key else 'missing'}")
    console.print(f"export_dir={settings.export_dir}")
    console.print("Hints:")
    console.print("- Set Gemini key: export GEMINI_API_KEY=... (API_KEY is also accepted)")
    console.print("- Set OpenAI key: export OPENAI_API_KEY=... and use --provider openai")
    console.print("- Settings can also live in ./cyberguard.toml or ~/.config/cyberguard/config.toml")

    if not check:
        return

    if settings.provider == "gemini":
        ok, message = _check_gemini(settings.gemini_api_key, settings.model)
    elif settings.provider == "openai":
        ok, message = _check_openai(settings.openai_api_key, settings.model)
    else:
        ok, message = False, f"Unsupported provider: {settings.provider}"

    console.print(f"Provider check: {'PASS' if ok else 'FAIL'} - {message}")
    logger.info("doctor --check completed: provider=%s ok=%s", settings.provider, ok)
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def scan(
    url: str = typer.Argument(..., help="Target web application URL, e.g. https://example.com."),
    owasp: bool = typer.Option(True, "--owasp/--no-owasp", help="Assess against the OWASP Top 10 2021."),
    iso27001: bool = typer.Option(
        False, "--iso27001/--no-iso27001", help="Assess against ISO/IEC 27001:2022 controls."
    ),
    provider: str | None = typer.Option(None, help="AI provider (env: CYBERGUARD_PROVIDER)."),
    model: str | None = typer.Option(None, help="Model name (env: CYBERGUARD_MODEL)."),
    format: str = typer.Option("table", help="table|json|summary"),
    output: str | None = typer.Option(None, help="Optional output file path."),
    pdf: bool = typer.Option(False, "--pdf", help="Export the report as a PDF document."),
    pdf_dir: str | None = typer.Option(None, help="Directory for exported PDFs (env: CYBERGUARD_EXPORT_DIR)."),
    no_color: bool = typer.Option(False, help="Disable color output."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logs."),
) -> None:
    _configure_logging(verbose)
    settings = load_settings(provider=provider, model=model)
    controller = ScanController(_build_generator(settings))
    options = ScanOptions(owasp_top10=owasp, iso27001=iso27001)

    _run_submit(controller, url, options)

    if controller.state is ScanState.IDLE:
        console.print(controller.validation_message, style="red", markup=False)
        raise typer.Exit(code=2)

    if controller.state is ScanState.ERROR or controller.report is None or controller.target is None:
        _print_scan_failed(controller.error)
        raise typer.Exit(code=1)

    report = controller.report
    target_url = controller.target.url

    if format == "json":
        payload = export_json_report(report, output)
        if not output:
            console.print_json(payload)
    elif format == "summary":
        payload = render_summary_report(report, target_url, no_color=no_color)
        if output:
            Path(output).write_text(payload, encoding="utf-8")
    else:
        render_console_report(report, target_url, no_color=no_color)
        console.print(FOOTER, style="grey50")
        if output:
            Path(output).write_text(export_json_report(report), encoding="utf-8")

    if pdf:
        exporter = ReportExporter(pdf_dir or settings.export_dir)
        if not _export_pdf(exporter, report, target_url):
            raise typer.Exit(code=1)


@app.command()
def session(
    provider: str | None = typer.Option(None, help="AI provider (env: CYBERGUARD_PROVIDER)."),
    model: str | None = typer.Option(None, help="Model name (env: CYBERGUARD_MODEL)."),
    pdf_dir: str | None = typer.Option(None, help="Directory for exported PDFs (env: CYBERGUARD_EXPORT_DIR)."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logs."),
) -> None:
    """Interactive scan form: enter a target, review the report, export or start over."""
    _configure_logging(verbose)
    settings = load_settings(provider=provider, model=model)
    controller = ScanController(_build_generator(settings))
    exporter = ReportExporter(pdf_dir or settings.export_dir)

    console.rule("[bold]CyberGuard Scanner[/bold]")
    console.print("AI-Powered Vulnerability Assessment", style="bold")
    console.print(
        "Enter a web application URL to begin a simulated penetration test. "
        "The AI model will generate a detailed security report based on industry standards.",
        style="grey62",
    )

    while True:
        if controller.state is ScanState.IDLE:
            if not _form_view(controller):
                break
        elif controller.state is ScanState.COMPLETED:
            if not _report_view(controller, exporter):
                break
        elif controller.state is ScanState.ERROR:
            if not _error_view(controller):
                break

    console.print(FOOTER, style="grey50")


def _configure_logging(verbose: bool) -> None:
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _build_generator(settings: Settings) -> ReportGenerator:
    try:
        provider_impl = create_provider(settings.provider, settings.api_key, settings.model)
    except (ValueError, RuntimeError) as exc:
        console.print(escape(str(exc)))
        console.print(f"Hint: set {settings.api_key_env} or run `cyberguard doctor`.")
        raise typer.Exit(code=2) from exc
    logger.info("scan config: provider=%s model=%s", settings.provider, settings.model)
    return ReportGenerator(provider_impl)


def _run_submit(controller: ScanController, url: str, options: ScanOptions) -> bool:
    message = controller.validate(url, options)
    if message is not None:
        return asyncio.run(controller.submit(url, options))
    with console.status(f"Scanning in progress... performing AI-driven analysis on: {escape(url.strip())}"):
        return asyncio.run(controller.submit(url, options))


def _print_scan_failed(error: str | None) -> None:
    console.print("[bold red]Scan Failed[/bold red]")
    console.print(error or "An unknown error occurred during the scan.", style="red")


def _export_pdf(exporter: ReportExporter, report: VulnerabilityReport, target_url: str) -> bool:
    try:
        with console.status("Generating PDF..."):
            path = asyncio.run(exporter.export(report, target_url))
    except ExportError as exc:
        console.print(escape(str(exc)), style="red")
        return False
    console.print(f"Saved PDF report to {escape(str(path))}")
    return True


def _form_view(controller: ScanController) -> bool:
    url = typer.prompt("Target URL (q to quit)", default="", show_default=False)
    if url.strip().lower() in QUIT_ANSWERS:
        return False
    owasp = typer.confirm("Assess against OWASP Top 10?", default=True)
    iso27001 = typer.confirm("Assess against ISO 27001?", default=False)
    _run_submit(controller, url, ScanOptions(owasp_top10=owasp, iso27001=iso27001))
    if controller.validation_message:
        console.print(controller.validation_message, style="red", markup=False)
    return True


def _report_view(controller: ScanController, exporter: ReportExporter) -> bool:
    if controller.report is None or controller.target is None:
        controller.reset()
        return True

    render_console_report(controller.report, controller.target.url, console=console)
    while True:
        action = typer.prompt("[d]ownload PDF, [n]ew scan, [q]uit", default="n").strip().lower()[:1]
        if action == "d":
            _export_pdf(exporter, controller.report, controller.target.url)
        elif action == "n":
            controller.reset()
            return True
        elif action == "q":
            return False
        else:
            console.print("Please answer d, n or q.")


def _error_view(controller: ScanController) -> bool:
    _print_scan_failed(controller.error)
    if typer.confirm("Try again?", default=True):
        controller.reset()
        return True
    return False


def _check_gemini(api_key: str | None, model: str) -> tuple[bool, str]:
    if not api_key:
        return False, "GEMINI_API_KEY is missing"

    from google import genai

    try:
        client = genai.Client(api_key=api_key)
        client.models.get(model=model)
    except Exception as exc:
        return False, f"Gemini check failed: {exc}"

    return True, f"Model '{model}' is accessible"


def _check_openai(api_key: str | None, model: str) -> tuple[bool, str]:
    if not api_key:
        return False, "OPENAI_API_KEY is missing"

    try:
        from openai import OpenAI
    except ImportError:
        return False, "openai package is not installed (install cyberguard-scanner[openai])"

    try:
        client = OpenAI(api_key=api_key)
        client.models.retrieve(model)
    except Exception as exc:
        return False, f"OpenAI check failed: {exc}"

    return True, f"Model '{model}' is accessible"
