from __future__ import annotations

import asyncio
import io
import logging
import math
import re
from datetime import date
from pathlib import Path

import httpx
from PIL import Image, ImageDraw, ImageFont
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from rich.cells import cell_len
from rich.color import Color
from rich.console import Console, RenderableType
from rich.segment import Segment
from rich.style import Style

from cyberguard.models.reports import VulnerabilityReport
from cyberguard.output.console import build_report_renderable

EXPORT_FAILED_MESSAGE = "Failed to generate PDF. Please try again."

BACKGROUND = (10, 10, 10)
FOREGROUND = (229, 231, 235)
RENDER_WIDTH = 110
BASE_FONT_SIZE = 14
MONO_FONTS = ("DejaVuSansMono.ttf", "Menlo.ttc", "consola.ttf", "cour.ttf")

logger = logging.getLogger(__name__)


class ExportError(Exception):
    pass


def report_hostname(url: str) -> str:
    try:
        host = httpx.URL(url).raw_host.decode("ascii")
    except httpx.InvalidURL:
        host = ""
    sanitized = re.sub(r"[^A-Za-z0-9.-]", "-", host).strip(".-")
    return sanitized or "report"


def report_filename(url: str) -> str:
    return f"Vulnerability-Report-{report_hostname(url)}.pdf"


def _load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    for name in MONO_FONTS:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _rgb(color: Color | None) -> tuple[int, int, int] | None:
    if color is None or color.is_default:
        return None
    triplet = color.get_truecolor()
    return (triplet.red, triplet.green, triplet.blue)


def _segment_colors(style: Style | None) -> tuple[tuple[int, int, int], tuple[int, int, int] | None]:
    if style is None:
        return FOREGROUND, None
    foreground = _rgb(style.color)
    background = _rgb(style.bgcolor)
    if style.reverse:
        return background or BACKGROUND, foreground or FOREGROUND
    return foreground or FOREGROUND, background


def _render_lines(renderable: RenderableType, width: int) -> list[list[Segment]]:
    console = Console(file=io.StringIO(), width=width, color_system="truecolor")
    return console.render_lines(renderable, console.options.update(width=width), pad=True)


def rasterize_lines(lines: list[list[Segment]], *, width: int, scale: int = 2) -> Image.Image:
    """Paint rendered terminal lines onto an image, one fixed-width cell per column."""
    font = _load_font(BASE_FONT_SIZE * scale)
    cell_width = max(1, math.ceil(font.getlength("M")))
    line_height = max(1, math.ceil(font.getbbox("Mg")[3])) + 4 * scale
    margin = 16 * scale

    image = Image.new(
        "RGB",
        (width * cell_width + 2 * margin, max(1, len(lines)) * line_height + 2 * margin),
        BACKGROUND,
    )
    draw = ImageDraw.Draw(image)

    for row, line in enumerate(lines):
        y = margin + row * line_height
        column = 0
        for segment in line:
            if segment.control:
                continue
            foreground, background = _segment_colors(segment.style)
            for char in segment.text:
                cells = cell_len(char)
                x = margin + column * cell_width
                if background is not None:
                    draw.rectangle(
                        (x, y, x + cells * cell_width - 1, y + line_height - 1),
                        fill=background,
                    )
                if not char.isspace():
                    draw.text((x, y), char, font=font, fill=foreground)
                column += cells
    return image


def rasterize_report(
    report: VulnerabilityReport,
    target_url: str,
    *,
    scan_date: date | None = None,
    width: int = RENDER_WIDTH,
    scale: int = 2,
) -> Image.Image:
    renderable = build_report_renderable(report, target_url, scan_date=scan_date)
    return rasterize_lines(_render_lines(renderable, width), width=width, scale=scale)


def write_image_pdf(image: Image.Image, path: Path) -> Path:
    """Write ``image`` as the only page of a PDF sized exactly to it."""
    width, height = image.size
    pdf = canvas.Canvas(str(path), pagesize=(width, height))
    pdf.drawImage(ImageReader(image), 0, 0, width=width, height=height)
    pdf.showPage()
    pdf.save()
    return path


def export_pdf_report(
    report: VulnerabilityReport,
    target_url: str,
    output_dir: Path,
    *,
    scan_date: date | None = None,
) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    image = rasterize_report(report, target_url, scan_date=scan_date)
    return write_image_pdf(image, output_dir / report_filename(target_url))


class ReportExporter:
    """Runs PDF exports off the event loop, one at a time."""

    def __init__(self, output_dir: str | Path = ".") -> None:
        self.output_dir = Path(output_dir)
        self._exporting = False

    @property
    def is_exporting(self) -> bool:
        return self._exporting

    async def export(
        self,
        report: VulnerabilityReport,
        target_url: str,
        *,
        scan_date: date | None = None,
    ) -> Path:
        if self._exporting:
            raise ExportError("An export is already in progress")

        self._exporting = True
        try:
            path = await asyncio.to_thread(
                export_pdf_report,
                report,
                target_url,
                self.output_dir,
                scan_date=scan_date,
            )
        except Exception as exc:
            logger.exception("PDF export failed for %s", target_url)
            raise ExportError(EXPORT_FAILED_MESSAGE) from exc
        finally:
            self._exporting = False

        logger.info("Exported report to %s", path)
        return path
