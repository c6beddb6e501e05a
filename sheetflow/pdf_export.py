"""Export paginated documents to PDF and hand them to the system printer.

Sheets are US Letter. One CSS pixel (1/96in) is 0.75pt, so the default
metrics (864px usable height, 96px margins) fill the 792pt page exactly.
"""

from __future__ import annotations

import bisect
import io
import logging
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from typing import List, Optional, Tuple

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from .config import PageConfig
from .geometry import GeometryUnavailable, TextLayoutProbe
from .model import BlockKind, Document
from .planner import PaginationPlan

logger = logging.getLogger(__name__)

PT_PER_PX = 0.75


@dataclass(frozen=True)
class SheetLine:
    top: float  # px from the top of the sheet's content area
    height: float
    text: str
    kind: BlockKind


def layout_sheets(
    document: Document, plan: PaginationPlan, probe: TextLayoutProbe
) -> List[List[SheetLine]]:
    """Distribute visual lines over sheets according to the plan's page starts."""
    sheets: List[List[SheetLine]] = [[] for _ in range(plan.page_count)]
    page = 0
    y = 0.0
    for node in document.blocks():
        try:
            geometry = probe.measure_block(node)
            lines = probe.lines_of(node)
            starts = probe.line_start_positions(node)
        except GeometryUnavailable as e:
            logger.debug(f"Not exporting block {node.index}: {e}")
            continue
        line_height = geometry.rendered_height / len(lines)
        y += geometry.margin_top
        for text, pos in zip(lines, starts):
            line_page = min(bisect.bisect_right(plan.page_starts, pos) - 1, len(sheets) - 1)
            if line_page > page:
                page = line_page
                y = 0.0
            sheets[page].append(SheetLine(y, line_height, text, node.kind))
            y += line_height
        y += geometry.margin_bottom
    return sheets


class PDFExporter:
    """Draws sheets with reportlab."""

    FONT = "Courier"
    BOLD_FONT = "Courier-Bold"
    FONT_SIZE = 12
    HEADING_SIZES = {BlockKind.HEADING1: 18, BlockKind.HEADING2: 15}

    def __init__(self, config: Optional[PageConfig] = None, left_margin_px: float = 96):
        self.config = config or PageConfig()
        self.page_width, self.page_height = letter
        self.left_margin = left_margin_px * PT_PER_PX

    def generate_pdf(self, sheets: List[List[SheetLine]], title: Optional[str] = None) -> bytes:
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=letter)
        if title:
            c.setTitle(title)
        content_top = self.page_height - self.config.margin * PT_PER_PX
        for sheet in sheets:
            for line in sheet:
                size = self.HEADING_SIZES.get(line.kind, self.FONT_SIZE)
                font = self.BOLD_FONT if line.kind in self.HEADING_SIZES else self.FONT
                c.setFont(font, size)
                # Baseline sits a font size below the top of the line box
                baseline = content_top - (line.top * PT_PER_PX) - size
                c.drawString(self.left_margin, baseline, line.text)
            c.showPage()
        c.save()
        return buffer.getvalue()


class PrintOutput:
    """Saves exported PDFs and submits them to CUPS."""

    def __init__(self, exporter: Optional[PDFExporter] = None):
        self.exporter = exporter or PDFExporter()
        self.lpr_available = shutil.which("lpr") is not None

    def save_to_file(
        self, sheets: List[List[SheetLine]], filename: str, title: Optional[str] = None
    ) -> Tuple[bool, str]:
        if not filename.endswith('.pdf'):
            filename += '.pdf'
        try:
            pdf_content = self.exporter.generate_pdf(sheets, title)
            with open(filename, 'wb') as f:
                f.write(pdf_content)
            return True, ""
        except OSError as e:
            logger.warning(f"PDF export to {filename} failed: {e}")
            return False, f"Save error: {e}"

    def print_to_printer(
        self, sheets: List[List[SheetLine]], printer: Optional[str] = None
    ) -> Tuple[bool, str]:
        """Trigger printing through lpr; the print queue does the rest."""
        if not self.lpr_available:
            return False, "Printing is not available (lpr command not found)"
        pdf_filename = None
        try:
            with tempfile.NamedTemporaryFile(mode='wb', suffix='.pdf', delete=False) as pdf_file:
                pdf_filename = pdf_file.name
                pdf_file.write(self.exporter.generate_pdf(sheets))
            cmd = ['lpr']
            if printer:
                cmd.extend(['-P', printer])
            cmd.append(pdf_filename)
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=10)
            if result.returncode != 0:
                error_msg = result.stderr.strip() if result.stderr else "Print command failed"
                return False, f"Print failed: {error_msg}"
            return True, ""
        except subprocess.TimeoutExpired:
            return False, "Print command timed out"
        except (OSError, subprocess.SubprocessError) as e:
            return False, f"Print error: {e}"
        finally:
            if pdf_filename is not None and os.path.exists(pdf_filename):
                os.unlink(pdf_filename)
