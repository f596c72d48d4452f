"""
Module: builder.output.renderer

Purpose:
    Render a LayoutResult to PDF using ReportLab.
    Each PagePlan becomes one PDF page sized to its own orientation, with
    header text and the rotated raster placed at their planned positions.

Key Functions:
    - render_to_pdf_bytes(): Serialize a layout to PDF bytes
    - render_to_pdf(): Write a layout to a PDF file

Dependencies:
    - reportlab: PDF generation
    - builder.layout.models: LayoutResult, PagePlan

Used By:
    - builder.controller: Document assembly
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional

from reportlab.lib.colors import HexColor
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from proofsheet.builder.layout.models import HeaderLine, LayoutResult, PagePlan, Rect
from proofsheet.builder.layout.config import A4_HEIGHT_MM, A4_WIDTH_MM

logger = logging.getLogger(__name__)


def render_to_pdf_bytes(layout: LayoutResult, *, title: Optional[str] = None) -> bytes:
    """
    Render layout result to PDF bytes.

    Args:
        layout: Planned pages, in document order
        title: Optional PDF metadata title

    Returns:
        Complete PDF document

    Example:
        >>> data = render_to_pdf_bytes(layout, title="J-1042")
        >>> data[:5]
        b'%PDF-'
    """
    if layout.page_count == 0:
        logger.warning("Empty layout, creating empty PDF")

    buf = io.BytesIO()
    first_size = layout.pages[0].page_size if layout.pages else (A4_WIDTH_MM, A4_HEIGHT_MM)
    c = canvas.Canvas(buf, pagesize=(first_size[0] * mm, first_size[1] * mm))
    if title:
        c.setTitle(title)

    for page in layout.pages:
        _render_page(c, page)
        c.showPage()

    c.save()
    data = buf.getvalue()
    logger.info(f"Rendered {layout.page_count} pages ({len(data)} bytes)")
    return data


def render_to_pdf(layout: LayoutResult, output_path: Path, *, title: Optional[str] = None) -> None:
    """
    Render layout result to a PDF file.

    The file is only written once the whole document has been rendered.

    Raises:
        IOError: If PDF cannot be written
    """
    data = render_to_pdf_bytes(layout, title=title)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)
    logger.info(f"Wrote {output_path}")


def _render_page(c: canvas.Canvas, page: PagePlan) -> None:
    """Render a single page to the canvas."""
    # Applies to the page currently being drawn
    c.setPageSize((page.page_width * mm, page.page_height * mm))
    page_height_pt = page.page_height * mm

    for line in page.header_lines:
        _draw_header_line(c, line, page.content_rect.x, page_height_pt)

    if page.image is not None:
        _draw_image(c, page, page_height_pt)


def _draw_header_line(c: canvas.Canvas, line: HeaderLine, left_mm: float, page_height_pt: float) -> None:
    """Draw one left-aligned header line at its baseline."""
    c.saveState()
    c.setFont(line.style.font_name, line.style.font_size)
    c.setFillColor(HexColor(line.style.color))
    c.drawString(left_mm * mm, page_height_pt - line.baseline * mm, line.text)
    c.restoreState()


def _draw_image(c: canvas.Canvas, page: PagePlan, page_height_pt: float) -> None:
    """Draw the page's rotated raster into its planned rectangle."""
    rect = page.image_rect
    reader = ImageReader(io.BytesIO(page.image.data))
    c.drawImage(
        reader,
        rect.x * mm,
        _transform_y(page_height_pt, rect),
        width=rect.width * mm,
        height=rect.height * mm,
        mask="auto" if page.image.image_format == "PNG" else None,
    )


def _transform_y(page_height_pt: float, rect: Rect) -> float:
    """
    Convert a top-down mm rectangle to the bottom-up PDF Y of its lower edge.

    Args:
        page_height_pt: Page height in points
        rect: Rectangle in mm from page top

    Returns:
        Y position from bottom in points
    """
    return page_height_pt - rect.bottom * mm
