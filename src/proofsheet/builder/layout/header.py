"""
Module: builder.layout.header

Purpose:
    Plan the header text block at the top of a page: job number, title
    and size, each on its own line(s), left-aligned, advancing a running
    vertical cursor. Title and size wrap to the content width.

Key Functions:
    - plan_header(): Positioned HeaderLines and the cursor below them

Dependencies:
    - reportlab: Font metrics for wrapping (simpleSplit)
    - builder.layout.config: HeaderStyle, LayoutConfig

Used By:
    - builder.controller: Page planning
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit

from .config import HeaderStyle, LayoutConfig
from .models import HeaderLine

logger = logging.getLogger(__name__)


def _clean(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    text = text.strip()
    return text or None


def _wrap(text: str, style: HeaderStyle, width_mm: float) -> List[str]:
    """Split text into lines that fit width_mm using the style's font metrics."""
    lines = simpleSplit(text, style.font_name, style.font_size, width_mm * mm)
    return lines or [text]


def plan_header(
    job_number: Optional[str],
    title: Optional[str],
    size: Optional[str],
    *,
    top: float,
    width: float,
    config: LayoutConfig,
) -> Tuple[Tuple[HeaderLine, ...], float]:
    """
    Lay out header lines from top downwards.

    Absent or blank fields contribute no line and no vertical advance.

    Args:
        job_number: Job number (drawn as "Job Number: <n>")
        title: Entry title, wrapped
        size: Entry size label, wrapped
        top: Starting cursor in mm from page top
        width: Available text width in mm
        config: Layout configuration (styles, line spacing)

    Returns:
        (header lines, cursor below the last line)

    Example:
        >>> lines, cursor = plan_header("J-1", None, None, top=10, width=190, config=LayoutConfig())
        >>> [l.text for l in lines]
        ['Job Number: J-1']
    """
    blocks: List[Tuple[List[str], HeaderStyle]] = []

    job_number = _clean(job_number)
    if job_number:
        blocks.append(([f"Job Number: {job_number}"], config.job_number_style))

    title = _clean(title)
    if title:
        blocks.append((_wrap(title, config.title_style, width), config.title_style))

    size = _clean(size)
    if size:
        blocks.append((_wrap(size, config.size_style, width), config.size_style))

    cursor = top
    header_lines: List[HeaderLine] = []
    for texts, style in blocks:
        line_height = style.font_size_mm * config.line_spacing
        for text in texts:
            header_lines.append(HeaderLine(text=text, style=style, top=cursor, height=line_height))
            cursor += line_height

    logger.debug(f"Planned {len(header_lines)} header lines ending at {cursor:.1f}mm")
    return tuple(header_lines), cursor
