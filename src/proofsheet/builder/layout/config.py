"""
Module: builder.layout.config

Purpose:
    Configuration for the page layout engine.
    Defines page format, margins, header typography and inset rules.
    All lengths are millimetres; font sizes are points.

Key Classes:
    - HeaderStyle: Font, size and colour for one header line kind
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.header: Header line planning
    - builder.layout.placement: Inset selection
    - builder.controller: Page planning
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from proofsheet.common.thresholds import PANORAMA_INSET, PANORAMA_THRESHOLD, STANDARD_INSET

from .models import PageOrientation

# A4 in millimetres (portrait)
A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0

PT_TO_MM = 25.4 / 72.0


@dataclass(frozen=True)
class HeaderStyle:
    """
    Typography for one kind of header line.

    Attributes:
        font_name: Standard PDF font name
        font_size: Size in points
        color: Hex colour like "#2563eb"
    """

    font_name: str
    font_size: float
    color: str

    def __post_init__(self) -> None:
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive: {self.font_size}")
        if not (self.color.startswith("#") and len(self.color) == 7):
            raise ValueError(f"color must be #rrggbb: {self.color!r}")

    @property
    def font_size_mm(self) -> float:
        """Font size converted to millimetres."""
        return self.font_size * PT_TO_MM


# Job number: bold, largest, neutral. Title: accent A (blue). Size: accent B (amber).
JOB_NUMBER_STYLE = HeaderStyle("Helvetica-Bold", 16, "#374151")
TITLE_STYLE = HeaderStyle("Helvetica-Bold", 14, "#2563eb")
SIZE_STYLE = HeaderStyle("Helvetica-Bold", 12, "#eab308")


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for page layout (immutable).

    Attributes:
        page_width: Portrait page width in mm
        page_height: Portrait page height in mm
        margin_top: Top margin in mm
        margin_bottom: Bottom margin in mm
        margin_left: Left margin in mm
        margin_right: Right margin in mm
        header_gap: Gap between the last header line and the image area (mm)
        line_spacing: Line height as a multiple of the font size
        panorama_threshold: Aspect ratio at which an image counts as a panorama
        panorama_inset: Inset fraction per side for panoramas
        standard_inset: Inset fraction per side for everything else
        job_number_style: Style of the job number line
        title_style: Style of title lines
        size_style: Style of size lines

    Example:
        >>> config = LayoutConfig()
        >>> config.page_size(PageOrientation.LANDSCAPE)
        (297.0, 210.0)
    """

    # Page format (portrait dimensions; landscape swaps them)
    page_width: float = A4_WIDTH_MM
    page_height: float = A4_HEIGHT_MM

    # Margins
    margin_top: float = 10.0
    margin_bottom: float = 10.0
    margin_left: float = 10.0
    margin_right: float = 10.0

    # Header
    header_gap: float = 4.0
    line_spacing: float = 1.2
    job_number_style: HeaderStyle = field(default=JOB_NUMBER_STYLE)
    title_style: HeaderStyle = field(default=TITLE_STYLE)
    size_style: HeaderStyle = field(default=SIZE_STYLE)

    # Insets
    panorama_threshold: float = PANORAMA_THRESHOLD
    panorama_inset: float = PANORAMA_INSET
    standard_inset: float = STANDARD_INSET

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise ValueError(f"page_height must be positive: {self.page_height}")
        short_side = min(self.page_width, self.page_height)
        if self.margin_left + self.margin_right >= short_side:
            raise ValueError("Margins exceed page width")
        if self.margin_top + self.margin_bottom >= short_side:
            raise ValueError("Margins exceed page height")
        if self.line_spacing < 1.0:
            raise ValueError(f"line_spacing must be >= 1.0: {self.line_spacing}")
        if self.panorama_threshold <= 0:
            raise ValueError(f"panorama_threshold must be positive: {self.panorama_threshold}")
        for name in ("panorama_inset", "standard_inset"):
            value = getattr(self, name)
            if not 0 <= value < 0.5:
                raise ValueError(f"{name} must be in [0, 0.5): {value}")

    def page_size(self, orientation: PageOrientation) -> Tuple[float, float]:
        """(width, height) in mm for the given orientation."""
        short_side = min(self.page_width, self.page_height)
        long_side = max(self.page_width, self.page_height)
        if orientation is PageOrientation.LANDSCAPE:
            return (long_side, short_side)
        return (short_side, long_side)

    def available_width(self, orientation: PageOrientation) -> float:
        """Width available for content (excluding margins)."""
        width, _ = self.page_size(orientation)
        return width - self.margin_left - self.margin_right
