"""
Module: builder.layout.models

Purpose:
    Data models for page layout.
    Immutable dataclasses representing rectangles, header lines and pages.

Key Classes:
    - PageOrientation: portrait / landscape
    - Rect: Axis-aligned rectangle in mm (top-left origin)
    - HeaderLine: One positioned line of header text
    - PagePlan: Complete page layout
    - LayoutResult: Ordered pages of one document

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.placement: Produces image Rects
    - builder.controller: Creates PagePlans
    - builder.output.renderer: Draws PagePlans
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from proofsheet.builder.images.rotator import RotatedImage
    from .config import HeaderStyle


class PageOrientation(str, Enum):
    """Resolved page orientation (never "auto")."""

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


@dataclass(frozen=True)
class Rect:
    """
    Rectangle in millimetres, origin at the page's top-left corner.

    Example:
        >>> Rect(10, 20, 100, 50).right
        110
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def contains(self, other: Rect, tolerance: float = 1e-9) -> bool:
        """True if other lies entirely inside this rectangle."""
        return (
            other.x >= self.x - tolerance
            and other.y >= self.y - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )


@dataclass(frozen=True)
class HeaderLine:
    """
    A single line of header text.

    Attributes:
        text: Text to draw
        style: Typography for the line
        top: Top of the line box in mm from page top
        height: Line box height in mm
    """

    text: str
    style: "HeaderStyle"
    top: float
    height: float

    @property
    def baseline(self) -> float:
        """Baseline position in mm from page top."""
        return self.top + self.style.font_size_mm

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class PagePlan:
    """
    Complete layout plan for a single page.

    Attributes:
        index: Page number (0-indexed)
        entry_id: Entry this page was built from
        orientation: Resolved orientation
        page_width: Page width in mm
        page_height: Page height in mm
        header_lines: Header lines in drawing order
        content_rect: Area available to the image
        image_rect: Where the image is drawn
        image: Rotated raster to draw
    """

    index: int
    entry_id: str
    orientation: PageOrientation
    page_width: float
    page_height: float
    header_lines: tuple[HeaderLine, ...]
    content_rect: Rect
    image_rect: Rect
    image: Optional["RotatedImage"] = None

    @property
    def page_size(self) -> tuple[float, float]:
        return (self.page_width, self.page_height)


@dataclass(frozen=True)
class LayoutResult:
    """
    Ordered pages of one document plus the ids of skipped entries.

    Example:
        >>> result = LayoutResult(pages=(page1, page2))
        >>> result.page_count
        2
    """

    pages: tuple[PagePlan, ...]
    skipped_entry_ids: tuple[str, ...] = ()

    @property
    def page_count(self) -> int:
        """Number of pages in layout."""
        return len(self.pages)
