"""
Module: builder.layout

Purpose:
    Page layout for document assembly.
    Resolves page orientation, plans header lines and computes the
    contained, inset, scaled and offset image rectangle.

Key Functions:
    - resolve_orientation(): Page orientation for an entry
    - plan_header(): Header lines and cursor
    - place_image(): Drawn image rectangle

Key Classes:
    - LayoutConfig: Configuration for page layout
    - PageOrientation: portrait / landscape
    - Rect: Rectangle in mm
    - PagePlan: Single page layout plan

Used By:
    - builder.controller: Document assembly
"""

from .models import PageOrientation, Rect, HeaderLine, PagePlan, LayoutResult
from .config import LayoutConfig, HeaderStyle
from .orientation import resolve_orientation, needs_aspect_ratio
from .placement import select_inset, inset_box, contain_fit, place_image
from .header import plan_header

__all__ = [
    # Config
    "LayoutConfig",
    "HeaderStyle",
    # Models
    "PageOrientation",
    "Rect",
    "HeaderLine",
    "PagePlan",
    "LayoutResult",
    # Functions
    "resolve_orientation",
    "needs_aspect_ratio",
    "select_inset",
    "inset_box",
    "contain_fit",
    "place_image",
    "plan_header",
]
