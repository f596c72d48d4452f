"""
Module: builder.layout.placement

Purpose:
    Containment and inset layout for the image area of a page.
    Shrinks the content rectangle by an inset, contain-fits the image,
    applies the user scale and distributes the remaining slack according
    to the user offset.

Key Functions:
    - select_inset(): Inset fraction for an aspect ratio
    - inset_box(): Content rect shrunk symmetrically by an inset
    - contain_fit(): Largest size with the given ratio inside a box
    - place_image(): Final drawn rectangle

Algorithm:
    1. inset = 0.04 if ratio >= 2.6 else 0.10 (per side)
    2. box = content shrunk by inset on all four sides
    3. contain-fit the ratio inside box
    4. multiply by scale/100 (clamped to [50, 100])
    5. slack = box - drawn; origin = box + slack/2 + (offset/100)*(slack/2)

Dependencies:
    - builder.layout.models: Rect
    - core.models.entry: clamp helpers

Used By:
    - builder.controller: Page planning
"""

from __future__ import annotations

from typing import Tuple

from proofsheet.common.thresholds import PANORAMA_INSET, PANORAMA_THRESHOLD, STANDARD_INSET
from proofsheet.core.models.entry import clamp_offset, clamp_scale

from .models import Rect


def select_inset(
    aspect_ratio: float,
    *,
    panorama_threshold: float = PANORAMA_THRESHOLD,
    panorama_inset: float = PANORAMA_INSET,
    standard_inset: float = STANDARD_INSET,
) -> float:
    """Inset fraction per side for an image of the given aspect ratio."""
    if aspect_ratio >= panorama_threshold:
        return panorama_inset
    return standard_inset


def inset_box(content: Rect, inset: float) -> Rect:
    """Shrink content symmetrically by inset (fraction of each dimension) per side."""
    return Rect(
        x=content.x + content.width * inset,
        y=content.y + content.height * inset,
        width=content.width * (1 - 2 * inset),
        height=content.height * (1 - 2 * inset),
    )


def contain_fit(box_width: float, box_height: float, aspect_ratio: float) -> Tuple[float, float]:
    """
    Largest (width, height) with aspect_ratio that fits inside the box.

    Example:
        >>> contain_fit(100, 100, 2.0)
        (100, 50.0)
        >>> contain_fit(100, 100, 0.5)
        (50.0, 100)
    """
    draw_w = box_width
    draw_h = draw_w / aspect_ratio
    if draw_h > box_height:
        draw_h = box_height
        draw_w = draw_h * aspect_ratio
    return draw_w, draw_h


def place_image(
    content: Rect,
    aspect_ratio: float,
    scale_percent: float = 100,
    offset_x_percent: float = 0,
    offset_y_percent: float = 0,
    *,
    panorama_threshold: float = PANORAMA_THRESHOLD,
    panorama_inset: float = PANORAMA_INSET,
    standard_inset: float = STANDARD_INSET,
) -> Rect:
    """
    Compute where the image is drawn inside the content rectangle.

    Pure function: identical inputs always give identical output.

    Args:
        content: Area below the header, in mm
        aspect_ratio: width / height of the (rotated) image
        scale_percent: Shrink percent, clamped to [50, 100]
        offset_x_percent: Horizontal offset, clamped to [-100, 100]
        offset_y_percent: Vertical offset, clamped to [-100, 100]

    Returns:
        Rect in mm, always inside content

    Raises:
        ValueError: If aspect_ratio is not positive

    Example:
        >>> rect = place_image(Rect(0, 0, 200, 100), 2.0)
        >>> rect.aspect_ratio
        2.0
    """
    if aspect_ratio <= 0:
        raise ValueError(f"aspect_ratio must be positive: {aspect_ratio}")

    inset = select_inset(
        aspect_ratio,
        panorama_threshold=panorama_threshold,
        panorama_inset=panorama_inset,
        standard_inset=standard_inset,
    )
    box = inset_box(content, inset)

    draw_w, draw_h = contain_fit(box.width, box.height, aspect_ratio)

    factor = clamp_scale(scale_percent) / 100
    draw_w *= factor
    draw_h *= factor

    slack_x = max(0.0, box.width - draw_w)
    slack_y = max(0.0, box.height - draw_h)
    dx = (clamp_offset(offset_x_percent) / 100) * (slack_x / 2)
    dy = (clamp_offset(offset_y_percent) / 100) * (slack_y / 2)

    return Rect(
        x=box.x + slack_x / 2 + dx,
        y=box.y + slack_y / 2 + dy,
        width=draw_w,
        height=draw_h,
    )
