"""
Module: entry

Purpose:
    Provides the Entry dataclass - one page's worth of input state (labels,
    finalized image and user transform parameters) - plus the clamping
    helpers that keep user transforms inside their domains.

Key Classes:
    - OrientationPreference: auto / portrait / landscape
    - Entry: Immutable per-page input

Key Functions:
    - clamp_scale(): Clamp scale percent into [50, 100]
    - clamp_offset(): Clamp offset percent into [-100, 100]

Dependencies:
    - dataclasses (std)
    - core.models.raster: RasterHandle

Used By:
    - session.entries.EntryStore
    - builder.layout.orientation
    - builder.controller
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from proofsheet.common.thresholds import OFFSET_MAX, OFFSET_MIN, SCALE_MAX, SCALE_MIN

from .raster import RasterHandle

VALID_ROTATIONS = (0, 90, 180, 270)


class OrientationPreference(str, Enum):
    """User page orientation choice; AUTO defers to the aspect ratio."""

    AUTO = "auto"
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


def clamp_scale(value: float) -> int:
    """Clamp a scale percent into [SCALE_MIN, SCALE_MAX]."""
    return int(max(SCALE_MIN, min(SCALE_MAX, round(value))))


def clamp_offset(value: float) -> int:
    """Clamp an offset percent into [OFFSET_MIN, OFFSET_MAX]."""
    return int(max(OFFSET_MIN, min(OFFSET_MAX, round(value))))


def _new_entry_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Entry:
    """
    Input state for one page (immutable).

    Attributes:
        entry_id: Stable identity used by the store and crop session
        title: Optional title, drawn first under the job number
        size: Optional size label, drawn below the title
        image: Finalized (cropped) raster; None means no page
        original_image: Pre-crop raster, only set while cropping
        orientation: Page orientation preference
        scale: Shrink percent applied after contain-fit [50, 100]
        offset_x: Horizontal displacement percent of half slack [-100, 100]
        offset_y: Vertical displacement percent of half slack [-100, 100]
        rotation: Extra clockwise rotation in degrees (0/90/180/270)

    Invariants:
        - rotation in VALID_ROTATIONS
        - scale / offsets always within their domains

    Example:
        >>> entry = Entry(title="Route 10", size="48x14")
        >>> entry.has_image
        False
    """

    entry_id: str = field(default_factory=_new_entry_id)
    title: Optional[str] = None
    size: Optional[str] = None
    image: Optional[RasterHandle] = None
    original_image: Optional[RasterHandle] = None
    orientation: OrientationPreference = OrientationPreference.AUTO
    scale: int = 100
    offset_x: int = 0
    offset_y: int = 0
    rotation: int = 0

    def __post_init__(self) -> None:
        """Validate rotation and clamp user transforms on construction."""
        if self.rotation not in VALID_ROTATIONS:
            raise ValueError(f"rotation must be one of {VALID_ROTATIONS}: {self.rotation}")
        # Plain strings are accepted for orientation ("auto", "portrait", ...)
        object.__setattr__(self, "orientation", OrientationPreference(self.orientation))
        object.__setattr__(self, "scale", clamp_scale(self.scale))
        object.__setattr__(self, "offset_x", clamp_offset(self.offset_x))
        object.__setattr__(self, "offset_y", clamp_offset(self.offset_y))

    @property
    def has_image(self) -> bool:
        """True if the entry contributes a page."""
        return self.image is not None

    @property
    def is_cropping(self) -> bool:
        """True while a pre-crop original is attached."""
        return self.original_image is not None

    def with_changes(self, **changes) -> "Entry":
        """Return a copy with fields replaced (validated again)."""
        return replace(self, **changes)
