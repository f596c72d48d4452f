"""
Module: builder.layout.orientation

Purpose:
    Decide the page orientation for an entry.
    An explicit preference always wins; "auto" classifies by aspect ratio.

Key Functions:
    - resolve_orientation(): Entry + aspect ratio -> PageOrientation
    - needs_aspect_ratio(): Whether a size read is required

Dependencies:
    - core.models.entry: Entry, OrientationPreference

Used By:
    - builder.controller: Pre-resolves every page before the document exists
"""

from __future__ import annotations

from typing import Optional

from proofsheet.common.thresholds import PANORAMA_THRESHOLD
from proofsheet.core.models.entry import Entry, OrientationPreference

from .models import PageOrientation


def needs_aspect_ratio(entry: Entry) -> bool:
    """True if resolving this entry depends on its image's aspect ratio."""
    return entry.orientation is OrientationPreference.AUTO and entry.image is not None


def resolve_orientation(
    entry: Entry,
    aspect_ratio: Optional[float],
    *,
    panorama_threshold: float = PANORAMA_THRESHOLD,
) -> PageOrientation:
    """
    Resolve the page orientation for an entry.

    Args:
        entry: Entry whose preference is consulted
        aspect_ratio: width / height of the finalized image, or None
        panorama_threshold: Ratio at or above which "auto" means landscape

    Returns:
        PORTRAIT or LANDSCAPE (never fails)

    Example:
        >>> resolve_orientation(Entry(image=handle), 3.0)
        <PageOrientation.LANDSCAPE: 'landscape'>
        >>> resolve_orientation(Entry(), 3.0)  # no image
        <PageOrientation.PORTRAIT: 'portrait'>
    """
    if entry.orientation is OrientationPreference.PORTRAIT:
        return PageOrientation.PORTRAIT
    if entry.orientation is OrientationPreference.LANDSCAPE:
        return PageOrientation.LANDSCAPE

    if entry.image is None or aspect_ratio is None:
        return PageOrientation.PORTRAIT

    if aspect_ratio >= panorama_threshold:
        return PageOrientation.LANDSCAPE
    return PageOrientation.PORTRAIT
