"""
Core Models Package

Data models shared by the builder and the session layer.

Entries are frozen dataclasses: edits go through the entry store, which
produces new snapshots instead of mutating shared list elements. Raster
handles are the one mutable model, because their release hook must run
exactly once.
"""

from .raster import RasterHandle, Ownership, RasterReleasedError
from .entry import Entry, OrientationPreference, clamp_scale, clamp_offset, VALID_ROTATIONS

__all__ = [
    "RasterHandle",
    "Ownership",
    "RasterReleasedError",
    "Entry",
    "OrientationPreference",
    "clamp_scale",
    "clamp_offset",
    "VALID_ROTATIONS",
]
