"""
Module: session

Purpose:
    In-memory editing state: the ordered entry store and the crop state
    machine that owns transient raster handles.

Key Classes:
    - EntryStore: Snapshot-based entry collection
    - CropSession: Idle / Cropping state machine
"""

from .entries import EntryStore
from .crop_state import CropSession, Cropping, Idle

__all__ = [
    "EntryStore",
    "CropSession",
    "Cropping",
    "Idle",
]
