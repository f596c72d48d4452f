"""Common utilities shared across proofsheet."""

from __future__ import annotations

from .thresholds import (
    PANORAMA_THRESHOLD,
    PANORAMA_INSET,
    STANDARD_INSET,
    SCALE_MIN,
    SCALE_MAX,
    OFFSET_MIN,
    OFFSET_MAX,
    JPEG_QUALITY,
    TRANSPARENT_FORMATS,
    CONVERSION,
    ConversionThresholds,
)
from .logging_utils import configure_logging
from .image_utils import to_8bit

__all__ = [
    # thresholds
    "PANORAMA_THRESHOLD",
    "PANORAMA_INSET",
    "STANDARD_INSET",
    "SCALE_MIN",
    "SCALE_MAX",
    "OFFSET_MIN",
    "OFFSET_MAX",
    "JPEG_QUALITY",
    "TRANSPARENT_FORMATS",
    "CONVERSION",
    "ConversionThresholds",
    # logging
    "configure_logging",
    # images
    "to_8bit",
]
