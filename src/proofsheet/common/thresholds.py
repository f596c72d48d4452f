"""Centralized threshold and magic number configuration.

This module contains the ratios and limits used by the layout pipeline and
the conversion service. Having these in one place makes tuning easier.
"""

from __future__ import annotations

from dataclasses import dataclass

# Width / height at or above which an image is treated as a panorama
PANORAMA_THRESHOLD = 2.6

# Inset fraction per side of the content box
PANORAMA_INSET = 0.04
STANDARD_INSET = 0.10

# User transform domains (percent)
SCALE_MIN = 50
SCALE_MAX = 100
OFFSET_MIN = -100
OFFSET_MAX = 100

# Lossy encoding quality for rotated rasters (fraction, 0-1)
JPEG_QUALITY = 0.9

# Source formats that can carry an alpha channel
TRANSPARENT_FORMATS = frozenset({"PNG", "WEBP", "GIF", "TIFF"})


@dataclass(frozen=True)
class ConversionThresholds:
    """Limits applied by the conversion service."""

    max_upload_bytes: int = 200 * 1024 * 1024  # 200 MB
    max_decode_pixels: int = 1_000_000_000  # Refuse to decode beyond this
    max_input_pixels: int = 50_000_000  # Above this, downscale before encoding
    downscale_box_px: int = 5000  # Fit-inside box used when downscaling


CONVERSION = ConversionThresholds()
