"""
Module: upload

Purpose:
    Conversion of arbitrary still images to sRGB PNG: the converter, the
    Flask service that exposes it and the client that calls it.

Key Functions:
    - normalize_image(): Pillow conversion with ImageMagick fallback
    - create_app(): Flask app for POST /upload

Key Classes:
    - UploadClient / UploadError: Client side
    - UploadSettings / ServerSettings: Configuration
"""

from .config import UploadSettings, ServerSettings
from .converter import (
    normalize_image,
    ConversionResult,
    ConversionError,
    ConversionFallbackExhausted,
)
from .client import UploadClient, UploadError

__all__ = [
    "UploadSettings",
    "ServerSettings",
    "normalize_image",
    "ConversionResult",
    "ConversionError",
    "ConversionFallbackExhausted",
    "UploadClient",
    "UploadError",
]
