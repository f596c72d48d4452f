"""
Module: upload.config

Purpose:
    Settings for the conversion service and its client. Immutable
    configuration with validation on construction; the client's base URL
    is the only value read from the environment.

Key Classes:
    - UploadSettings: Client-side settings
    - ServerSettings: Service-side limits and tools

Dependencies:
    - dataclasses (std)
    - os (std): Environment lookup

Used By:
    - upload.client: UploadClient
    - upload.server: create_app
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from proofsheet.common.thresholds import CONVERSION

UPLOAD_URL_ENV = "PROOFSHEET_UPLOAD_URL"
DEFAULT_UPLOAD_URL = "http://localhost:4000"
DEFAULT_PORT = 4000


@dataclass(frozen=True)
class UploadSettings:
    """
    Client settings (immutable).

    Attributes:
        base_url: Conversion service root, without trailing slash
        timeout_s: Request timeout in seconds
        transparent: Default for the bg query parameter

    Example:
        >>> UploadSettings.from_env({"PROOFSHEET_UPLOAD_URL": "https://convert.example/"}).upload_url
        'https://convert.example/upload'
    """

    base_url: str = DEFAULT_UPLOAD_URL
    timeout_s: float = 120.0
    transparent: bool = False

    def __post_init__(self) -> None:
        """Validate and normalize on construction."""
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be http(s): {self.base_url!r}")
        if self.timeout_s <= 0:
            raise ValueError(f"timeout_s must be positive: {self.timeout_s}")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def upload_url(self) -> str:
        return f"{self.base_url}/upload"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "UploadSettings":
        """Build settings from PROOFSHEET_UPLOAD_URL (if set)."""
        environ = os.environ if environ is None else environ
        base_url = environ.get(UPLOAD_URL_ENV, "").strip()
        return cls(base_url=base_url or DEFAULT_UPLOAD_URL)


@dataclass(frozen=True)
class ServerSettings:
    """
    Conversion service settings (immutable).

    Attributes:
        max_upload_bytes: Request size ceiling
        max_decode_pixels: Pixel count above which input is rejected unread
        max_input_pixels: Pixel count above which input is downscaled
        downscale_box_px: Fit-inside box for downscaling
        magick_command: ImageMagick executable ("magick" or "convert")
        magick_timeout_s: Fallback conversion timeout
        cors_origins: Origins allowed to call the service
        port: Listening port
    """

    max_upload_bytes: int = CONVERSION.max_upload_bytes
    max_decode_pixels: int = CONVERSION.max_decode_pixels
    max_input_pixels: int = CONVERSION.max_input_pixels
    downscale_box_px: int = CONVERSION.downscale_box_px
    magick_command: str = "magick"
    magick_timeout_s: float = 300.0
    cors_origins: Tuple[str, ...] = field(
        default=("http://localhost:5173", "http://127.0.0.1:5173")
    )
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_upload_bytes <= 0:
            raise ValueError(f"max_upload_bytes must be positive: {self.max_upload_bytes}")
        if self.max_decode_pixels < self.max_input_pixels:
            raise ValueError(
                f"max_decode_pixels must be >= max_input_pixels: {self.max_decode_pixels}"
            )
        if self.max_input_pixels <= 0:
            raise ValueError(f"max_input_pixels must be positive: {self.max_input_pixels}")
        if self.downscale_box_px <= 0:
            raise ValueError(f"downscale_box_px must be positive: {self.downscale_box_px}")
        if not self.magick_command:
            raise ValueError("magick_command must not be empty")
        if not 0 < self.port < 65536:
            raise ValueError(f"port out of range: {self.port}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerSettings":
        """Build settings, taking the port from PORT (if set)."""
        environ = os.environ if environ is None else environ
        port = environ.get("PORT", "").strip()
        return cls(port=int(port) if port else DEFAULT_PORT)
