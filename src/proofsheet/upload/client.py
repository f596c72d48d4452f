"""
Module: upload.client

Purpose:
    Send a file to the conversion service and return the normalized PNG
    as a temporary raster handle. Every failure mode surfaces as a single
    UploadError; nothing is retried.

Key Classes:
    - UploadClient: POST /upload wrapper
    - UploadError: Service unreachable, non-OK or malformed response

Dependencies:
    - requests: HTTP client
    - upload.config: UploadSettings

Used By:
    - session.crop_state.CropSession.select_file
"""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Optional, Union

import requests

from proofsheet.core.models.raster import RasterHandle

from .config import UploadSettings

logger = logging.getLogger(__name__)


class UploadError(Exception):
    """Conversion service unreachable, failed or returned an unexpected payload."""
    pass


class UploadClient:
    """
    Client for the conversion service.

    Example:
        >>> client = UploadClient(UploadSettings.from_env())
        >>> handle = client.upload(Path("scan.tiff"))
        >>> handle.is_temporary
        True
    """

    def __init__(
        self,
        settings: Optional[UploadSettings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or UploadSettings.from_env()
        self._http = session or requests

    def upload(self, path: Union[str, Path], *, transparent: Optional[bool] = None) -> RasterHandle:
        """
        Convert a local file through the service.

        Args:
            path: File to upload
            transparent: Keep alpha; defaults to settings.transparent

        Returns:
            Owned-temporary PNG RasterHandle

        Raises:
            UploadError: On any failure (file unreadable, network, status, payload)
        """
        path = Path(path)
        if transparent is None:
            transparent = self.settings.transparent
        params = {"bg": "transparent" if transparent else "white"}

        try:
            data = path.read_bytes()
        except OSError as e:
            raise UploadError(f"Could not read {path.name}: {e}") from e

        logger.info(f"Uploading {path.name} ({len(data)} bytes) to {self.settings.upload_url}")
        try:
            response = self._http.post(
                self.settings.upload_url,
                params=params,
                files={"file": (path.name, data)},
                timeout=self.settings.timeout_s,
            )
        except requests.RequestException as e:
            logger.error(f"Upload of {path.name} failed: {e}")
            raise UploadError(f"Conversion service unreachable: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.ok:
            message = payload.get("error") if isinstance(payload, dict) else None
            logger.error(f"Conversion of {path.name} failed with HTTP {response.status_code}")
            raise UploadError(
                f"Conversion failed (HTTP {response.status_code})"
                + (f": {message}" if message else "")
            )

        if not isinstance(payload, dict) or not isinstance(payload.get("base64"), str):
            raise UploadError("Conversion service returned an unexpected payload")

        try:
            png = base64.b64decode(payload["base64"], validate=True)
        except (binascii.Error, ValueError) as e:
            raise UploadError(f"Conversion service returned invalid base64: {e}") from e
        if not png:
            raise UploadError("Conversion service returned an empty image")

        logger.info(f"Converted {path.name} via {payload.get('via', 'unknown')}")
        return RasterHandle.from_bytes(
            png, temporary=True, suffix=".png", name=f"{path.stem}.png"
        )
