"""
Module: upload.converter

Purpose:
    Normalize an arbitrary still-image file into an sRGB PNG. Pillow is
    tried first; the ImageMagick command-line tool is the fallback.

Key Functions:
    - normalize_image(): Main conversion entry point

Key Classes:
    - ConversionResult: PNG bytes plus which path produced them
    - ConversionError: One conversion path failed
    - ConversionFallbackExhausted: Both paths failed

Dependencies:
    - PIL: Primary conversion (ImageCms for ICC → sRGB)
    - subprocess (std): ImageMagick fallback

Used By:
    - upload.server: POST /upload
"""

from __future__ import annotations

import io
import logging
import subprocess
import threading
from dataclasses import dataclass
from typing import List, Optional

from PIL import Image, ImageCms

from proofsheet.common.image_utils import to_8bit

from .config import ServerSettings

logger = logging.getLogger(__name__)

# Image.MAX_IMAGE_PIXELS is process-global; only one request may swap it at a time
_PIXEL_LIMIT_LOCK = threading.Lock()

VIA_PRIMARY = "primary"
VIA_FALLBACK = "fallback"


class ConversionError(Exception):
    """A single conversion path failed."""
    pass


class ConversionFallbackExhausted(ConversionError):
    """Both the primary and the fallback conversion failed."""
    pass


@dataclass(frozen=True)
class ConversionResult:
    """
    Normalized image (immutable).

    Attributes:
        png: sRGB PNG bytes
        via: "primary" (Pillow) or "fallback" (ImageMagick)
    """

    png: bytes
    via: str


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info


def _to_srgb(img: Image.Image) -> Image.Image:
    """Convert to an 8-bit RGB(A)/L(A) image in sRGB."""
    img = to_8bit(img)

    icc = img.info.get("icc_profile")
    if icc:
        try:
            src = ImageCms.ImageCmsProfile(io.BytesIO(icc))
            dst = ImageCms.createProfile("sRGB")
            mode = "RGBA" if img.mode in ("RGBA", "LA") else "RGB"
            img = ImageCms.profileToProfile(img, src, dst, outputMode=mode)
        except (ImageCms.PyCMSError, OSError) as e:
            logger.warning(f"Ignoring unusable ICC profile: {e}")

    if img.mode not in ("RGB", "RGBA", "L", "LA"):
        img = img.convert("RGBA" if _has_alpha(img) else "RGB")
    return img


def _open_unbounded(data: bytes, settings: ServerSettings) -> Image.Image:
    """
    Open an image header with Pillow's decompression-bomb guard lifted.

    The guard is replaced by settings.max_decode_pixels so that large
    scans still reach the downscale step.

    Raises:
        Image.DecompressionBombError: If the image exceeds max_decode_pixels
    """
    with _PIXEL_LIMIT_LOCK:
        previous = Image.MAX_IMAGE_PIXELS
        Image.MAX_IMAGE_PIXELS = None
        try:
            img = Image.open(io.BytesIO(data))
        finally:
            Image.MAX_IMAGE_PIXELS = previous

    pixels = img.width * img.height
    if pixels > settings.max_decode_pixels:
        raise Image.DecompressionBombError(
            f"Image size ({pixels} pixels) exceeds limit of {settings.max_decode_pixels} pixels"
        )
    return img


def _convert_with_pillow(data: bytes, transparent: bool, settings: ServerSettings) -> bytes:
    img = _open_unbounded(data, settings)
    if getattr(img, "n_frames", 1) > 1:
        img.seek(0)

    box = settings.downscale_box_px
    oversized = img.width * img.height > settings.max_input_pixels
    if oversized:
        logger.info(f"Downscaling {img.width}x{img.height} to fit {box}x{box}")
        # JPEG decodes at a reduced scale; other formats ignore the hint
        img.draft(img.mode, (box, box))
    img.load()

    img = to_8bit(img)
    if oversized:
        img.thumbnail((box, box), Image.Resampling.LANCZOS)
    img = _to_srgb(img)

    if transparent:
        if not _has_alpha(img):
            img = img.convert("RGBA")
    else:
        rgba = img.convert("RGBA")
        flat = Image.new("RGB", rgba.size, "white")
        flat.paste(rgba, mask=rgba.getchannel("A"))
        img = flat

    buf = io.BytesIO()
    img.save(buf, format="PNG", optimize=True)
    return buf.getvalue()


def magick_args(transparent: bool, command: str = "magick") -> List[str]:
    """ImageMagick arguments reading frame 0 from stdin and writing PNG to stdout."""
    if transparent:
        return [command, "-[0]", "-alpha", "on", "-colorspace", "sRGB", "png:-"]
    return [
        command, "-[0]",
        "-background", "white",
        "-alpha", "remove",
        "-flatten",
        "-colorspace", "sRGB",
        "png:-",
    ]


def _convert_with_magick(data: bytes, transparent: bool, settings: ServerSettings) -> bytes:
    args = magick_args(transparent, settings.magick_command)
    try:
        proc = subprocess.run(
            args,
            input=data,
            capture_output=True,
            timeout=settings.magick_timeout_s,
            check=False,
        )
    except FileNotFoundError as e:
        raise ConversionError(f"{settings.magick_command} not found") from e
    except subprocess.TimeoutExpired as e:
        raise ConversionError(
            f"{settings.magick_command} timed out after {settings.magick_timeout_s}s"
        ) from e

    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", "replace").strip() or "no stderr"
        raise ConversionError(f"{settings.magick_command} exited {proc.returncode}: {stderr}")
    if not proc.stdout:
        raise ConversionError(f"{settings.magick_command} produced no output")
    return proc.stdout


def normalize_image(
    data: bytes,
    *,
    transparent: bool = False,
    settings: Optional[ServerSettings] = None,
) -> ConversionResult:
    """
    Normalize an image file to an sRGB PNG.

    Args:
        data: Raw uploaded file
        transparent: Keep alpha (True) or flatten onto white (False)
        settings: Service settings (limits, ImageMagick command)

    Returns:
        ConversionResult with the path that succeeded

    Raises:
        ConversionFallbackExhausted: If Pillow and ImageMagick both fail

    Example:
        >>> result = normalize_image(tiff_bytes)
        >>> result.via
        'primary'
    """
    settings = settings or ServerSettings()

    try:
        png = _convert_with_pillow(data, transparent, settings)
        return ConversionResult(png=png, via=VIA_PRIMARY)
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        logger.warning(f"Pillow failed (falling back to ImageMagick): {e}")

    try:
        png = _convert_with_magick(data, transparent, settings)
    except ConversionError as e:
        logger.error(f"ImageMagick fallback failed: {e}")
        raise ConversionFallbackExhausted(f"Image processing failed: {e}") from e
    return ConversionResult(png=png, via=VIA_FALLBACK)
