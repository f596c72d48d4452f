"""
Module: builder.images.cropper

Purpose:
    Produce the finalized raster for an entry from its pre-crop original:
    crop to a pixel box, bound the resolution and re-encode.

Key Functions:
    - crop_raster(): Crop a RasterHandle to a new temporary handle

Dependencies:
    - PIL: Image manipulation
    - builder.images.rotator: open_raster / DecodeError

Used By:
    - session.crop_state: Crop apply
"""

from __future__ import annotations

import io
import logging
from typing import Tuple

from PIL import Image

from proofsheet.common.image_utils import to_8bit
from proofsheet.core.models.raster import RasterHandle

from .rotator import open_raster

logger = logging.getLogger(__name__)

# Constants
DEFAULT_MAX_DIMENSION_PX = 4096
DEFAULT_CROP_QUALITY = 0.92


def crop_raster(
    source: RasterHandle,
    box: Tuple[int, int, int, int],
    *,
    max_dimension: int = DEFAULT_MAX_DIMENSION_PX,
    quality: float = DEFAULT_CROP_QUALITY,
) -> RasterHandle:
    """
    Crop a region from a source raster.

    Args:
        source: Pre-crop original
        box: (left, top, right, bottom) in source pixels
        max_dimension: Longest output side; larger crops are downscaled
        quality: JPEG quality fraction when the crop has no alpha

    Returns:
        New owned-temporary RasterHandle (PNG with alpha, else JPEG)

    Raises:
        ValueError: If box lies outside the image or is empty
        DecodeError: If the source cannot be decoded

    Example:
        >>> cropped = crop_raster(original, (0, 0, 800, 600))
    """
    if max_dimension <= 0:
        raise ValueError(f"max_dimension must be positive: {max_dimension}")

    img = open_raster(source)
    left, top, right, bottom = box

    # Validate box
    if left < 0 or top < 0:
        raise ValueError(f"Crop box {box} starts outside the image")
    if right > img.width or bottom > img.height:
        raise ValueError(
            f"Crop box {box} exceeds image size {img.width}x{img.height}"
        )
    if right <= left or bottom <= top:
        raise ValueError(f"Crop box {box} is empty")

    cropped = to_8bit(img.crop(box))

    longest = max(cropped.size)
    if longest > max_dimension:
        factor = max_dimension / longest
        new_size = (
            max(1, int(round(cropped.width * factor))),
            max(1, int(round(cropped.height * factor))),
        )
        cropped = cropped.resize(new_size, Image.Resampling.LANCZOS)

    has_alpha = cropped.mode in ("RGBA", "LA") or (
        cropped.mode == "P" and "transparency" in cropped.info
    )
    buf = io.BytesIO()
    if has_alpha:
        cropped.save(buf, format="PNG")
        suffix = ".png"
    else:
        cropped.convert("RGB").save(buf, format="JPEG", quality=int(round(quality * 100)))
        suffix = ".jpg"

    logger.debug(f"Cropped {source.name} to {cropped.width}x{cropped.height} ({suffix[1:]})")
    return RasterHandle.from_bytes(buf.getvalue(), temporary=True, suffix=suffix, name=source.name)
