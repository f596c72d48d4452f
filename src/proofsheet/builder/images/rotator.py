"""
Module: builder.images.rotator

Purpose:
    Re-rasterize an entry's image so its pixel shape matches the page.
    Applies the user rotation, then at most one extra 90° turn when the
    result would otherwise work against the page orientation.

Key Functions:
    - final_rotation(): Rotation after orientation correction
    - output_format(): PNG for transparency-capable sources, else JPEG
    - open_raster(): Decode a RasterHandle (DecodeError on failure)
    - read_aspect_ratio(): Header-only size read
    - rotate_for_page(): Main entry point

Key Classes:
    - RotatedImage: Encoded output with dimensions
    - DecodeError: Source cannot be decoded

Dependencies:
    - PIL: Decoding, lossless transposes, encoding
    - core.models.raster: RasterHandle

Used By:
    - builder.controller: Page planning
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image

from proofsheet.common.image_utils import to_8bit
from proofsheet.common.thresholds import JPEG_QUALITY, TRANSPARENT_FORMATS
from proofsheet.core.models.raster import RasterHandle, RasterReleasedError
from proofsheet.builder.layout.models import PageOrientation

logger = logging.getLogger(__name__)

# Clockwise angle -> lossless PIL transpose (PIL's ROTATE_* are counter-clockwise)
_CLOCKWISE_TRANSPOSE = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


class DecodeError(Exception):
    """Image reference cannot be loaded as pixels."""
    pass


@dataclass(frozen=True)
class RotatedImage:
    """
    Rotated, re-encoded raster (immutable).

    Attributes:
        data: Encoded bytes
        width: Pixel width after rotation
        height: Pixel height after rotation
        image_format: "PNG" or "JPEG"
        rotation: Clockwise rotation applied, in degrees
    """

    data: bytes
    width: int
    height: int
    image_format: str
    rotation: int

    @property
    def aspect_ratio(self) -> float:
        """width / height of the rotated raster."""
        return self.width / self.height


def final_rotation(
    base_width: int,
    base_height: int,
    user_rotation: int,
    orientation: PageOrientation,
) -> int:
    """
    Rotation to apply so the pixels never work against the page shape.

    Args:
        base_width: Source pixel width
        base_height: Source pixel height
        user_rotation: User-requested rotation (0/90/180/270)
        orientation: Target page orientation

    Returns:
        Clockwise rotation normalized into [0, 360)

    Example:
        >>> final_rotation(1000, 1500, 0, PageOrientation.LANDSCAPE)
        90
        >>> final_rotation(3000, 1000, 0, PageOrientation.LANDSCAPE)
        0
    """
    ratio = base_width / base_height
    effective = 1 / ratio if user_rotation in (90, 270) else ratio

    rotation = user_rotation
    if orientation is PageOrientation.LANDSCAPE and effective < 1:
        rotation += 90
    elif orientation is PageOrientation.PORTRAIT and effective > 1:
        rotation += 90
    return rotation % 360


def output_format(source_format: Optional[str]) -> str:
    """PNG when the source encoding can carry transparency, else JPEG."""
    if source_format and source_format.upper() in TRANSPARENT_FORMATS:
        return "PNG"
    return "JPEG"


def open_raster(handle: RasterHandle) -> Image.Image:
    """
    Decode a raster handle fully into pixels.

    Raises:
        DecodeError: If the bytes are missing, released or not an image
    """
    try:
        data = handle.read_bytes()
        img = Image.open(io.BytesIO(data))
        img.load()
    except (OSError, RasterReleasedError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Could not decode {handle.name}: {e}") from e
    return img


def read_aspect_ratio(handle: RasterHandle) -> float:
    """
    Read width / height from the image header without decoding pixels.

    Raises:
        DecodeError: If the header cannot be read
    """
    width, height = read_size(handle)
    return width / height


def read_size(handle: RasterHandle) -> Tuple[int, int]:
    """(width, height) from the image header."""
    try:
        with Image.open(io.BytesIO(handle.read_bytes())) as img:
            width, height = img.size
    except (OSError, RasterReleasedError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Could not read size of {handle.name}: {e}") from e
    if width <= 0 or height <= 0:
        raise DecodeError(f"Image {handle.name} has no pixels ({width}x{height})")
    return width, height


def _encode(img: Image.Image, fmt: str, quality: float) -> bytes:
    img = to_8bit(img)
    buf = io.BytesIO()
    if fmt == "JPEG":
        if img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        img.save(buf, format="JPEG", quality=int(round(quality * 100)))
    else:
        if img.mode not in ("1", "L", "LA", "P", "RGB", "RGBA"):
            img = img.convert("RGBA")
        img.save(buf, format="PNG")
    return buf.getvalue()


def rotate_for_page(
    source: RasterHandle,
    user_rotation: int,
    orientation: PageOrientation,
    *,
    quality: float = JPEG_QUALITY,
) -> RotatedImage:
    """
    Rotate a source raster for a page of the given orientation.

    Rotation 0 without correction keeps the exact pixel dimensions; all
    rotations are lossless transposes, so only re-encoding can lose detail.

    Args:
        source: Finalized entry raster
        user_rotation: User rotation (0/90/180/270)
        orientation: Resolved page orientation
        quality: JPEG quality fraction for non-transparent sources

    Returns:
        RotatedImage with swapped dimensions for 90/270

    Raises:
        DecodeError: If the source cannot be decoded
    """
    img = open_raster(source)
    fmt = output_format(img.format)
    img = to_8bit(img)
    base_w, base_h = img.size

    rotation = final_rotation(base_w, base_h, user_rotation, orientation)
    if rotation:
        img = img.transpose(_CLOCKWISE_TRANSPOSE[rotation])

    out_w, out_h = (base_h, base_w) if rotation in (90, 270) else (base_w, base_h)

    logger.debug(
        f"Rotated {source.name} {base_w}x{base_h} by {rotation} "
        f"(user {user_rotation}) for {orientation.value} page as {fmt}"
    )

    return RotatedImage(
        data=_encode(img, fmt, quality),
        width=out_w,
        height=out_h,
        image_format=fmt,
        rotation=rotation,
    )
