"""
Module: builder.images

Purpose:
    Raster operations for document assembly: decoding, orientation-aware
    rotation and cropping.

Key Classes:
    - RotatedImage: Rotated, encoded raster
    - DecodeError: Source cannot be decoded

Key Functions:
    - rotate_for_page(): Rotate a raster to match a page orientation
    - crop_raster(): Crop a raster to a new temporary handle

Dependencies:
    - PIL: Image manipulation

Used By:
    - builder.controller: Page planning
    - session.crop_state: Crop apply
"""

from .rotator import (
    DecodeError,
    RotatedImage,
    final_rotation,
    output_format,
    open_raster,
    read_aspect_ratio,
    read_size,
    rotate_for_page,
)
from .cropper import crop_raster

__all__ = [
    "DecodeError",
    "RotatedImage",
    "final_rotation",
    "output_format",
    "open_raster",
    "read_aspect_ratio",
    "read_size",
    "rotate_for_page",
    "crop_raster",
]
