"""Pixel-depth helpers shared by the builder and the conversion service."""

from __future__ import annotations

from PIL import Image

# Integer greyscale modes holding 16 significant bits per pixel
WIDE_GREY_MODES = ("I", "I;16", "I;16L", "I;16B", "I;16N")


def to_8bit(img: Image.Image) -> Image.Image:
    """
    Scale 16-bit greyscale pixels down to 8-bit "L".

    Converting such images straight to RGB clips every value above 255
    to white. Other modes are returned unchanged.

    Example:
        >>> to_8bit(Image.new("I;16", (2, 2), 20000)).getpixel((0, 0))
        78
    """
    if img.mode not in WIDE_GREY_MODES:
        return img
    return img.convert("I").point(lambda v: v * (1 / 256)).convert("L")
