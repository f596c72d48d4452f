"""
Module: builder.config

Purpose:
    Configuration dataclass for document assembly. Immutable
    configuration with validation on construction.

Key Classes:
    - BuilderConfig: Main configuration for assembling documents

Dependencies:
    - dataclasses (std)
    - builder.layout.config: LayoutConfig

Used By:
    - builder.controller: Document assembly
"""

from __future__ import annotations

from dataclasses import dataclass, field

from proofsheet.common.thresholds import JPEG_QUALITY

from .layout.config import LayoutConfig


@dataclass(frozen=True)
class BuilderConfig:
    """
    Configuration for assembling documents (immutable).

    Attributes:
        layout: Page format, margins, header styles and inset rules
        jpeg_quality: Quality fraction for rotated non-transparent rasters
        fallback_filename: File stem used when the job number is empty
        set_document_title: Whether to write the job number as PDF title

    Example:
        >>> config = BuilderConfig(jpeg_quality=0.85)
        >>> config.layout.page_width
        210.0
    """

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    jpeg_quality: float = JPEG_QUALITY
    fallback_filename: str = "output"
    set_document_title: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not 0 < self.jpeg_quality <= 1:
            raise ValueError(f"jpeg_quality must be in (0, 1]: {self.jpeg_quality}")
        if not self.fallback_filename.strip():
            raise ValueError("fallback_filename must not be blank")
