"""
Module: builder

Purpose:
    Document assembly pipeline. Resolves each entry's page orientation,
    rotates its image to match, lays out the header and the contained
    image, and renders the pages to PDF.

Key Functions:
    - assemble_document(): Main entry point (async)
    - build_document(): Synchronous wrapper
    - plan_document(): Page plans without rendering
    - export_filename(): Download name for a job number

Key Classes:
    - BuilderConfig: Configuration for assembly
    - ExportSession: Guarded export to disk
    - BuildError: Exception for assembly failures

Dependencies:
    - PIL: Image decoding and rotation
    - reportlab: PDF generation
"""

from .config import BuilderConfig
from .layout import LayoutConfig, PageOrientation
from .images import DecodeError
from .controller import (
    assemble_document,
    build_document,
    plan_document,
    export_filename,
    ExportSession,
    ExportResult,
    BuildError,
    ExportInProgressError,
)

__all__ = [
    # Config
    "BuilderConfig",
    "LayoutConfig",
    "PageOrientation",
    # Controller
    "assemble_document",
    "build_document",
    "plan_document",
    "export_filename",
    "ExportSession",
    "ExportResult",
    "BuildError",
    "ExportInProgressError",
    "DecodeError",
]
