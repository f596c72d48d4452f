"""
Module: builder.output

Purpose:
    PDF rendering for assembled documents using ReportLab.

Key Functions:
    - render_to_pdf_bytes(): Render layout to PDF bytes
    - render_to_pdf(): Render layout to a PDF file

Used By:
    - builder.controller: Document assembly
"""

from .renderer import render_to_pdf, render_to_pdf_bytes

__all__ = [
    "render_to_pdf",
    "render_to_pdf_bytes",
]
