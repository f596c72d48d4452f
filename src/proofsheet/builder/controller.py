"""
Module: builder.controller

Purpose:
    Orchestrate document assembly.
    Filter → Resolve orientations → (per entry) Header → Rotate → Place → Render

Key Functions:
    - plan_document(): Page plans for a list of entries (async)
    - assemble_document(): PDF bytes for a list of entries (async)
    - build_document(): Synchronous wrapper around assemble_document
    - export_filename(): Download name derived from the job number

Key Classes:
    - ExportSession: Single in-flight export with file output
    - ExportResult: Written export details
    - BuildError / ExportInProgressError: Assembly failures

Dependencies:
    - builder.layout: Orientation, header and placement
    - builder.images: Rotation
    - builder.output: PDF rendering

Used By:
    - Callers exporting a session's entries
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from proofsheet.core.models.entry import Entry

from .config import BuilderConfig
from .layout import (
    LayoutResult,
    PageOrientation,
    PagePlan,
    Rect,
    needs_aspect_ratio,
    place_image,
    plan_header,
    resolve_orientation,
)
from .images import DecodeError, read_aspect_ratio, rotate_for_page
from .output.renderer import render_to_pdf_bytes

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """Error during document assembly."""
    pass


class ExportInProgressError(BuildError):
    """An export was requested while another one is still running."""
    pass


@dataclass(frozen=True)
class ExportResult:
    """
    Written export (immutable).

    Attributes:
        path: File the PDF was written to
        filename: Download name ("<job>.pdf" or "output.pdf")
        page_count: Number of pages in the document
        size_bytes: Size of the PDF
    """

    path: Path
    filename: str
    page_count: int
    size_bytes: int


def export_filename(job_number: Optional[str], fallback: str = "output") -> str:
    """
    Download file name for a job number.

    Example:
        >>> export_filename("J-1042")
        'J-1042.pdf'
        >>> export_filename("  ")
        'output.pdf'
    """
    stem = (job_number or "").strip()
    stem = re.sub(r"[\\/]+", "-", stem)
    return f"{stem or fallback}.pdf"


async def plan_document(
    job_number: Optional[str],
    entries: Sequence[Entry],
    config: Optional[BuilderConfig] = None,
) -> LayoutResult:
    """
    Plan every page of the document without rendering it.

    Entries are processed strictly in order; each decode is awaited
    before the next entry starts.

    Args:
        job_number: Job number drawn on every page
        entries: Entries in page order (entries without image are skipped)
        config: Builder configuration

    Returns:
        LayoutResult with one PagePlan per kept entry

    Raises:
        BuildError: If no entry has an image or a page has no room left
        DecodeError: If any image cannot be decoded
    """
    config = config or BuilderConfig()
    layout_config = config.layout

    kept = [e for e in entries if e.image is not None]
    skipped = tuple(e.entry_id for e in entries if e.image is None)
    if skipped:
        logger.debug(f"Skipping {len(skipped)} entries without an image")
    if not kept:
        raise BuildError("No entries with an image to export")

    # 1. Every orientation must be known before the first page exists
    orientations: List[PageOrientation] = []
    for entry in kept:
        ratio = None
        if needs_aspect_ratio(entry):
            try:
                ratio = await asyncio.to_thread(read_aspect_ratio, entry.image)
            except DecodeError as e:
                logger.error(f"Entry {entry.entry_id}: {e}")
                raise
        orientations.append(
            resolve_orientation(entry, ratio, panorama_threshold=layout_config.panorama_threshold)
        )

    # 2. Plan pages in entry order
    pages: List[PagePlan] = []
    for index, (entry, orientation) in enumerate(zip(kept, orientations)):
        page_width, page_height = layout_config.page_size(orientation)
        text_width = layout_config.available_width(orientation)

        header_lines, cursor = plan_header(
            job_number,
            entry.title,
            entry.size,
            top=layout_config.margin_top,
            width=text_width,
            config=layout_config,
        )
        content_top = cursor + layout_config.header_gap if header_lines else cursor
        content = Rect(
            x=layout_config.margin_left,
            y=content_top,
            width=text_width,
            height=page_height - layout_config.margin_bottom - content_top,
        )
        if content.height <= 0:
            raise BuildError(
                f"Header of entry {entry.entry_id} leaves no room for the image"
            )

        try:
            rotated = await asyncio.to_thread(
                rotate_for_page,
                entry.image,
                entry.rotation,
                orientation,
                quality=config.jpeg_quality,
            )
        except DecodeError as e:
            logger.error(f"Entry {entry.entry_id}: {e}")
            raise

        image_rect = place_image(
            content,
            rotated.aspect_ratio,
            entry.scale,
            entry.offset_x,
            entry.offset_y,
            panorama_threshold=layout_config.panorama_threshold,
            panorama_inset=layout_config.panorama_inset,
            standard_inset=layout_config.standard_inset,
        )

        pages.append(PagePlan(
            index=index,
            entry_id=entry.entry_id,
            orientation=orientation,
            page_width=page_width,
            page_height=page_height,
            header_lines=header_lines,
            content_rect=content,
            image_rect=image_rect,
            image=rotated,
        ))
        logger.debug(
            f"Page {index + 1}: {orientation.value}, image {rotated.width}x{rotated.height} "
            f"at ({image_rect.x:.1f}, {image_rect.y:.1f}) {image_rect.width:.1f}x{image_rect.height:.1f}mm"
        )

    return LayoutResult(pages=tuple(pages), skipped_entry_ids=skipped)


async def assemble_document(
    job_number: Optional[str],
    entries: Sequence[Entry],
    config: Optional[BuilderConfig] = None,
) -> bytes:
    """
    Assemble entries into one PDF document.

    Args:
        job_number: Job number drawn on every page
        entries: Entries in page order
        config: Builder configuration

    Returns:
        PDF bytes, one page per entry with an image

    Raises:
        BuildError: If nothing can be exported
        DecodeError: If any image cannot be decoded (no partial document)

    Example:
        >>> data = await assemble_document("J-1042", store.snapshot)
    """
    config = config or BuilderConfig()
    start_time = time.perf_counter()

    logger.info(f"Assembling document for job {job_number or '-'} from {len(entries)} entries")

    layout = await plan_document(job_number, entries, config)
    title = (job_number or "").strip() if config.set_document_title else None
    data = await asyncio.to_thread(render_to_pdf_bytes, layout, title=title or None)

    elapsed = time.perf_counter() - start_time
    logger.info(f"Assembled {layout.page_count} pages in {elapsed:.2f}s")
    return data


def build_document(
    job_number: Optional[str],
    entries: Sequence[Entry],
    config: Optional[BuilderConfig] = None,
) -> bytes:
    """Synchronous wrapper for assemble_document()."""
    return asyncio.run(assemble_document(job_number, entries, config))


class ExportSession:
    """
    Runs at most one export at a time and writes the result to disk.

    The in-progress flag is cleared whether the export succeeds or fails.

    Example:
        >>> session = ExportSession()
        >>> result = await session.export("J-1042", entries, Path("out"))
        >>> result.filename
        'J-1042.pdf'
    """

    def __init__(self, config: Optional[BuilderConfig] = None) -> None:
        self.config = config or BuilderConfig()
        self._in_progress = False

    @property
    def in_progress(self) -> bool:
        """True while an export is running."""
        return self._in_progress

    async def export(
        self,
        job_number: Optional[str],
        entries: Sequence[Entry],
        output_dir: Union[str, Path],
    ) -> ExportResult:
        """
        Assemble and write the document.

        Raises:
            ExportInProgressError: If another export is running
            BuildError / DecodeError: If assembly fails (nothing is written)
            OSError: If the output file cannot be written
        """
        if self._in_progress:
            raise ExportInProgressError("An export is already in progress")

        self._in_progress = True
        try:
            data = await assemble_document(job_number, entries, self.config)
            filename = export_filename(job_number, self.config.fallback_filename)
            path = Path(output_dir) / filename
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            page_count = sum(1 for e in entries if e.image is not None)
            logger.info(f"Exported {filename} ({len(data)} bytes)")
            return ExportResult(path=path, filename=filename, page_count=page_count, size_bytes=len(data))
        except (BuildError, DecodeError) as e:
            logger.error(f"Export failed: {e}")
            raise
        except OSError as e:
            logger.error(f"Could not write export to {output_dir}: {e}")
            raise
        finally:
            self._in_progress = False
