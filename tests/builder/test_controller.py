"""
Tests for builder.controller

Test Coverage:
- build_document(): page order, per-page orientation, skipped entries
- plan_document(): header gap, explicit orientation
- ExportSession: file output, single-flight guard, no partial output
- export_filename(): job number sanitizing and fallback
"""
import asyncio

import fitz
import pytest
from reportlab.lib.units import mm

from proofsheet.builder import (
    BuildError,
    BuilderConfig,
    DecodeError,
    ExportInProgressError,
    ExportSession,
    PageOrientation,
    build_document,
    export_filename,
    plan_document,
)
from proofsheet.core.models import Entry, RasterHandle


@pytest.fixture
def panorama_entry(panorama_path):
    return Entry(title="Platform panorama", size="96 x 32 in", image=RasterHandle.from_path(panorama_path))


@pytest.fixture
def portrait_entry(portrait_path):
    return Entry(title="Poster", image=RasterHandle.from_path(portrait_path))


@pytest.fixture
def broken_entry():
    return Entry(title="Broken", image=RasterHandle.from_bytes(b"not an image", name="broken.jpg"))


class TestBuildDocument:
    """Tests for build_document()."""

    def test_build_when_panorama_then_portrait_then_page_sizes_follow(
        self, tmp_job_number, panorama_entry, portrait_entry
    ):
        """Landscape page 1, portrait page 2, in entry order."""
        # Act
        data = build_document(tmp_job_number, [panorama_entry, portrait_entry])

        # Assert
        doc = fitz.open(stream=data, filetype="pdf")
        try:
            assert doc.page_count == 2
            assert (doc[0].rect.width, doc[0].rect.height) == pytest.approx((297 * mm, 210 * mm), abs=0.5)
            assert (doc[1].rect.width, doc[1].rect.height) == pytest.approx((210 * mm, 297 * mm), abs=0.5)
            assert "Platform panorama" in doc[0].get_text()
            assert "Poster" in doc[1].get_text()
            assert f"Job Number: {tmp_job_number}" in doc[1].get_text()
        finally:
            doc.close()

    def test_build_when_entries_without_image_then_skipped(self, panorama_entry):
        """Entries without an image produce no page."""
        data = build_document("J-1", [Entry(title="empty"), panorama_entry, Entry()])

        doc = fitz.open(stream=data, filetype="pdf")
        try:
            assert doc.page_count == 1
        finally:
            doc.close()

    def test_build_when_no_images_then_raises(self):
        """Nothing to export is an error."""
        with pytest.raises(BuildError, match="No entries"):
            build_document("J-1", [Entry(title="a"), Entry(title="b")])

    def test_build_when_image_broken_then_decode_error(self, panorama_entry, broken_entry):
        """One undecodable image fails the whole document."""
        with pytest.raises(DecodeError, match="broken.jpg"):
            build_document("J-1", [panorama_entry, broken_entry])


class TestPlanDocument:
    """Tests for plan_document()."""

    def test_plan_when_header_present_then_gap_below_it(self, tmp_job_number, portrait_entry):
        """Content starts header_gap below the last header line."""
        # Act
        layout = asyncio.run(plan_document(tmp_job_number, [portrait_entry]))

        # Assert
        page = layout.pages[0]
        assert page.content_rect.y == pytest.approx(page.header_lines[-1].bottom + 4)
        assert page.content_rect.bottom == pytest.approx(297 - 10)
        assert page.content_rect.contains(page.image_rect, tolerance=1e-6)

    def test_plan_when_no_header_then_content_at_margin(self, portrait_path):
        """Without header lines the content area starts at the top margin."""
        entry = Entry(image=RasterHandle.from_path(portrait_path))

        layout = asyncio.run(plan_document(None, [entry]))

        assert layout.pages[0].header_lines == ()
        assert layout.pages[0].content_rect.y == pytest.approx(10)

    def test_plan_when_explicit_portrait_then_panorama_turned(self, panorama_path):
        """Explicit portrait wins and the panorama is rotated to fit."""
        entry = Entry(image=RasterHandle.from_path(panorama_path), orientation="portrait")

        layout = asyncio.run(plan_document("J-1", [entry]))

        page = layout.pages[0]
        assert page.orientation is PageOrientation.PORTRAIT
        assert (page.image.width, page.image.height) == (1000, 3000)

    def test_plan_when_many_entries_then_order_kept(self, panorama_entry, portrait_entry):
        """Pages follow entry order; skipped entries are reported."""
        empty = Entry()

        layout = asyncio.run(plan_document("J-1", [portrait_entry, empty, panorama_entry]))

        assert [p.entry_id for p in layout.pages] == [portrait_entry.entry_id, panorama_entry.entry_id]
        assert [p.index for p in layout.pages] == [0, 1]
        assert layout.skipped_entry_ids == (empty.entry_id,)

    def test_plan_when_scale_and_offset_then_applied(self, portrait_path):
        """User scale shrinks the drawn rect."""
        handle = RasterHandle.from_path(portrait_path)
        full = asyncio.run(plan_document("J-1", [Entry(image=handle)])).pages[0]
        half = asyncio.run(plan_document("J-1", [Entry(image=handle, scale=50, offset_x=100)])).pages[0]

        assert half.image_rect.width == pytest.approx(full.image_rect.width / 2)
        assert half.image_rect.center_x > full.image_rect.center_x


class TestExportSession:
    """Tests for ExportSession."""

    def test_export_when_success_then_file_written(self, tmp_path, tmp_job_number, panorama_entry, portrait_entry):
        """The PDF is written as <job>.pdf."""
        # Arrange
        session = ExportSession()

        # Act
        result = asyncio.run(session.export(tmp_job_number, [panorama_entry, portrait_entry], tmp_path))

        # Assert
        assert result.filename == "J-1042.pdf"
        assert result.path == tmp_path / "J-1042.pdf"
        assert result.page_count == 2
        assert result.size_bytes == result.path.stat().st_size
        assert not session.in_progress

    def test_export_when_blank_job_then_fallback_name(self, tmp_path, portrait_entry):
        result = asyncio.run(ExportSession().export("   ", [portrait_entry], tmp_path))

        assert result.filename == "output.pdf"

    def test_export_when_decode_fails_then_no_file_and_flag_cleared(self, tmp_path, panorama_entry, broken_entry):
        """A failed export writes nothing and can be retried."""
        # Arrange
        session = ExportSession()

        # Act
        with pytest.raises(DecodeError):
            asyncio.run(session.export("J-1", [panorama_entry, broken_entry], tmp_path / "out"))

        # Assert
        assert not (tmp_path / "out").exists()
        assert not session.in_progress

    def test_export_when_concurrent_then_second_rejected(self, tmp_path, panorama_entry):
        """Only one export runs at a time."""
        session = ExportSession()

        async def both():
            return await asyncio.gather(
                session.export("J-1", [panorama_entry], tmp_path / "a"),
                session.export("J-2", [panorama_entry], tmp_path / "b"),
                return_exceptions=True,
            )

        first, second = asyncio.run(both())

        assert first.filename == "J-1.pdf"
        assert isinstance(second, ExportInProgressError)
        assert not (tmp_path / "b").exists()
        assert not session.in_progress

    def test_export_when_config_given_then_used(self, tmp_path, portrait_entry):
        session = ExportSession(BuilderConfig(fallback_filename="proof"))

        result = asyncio.run(session.export(None, [portrait_entry], tmp_path))

        assert result.filename == "proof.pdf"

    def test_export_when_write_fails_then_logged_and_flag_cleared(self, tmp_path, portrait_entry, caplog):
        """Write errors are logged and re-raised."""
        # Arrange: the output "directory" is an existing file
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        session = ExportSession()

        # Act
        with caplog.at_level("ERROR", logger="proofsheet.builder.controller"):
            with pytest.raises(OSError):
                asyncio.run(session.export("J-1", [portrait_entry], blocker))

        # Assert
        assert "Could not write export" in caplog.text
        assert not session.in_progress


class TestExportFilename:
    """Tests for export_filename()."""

    @pytest.mark.parametrize("job,expected", [
        ("J-1042", "J-1042.pdf"),
        ("  J-7  ", "J-7.pdf"),
        ("", "output.pdf"),
        (None, "output.pdf"),
        ("2024/05", "2024-05.pdf"),
    ])
    def test_export_filename(self, job, expected):
        assert export_filename(job) == expected


class TestPlacementScenarios:
    """End-to-end placement for typical inputs."""

    def test_panorama_auto_is_landscape_with_narrow_inset(self, panorama_path):
        """3000x1000 auto: landscape page, 4% inset, centered horizontally."""
        entry = Entry(image=RasterHandle.from_path(panorama_path))

        page = asyncio.run(plan_document("J-1", [entry])).pages[0]

        assert page.orientation is PageOrientation.LANDSCAPE
        assert page.image_rect.width == pytest.approx(page.content_rect.width * 0.92)
        assert page.image_rect.center_x == pytest.approx(page.content_rect.center_x)

    def test_tall_image_auto_is_portrait_with_standard_inset(self, portrait_path):
        """1000x1500 auto: portrait page, 10% inset."""
        entry = Entry(image=RasterHandle.from_path(portrait_path))

        page = asyncio.run(plan_document("J-1", [entry])).pages[0]

        assert page.orientation is PageOrientation.PORTRAIT
        inset_w = page.content_rect.width * 0.8
        inset_h = page.content_rect.height * 0.8
        assert (
            page.image_rect.width == pytest.approx(inset_w)
            or page.image_rect.height == pytest.approx(inset_h)
        )
        assert page.image_rect.aspect_ratio == pytest.approx(1000 / 1500)
