"""
Unit tests for containment and inset layout.
"""

import pytest

from proofsheet.builder.layout import Rect, contain_fit, inset_box, place_image, select_inset


class TestSelectInset:
    """Tests for select_inset()."""

    def test_select_inset_when_panorama_then_narrow(self):
        """Panoramas get the 4% inset."""
        assert select_inset(2.6) == 0.04
        assert select_inset(4.0) == 0.04

    def test_select_inset_when_standard_then_ten_percent(self):
        """Everything else gets the 10% inset."""
        assert select_inset(2.59) == 0.10
        assert select_inset(0.5) == 0.10


class TestInsetBox:
    """Tests for inset_box()."""

    def test_inset_box_when_ten_percent_then_shrinks_each_side(self):
        """Inset is a fraction of each dimension, per side."""
        # Act
        box = inset_box(Rect(10, 20, 200, 100), 0.10)

        # Assert
        assert box.x == pytest.approx(30)
        assert box.y == pytest.approx(30)
        assert box.width == pytest.approx(160)
        assert box.height == pytest.approx(80)


class TestContainFit:
    """Tests for contain_fit()."""

    def test_contain_fit_when_wide_then_width_bound(self):
        assert contain_fit(100, 100, 2.0) == (100, 50.0)

    def test_contain_fit_when_tall_then_height_bound(self):
        assert contain_fit(100, 100, 0.5) == (50.0, 100)


class TestPlaceImage:
    """Tests for place_image()."""

    def test_place_image_when_defaults_then_centered_in_inset_box(self):
        """A 2:1 image fills the 160x80 inset box of a 200x100 area."""
        # Act
        rect = place_image(Rect(0, 0, 200, 100), 2.0)

        # Assert
        assert rect.x == pytest.approx(20)
        assert rect.y == pytest.approx(10)
        assert rect.width == pytest.approx(160)
        assert rect.height == pytest.approx(80)

    def test_place_image_when_full_offset_then_moves_half_slack(self):
        """40mm horizontal slack with offset 100 moves the image 20mm right of center."""
        # Arrange: box 160x80, ratio 1.5 -> drawn 120x80, slack_x 40
        content = Rect(0, 0, 200, 100)

        # Act
        centered = place_image(content, 1.5)
        shifted = place_image(content, 1.5, offset_x_percent=100)

        # Assert
        assert centered.x == pytest.approx(40)
        assert shifted.x == pytest.approx(60)
        assert shifted.right == pytest.approx(180)  # flush with the inset box

    def test_place_image_when_negative_offset_then_flush_left(self):
        """Offset -100 aligns the image with the inset box's left edge."""
        rect = place_image(Rect(0, 0, 200, 100), 1.5, offset_x_percent=-100)

        assert rect.x == pytest.approx(20)

    def test_place_image_when_half_scale_then_half_size(self):
        """Scale 50 halves both dimensions and centers the result."""
        # Act
        rect = place_image(Rect(0, 0, 200, 100), 1.5, scale_percent=50)

        # Assert
        assert rect.width == pytest.approx(60)
        assert rect.height == pytest.approx(40)
        assert rect.x == pytest.approx(70)
        assert rect.y == pytest.approx(30)

    def test_place_image_when_out_of_domain_then_clamped(self):
        """Out-of-range scale/offsets behave like their clamped values."""
        content = Rect(10, 40, 190, 247)

        assert place_image(content, 1.2, 10, 500, -500) == place_image(content, 1.2, 50, 100, -100)

    def test_place_image_when_panorama_then_narrow_inset(self):
        """A 3:1 image uses the 4% inset."""
        # Arrange
        content = Rect(10, 30, 277, 170)

        # Act
        rect = place_image(content, 3.0)

        # Assert
        assert rect.width == pytest.approx(277 * 0.92)
        assert rect.aspect_ratio == pytest.approx(3.0)

    def test_place_image_when_repeated_then_identical(self):
        """Pure function: identical inputs give identical output."""
        content = Rect(10, 42.5, 190, 244.5)

        assert place_image(content, 0.75, 80, 30, -60) == place_image(content, 0.75, 80, 30, -60)

    @pytest.mark.parametrize("ratio", [0.2, 0.75, 1.0, 2.59, 2.6, 6.0])
    @pytest.mark.parametrize("scale,ox,oy", [(100, 0, 0), (50, 100, 100), (73, -100, 40)])
    def test_place_image_when_any_input_then_inside_and_ratio_kept(self, ratio, scale, ox, oy):
        """The drawn rect stays inside content and keeps the aspect ratio."""
        content = Rect(10, 38.2, 190, 248.8)

        rect = place_image(content, ratio, scale, ox, oy)

        assert content.contains(rect, tolerance=1e-6)
        assert rect.aspect_ratio == pytest.approx(ratio)

    @pytest.mark.parametrize("ratio", [0, -1.5])
    def test_place_image_when_ratio_not_positive_then_raises(self, ratio):
        with pytest.raises(ValueError, match="aspect_ratio"):
            place_image(Rect(0, 0, 100, 100), ratio)
