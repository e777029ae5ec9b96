"""
Unit tests for the strip composer.
"""

import numpy as np
import pytest

from slide_mosaic.composition import (
    AspectRatio,
    Color,
    InvalidArgumentError,
    StripLayoutSpec,
    compose_strip,
    grow_to_ratio,
    plan_strip,
)

WHITE_PX = [255, 255, 255, 255]
RED = (255, 0, 0, 255)


class TestGrowToRatio:
    """Tests for grow_to_ratio() canvas adjustment."""

    def test_grow_when_no_ratio_then_content_size(self):
        assert grow_to_ratio(300, 490, None) == (300, 490)

    def test_grow_when_content_taller_then_widens(self):
        """300x490 at 1:1 needs a wider canvas."""
        assert grow_to_ratio(300, 490, AspectRatio(1, 1)) == (490, 490)

    def test_grow_when_content_wider_then_heightens(self):
        assert grow_to_ratio(400, 100, AspectRatio(1, 1)) == (400, 400)

    def test_grow_when_exact_match_then_unchanged(self):
        """Exact equality skips growth."""
        assert grow_to_ratio(160, 90, AspectRatio(16, 9)) == (160, 90)
        assert grow_to_ratio(320, 180, AspectRatio(16, 9)) == (320, 180)

    def test_grow_when_borderline_wider_then_grows_height(self):
        """1601x900 is a hair wider than 16:9; decided exactly, not by float error."""
        assert grow_to_ratio(1601, 900, AspectRatio(16, 9)) == (1601, 901)

    def test_grow_when_half_pixel_then_rounds_away_from_zero(self):
        """5 / (2/1) = 2.5 -> 3."""
        assert grow_to_ratio(5, 1, AspectRatio(2, 1)) == (5, 3)

    def test_grow_when_portrait_ratio_then_widens_tall_strip(self):
        """A 100x1000 strip at 9:16 widens to round(1000 * 9 / 16) = 563."""
        assert grow_to_ratio(100, 1000, AspectRatio(9, 16)) == (563, 1000)

    @pytest.mark.parametrize("ratio", ["1:1", "16:9", "9:16", "4:3", "3:4", "21:9", "1:10", "10:1", "7:5"])
    @pytest.mark.parametrize("content", [(300, 490), (1000, 10), (10, 1000), (333, 333), (1920, 1081)])
    def test_grow_never_shrinks_and_changes_at_most_one_axis(self, ratio, content):
        width, height = grow_to_ratio(*content, AspectRatio.parse(ratio))

        assert width >= content[0]
        assert height >= content[1]
        assert width == content[0] or height == content[1]


class TestPlanStrip:
    """Tests for plan_strip() geometry."""

    def test_plan_when_no_ratio_then_canvas_is_content(self):
        """Heights 100/200/150, width 300, spacing 20 -> 300x490, cursors 0/120/340."""
        # Act
        plan = plan_strip([(300, 100), (300, 200), (300, 150)], StripLayoutSpec(spacing=20))

        # Assert
        assert plan.content_size == (300, 490)
        assert plan.canvas_size == (300, 490)
        assert (plan.offset_x, plan.offset_y) == (0, 0)
        assert plan.origins == ((0, 0), (0, 120), (0, 340))

    def test_plan_when_mixed_widths_then_each_image_centered(self):
        plan = plan_strip([(300, 100), (100, 100), (101, 50)], StripLayoutSpec())

        assert plan.content_size == (300, 250)
        # (300 - 100) / 2 = 100; (300 - 101) / 2 = 99.5 -> 100
        assert plan.origins == ((0, 0), (100, 100), (100, 200))

    def test_plan_when_ratio_widens_then_content_centered_horizontally(self):
        plan = plan_strip([(300, 100), (300, 200), (300, 150)], StripLayoutSpec(spacing=20, aspect_ratio="1:1"))

        assert plan.canvas_size == (490, 490)
        assert (plan.offset_x, plan.offset_y) == (95, 0)
        assert plan.origins == ((95, 0), (95, 120), (95, 340))

    def test_plan_when_ratio_heightens_then_content_centered_vertically(self):
        plan = plan_strip([(400, 100)], StripLayoutSpec(aspect_ratio="1:1"))

        assert plan.canvas_size == (400, 400)
        assert (plan.offset_x, plan.offset_y) == (0, 150)
        assert plan.origins == ((0, 150),)

    def test_plan_when_single_image_then_no_spacing_added(self):
        plan = plan_strip([(120, 80)], StripLayoutSpec(spacing=50))

        assert plan.content_size == (120, 80)

    def test_plan_when_empty_then_raises(self):
        with pytest.raises(InvalidArgumentError, match="empty"):
            plan_strip([], StripLayoutSpec())

    def test_plan_when_non_positive_dimension_then_raises(self):
        with pytest.raises(InvalidArgumentError, match="non-positive"):
            plan_strip([(10, 10), (10, -1)], StripLayoutSpec())


class TestComposeStrip:
    """Tests for compose_strip()."""

    def test_compose_when_no_ratio_then_sized_to_content(self, solid_image):
        images = [solid_image(300, h, RED) for h in (100, 200, 150)]

        result = compose_strip(images, StripLayoutSpec(spacing=20))

        assert result.size == (300, 490)

    def test_compose_when_spacing_then_gaps_are_background(self, solid_image):
        images = [solid_image(300, h, RED) for h in (100, 200, 150)]

        arr = compose_strip(images, StripLayoutSpec(spacing=20)).to_array()

        assert (arr[100:120] == WHITE_PX).all()
        assert (arr[320:340] == WHITE_PX).all()
        assert (arr[120:320] == RED).all()

    def test_compose_places_images_at_native_resolution(self, patterned_image):
        """Images are positioned, never resized."""
        # Arrange
        images = [patterned_image(50, 30, seed=1), patterned_image(20, 10, seed=2)]
        spec = StripLayoutSpec(spacing=5, background=Color(0, 0, 0))
        plan = plan_strip([img.size for img in images], spec)

        # Act
        arr = compose_strip(images, spec).to_array()

        # Assert
        for image, (left, top) in zip(images, plan.origins):
            region = arr[top:top + image.height, left:left + image.width]
            assert np.array_equal(region, image.to_array())

    def test_compose_round_trip_with_ratio_then_outside_is_background(self, patterned_image):
        """Every pixel outside a placement equals the background exactly."""
        # Arrange
        images = [patterned_image(w, h, seed=i) for i, (w, h) in enumerate([(60, 40), (45, 25), (61, 33)])]
        spec = StripLayoutSpec(spacing=7, aspect_ratio="16:9", background=Color(10, 20, 30))
        plan = plan_strip([img.size for img in images], spec)

        # Act
        result = compose_strip(images, spec)
        arr = result.to_array()

        # Assert
        assert result.size == plan.canvas_size
        covered = np.zeros(arr.shape[:2], dtype=bool)
        for image, (left, top) in zip(images, plan.origins):
            assert np.array_equal(arr[top:top + image.height, left:left + image.width], image.to_array())
            covered[top:top + image.height, left:left + image.width] = True
        assert (arr[~covered] == [10, 20, 30, 255]).all()

    def test_compose_with_ratio_never_shrinks_content(self, solid_image):
        images = [solid_image(300, 100, RED), solid_image(200, 100, RED)]

        for ratio in ("1:1", "16:9", "9:16", "1:3", "3:1"):
            result = compose_strip(images, StripLayoutSpec(spacing=10, aspect_ratio=ratio))
            assert result.width >= 300
            assert result.height >= 210

    def test_compose_is_deterministic(self, patterned_image):
        images = [patterned_image(33, 21, seed=4), patterned_image(70, 15, seed=5)]
        spec = StripLayoutSpec(spacing=3, aspect_ratio="4:3")

        assert compose_strip(images, spec) == compose_strip(images, spec)

    def test_compose_when_empty_group_then_raises(self):
        with pytest.raises(InvalidArgumentError, match="empty"):
            compose_strip([], StripLayoutSpec())
