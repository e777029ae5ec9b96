"""
Unit tests for MergeMode and MergeConfig.
"""

import pytest

from slide_mosaic.composition import AspectRatio, Color, InvalidArgumentError
from slide_mosaic.pipeline import MergeConfig, MergeMode


class TestMergeMode:
    """Tests for MergeMode."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("single", MergeMode.SINGLE),
            ("grid-2x2", MergeMode.GRID_2X2),
            ("GRID-3X3", MergeMode.GRID_3X3),
            (" long ", MergeMode.LONG),
            (MergeMode.LONG, MergeMode.LONG),
        ],
    )
    def test_parse_when_known_then_mode(self, value, expected):
        assert MergeMode.parse(value) is expected

    def test_parse_when_unknown_then_raises(self):
        with pytest.raises(InvalidArgumentError, match="Unknown merge mode"):
            MergeMode.parse("grid-4x4")

    def test_grid_modes_have_fixed_sizes(self):
        assert (MergeMode.GRID_2X2.columns, MergeMode.GRID_2X2.fixed_group_size) == (2, 4)
        assert (MergeMode.GRID_3X3.columns, MergeMode.GRID_3X3.fixed_group_size) == (3, 9)
        assert MergeMode.LONG.fixed_group_size is None

    def test_output_prefix(self):
        assert MergeMode.GRID_2X2.output_prefix == "grid-2x2"
        assert MergeMode.GRID_3X3.output_prefix == "grid-3x3"
        assert MergeMode.LONG.output_prefix == "merged"
        assert MergeMode.SINGLE.output_prefix is None


class TestMergeConfig:
    """Tests for MergeConfig validation and derived specs."""

    def test_default_mode_is_single(self):
        """Without options a run keeps pages only."""
        config = MergeConfig()

        assert config.mode is MergeMode.SINGLE
        assert config.effective_group_size() is None

    def test_init_when_long_with_group_size_then_valid(self):
        config = MergeConfig(mode=MergeMode.LONG, group_size=3)

        assert config.effective_group_size() == 3
        assert config.spacing == 20

    def test_init_when_mode_string_then_parsed(self):
        config = MergeConfig(mode="grid-2x2")

        assert config.mode is MergeMode.GRID_2X2

    def test_init_when_long_without_group_size_then_raises(self):
        with pytest.raises(InvalidArgumentError, match="group_size is required"):
            MergeConfig(mode=MergeMode.LONG)

    @pytest.mark.parametrize("group_size", [0, -3])
    def test_init_when_long_with_bad_group_size_then_raises(self, group_size):
        with pytest.raises(InvalidArgumentError, match="group_size"):
            MergeConfig(mode=MergeMode.LONG, group_size=group_size)

    def test_grid_mode_ignores_group_size(self):
        """Grid modes always use columns squared."""
        config = MergeConfig(mode=MergeMode.GRID_3X3, group_size=2)

        assert config.effective_group_size() == 9

    def test_single_mode_has_no_group_size(self):
        assert MergeConfig(mode=MergeMode.SINGLE).effective_group_size() is None

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            ({"spacing": -1}, "spacing"),
            ({"spacing": True}, "spacing"),
            ({"max_workers": True}, "max_workers"),
            ({"scale": 0}, "scale"),
            ({"max_workers": 0}, "max_workers"),
            ({"background": "not-a-color"}, "color"),
            ({"aspect_ratio": "16-9"}, "aspect ratio"),
            ({"aspect_ratio": "0:9"}, "positive"),
        ],
    )
    def test_init_when_invalid_field_then_raises(self, kwargs, match):
        with pytest.raises(InvalidArgumentError, match=match):
            MergeConfig(mode=MergeMode.LONG, group_size=2, **kwargs)

    def test_grid_spec_uses_mode_columns(self):
        config = MergeConfig(mode=MergeMode.GRID_3X3, spacing=8, background="#000000")

        spec = config.grid_spec()

        assert spec.columns == 3
        assert spec.spacing == 8
        assert spec.background == Color(0, 0, 0)

    def test_grid_spec_when_not_grid_then_raises(self):
        with pytest.raises(InvalidArgumentError, match="not a grid mode"):
            MergeConfig(mode=MergeMode.LONG, group_size=2).grid_spec()

    def test_strip_spec_carries_ratio(self):
        config = MergeConfig(mode=MergeMode.LONG, group_size=2, aspect_ratio="9:16", spacing=0)

        spec = config.strip_spec()

        assert spec.aspect_ratio == AspectRatio(9, 16)
        assert spec.spacing == 0

    def test_strip_spec_without_ratio(self):
        assert MergeConfig(mode=MergeMode.LONG, group_size=2).strip_spec().aspect_ratio is None
