"""
Unit tests for the logical-to-physical region transform.
"""
import pytest

from answerlens.domain.logic.region_transform import transform
from answerlens.domain.models.geometry import LogicalRect, PhysicalRect, WindowOrigin


class TestTransform:
    """Tests for transform()."""

    def test_translates_then_scales(self):
        """Origin is added in logical space before scaling."""
        result = transform(LogicalRect(20, 10, 200, 80), WindowOrigin(100, 50), 2.0)

        assert result == PhysicalRect(left=240, top=120, width=400, height=160)

    def test_identity_scale(self):
        result = transform(LogicalRect(5, 6, 7, 8), WindowOrigin(0, 0), 1.0)

        assert result == PhysicalRect(5, 6, 7, 8)

    def test_rounds_half_up(self):
        """2.5 rounds to 3, not to the even neighbour."""
        result = transform(LogicalRect(2, 2, 2, 2), WindowOrigin(0, 0), 1.25)

        assert result == PhysicalRect(3, 3, 3, 3)

    def test_fields_round_independently(self):
        """A sub-pixel shift in x may move left but never width, top or height."""
        base = transform(LogicalRect(0.2, 3, 10, 4), WindowOrigin(0, 0), 1.5)
        shifted = transform(LogicalRect(0.4, 3, 10, 4), WindowOrigin(0, 0), 1.5)

        assert base.left == 0
        assert shifted.left == 1
        assert base.width == shifted.width == 15
        assert (base.top, base.height) == (shifted.top, shifted.height)

    def test_width_does_not_depend_on_position(self):
        widths = {
            transform(LogicalRect(x / 10, 0, 33, 20), WindowOrigin(0, 0), 1.5).width
            for x in range(0, 50)
        }

        assert widths == {50}

    def test_negative_origin_of_left_monitor(self):
        """A monitor left of the primary gives the overlay a negative origin."""
        result = transform(LogicalRect(1930, 10, 100, 50), WindowOrigin(-1920, 0), 1.0)

        assert result == PhysicalRect(10, 10, 100, 50)

    def test_does_not_clamp_degenerate_selection(self):
        result = transform(LogicalRect(10, 10, 0, 5), WindowOrigin(0, 0), 2.0)

        assert result.width == 0
        assert result.height == 10

    @pytest.mark.parametrize("scale", [0, -1.0])
    def test_rejects_non_positive_scale(self, scale):
        with pytest.raises(ValueError):
            transform(LogicalRect(0, 0, 10, 10), WindowOrigin(0, 0), scale)
