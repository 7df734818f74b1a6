"""
Tests for selection paths: rasterizing, bounds, hit testing and drag shapes.
"""

import dataclasses

import numpy as np
import pytest

from MQ_Libs.MaskLib.mask_morphology import mask_has_selection, mask_subtract
from MQ_Libs.MaskLib.selection_path import (
    EMPTY_BOUNDS,
    LassoSelection,
    MaskSelection,
    OvalSelection,
    PolygonSelection,
    RectSelection,
    SelectionBounds,
    clamp_bounds,
    contains_point,
    get_selection_bounds,
    has_selection,
    has_size,
    rasterize_selection,
    selection_from_drag,
)

from conftest import make_mask


SQUARE = [(2, 2), (7, 2), (7, 7), (2, 7)]


def selected_count(mask):
    return int(mask.selected().sum())


class TestPathVariants:

    def test_type_discriminants(self):
        assert RectSelection(0, 0, 1, 1).type == "rect"
        assert OvalSelection(0, 0, 1, 1).type == "oval"
        assert LassoSelection(SQUARE).type == "lasso"
        assert PolygonSelection(SQUARE).type == "polygon"
        assert MaskSelection(make_mask(2, 2)).type == "mask"

    def test_paths_are_immutable(self):
        rect = RectSelection(1, 2, 3, 4)

        with pytest.raises(dataclasses.FrozenInstanceError):
            rect.x = 5

    def test_points_accept_dicts(self):
        polygon = PolygonSelection([{"x": 1, "y": 2}, {"x": 4, "y": 2}, (4, 6)])

        assert polygon.points == ((1.0, 2.0), (4.0, 2.0), (4.0, 6.0))

    def test_mask_selection_requires_buffer(self):
        with pytest.raises(TypeError):
            MaskSelection(np.zeros((2, 2), dtype=np.uint8))


class TestRasterizeSelection:

    def test_rect_pixel_count(self):
        mask = rasterize_selection(RectSelection(2, 3, 4, 5), 10, 10)

        assert mask.size == (10, 10)
        assert selected_count(mask) == 20
        assert mask.selected()[3:8, 2:6].all()

    def test_fractional_rect_rounds_geometry(self):
        mask = rasterize_selection(RectSelection(1.4, 1.6, 2.5, 2.4), 8, 8)

        expected = np.zeros((8, 8), dtype=bool)
        expected[2:4, 1:4] = True
        np.testing.assert_array_equal(mask.selected(), expected)

    def test_rect_clipped_by_canvas(self):
        mask = rasterize_selection(RectSelection(-2, -2, 4, 4), 5, 5)

        assert selected_count(mask) == 4
        assert mask.selected()[0:2, 0:2].all()

    def test_oval_uses_pixel_centres(self):
        mask = rasterize_selection(OvalSelection(5, 5, 3, 3), 10, 10)
        selected = mask.selected()

        assert selected_count(mask) == 32
        np.testing.assert_array_equal(selected, selected[::-1, :])
        np.testing.assert_array_equal(selected, selected[:, ::-1])

    def test_polygon_fill_uses_pixel_centres(self):
        mask = rasterize_selection(PolygonSelection(SQUARE), 10, 10)

        assert selected_count(mask) == 25
        assert mask == rasterize_selection(RectSelection(2, 2, 5, 5), 10, 10)

    def test_polygon_minus_identical_rect_is_empty(self):
        polygon = rasterize_selection(PolygonSelection([(2, 2), (6, 2), (6, 6), (2, 6)]), 10, 10)
        rect = rasterize_selection(RectSelection(2, 2, 4, 4), 10, 10)

        assert selected_count(polygon) == 16
        assert not mask_has_selection(mask_subtract(polygon, rect))

    def test_triangle_fill(self):
        mask = rasterize_selection(PolygonSelection([(0, 0), (8, 0), (0, 8)]), 8, 8)

        # Pixel centres with x + y < 7 lie inside the triangle
        expected = np.add.outer(np.arange(8), np.arange(8)) < 7
        np.testing.assert_array_equal(mask.selected(), expected)

    def test_degenerate_polygon_is_blank(self):
        mask = rasterize_selection(PolygonSelection([(0, 0), (4, 4), (8, 8)]), 10, 10)

        assert selected_count(mask) == 0

    def test_rasterized_polygon_agrees_with_hit_test(self):
        polygon = PolygonSelection([(1, 1), (8, 2), (6, 8), (3, 5.5)])
        selected = rasterize_selection(polygon, 10, 10).selected()

        for y in range(10):
            for x in range(10):
                assert selected[y, x] == contains_point(polygon, x + 0.5, y + 0.5)

    def test_lasso_matches_polygon(self):
        lasso = rasterize_selection(LassoSelection(SQUARE), 10, 10)
        polygon = rasterize_selection(PolygonSelection(SQUARE), 10, 10)

        assert lasso == polygon

    def test_open_lasso_is_blank(self):
        mask = rasterize_selection(LassoSelection([(1, 1), (5, 5)]), 8, 8)

        assert selected_count(mask) == 0

    def test_mask_passes_through(self):
        data = make_mask(6, 4, [(1, 1), (2, 3)])

        assert rasterize_selection(MaskSelection(data), 6, 4) is data

    def test_mask_size_mismatch_raises(self):
        with pytest.raises(ValueError):
            rasterize_selection(MaskSelection(make_mask(6, 4)), 5, 5)

    def test_unknown_path_raises(self):
        with pytest.raises(TypeError):
            rasterize_selection("rect", 5, 5)

    def test_output_is_binary(self):
        mask = rasterize_selection(OvalSelection(6.3, 4.7, 4.2, 3.1), 12, 10)

        assert set(np.unique(mask.alpha)) <= {0, 255}


class TestSelectionBounds:

    def test_rect_bounds(self):
        assert get_selection_bounds(RectSelection(2, 3, 4, 5)) == SelectionBounds(2, 3, 4, 5)

    def test_oval_bounds(self):
        assert get_selection_bounds(OvalSelection(5, 5, 3, 2)) == (2, 3, 6, 4)

    def test_polygon_bounds(self):
        assert get_selection_bounds(PolygonSelection(SQUARE)) == (2, 2, 5, 5)

    def test_fractional_polygon_bounds_cover_points(self):
        polygon = PolygonSelection([(1.5, 2.2), (4.1, 2.2), (4.1, 6.7)])

        assert get_selection_bounds(polygon) == (1, 2, 4, 5)

    def test_short_lasso_is_empty(self):
        assert get_selection_bounds(LassoSelection([(1, 1), (3, 3)])) == EMPTY_BOUNDS

    def test_mask_bounds_are_tight(self):
        mask = make_mask(8, 6, [(2, 3), (5, 1)])

        assert get_selection_bounds(MaskSelection(mask)) == (2, 1, 4, 3)

    def test_empty_mask_bounds(self):
        bounds = get_selection_bounds(MaskSelection(make_mask(8, 6)))

        assert bounds == (0, 0, 0, 0)
        assert bounds.is_empty


class TestClampBounds:

    def test_clamps_to_canvas(self):
        assert clamp_bounds(SelectionBounds(-3, -2, 10, 6), 8, 8) == (0, 0, 7, 4)

    def test_inside_bounds_unchanged(self):
        assert clamp_bounds(SelectionBounds(1, 2, 3, 4), 8, 8) == (1, 2, 3, 4)

    def test_off_canvas_is_none(self):
        assert clamp_bounds(SelectionBounds(20, 0, 5, 5), 10, 10) is None

    def test_empty_is_none(self):
        assert clamp_bounds(EMPTY_BOUNDS, 10, 10) is None


class TestQueries:

    def test_has_selection(self):
        assert not has_selection(None)
        assert has_selection(RectSelection(0, 0, 1, 1))

    @pytest.mark.parametrize("path,expected", [
        (RectSelection(0, 0, 3, 3), True),
        (RectSelection(0, 0, 2, 5), False),
        (OvalSelection(5, 5, 2, 2), True),
        (OvalSelection(5, 5, 1, 4), False),
        (PolygonSelection(SQUARE[:3]), True),
        (LassoSelection(SQUARE[:2]), False),
    ])
    def test_has_size(self, path, expected):
        assert has_size(path) is expected

    def test_mask_always_has_size(self):
        assert has_size(MaskSelection(make_mask(3, 3)))

    def test_contains_point_rect_is_inclusive(self):
        rect = RectSelection(2, 2, 4, 4)

        assert contains_point(rect, 2, 2)
        assert contains_point(rect, 6, 6)
        assert not contains_point(rect, 6.1, 2)

    def test_contains_point_oval(self):
        oval = OvalSelection(5, 5, 3, 2)

        assert contains_point(oval, 5, 5)
        assert contains_point(oval, 8, 5)
        assert not contains_point(oval, 5, 7.5)

    def test_contains_point_polygon(self):
        assert contains_point(PolygonSelection(SQUARE), 4, 4)
        assert not contains_point(PolygonSelection(SQUARE), 8, 4)
        assert not contains_point(LassoSelection(SQUARE[:2]), 4, 4)

    def test_contains_point_concave_polygon(self):
        notch = PolygonSelection([(0, 0), (10, 0), (10, 10), (5, 5), (0, 10)])

        assert contains_point(notch, 2, 2)
        assert not contains_point(notch, 5, 8)

    def test_contains_point_mask_rounds(self):
        mask = MaskSelection(make_mask(5, 5, [(2, 3)]))

        assert contains_point(mask, 2.4, 2.6)
        assert not contains_point(mask, 3, 3)
        assert not contains_point(mask, -1, 0)
        assert not contains_point(mask, 9, 9)

    def test_nothing_contains_point_without_selection(self):
        assert not contains_point(None, 0, 0)


class TestSelectionFromDrag:

    def test_drag_normalizes_direction(self):
        assert selection_from_drag((10, 10), (4, 16)) == RectSelection(4, 10, 6, 6)

    def test_constrained_drag_uses_larger_side(self):
        rect = selection_from_drag((0, 0), (3, -8), constrain=True)

        assert rect == RectSelection(0, -8, 8, 8)

    def test_constrained_drag_with_zero_width(self):
        assert selection_from_drag((0, 0), (0, 5), constrain=True) == RectSelection(0, 0, 5, 5)

    def test_oval_drag(self):
        assert selection_from_drag((0, 0), (10, 4), tool="oval") == OvalSelection(5, 2, 5, 2)

    def test_unknown_tool_raises(self):
        with pytest.raises(ValueError):
            selection_from_drag((0, 0), (5, 5), tool="lasso")
