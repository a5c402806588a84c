"""Unit tests for the positioning module."""

import pytest

from blockflow.models import Box, LayoutStyle, Rect
from blockflow.positioning import RowLayout


@pytest.fixture
def row_layout():
    """RowLayout with the default 5/20 gaps."""
    return RowLayout()


class TestRowLayout:
    """Tests for RowLayout.place."""

    def test_single_node(self, row_layout):
        """The first box sits at the origin."""
        rects = row_layout.place([[0]], {0: Box(50, 30)})
        assert rects == {0: Rect(0, 0, 50, 30)}

    def test_row_packs_left_to_right(self, row_layout):
        """Boxes advance by width plus gap."""
        boxes = {1: Box(50, 30), 2: Box(70, 40), 3: Box(10, 10)}
        rects = row_layout.place([[1, 2, 3]], boxes)
        assert rects[1].x == 0
        assert rects[2].x == 55
        assert rects[3].x == 130
        assert {r.y for r in rects.values()} == {0}

    def test_rows_stack_by_tallest_box(self, row_layout):
        """Next row starts below the tallest box plus gap."""
        boxes = {0: Box(50, 30), 1: Box(50, 40), 2: Box(50, 25), 3: Box(50, 10)}
        rects = row_layout.place([[0], [1, 2], [3]], boxes)
        assert rects[1].y == rects[2].y == 50
        assert rects[3].y == 50 + 40 + 20

    def test_rows_share_top(self, row_layout):
        """Boxes of one row are top-aligned, not centred."""
        boxes = {0: Box(10, 10), 1: Box(10, 80)}
        rects = row_layout.place([[0, 1]], boxes)
        assert rects[0].y == rects[1].y == 0

    def test_empty_rows_are_skipped(self, row_layout):
        """An empty row consumes no vertical space."""
        boxes = {0: Box(50, 30), 1: Box(50, 30)}
        rects = row_layout.place([[0], [], [1]], boxes)
        assert rects[1].y == 50

    def test_no_rows(self, row_layout):
        """No rows, no rectangles."""
        assert row_layout.place([], {}) == {}

    def test_custom_gaps(self):
        """Gaps come from the style."""
        layout = RowLayout(LayoutStyle(horizontal_gap=0, vertical_gap=0))
        boxes = {0: Box(10, 10), 1: Box(10, 10), 2: Box(10, 10)}
        rects = layout.place([[0, 1], [2]], boxes)
        assert rects[1] == Rect(10, 0, 10, 10)
        assert rects[2] == Rect(0, 10, 10, 10)

    def test_output_in_row_order(self, row_layout):
        """Rectangles are returned in row order."""
        boxes = {n: Box(10, 10) for n in range(4)}
        rects = row_layout.place([[3], [1, 0], [2]], boxes)
        assert list(rects) == [3, 1, 0, 2]
