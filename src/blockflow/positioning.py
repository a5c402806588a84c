"""
Position calculation for diagram layout.

Rows are stacked top to bottom and the boxes of a row are packed left to
right. Every box in a row shares the row's top edge; the row is as tall as its
tallest box.
"""

import logging
from typing import Dict, Hashable, Sequence

from .models import DEFAULT_STYLE, Box, LayoutStyle, Rect

logger = logging.getLogger(__name__)


class RowLayout:
    """
    Calculates absolute rectangles for layered nodes.

    Attributes:
        horizontal_gap: Space between boxes in a row.
        vertical_gap: Space between consecutive rows.
    """

    def __init__(self, style: LayoutStyle = DEFAULT_STYLE):
        self.horizontal_gap = style.horizontal_gap
        self.vertical_gap = style.vertical_gap

    def place(
        self,
        rows: Sequence[Sequence[Hashable]],
        boxes: Dict[Hashable, Box],
    ) -> Dict[Hashable, Rect]:
        """
        Calculate the rectangle of every node.

        Args:
            rows: Node ids per row, top to bottom.
            boxes: Box size of every node in the rows.

        Returns:
            Dictionary mapping node ids to rectangles, in row order.
        """
        rects: Dict[Hashable, Rect] = {}
        y = 0.0

        for row in rows:
            if not row:
                continue

            x = 0.0
            row_height = 0.0
            for node_id in row:
                box = boxes[node_id]
                rects[node_id] = Rect(x, y, box.width, box.height)
                x += box.width + self.horizontal_gap
                row_height = max(row_height, box.height)

            y += row_height + self.vertical_gap

        logger.debug("placed %d box(es), total height %.1f", len(rects), y)
        return rects
