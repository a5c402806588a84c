"""
Box sizing for diagram nodes.

A node box holds a title line, a gap and the block's statement lines. Its size
only depends on the text and on the style, so sizes are computed before any
position is assigned.
"""

import os
from typing import Dict, Hashable, Iterable, Optional, Protocol

from PIL import ImageFont

from .graph import GraphModel, Node
from .models import DEFAULT_STYLE, Box, LayoutStyle

# Monospace fonts tried in order when no font path is given.
MONOSPACE_FONTS = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
    "/usr/share/fonts/truetype/freefont/FreeMono.ttf",
    "/usr/share/fonts/truetype/ubuntu/UbuntuMono-R.ttf",
    "/System/Library/Fonts/Menlo.ttc",
    "C:/Windows/Fonts/consola.ttf",
]


def load_font(size: int, font_path: Optional[str] = None):
    """
    Load a monospace font for measuring and drawing text.

    Tries the following in order:
    1. The given font path, if it exists
    2. Common system monospace fonts
    3. Pillow's default font

    Args:
        size: Font size in pixels.
        font_path: Optional path to a TrueType font.

    Returns:
        A PIL ImageFont object.
    """
    candidates = [font_path] if font_path else []
    candidates.extend(MONOSPACE_FONTS)

    for path in candidates:
        if os.path.exists(path):
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue

    try:
        return ImageFont.load_default(size=size)
    except TypeError:
        # Older Pillow versions don't support the size parameter
        return ImageFont.load_default()


class TextMetrics(Protocol):
    """Measures the rendered width of text."""

    def text_width(self, text: str) -> float:
        """Width of a statement line."""
        ...

    def title_width(self, text: str) -> float:
        """Width of a title line."""
        ...


class MonospaceMetrics:
    """Fixed advance per character, taken from the style."""

    def __init__(self, style: LayoutStyle = DEFAULT_STYLE):
        self.char_width = style.char_width
        self.title_char_width = style.title_char_width

    def text_width(self, text: str) -> float:
        return len(text) * self.char_width

    def title_width(self, text: str) -> float:
        return len(text) * self.title_char_width


class PillowFontMetrics:
    """Measures text with Pillow fonts, as the PNG backend will draw it."""

    def __init__(
        self,
        font_size: int = 12,
        title_font_size: int = 14,
        font_path: Optional[str] = None,
    ):
        self.font = load_font(font_size, font_path)
        self.title_font = load_font(title_font_size, font_path)

    def _measure(self, font, text: str) -> float:
        if not text:
            return 0
        bbox = font.getbbox(text)
        return bbox[2] - bbox[0]

    def text_width(self, text: str) -> float:
        return self._measure(self.font, text)

    def title_width(self, text: str) -> float:
        return self._measure(self.title_font, text)


class BoxSizer:
    """
    Computes node box sizes from their text.

    width  = max(title width, widest line) + 2 * padding_x
    height = title height + section spacing + lines * line height
             + 2 * padding_y

    Both are clamped to the style's minimum box size.
    """

    def __init__(
        self,
        style: LayoutStyle = DEFAULT_STYLE,
        metrics: Optional[TextMetrics] = None,
    ):
        self.style = style
        self.metrics = metrics if metrics is not None else MonospaceMetrics(style)

    def size(self, title: str, lines: Iterable[str]) -> Box:
        """Size of a box showing the given title and lines."""
        style = self.style
        lines = list(lines)

        content_width = self.metrics.title_width(title)
        for line in lines:
            content_width = max(content_width, self.metrics.text_width(line))

        content_height = (
            style.title_height + style.section_spacing + len(lines) * style.line_height
        )

        width = max(style.min_box_width, content_width + 2 * style.padding_x)
        height = max(style.min_box_height, content_height + 2 * style.padding_y)
        return Box(width=width, height=height)

    def size_node(self, node: Node) -> Box:
        return self.size(node.title, node.lines)

    def size_all(
        self, graph: GraphModel, node_ids: Iterable[Hashable]
    ) -> Dict[Hashable, Box]:
        """Sizes of the given nodes, keyed by id."""
        return {node_id: self.size_node(graph.node(node_id)) for node_id in node_ids}
