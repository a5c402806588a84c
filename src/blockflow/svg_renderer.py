"""SVG renderer: paints laid-out diagrams into an SVG string."""

from typing import List, Sequence, Tuple, Union

from .models import DEFAULT_STYLE, Color, Diagram, LayoutStyle, Point, Rect, Stroke
from .surface import paint_diagram

# ─── Constants ──────────────────────────────────────────────────────────────

FONT_FAMILY = "monospace"
FONT_SIZE = 12
TITLE_FONT_SIZE = 14
PADDING = 20  # canvas padding in pixels


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _rgb(color: Color) -> str:
    return "rgb({},{},{})".format(*color)


def _num(value: float) -> str:
    """Format a coordinate without trailing zeros."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _font(size: int = FONT_SIZE) -> str:
    return f'font-family="{FONT_FAMILY}" font-size="{size}"'


# ─── Surface ────────────────────────────────────────────────────────────────


class SvgSurface:
    """Drawing surface that accumulates SVG elements."""

    def __init__(self, offset: Point = Point(0, 0)):
        self.offset = offset
        self.parts: List[str] = []

    def _x(self, value: float) -> str:
        return _num(value + self.offset.x)

    def _y(self, value: float) -> str:
        return _num(value + self.offset.y)

    def _pt(self, point: Point) -> str:
        return f"{self._x(point.x)},{self._y(point.y)}"

    def draw_rounded_rect_with_text(
        self, rect: Rect, title: str, lines: Tuple[str, ...], style: LayoutStyle
    ) -> None:
        self.parts.append(
            f'<rect x="{self._x(rect.x)}" y="{self._y(rect.y)}" '
            f'width="{_num(rect.width)}" height="{_num(rect.height)}" '
            f'rx="{_num(style.corner_radius)}" fill="{_rgb(style.box_fill)}" '
            f'stroke="{_rgb(style.box_outline)}" '
            f'stroke-width="{_num(style.box_outline_width)}"/>'
        )

        text_x = rect.x + style.padding_x
        text_y = rect.y + style.padding_y
        self._text(Point(text_x, text_y), title, style.text_color, TITLE_FONT_SIZE)

        text_y += style.title_height + style.section_spacing
        for line in lines:
            self._text(Point(text_x, text_y), line, style.text_color, FONT_SIZE)
            text_y += style.line_height

    def draw_cubic_curve(self, points: Sequence[Point], stroke: Stroke) -> None:
        p0, p1, p2, p3 = points
        self.parts.append(
            f'<path d="M {self._pt(p0)} '
            f'C {self._pt(p1)} {self._pt(p2)} {self._pt(p3)}" '
            f'fill="none" stroke="{_rgb(stroke.color)}" '
            f'stroke-width="{_num(stroke.width)}"/>'
        )

    def draw_filled_polygon(
        self, points: Sequence[Point], fill: Color, stroke: Stroke
    ) -> None:
        pts = " ".join(self._pt(p) for p in points)
        self.parts.append(
            f'<polygon points="{pts}" fill="{_rgb(fill)}" '
            f'stroke="{_rgb(stroke.color)}" stroke-width="{_num(stroke.width)}"/>'
        )

    def draw_circle_outline(self, center: Point, radius: float, stroke: Stroke) -> None:
        self.parts.append(
            f'<circle cx="{self._x(center.x)}" cy="{self._y(center.y)}" '
            f'r="{_num(radius)}" fill="none" stroke="{_rgb(stroke.color)}" '
            f'stroke-width="{_num(stroke.width)}"/>'
        )

    def draw_text(self, position: Point, text: str, color: Color) -> None:
        self._text(position, text, color, TITLE_FONT_SIZE)

    def _text(self, position: Point, text: str, color: Color, size: int) -> None:
        self.parts.append(
            f'<text x="{self._x(position.x)}" y="{self._y(position.y)}" '
            f'dominant-baseline="hanging" {_font(size)} '
            f'fill="{_rgb(color)}">{_escape(text)}</text>'
        )


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """SVG renderer: consumes diagrams, produces an SVG string."""

    def __init__(self, style: LayoutStyle = DEFAULT_STYLE, padding: int = PADDING):
        self.style = style
        self.padding = padding

    def render(self, diagrams: Union[Diagram, Sequence[Diagram]]) -> str:
        if isinstance(diagrams, Diagram):
            diagrams = [diagrams]
        if not diagrams:
            return ""

        bounds = diagrams[0].bounds()
        for diagram in diagrams[1:]:
            bounds = bounds.union(diagram.bounds())

        svg_w = _num(bounds.width + 2 * self.padding)
        svg_h = _num(bounds.height + 2 * self.padding)
        surface = SvgSurface(
            offset=Point(self.padding - bounds.x, self.padding - bounds.y)
        )
        for diagram in diagrams:
            paint_diagram(diagram, surface, self.style)

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{svg_w}" '
            f'height="{svg_h}" viewBox="0 0 {svg_w} {svg_h}">',
            f'<rect width="{svg_w}" height="{svg_h}" '
            f'fill="{_rgb(self.style.background)}"/>',
        ]
        parts.extend(surface.parts)
        parts.append("</svg>")
        return "\n".join(parts)


def render_svg(diagrams: Union[Diagram, Sequence[Diagram]], **kwargs) -> str:
    """Convenience function to render diagrams to an SVG string."""
    return SvgRenderer(**kwargs).render(diagrams)
