"""
PNG Renderer module for control-flow diagrams.

Paints laid-out diagrams onto a Pillow image and saves them as PNG files.
"""

from typing import Optional, Sequence, Tuple, Union

from PIL import Image, ImageDraw

from .models import DEFAULT_STYLE, Color, Diagram, LayoutStyle, Point, Rect, Stroke
from .router import flatten_bezier
from .sizing import load_font
from .surface import paint_diagram


class PNGSurface:
    """Drawing surface backed by a Pillow image."""

    def __init__(
        self,
        width: int,
        height: int,
        scale: int = 2,  # For high-resolution output
        offset: Point = Point(0, 0),
        font_size: int = 12,
        title_font_size: int = 14,
        font_path: Optional[str] = None,
        background: Color = DEFAULT_STYLE.background,
        curve_segments: int = 24,
    ):
        self.scale = scale
        self.offset = offset
        self.curve_segments = curve_segments
        self.image = Image.new(
            "RGB", (max(1, int(width * scale)), max(1, int(height * scale))), background
        )
        self.draw = ImageDraw.Draw(self.image)
        self.font = load_font(font_size * scale, font_path)
        self.title_font = load_font(title_font_size * scale, font_path)

    def _xy(self, point: Point) -> Tuple[float, float]:
        """Convert diagram coordinates to pixel coordinates."""
        return (
            (point.x + self.offset.x) * self.scale,
            (point.y + self.offset.y) * self.scale,
        )

    def _width(self, stroke_width: float) -> int:
        return max(1, round(stroke_width * self.scale))

    def draw_rounded_rect_with_text(
        self, rect: Rect, title: str, lines: Tuple[str, ...], style: LayoutStyle
    ) -> None:
        """Draw a box with border, title and statement lines."""
        x0, y0 = self._xy(Point(rect.x, rect.y))
        x1, y1 = self._xy(Point(rect.right, rect.bottom))
        self.draw.rounded_rectangle(
            [x0, y0, max(x0, x1), max(y0, y1)],
            radius=style.corner_radius * self.scale,
            fill=style.box_fill,
            outline=style.box_outline,
            width=self._width(style.box_outline_width),
        )

        text_x = rect.x + style.padding_x
        text_y = rect.y + style.padding_y
        self.draw.text(
            self._xy(Point(text_x, text_y)),
            title,
            fill=style.text_color,
            font=self.title_font,
        )

        text_y += style.title_height + style.section_spacing
        for line in lines:
            self.draw.text(
                self._xy(Point(text_x, text_y)),
                line,
                fill=style.text_color,
                font=self.font,
            )
            text_y += style.line_height

    def draw_cubic_curve(self, points: Sequence[Point], stroke: Stroke) -> None:
        """Draw a bezier as a flattened polyline."""
        polyline = [self._xy(p) for p in flatten_bezier(points, self.curve_segments)]
        self.draw.line(
            polyline, fill=stroke.color, width=self._width(stroke.width), joint="curve"
        )

    def draw_filled_polygon(
        self, points: Sequence[Point], fill: Color, stroke: Stroke
    ) -> None:
        self.draw.polygon(
            [self._xy(p) for p in points], fill=fill, outline=stroke.color
        )

    def draw_circle_outline(self, center: Point, radius: float, stroke: Stroke) -> None:
        cx, cy = self._xy(center)
        r = radius * self.scale
        self.draw.ellipse(
            [cx - r, cy - r, cx + r, cy + r],
            outline=stroke.color,
            width=self._width(stroke.width),
        )

    def draw_text(self, position: Point, text: str, color: Color) -> None:
        self.draw.text(self._xy(position), text, fill=color, font=self.title_font)

    def save(self, output_path: str) -> str:
        """Save the image as PNG and return the path."""
        self.image.save(output_path, "PNG", dpi=(300, 300))
        return output_path


class PNGRenderer:
    """Renders one or more diagrams as a PNG image."""

    def __init__(
        self,
        style: LayoutStyle = DEFAULT_STYLE,
        scale: int = 2,
        margin: int = 20,
        font_size: int = 12,
        title_font_size: int = 14,
        font_path: Optional[str] = None,
    ):
        self.style = style
        self.scale = scale
        self.margin = margin
        self.font_size = font_size
        self.title_font_size = title_font_size
        self.font_path = font_path

    def render_surface(
        self, diagrams: Union[Diagram, Sequence[Diagram]]
    ) -> PNGSurface:
        """
        Paint diagrams onto a new surface sized to fit them.

        Args:
            diagrams: A diagram or a sequence of diagrams

        Returns:
            The painted PNGSurface
        """
        if isinstance(diagrams, Diagram):
            diagrams = [diagrams]

        if not diagrams:
            # Create a small placeholder image
            return PNGSurface(200, 100, scale=1, background=self.style.background)

        bounds = diagrams[0].bounds()
        for diagram in diagrams[1:]:
            bounds = bounds.union(diagram.bounds())

        surface = PNGSurface(
            bounds.width + 2 * self.margin,
            bounds.height + 2 * self.margin,
            scale=self.scale,
            offset=Point(self.margin - bounds.x, self.margin - bounds.y),
            font_size=self.font_size,
            title_font_size=self.title_font_size,
            font_path=self.font_path,
            background=self.style.background,
        )
        for diagram in diagrams:
            paint_diagram(diagram, surface, self.style)
        return surface

    def render_image(self, diagrams: Union[Diagram, Sequence[Diagram]]) -> Image.Image:
        """Paint diagrams onto a new Pillow image sized to fit them."""
        return self.render_surface(diagrams).image

    def render(
        self,
        diagrams: Union[Diagram, Sequence[Diagram]],
        output_path: str = "diagram.png",
    ) -> str:
        """
        Render diagrams to a PNG file.

        Args:
            diagrams: A diagram or a sequence of diagrams
            output_path: Path to save the PNG file

        Returns:
            Path to the saved PNG file
        """
        return self.render_surface(diagrams).save(output_path)


def render_to_png(
    diagrams: Union[Diagram, Sequence[Diagram]],
    output_path: str = "diagram.png",
    **kwargs,
) -> str:
    """
    Convenience function to render diagrams to PNG.

    Args:
        diagrams: A diagram or a sequence of diagrams
        output_path: Path to save the PNG file
        **kwargs: Additional parameters for PNGRenderer

    Returns:
        Path to the saved PNG file
    """
    renderer = PNGRenderer(**kwargs)
    return renderer.render(diagrams, output_path)
