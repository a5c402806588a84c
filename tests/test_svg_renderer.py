"""Tests for the SVG renderer module."""

from blockflow import create_graph, parse_program
from blockflow.models import Point, Stroke
from blockflow.svg_renderer import SvgRenderer, SvgSurface, render_svg


class TestSvgRenderer:
    """Tests for SvgRenderer class."""

    def test_document(self, generator, chain_graph):
        """Output is a single svg element."""
        svg = SvgRenderer().render(generator.layout(chain_graph))
        assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg"')
        assert svg.endswith("</svg>")

    def test_element_counts(self, generator, chain_graph):
        """One rect per box plus the background, three primitives per edge."""
        svg = render_svg(generator.layout(chain_graph))
        assert svg.count("<rect") == 5
        assert svg.count("<path") == 3
        assert svg.count("<polygon") == 3
        assert svg.count("<circle") == 3

    def test_canvas_size(self, generator, chain_graph):
        """The canvas is the diagram bounds plus padding."""
        svg = SvgRenderer(padding=10).render(generator.layout(chain_graph))
        assert 'width="91" height="204"' in svg

    def test_curve_path(self, generator, chain_graph):
        """Curves are emitted as cubic path commands."""
        svg = SvgRenderer(padding=0).render(generator.layout(chain_graph))
        # Offset by 9 so the leftmost control point lands on x = 0.
        assert 'd="M 40,31 C 70,31 0,41 30,41"' in svg

    def test_text_is_escaped(self, generator):
        """Statement text is XML-escaped."""
        graph = create_graph([(0, 1)], contents={0: ["_3 = Lt(_1, _2) & <x>"]})
        svg = render_svg(generator.layout(graph))
        assert "_3 = Lt(_1, _2) &amp; &lt;x&gt;" in svg
        assert "<x>" not in svg

    def test_headings(self, generator, program_text):
        """Function names are drawn as headings."""
        diagrams = generator.layout_program(parse_program(program_text))
        svg = render_svg(diagrams)
        assert ">main</text>" in svg
        assert ">helper</text>" in svg
        assert ">otherwise</text>" in svg

    def test_render_empty(self):
        """No diagrams, no document."""
        assert SvgRenderer().render([]) == ""


class TestSvgSurface:
    """Tests for SvgSurface class."""

    def test_circle(self):
        """Circles are unfilled outlines."""
        surface = SvgSurface()
        surface.draw_circle_outline(Point(1.5, 2), 2, Stroke((1, 2, 3), 2))
        assert surface.parts == [
            '<circle cx="1.5" cy="2" r="2" fill="none" stroke="rgb(1,2,3)" '
            'stroke-width="2"/>'
        ]

    def test_polygon_offset(self):
        """Points are shifted by the offset."""
        surface = SvgSurface(offset=Point(10, 0))
        surface.draw_filled_polygon(
            [Point(0, 0), Point(1, 1), Point(-10, 2)], (0, 0, 0), Stroke((0, 0, 0))
        )
        assert 'points="10,0 11,1 0,2"' in surface.parts[0]
