"""SVG output for a graph layout."""

from gitlanes.constants import DOT_STROKE_WIDTH
from gitlanes.graph.types import Dot, GraphLayout, RenderEdge, format_coord


def esc(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def line(edge: RenderEdge) -> str:
    return (
        f'<line x1="{format_coord(edge.from_point.x)}" y1="{format_coord(edge.from_point.y)}" '
        f'x2="{format_coord(edge.to_point.x)}" y2="{format_coord(edge.to_point.y)}" '
        f'stroke="{esc(edge.color)}" stroke-width="{format_coord(edge.stroke_width)}" '
        f'stroke-linecap="round"/>'
    )


def path(edge: RenderEdge) -> str:
    assert edge.connector is not None
    return (
        f'<path d="{edge.connector.path_data}" stroke="{esc(edge.color)}" '
        f'stroke-width="{format_coord(edge.stroke_width)}" fill="none" '
        f'stroke-linecap="round" stroke-linejoin="round"/>'
    )


def circle(dot: Dot) -> str:
    return (
        f'<circle cx="{format_coord(dot.x)}" cy="{format_coord(dot.y)}" r="{format_coord(dot.radius)}" '
        f'fill="{esc(dot.color)}" stroke="{esc(dot.stroke)}" '
        f'stroke-width="{format_coord(DOT_STROKE_WIDTH)}"/>'
    )


def render_svg(layout: GraphLayout, width: float, height: float) -> str:
    """
    Render a layout as a standalone SVG document.

    Edges are emitted in layout order (spine first) and dots last so they
    sit on top of the connectors.
    """
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{format_coord(width)}" '
        f'height="{format_coord(height)}" viewBox="0 0 {format_coord(width)} {format_coord(height)}">'
    ]
    for edge in layout.edges:
        parts.append(line(edge) if edge.is_straight else path(edge))
    for dot in layout.dots:
        parts.append(circle(dot))
    parts.append("</svg>")
    return "\n".join(parts) + "\n"
