"""SVG renderer — renders a GraphLayout to an SVG string."""

from __future__ import annotations

from branchviz.layout import INFO_LEFT_MARGIN
from branchviz.renderers.palette import lane_color
from branchviz.types import CommitNode, EdgePath, GraphLayout

# ─── Constants ──────────────────────────────────────────────────────────────

FONT_SIZE = 14
FONT_FAMILY = "sans-serif"
NODE_RADIUS = 6
MERGE_RADIUS = 4
TEXT_WIDTH = 480  # width of the commit title column
BACKGROUND = "#111827"
NODE_STROKE = "#1f2937"
TEXT_COLOR = "#ffffff"
MUTED_COLOR = "#9ca3af"


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _font(size: int = FONT_SIZE) -> str:
    return f'font-family="{FONT_FAMILY}" font-size="{size}"'


# ─── Tooltip ────────────────────────────────────────────────────────────────


def _tooltip(node: CommitNode) -> str:
    """Hover text: title, author and date, stats when known, short sha."""
    c = node.commit
    lines = [c.title, f"{c.author_name} · {c.author_date.isoformat()}"]
    if c.stats is not None:
        files = "1 file" if c.stats.total == 1 else f"{c.stats.total} files"
        stats = [files]
        if c.stats.additions > 0:
            stats.append(f"+{c.stats.additions}")
        if c.stats.deletions > 0:
            stats.append(f"-{c.stats.deletions}")
        lines.append(" ".join(stats))
    lines.append(c.short_sha)
    return _escape("\n".join(lines))


# ─── Shape Rendering ────────────────────────────────────────────────────────


def _render_edge(edge: EdgePath) -> str:
    color = lane_color(edge.lane)
    return f'<path d="{edge.d}" stroke="{color}" stroke-width="2" fill="none" opacity="0.8"/>'


def _render_node(node: CommitNode) -> str:
    color = lane_color(node.lane)
    parts = [
        f'<g id="commit-{node.sha}">',
        f"<title>{_tooltip(node)}</title>",
        f'<circle cx="{node.x}" cy="{node.y}" r="{NODE_RADIUS}" fill="{color}" stroke="{NODE_STROKE}" stroke-width="2"/>',
    ]
    if node.is_merge:
        parts.append(f'<circle cx="{node.x}" cy="{node.y}" r="{MERGE_RADIUS}" fill="{NODE_STROKE}"/>')
    parts.append("</g>")
    return "\n".join(parts)


def _render_label(node: CommitNode) -> str:
    title = _escape(node.commit.title)
    text = (
        f'<text x="{INFO_LEFT_MARGIN}" y="{node.y}" dominant-baseline="central" {_font()} fill="{TEXT_COLOR}">'
        f"{title}</text>"
    )
    if node.commit.html_url:
        return f'<a href="{_escape(node.commit.html_url)}" target="_blank">{text}</a>'
    return text


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """SVG renderer — consumes a GraphLayout, produces an SVG string."""

    def render(self, layout: GraphLayout) -> str:
        if not layout.visible:
            return ""

        svg_w = INFO_LEFT_MARGIN + TEXT_WIDTH
        svg_h = layout.height
        if layout.has_more:
            svg_h += FONT_SIZE * 2

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{svg_w}" height="{svg_h}" viewBox="0 0 {svg_w} {svg_h}">',
            f'<rect width="{svg_w}" height="{svg_h}" fill="{BACKGROUND}"/>',
        ]

        # Edges (behind nodes)
        for edge in layout.edges:
            parts.append(_render_edge(edge))

        # Nodes (on top)
        for node in layout.visible:
            parts.append(_render_node(node))

        for node in layout.visible:
            parts.append(_render_label(node))

        if layout.has_more:
            y = layout.height
            parts.append(
                f'<text x="{svg_w // 2}" y="{y}" text-anchor="middle" {_font(FONT_SIZE - 2)} fill="{MUTED_COLOR}">'
                f"Load more commits ({layout.remaining})</text>"
            )

        parts.append("</svg>")
        return "\n".join(parts)
