"""branchviz — commit-graph layout for repository history visualization."""

from branchviz.api import fetch_repository, render_svg, render_text
from branchviz.layout import LayoutConfig, layout_graph
from branchviz.types import Branch, Commit, CommitNode, CommitStats, EdgePath, GraphLayout
from branchviz.view import GraphView

__all__ = [
    "Branch",
    "Commit",
    "CommitNode",
    "CommitStats",
    "EdgePath",
    "GraphLayout",
    "GraphView",
    "LayoutConfig",
    "fetch_repository",
    "layout_graph",
    "render_svg",
    "render_text",
]
