"""Stateful facade over the layout pipeline for interactive renderers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from branchviz.layout import DEFAULT_CONFIG, DEFAULT_DISPLAY_LIMIT, PAGE_SIZE, LayoutConfig, layout_graph
from branchviz.renderers.palette import lane_color
from branchviz.types import Branch, Commit, CommitNode, GraphLayout


@dataclass(frozen=True)
class LegendEntry:
    name: str
    label: str
    color: str
    visible: bool


class GraphView:
    """Holds the user-controlled state (visible branches, display limit).

    Every state change is reflected by the next ``layout`` access; the
    layout itself is recomputed through the memoized pipeline, so reading
    ``layout`` repeatedly without changes is cheap.
    """

    def __init__(
        self,
        commits: Iterable[Commit],
        branches: Iterable[Branch],
        display_limit: int = DEFAULT_DISPLAY_LIMIT,
        page_size: int = PAGE_SIZE,
        config: LayoutConfig = DEFAULT_CONFIG,
    ) -> None:
        if display_limit < 0:
            raise ValueError(f"display_limit must be >= 0, got {display_limit}")
        self.commits = tuple(commits)
        self.branches = tuple(branches)
        self.visible_branches: set[str] = {b.name for b in self.branches}
        self.display_limit = display_limit
        self.page_size = page_size
        self.config = config

    @property
    def layout(self) -> GraphLayout:
        return layout_graph(
            self.commits,
            self.branches,
            self.visible_branches,
            self.display_limit,
            self.config,
        )

    def is_visible(self, name: str) -> bool:
        return name in self.visible_branches

    def toggle_branch(self, name: str) -> bool:
        """Flip a branch's visibility and return the new state."""
        visible = not self.is_visible(name)
        self.set_branch_visible(name, visible)
        return visible

    def set_branch_visible(self, name: str, visible: bool) -> None:
        if visible:
            self.visible_branches.add(name)
        else:
            self.visible_branches.discard(name)

    def show_all(self) -> None:
        self.visible_branches = {b.name for b in self.branches}

    def load_more(self) -> int:
        """Raise the display limit by one page and return the new limit."""
        self.display_limit += self.page_size
        return self.display_limit

    def node(self, sha: str) -> CommitNode | None:
        """Detail lookup for hover/click handlers."""
        return self.layout.node(sha)

    def legend(self) -> list[LegendEntry]:
        """One entry per branch, coloured by its position in the branch list."""
        return [
            LegendEntry(
                name=b.name,
                label=b.name.removeprefix("origin/"),
                color=lane_color(i),
                visible=self.is_visible(b.name),
            )
            for i, b in enumerate(self.branches)
        ]
