"""Data types shared by the layout engine, renderers and the GitHub client."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from functools import cached_property
from types import MappingProxyType

# ─── Input Records ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CommitStats:
    """Change statistics of a commit (only present for detailed commits)."""

    total: int
    additions: int
    deletions: int


@dataclass(frozen=True)
class FileChange:
    filename: str
    additions: int
    deletions: int
    changes: int


@dataclass(frozen=True)
class Commit:
    """A single commit as returned by the fetch layer.

    Records are frozen (and parents/files are tuples) so they can be used as
    part of a memoization key.
    """

    sha: str
    message: str
    author_name: str
    author_date: datetime
    parents: tuple[str, ...] = ()
    stats: CommitStats | None = None
    html_url: str = ""
    files: tuple[FileChange, ...] = ()

    @property
    def title(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    @property
    def is_root(self) -> bool:
        return not self.parents


@dataclass(frozen=True)
class Branch:
    """A named branch and the sha of its head commit."""

    name: str
    head: str


@dataclass(frozen=True)
class RepositoryData:
    owner: str
    repo: str
    commits: tuple[Commit, ...]
    branches: tuple[Branch, ...]

    @property
    def has_incomplete_stats(self) -> bool:
        """True when some commit came back without detailed statistics."""
        return any(c.stats is None for c in self.commits)


# ─── Layout Output ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Point:
    """A 2D point in canvas units."""

    x: float
    y: float


@dataclass(frozen=True)
class CommitNode:
    """A commit placed on the graph.

    ``index`` is the 0-based position in the full chronological (newest
    first) ordering, ``lane`` the horizontal track and ``label`` the branch
    name the lane heuristics resolved for it.
    """

    commit: Commit
    index: int
    lane: int
    label: str
    x: int
    y: int

    @property
    def sha(self) -> str:
        return self.commit.sha

    @property
    def parents(self) -> tuple[str, ...]:
        return self.commit.parents

    @property
    def is_merge(self) -> bool:
        return self.commit.is_merge


def _num(v: float) -> str:
    """Format a coordinate without a trailing ``.0``."""
    if float(v).is_integer():
        return str(int(v))
    return f"{v:.2f}".rstrip("0").rstrip(".")


@dataclass(frozen=True)
class EdgePath:
    """A drawable connection from a child commit down to one of its parents.

    ``controls`` is None for a straight line, otherwise the two control points
    of a cubic Bézier curve.
    """

    child: str
    parent: str
    lane: int
    start: Point
    end: Point
    controls: tuple[Point, Point] | None = None

    @property
    def is_straight(self) -> bool:
        return self.controls is None

    @property
    def d(self) -> str:
        """SVG path data for this edge."""
        head = f"M {_num(self.start.x)} {_num(self.start.y)}"
        tail = f"{_num(self.end.x)} {_num(self.end.y)}"
        if self.controls is None:
            return f"{head} L {tail}"
        c1, c2 = self.controls
        return f"{head} C {_num(c1.x)} {_num(c1.y)} {_num(c2.x)} {_num(c2.y)} {tail}"


@dataclass(frozen=True)
class GraphLayout:
    """Everything a renderer needs for one state of the graph.

    Layouts are shared through the pipeline cache, so every field is
    immutable: the two mappings are read-only views over private copies.

    Attributes:
        nodes: Every lane-assigned node, in chronological order.
        visible: Nodes that pass the branch filter, truncated to the display limit.
        edges: Edges between visible nodes only.
        total: Number of nodes passing the branch filter before pagination.
        lanes: Branch name → lane index, in assignment order.
        lane_members: Lane index → shas placed on it (diagnostics only).
        primary: Label of the primary branch (lane 0).
    """

    nodes: tuple[CommitNode, ...] = ()
    visible: tuple[CommitNode, ...] = ()
    edges: tuple[EdgePath, ...] = ()
    total: int = 0
    lanes: Mapping[str, int] = field(default_factory=dict, hash=False)
    lane_members: Mapping[int, tuple[str, ...]] = field(default_factory=dict, hash=False)
    primary: str = "main"

    def __post_init__(self) -> None:
        object.__setattr__(self, "lanes", MappingProxyType(dict(self.lanes)))
        object.__setattr__(
            self, "lane_members", MappingProxyType({k: tuple(v) for k, v in self.lane_members.items()})
        )

    @cached_property
    def _by_sha(self) -> Mapping[str, CommitNode]:
        return MappingProxyType({n.sha: n for n in self.nodes})

    @property
    def shown(self) -> int:
        return len(self.visible)

    @property
    def remaining(self) -> int:
        """How many more branch-visible commits a "load more" would reveal."""
        return max(0, self.total - len(self.visible))

    @property
    def has_more(self) -> bool:
        return self.remaining > 0

    @property
    def height(self) -> int:
        """Canvas height: 40 units below the lowest visible node."""
        if not self.visible:
            return 100 + 40
        return max(n.y for n in self.visible) + 40

    def node(self, sha: str) -> CommitNode | None:
        """Look up any laid-out node (visible or not) by commit sha."""
        return self._by_sha.get(sha)
