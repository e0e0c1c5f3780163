"""Layout module — commit-graph layout pipeline.

Phases:
  1. Normalization   (dedupe by sha, newest first, stable on ties)
  2. Lane assignment (single chronological pass, first-match heuristics)
  3. Coordinate assignment (x from lane, y from chronological position)
  4. Visibility filter (branch toggles + display limit)
  5. Edge building  (straight or capped cubic curves between visible nodes)

The lane heuristic is an approximation of branch membership, not a
crossing-minimising DAG layout: two unrelated commits may share a lane.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from functools import lru_cache

import networkx as nx

from branchviz.exceptions import ValidationError
from branchviz.types import Branch, Commit, CommitNode, EdgePath, GraphLayout, Point

# ─── Geometry Constants ───────────────────────────────────────────────────────

LEFT_MARGIN: int = 30  # x of lane 0
LANE_SPACING: int = 20  # horizontal distance between adjacent lanes
TOP_MARGIN: int = 30  # y of the newest commit
ROW_SPACING: int = 32  # vertical distance between consecutive commits
INFO_LEFT_MARGIN: int = 120  # x where renderers start the text column

CURVE_RATIO: float = 0.6  # control-point offset as a share of |Δy|
CURVE_CAP: float = 40  # maximum control-point offset

DEFAULT_DISPLAY_LIMIT: int = 100
PAGE_SIZE: int = 100

PRIMARY_BRANCH_NAMES = ("main", "master")
DEFAULT_PRIMARY = "main"


@dataclass(frozen=True)
class LayoutConfig:
    """Fixed geometry used to turn (position, lane) into coordinates."""

    left_margin: int = LEFT_MARGIN
    lane_spacing: int = LANE_SPACING
    top_margin: int = TOP_MARGIN
    row_spacing: int = ROW_SPACING
    curve_ratio: float = CURVE_RATIO
    curve_cap: float = CURVE_CAP


DEFAULT_CONFIG = LayoutConfig()

# ─── Normalization ────────────────────────────────────────────────────────────


def normalize_commits(commits: Iterable[Commit]) -> list[Commit]:
    """Deduplicate commits by sha and sort them newest first.

    The first occurrence of a sha wins. ``sorted`` is stable, so commits with
    equal timestamps keep their input order (``reverse=True`` preserves that).

    Raises:
        ValidationError: a commit has no sha or no author date.
    """
    seen: set[str] = set()
    unique: list[Commit] = []
    for commit in commits:
        if not commit.sha:
            raise ValidationError("Commit without an identifier")
        if commit.author_date is None:
            raise ValidationError(f"Commit {commit.sha} has no author date")
        if commit.sha in seen:
            continue
        seen.add(commit.sha)
        unique.append(commit)

    return sorted(unique, key=lambda c: c.author_date, reverse=True)


# ─── Lane Assignment ──────────────────────────────────────────────────────────


def primary_branch(branches: Sequence[Branch]) -> str:
    """Name of the branch pinned to lane 0.

    ``main`` or ``master`` if present, else the first branch, else ``"main"``.
    """
    for branch in branches:
        if branch.name in PRIMARY_BRANCH_NAMES:
            return branch.name
    if branches:
        return branches[0].name
    return DEFAULT_PRIMARY


def commit_graph(commits: Sequence[Commit]) -> nx.DiGraph:
    """Build a child → parent DiGraph over ``commits``.

    Edges are inserted in the order of ``commits``, so ``predecessors(sha)``
    yields the children of ``sha`` in that same order. Parents that are not
    part of ``commits`` appear as nodes without an ``index`` attribute.
    """
    graph: nx.DiGraph = nx.DiGraph()
    for pos, commit in enumerate(commits):
        graph.add_node(commit.sha, index=pos)
    for commit in commits:
        for parent in commit.parents:
            graph.add_edge(commit.sha, parent)
    return graph


@dataclass
class LaneAssignment:
    """Result of lane assignment over a normalized commit sequence.

    Attributes:
        placements: One (lane, label) pair per commit, same order as the input.
        branch_lanes: Branch name → lane index, in first-encounter order.
        lane_members: Lane index → shas assigned to it.
        primary: Label of the primary branch.
    """

    placements: list[tuple[int, str]] = field(default_factory=list)
    branch_lanes: dict[str, int] = field(default_factory=dict)
    lane_members: dict[int, list[str]] = field(default_factory=dict)
    primary: str = DEFAULT_PRIMARY


def assign_lanes(commits: Sequence[Commit], branches: Sequence[Branch]) -> LaneAssignment:
    """Assign every commit of a normalized sequence to a lane.

    Rules, first match wins:
      (a) merge commit          → lane 0, primary label
      (b) head of unseen branch → next unused lane, branch label
      (c) head of seen branch   → that branch's lane and label
      (d) parent of an already placed commit → that commit's lane and label
      (e) otherwise             → lane 0, primary label

    For (d) the earliest placed child in chronological order is used.
    """
    primary = primary_branch(branches)
    result = LaneAssignment(primary=primary)

    if branches:
        result.branch_lanes[primary] = 0
    next_lane = 1

    # sha → name of the first branch whose head it is.
    heads: dict[str, str] = {}
    for branch in branches:
        heads.setdefault(branch.head, branch.name)

    graph = commit_graph(commits)
    placed: dict[str, tuple[int, str]] = {}

    for commit in commits:
        lane, label = 0, primary
        head_of = heads.get(commit.sha)

        if commit.is_merge:
            pass
        elif head_of is not None:
            if head_of not in result.branch_lanes:
                result.branch_lanes[head_of] = next_lane
                next_lane += 1
            lane, label = result.branch_lanes[head_of], head_of
        else:
            for child in graph.predecessors(commit.sha):
                if child in placed:
                    lane, label = placed[child]
                    break

        placed[commit.sha] = (lane, label)
        result.placements.append((lane, label))
        result.lane_members.setdefault(lane, []).append(commit.sha)

    logging.debug("Assigned %d commits to %d lanes", len(commits), len(result.lane_members))
    return result


# ─── Coordinate Assignment ────────────────────────────────────────────────────


def lane_x(lane: int, config: LayoutConfig = DEFAULT_CONFIG) -> int:
    return config.left_margin + lane * config.lane_spacing


def row_y(index: int, config: LayoutConfig = DEFAULT_CONFIG) -> int:
    return config.top_margin + index * config.row_spacing


def assign_coordinates(
    commits: Sequence[Commit],
    lanes: LaneAssignment,
    config: LayoutConfig = DEFAULT_CONFIG,
) -> list[CommitNode]:
    """Place each commit at (lane_x(lane), row_y(position))."""
    nodes: list[CommitNode] = []
    for index, (commit, (lane, label)) in enumerate(zip(commits, lanes.placements)):
        nodes.append(
            CommitNode(
                commit=commit,
                index=index,
                lane=lane,
                label=label,
                x=lane_x(lane, config),
                y=row_y(index, config),
            )
        )
    return nodes


# ─── Visibility & Pagination ──────────────────────────────────────────────────


def filter_visible(
    nodes: Sequence[CommitNode],
    visible_branches: Iterable[str],
    display_limit: int,
) -> tuple[list[CommitNode], int]:
    """Keep nodes whose label is visible, then the first ``display_limit``.

    Returns the paginated nodes and the number of nodes that passed the
    branch filter before pagination.
    """
    wanted = set(visible_branches)
    matching = [n for n in nodes if n.label in wanted]
    return matching[: max(0, display_limit)], len(matching)


# ─── Edge Building ────────────────────────────────────────────────────────────


def edge_path(child: CommitNode, parent: CommitNode, config: LayoutConfig = DEFAULT_CONFIG) -> EdgePath:
    """Path from ``child`` to ``parent``: straight within a lane, curved across lanes.

    Curved paths leave the child vertically and enter the parent vertically;
    the control-point offset grows with the vertical gap up to ``curve_cap``.
    """
    start = Point(child.x, child.y)
    end = Point(parent.x, parent.y)
    if child.x == parent.x:
        return EdgePath(child=child.sha, parent=parent.sha, lane=child.lane, start=start, end=end)

    curvature = min(abs(parent.y - child.y) * config.curve_ratio, config.curve_cap)
    controls = (Point(child.x, child.y + curvature), Point(parent.x, parent.y - curvature))
    return EdgePath(
        child=child.sha,
        parent=parent.sha,
        lane=child.lane,
        start=start,
        end=end,
        controls=controls,
    )


def build_edges(visible: Sequence[CommitNode], config: LayoutConfig = DEFAULT_CONFIG) -> list[EdgePath]:
    """Edges for every (node, parent) pair where both ends are visible.

    Parents that were filtered out yield no edge.
    """
    by_sha: dict[str, CommitNode] = {n.sha: n for n in visible}
    edges: list[EdgePath] = []
    for node in visible:
        for parent_sha in node.parents:
            parent = by_sha.get(parent_sha)
            if parent is None:
                continue
            edges.append(edge_path(node, parent, config))
    return edges


# ─── Full Layout Pipeline ─────────────────────────────────────────────────────


def layout_graph(
    commits: Iterable[Commit],
    branches: Iterable[Branch],
    visible_branches: Iterable[str] | None = None,
    display_limit: int = DEFAULT_DISPLAY_LIMIT,
    config: LayoutConfig = DEFAULT_CONFIG,
) -> GraphLayout:
    """Run the full pipeline and return the layout for one UI state.

    ``visible_branches=None`` shows every branch. Repeated calls with equal
    inputs return the cached ``GraphLayout``.
    """
    visible = None if visible_branches is None else frozenset(visible_branches)
    commits = tuple(commits)
    return _layout_cached(commits, tuple(branches), visible, display_limit, config, _offsets(commits))


def _offsets(commits: Sequence[Commit]) -> tuple[object, ...]:
    """UTC offsets of the author dates.

    Aware datetimes for the same instant compare equal whatever their offset,
    so the offsets are part of the cache key to keep rendered dates exact.
    """
    return tuple(c.author_date.utcoffset() if c.author_date is not None else None for c in commits)


@lru_cache(maxsize=32)
def _layout_cached(
    commits: tuple[Commit, ...],
    branches: tuple[Branch, ...],
    visible_branches: frozenset[str] | None,
    display_limit: int,
    config: LayoutConfig,
    offsets: tuple[object, ...],
) -> GraphLayout:
    if visible_branches is None:
        visible_branches = frozenset(b.name for b in branches)

    ordered = normalize_commits(commits)
    lanes = assign_lanes(ordered, branches)
    nodes = assign_coordinates(ordered, lanes, config)
    visible, total = filter_visible(nodes, visible_branches, display_limit)
    edges = build_edges(visible, config)

    return GraphLayout(
        nodes=tuple(nodes),
        visible=tuple(visible),
        edges=tuple(edges),
        total=total,
        lanes=dict(lanes.branch_lanes),
        lane_members={lane: tuple(shas) for lane, shas in lanes.lane_members.items()},
        primary=lanes.primary,
    )
