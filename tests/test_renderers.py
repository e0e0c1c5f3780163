"""Tests for the SVG and text renderers and the lane palette."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from branchviz.layout import INFO_LEFT_MARGIN, layout_graph
from branchviz.renderers import LANE_COLORS, SvgRenderer, TextRenderer, lane_color
from branchviz.types import Branch, Commit, CommitStats, GraphLayout

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_commit(sha: str, age: int, *parents: str, message: str = "", stats: CommitStats | None = None) -> Commit:
    return Commit(
        sha=sha,
        message=message or f"commit {sha}",
        author_name="Carol",
        author_date=BASE - timedelta(minutes=age),
        parents=tuple(parents),
        stats=stats,
        html_url=f"https://github.com/o/r/commit/{sha}",
    )


def merge_layout(display_limit: int = 100) -> GraphLayout:
    """main: M merges A and F; feature: F. B is the common base."""
    commits = [
        make_commit("M", 0, "A", "F", message="Merge feature"),
        make_commit("F", 1, "B", message="Add <feature> & tests", stats=CommitStats(1, 5, 0)),
        make_commit("A", 2, "B"),
        make_commit("B", 3),
    ]
    branches = [Branch("main", "M"), Branch("feature", "F")]
    return layout_graph(commits, branches, display_limit=display_limit)


class TestPalette:
    def test_cycles(self):
        assert lane_color(0) == "#3B82F6"
        assert lane_color(len(LANE_COLORS)) == lane_color(0)
        assert lane_color(9) == LANE_COLORS[1]


class TestSvgRenderer:
    def test_empty_layout(self):
        assert SvgRenderer().render(GraphLayout()) == ""

    def test_document(self):
        svg = SvgRenderer().render(merge_layout())
        assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg"')
        assert svg.endswith("</svg>")

    def test_edges_before_nodes(self):
        svg = SvgRenderer().render(merge_layout())
        assert svg.count("<path ") == 4
        assert svg.rindex("<path ") < svg.index("<circle ")

    def test_merge_marker(self):
        svg = SvgRenderer().render(merge_layout())
        merge_group = svg.split('<g id="commit-M">', 1)[1].split("</g>", 1)[0]
        assert 'r="4"' in merge_group
        feature_group = svg.split('<g id="commit-F">', 1)[1].split("</g>", 1)[0]
        assert 'r="4"' not in feature_group
        assert f'fill="{lane_color(1)}"' in feature_group

    def test_labels_escaped(self):
        svg = SvgRenderer().render(merge_layout())
        assert "Add &lt;feature&gt; &amp; tests" in svg
        assert f'x="{INFO_LEFT_MARGIN}"' in svg

    def test_tooltip_stats(self):
        svg = SvgRenderer().render(merge_layout())
        feature_group = svg.split('<g id="commit-F">', 1)[1].split("</g>", 1)[0]
        assert "1 file +5" in feature_group
        assert "-0" not in feature_group

    def test_load_more_footer(self):
        svg = SvgRenderer().render(merge_layout(display_limit=2))
        assert "Load more commits (2)" in svg
        assert "Load more" not in SvgRenderer().render(merge_layout())


class TestTextRenderer:
    def test_empty_layout(self):
        assert TextRenderer().render(GraphLayout()) == ""

    def test_rows(self):
        lines = TextRenderer().render(merge_layout()).split("\n")
        # B's first placed child is F, so it stays on the feature lane.
        assert lines == [
            "M    M Merge feature",
            "| *  F Add <feature> & tests",
            "* |  A commit A",
            "  *  B commit B",
        ]

    def test_lane_passes_through(self):
        commits = [
            make_commit("A", 0, "B"),
            make_commit("F", 1, "G"),
            make_commit("G", 2, "B"),
            make_commit("B", 3),
        ]
        layout = layout_graph(commits, [Branch("main", "A"), Branch("feature", "F")])
        lines = TextRenderer().render(layout).split("\n")
        assert lines[1].startswith("| *")
        assert lines[2].startswith("| *")

    def test_more_footer(self):
        text = TextRenderer().render(merge_layout(display_limit=3))
        assert text.split("\n")[-1] == "... 1 more commits"


class TestEscaping:
    def test_quote_in_url(self):
        commit = Commit(
            sha="Q",
            message="quoted",
            author_name="Carol",
            author_date=BASE,
            html_url='https://example.com/?q="x"&y=<1>',
        )
        svg = SvgRenderer().render(layout_graph([commit], [Branch("main", "Q")]))
        assert 'href="https://example.com/?q=&quot;x&quot;&amp;y=&lt;1&gt;"' in svg

    def test_quote_in_title(self):
        commit = make_commit("Q", 0, message='Say "hi"')
        svg = SvgRenderer().render(layout_graph([commit], [Branch("main", "Q")]))
        assert "Say &quot;hi&quot;" in svg
