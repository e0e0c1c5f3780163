"""Text renderer — one terminal row per visible commit."""

from __future__ import annotations

from branchviz.types import GraphLayout

COMMIT_CHAR = "*"
MERGE_CHAR = "M"
LANE_CHAR = "|"


class TextRenderer:
    """Draws lanes as columns: a lane shows ``|`` on rows between its first
    and last visible commit, and the commit marker on its own rows.
    """

    def render(self, layout: GraphLayout) -> str:
        if not layout.visible:
            return ""

        # Lane → (first row, last row) among visible nodes.
        spans: dict[int, tuple[int, int]] = {}
        for row, node in enumerate(layout.visible):
            first, _ = spans.get(node.lane, (row, row))
            spans[node.lane] = (first, row)

        width = max(spans) + 1
        lines: list[str] = []
        for row, node in enumerate(layout.visible):
            cells = []
            for lane in range(width):
                if lane == node.lane:
                    cells.append(MERGE_CHAR if node.is_merge else COMMIT_CHAR)
                elif lane in spans and spans[lane][0] < row < spans[lane][1]:
                    cells.append(LANE_CHAR)
                else:
                    cells.append(" ")
            lines.append(f"{' '.join(cells)}  {node.commit.short_sha} {node.commit.title}")

        if layout.has_more:
            lines.append(f"... {layout.remaining} more commits")
        return "\n".join(lines)
