"""Lane colours shared by renderers and the branch legend."""

LANE_COLORS: tuple[str, ...] = (
    "#3B82F6",  # blue
    "#10B981",  # green
    "#F59E0B",  # amber
    "#8B5CF6",  # violet
    "#EF4444",  # red
    "#EC4899",  # pink
    "#6366F1",  # indigo
    "#6B7280",  # gray
)


def lane_color(lane: int) -> str:
    return LANE_COLORS[lane % len(LANE_COLORS)]
