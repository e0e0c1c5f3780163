from branchviz.renderers.base import Renderer
from branchviz.renderers.palette import LANE_COLORS, lane_color
from branchviz.renderers.svg import SvgRenderer
from branchviz.renderers.text import TextRenderer

__all__ = ["LANE_COLORS", "Renderer", "SvgRenderer", "TextRenderer", "lane_color"]
