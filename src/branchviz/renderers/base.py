"""Base renderer protocol."""

from __future__ import annotations

from typing import Protocol

from branchviz.types import GraphLayout


class Renderer(Protocol):
    """Turns a GraphLayout into a document.

    Renderers draw ``layout.visible`` and ``layout.edges`` only; hidden and
    paginated-out commits surface solely through ``layout.remaining``. A
    layout with no visible nodes renders to ``""`` so callers can show their
    own empty state.
    """

    def render(self, layout: GraphLayout) -> str: ...
