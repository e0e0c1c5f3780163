"""Public API: fetch a repository and render its commit graph."""

from __future__ import annotations

from collections.abc import Iterable

from branchviz.exceptions import InvalidRepositoryUrl
from branchviz.github import GitHubClient, parse_repository_url
from branchviz.layout import DEFAULT_DISPLAY_LIMIT, layout_graph
from branchviz.renderers import Renderer, SvgRenderer, TextRenderer
from branchviz.types import Branch, Commit, RepositoryData


def fetch_repository(url: str, token: str | None = None, client: GitHubClient | None = None) -> RepositoryData:
    """Resolve ``url`` (or ``owner/repo``) and fetch its branches and commits."""
    parsed = parse_repository_url(url)
    if parsed is None:
        raise InvalidRepositoryUrl(
            "Invalid GitHub repository URL. Please use format: github.com/owner/repo or owner/repo"
        )
    if client is None:
        client = GitHubClient(token=token)
    return client.get_repository_data(*parsed)


RENDERERS: dict[str, type[Renderer]] = {"svg": SvgRenderer, "text": TextRenderer}


def render(
    renderer: Renderer,
    commits: Iterable[Commit],
    branches: Iterable[Branch],
    visible_branches: Iterable[str] | None = None,
    display_limit: int = DEFAULT_DISPLAY_LIMIT,
) -> str:
    """Lay out the commit graph and hand it to ``renderer``."""
    return renderer.render(layout_graph(commits, branches, visible_branches, display_limit))


def render_svg(
    commits: Iterable[Commit],
    branches: Iterable[Branch],
    visible_branches: Iterable[str] | None = None,
    display_limit: int = DEFAULT_DISPLAY_LIMIT,
) -> str:
    """Lay out the commit graph and render it to an SVG string."""
    return render(SvgRenderer(), commits, branches, visible_branches, display_limit)


def render_text(
    commits: Iterable[Commit],
    branches: Iterable[Branch],
    visible_branches: Iterable[str] | None = None,
    display_limit: int = DEFAULT_DISPLAY_LIMIT,
) -> str:
    """Lay out the commit graph and render it as plain text."""
    return render(TextRenderer(), commits, branches, visible_branches, display_limit)
