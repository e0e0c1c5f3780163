"""Tests for github.py — URL parsing and the REST client against a fake session."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest
import requests

from branchviz.exceptions import AuthenticationError, FetchError, NotFoundError, RateLimitError
from branchviz.github import DETAIL_LIMIT, GitHubClient, commit_from_api, parse_repository_url

# ─── Helpers ──────────────────────────────────────────────────────────────────


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def json(self) -> Any:
        return self.payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Minimal stand-in for requests.Session keyed on URL path."""

    def __init__(self, routes: dict[str, FakeResponse]) -> None:
        self.routes = routes
        self.headers: dict[str, str] = {}
        self.calls: list[tuple[str, dict[str, Any] | None]] = []

    def get(self, url: str, params: dict[str, Any] | None = None, timeout: float | None = None) -> FakeResponse:
        path = url.removeprefix("https://api.github.com/")
        self.calls.append((path, params))
        if path not in self.routes:
            return FakeResponse({"message": "Not Found"}, 404)
        return self.routes[path]


def api_commit(sha: str, date: str, *parents: str, name: str | None = "Alice") -> dict[str, Any]:
    author = {"name": name, "date": date} if name is not None else None
    return {
        "sha": sha,
        "commit": {"message": f"{sha} title\n\nbody", "author": author},
        "parents": [{"sha": p} for p in parents],
        "html_url": f"https://github.com/o/r/commit/{sha}",
    }


def api_detail(additions: int, deletions: int) -> dict[str, Any]:
    return {
        "stats": {"total": additions + deletions, "additions": additions, "deletions": deletions},
        "files": [{"filename": "a.py", "additions": additions, "deletions": deletions, "changes": additions + deletions}],
    }


def repo_routes() -> dict[str, FakeResponse]:
    return {
        "repos/o/r/branches": FakeResponse(
            [{"name": "main", "commit": {"sha": "A"}}, {"name": "feature", "commit": {"sha": "F"}}]
        ),
        "repos/o/r/commits": FakeResponse(
            [api_commit("A", "2024-01-02T00:00:00Z", "B"), api_commit("B", "2024-01-01T00:00:00Z")]
        ),
        "repos/o/r/commits/A": FakeResponse(api_detail(3, 1)),
    }


# ─── URL Parsing Tests ────────────────────────────────────────────────────────


class TestParseRepositoryUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/octo/hello",
            "http://www.github.com/octo/hello",
            "github.com/octo/hello.git",
            "https://github.com/octo/hello/tree/main/src",
            "octo/hello",
            "  octo/hello  ",
        ],
    )
    def test_valid(self, url):
        assert parse_repository_url(url) == ("octo", "hello")

    @pytest.mark.parametrize("url", ["", "hello", "a/b/c", "https://gitlab.com/a/b/c"])
    def test_invalid(self, url):
        assert parse_repository_url(url) is None


# ─── Conversion Tests ─────────────────────────────────────────────────────────


class TestCommitFromApi:
    def test_fields(self):
        commit = commit_from_api(api_commit("A", "2024-01-02T03:04:05Z", "B", "C"))
        assert commit.sha == "A"
        assert commit.title == "A title"
        assert commit.author_name == "Alice"
        assert commit.author_date == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert commit.parents == ("B", "C")
        assert commit.stats is None

    def test_missing_author(self):
        commit = commit_from_api(api_commit("A", "", name=None))
        assert commit.author_name == "Unknown"
        assert commit.author_date.tzinfo is not None


# ─── Client Tests ─────────────────────────────────────────────────────────────


class TestGitHubClient:
    def test_token_header(self):
        session = FakeSession({})
        client = GitHubClient(token="secret", session=session)
        assert session.headers["Authorization"] == "Bearer secret"
        client.set_token(None)
        assert "Authorization" not in session.headers

    def test_repository_data(self):
        session = FakeSession(repo_routes())
        data = GitHubClient(session=session).get_repository_data("o", "r")
        assert [b.name for b in data.branches] == ["main", "feature"]
        assert [b.head for b in data.branches] == ["A", "F"]
        # Both branches return the same commits; they are deduplicated.
        assert [c.sha for c in data.commits] == ["A", "B"]
        assert data.commits[0].stats.additions == 3
        assert data.commits[0].files[0].filename == "a.py"
        # B has no detail route (404) and keeps its basic info.
        assert data.commits[1].stats is None
        assert data.has_incomplete_stats

    def test_request_parameters(self):
        session = FakeSession(repo_routes())
        GitHubClient(session=session).get_repository_data("o", "r")
        assert session.calls[0] == ("repos/o/r/branches", {"per_page": 100})
        assert session.calls[1] == ("repos/o/r/commits", {"sha": "main", "per_page": 50})
        assert session.calls[2] == ("repos/o/r/commits", {"sha": "feature", "per_page": 50})

    def test_details_limited(self):
        commits = [api_commit(f"c{i:02d}", f"2024-01-01T00:{i:02d}:00Z") for i in range(DETAIL_LIMIT + 5)]
        routes = {
            "repos/o/r/branches": FakeResponse([{"name": "main", "commit": {"sha": "c00"}}]),
            "repos/o/r/commits": FakeResponse(commits),
        }
        session = FakeSession(routes)
        data = GitHubClient(session=session).get_repository_data("o", "r")
        detail_calls = [p for p, _ in session.calls if p.startswith("repos/o/r/commits/")]
        assert len(detail_calls) == DETAIL_LIMIT
        assert len(data.commits) == DETAIL_LIMIT + 5

    def test_branch_commit_failure_skipped(self):
        routes = repo_routes()
        routes["repos/o/r/commits"] = FakeResponse({"message": "boom"}, 500)
        data = GitHubClient(session=FakeSession(routes)).get_repository_data("o", "r")
        assert data.commits == ()
        assert len(data.branches) == 2

    @pytest.mark.parametrize(
        "status,error,fragment",
        [
            (403, RateLimitError, "rate limit exceeded"),
            (404, NotFoundError, "Repository not found"),
            (401, AuthenticationError, "Authentication failed"),
            (500, FetchError, "Failed to fetch repository data"),
        ],
    )
    def test_branch_errors(self, status, error, fragment):
        routes = {"repos/o/r/branches": FakeResponse({"message": "x"}, status)}
        with pytest.raises(error, match=fragment):
            GitHubClient(session=FakeSession(routes)).get_repository_data("o", "r")

    def test_fetch_errors_share_base(self):
        assert issubclass(RateLimitError, FetchError)
        assert issubclass(NotFoundError, FetchError)
        assert issubclass(AuthenticationError, FetchError)

    def test_rate_limit(self):
        routes = {"rate_limit": FakeResponse({"rate": {"limit": 60, "remaining": 59}})}
        assert GitHubClient(session=FakeSession(routes)).get_rate_limit() == {"limit": 60, "remaining": 59}

    def test_rate_limit_failure(self):
        assert GitHubClient(session=FakeSession({})).get_rate_limit() is None
