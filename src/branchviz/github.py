"""GitHub REST client: fetches branches and commits for the layout engine."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any

import requests

from branchviz.exceptions import AuthenticationError, FetchError, NotFoundError, RateLimitError
from branchviz.types import Branch, Commit, CommitStats, FileChange, RepositoryData

API_URL = "https://api.github.com"
BRANCHES_PER_PAGE = 100
COMMITS_PER_BRANCH = 50
# Only the newest commits get a detail request (stats, files) to spare the rate limit.
DETAIL_LIMIT = 30
TIMEOUT = 30

_URL_PATTERNS = (
    re.compile(r"github\.com/([^/]+)/([^/]+?)(?:\.git)?(?:/.*)?$"),
    re.compile(r"^([^/]+)/([^/]+)$"),
)


def parse_repository_url(url: str) -> tuple[str, str] | None:
    """Extract (owner, repo) from a GitHub URL or ``owner/repo`` shorthand."""
    clean = re.sub(r"^https?://", "", url.strip())
    clean = re.sub(r"^www\.", "", clean)

    for pattern in _URL_PATTERNS:
        match = pattern.search(clean)
        if match:
            return match.group(1), match.group(2)
    return None


def _parse_date(value: str | None) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _status(error: requests.RequestException) -> int | None:
    return getattr(error.response, "status_code", None)


def _translate(error: requests.RequestException) -> FetchError:
    status = _status(error)
    if status == 403:
        return RateLimitError(
            "GitHub API rate limit exceeded. Please try again later or use a personal access token for higher limits."
        )
    if status == 404:
        return NotFoundError("Repository not found. Please check the repository URL and ensure it is public.")
    if status == 401:
        return AuthenticationError("Authentication failed. The repository may be private.")
    return FetchError(f"Failed to fetch repository data: {str(error) or 'Unknown error'}")


def commit_from_api(data: dict[str, Any]) -> Commit:
    """Build a Commit from a ``/commits`` list item (no stats)."""
    author = data["commit"].get("author") or {}
    return Commit(
        sha=data["sha"],
        message=data["commit"].get("message", ""),
        author_name=author.get("name") or "Unknown",
        author_date=_parse_date(author.get("date")),
        parents=tuple(p["sha"] for p in data.get("parents", [])),
        html_url=data.get("html_url", ""),
    )


def with_details(commit: Commit, detail: dict[str, Any]) -> Commit:
    """Return ``commit`` enriched with the stats and files of a detail response."""
    stats = detail.get("stats")
    files = detail.get("files") or []
    return Commit(
        sha=commit.sha,
        message=commit.message,
        author_name=commit.author_name,
        author_date=commit.author_date,
        parents=commit.parents,
        html_url=commit.html_url,
        stats=CommitStats(
            total=stats.get("total") or 0,
            additions=stats.get("additions") or 0,
            deletions=stats.get("deletions") or 0,
        )
        if stats
        else None,
        files=tuple(
            FileChange(
                filename=f["filename"],
                additions=f.get("additions") or 0,
                deletions=f.get("deletions") or 0,
                changes=f.get("changes") or 0,
            )
            for f in files
        ),
    )


class GitHubClient:
    def __init__(
        self,
        token: str | None = None,
        session: requests.Session | None = None,
        api_url: str = API_URL,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"Accept": "application/vnd.github+json"})
        self.token: str | None = None
        self.set_token(token)

    def set_token(self, token: str | None) -> None:
        """Switch between authenticated (5000 req/h) and anonymous (60 req/h) access."""
        self.token = token or None
        if self.token:
            self.session.headers["Authorization"] = f"Bearer {self.token}"
        else:
            self.session.headers.pop("Authorization", None)

    def __get(self, path: str, **params: Any) -> Any:
        r = self.session.get(f"{self.api_url}/{path}", params=params or None, timeout=TIMEOUT)
        r.raise_for_status()
        return r.json()

    def get_rate_limit(self) -> dict[str, Any] | None:
        try:
            return self.__get("rate_limit")["rate"]
        except requests.RequestException as e:
            logging.warning(f"Failed to get rate limit info: {e}")
            return None

    def __branch_commits(self, owner: str, repo: str, branch: str) -> list[Commit]:
        try:
            data = self.__get(f"repos/{owner}/{repo}/commits", sha=branch, per_page=COMMITS_PER_BRANCH)
        except requests.RequestException as e:
            logging.warning(f"Failed to fetch commits for branch {branch}: {e}")
            return []
        return [commit_from_api(item) for item in data]

    def __detailed(self, owner: str, repo: str, commit: Commit) -> Commit:
        try:
            detail = self.__get(f"repos/{owner}/{repo}/commits/{commit.sha}")
        except requests.RequestException as e:
            status = _status(e)
            if status == 403:
                logging.warning(f"Rate limited for commit {commit.sha}, using basic info only")
            elif status == 404:
                logging.warning(f"Commit {commit.sha} not found, using basic info only")
            else:
                logging.warning(f"Failed to fetch detailed info for commit {commit.sha}: {e}")
            return commit
        return with_details(commit, detail)

    def get_repository_data(self, owner: str, repo: str) -> RepositoryData:
        """Fetch branches and their recent commits.

        Commits reachable from several branches are returned once. Only the
        first ``DETAIL_LIMIT`` commits carry stats; the rest keep ``stats=None``.

        Raises:
            FetchError: or one of its subclasses when the branch list cannot be read.
        """
        try:
            raw_branches = self.__get(f"repos/{owner}/{repo}/branches", per_page=BRANCHES_PER_PAGE)
        except requests.RequestException as e:
            raise _translate(e) from e

        branches = tuple(Branch(name=b["name"], head=b["commit"]["sha"]) for b in raw_branches)
        logging.info(f"Branches found: {len(branches)}")

        seen: set[str] = set()
        unique: list[Commit] = []
        for branch in branches:
            for commit in self.__branch_commits(owner, repo, branch.name):
                if commit.sha not in seen:
                    seen.add(commit.sha)
                    unique.append(commit)
        logging.info(f"Unique commits found: {len(unique)}")

        detailed = [self.__detailed(owner, repo, c) for c in unique[:DETAIL_LIMIT]]
        commits = tuple(detailed + unique[DETAIL_LIMIT:])

        return RepositoryData(owner=owner, repo=repo, commits=commits, branches=branches)
