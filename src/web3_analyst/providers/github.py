"""GitHub repository activity and search adapter."""

from __future__ import annotations

from datetime import datetime

import httpx
from pydantic import BaseModel, Field

from web3_analyst.exceptions import UpstreamError
from web3_analyst.models import (
    Clock,
    Contributor,
    GitHubActivity,
    RepositorySummary,
    utcnow,
)
from web3_analyst.providers.base import BaseProvider

_COMMIT_WEEKS = 8
_TOP_CONTRIBUTORS = 5


class _RepoPayload(BaseModel):
    stargazers_count: int = Field(ge=0)
    forks_count: int = Field(ge=0)
    open_issues_count: int = Field(ge=0)
    updated_at: datetime


class _CommitWeek(BaseModel):
    total: int = Field(ge=0)


class _ContributorPayload(BaseModel):
    login: str
    contributions: int = Field(ge=0)


class _SearchItem(BaseModel):
    full_name: str
    description: str | None = None
    html_url: str
    stargazers_count: int = Field(ge=0)
    language: str | None = None
    updated_at: datetime


class _SearchPayload(BaseModel):
    items: list[_SearchItem] = Field(default_factory=list)


def parse_repo_url(url: str) -> tuple[str, str]:
    """Return ``(owner, name)`` from the last two path segments of a repo URL.

    Returns empty strings when the URL has fewer than two segments.
    """
    segments = [part for part in url.rstrip("/").split("/") if part]
    if len(segments) < 2:
        return "", ""
    owner, name = segments[-2], segments[-1]
    return owner, name.removesuffix(".git")


class GitHubProvider(BaseProvider):
    """Adapter over the GitHub REST v3 API."""

    name = "github"

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str,
        user_agent: str,
        base_url: str = "https://api.github.com",
        clock: Clock = utcnow,
    ) -> None:
        super().__init__(client, user_agent, clock)
        self._token = token
        self._base_url = base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        headers = {
            **super()._headers(),
            "Accept": "application/vnd.github.v3+json",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def activity(self, owner: str, repo: str) -> GitHubActivity:
        """Fetch stars, commit cadence and top contributors for a repository.

        Issues three calls in order: repository metadata, weekly commit
        activity, and the top contributors. Any failure aborts the whole
        record.
        """
        if not owner or not repo:
            raise UpstreamError(self.name, None, "repository owner and name required")

        repo_url = f"{self._base_url}/repos/{owner}/{repo}"
        metadata = self._validate(_RepoPayload, await self._get_json(repo_url))
        weeks = self._validate(
            list[_CommitWeek],
            await self._get_json(f"{repo_url}/stats/commit_activity"),
        )
        contributors = self._validate(
            list[_ContributorPayload],
            await self._get_json(
                f"{repo_url}/contributors",
                params={"per_page": _TOP_CONTRIBUTORS},
            ),
        )

        return GitHubActivity(
            stars=metadata.stargazers_count,
            forks=metadata.forks_count,
            open_issues=metadata.open_issues_count,
            last_updated=metadata.updated_at,
            weekly_commit_activity=_last_weeks([week.total for week in weeks]),
            top_contributors=[
                Contributor(username=c.login, contributions=c.contributions)
                for c in contributors[:_TOP_CONTRIBUTORS]
            ],
        )

    async def search_repositories(
        self, query: str, limit: int = 5
    ) -> list[RepositorySummary]:
        """Search repositories by query, most starred first."""
        payload = await self._get_json(
            f"{self._base_url}/search/repositories",
            params={"q": query, "sort": "stars", "order": "desc", "per_page": limit},
        )
        result = self._validate(_SearchPayload, payload)
        return [
            RepositorySummary(
                full_name=item.full_name,
                description=item.description or "",
                url=item.html_url,
                stars=item.stargazers_count,
                language=item.language or "",
                updated_at=item.updated_at,
            )
            for item in result.items[:limit]
        ]


def _last_weeks(totals: list[int]) -> list[int]:
    recent = totals[-_COMMIT_WEEKS:]
    return [0] * (_COMMIT_WEEKS - len(recent)) + recent
