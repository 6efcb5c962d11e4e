"""Normalized records returned by the analyst operations.

Every record is an immutable pydantic model created fresh per call.
Attributes are snake_case in Python and camelCase on the wire
(``website_url`` -> ``websiteUrl``, ``change_24h`` -> ``change24h``).
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


def wire_name(field_name: str) -> str:
    """Translate a snake_case attribute into its camelCase wire name.

    Digits stay lower-case so ``change_24h`` becomes ``change24h``.
    """
    head, *rest = field_name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class Record(BaseModel):
    """Base for all normalized records."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=wire_name,
        populate_by_name=True,
    )


# ---------------------------------------------------------------------------
# Provider records
# ---------------------------------------------------------------------------


class ProjectInfo(Record):
    """Descriptive metadata for a Web3 project."""

    name: str
    symbol: str
    description: str
    category: str
    website_url: str
    twitter_handle: str
    github_repo: str
    last_updated: datetime

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, value: str) -> str:
        return value.upper()


class PriceData(Record):
    """Current USD market data for one asset."""

    symbol: str
    price: float = Field(gt=0.0)
    change_24h: float
    market_cap: float = Field(ge=0.0)
    volume_24h: float = Field(ge=0.0)
    last_updated: datetime

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, value: str) -> str:
        return value.upper()


class NewsItem(Record):
    """A news article about a project or topic."""

    title: str
    url: str
    source: str
    published_at: datetime
    summary: str


class OnChainData(Record):
    """24-hour on-chain activity metrics."""

    active_addresses_24h: int = Field(ge=0)
    transactions_24h: int = Field(ge=0)
    total_value_locked: float = Field(ge=0.0)
    gas_used_24h: int = Field(ge=0)
    last_updated: datetime


class Contributor(Record):
    """A repository contributor and their commit count."""

    username: str
    contributions: int = Field(ge=0)


class GitHubActivity(Record):
    """Repository popularity and recent development activity."""

    stars: int = Field(ge=0)
    forks: int = Field(ge=0)
    open_issues: int = Field(ge=0)
    last_updated: datetime
    weekly_commit_activity: list[int] = Field(min_length=8, max_length=8)
    top_contributors: list[Contributor] = Field(max_length=5)


class RepositorySummary(Record):
    """A repository search hit."""

    full_name: str
    description: str
    url: str
    stars: int = Field(ge=0)
    language: str
    updated_at: datetime


class SocialPost(Record):
    """A social media post matching a search query."""

    author: str
    text: str
    url: str
    likes: int = Field(ge=0)
    reposts: int = Field(ge=0)
    posted_at: datetime


# ---------------------------------------------------------------------------
# Aggregated results
# ---------------------------------------------------------------------------


class ResearchReport(Record):
    """Narrative research report assembled from five fetches."""

    project_name: str
    overview: str
    market_analysis: str
    technical_insights: str
    community_activity: str
    risk_factors: str
    conclusion: str
    generated_at: datetime


class ProjectMetrics(Record):
    """One row of a multi-project comparison."""

    name: str
    symbol: str
    category: str
    price: float
    change_24h: float
    market_cap: float
    active_addresses: int
    transactions: int
    total_value_locked: float


class ComparisonResult(Record):
    """Per-project metrics plus per-metric rank tables."""

    projects: list[ProjectMetrics]
    rankings: dict[str, dict[str, int]]
    generated_at: datetime


class PortfolioAsset(Record):
    """A holding submitted for portfolio analysis."""

    symbol: str = Field(min_length=1)
    amount: float = Field(ge=0.0)


class PortfolioPosition(Record):
    """A valued holding.

    ``allocation`` is ``None`` when the portfolio's total value is zero.
    """

    symbol: str
    amount: float
    price: float
    value: float
    allocation: float | None
    change_24h: float


class PortfolioResult(Record):
    """Valued holdings with portfolio-level 24h change."""

    assets: list[PortfolioPosition]
    total_value: float
    total_change_24h: float
    percent_change_24h: float | None
    analyzed_at: datetime


class DailySentiment(Record):
    day: date
    score: float


class TagWeight(Record):
    tag: str
    weight: int


class SentimentResult(Record):
    """Social sentiment summary for a project."""

    project_name: str
    overall_sentiment: str
    sentiment_score: float
    tweet_volume: int
    daily_sentiment_trend: list[DailySentiment]
    top_positive_tags: list[TagWeight]
    top_negative_tags: list[TagWeight]
    analysis_date: datetime


class UpcomingEvent(Record):
    """A scheduled ecosystem event."""

    name: str
    category: str
    start_date: date
    end_date: date
    location: str
    url: str
    description: str
