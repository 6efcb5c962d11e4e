"""Composite operations built from several fetcher calls.

Independent fetches fan out with ``asyncio.gather`` and the aggregator
resumes only once every branch has settled. Each branch resolves through
the fetcher, which owns its own fallback, so one failing upstream never
aborts its siblings. Fetches that need a field from an earlier result
(the ticker symbol, the repository owner/name) are awaited after it.
"""

from __future__ import annotations

import asyncio
import random
from typing import TYPE_CHECKING, Any

import structlog

from web3_analyst.exceptions import UnsupportedSourceError
from web3_analyst.models import (
    ComparisonResult,
    PortfolioPosition,
    PortfolioResult,
    ProjectMetrics,
    ResearchReport,
    utcnow,
)
from web3_analyst.providers.github import parse_repo_url

if TYPE_CHECKING:
    from collections.abc import Sequence

    from web3_analyst.fetcher import Fetcher
    from web3_analyst.models import (
        Clock,
        GitHubActivity,
        NewsItem,
        OnChainData,
        PortfolioAsset,
        PriceData,
        ProjectInfo,
    )

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

REPORT_NEWS_LIMIT = 10
SEARCH_RESULT_LIMIT = 5
DEFAULT_SEARCH_SOURCES = ("news", "github", "twitter")

# Wire metric name -> ProjectMetrics attribute
COMPARISON_METRICS: dict[str, str] = {
    "price": "price",
    "change24h": "change_24h",
    "marketCap": "market_cap",
    "activeAddresses": "active_addresses",
    "transactions": "transactions",
    "totalValueLocked": "total_value_locked",
}


def rank_projects(
    projects: Sequence[ProjectMetrics],
) -> dict[str, dict[str, int]]:
    """Rank projects per metric, highest value first.

    Ties keep input order. A repeated project name keeps the rank of its
    last occurrence.
    """
    rankings: dict[str, dict[str, int]] = {}
    for metric, attribute in COMPARISON_METRICS.items():
        ordered = sorted(
            projects, key=lambda row: getattr(row, attribute), reverse=True
        )
        rankings[metric] = {row.name: rank for rank, row in enumerate(ordered, 1)}
    return rankings


class Aggregator:
    """Fold several normalized records into one derived result."""

    def __init__(
        self,
        fetcher: Fetcher,
        rng: random.Random | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._fetcher = fetcher
        self._rng = rng or random.Random()
        self._clock = clock

    # -- research report ----------------------------------------------------

    async def generate_research_report(self, project_name: str) -> ResearchReport:
        """Build a six-section narrative report for one project."""
        info = await self._fetcher.project_info(project_name)
        owner, repo = parse_repo_url(info.github_repo)

        price, news, onchain, github = await asyncio.gather(
            self._fetcher.price_data(info.symbol),
            self._fetcher.news(project_name, REPORT_NEWS_LIMIT),
            self._fetcher.onchain(project_name),
            self._fetcher.github_activity(owner, repo),
        )

        logger.info(
            "report_assembled",
            project=info.name,
            symbol=info.symbol,
            news_items=len(news),
        )
        return ResearchReport(
            project_name=info.name,
            overview=_overview(info),
            market_analysis=_market_analysis(price),
            technical_insights=_technical_insights(github, onchain),
            community_activity=_community_activity(info, news),
            risk_factors=(
                f"As with all blockchain projects, {info.name} faces challenges "
                "including regulatory uncertainty, market volatility, and "
                "technological risks. Specific considerations include competition "
                "from similar projects and the need for broader adoption."
            ),
            conclusion=(
                f"{info.name} represents a "
                f"{'promising' if self._rng.random() > 0.5 else 'developing'} "
                f"project in the {info.category} space. Its technical foundation "
                "and community support suggest potential for growth, though market "
                "conditions will play a significant role in its near-term "
                "performance."
            ),
            generated_at=self._clock(),
        )

    # -- comparison ---------------------------------------------------------

    async def compare_projects(self, project_names: Sequence[str]) -> ComparisonResult:
        """Compare projects across six market and on-chain metrics."""
        projects = await asyncio.gather(
            *(self._project_metrics(name) for name in project_names)
        )
        return ComparisonResult(
            projects=list(projects),
            rankings=rank_projects(projects),
            generated_at=self._clock(),
        )

    async def _project_metrics(self, name: str) -> ProjectMetrics:
        info = await self._fetcher.project_info(name)
        price = await self._fetcher.price_data(info.symbol)
        onchain = await self._fetcher.onchain(name)
        return ProjectMetrics(
            name=info.name,
            symbol=info.symbol,
            category=info.category,
            price=price.price,
            change_24h=price.change_24h,
            market_cap=price.market_cap,
            active_addresses=onchain.active_addresses_24h,
            transactions=onchain.transactions_24h,
            total_value_locked=onchain.total_value_locked,
        )

    # -- portfolio ----------------------------------------------------------

    async def analyze_portfolio(
        self, assets: Sequence[PortfolioAsset]
    ) -> PortfolioResult:
        """Value holdings at current prices and derive allocation and 24h change.

        Allocation and percent change are ``None`` when the total value is
        zero.
        """
        prices = await asyncio.gather(
            *(self._fetcher.price_data(asset.symbol) for asset in assets)
        )
        values = [
            asset.amount * price.price
            for asset, price in zip(assets, prices, strict=True)
        ]

        total_value = sum(values)
        total_change = sum(
            value * price.change_24h / 100
            for value, price in zip(values, prices, strict=True)
        )
        percent_change = total_change / total_value * 100 if total_value else None

        positions = [
            PortfolioPosition(
                symbol=price.symbol,
                amount=asset.amount,
                price=price.price,
                value=value,
                allocation=value / total_value * 100 if total_value else None,
                change_24h=price.change_24h,
            )
            for asset, price, value in zip(assets, prices, values, strict=True)
        ]
        return PortfolioResult(
            assets=positions,
            total_value=total_value,
            total_change_24h=total_change,
            percent_change_24h=percent_change,
            analyzed_at=self._clock(),
        )

    # -- multi-source search ------------------------------------------------

    async def search_web3_info(
        self,
        query: str,
        sources: Sequence[str] = DEFAULT_SEARCH_SOURCES,
    ) -> dict[str, Any]:
        """Search each requested source concurrently.

        Returns a mapping from source name to its result list. An unknown
        source maps to ``{"error": "Unsupported source: <name>"}`` instead of
        failing the call.
        """
        unique = list(dict.fromkeys(sources))
        results = await asyncio.gather(
            *(self._search_source(source, query) for source in unique)
        )
        return dict(zip(unique, results, strict=True))

    async def _search_source(self, source: str, query: str) -> Any:
        try:
            if source == "news":
                return await self._fetcher.news(query, SEARCH_RESULT_LIMIT)
            if source == "github":
                return await self._fetcher.repositories(query, SEARCH_RESULT_LIMIT)
            if source == "twitter":
                return self._fetcher.synthesizer.social_posts(
                    query, SEARCH_RESULT_LIMIT
                )
            raise UnsupportedSourceError(source)
        except UnsupportedSourceError as exc:
            logger.info("search_source_unsupported", source=source)
            return {"error": str(exc)}


# ---------------------------------------------------------------------------
# Report templates
# ---------------------------------------------------------------------------


def _overview(info: ProjectInfo) -> str:
    return (
        f"{info.name} ({info.symbol}) is a {info.category} project. "
        f"{info.description}"
    )


def _market_analysis(price: PriceData) -> str:
    return (
        f"Current market price is ${price.price:.2f} with a 24-hour change of "
        f"{price.change_24h:.2f}%. Market capitalization stands at "
        f"${price.market_cap / 1_000_000_000:.2f} billion with a 24-hour trading "
        f"volume of ${price.volume_24h / 1_000_000:.2f} million."
    )


def _technical_insights(github: GitHubActivity, onchain: OnChainData) -> str:
    return (
        "The project has shown significant development activity on GitHub with "
        "numerous commits in the past weeks. There are currently "
        f"{github.open_issues} open issues and {github.stars} stars. On-chain "
        f"metrics show {onchain.active_addresses_24h:,} active addresses and "
        f"{onchain.transactions_24h:,} transactions in the last 24 hours."
    )


def _community_activity(info: ProjectInfo, news: Sequence[NewsItem]) -> str:
    headlines = "; ".join(item.title for item in news[:3])
    return (
        f"Recent news highlights include: {headlines}. The project maintains an "
        f"active Twitter presence via {info.twitter_handle}."
    )
