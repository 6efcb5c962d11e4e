"""Facade exposing the twelve analyst operations.

``Web3Analyst`` wires providers, the fallback synthesizer, the fetcher and
the aggregator from a ``Settings`` instance and owns the shared
``httpx.AsyncClient``. Use it as an async context manager so the client
is closed on shutdown::

    async with Web3Analyst(settings) as analyst:
        report = await analyst.generate_research_report("ethereum")
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Any

import httpx
import structlog

from web3_analyst.aggregator import DEFAULT_SEARCH_SOURCES, Aggregator
from web3_analyst.events import ALL_CATEGORIES, get_upcoming_events
from web3_analyst.fallback import FallbackSynthesizer
from web3_analyst.fetcher import Fetcher
from web3_analyst.models import utcnow
from web3_analyst.providers import (
    ChainExplorerProvider,
    CoinGeckoProvider,
    GitHubProvider,
    WebsiteProvider,
)
from web3_analyst.sentiment import analyze_social_sentiment

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from web3_analyst.config import Settings
    from web3_analyst.logging import FetchObserver
    from web3_analyst.models import (
        Clock,
        ComparisonResult,
        GitHubActivity,
        NewsItem,
        OnChainData,
        PortfolioAsset,
        PortfolioResult,
        PriceData,
        ProjectInfo,
        ResearchReport,
        SentimentResult,
        UpcomingEvent,
    )

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class Web3Analyst:
    """Entry point for every exposed operation."""

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        rng: random.Random | None = None,
        observer: FetchObserver | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.http.timeout),
            follow_redirects=True,
        )
        self._rng = rng or random.Random(settings.fallback.seed)
        self._clock = clock

        user_agent = settings.http.user_agent
        self._fetcher = Fetcher(
            coingecko=CoinGeckoProvider(
                self._client,
                api_key=settings.coingecko.api_key.get_secret_value(),
                user_agent=user_agent,
                base_url=settings.coingecko.base_url,
                clock=clock,
            ),
            github=GitHubProvider(
                self._client,
                token=settings.github.token.get_secret_value(),
                user_agent=user_agent,
                base_url=settings.github.base_url,
                clock=clock,
            ),
            explorer=ChainExplorerProvider(
                self._client,
                user_agent=user_agent,
                base_url=settings.explorer.base_url,
                clock=clock,
            ),
            website=WebsiteProvider(
                self._client,
                user_agent=user_agent,
                max_chars=settings.website.max_chars,
            ),
            synthesizer=FallbackSynthesizer(self._rng, clock),
            observer=observer,
        )
        self._aggregator = Aggregator(self._fetcher, self._rng, clock)

    async def __aenter__(self) -> Web3Analyst:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    # -- single-provider lookups ---------------------------------------------

    async def get_project_info(self, project_identifier: str) -> ProjectInfo:
        return await self._fetcher.project_info(project_identifier)

    async def get_price_data(self, symbol: str) -> PriceData:
        return await self._fetcher.price_data(symbol)

    async def get_latest_news(self, topic: str, limit: int = 5) -> list[NewsItem]:
        return await self._fetcher.news(topic, limit)

    async def get_on_chain_data(self, project_name: str) -> OnChainData:
        return await self._fetcher.onchain(project_name)

    async def scrape_project_website(self, website_url: str) -> str:
        return await self._fetcher.website(website_url)

    async def get_github_activity(
        self, repo_owner: str, repo_name: str
    ) -> GitHubActivity:
        return await self._fetcher.github_activity(repo_owner, repo_name)

    # -- composite operations ------------------------------------------------

    async def generate_research_report(self, project_name: str) -> ResearchReport:
        return await self._aggregator.generate_research_report(project_name)

    async def compare_projects(self, project_names: Sequence[str]) -> ComparisonResult:
        return await self._aggregator.compare_projects(project_names)

    async def analyze_portfolio(
        self, assets: Sequence[PortfolioAsset]
    ) -> PortfolioResult:
        return await self._aggregator.analyze_portfolio(assets)

    async def search_web3_info(
        self,
        query: str,
        sources: Sequence[str] = DEFAULT_SEARCH_SOURCES,
    ) -> dict[str, Any]:
        return await self._aggregator.search_web3_info(query, sources)

    # -- synthetic generators ------------------------------------------------

    async def analyze_social_sentiment(self, project_name: str) -> SentimentResult:
        return analyze_social_sentiment(project_name, self._rng, self._clock)

    async def get_upcoming_events(
        self, category: str = ALL_CATEGORIES, limit: int = 10
    ) -> list[UpcomingEvent]:
        return get_upcoming_events(category, limit, self._clock)
