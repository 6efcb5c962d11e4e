"""Always-succeeds wrapper around provider calls.

``Fetcher.fetch(kind, *args)`` invokes the provider adapter registered for
``kind``. When the adapter raises ``UpstreamError`` the failure is reported
to the observer and the fallback synthesizer builds a record from the same
arguments, so callers always receive a structurally complete result.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any

from web3_analyst.exceptions import UpstreamError
from web3_analyst.logging import StructlogFetchObserver

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from web3_analyst.fallback import FallbackSynthesizer
    from web3_analyst.logging import FetchObserver
    from web3_analyst.models import (
        GitHubActivity,
        NewsItem,
        OnChainData,
        PriceData,
        ProjectInfo,
        RepositorySummary,
    )
    from web3_analyst.providers import (
        ChainExplorerProvider,
        CoinGeckoProvider,
        GitHubProvider,
        WebsiteProvider,
    )


class EntityKind(StrEnum):
    """Kinds of record the fetcher can resolve."""

    PROJECT_INFO = "project_info"
    PRICE_DATA = "price_data"
    NEWS = "news"
    ONCHAIN = "onchain"
    GITHUB_ACTIVITY = "github_activity"
    REPOSITORIES = "repositories"
    WEBSITE = "website"


class Fetcher:
    """Resolve one entity kind via its provider, falling back on failure."""

    def __init__(
        self,
        coingecko: CoinGeckoProvider,
        github: GitHubProvider,
        explorer: ChainExplorerProvider,
        website: WebsiteProvider,
        synthesizer: FallbackSynthesizer,
        observer: FetchObserver | None = None,
    ) -> None:
        self._synthesizer = synthesizer
        self._observer = observer or StructlogFetchObserver()
        self._routes: dict[
            EntityKind, tuple[Callable[..., Awaitable[Any]], Callable[..., Any]]
        ] = {
            EntityKind.PROJECT_INFO: (coingecko.project_info, synthesizer.project_info),
            EntityKind.PRICE_DATA: (coingecko.price_data, synthesizer.price_data),
            EntityKind.NEWS: (coingecko.news, synthesizer.news),
            EntityKind.ONCHAIN: (explorer.stats, synthesizer.onchain),
            EntityKind.GITHUB_ACTIVITY: (github.activity, synthesizer.github_activity),
            EntityKind.REPOSITORIES: (
                github.search_repositories,
                synthesizer.repositories,
            ),
            EntityKind.WEBSITE: (website.page_text, synthesizer.website),
        }

    @property
    def synthesizer(self) -> FallbackSynthesizer:
        return self._synthesizer

    async def fetch(self, kind: EntityKind, *args: Any) -> Any:
        """Return the provider's record for ``args`` or a synthetic one.

        Only ``UpstreamError`` triggers the fallback; anything else is a
        programming error and propagates.
        """
        call, fallback = self._routes[kind]
        try:
            return await call(*args)
        except UpstreamError as exc:
            self._observer.upstream_failed(kind.value, args, exc)
            return fallback(*args)

    async def project_info(self, identifier: str) -> ProjectInfo:
        return await self.fetch(EntityKind.PROJECT_INFO, identifier)

    async def price_data(self, symbol: str) -> PriceData:
        return await self.fetch(EntityKind.PRICE_DATA, symbol)

    async def news(self, topic: str, limit: int = 5) -> list[NewsItem]:
        return await self.fetch(EntityKind.NEWS, topic, limit)

    async def onchain(self, project_name: str) -> OnChainData:
        return await self.fetch(EntityKind.ONCHAIN, project_name)

    async def github_activity(self, owner: str, repo: str) -> GitHubActivity:
        return await self.fetch(EntityKind.GITHUB_ACTIVITY, owner, repo)

    async def repositories(self, query: str, limit: int = 5) -> list[RepositorySummary]:
        return await self.fetch(EntityKind.REPOSITORIES, query, limit)

    async def website(self, url: str) -> str:
        return await self.fetch(EntityKind.WEBSITE, url)
