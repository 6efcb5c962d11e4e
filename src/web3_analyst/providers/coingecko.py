"""CoinGecko market-data adapter: project metadata, prices, and news."""

from __future__ import annotations

from datetime import datetime

import httpx
from pydantic import AliasChoices, BaseModel, Field

from web3_analyst.exceptions import SchemaMismatchError
from web3_analyst.models import Clock, NewsItem, PriceData, ProjectInfo, utcnow
from web3_analyst.providers.base import BaseProvider, truncate

_DESCRIPTION_LIMIT = 300
_SUMMARY_LIMIT = 200
_DEFAULT_CATEGORY = "Cryptocurrency"


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class _Description(BaseModel):
    en: str = ""


class _ReposUrl(BaseModel):
    github: list[str] = Field(default_factory=list)


class _Links(BaseModel):
    homepage: list[str] = Field(default_factory=list)
    twitter_screen_name: str | None = None
    repos_url: _ReposUrl = Field(default_factory=_ReposUrl)


class _CoinPayload(BaseModel):
    name: str
    symbol: str
    description: _Description = Field(default_factory=_Description)
    categories: list[str | None] = Field(default_factory=list)
    links: _Links = Field(default_factory=_Links)


class _MarketPayload(BaseModel):
    current_price: float = Field(gt=0.0)
    price_change_percentage_24h: float
    market_cap: float = Field(ge=0.0)
    total_volume: float = Field(ge=0.0)


class _NewsPayload(BaseModel):
    title: str
    url: str
    source: str = Field(validation_alias=AliasChoices("source", "news_site"))
    published_at: datetime = Field(
        validation_alias=AliasChoices("published_at", "updated_at")
    )
    description: str = ""


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


class CoinGeckoProvider(BaseProvider):
    """Adapter over the CoinGecko v3 REST API."""

    name = "coingecko"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        user_agent: str,
        base_url: str = "https://api.coingecko.com/api/v3",
        clock: Clock = utcnow,
    ) -> None:
        super().__init__(client, user_agent, clock)
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {
            **super()._headers(),
            "x-cg-demo-api-key": self._api_key,
            "Content-Type": "application/json",
        }

    async def project_info(self, identifier: str) -> ProjectInfo:
        """Fetch ``/coins/{id}`` and normalize it into a ProjectInfo."""
        payload = await self._get_json(f"{self._base_url}/coins/{identifier.lower()}")
        coin = self._validate(_CoinPayload, payload)

        links = coin.links
        return ProjectInfo(
            name=coin.name,
            symbol=coin.symbol,
            description=truncate(coin.description.en, _DESCRIPTION_LIMIT),
            category=next(iter(coin.categories), None) or _DEFAULT_CATEGORY,
            website_url=next(iter(links.homepage), ""),
            twitter_handle=links.twitter_screen_name or "",
            github_repo=next(iter(links.repos_url.github), ""),
            last_updated=self._clock(),
        )

    async def price_data(self, symbol: str) -> PriceData:
        """Fetch the USD market record for a ticker symbol."""
        payload = await self._get_json(
            f"{self._base_url}/coins/markets",
            params={
                "vs_currency": "usd",
                "symbols": symbol.lower(),
                "order": "market_cap_desc",
            },
        )
        markets = self._validate(list[_MarketPayload], payload)
        if not markets:
            raise SchemaMismatchError(self.name, None, f"no market data for {symbol}")

        market = markets[0]
        return PriceData(
            symbol=symbol,
            price=market.current_price,
            change_24h=market.price_change_percentage_24h,
            market_cap=market.market_cap,
            volume_24h=market.total_volume,
            last_updated=self._clock(),
        )

    async def news(self, topic: str, limit: int = 5) -> list[NewsItem]:
        """Fetch up to ``limit`` news items about ``topic``."""
        payload = await self._get_json(
            f"{self._base_url}/news", params={"project": topic.lower()}
        )
        items = self._validate(list[_NewsPayload], payload)
        return [
            NewsItem(
                title=item.title,
                url=item.url,
                source=item.source,
                published_at=item.published_at,
                summary=truncate(item.description, _SUMMARY_LIMIT),
            )
            for item in items[:limit]
        ]
