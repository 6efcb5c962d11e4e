"""Tests for the CoinGecko market-data adapter."""

from __future__ import annotations

from datetime import UTC, datetime

import httpx
import pytest
import respx

from web3_analyst.exceptions import SchemaMismatchError, UpstreamError
from web3_analyst.providers import CoinGeckoProvider

BASE = "https://api.coingecko.com/api/v3"
NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)

COIN_PAYLOAD = {
    "name": "Ethereum",
    "symbol": "eth",
    "description": {"en": "E" * 400},
    "categories": ["Smart Contract Platform", "Layer 1"],
    "links": {
        "homepage": ["https://ethereum.org", ""],
        "twitter_screen_name": "ethereum",
        "repos_url": {"github": ["https://github.com/ethereum/go-ethereum"]},
    },
}


def _provider(client: httpx.AsyncClient, api_key: str = "cg-key") -> CoinGeckoProvider:
    return CoinGeckoProvider(
        client, api_key=api_key, user_agent="test-agent", clock=lambda: NOW
    )


class TestProjectInfo:
    @pytest.mark.asyncio()
    @respx.mock
    async def test_normalizes_coin_payload(self) -> None:
        route = respx.get(f"{BASE}/coins/ethereum").mock(
            return_value=httpx.Response(200, json=COIN_PAYLOAD)
        )
        async with httpx.AsyncClient() as client:
            info = await _provider(client).project_info("Ethereum")

        assert route.called
        assert info.name == "Ethereum"
        assert info.symbol == "ETH"
        assert info.description == "E" * 300 + "..."
        assert info.category == "Smart Contract Platform"
        assert info.website_url == "https://ethereum.org"
        assert info.twitter_handle == "ethereum"
        assert info.github_repo == "https://github.com/ethereum/go-ethereum"
        assert info.last_updated == NOW

    @pytest.mark.asyncio()
    @respx.mock
    async def test_sends_api_key_and_user_agent(self) -> None:
        route = respx.get(f"{BASE}/coins/bitcoin").mock(
            return_value=httpx.Response(200, json=COIN_PAYLOAD)
        )
        async with httpx.AsyncClient() as client:
            await _provider(client).project_info("bitcoin")

        headers = route.calls.last.request.headers
        assert headers["x-cg-demo-api-key"] == "cg-key"
        assert headers["User-Agent"] == "test-agent"

    @pytest.mark.asyncio()
    @respx.mock
    async def test_missing_optional_fields_use_defaults(self) -> None:
        respx.get(f"{BASE}/coins/tiny").mock(
            return_value=httpx.Response(200, json={"name": "Tiny", "symbol": "tny"})
        )
        async with httpx.AsyncClient() as client:
            info = await _provider(client).project_info("tiny")

        assert info.category == "Cryptocurrency"
        assert info.website_url == ""
        assert info.twitter_handle == ""
        assert info.github_repo == ""
        assert info.description == "..."

    @pytest.mark.asyncio()
    @respx.mock
    async def test_non_success_status_raises_upstream_error(self) -> None:
        respx.get(f"{BASE}/coins/nope").mock(
            return_value=httpx.Response(404, text="coin not found")
        )
        async with httpx.AsyncClient() as client:
            with pytest.raises(UpstreamError) as excinfo:
                await _provider(client).project_info("nope")

        assert excinfo.value.provider == "coingecko"
        assert excinfo.value.status_code == 404
        assert excinfo.value.body == "coin not found"

    @pytest.mark.asyncio()
    @respx.mock
    async def test_transport_error_raises_upstream_error(self) -> None:
        respx.get(f"{BASE}/coins/down").mock(
            side_effect=httpx.ConnectError("connection refused")
        )
        async with httpx.AsyncClient() as client:
            with pytest.raises(UpstreamError) as excinfo:
                await _provider(client).project_info("down")

        assert excinfo.value.status_code is None
        assert "connection refused" in excinfo.value.body

    @pytest.mark.asyncio()
    @respx.mock
    async def test_identifier_rejected_by_url_parser_raises_upstream_error(
        self,
    ) -> None:
        async with httpx.AsyncClient() as client:
            with pytest.raises(UpstreamError) as excinfo:
                await _provider(client).project_info("eth\x00")

        assert excinfo.value.provider == "coingecko"
        assert excinfo.value.status_code is None
        assert respx.calls.call_count == 0

    @pytest.mark.asyncio()
    @respx.mock
    async def test_invalid_json_is_schema_mismatch(self) -> None:
        respx.get(f"{BASE}/coins/html").mock(
            return_value=httpx.Response(200, text="<html>maintenance</html>")
        )
        async with httpx.AsyncClient() as client:
            with pytest.raises(SchemaMismatchError):
                await _provider(client).project_info("html")


class TestPriceData:
    @pytest.mark.asyncio()
    @respx.mock
    async def test_maps_first_market(self) -> None:
        route = respx.get(f"{BASE}/coins/markets").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {
                        "current_price": 50_000,
                        "price_change_percentage_24h": 1.5,
                        "market_cap": 9.8e11,
                        "total_volume": 2.1e10,
                    }
                ],
            )
        )
        async with httpx.AsyncClient() as client:
            price = await _provider(client).price_data("BTC")

        params = route.calls.last.request.url.params
        assert params["vs_currency"] == "usd"
        assert params["symbols"] == "btc"
        assert price.symbol == "BTC"
        assert price.price == 50_000
        assert price.change_24h == 1.5
        assert price.market_cap == 9.8e11
        assert price.volume_24h == 2.1e10
        assert price.last_updated == NOW

    @pytest.mark.asyncio()
    @respx.mock
    async def test_empty_market_list_is_schema_mismatch(self) -> None:
        respx.get(f"{BASE}/coins/markets").mock(
            return_value=httpx.Response(200, json=[])
        )
        async with httpx.AsyncClient() as client:
            with pytest.raises(SchemaMismatchError):
                await _provider(client).price_data("ZZZ")

    @pytest.mark.asyncio()
    @respx.mock
    async def test_non_positive_price_is_schema_mismatch(self) -> None:
        respx.get(f"{BASE}/coins/markets").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {
                        "current_price": 0,
                        "price_change_percentage_24h": 0,
                        "market_cap": 0,
                        "total_volume": 0,
                    }
                ],
            )
        )
        async with httpx.AsyncClient() as client:
            with pytest.raises(SchemaMismatchError):
                await _provider(client).price_data("DEAD")


class TestNews:
    @pytest.mark.asyncio()
    @respx.mock
    async def test_limits_and_normalizes_items(self) -> None:
        items = [
            {
                "title": f"Headline {i}",
                "url": f"https://news.example/{i}",
                "news_site": "The Block",
                "updated_at": "2026-01-14T08:00:00Z",
                "description": "S" * 250,
            }
            for i in range(4)
        ]
        route = respx.get(f"{BASE}/news").mock(
            return_value=httpx.Response(200, json=items)
        )
        async with httpx.AsyncClient() as client:
            news = await _provider(client).news("Ethereum", limit=2)

        assert route.calls.last.request.url.params["project"] == "ethereum"
        assert [item.title for item in news] == ["Headline 0", "Headline 1"]
        assert news[0].source == "The Block"
        assert news[0].published_at == datetime(2026, 1, 14, 8, 0, tzinfo=UTC)
        assert news[0].summary == "S" * 200 + "..."
