"""End-to-end tests for the Web3Analyst facade over mocked upstreams."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest
import respx

from web3_analyst.analyst import Web3Analyst
from web3_analyst.models import PortfolioAsset

if TYPE_CHECKING:
    from collections.abc import Callable

    from web3_analyst.config import Settings

COINGECKO = "https://api.coingecko.com/api/v3"


def _all_upstreams_down() -> None:
    respx.route().mock(return_value=httpx.Response(503, text="unavailable"))


class TestFallbackBehaviour:
    """Every operation completes even when all upstreams are down."""

    @pytest.mark.asyncio()
    @respx.mock
    async def test_single_provider_operations(
        self, make_analyst: Callable[..., Web3Analyst]
    ) -> None:
        _all_upstreams_down()
        async with make_analyst() as analyst:
            info = await analyst.get_project_info("Ethereum")
            price = await analyst.get_price_data("ETH")
            news = await analyst.get_latest_news("Ethereum", 3)
            onchain = await analyst.get_on_chain_data("Ethereum")
            github = await analyst.get_github_activity("ethereum", "go-ethereum")
            page = await analyst.scrape_project_website("https://ethereum.org/")

        assert info.website_url == "https://ethereum.io"
        assert price.symbol == "ETH"
        assert len(news) == 3
        assert onchain.transactions_24h >= 500_000
        assert len(github.top_contributors) == 5
        assert "Failed to scrape https://ethereum.org/" in page

    @pytest.mark.asyncio()
    @respx.mock
    async def test_repeated_project_info_has_same_shape(
        self, make_analyst: Callable[..., Web3Analyst]
    ) -> None:
        _all_upstreams_down()
        async with make_analyst() as analyst:
            first = await analyst.get_project_info("Chainlink")
            second = await analyst.get_project_info("Chainlink")

        assert first.model_dump(by_alias=True).keys() == (
            second.model_dump(by_alias=True).keys()
        )
        assert first == second

    @pytest.mark.asyncio()
    @respx.mock
    async def test_composite_operations(
        self, make_analyst: Callable[..., Web3Analyst]
    ) -> None:
        _all_upstreams_down()
        async with make_analyst() as analyst:
            report = await analyst.generate_research_report("Solana")
            comparison = await analyst.compare_projects(["Solana", "Cardano"])
            search = await analyst.search_web3_info("solana")

        assert report.project_name == "Solana"
        assert report.overview.startswith("Solana (SOL) is a Blockchain project.")
        assert set(comparison.rankings["price"]) == {"Solana", "Cardano"}
        assert sorted(comparison.rankings["price"].values()) == [1, 2]
        assert set(search) == {"news", "github", "twitter"}


class TestLiveShapes:
    @pytest.mark.asyncio()
    @respx.mock
    async def test_portfolio_with_single_btc_holding(
        self, make_analyst: Callable[..., Web3Analyst]
    ) -> None:
        respx.get(f"{COINGECKO}/coins/markets").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {
                        "current_price": 50_000,
                        "price_change_percentage_24h": 3.0,
                        "market_cap": 1e12,
                        "total_volume": 4e10,
                    }
                ],
            )
        )
        async with make_analyst() as analyst:
            result = await analyst.analyze_portfolio(
                [PortfolioAsset(symbol="BTC", amount=1)]
            )

        assert result.total_value == 50_000
        assert result.assets[0].allocation == 100
        assert result.percent_change_24h == pytest.approx(3.0)

    @pytest.mark.asyncio()
    async def test_synthetic_generators(
        self, make_analyst: Callable[..., Web3Analyst]
    ) -> None:
        async with make_analyst() as analyst:
            sentiment = await analyst.analyze_social_sentiment("Aave")
            events = await analyst.get_upcoming_events("upgrade", 5)

        assert sentiment.project_name == "Aave"
        assert len(sentiment.daily_sentiment_trend) == 7
        assert [event.category for event in events] == ["upgrade", "upgrade"]

    @pytest.mark.asyncio()
    @respx.mock
    async def test_unparseable_inputs_fall_back(
        self, make_analyst: Callable[..., Web3Analyst]
    ) -> None:
        async with make_analyst() as analyst:
            page = await analyst.scrape_project_website("http://[::1")
            info = await analyst.get_project_info("eth\x00")

        assert page.startswith("Failed to scrape http://[::1")
        assert info.name == "eth\x00"
        assert info.category == "Blockchain"
        assert respx.calls.call_count == 0


class TestPartialFailure:
    """A failing upstream only replaces its own branch with synthetic data."""

    @pytest.mark.asyncio()
    @respx.mock
    async def test_comparison_keeps_live_project_next_to_fallback(
        self, make_analyst: Callable[..., Web3Analyst]
    ) -> None:
        respx.get(f"{COINGECKO}/coins/alpha").mock(
            return_value=httpx.Response(
                200,
                json={"name": "Alpha", "symbol": "alp", "categories": ["DeFi"]},
            )
        )
        respx.get(f"{COINGECKO}/coins/markets", params={"symbols": "alp"}).mock(
            return_value=httpx.Response(
                200,
                json=[
                    {
                        "current_price": 2.5,
                        "price_change_percentage_24h": -1.5,
                        "market_cap": 5e8,
                        "total_volume": 1e7,
                    }
                ],
            )
        )
        respx.get(f"{COINGECKO}/coins/beta").mock(
            return_value=httpx.Response(500, text="boom")
        )
        _all_upstreams_down()

        async with make_analyst() as analyst:
            comparison = await analyst.compare_projects(["alpha", "beta"])

        alpha, beta = comparison.projects
        assert (alpha.name, alpha.symbol, alpha.category) == ("Alpha", "ALP", "DeFi")
        assert alpha.price == 2.5
        assert alpha.change_24h == -1.5
        assert alpha.market_cap == 5e8
        assert (beta.name, beta.category) == ("beta", "Blockchain")
        assert set(comparison.rankings["price"]) == {"Alpha", "beta"}

    @pytest.mark.asyncio()
    @respx.mock
    async def test_search_keeps_github_results_when_news_fails(
        self, make_analyst: Callable[..., Web3Analyst]
    ) -> None:
        respx.get(f"{COINGECKO}/news").mock(
            return_value=httpx.Response(500, text="boom")
        )
        respx.get("https://api.github.com/search/repositories").mock(
            return_value=httpx.Response(
                200,
                json={
                    "items": [
                        {
                            "full_name": "solana-labs/solana",
                            "description": "Web-scale blockchain",
                            "html_url": "https://github.com/solana-labs/solana",
                            "stargazers_count": 12_000,
                            "language": "Rust",
                            "updated_at": "2026-01-10T00:00:00Z",
                        }
                    ]
                },
            )
        )

        async with make_analyst() as analyst:
            results = await analyst.search_web3_info("solana", ["news", "github"])

        [repo] = results["github"]
        assert repo.full_name == "solana-labs/solana"
        assert repo.stars == 12_000
        assert results["news"]
        assert all(
            item.title == "solana Announces New Partnership with Major Tech Company"
            for item in results["news"]
        )


class TestClientOwnership:
    @pytest.mark.asyncio()
    async def test_owned_client_is_closed(self, settings: Settings) -> None:
        analyst = Web3Analyst(settings)
        async with analyst:
            pass
        assert analyst._client.is_closed

    @pytest.mark.asyncio()
    async def test_injected_client_stays_open(self, settings: Settings) -> None:
        async with httpx.AsyncClient() as client:
            async with Web3Analyst(settings, client=client):
                pass
            assert not client.is_closed
