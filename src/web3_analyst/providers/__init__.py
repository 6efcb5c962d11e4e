"""Provider adapters: one per upstream data source."""

from __future__ import annotations

from web3_analyst.providers.coingecko import CoinGeckoProvider
from web3_analyst.providers.explorer import ChainExplorerProvider
from web3_analyst.providers.github import GitHubProvider, parse_repo_url
from web3_analyst.providers.website import WebsiteProvider

__all__ = [
    "ChainExplorerProvider",
    "CoinGeckoProvider",
    "GitHubProvider",
    "WebsiteProvider",
    "parse_repo_url",
]
