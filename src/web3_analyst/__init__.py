"""web3-analyst: MCP tools for Web3 project research and market data."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("web3-analyst-mcp")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = ["__version__"]
