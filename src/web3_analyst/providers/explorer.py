"""Chain explorer adapter for 24-hour on-chain statistics."""

from __future__ import annotations

import httpx
from pydantic import BaseModel, Field

from web3_analyst.models import Clock, OnChainData, utcnow
from web3_analyst.providers.base import BaseProvider


class _StatsPayload(BaseModel):
    active_addresses: int = Field(ge=0)
    transactions: int = Field(ge=0)
    tvl: float = Field(ge=0.0)
    gas_used: int = Field(ge=0)


class ChainExplorerProvider(BaseProvider):
    """Adapter over a ``GET {base}/{project}/stats`` explorer API."""

    name = "explorer"

    def __init__(
        self,
        client: httpx.AsyncClient,
        user_agent: str,
        base_url: str = "https://api.blockchain-explorer.com",
        clock: Clock = utcnow,
    ) -> None:
        super().__init__(client, user_agent, clock)
        self._base_url = base_url.rstrip("/")

    async def stats(self, project_name: str) -> OnChainData:
        payload = await self._get_json(
            f"{self._base_url}/{project_name.lower()}/stats"
        )
        stats = self._validate(_StatsPayload, payload)
        return OnChainData(
            active_addresses_24h=stats.active_addresses,
            transactions_24h=stats.transactions,
            total_value_locked=stats.tvl,
            gas_used_24h=stats.gas_used,
            last_updated=self._clock(),
        )
