"""Catalog of upcoming ecosystem events.

Events sit at fixed day offsets from the injected clock so the catalog
always lies in the future. The catalog is deliberately not in date order;
``get_upcoming_events`` sorts after filtering.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from web3_analyst.models import Clock, UpcomingEvent, utcnow

ALL_CATEGORIES = "all"


@dataclass(frozen=True, slots=True)
class _CatalogEntry:
    name: str
    category: str
    offset_days: int
    duration_days: int
    location: str
    url: str
    description: str


_CATALOG: tuple[_CatalogEntry, ...] = (
    _CatalogEntry(
        name="Devcon",
        category="conference",
        offset_days=45,
        duration_days=4,
        location="Bangkok, Thailand",
        url="https://devcon.org",
        description="Ethereum's flagship developer conference.",
    ),
    _CatalogEntry(
        name="ETHGlobal Hackathon",
        category="hackathon",
        offset_days=21,
        duration_days=3,
        location="San Francisco, USA",
        url="https://ethglobal.com",
        description="Weekend hackathon for Ethereum builders.",
    ),
    _CatalogEntry(
        name="Solana Breakpoint",
        category="conference",
        offset_days=12,
        duration_days=3,
        location="Singapore",
        url="https://solana.com/breakpoint",
        description="Annual Solana ecosystem conference.",
    ),
    _CatalogEntry(
        name="Ethereum Network Upgrade",
        category="upgrade",
        offset_days=60,
        duration_days=1,
        location="Mainnet",
        url="https://ethereum.org/roadmap",
        description="Scheduled hard fork activating the next protocol upgrade.",
    ),
    _CatalogEntry(
        name="Chainlink SmartCon Hackathon",
        category="hackathon",
        offset_days=7,
        duration_days=14,
        location="Online",
        url="https://chain.link/hackathon",
        description="Virtual hackathon focused on cross-chain applications.",
    ),
    _CatalogEntry(
        name="Uniswap Governance Vote",
        category="governance",
        offset_days=5,
        duration_days=7,
        location="Online",
        url="https://gov.uniswap.org",
        description="On-chain vote on protocol fee parameters.",
    ),
    _CatalogEntry(
        name="Token2049",
        category="conference",
        offset_days=30,
        duration_days=2,
        location="Dubai, UAE",
        url="https://token2049.com",
        description="Industry conference for founders and investors.",
    ),
    _CatalogEntry(
        name="Polygon Community AMA",
        category="ama",
        offset_days=3,
        duration_days=1,
        location="Twitter Spaces",
        url="https://twitter.com/0xPolygon",
        description="Open Q&A with core contributors.",
    ),
    _CatalogEntry(
        name="ETHDenver BUIDLathon",
        category="hackathon",
        offset_days=90,
        duration_days=7,
        location="Denver, USA",
        url="https://ethdenver.com",
        description="Community-run hackathon and festival.",
    ),
    _CatalogEntry(
        name="Cosmos Hub Upgrade",
        category="upgrade",
        offset_days=18,
        duration_days=1,
        location="Mainnet",
        url="https://hub.cosmos.network",
        description="Coordinated chain upgrade at a scheduled block height.",
    ),
)


def get_upcoming_events(
    category: str = ALL_CATEGORIES,
    limit: int = 10,
    clock: Clock = utcnow,
) -> list[UpcomingEvent]:
    """Return up to ``limit`` events in ``category``, soonest first.

    Category matching ignores case; ``"all"`` returns every category.
    """
    today = clock().date()
    wanted = category.strip().lower()

    entries = [
        entry
        for entry in _CATALOG
        if wanted == ALL_CATEGORIES or entry.category.lower() == wanted
    ]
    events = [
        UpcomingEvent(
            name=entry.name,
            category=entry.category,
            start_date=today + timedelta(days=entry.offset_days),
            end_date=today + timedelta(days=entry.offset_days + entry.duration_days),
            location=entry.location,
            url=entry.url,
            description=entry.description,
        )
        for entry in entries
    ]
    events.sort(key=lambda event: event.start_date)
    return events[: max(limit, 0)]
