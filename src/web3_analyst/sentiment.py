"""Synthetic social sentiment summaries.

No social API is queried: daily scores, volumes and tag weights are drawn
from fixed ranges. Only the labelling rule is meaningful.
"""

from __future__ import annotations

import random
from datetime import timedelta

from web3_analyst.models import (
    Clock,
    DailySentiment,
    SentimentResult,
    TagWeight,
    utcnow,
)

TREND_DAYS = 7
POSITIVE_TAGS = ("innovation", "adoption", "partnership", "growth", "bullish")
NEGATIVE_TAGS = ("risks", "competition", "regulation", "volatility", "bugs")

# (exclusive lower bound, label), checked top-down
_LABELS: tuple[tuple[float, str], ...] = (
    (75, "Very Positive"),
    (60, "Positive"),
    (40, "Neutral"),
    (25, "Negative"),
)


def sentiment_label(score: float) -> str:
    """Map an average score on a 0-100 scale to a sentiment label."""
    for threshold, label in _LABELS:
        if score > threshold:
            return label
    return "Very Negative"


def analyze_social_sentiment(
    project_name: str,
    rng: random.Random | None = None,
    clock: Clock = utcnow,
) -> SentimentResult:
    """Produce a seven-day sentiment summary for ``project_name``."""
    rng = rng or random.Random()
    now = clock()

    scores = [rng.random() * 100 for _ in range(TREND_DAYS)]
    average = sum(scores) / len(scores)

    return SentimentResult(
        project_name=project_name,
        overall_sentiment=sentiment_label(average),
        sentiment_score=round(average, 2),
        tweet_volume=1000 + rng.randrange(9000),
        daily_sentiment_trend=[
            DailySentiment(
                day=(now - timedelta(days=TREND_DAYS - 1 - i)).date(),
                score=round(score, 2),
            )
            for i, score in enumerate(scores)
        ],
        top_positive_tags=[
            TagWeight(tag=tag, weight=60 + rng.randrange(40)) for tag in POSITIVE_TAGS
        ],
        top_negative_tags=[
            TagWeight(tag=tag, weight=20 + rng.randrange(40)) for tag in NEGATIVE_TAGS
        ],
        analysis_date=now,
    )
