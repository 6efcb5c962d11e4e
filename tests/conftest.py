"""Shared pytest fixtures for the web3-analyst test suite."""

from __future__ import annotations

import os
import random
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pytest

from web3_analyst.analyst import Web3Analyst
from web3_analyst.config import Settings
from web3_analyst.fallback import FallbackSynthesizer

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from web3_analyst.models import Clock

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Determinism
# ---------------------------------------------------------------------------


@pytest.fixture()
def fixed_clock() -> Clock:
    """Clock frozen at ``FIXED_NOW``."""
    return lambda: FIXED_NOW


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture()
def synthesizer(rng: random.Random, fixed_clock: Clock) -> FallbackSynthesizer:
    return FallbackSynthesizer(rng, fixed_clock)


# ---------------------------------------------------------------------------
# Configuration fixture
# ---------------------------------------------------------------------------


@pytest.fixture()
def settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Settings:
    """Settings isolated from the developer's env vars and config files."""
    for key in list(os.environ):
        if key.startswith("WEB3_ANALYST_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return Settings(
        coingecko={"api_key": "test-key"},
        fallback={"seed": 42},
    )


# ---------------------------------------------------------------------------
# Analyst factory
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_analyst(
    settings: Settings, rng: random.Random, fixed_clock: Clock
) -> Callable[..., Web3Analyst]:
    """Build an analyst with a seeded rng and frozen clock.

    Use it as an async context manager so the client gets closed.
    """

    def _make(**kwargs: Any) -> Web3Analyst:
        kwargs.setdefault("rng", rng)
        kwargs.setdefault("clock", fixed_clock)
        return Web3Analyst(settings, **kwargs)

    return _make
