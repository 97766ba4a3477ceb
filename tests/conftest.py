"""
Pytest configuration and shared fixtures for nostrinbox tests.

Provides:
- A controllable wall clock for TTL tests
- An event factory
- Isolation of the process-wide profile cache
"""

import logging
from collections.abc import Callable
from typing import Any

import pytest

from nostrinbox.inbox import profile_cache as profile_cache_module
from nostrinbox.inbox.profile_cache import ProfileCache
from nostrinbox.models import Event


class FakeClock:
    """Manually advanced wall clock (seconds)."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


@pytest.fixture(autouse=True)
def _reset_shared_profile_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    """Give every test a fresh process-wide profile cache."""
    monkeypatch.setattr(profile_cache_module, "_profile_cache", None)


# ============================================================================
# Factories
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ProfileCache:
    """ProfileCache driven by the fake clock."""
    return ProfileCache(clock=clock)


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Factory for events with sensible defaults."""

    def _make(
        id: str,  # noqa: A002
        pubkey: str,
        created_at: int,
        tags: list[list[str]] | None = None,
        **kwargs: Any,
    ) -> Event:
        return Event(id=id, pubkey=pubkey, created_at=created_at, tags=tags or [], **kwargs)

    return _make
