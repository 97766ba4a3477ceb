"""
Process-wide profile cache with a soft 60 minute TTL.

Profiles are built from kind-0 metadata events and shared by every consumer
in the process. An entry lives from the moment its metadata is ingested
until its TTL elapses; outside that window lookups fall back to the default
profile (public key only), never to stale data.

Expiry happens two ways that converge on the same state:

* **lazy** -- a lookup that finds an entry past its deadline removes it;
* **timer** -- when an asyncio loop is running, ``ingest`` schedules a
  ``call_later`` callback that removes the entry at its deadline.

Every ingest bumps the entry's *generation*. A timer only removes the entry
if the generation it was scheduled for is still current, so the timer of a
superseded ingest can never clear a newer profile.

Examples:
    ```python
    cache = get_profile_cache()
    cache.ingest(pubkey, '{"name": "bob"}')
    cache.get_or_default(pubkey).name  # 'bob'
    cache.ingest(pubkey, "not json")   # discarded, 'bob' stays
    ```
"""

from __future__ import annotations

import asyncio
import json
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from nostrinbox.core.exceptions import MetadataParseError
from nostrinbox.core.logger import Logger
from nostrinbox.models.constants import PROFILE_CACHE_TTL_SECONDS, EventKind
from nostrinbox.nips.nip01 import Profile


if TYPE_CHECKING:
    from collections.abc import Callable

    from nostrinbox.models.event import Event


@dataclass(slots=True)
class _CacheEntry:
    profile: Profile
    expires_at: float
    generation: int
    timer: asyncio.TimerHandle | None = None


def parse_metadata(payload: str | bytes | dict[str, Any]) -> dict[str, Any]:
    """Decode kind-0 content into a JSON object.

    Raises:
        MetadataParseError: If the payload is not JSON (or is nested too deeply to decode) or
            is not a JSON object.
    """
    if isinstance(payload, dict):
        return payload
    try:
        data = json.loads(payload)
    except (TypeError, ValueError, RecursionError) as e:
        raise MetadataParseError(f"metadata is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MetadataParseError(f"metadata must be a JSON object, got {type(data).__name__}")
    return data


class ProfileCache:
    """Public key to [Profile][nostrinbox.nips.nip01.Profile] cache with TTL.

    All access goes through a single ``threading.Lock``; operations are short
    and never perform I/O.

    Args:
        ttl: Entry lifetime in seconds (default 3600).
        clock: Wall-clock source in seconds. Injected in tests.
    """

    def __init__(
        self,
        ttl: float = PROFILE_CACHE_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}
        self._generation = 0
        self._lock = threading.Lock()
        self._logger = Logger("nostrinbox.profile_cache")

    @property
    def ttl(self) -> float:
        return self._ttl

    def get_or_default(self, public_key: str) -> Profile:
        """Return the cached profile, or the default profile for *public_key*."""
        with self._lock:
            entry = self._live_entry(public_key)
            if entry is not None:
                return entry.profile
        return Profile.from_metadata(public_key)

    def get(self, public_key: str) -> Profile | None:
        """Return the cached profile, or ``None`` when absent or expired."""
        with self._lock:
            entry = self._live_entry(public_key)
            return entry.profile if entry is not None else None

    def ingest(self, public_key: str, metadata_payload: str | bytes | dict[str, Any]) -> Profile | None:
        """Parse *metadata_payload* and replace the cached profile for *public_key*.

        Malformed payloads are discarded: the cache is left unchanged and
        ``None`` is returned. Nothing is raised.

        Returns:
            The newly cached profile, or ``None`` if the payload was discarded.
        """
        try:
            metadata = parse_metadata(metadata_payload)
        except MetadataParseError as e:
            self._logger.debug("profile_metadata_discarded", public_key=public_key, error=str(e))
            return None

        profile = Profile.from_metadata(public_key, metadata)

        with self._lock:
            previous = self._entries.get(public_key)
            if previous is not None and previous.timer is not None:
                previous.timer.cancel()

            self._generation += 1
            entry = _CacheEntry(
                profile=profile,
                expires_at=self._clock() + self._ttl,
                generation=self._generation,
            )
            entry.timer = self._schedule_expiry(public_key, entry.generation)
            self._entries[public_key] = entry

        self._logger.debug("profile_ingested", public_key=public_key, ttl=self._ttl)
        return profile

    def ingest_event(self, event: Event) -> Profile | None:
        """Ingest a kind-0 event; events of any other kind are ignored."""
        if event.kind != EventKind.SET_METADATA:
            return None
        return self.ingest(event.pubkey, event.content)

    def invalidate(self, public_key: str) -> None:
        """Drop the entry for *public_key* and cancel its timer."""
        with self._lock:
            entry = self._entries.pop(public_key, None)
            if entry is not None and entry.timer is not None:
                entry.timer.cancel()

    def clear(self) -> None:
        """Drop every entry and cancel all pending timers."""
        with self._lock:
            for entry in self._entries.values():
                if entry.timer is not None:
                    entry.timer.cancel()
            self._entries.clear()

    close = clear

    def generation(self, public_key: str) -> int | None:
        """Generation of the live entry for *public_key*, ``None`` if absent."""
        with self._lock:
            entry = self._live_entry(public_key)
            return entry.generation if entry is not None else None

    def __contains__(self, public_key: object) -> bool:
        if not isinstance(public_key, str):
            return False
        with self._lock:
            return self._live_entry(public_key) is not None

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for entry in self._entries.values() if entry.expires_at > now)

    # -------------------------------------------------------------------------
    # Expiry
    # -------------------------------------------------------------------------

    def _live_entry(self, public_key: str) -> _CacheEntry | None:
        """Return the unexpired entry, removing it if past its deadline. Lock held."""
        entry = self._entries.get(public_key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            if entry.timer is not None:
                entry.timer.cancel()
            del self._entries[public_key]
            self._logger.debug("profile_expired", public_key=public_key, path="lazy")
            return None
        return entry

    def _schedule_expiry(self, public_key: str, generation: int) -> asyncio.TimerHandle | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return None
        return loop.call_later(self._ttl, self._expire, public_key, generation)

    def _expire(self, public_key: str, generation: int) -> None:
        """Timer callback: remove the entry only if it is still *generation*."""
        with self._lock:
            entry = self._entries.get(public_key)
            if entry is None or entry.generation != generation:
                return
            del self._entries[public_key]
        self._logger.debug("profile_expired", public_key=public_key, path="timer")


_profile_cache: ProfileCache | None = None
_profile_cache_lock = threading.Lock()


def get_profile_cache() -> ProfileCache:
    """Return the process-wide [ProfileCache][nostrinbox.inbox.profile_cache.ProfileCache]."""
    global _profile_cache  # noqa: PLW0603
    with _profile_cache_lock:
        if _profile_cache is None:
            _profile_cache = ProfileCache()
        return _profile_cache
