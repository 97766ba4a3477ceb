"""
Inbox facade tying the session key, subscriptions, directory and caches together.

The caller owns the relay connections. It asks the inbox which filters to
subscribe with, pushes every delivered event into
[handle_event()][nostrinbox.inbox.inbox.Inbox.handle_event] tagged with the
subscription it came from, and reads derived state back with
[contacts()][nostrinbox.inbox.inbox.Inbox.contacts] and
[profile()][nostrinbox.inbox.inbox.Inbox.profile].

Examples:
    ```python
    inbox = Inbox.from_yaml("config/inbox.yaml")

    async with inbox:
        filters = inbox.filters()
        # subscribe with filters[SubscriptionChannel.RECEIVED] / [SENT] ...
        inbox.handle_event(SubscriptionChannel.RECEIVED, event)
        state = inbox.contacts()
        inbox.mark_seen(e.id for e in state.unread_events)
    ```
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Self

from pydantic import ValidationError

from nostrinbox.core.exceptions import ConfigurationError
from nostrinbox.core.logger import Logger
from nostrinbox.core.yaml import load_yaml
from nostrinbox.models.constants import SubscriptionChannel
from nostrinbox.models.event import Event
from nostrinbox.nips.nip05 import Nip05Directory
from nostrinbox.utils.filters import (
    metadata_filter,
    received_messages_filter,
    sent_messages_filter,
)

from .configs import InboxConfig
from .contacts import ContactAggregator, Contacts
from .notifications import UnreadStatus
from .profile_cache import ProfileCache, get_profile_cache
from .session import EnvCredentialStore, PublicKeyResolver


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path
    from types import TracebackType

    from nostr_sdk import Event as NostrEvent
    from nostr_sdk import Filter

    from nostrinbox.nips.nip01 import Profile


class Inbox:
    """Direct-message inbox for a single session.

    Args:
        config: Inbox settings; defaults to ``InboxConfig()``.
        resolver: Session key resolver; defaults to one backed by
            ``config.keys_env``.
        login_time: Session start in Unix seconds; defaults to now.
        seen_event_ids: Ids already marked read by a previous session.
        unread_status: Optional notifier updated on every
            [contacts()][nostrinbox.inbox.inbox.Inbox.contacts] call.
        cache: Profile cache override (tests, isolated sessions).
        directory: NIP-05 directory override.
    """

    def __init__(  # noqa: PLR0913
        self,
        config: InboxConfig | None = None,
        resolver: PublicKeyResolver | None = None,
        *,
        login_time: int | None = None,
        seen_event_ids: Iterable[str] = (),
        unread_status: UnreadStatus | None = None,
        cache: ProfileCache | None = None,
        directory: Nip05Directory | None = None,
    ) -> None:
        self._config = config if config is not None else InboxConfig()
        self._resolver = resolver or PublicKeyResolver(EnvCredentialStore(self._config.keys_env))
        self._login_time = login_time if login_time is not None else int(time.time())
        self._seen: set[str] = set(seen_event_ids)
        self._unread_status = unread_status
        self._logger = Logger("nostrinbox.inbox")

        self._owns_cache = cache is None and not self._config.shared_profile_cache
        if cache is not None:
            self._cache = cache
        elif self._config.shared_profile_cache:
            self._cache = get_profile_cache()
        else:
            self._cache = ProfileCache(self._config.profile_ttl)

        if directory is None and self._config.directory_url is not None:
            directory = Nip05Directory(
                self._config.directory_url,
                timeout=self._config.nip05.timeout,
                max_size=self._config.nip05.max_size,
            )
        self._directory = directory
        self._aggregator: ContactAggregator | None = None

    # -------------------------------------------------------------------------
    # Factory Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any], **kwargs: Any) -> Self:
        """Create an inbox from a configuration dictionary.

        Raises:
            ConfigurationError: If *data* does not validate as
                [InboxConfig][nostrinbox.inbox.configs.InboxConfig].
        """
        try:
            config = InboxConfig(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid inbox configuration: {e}") from e
        return cls(config=config, **kwargs)

    @classmethod
    def from_yaml(cls, config_path: str | Path, **kwargs: Any) -> Self:
        """Create an inbox from a YAML configuration file."""
        return cls.from_dict(load_yaml(config_path), **kwargs)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> str:
        """Resolve the session key and load the NIP-05 directory.

        Returns:
            The active public key (``""`` if resolution failed).
        """
        public_key = await self._resolver.resolve()
        if self._aggregator is None or self._aggregator.public_key != public_key:
            self._aggregator = ContactAggregator(public_key)

        if self._directory is not None:
            await self._directory.load()

        self._logger.info(
            "inbox_started",
            public_key=public_key or "<none>",
            well_known=len(self.well_known_names),
        )
        return public_key

    def close(self) -> None:
        """Drop buffered events and cancel profile timers owned by this inbox."""
        if self._aggregator is not None:
            self._aggregator.clear()
        if self._owns_cache:
            self._cache.clear()
        self._logger.info("inbox_closed")

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def config(self) -> InboxConfig:
        return self._config

    @property
    def public_key(self) -> str:
        return self._resolver.public_key

    @property
    def login_time(self) -> int:
        return self._login_time

    @login_time.setter
    def login_time(self, value: int) -> None:
        self._login_time = value

    @property
    def seen_event_ids(self) -> frozenset[str]:
        return frozenset(self._seen)

    @property
    def well_known_names(self) -> dict[str, str]:
        return self._directory.well_known_names() if self._directory is not None else {}

    @property
    def profile_cache(self) -> ProfileCache:
        return self._cache

    def mark_seen(self, event_ids: Iterable[str]) -> None:
        """Add *event_ids* to the seen set."""
        self._seen.update(event_ids)

    # -------------------------------------------------------------------------
    # Event Ingestion
    # -------------------------------------------------------------------------

    def handle_event(self, channel: SubscriptionChannel, event: Event) -> bool:
        """Route an event delivered by one of the inbox subscriptions.

        Returns:
            True if the event changed buffered state (a new message or an
            accepted metadata update).

        Raises:
            ValueError: If *channel* is not a subscription channel name.
        """
        channel = SubscriptionChannel(channel)
        if channel is SubscriptionChannel.METADATA:
            return self._cache.ingest_event(event) is not None

        if self._aggregator is None:
            self._logger.warning("event_before_start", channel=channel.value, event_id=event.id)
            return False

        if channel is SubscriptionChannel.RECEIVED:
            return self._aggregator.add_received(event)
        return self._aggregator.add_sent(event)

    def handle_nostr_event(self, channel: SubscriptionChannel, event: NostrEvent) -> bool:
        """Convert a ``nostr_sdk.Event`` and route it via ``handle_event``."""
        return self.handle_event(channel, Event.from_nostr_event(event))

    # -------------------------------------------------------------------------
    # Derived State
    # -------------------------------------------------------------------------

    def contacts(self) -> Contacts:
        """Recompute contacts, last events and unread events."""
        if self._aggregator is None:
            result = Contacts()
        else:
            result = self._aggregator.contacts(
                self.well_known_names, self._login_time, self._seen
            )
        if self._unread_status is not None:
            self._unread_status.update(result.unread_count)
        return result

    def profile(self, public_key: str) -> Profile:
        """Cached profile for *public_key*, or its default profile."""
        return self._cache.get_or_default(public_key)

    def filters(self) -> dict[SubscriptionChannel, Filter]:
        """Filters for the received and sent subscriptions of the active key.

        Returns an empty mapping while no public key is resolved.
        """
        public_key = self.public_key
        if not public_key:
            return {}
        return {
            SubscriptionChannel.RECEIVED: received_messages_filter(public_key),
            SubscriptionChannel.SENT: sent_messages_filter(public_key),
        }

    def profile_filter(self, public_key: str) -> Filter | None:
        """Metadata filter for *public_key*, or ``None`` while its profile is cached."""
        if public_key in self._cache:
            return None
        return metadata_filter(public_key)


def make_unread_status(
    config: InboxConfig,
    set_title: Callable[[str, str], None],
    play_sound: Callable[[], None],
    process_id: str = "messenger",
) -> UnreadStatus:
    """Build an [UnreadStatus][nostrinbox.inbox.notifications.UnreadStatus] using ``config.title``."""
    return UnreadStatus(process_id, config.title, set_title, play_sound)
