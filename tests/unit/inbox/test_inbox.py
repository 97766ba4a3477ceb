"""
Unit tests for inbox.inbox module.

Tests:
- Inbox construction (defaults, from_dict, from_yaml)
- Lifecycle (start, close, async context manager)
- handle_event() routing per subscription channel
- contacts(), profile(), filters(), profile_filter()
- make_unread_status()
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from nostr_sdk import Keys

from nostrinbox.core.exceptions import ConfigurationError
from nostrinbox.inbox import profile_cache as profile_cache_module
from nostrinbox.inbox.configs import InboxConfig
from nostrinbox.inbox.inbox import Inbox, make_unread_status
from nostrinbox.inbox.notifications import UnreadStatus
from nostrinbox.inbox.profile_cache import ProfileCache, get_profile_cache
from nostrinbox.inbox.session import PublicKeyResolver
from nostrinbox.models import SubscriptionChannel
from nostrinbox.nips.nip05 import Nip05Directory


ALICE_HEX = "3bf0c63fcb93463407af97a5e5ee64fa883d107ef9e558472c4eb9aaaefa459d"
ALICE_NPUB = "npub180cvv07tjdrrgpa0j7j7tmnyl2yr6yr7l8j4s3evf6u64th6gkwsyjh6w6"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def keys():
    return Keys.generate()


@pytest.fixture
def me(keys):
    return keys.public_key().to_hex()


@pytest.fixture
def bob():
    return Keys.generate().public_key().to_hex()


@pytest.fixture
def resolver(keys):
    store = MagicMock()
    store.load = AsyncMock(return_value=keys)
    store.generate = AsyncMock()
    return PublicKeyResolver(store)


@pytest.fixture
def failing_resolver():
    store = MagicMock()
    store.load = AsyncMock(side_effect=OSError("unavailable"))
    store.generate = AsyncMock()
    return PublicKeyResolver(store)


@pytest.fixture
def directory():
    directory = MagicMock(spec=Nip05Directory)
    directory.load = AsyncMock()
    directory.well_known_names.return_value = {"alice@example.com": ALICE_NPUB}
    return directory


@pytest.fixture
def inbox(resolver, directory, cache):
    return Inbox(resolver=resolver, login_time=50, cache=cache, directory=directory)


# =============================================================================
# Construction Tests
# =============================================================================


class TestInboxInit:
    """Inbox construction."""

    def test_defaults(self):
        inbox = Inbox()

        assert inbox.config == InboxConfig()
        assert inbox.public_key == ""
        assert inbox.seen_event_ids == frozenset()
        assert inbox.well_known_names == {}

    def test_shared_cache_by_default(self):
        assert Inbox().profile_cache is get_profile_cache()

    def test_private_cache_uses_configured_ttl(self):
        inbox = Inbox(InboxConfig(shared_profile_cache=False, profile_ttl=120))

        assert inbox.profile_cache is not get_profile_cache()
        assert inbox.profile_cache.ttl == 120

    def test_explicit_cache(self, cache):
        assert Inbox(cache=cache).profile_cache is cache

    def test_login_time_defaults_to_now(self, monkeypatch):
        monkeypatch.setattr("nostrinbox.inbox.inbox.time.time", lambda: 1234.9)
        assert Inbox().login_time == 1234

    def test_seen_event_ids(self):
        inbox = Inbox(seen_event_ids=["a", "b"])
        assert inbox.seen_event_ids == frozenset({"a", "b"})

    def test_directory_built_from_config(self):
        inbox = Inbox(InboxConfig(directory_url="https://example.com/"))
        assert isinstance(inbox._directory, Nip05Directory)
        assert inbox._directory._base_url == "https://example.com"

    def test_no_directory_without_url(self):
        assert Inbox()._directory is None


class TestInboxFactories:
    """from_dict() and from_yaml()."""

    def test_from_dict(self):
        inbox = Inbox.from_dict({"title": "Inbox", "profile_ttl": 60}, login_time=7)

        assert inbox.config.title == "Inbox"
        assert inbox.config.profile_ttl == 60
        assert inbox.login_time == 7

    def test_from_dict_invalid(self):
        with pytest.raises(ConfigurationError, match="Invalid inbox configuration"):
            Inbox.from_dict({"profile_ttl": 0})

    def test_from_dict_bad_url(self):
        with pytest.raises(ConfigurationError):
            Inbox.from_dict({"directory_url": "ftp://example.com"})

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "inbox.yaml"
        path.write_text("title: Chat\nnip05:\n  timeout: 5.0\n")

        inbox = Inbox.from_yaml(path)

        assert inbox.config.title == "Chat"
        assert inbox.config.nip05.timeout == 5.0

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Inbox.from_yaml(tmp_path / "missing.yaml")


# =============================================================================
# Lifecycle Tests
# =============================================================================


class TestInboxLifecycle:
    """start(), close() and the async context manager."""

    async def test_start_resolves_key(self, inbox, me, directory):
        assert await inbox.start() == me
        assert inbox.public_key == me
        directory.load.assert_awaited_once()

    async def test_start_failure_yields_empty_key(self, failing_resolver, cache):
        inbox = Inbox(resolver=failing_resolver, cache=cache)

        assert await inbox.start() == ""
        assert inbox.filters() == {}
        assert inbox.contacts().contact_keys == ()

    async def test_context_manager(self, inbox, bob, make_event):
        async with inbox as active:
            assert active is inbox
            active.handle_event(SubscriptionChannel.RECEIVED, make_event("a", bob, 100))
            assert len(active.contacts().events) == 1

        assert inbox.contacts().events == ()

    async def test_close_keeps_shared_cache(self, resolver, bob):
        inbox = Inbox(resolver=resolver)
        await inbox.start()
        get_profile_cache().ingest(bob, '{"name": "bob"}')

        inbox.close()

        assert bob in get_profile_cache()

    async def test_close_clears_private_cache(self, resolver, bob):
        inbox = Inbox(InboxConfig(shared_profile_cache=False), resolver=resolver)
        await inbox.start()
        inbox.profile_cache.ingest(bob, '{"name": "bob"}')

        inbox.close()

        assert bob not in inbox.profile_cache


# =============================================================================
# Event Routing Tests
# =============================================================================


class TestInboxHandleEvent:
    """handle_event() routing."""

    async def test_received_and_sent(self, inbox, me, bob, make_event):
        await inbox.start()

        assert inbox.handle_event(SubscriptionChannel.RECEIVED, make_event("a", bob, 100)) is True
        assert inbox.handle_event("sent", make_event("b", me, 200, [["p", bob]])) is True

        contacts = inbox.contacts()
        assert contacts.contact_keys == (ALICE_HEX, bob)
        assert contacts.last_event(bob).id == "b"
        assert [e.id for e in contacts.unread_events] == ["a"]

    async def test_duplicate_event(self, inbox, bob, make_event):
        await inbox.start()
        event = make_event("a", bob, 100)

        inbox.handle_event(SubscriptionChannel.RECEIVED, event)
        assert inbox.handle_event(SubscriptionChannel.RECEIVED, event) is False

    def test_messages_before_start_dropped(self, inbox, bob, make_event):
        assert inbox.handle_event(SubscriptionChannel.RECEIVED, make_event("a", bob, 100)) is False
        assert inbox.contacts().events == ()

    def test_metadata_before_start(self, inbox, bob, make_event):
        event = make_event("m", bob, 1, kind=0, content='{"name": "bob"}')

        assert inbox.handle_event(SubscriptionChannel.METADATA, event) is True
        assert inbox.profile(bob).name == "bob"

    def test_malformed_metadata(self, inbox, bob, make_event):
        event = make_event("m", bob, 1, kind=0, content="{not json")

        assert inbox.handle_event(SubscriptionChannel.METADATA, event) is False
        assert inbox.profile(bob).is_default

    def test_unknown_channel(self, inbox, bob, make_event):
        with pytest.raises(ValueError):
            inbox.handle_event("global", make_event("a", bob, 1))

    async def test_handle_nostr_event(self, inbox):
        await inbox.start()
        other = Keys.generate()
        nostr_event = MagicMock()
        nostr_event.id.return_value.to_hex.return_value = "e" * 64
        nostr_event.author.return_value.to_hex.return_value = other.public_key().to_hex()
        nostr_event.created_at.return_value.as_secs.return_value = 100
        nostr_event.kind.return_value.as_u16.return_value = 4
        nostr_event.tags.return_value.to_vec.return_value = []
        nostr_event.content.return_value = "ciphertext"

        assert inbox.handle_nostr_event(SubscriptionChannel.RECEIVED, nostr_event) is True
        assert inbox.contacts().contact_keys[-1] == other.public_key().to_hex()


# =============================================================================
# Derived State Tests
# =============================================================================


class TestInboxDerivedState:
    """contacts(), mark_seen(), login_time and profiles."""

    async def test_mark_seen(self, inbox, bob, make_event):
        await inbox.start()
        inbox.handle_event(SubscriptionChannel.RECEIVED, make_event("a", bob, 100))

        inbox.mark_seen(e.id for e in inbox.contacts().unread_events)

        assert inbox.contacts().unread_count == 0
        assert inbox.seen_event_ids == frozenset({"a"})

    async def test_login_time_setter(self, inbox, bob, make_event):
        await inbox.start()
        inbox.handle_event(SubscriptionChannel.RECEIVED, make_event("a", bob, 100))

        inbox.login_time = 100

        assert inbox.contacts().unread_count == 0

    async def test_well_known_contact_listed(self, inbox):
        await inbox.start()

        contacts = inbox.contacts()

        assert contacts.contact_keys == (ALICE_HEX,)
        assert contacts.last_event(ALICE_HEX) is None

    async def test_unread_status_updated(self, resolver, directory, cache, bob, make_event):
        set_title = MagicMock()
        play_sound = MagicMock()
        status = UnreadStatus("p1", "Messenger", set_title, play_sound)
        inbox = Inbox(resolver=resolver, login_time=50, cache=cache, unread_status=status)
        await inbox.start()

        inbox.handle_event(SubscriptionChannel.RECEIVED, make_event("a", bob, 100))
        inbox.contacts()

        set_title.assert_called_with("p1", "Messenger (1)")
        play_sound.assert_called_once()

    def test_profile_default(self, inbox):
        profile = inbox.profile(ALICE_HEX)
        assert profile.public_key == ALICE_HEX
        assert profile.npub == ALICE_NPUB


class TestInboxFilters:
    """Subscription filters."""

    async def test_filters(self, inbox, me):
        await inbox.start()

        filters = inbox.filters()

        assert set(filters) == {SubscriptionChannel.RECEIVED, SubscriptionChannel.SENT}
        received = json.loads(filters[SubscriptionChannel.RECEIVED].as_json())
        sent = json.loads(filters[SubscriptionChannel.SENT].as_json())
        assert received == {"kinds": [4], "#p": [me]}
        assert sent == {"kinds": [4], "authors": [me]}

    def test_filters_before_start(self, inbox):
        assert inbox.filters() == {}

    def test_profile_filter_when_uncached(self, inbox, bob):
        data = json.loads(inbox.profile_filter(bob).as_json())
        assert data == {"kinds": [0], "authors": [bob]}

    def test_profile_filter_when_cached(self, inbox, bob):
        inbox.profile_cache.ingest(bob, "{}")
        assert inbox.profile_filter(bob) is None


# =============================================================================
# make_unread_status() Tests
# =============================================================================


class TestMakeUnreadStatus:
    """make_unread_status() wiring."""

    def test_uses_config_title(self):
        set_title = MagicMock()
        status = make_unread_status(InboxConfig(title="Chat"), set_title, MagicMock())

        status.update(3)

        set_title.assert_called_once_with("messenger", "Chat (3)")

    def test_custom_process_id(self):
        set_title = MagicMock()
        status = make_unread_status(InboxConfig(), set_title, MagicMock(), process_id="win-1")

        status.update(0)

        set_title.assert_called_once_with("win-1", "Messenger")


def test_shared_cache_isolated_between_tests():
    assert profile_cache_module._profile_cache is None
    assert isinstance(get_profile_cache(), ProfileCache)
