"""
Session public key resolution.

At startup the inbox needs the active user's hex public key. It asks a
[CredentialStore][nostrinbox.inbox.session.CredentialStore] for existing
keys and, when there are none, for freshly generated ones. Resolution runs
once per [PublicKeyResolver][nostrinbox.inbox.session.PublicKeyResolver];
the result never changes afterwards.

Failures fail open: the resolver logs the error and returns ``""``, which
every other component treats as "no active key" (empty contacts, no unread
events). There is no retry.
"""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

from nostr_sdk import Keys, NostrSdkError

from nostrinbox.core.exceptions import KeyResolutionError
from nostrinbox.core.logger import Logger
from nostrinbox.utils.keys import ENV_PRIVATE_KEY, load_keys_from_env, to_hex_key


@runtime_checkable
class CredentialStore(Protocol):
    """Source of the local key pair."""

    async def load(self) -> Keys | None:
        """Return the stored keys, or ``None`` if there are none."""
        ...

    async def generate(self) -> Keys:
        """Create a new key pair (and persist it, if the store persists)."""
        ...


class EnvCredentialStore:
    """Credential store backed by an environment variable.

    Reads an nsec or hex private key from ``env_var``. Generated keys are
    kept in memory only; persisting them belongs to the caller.
    """

    def __init__(self, env_var: str = ENV_PRIVATE_KEY) -> None:
        self._env_var = env_var
        self._generated: Keys | None = None

    async def load(self) -> Keys | None:
        try:
            keys = load_keys_from_env(self._env_var)
        except NostrSdkError as e:
            raise KeyResolutionError(f"{self._env_var} does not hold a valid private key") from e
        return keys if keys is not None else self._generated

    async def generate(self) -> Keys:
        self._generated = Keys.generate()
        return self._generated


class PublicKeyResolver:
    """One-shot resolver for the session's hex public key.

    Concurrent callers of [resolve()][nostrinbox.inbox.session.PublicKeyResolver.resolve]
    share a single resolution.
    """

    def __init__(self, store: CredentialStore) -> None:
        self._store = store
        self._public_key: str | None = None
        self._lock = asyncio.Lock()
        self._logger = Logger("nostrinbox.session")

    @property
    def public_key(self) -> str:
        """Resolved hex key; ``""`` before resolution or after a failure."""
        return self._public_key or ""

    @property
    def resolved(self) -> bool:
        return self._public_key is not None

    async def resolve(self) -> str:
        """Resolve the public key on first call; return the cached value after."""
        async with self._lock:
            if self._public_key is None:
                self._public_key = await self._resolve_once()
            return self._public_key

    async def _resolve_once(self) -> str:
        try:
            keys = await self._store.load()
            generated = keys is None
            if keys is None:
                keys = await self._store.generate()
            public_key = to_hex_key(keys.public_key().to_hex())
        except (KeyResolutionError, NostrSdkError, OSError) as e:
            self._logger.error("public_key_resolution_failed", error=str(e))
            return ""

        if not public_key:
            self._logger.error("public_key_resolution_failed", error="empty public key")
            return ""

        self._logger.info("public_key_resolved", public_key=public_key, generated=generated)
        return public_key
