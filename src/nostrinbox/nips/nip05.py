"""
NIP-05 well-known name directory.

A NIP-05 directory is a JSON document served by a web host mapping
human-readable names to public keys (and optionally public keys to relay
lists):

```json
{"names": {"alice": "npub1..."}, "relays": {"<hex>": ["wss://relay.example"]}}
```

The inbox treats every name in the directory as a *global contact* that
is always listed, even without any message traffic.

The document is fetched from ``{base_url}/.well-known/nostr.json``; when
that does not succeed, ``{base_url}/nostr.json`` is tried once. There is
no further retry.

Warning:
    [fetch_nip05()][nostrinbox.nips.nip05.fetch_nip05] **never raises** for
    network or decoding failures; it returns ``None``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, ClassVar

import aiohttp
from pydantic import Field

from nostrinbox.core.exceptions import DirectoryError
from nostrinbox.utils.http import read_bounded_json

from .base import BaseData
from .parsing import FieldSpec


logger = logging.getLogger(__name__)

WELL_KNOWN_PATHS: tuple[str, ...] = ("/.well-known/nostr.json", "/nostr.json")

DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_SIZE = 262_144  # 256 KB


class Nip05Result(BaseData):
    """Parsed NIP-05 directory document.

    Attributes:
        names: Name to public key (hex or bech32, as served).
        relays: Hex public key to relay URLs.
    """

    names: dict[str, str] = Field(default_factory=dict)
    relays: dict[str, list[str]] = Field(default_factory=dict)

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec(str_map_fields=frozenset({"names"}))

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        """Parse a directory document, keeping only well-typed entries."""
        result = super().parse(data)
        if not isinstance(data, dict):
            return result
        relays = data.get("relays")
        if isinstance(relays, dict):
            result["relays"] = {
                key: [url for url in urls if isinstance(url, str)]
                for key, urls in relays.items()
                if isinstance(key, str) and isinstance(urls, list)
            }
        return result


async def _fetch_document(session: aiohttp.ClientSession, url: str, max_size: int) -> Nip05Result:
    """GET one well-known URL and parse it.

    Raises:
        DirectoryError: On a non-2xx status, an oversized or non-JSON body,
            or a JSON value that is not an object.
    """
    async with session.get(url) as resp:
        if not 200 <= resp.status < 300:  # noqa: PLR2004
            raise DirectoryError(f"HTTP {resp.status}")
        try:
            data = await read_bounded_json(resp, max_size)
        except ValueError as e:
            raise DirectoryError(f"Invalid body: {e}") from e
    if not isinstance(data, dict):
        raise DirectoryError(f"Expected object, got {type(data).__name__}")
    return Nip05Result(**Nip05Result.parse(data))


async def fetch_nip05(
    base_url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
    max_size: int = DEFAULT_MAX_SIZE,
) -> Nip05Result | None:
    """Fetch a NIP-05 directory, trying the two well-known paths in order.

    Args:
        base_url: Scheme and host serving the directory (``https://example.com``).
        timeout: Total request timeout per attempt in seconds.
        max_size: Maximum response body size in bytes.

    Returns:
        The parsed directory, or ``None`` when neither path succeeds.
    """
    root = base_url.rstrip("/")
    client_timeout = aiohttp.ClientTimeout(total=timeout)

    async with aiohttp.ClientSession(timeout=client_timeout) as session:
        for path in WELL_KNOWN_PATHS:
            url = f"{root}{path}"
            try:
                result = await _fetch_document(session, url, max_size)
            except (DirectoryError, aiohttp.ClientError, TimeoutError) as e:
                logger.warning("nip05_fetch_failed url=%s error=%s", url, e)
                continue
            logger.debug("nip05_fetched url=%s names=%d", url, len(result.names))
            return result

    return None


class Nip05Directory:
    """Memoizing wrapper around [fetch_nip05()][nostrinbox.nips.nip05.fetch_nip05].

    The first successful document is kept for the lifetime of the instance.
    Until then, [well_known_names()][nostrinbox.nips.nip05.Nip05Directory.well_known_names]
    returns an empty mapping ("no result yet").
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
        max_size: int = DEFAULT_MAX_SIZE,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._max_size = max_size
        self._result: Nip05Result | None = None
        self._lock = asyncio.Lock()

    @property
    def result(self) -> Nip05Result | None:
        return self._result

    async def load(self) -> Nip05Result | None:
        """Fetch the directory unless a result is already held."""
        async with self._lock:
            if self._result is None:
                self._result = await fetch_nip05(
                    self._base_url, timeout=self._timeout, max_size=self._max_size
                )
            return self._result

    def well_known_names(self) -> dict[str, str]:
        """Name to encoded key mapping, empty before a successful load."""
        return dict(self._result.names) if self._result is not None else {}
