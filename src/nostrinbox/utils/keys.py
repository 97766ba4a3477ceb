"""Nostr key helpers for nostrinbox.

Pure functions that turn the different ways a public key shows up in
traffic into the canonical 64-character hex form, plus the environment
loader used by the default credential store.

Key conversion never raises: an input that cannot be decoded yields an
empty string and a debug log line, and callers treat ``""`` as an unknown
contact.

Warning:
    Private keys must **never** be stored in configuration files, source
    code, or logged. [load_keys_from_env][nostrinbox.utils.keys.load_keys_from_env]
    only reads them from the environment.

Examples:
    ```python
    to_hex_key("npub180cvv07tjdrrgpa0j7j7tmnyl2yr6yr7l8j4s3evf6u64th6gkwsyjh6w6")
    # '3bf0c63fcb93463407af97a5e5ee64fa883d107ef9e558472c4eb9aaaefa459d'
    key_from_tags([["e", "abc"], ["p", "3bf0..."]])
    # '3bf0...'
    ```
"""

from __future__ import annotations

import logging
import os
import re
from typing import TYPE_CHECKING

from nostr_sdk import Keys, NostrSdkError, PublicKey

from nostrinbox.models.constants import RECIPIENT_TAG


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


logger = logging.getLogger(__name__)

ENV_PRIVATE_KEY = "PRIVATE_KEY"  # pragma: allowlist secret

_HEX_KEY_RE = re.compile(r"[0-9a-fA-F]{64}")


def is_hex_key(value: str) -> bool:
    """Return True if *value* is a 64-character hex string."""
    return isinstance(value, str) and _HEX_KEY_RE.fullmatch(value) is not None


def key_from_tags(tags: Iterable[Sequence[str]]) -> str | None:
    """Return the value of the first ``p`` tag, or ``None`` if there is none.

    Tags with the ``p`` name but no value are skipped.
    """
    for tag in tags:
        if len(tag) >= 2 and tag[0] == RECIPIENT_TAG and tag[1]:  # noqa: PLR2004
            return tag[1]
    return None


def to_hex_key(name_or_key: str) -> str:
    """Convert a hex or bech32-encoded public key to hex.

    Hex input is returned verbatim. Anything else is decoded with
    ``nostr_sdk.PublicKey.parse`` (``npub1...``, ``nprofile1...`` and
    ``nostr:`` URIs).

    Returns:
        The hex public key, or ``""`` if *name_or_key* cannot be decoded.
    """
    if not name_or_key or not isinstance(name_or_key, str):
        return ""
    if is_hex_key(name_or_key):
        return name_or_key
    try:
        return PublicKey.parse(name_or_key).to_hex()
    except NostrSdkError as e:
        logger.debug("hex_key_conversion_failed value=%s error=%s", name_or_key, e)
        return ""


def to_npub(hex_key: str) -> str:
    """Encode a hex public key as ``npub1...``; ``""`` if it is not a valid key."""
    if not is_hex_key(hex_key):
        return ""
    try:
        return PublicKey.parse(hex_key).to_bech32()
    except NostrSdkError as e:
        logger.debug("npub_encoding_failed value=%s error=%s", hex_key, e)
        return ""


def load_keys_from_env(env_var: str = ENV_PRIVATE_KEY) -> Keys | None:
    """Load Nostr keys from an environment variable.

    Parses a private key (nsec1 bech32 or 64-char hex).

    Args:
        env_var: Name of the environment variable containing the private key.

    Returns:
        A ``nostr_sdk.Keys`` instance, or ``None`` if the variable is unset
        or empty.

    Raises:
        nostr_sdk.NostrSdkError: If the key value is malformed.
    """
    value = os.getenv(env_var)
    if not value:
        return None
    return Keys.parse(value)
