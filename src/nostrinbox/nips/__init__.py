"""Nostr Implementation Possibilities -- protocol-specific parse and fetch logic.

Depends on [nostrinbox.models][nostrinbox.models], [nostrinbox.utils][nostrinbox.utils]
and the exception types in [nostrinbox.core.exceptions][nostrinbox.core.exceptions].

Attributes:
    Profile: NIP-01 kind-0 profile metadata, parsed leniently.
    Nip05Result: NIP-05 ``nostr.json`` directory document.
    Nip05Directory: Memoized directory loader with the two-path fallback.
    fetch_nip05: One-shot directory fetch; never raises, returns ``None``
        on failure.
"""

from nostrinbox.nips.base import BaseData
from nostrinbox.nips.nip01 import Profile
from nostrinbox.nips.nip05 import WELL_KNOWN_PATHS, Nip05Directory, Nip05Result, fetch_nip05
from nostrinbox.nips.parsing import FieldSpec, parse_fields


__all__ = [
    "WELL_KNOWN_PATHS",
    "BaseData",
    "FieldSpec",
    "Nip05Directory",
    "Nip05Result",
    "Profile",
    "fetch_nip05",
    "parse_fields",
]
