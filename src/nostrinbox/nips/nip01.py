"""
NIP-01 kind-0 profile metadata.

A kind-0 event's content is a JSON object describing its author (name,
picture, NIP-05 identifier, lightning addresses, ...). The
[Profile][nostrinbox.nips.nip01.Profile] model is the inbox's view of that
object, keyed by public key. It is rebuilt wholesale from each metadata
event and never partially updated.

See Also:
    [ProfileCache][nostrinbox.inbox.profile_cache.ProfileCache]: Stores
        profiles with a TTL and falls back to the default profile.
"""

from __future__ import annotations

from typing import Any, ClassVar

from nostrinbox.utils.keys import to_npub

from .base import BaseData
from .parsing import FieldSpec


_SHORT_NPUB_CHARS = 12


class Profile(BaseData):
    """Profile metadata for a single public key.

    Every metadata field is optional. A profile built from the key alone
    (the *default* profile) has only ``public_key`` and ``npub`` set.

    Attributes:
        public_key: Hex public key the profile belongs to.
        npub: Bech32 ``npub1...`` encoding of ``public_key`` (``""`` if the
            key is not a valid public key).

    Examples:
        ```python
        profile = Profile.from_metadata(key, {"name": "bob", "picture": "https://..."})
        profile.display  # 'bob'
        Profile.from_metadata(key).is_default  # True
        ```
    """

    public_key: str
    npub: str = ""
    name: str | None = None
    display_name: str | None = None
    about: str | None = None
    picture: str | None = None
    banner: str | None = None
    website: str | None = None
    nip05: str | None = None
    lud06: str | None = None
    lud16: str | None = None

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec(
        str_fields=frozenset(
            {
                "name",
                "display_name",
                "about",
                "picture",
                "banner",
                "website",
                "nip05",
                "lud06",
                "lud16",
            }
        ),
        aliases=(("displayName", "display_name"), ("username", "name")),
    )

    @classmethod
    def from_metadata(cls, public_key: str, metadata: dict[str, Any] | None = None) -> Profile:
        """Build a profile from a public key and an optional kind-0 object.

        Unknown keys and values of the wrong type in *metadata* are dropped.
        """
        fields = cls.parse(metadata) if metadata else {}
        return cls(public_key=public_key, npub=to_npub(public_key), **fields)

    @property
    def is_default(self) -> bool:
        """True when no metadata field is populated."""
        return not self.model_dump(exclude_none=True, exclude={"public_key", "npub"})

    @property
    def display(self) -> str:
        """Best human-readable label: display name, name, then a shortened npub."""
        if self.display_name:
            return self.display_name
        if self.name:
            return self.name
        if self.npub:
            return f"{self.npub[:_SHORT_NPUB_CHARS]}..."
        return self.public_key
