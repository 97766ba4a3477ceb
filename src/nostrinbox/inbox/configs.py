"""Inbox configuration model.

Examples:
    ```yaml
    title: Messenger
    directory_url: https://example.com
    profile_ttl: 3600
    nip05:
      timeout: 10.0
    ```
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from nostrinbox.models.constants import PROFILE_CACHE_TTL_SECONDS
from nostrinbox.nips.nip05 import DEFAULT_MAX_SIZE, DEFAULT_TIMEOUT
from nostrinbox.utils.keys import ENV_PRIVATE_KEY


class Nip05Config(BaseModel):
    """NIP-05 directory fetch settings."""

    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0.0, le=120.0)
    max_size: int = Field(default=DEFAULT_MAX_SIZE, ge=1024, le=10_485_760)


class InboxConfig(BaseModel):
    """Configuration for an [Inbox][nostrinbox.inbox.inbox.Inbox].

    Attributes:
        title: Base window/process title for unread notifications.
        directory_url: Host serving the NIP-05 directory; ``None`` disables
            well-known contacts.
        profile_ttl: Lifetime of cached profiles in seconds. Only used when
            ``shared_profile_cache`` is False; the process-wide cache always
            uses the default 60 minutes.
        shared_profile_cache: Use the process-wide profile cache.
        keys_env: Environment variable holding the private key.
    """

    title: str = Field(default="Messenger", min_length=1)
    directory_url: str | None = None
    profile_ttl: float = Field(default=PROFILE_CACHE_TTL_SECONDS, ge=1.0)
    shared_profile_cache: bool = True
    keys_env: str = Field(default=ENV_PRIVATE_KEY, min_length=1)
    nip05: Nip05Config = Field(default_factory=Nip05Config)

    @field_validator("directory_url", mode="after")
    @classmethod
    def validate_directory_url(cls, v: str | None) -> str | None:
        """Require an http(s) URL when a directory is configured."""
        if v is None:
            return v
        if not v.startswith(("https://", "http://")):
            raise ValueError(f"directory_url must be an http(s) URL, got {v!r}")
        return v.rstrip("/")
