"""Core layer: structured logging, the exception hierarchy, and YAML loading.

Depends on nothing inside nostrinbox except the standard library and
``PyYAML``; every other layer may import from it.

Attributes:
    Logger: Structured logger supporting key=value and JSON output modes.
        See [Logger][nostrinbox.core.logger.Logger].
    NostrInboxError: Root of the exception hierarchy.
        See [nostrinbox.core.exceptions][nostrinbox.core.exceptions].
    load_yaml: Safe YAML loading. See [load_yaml()][nostrinbox.core.yaml.load_yaml].
"""

from .exceptions import (
    ConfigurationError,
    DirectoryError,
    KeyResolutionError,
    MetadataParseError,
    NostrInboxError,
    ProtocolError,
)
from .logger import Logger, StructuredFormatter, format_kv_pairs
from .yaml import load_yaml


__all__ = [
    "ConfigurationError",
    "DirectoryError",
    "KeyResolutionError",
    "Logger",
    "MetadataParseError",
    "NostrInboxError",
    "ProtocolError",
    "StructuredFormatter",
    "format_kv_pairs",
    "load_yaml",
]
