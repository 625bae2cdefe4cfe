"""Custom exceptions for the stream client domain."""


class StreamClientError(Exception):
    """Base exception for this project."""


class ConfigError(StreamClientError):
    """Raised when runtime configuration is invalid."""


class InvalidTargetError(ConfigError):
    """Raised when a search target is empty or not domain-like."""


class TransportError(StreamClientError):
    """Raised when the discovery stream cannot be opened or read."""
