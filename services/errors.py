"""Exceptions raised by the storage layer and startup configuration."""


class ConfigurationError(RuntimeError):
    """The process cannot start with the current settings."""


class StorageError(Exception):
    """A storage backend failed to read or write a submission."""
