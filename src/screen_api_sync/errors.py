"""Exception types raised by screen-api-sync."""


class SyncError(Exception):
    """Base class for errors raised by the sync pipeline."""


class ConfigError(SyncError):
    """Fatal configuration problem: missing mapping file or credentials."""
