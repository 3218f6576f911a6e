"""
Exception types shared across the monitor.
"""
from __future__ import annotations


class SocialsError(Exception):
    """Base class for errors raised by this package."""


class SourceFetchError(SocialsError):
    """A single source adapter call failed (network or parse error)."""

    def __init__(self, source: str, keyword: str, reason: str):
        super().__init__(f"{source} fetch for {keyword!r} failed: {reason}")
        self.source = source
        self.keyword = keyword
        self.reason = reason


class SettingsError(SocialsError):
    """Base class for settings file problems."""


class SettingsNotFoundError(SettingsError):
    pass


class SettingsFormatError(SettingsError):
    pass


class SettingsWriteError(SettingsError):
    pass


class CommandError(SocialsError, ValueError):
    """Invalid user input; nothing was changed."""


class UnknownSourceError(CommandError):
    def __init__(self, source: str):
        super().__init__(f"Invalid source: {source}")
        self.source = source


class InvalidValueError(CommandError):
    pass
