"""
Mutable monitor configuration and its JSON persistence.
"""
from __future__ import annotations

import json
import logging
import os
import shutil
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from socials.config import SOURCES, settings
from socials.errors import (
    InvalidValueError,
    SettingsFormatError,
    SettingsNotFoundError,
    SettingsWriteError,
    UnknownSourceError,
)
from socials.keywords import KeywordStore
from socials.schemas import SettingsFile

logger = logging.getLogger(__name__)

IntervalListener = Callable[[int], None]


@dataclass
class Configuration:
    """The single in-memory configuration shared by every component."""

    keywords: KeywordStore = field(default_factory=KeywordStore)
    limits: Dict[str, int] = field(default_factory=dict)
    global_limit: int = field(default_factory=lambda: settings.DEFAULT_RESULT_LIMIT)
    fetch_interval_minutes: int = field(
        default_factory=lambda: settings.DEFAULT_FETCH_INTERVAL_MINUTES
    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted settings file layout."""
        return {
            "keywords": self.keywords.snapshot(),
            "limits": {source: self.limits[source] for source in SOURCES if source in self.limits},
            "globalResultLimit": self.global_limit,
            "fetchIntervalMinutes": self.fetch_interval_minutes,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Configuration":
        """
        Build a configuration from parsed settings JSON.

        Raises:
            SettingsFormatError: If required fields are missing or invalid
        """
        if not isinstance(data, dict):
            raise SettingsFormatError("Invalid or corrupt settings file: expected a JSON object")
        try:
            parsed = SettingsFile.model_validate(data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise SettingsFormatError(f"Invalid or corrupt settings file: {problems}") from e

        limits = {}
        for source, value in parsed.limits.items():
            if source not in SOURCES:
                logger.warning("Ignoring limit for unknown source %r", source)
                continue
            limits[source] = value

        return cls(
            keywords=KeywordStore(parsed.keywords.model_dump()),
            limits=limits,
            global_limit=parsed.globalResultLimit,
            fetch_interval_minutes=parsed.fetchIntervalMinutes,
        )


def _check_source(source: str) -> str:
    if source not in SOURCES:
        raise UnknownSourceError(source)
    return source


class SettingsManager:
    """Owns the Configuration; every mutation goes through here."""

    def __init__(
        self,
        config: Optional[Configuration] = None,
        default_file: Optional[str] = None,
        settings_dir: Optional[str] = None,
        extension: Optional[str] = None,
    ):
        self.config = config or Configuration()
        self.settings_dir = os.path.abspath(settings_dir or settings.SETTINGS_DIR)
        self.default_file = self._path(default_file or settings.SETTINGS_FILE)
        self.extension = extension or settings.SETTINGS_EXTENSION
        self._interval_listeners: List[IntervalListener] = []

    def _path(self, filename: str) -> str:
        if os.path.isabs(filename):
            return filename
        return os.path.join(self.settings_dir, filename)

    # -- listeners -----------------------------------------------------

    def on_interval_change(self, listener: IntervalListener) -> None:
        self._interval_listeners.append(listener)

    def _notify_interval(self) -> None:
        for listener in self._interval_listeners:
            listener(self.config.fetch_interval_minutes)

    # -- mutators ------------------------------------------------------

    def add_keyword(self, scope: Optional[str], keyword: str) -> bool:
        return self.config.keywords.add(scope, keyword)

    def remove_keyword(self, scope: Optional[str], keyword: str) -> bool:
        return self.config.keywords.remove(scope, keyword)

    def set_limit(self, source: str, limit: int) -> None:
        _check_source(source)
        if limit < 0:
            raise InvalidValueError("Invalid limit. Use a number or \"default\". Ex: ~hn 5")
        self.config.limits[source] = limit

    def clear_limit(self, source: str) -> None:
        self.config.limits.pop(_check_source(source), None)

    def set_global_limit(self, limit: int) -> None:
        if limit < 0:
            raise InvalidValueError("Usage: set list <number>")
        self.config.global_limit = limit

    def set_interval(self, minutes: int) -> None:
        if minutes <= 0:
            raise InvalidValueError("Usage: set interval <minutes>")
        self.config.fetch_interval_minutes = minutes
        self._notify_interval()

    # -- persistence ---------------------------------------------------

    def resolve_filename(self, name: str) -> str:
        """
        Find the settings file a (possibly partial) name refers to.

        Args:
            name: Exact filename or a filename prefix

        Returns:
            Path of the exact file, else of the first directory entry that
            starts with ``name`` and has the settings extension

        Raises:
            SettingsNotFoundError: If nothing matches
        """
        exact = self._path(name)
        if os.path.isfile(exact):
            return exact
        try:
            entries = os.listdir(self.settings_dir)
        except OSError as e:
            raise SettingsNotFoundError(f"Error reading directory: {e}") from e
        for entry in entries:
            if entry.startswith(name) and entry.endswith(self.extension):
                return self._path(entry)
        raise SettingsNotFoundError(f"No settings file found starting with \"{name}\"")

    def load(self, filename: str) -> str:
        """
        Replace the whole configuration with a file's contents.

        Args:
            filename: Path to a settings file

        Returns:
            The path that was loaded

        Raises:
            SettingsNotFoundError: If the file does not exist
            SettingsFormatError: If it is not a valid settings file; the
                current configuration is left untouched
        """
        path = self._path(filename)
        try:
            with open(path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError as e:
            raise SettingsNotFoundError(f"Settings file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise SettingsFormatError(f"Invalid or corrupt settings file: {e}") from e
        except OSError as e:
            raise SettingsFormatError(f"Error loading state from {path}: {e}") from e

        self.config = self._adopt(Configuration.from_dict(data))
        logger.info("Loaded settings from %s", path)
        self._notify_interval()
        return path

    def _adopt(self, fresh: Configuration) -> Configuration:
        # Keep the KeywordStore instance so anything holding it sees the new keywords.
        self.config.keywords.replace(fresh.keywords.snapshot())
        fresh.keywords = self.config.keywords
        return fresh

    def load_default(self) -> bool:
        """Load the canonical file; a missing file means "start empty"."""
        try:
            self.load(self.default_file)
        except SettingsNotFoundError:
            logger.info("No default settings file at %s; starting blank", self.default_file)
            return False
        return True

    def save(self, filename: str) -> str:
        """
        Write the configuration to a file, overwriting it.

        Raises:
            SettingsWriteError: If the file cannot be written
        """
        path = self._path(filename)
        try:
            with open(path, "w", encoding="utf-8") as handle:
                json.dump(self.config.to_dict(), handle, indent=2)
        except OSError as e:
            raise SettingsWriteError(f"Error saving state to {path}: {e}") from e
        logger.debug("Saved settings to %s", path)
        return path

    def autosave(self) -> str:
        return self.save(self.default_file)

    def set_default(self, filename: str) -> str:
        """
        Copy a settings file onto the canonical file, byte for byte.

        Raises:
            SettingsNotFoundError: If the source file does not exist
            SettingsWriteError: If the copy fails
        """
        source = self._path(filename)
        try:
            shutil.copyfile(source, self.default_file)
        except FileNotFoundError as e:
            raise SettingsNotFoundError(f"Error setting default: {source} not found") from e
        except shutil.SameFileError:
            return self.default_file
        except OSError as e:
            raise SettingsWriteError(f"Error setting default: {e}") from e
        logger.info("Promoted %s to default settings", source)
        return self.default_file
