"""
Command line parsing and dispatch for the interactive monitor.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from rich.markup import escape

from socials.config import SOURCES
from socials.errors import CommandError, InvalidValueError, SettingsError, UnknownSourceError
from socials.monitor import Monitor
from socials.render import HELP_LINES, render_keyword_list, render_settings_summary

logger = logging.getLogger(__name__)

# An unmatched quote inside a word ("don't") stays part of the bare token.
_TOKEN_RE = re.compile(
    r'"([^"]*)"|\'([^\']*)\'|((?:[^\s"\']|"(?![^"]*")|\'(?![^\']*\'))+)'
)
_PREFIX_ACTIONS = ("+", "-", "~")


def tokenize(line: str) -> List[str]:
    """
    Split a command line into tokens, honoring double and single quotes.

    A prefix action glued to a quoted argument (``+reddit"rust"``) yields two
    tokens.

    Args:
        line: Raw command text

    Returns:
        Tokens with the surrounding quotes removed
    """
    tokens: List[str] = []
    for match in _TOKEN_RE.finditer(line or ""):
        double, single, bare = match.groups()
        if bare is not None:
            tokens.append(bare)
        else:
            tokens.append(double if double is not None else single)
    return tokens


def parse_int(value: Optional[str]) -> Optional[int]:
    """Leading-integer parse; None when the text does not start with a number."""
    if value is None:
        return None
    match = re.match(r"\s*([+-]?\d+)", value)
    return int(match.group(1)) if match else None


@dataclass
class CommandResult:
    changed: bool = False
    exit_requested: bool = False


Handler = Callable[[List[str]], Awaitable[CommandResult]]


class CommandInterpreter:
    """Maps command lines onto settings and monitor actions."""

    def __init__(self, monitor: Monitor):
        self.monitor = monitor
        self.manager = monitor.manager
        self._handlers: Dict[str, Handler] = {
            "list": self._cmd_list,
            "set": self._cmd_set,
            "save": self._cmd_save,
            "load": self._cmd_load,
            "fetch": self._cmd_fetch,
            "clear": self._cmd_clear,
            "help": self._cmd_help,
            "exit": self._cmd_exit,
            "quit": self._cmd_exit,
        }

    def say(self, line: str) -> None:
        self.monitor.log(line)

    def ok(self, message: str) -> None:
        self.say(f"[green]{escape(message)}[/green]")

    def error(self, message: str) -> None:
        self.say(f"[red]{escape(message)}[/red]")

    async def execute(self, line: str) -> CommandResult:
        """
        Run one command line.

        State-changing commands are autosaved to the canonical settings file.
        Invalid input is reported to the output sink and changes nothing.

        Args:
            line: Raw command text

        Returns:
            CommandResult describing what happened
        """
        tokens = tokenize(line)
        if not tokens:
            return CommandResult()

        action, args = tokens[0].lower(), tokens[1:]
        try:
            if action.startswith(_PREFIX_ACTIONS):
                result = await self._prefixed(action, args)
            else:
                handler = self._handlers.get(action)
                if handler is None:
                    raise CommandError(f"Unknown command: {line.strip()}")
                result = await handler(args)
        except (CommandError, SettingsError) as e:
            self.error(str(e))
            return CommandResult()

        if result.changed:
            try:
                self.manager.autosave()
            except SettingsError as e:
                logger.error("Autosave failed: %s", e)
                self.error(str(e))
        self.monitor.refresh_status()
        return result

    # -- prefixed actions ------------------------------------------------

    def _split_prefix(self, action: str) -> Tuple[str, Optional[str]]:
        prefix, name = action[0], action[1:]
        if not name:
            return prefix, None
        if name not in SOURCES:
            raise UnknownSourceError(name)
        return prefix, name

    async def _prefixed(self, action: str, args: List[str]) -> CommandResult:
        prefix, source = self._split_prefix(action)
        if prefix == "~":
            if source is None:
                raise UnknownSourceError("")
            return self._limit(source, args)
        return self._keywords(prefix == "+", source, args)

    def _keywords(self, adding: bool, scope: Optional[str], args: List[str]) -> CommandResult:
        keywords = [kw for kw in (arg.strip() for arg in args) if kw]
        if not keywords:
            raise InvalidValueError('Usage: +/- "keyword" or +/-<source> "keyword"')
        for keyword in keywords:
            if adding:
                self.manager.add_keyword(scope, keyword)
            else:
                self.manager.remove_keyword(scope, keyword)
        self.ok("Keywords updated.")
        self.monitor.request_cycle("Fetching for new keywords...")
        return CommandResult(changed=True)

    def _limit(self, source: str, args: List[str]) -> CommandResult:
        if not args:
            for line in render_settings_summary(self.manager.config):
                self.say(line)
            return CommandResult()
        if args[0].lower() == "default":
            self.manager.clear_limit(source)
            self.ok(f"{source} limit reset to global default ({self.manager.config.global_limit}).")
            return CommandResult(changed=True)
        limit = parse_int(args[0])
        if limit is None or limit < 0:
            raise InvalidValueError('Invalid limit. Use a number or "default". Ex: ~hn 5')
        self.manager.set_limit(source, limit)
        self.ok(f"Set {source} specific result limit to {limit}.")
        return CommandResult(changed=True)

    # -- named actions ---------------------------------------------------

    async def _cmd_list(self, args: List[str]) -> CommandResult:
        for line in render_keyword_list(self.manager.config):
            self.say(line)
        return CommandResult()

    async def _cmd_set(self, args: List[str]) -> CommandResult:
        setting = args[0].lower() if args else ""
        value = args[1] if len(args) > 1 else None

        if setting == "list":
            limit = parse_int(value)
            if limit is None or limit < 0:
                raise InvalidValueError("Usage: set list <number>")
            self.manager.set_global_limit(limit)
            self.ok(f"Global result limit set to {limit}.")
            return CommandResult(changed=True)

        if setting == "interval":
            minutes = parse_int(value)
            if minutes is None or minutes <= 0:
                raise InvalidValueError("Usage: set interval <minutes>")
            self.manager.set_interval(minutes)
            self.ok(f"Fetch interval updated to {minutes} minutes.")
            return CommandResult(changed=True)

        if setting == "default":
            if not value:
                raise InvalidValueError("Usage: set default <filename.json>")
            self.manager.set_default(value)
            self.ok(f"Successfully set {value} as the new default.")
            return CommandResult()

        raise CommandError("Invalid set command. See 'help'.")

    async def _cmd_save(self, args: List[str]) -> CommandResult:
        if not args:
            raise InvalidValueError("Usage: save <filename.json>")
        path = self.manager.save(args[0])
        self.ok(f"Settings saved to {path}")
        return CommandResult()

    async def _cmd_load(self, args: List[str]) -> CommandResult:
        if not args:
            raise InvalidValueError("Usage: load <filename>")
        path = self.manager.resolve_filename(args[0])
        self.manager.load(path)
        self.ok(f"Successfully loaded settings from {path}")
        return CommandResult()

    async def _cmd_fetch(self, args: List[str]) -> CommandResult:
        if self.monitor.request_cycle() is None:
            self.say("[yellow]A fetch is already in progress.[/yellow]")
        return CommandResult()

    async def _cmd_clear(self, args: List[str]) -> CommandResult:
        self.monitor.output.clear()
        return CommandResult()

    async def _cmd_help(self, args: List[str]) -> CommandResult:
        for line in HELP_LINES:
            self.say(line)
        return CommandResult()

    async def _cmd_exit(self, args: List[str]) -> CommandResult:
        return CommandResult(exit_requested=True)
