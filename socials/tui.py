"""
Interactive terminal front-end built on a rich Console.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Mapping, Optional

from rich.console import Console

from socials.commands import CommandInterpreter
from socials.monitor import Monitor
from socials.render import HELP_LINES
from socials.settings_store import SettingsManager
from socials.sinks import ConsoleSink
from socials.sources.common import SourceAdapter

logger = logging.getLogger(__name__)

try:
    import readline  # noqa: F401  (line editing and up/down history for input())
except ImportError:
    readline = None


PROMPT = "[bold blue]command>[/bold blue] "


async def _read_line(console: Console) -> Optional[str]:
    try:
        return await asyncio.to_thread(console.input, PROMPT)
    except EOFError:
        return None


async def run_terminal(
    manager: Optional[SettingsManager] = None,
    console: Optional[Console] = None,
    fetchers: Optional[Mapping[str, SourceAdapter]] = None,
) -> int:
    """
    Run the interactive monitor until ``exit``, EOF or Ctrl-C.

    Args:
        manager: Settings owner; defaults to the configured settings file
        console: Console to draw on
        fetchers: Source adapters keyed by source name

    Returns:
        Process exit code
    """
    console = console or Console(highlight=False)
    sink = ConsoleSink(console)
    monitor = Monitor(manager or SettingsManager(), output=sink, status=sink, fetchers=fetchers)
    interpreter = CommandInterpreter(monitor)

    console.rule("[bold]Socials Keyword Monitor[/bold]")
    await monitor.start(initial_fetch=False)
    for line in HELP_LINES:
        sink.write(line)
    if not monitor.config.keywords.is_empty():
        sink.write("[yellow]Performing initial fetch based on loaded settings...[/yellow]")
        monitor.request_cycle("Initial Fetch")

    try:
        while True:
            line = await _read_line(console)
            if line is None:
                break
            result = await interpreter.execute(line)
            if result.exit_requested:
                break
    finally:
        await monitor.stop()
        logger.info("Terminal session closed")
    return 0
