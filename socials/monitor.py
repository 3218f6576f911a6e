"""
Runs fetch cycles on demand and on a timer, one at a time.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Mapping, Optional, Set

from rich.markup import escape

from socials.core.pipeline import run_cycle
from socials.errors import SettingsError
from socials.models import CycleReport, CycleState
from socials.render import render_failure, render_results, render_status
from socials.settings_store import SettingsManager
from socials.sinks import OutputSink, StatusSink
from socials.sources.collector import default_fetchers
from socials.sources.common import SourceAdapter
from socials.utils import now_utc

logger = logging.getLogger(__name__)


class Monitor:
    """Owns the fetch state machine, the periodic timer and the sinks.

    A cycle request that arrives while another cycle is running is dropped,
    not queued.
    """

    def __init__(
        self,
        manager: SettingsManager,
        output: OutputSink,
        status: StatusSink,
        fetchers: Optional[Mapping[str, SourceAdapter]] = None,
    ):
        self.manager = manager
        self.output = output
        self.status = status
        self.fetchers = dict(fetchers) if fetchers is not None else default_fetchers()
        self.state = CycleState.IDLE
        self.last_report: Optional[CycleReport] = None
        self.last_fetched_at: Optional[datetime] = None
        self._timer: Optional[asyncio.Task] = None
        self._background: Set[asyncio.Task] = set()
        manager.on_interval_change(self._on_interval_change)

    @property
    def config(self):
        return self.manager.config

    def log(self, line: str) -> None:
        self.output.write(line)

    def refresh_status(self) -> None:
        self.status.update(render_status(self.state, self.config))

    async def run_cycle(self, header: Optional[str] = "Update Complete") -> Optional[CycleReport]:
        """
        Fetch, filter and render once.

        Args:
            header: Banner printed above the results, None for no banner

        Returns:
            The CycleReport, or None if a cycle was already running
        """
        if self.state is CycleState.FETCHING:
            logger.debug("Fetch requested while a cycle is running; dropped")
            return None

        self.state = CycleState.FETCHING
        self.refresh_status()
        try:
            self.log("[yellow]Checking for new items...[/yellow]")
            report = await run_cycle(self.config, self.fetchers)
            if report.nothing_to_monitor:
                self.log("No keywords to monitor. Add some with `+ \"my keyword\"`")
                return report

            for outcome in report.failed:
                self.log(render_failure(outcome))
            self.last_report = report
            self.last_fetched_at = now_utc()
            for line in render_results(report.items, header):
                self.log(line)
            return report
        except Exception:
            logger.exception("Fetch cycle failed")
            self.log("[red]Fetch cycle failed; see log for details.[/red]")
            return None
        finally:
            self.state = CycleState.IDLE
            self.refresh_status()

    def request_cycle(self, header: Optional[str] = "Update Complete") -> Optional[asyncio.Task]:
        """Start a cycle in the background; returns None if one is running."""
        if self.state is CycleState.FETCHING:
            logger.debug("Background fetch requested while a cycle is running; dropped")
            return None
        task = asyncio.create_task(self.run_cycle(header))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    # -- timer -----------------------------------------------------------

    async def _tick(self, interval_seconds: float) -> None:
        # Cycles run as background tasks so cancelling the timer never cancels a fetch.
        while True:
            await asyncio.sleep(interval_seconds)
            self.request_cycle()

    def restart_timer(self) -> None:
        """Cancel the periodic fetch and start it again from now."""
        self.cancel_timer()
        interval_seconds = self.config.fetch_interval_minutes * 60
        self._timer = asyncio.create_task(self._tick(interval_seconds))
        logger.info("Periodic fetch every %d minutes", self.config.fetch_interval_minutes)

    def cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @property
    def timer_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def _on_interval_change(self, minutes: int) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # Interval changed before the event loop started; start() schedules it.
            return
        self.restart_timer()

    # -- lifecycle ---------------------------------------------------------

    async def start(self, initial_fetch: bool = True) -> None:
        """Load the canonical settings, start the timer, run the first fetch."""
        path = escape(self.manager.default_file)
        try:
            if self.manager.load_default():
                self.log(f"[green]Successfully loaded settings from {path}[/green]")
            else:
                self.log("[yellow]No default settings file found. Starting with a blank configuration.[/yellow]")
        except SettingsError as e:
            logger.warning("Could not load default settings: %s", e)
            self.log(f"[red]{escape(str(e))}[/red]")

        if not self.timer_running:
            self.restart_timer()
        self.refresh_status()

        if initial_fetch and not self.config.keywords.is_empty():
            self.log("[yellow]Performing initial fetch based on loaded settings...[/yellow]")
            await self.run_cycle("Initial Fetch")

    async def stop(self) -> None:
        self.cancel_timer()
        pending = list(self._background)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
