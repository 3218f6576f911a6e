"""
Headless FastAPI front-end: drive the monitor with commands over HTTP.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from rich.text import Text

from socials.commands import CommandInterpreter
from socials.config import SOURCES, settings
from socials.monitor import Monitor
from socials.schemas import (
    CommandRequest,
    CommandResponse,
    ResultItem,
    ResultsResponse,
    StatusResponse,
)
from socials.settings_store import SettingsManager
from socials.sinks import BufferSink
from socials.utils import now_utc

logger = logging.getLogger(__name__)


def _plain(line: str) -> str:
    return Text.from_markup(line).plain


def build_monitor(manager: Optional[SettingsManager] = None, fetchers=None) -> Monitor:
    sink = BufferSink(max_lines=settings.OUTPUT_BUFFER_LINES)
    return Monitor(manager or SettingsManager(), output=sink, status=sink, fetchers=fetchers)


def create_app(monitor: Optional[Monitor] = None, initial_fetch: bool = True) -> FastAPI:
    """
    Build the API around a monitor whose sinks are in-memory buffers.

    Args:
        monitor: Monitor to expose; a default one is built when omitted
        initial_fetch: Run a fetch at startup when keywords are configured

    Returns:
        FastAPI application
    """
    monitor = monitor or build_monitor()
    sink = monitor.output
    if not isinstance(sink, BufferSink):
        raise TypeError("The HTTP front-end needs a monitor writing to a BufferSink")
    interpreter = CommandInterpreter(monitor)
    command_lock = asyncio.Lock()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await monitor.start(initial_fetch=False)
        if initial_fetch and not monitor.config.keywords.is_empty():
            monitor.request_cycle("Initial Fetch")
        logger.info("Monitor started")
        yield
        await monitor.stop()
        logger.info("Monitor stopped")

    app = FastAPI(
        title="Socials Keyword Monitor",
        version="0.1.0",
        description="Keyword monitor for Reddit, Hacker News and DuckDuckGo",
        lifespan=lifespan,
    )
    app.state.monitor = monitor

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "ok",
            "as_of": now_utc().isoformat(),
            "service": "socials-monitor",
            "state": monitor.state.value,
        }

    @app.get("/status", response_model=StatusResponse)
    async def get_status():
        config = monitor.config
        return StatusResponse(
            state=monitor.state.value,
            keywords={source: config.keywords.for_source(source) for source in SOURCES},
            limits=dict(config.limits),
            global_limit=config.global_limit,
            fetch_interval_minutes=config.fetch_interval_minutes,
        )

    @app.get("/results", response_model=ResultsResponse)
    async def get_results():
        """Items shown by the last completed fetch cycle."""
        report = monitor.last_report
        if report is None:
            return ResultsResponse(n_items=0, items=[])
        items = [
            ResultItem(
                source=matched.item.source,
                title=matched.item.title,
                link=matched.item.link,
                published_at=matched.item.published_at,
                snippet=matched.item.snippet,
                matched_keywords=matched.matched_keywords,
                highlighted_snippet=matched.highlighted_snippet,
            )
            for matched in report.items
        ]
        return ResultsResponse(
            fetched_at=monitor.last_fetched_at,
            n_items=len(items),
            failed=[f"{outcome.source}:{outcome.keyword}" for outcome in report.failed],
            items=items,
        )

    @app.get("/log")
    async def get_log(
        limit: int = Query(200, ge=1, le=5000, description="Number of most recent lines"),
        plain: bool = Query(True, description="Strip console markup"),
    ) -> List[str]:
        lines = list(sink.lines)[-limit:]
        return [_plain(line) for line in lines] if plain else lines

    @app.post("/commands", response_model=CommandResponse)
    async def post_command(request: CommandRequest):
        """Run one command line and return the lines it printed."""
        async with command_lock:
            sink.mark()
            try:
                result = await interpreter.execute(request.command)
            except Exception as e:
                logger.exception("Command %r failed", request.command)
                raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")
            lines = [_plain(line) for line in sink.since_mark()]
        return CommandResponse(
            command=request.command,
            changed=result.changed,
            exit_requested=result.exit_requested,
            lines=lines,
        )

    return app


if __name__ == "__main__":
    # For development
    import uvicorn

    uvicorn.run(create_app(), host=settings.API_HOST, port=settings.API_PORT)
