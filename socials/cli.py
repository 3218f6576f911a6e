from __future__ import annotations

import argparse
import asyncio
import sys

from socials.config import settings
from socials.settings_store import SettingsManager
from socials.utils import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="socials",
        description="Monitor Reddit, Hacker News and DuckDuckGo for keywords.",
    )
    parser.add_argument(
        "--settings",
        default=settings.SETTINGS_FILE,
        help="Canonical settings file loaded at startup and autosaved after changes",
    )
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    parser.add_argument("--log-file", default=None, help="Write log records to this file")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("tui", help="Interactive terminal monitor (default)")
    serve = subparsers.add_parser("serve", help="Headless HTTP API")
    serve.add_argument("--host", default=settings.API_HOST)
    serve.add_argument("--port", type=int, default=settings.API_PORT)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    command = args.command or "tui"

    # The terminal view owns stdout, so its log records go to a file by default.
    log_file = args.log_file or settings.LOG_FILE or ("socials.log" if command == "tui" else None)
    logger = configure_logging(args.log_level, log_file)
    manager = SettingsManager(default_file=args.settings)

    if command == "serve":
        import uvicorn

        from socials.main import build_monitor, create_app

        app = create_app(build_monitor(manager))
        uvicorn.run(app, host=args.host, port=args.port)
        return 0

    from socials.tui import run_terminal

    try:
        return asyncio.run(run_terminal(manager))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0


if __name__ == "__main__":
    sys.exit(main())
