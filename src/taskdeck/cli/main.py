# src/taskdeck/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, restores the persisted session and
runs the console dashboard until /exit, EOF or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, shutdown
from ..config import get_settings
from ..logging_setup import setup_logging
from .console import run_console

logger = logging.getLogger(__name__)


async def _run() -> None:
    settings = get_settings()
    state = create_initial_state(settings=settings)
    try:
        state.session.hydrate()
        await run_console(state)
    finally:
        await shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        print()
        logger.info("KeyboardInterrupt, exiting.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
