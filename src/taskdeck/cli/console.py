# src/taskdeck/cli/console.py

from __future__ import annotations

import asyncio
import getpass
import logging
from datetime import datetime

from ..core.notifications import Notification
from ..core.state import AppState
from .commands import SHORTCUTS_HELP, CommandRegistry, ConsoleIO, cmd_new, render_task_list
from .commands import registry as command_registry

logger = logging.getLogger(__name__)

WELCOME_BANNER = """\
Todo App: organize your tasks, stay on top of your day.
  - create, edit and complete tasks
  - select several tasks and act on them at once
  - reorder tasks the way you work

Sign in with /login or create an account with /signup. /help lists all commands."""


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class StdConsoleIO:
    """Terminal IO; blocking reads run in a worker thread so the event loop keeps going."""

    async def prompt(self, text: str) -> str:
        try:
            return await asyncio.to_thread(input, text)
        except EOFError:
            return ""

    async def secret(self, text: str) -> str:
        try:
            return await asyncio.to_thread(getpass.getpass, text)
        except EOFError:
            return ""

    def emit(self, text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)


async def handle_line(
        state: AppState,
        line: str,
        io: ConsoleIO,
        registry: CommandRegistry = command_registry,
) -> str | None:
    """
    Dispatch one line of input: keyboard shortcuts first, then slash commands.
    Returns the text to print, or None when there is nothing to say.
    """
    line = line.strip()
    if not line:
        return None

    signed_in = state.session.is_authenticated and state.tasks is not None
    if signed_in and line == "n":
        return await cmd_new(state, [], io)
    if signed_in and line == "?":
        return SHORTCUTS_HELP

    reply = await registry.handle(state, line, io)
    if reply is None:
        return "Commands start with '/'. Use /help to list them."
    return reply


async def run_console(state: AppState, io: ConsoleIO | None = None) -> None:
    io = io or StdConsoleIO()
    logger.info("Console started.")

    def print_notification(notification: Notification) -> None:
        io.emit(notification.render())

    unsubscribe = state.notifications.subscribe(print_notification)

    try:
        if state.session.is_authenticated and state.tasks is not None:
            user = state.session.user
            io.emit(f"Signed in as {user.email if user else '?'}. Loading tasks...")
            await state.tasks.load_all()
            if state.tasks.last_error is not None:
                io.emit(f"Failed to load tasks: {state.tasks.last_error.message}")
            print(render_task_list(state.tasks))
        else:
            print(WELCOME_BANNER)

        while True:
            try:
                line = await asyncio.to_thread(input, ">>> ")
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break

            if line.strip().lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                reply = await handle_line(state, line, io)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is not None:
                print(reply)
    finally:
        unsubscribe()
        logger.info("Console finished.")
