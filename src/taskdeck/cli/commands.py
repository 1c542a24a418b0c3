# src/taskdeck/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from ..auth.session import humanize_auth_error
from ..core.errors import ApiError
from ..core.state import AppState
from ..tasks.task_models import Task, TaskCreate, TaskUpdate
from ..tasks.task_session import TaskListSession, count_label

logger = logging.getLogger(__name__)


class ConsoleIO(Protocol):
    """What command handlers may ask of the terminal."""

    def prompt(self, text: str) -> Awaitable[str]: ...
    def secret(self, text: str) -> Awaitable[str]: ...
    def emit(self, text: str) -> None: ...


CommandHandler = Callable[[AppState, list[str], ConsoleIO], Awaitable[str | None]]


@dataclass(slots=True, frozen=True)
class Command:
    handler: CommandHandler
    help_text: str
    requires_auth: bool


class CommandRegistry:
    """Slash-command registry used by the console (/help, /add, /bulk-done, ...)."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        *,
        requires_auth: bool = True,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        cmd = Command(handler=handler, help_text=help_text, requires_auth=requires_auth)
        self._commands[key] = cmd
        self._help[key] = help_text
        for alias in aliases:
            self._commands[alias.lower()] = cmd

    async def handle(self, state: AppState, line: str, io: ConsoleIO) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        cmd = self._commands.get(name)
        if not cmd:
            return f"Unknown command: /{name}. Use /help to list available commands."

        # Route guard: task commands need a signed-in user.
        if cmd.requires_auth and (not state.session.is_authenticated or state.tasks is None):
            return "You are not signed in. Use /login or /signup first."

        return await cmd.handler(state, args, io)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()

SHORTCUTS_HELP = "\n".join(
    [
        "Keyboard shortcuts (when signed in):",
        "  n      - create a new task",
        "  ?      - show keyboard shortcuts",
        "  Enter  - at any prompt, an empty answer cancels",
    ]
)


# ---- rendering ----


def render_task(task: Task, *, selected: bool = False) -> str:
    check = "[x]" if task.is_completed else "[ ]"
    mark = "*" if selected else " "
    line = f"{mark} {check} #{task.id:<5} {task.title}"
    if task.description:
        line += f"  - {task.description}"
    return line


def render_task_list(tasks: TaskListSession) -> str:
    items = tasks.tasks
    header = f"My Tasks: {count_label(len(items))}"
    if tasks.selected:
        header += f" | {len(tasks.selected)} selected"
    if not items:
        return header + "\n  (no tasks yet, press n or use /add to create one)"
    lines = [header]
    for pos, task in enumerate(items, start=1):
        lines.append(f"{pos:>3}. {render_task(task, selected=task.id in tasks.selected)}")
    return "\n".join(lines)


# ---- argument helpers ----


def _split_title(args: list[str]) -> tuple[str, str | None]:
    """Split "title -- description" into its two parts (description may be None)."""
    text = " ".join(args)
    title, sep, description = text.partition(" -- ")
    return title.strip(), (description.strip() or None) if sep else None


def _parse_ids(args: list[str]) -> list[int] | None:
    try:
        return [int(a.lstrip("#")) for a in args]
    except ValueError:
        return None


def _tasks(state: AppState) -> TaskListSession:
    assert state.tasks is not None  # guaranteed by the registry route guard
    return state.tasks


# ---- auth commands ----


async def cmd_help(state: AppState, args: list[str], io: ConsoleIO) -> str:
    return registry.build_help() + "\n\n" + SHORTCUTS_HELP


async def cmd_status(state: AppState, args: list[str], io: ConsoleIO) -> str:
    user = state.session.user
    who = f"{user.name} <{user.email}>" if user else "not signed in"
    lines = [
        "Status:",
        f"  API: {state.settings.api_url}",
        f"  User: {who}",
    ]
    if state.tasks is not None:
        t = state.tasks
        lines.append(f"  Tasks: {len(t.tasks)} ({len(t.selected)} selected)")
        if t.last_error is not None:
            lines.append(f"  Last error: {t.last_error.message}")
    return "\n".join(lines)


async def cmd_login(state: AppState, args: list[str], io: ConsoleIO) -> str:
    if state.session.is_authenticated:
        return "Already signed in. Use /logout first."

    email = args[0] if args else (await io.prompt("Email: ")).strip()
    if not email:
        return "Cancelled."
    password = await io.secret("Password: ")
    if not password:
        return "Cancelled."

    try:
        user = await state.session.sign_in(email, password)
    except ApiError as err:
        logger.info("Sign-in failed kind=%s: %s", err.kind.value, err.message)
        return humanize_auth_error(err, "sign_in")

    await _tasks(state).load_all()
    return f"Welcome back, {user.name or user.email}!\n" + _list_or_error(state)


async def cmd_signup(state: AppState, args: list[str], io: ConsoleIO) -> str:
    if state.session.is_authenticated:
        return "Already signed in. Use /logout first."

    # /signup <name...> <email>: the email is the last word, the name may contain spaces.
    if len(args) >= 2:
        name, email = " ".join(args[:-1]), args[-1]
    else:
        name = (await io.prompt("Name: ")).strip()
        email = (await io.prompt("Email: ")).strip()
    if not name or not email:
        return "Cancelled."
    password = await io.secret("Password: ")
    if not password:
        return "Cancelled."

    try:
        user = await state.session.sign_up(name, email, password)
    except ApiError as err:
        logger.info("Sign-up failed kind=%s: %s", err.kind.value, err.message)
        return humanize_auth_error(err, "sign_up")

    await _tasks(state).load_all()
    return f"Account created. Welcome, {user.name}!\n" + _list_or_error(state)


async def cmd_logout(state: AppState, args: list[str], io: ConsoleIO) -> str:
    state.session.sign_out()
    return "Signed out."


# ---- task commands ----


def _list_or_error(state: AppState) -> str:
    tasks = _tasks(state)
    text = render_task_list(tasks)
    if tasks.last_error is not None:
        text = f"Error: {tasks.last_error.message}\n" + text
    return text


async def cmd_list(state: AppState, args: list[str], io: ConsoleIO) -> str:
    return _list_or_error(state)


async def cmd_reload(state: AppState, args: list[str], io: ConsoleIO) -> str:
    await _tasks(state).load_all()
    return _list_or_error(state)


async def cmd_add(state: AppState, args: list[str], io: ConsoleIO) -> str:
    title, description = _split_title(args)
    if not title:
        return "Usage: /add <title> [-- description]"
    try:
        await _tasks(state).create(TaskCreate(title=title, description=description))
    except ApiError:
        return "Task was not created."
    return render_task_list(_tasks(state))


async def cmd_new(state: AppState, args: list[str], io: ConsoleIO) -> str:
    """Interactive create (the `n` shortcut). An empty title cancels."""
    title = (await io.prompt("Title (empty to cancel): ")).strip()
    if not title:
        return "Cancelled."
    description = (await io.prompt("Description (optional): ")).strip() or None
    try:
        await _tasks(state).create(TaskCreate(title=title, description=description))
    except ApiError:
        return "Task was not created."
    return render_task_list(_tasks(state))


async def cmd_edit(state: AppState, args: list[str], io: ConsoleIO) -> str:
    ids = _parse_ids(args[:1])
    title, description = _split_title(args[1:])
    if not ids or not title:
        return "Usage: /edit <id> <title> [-- description]"
    task_id = ids[0]
    if _tasks(state).get(task_id) is None:
        return f"No task #{task_id}."
    try:
        await _tasks(state).update(task_id, TaskUpdate(title=title, description=description))
    except ApiError:
        return f"Task #{task_id} was not changed."
    return render_task_list(_tasks(state))


async def _set_completed(state: AppState, args: list[str], completed: bool) -> str:
    ids = _parse_ids(args)
    if not ids or len(ids) != 1:
        return "Usage: /done <id> or /undo <id>"
    task_id = ids[0]
    if _tasks(state).get(task_id) is None:
        return f"No task #{task_id}."
    try:
        await _tasks(state).toggle_complete(task_id, completed)
    except ApiError:
        return f"Task #{task_id} was not changed."
    return render_task_list(_tasks(state))


async def cmd_done(state: AppState, args: list[str], io: ConsoleIO) -> str:
    return await _set_completed(state, args, True)


async def cmd_undo(state: AppState, args: list[str], io: ConsoleIO) -> str:
    return await _set_completed(state, args, False)


async def cmd_rm(state: AppState, args: list[str], io: ConsoleIO) -> str:
    ids = _parse_ids(args)
    if not ids or len(ids) != 1:
        return "Usage: /rm <id>"
    task_id = ids[0]
    if _tasks(state).get(task_id) is None:
        return f"No task #{task_id}."
    try:
        await _tasks(state).delete(task_id)
    except ApiError:
        return f"Task #{task_id} was not deleted."
    return render_task_list(_tasks(state))


# ---- selection / bulk ----


async def cmd_select(state: AppState, args: list[str], io: ConsoleIO) -> str:
    ids = _parse_ids(args)
    if not ids:
        return "Usage: /select <id> [<id> ...]"
    tasks = _tasks(state)
    unknown = [tid for tid in ids if tasks.get(tid) is None]
    for tid in ids:
        tasks.toggle_selection(tid)
    text = render_task_list(tasks)
    if unknown:
        text = "Unknown ids ignored: " + ", ".join(f"#{tid}" for tid in unknown) + "\n" + text
    return text


async def cmd_all(state: AppState, args: list[str], io: ConsoleIO) -> str:
    _tasks(state).toggle_select_all()
    return render_task_list(_tasks(state))


async def cmd_none(state: AppState, args: list[str], io: ConsoleIO) -> str:
    _tasks(state).deselect_all()
    return render_task_list(_tasks(state))


async def _bulk_complete(state: AppState, completed: bool) -> str:
    tasks = _tasks(state)
    if not tasks.selected:
        return "Nothing selected. Use /select or /all first."
    await tasks.bulk_toggle_complete(completed)
    return render_task_list(tasks)


async def cmd_bulk_done(state: AppState, args: list[str], io: ConsoleIO) -> str:
    return await _bulk_complete(state, True)


async def cmd_bulk_undo(state: AppState, args: list[str], io: ConsoleIO) -> str:
    return await _bulk_complete(state, False)


async def cmd_bulk_rm(state: AppState, args: list[str], io: ConsoleIO) -> str:
    tasks = _tasks(state)
    if not tasks.selected:
        return "Nothing selected. Use /select or /all first."
    if state.settings.confirm_bulk_delete:
        answer = (await io.prompt(f"Delete {len(tasks.selected)} selected task(s)? [y/N] ")).strip().lower()
        if answer not in ("y", "yes"):
            return "Cancelled."
    await tasks.bulk_delete()
    return render_task_list(tasks)


async def cmd_move(state: AppState, args: list[str], io: ConsoleIO) -> str:
    nums = _parse_ids(args)
    if not nums or len(nums) != 2:
        return "Usage: /move <id> <position>"
    task_id, position = nums
    if not _tasks(state).move(task_id, position - 1):
        return f"No task #{task_id}."
    return render_task_list(_tasks(state))


registry.register("help", cmd_help, "show this help", aliases=["h"], requires_auth=False)
registry.register("status", cmd_status, "show API endpoint, user and task counts", requires_auth=False)
registry.register("login", cmd_login, "sign in: /login [email]", aliases=["signin"], requires_auth=False)
registry.register("signup", cmd_signup, "create an account: /signup [name] [email]", requires_auth=False)
registry.register("logout", cmd_logout, "sign out and forget the stored token", aliases=["signout"])
registry.register("list", cmd_list, "show tasks", aliases=["ls"])
registry.register("reload", cmd_reload, "fetch tasks from the server again")
registry.register("add", cmd_add, "create a task: /add <title> [-- description]")
registry.register("new", cmd_new, "create a task interactively (shortcut: n)")
registry.register("edit", cmd_edit, "edit a task: /edit <id> <title> [-- description]")
registry.register("done", cmd_done, "mark a task complete: /done <id>")
registry.register("undo", cmd_undo, "mark a task incomplete: /undo <id>")
registry.register("rm", cmd_rm, "delete a task: /rm <id>", aliases=["delete"])
registry.register("select", cmd_select, "toggle selection: /select <id> [<id> ...]")
registry.register("all", cmd_all, "select all, or deselect all when everything is selected")
registry.register("none", cmd_none, "clear the selection")
registry.register("bulk-done", cmd_bulk_done, "mark selected tasks complete")
registry.register("bulk-undo", cmd_bulk_undo, "mark selected tasks incomplete")
registry.register("bulk-rm", cmd_bulk_rm, "delete selected tasks")
registry.register("move", cmd_move, "reorder: /move <id> <position>")
