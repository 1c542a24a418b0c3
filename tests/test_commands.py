# tests/test_commands.py

from __future__ import annotations

import pytest

from taskdeck.cli.commands import CommandRegistry, registry
from taskdeck.cli.console import handle_line
from taskdeck.core.notifications import Notification
from taskdeck.core.state import AppState

from .fakes import FakeTaskApi, ScriptedIO


async def _sign_in(state: AppState) -> None:
    reply = await registry.handle(state, "/login ada@example.com", ScriptedIO("secret"))
    assert reply is not None and reply.startswith("Welcome back, Ada!")


@pytest.mark.asyncio
async def test_command_registry_routes_and_reports_unknown(state: AppState) -> None:
    reg = CommandRegistry()
    called: list[list[str]] = []

    async def handler(state, args, io):
        called.append(args)
        return "ok"

    reg.register("ping", handler, "ping", aliases=["p"], requires_auth=False)

    assert await reg.handle(state, "/ping a b", ScriptedIO()) == "ok"
    assert await reg.handle(state, "/P", ScriptedIO()) == "ok"
    assert called == [["a", "b"], []]
    assert await reg.handle(state, "hello", ScriptedIO()) is None
    assert "Unknown command" in (await reg.handle(state, "/nope", ScriptedIO()) or "")


@pytest.mark.asyncio
async def test_task_commands_require_sign_in(state: AppState, api: FakeTaskApi) -> None:
    reply = await registry.handle(state, "/list", ScriptedIO())
    assert reply == "You are not signed in. Use /login or /signup first."
    assert api.calls == []


@pytest.mark.asyncio
async def test_login_opens_task_session_and_lists_tasks(state: AppState) -> None:
    await _sign_in(state)

    assert state.tasks is not None
    assert [t.title for t in state.tasks.tasks] == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_login_with_wrong_password_shows_humanized_error(state: AppState) -> None:
    reply = await registry.handle(state, "/login ada@example.com", ScriptedIO("wrong"))
    assert reply == "Invalid email or password"
    assert state.tasks is None


@pytest.mark.asyncio
async def test_add_edit_done_and_rm(state: AppState) -> None:
    await _sign_in(state)
    tasks = state.tasks
    assert tasks is not None

    await registry.handle(state, "/add Write report -- for Monday", ScriptedIO())
    new = tasks.tasks[0]
    assert (new.title, new.description) == ("Write report", "for Monday")

    await registry.handle(state, f"/edit {new.id} Write the report", ScriptedIO())
    assert tasks.get(new.id).title == "Write the report"

    await registry.handle(state, f"/done {new.id}", ScriptedIO())
    assert tasks.get(new.id).is_completed is True

    await registry.handle(state, f"/rm #{new.id}", ScriptedIO())
    assert tasks.get(new.id) is None


@pytest.mark.asyncio
async def test_failed_single_mutation_is_reported_not_raised(state: AppState, api: FakeTaskApi) -> None:
    await _sign_in(state)
    api.fail("delete", 2)

    reply = await registry.handle(state, "/rm 2", ScriptedIO())

    assert reply == "Task #2 was not deleted."


@pytest.mark.asyncio
async def test_bulk_rm_asks_for_confirmation(state: AppState) -> None:
    await _sign_in(state)
    tasks = state.tasks
    assert tasks is not None
    await registry.handle(state, "/select 1 3", ScriptedIO())
    assert tasks.selected == {1, 3}

    assert await registry.handle(state, "/bulk-rm", ScriptedIO("n")) == "Cancelled."
    assert len(tasks.tasks) == 3

    await registry.handle(state, "/bulk-rm", ScriptedIO("y"))
    assert [t.id for t in tasks.tasks] == [2]
    assert tasks.selected == frozenset()


@pytest.mark.asyncio
async def test_all_then_bulk_done(state: AppState) -> None:
    await _sign_in(state)
    tasks = state.tasks
    assert tasks is not None

    await registry.handle(state, "/all", ScriptedIO())
    assert tasks.selected == {1, 2, 3}
    await registry.handle(state, "/bulk-done", ScriptedIO())

    assert all(t.is_completed for t in tasks.tasks)
    assert tasks.selected == frozenset()


@pytest.mark.asyncio
async def test_move_uses_one_based_positions(state: AppState) -> None:
    await _sign_in(state)
    tasks = state.tasks
    assert tasks is not None

    await registry.handle(state, "/move 3 1", ScriptedIO())
    assert [t.id for t in tasks.tasks] == [3, 1, 2]


@pytest.mark.asyncio
async def test_logout_closes_task_session(state: AppState) -> None:
    await _sign_in(state)
    task_session = state.tasks
    assert task_session is not None

    assert await registry.handle(state, "/logout", ScriptedIO()) == "Signed out."
    assert state.tasks is None
    assert task_session.closed


@pytest.mark.asyncio
async def test_shortcuts_only_when_signed_in(state: AppState) -> None:
    io = ScriptedIO()
    assert await handle_line(state, "n", io) == "Commands start with '/'. Use /help to list them."
    assert io.prompts == []

    await _sign_in(state)
    assert "Keyboard shortcuts" in (await handle_line(state, "?", io) or "")


@pytest.mark.asyncio
async def test_new_task_shortcut_and_cancel(state: AppState) -> None:
    await _sign_in(state)
    tasks = state.tasks
    assert tasks is not None
    seen: list[Notification] = []
    state.notifications.subscribe(seen.append)

    assert await handle_line(state, "n", ScriptedIO("")) == "Cancelled."
    assert len(tasks.tasks) == 3

    await handle_line(state, "n", ScriptedIO("Call mom", ""))
    assert tasks.tasks[0].title == "Call mom"
    assert tasks.tasks[0].description is None
    assert [n.title for n in seen] == ["Task created successfully!"]
