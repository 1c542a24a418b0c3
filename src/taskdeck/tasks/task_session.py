# src/taskdeck/tasks/task_session.py

from __future__ import annotations

"""
Task list session.

Holds the signed-in user's tasks and the current multi-selection in memory,
routes every mutation through the remote TaskApi and folds server answers
back into the list.

Key invariants:
- `selected` is always a subset of the ids in `tasks`,
- state is only mutated after the awaited request(s) settle,
- bulk operations fan out concurrently and mutate once, after the join,
- every networked mutation emits exactly one user-visible Notification,
- once close() has run, late responses change nothing and notify nobody.

Single-item mutations re-raise ApiError after notifying so the caller can
revert optimistic UI state. load_all() and the bulk operations keep the error
(or notify) and return False instead.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import Any

from ..core.errors import ApiError, ErrorKind
from ..core.notifications import Notification
from ..core.ports import Identity, Notifier, TaskApi
from .task_models import Task, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


def count_label(n: int) -> str:
    return f"{n} {'task' if n == 1 else 'tasks'}"


def _first_error_message(failures: Iterable[BaseException]) -> str:
    exc = next(iter(failures), None)
    if exc is None:
        return ""
    if isinstance(exc, ApiError):
        return exc.message
    return str(exc) or exc.__class__.__name__


def _failure_summary(failures: Sequence[BaseException], total: int) -> str:
    return f"{len(failures)} of {total} failed: {_first_error_message(failures)}"


class TaskListSession:
    def __init__(self, identity: Identity, api: TaskApi, notifier: Notifier) -> None:
        self._identity = identity
        self._api = api
        self._notifier = notifier

        self._tasks: list[Task] = []
        self._selected: set[int] = set()
        self._closed = asyncio.Event()

        self._loading = False
        self._bulk_loading = False
        self._last_error: ApiError | None = None

    # ---- read-only state for the presentation layer ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def selected(self) -> frozenset[int]:
        return frozenset(self._selected)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def bulk_loading(self) -> bool:
        return self._bulk_loading

    @property
    def last_error(self) -> ApiError | None:
        return self._last_error

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def get(self, task_id: int) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # ---- helpers ----

    def _user_id(self) -> str | None:
        if self._closed.is_set():
            return None
        return self._identity.user_id

    def _notify(self, notification: Notification) -> None:
        self._notifier.notify(notification)

    def _replace_by_id(self, updated: Task) -> bool:
        for i, task in enumerate(self._tasks):
            if task.id == updated.id:
                self._tasks[i] = updated
                return True
        logger.warning("Task %s is not in the local list; keeping list as is", updated.id)
        return False

    def _prune_selection(self) -> None:
        present = {t.id for t in self._tasks}
        self._selected &= present

    async def _fan_out(
            self,
            ids: Sequence[int],
            call: Callable[[int], Awaitable[Any]],
    ) -> dict[int, Any]:
        """
        Run call(task_id) for every id concurrently and wait for all of them.

        Returns {task_id: result or exception}. If the session is closed while
        requests are in flight they are cancelled and ApiError(CANCELLED) is raised.
        """
        futures = [asyncio.ensure_future(call(tid)) for tid in ids]
        gathered = asyncio.gather(*futures, return_exceptions=True)
        closer = asyncio.ensure_future(self._closed.wait())
        try:
            done, _ = await asyncio.wait({gathered, closer}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            gathered.cancel()
            raise
        finally:
            closer.cancel()

        if gathered not in done or self._closed.is_set():
            gathered.cancel()
            try:
                await gathered
            except asyncio.CancelledError:
                pass
            raise ApiError(ErrorKind.CANCELLED, "Operation cancelled.")

        return dict(zip(ids, gathered.result()))

    # ---- network operations ----

    async def load_all(self) -> bool:
        """Replace `tasks` with the server's list. On failure the old list stays visible."""
        user_id = self._user_id()
        if user_id is None:
            return False

        self._loading = True
        try:
            fetched = await self._api.list(user_id)
        except ApiError as err:
            logger.warning("Failed to fetch tasks user=%s: %s", user_id, err.message)
            if not self.closed:
                self._last_error = err
            return False
        finally:
            self._loading = False

        if self.closed:
            return False

        self._tasks = list(fetched)
        self._prune_selection()
        self._last_error = None
        logger.info("Loaded %d tasks for user=%s", len(self._tasks), user_id)
        return True

    async def create(self, draft: TaskCreate) -> Task | None:
        user_id = self._user_id()
        if user_id is None:
            return None

        try:
            task = await self._api.create(user_id, draft)
        except ApiError as err:
            logger.warning("Failed to create task: %s", err.message)
            if not self.closed:
                self._last_error = err
                self._notify(Notification.error("Failed to create task", err.message))
            raise

        if self.closed:
            return task

        # Newest first.
        self._tasks.insert(0, task)
        self._last_error = None
        self._notify(Notification.success("Task created successfully!", draft.title))
        return task

    async def update(self, task_id: int, patch: TaskUpdate) -> Task | None:
        user_id = self._user_id()
        if user_id is None:
            return None

        try:
            task = await self._api.update(user_id, task_id, patch)
        except ApiError as err:
            logger.warning("Failed to update task %s: %s", task_id, err.message)
            if not self.closed:
                self._notify(Notification.error("Failed to update task", err.message))
            raise

        if self.closed:
            return task

        self._replace_by_id(task)
        self._notify(Notification.success("Task updated successfully!"))
        return task

    async def delete(self, task_id: int) -> bool:
        user_id = self._user_id()
        if user_id is None:
            return False

        try:
            await self._api.delete(user_id, task_id)
        except ApiError as err:
            logger.warning("Failed to delete task %s: %s", task_id, err.message)
            if not self.closed:
                self._notify(Notification.error("Failed to delete task", err.message))
            raise

        if self.closed:
            return True

        self._tasks = [t for t in self._tasks if t.id != task_id]
        self._selected.discard(task_id)
        self._notify(Notification.success("Task deleted successfully!"))
        return True

    async def toggle_complete(self, task_id: int, completed: bool) -> Task | None:
        user_id = self._user_id()
        if user_id is None:
            return None

        try:
            task = await self._api.toggle_complete(user_id, task_id, completed)
        except ApiError as err:
            logger.warning("Failed to toggle completion of task %s: %s", task_id, err.message)
            if not self.closed:
                self._notify(Notification.error("Failed to update task", err.message))
            raise

        if self.closed:
            return task

        self._replace_by_id(task)
        self._notify(Notification.success("Task completed!" if completed else "Task marked as incomplete"))
        return task

    # ---- selection (local only) ----

    def toggle_selection(self, task_id: int) -> None:
        if task_id in self._selected:
            self._selected.discard(task_id)
        elif self.get(task_id) is not None:
            self._selected.add(task_id)

    def select_all(self) -> None:
        self._selected = {t.id for t in self._tasks}

    def deselect_all(self) -> None:
        self._selected = set()

    def toggle_select_all(self) -> None:
        """Full selection -> clear; partial or none -> select everything."""
        if self._tasks and len(self._selected) == len(self._tasks):
            self.deselect_all()
        else:
            self.select_all()

    # ---- bulk operations ----

    async def bulk_delete(self) -> bool:
        """
        Delete every selected task concurrently.

        Tasks whose delete succeeded are removed locally even if siblings
        failed; failed ones stay in the list and stay selected so the user can
        retry. One aggregate notification either way.
        """
        user_id = self._user_id()
        if user_id is None or not self._selected:
            return False

        ids = sorted(self._selected)
        self._bulk_loading = True
        try:
            results = await self._fan_out(ids, lambda tid: self._api.delete(user_id, tid))
        except ApiError as err:
            logger.info("Bulk delete of %d tasks aborted: %s", len(ids), err.message)
            return False
        finally:
            self._bulk_loading = False

        deleted = {tid for tid, res in results.items() if not isinstance(res, BaseException)}
        failures = [res for res in results.values() if isinstance(res, BaseException)]
        self._log_failures("delete", results)

        self._tasks = [t for t in self._tasks if t.id not in deleted]
        self._selected -= deleted

        if failures:
            self._notify(Notification.error("Failed to delete some tasks", _failure_summary(failures, len(ids))))
            return False

        self._notify(Notification.success(f"{count_label(len(ids))} deleted successfully!"))
        return True

    async def bulk_toggle_complete(self, completed: bool) -> bool:
        """
        Set completion on every selected task concurrently.

        Every successfully returned task is merged back by id, failed ones
        are left unchanged, and the selection is cleared regardless.
        """
        user_id = self._user_id()
        if user_id is None or not self._selected:
            return False

        ids = sorted(self._selected)
        self._bulk_loading = True
        try:
            results = await self._fan_out(ids, lambda tid: self._api.toggle_complete(user_id, tid, completed))
        except ApiError as err:
            logger.info("Bulk completion update of %d tasks aborted: %s", len(ids), err.message)
            return False
        finally:
            self._bulk_loading = False

        updated = {res.id: res for res in results.values() if isinstance(res, Task)}
        failures = [res for res in results.values() if isinstance(res, BaseException)]
        self._log_failures("toggle", results)

        self._tasks = [updated.get(t.id, t) for t in self._tasks]
        self._selected = set()

        if failures:
            self._notify(Notification.error("Failed to update some tasks", _failure_summary(failures, len(ids))))
            return False

        state = "complete" if completed else "incomplete"
        self._notify(Notification.success(f"{count_label(len(ids))} marked as {state}!"))
        return True

    @staticmethod
    def _log_failures(op: str, results: dict[int, Any]) -> None:
        for tid, res in results.items():
            if isinstance(res, ApiError):
                logger.warning("Bulk %s failed for task %s: %s", op, tid, res.message)
            elif isinstance(res, BaseException):
                logger.error("Bulk %s crashed for task %s", op, tid, exc_info=res)

    # ---- ordering (local only) ----

    def reorder(self, new_order: Sequence[Task]) -> None:
        """Adopt a caller-supplied ordering (a permutation of the current tasks)."""
        if sorted(t.id for t in new_order) != sorted(t.id for t in self._tasks):
            logger.warning("reorder() got a sequence that is not a permutation of the current tasks")
        self._tasks = list(new_order)
        self._prune_selection()

    def move(self, task_id: int, position: int) -> bool:
        """Move one task to `position` (0-based, clamped) and reorder around it."""
        task = self.get(task_id)
        if task is None:
            return False
        rest = [t for t in self._tasks if t.id != task_id]
        position = max(0, min(position, len(rest)))
        rest.insert(position, task)
        self.reorder(rest)
        return True

    # ---- teardown ----

    def clear(self) -> None:
        self._tasks = []
        self._selected = set()
        self._last_error = None

    def close(self) -> None:
        """Abort in-flight bulk work and drop all state. Further network calls are no-ops."""
        self._closed.set()
        self.clear()
