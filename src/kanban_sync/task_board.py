"""Tasks on the kanban board.

Projects task records into board items, wires the task status change into
the board's move callback, and wraps both in :class:`TasksKanban`.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional, Sequence

from loguru import logger

from .board import DragEndEvent, DragStartEvent, KanbanBoard, MoveAttempt, MoveRequest
from .board.engine import BoardItem, MoveCallback
from .constants import MOVE_FAILED_MESSAGE
from .task_engine.model import Assignee, Task, TaskStatus, is_task_status


StatusChange = Callable[[Task, TaskStatus], Any]


@dataclass(frozen=True)
class TaskBoardItem(BoardItem):
    """A task card.  ``column`` is the task status; ``raw`` the source task."""

    name: str = ""
    assignee: Optional[Assignee] = None
    due_date: Optional[str] = None
    raw: Optional[Task] = None


def project_tasks(tasks: Optional[Iterable[Task]]) -> list[TaskBoardItem]:
    """Map tasks to board items, preserving order."""
    return [
        TaskBoardItem(
            id=task.id,
            column=task.status,
            name=task.title,
            assignee=task.assignee,
            due_date=task.due_date,
            raw=task,
        )
        for task in (tasks or ())
    ]


def bind_move(on_status_change: StatusChange) -> MoveCallback:
    """Adapt ``on_status_change(task, new_status)`` to the board move callback."""

    async def on_move(request: MoveRequest[TaskBoardItem, TaskStatus]) -> None:
        result = on_status_change(request.item.raw, request.to_column)
        if inspect.isawaitable(result):
            await result

    return on_move


def api_status_change(
    update_task_status: Callable[[str, str, TaskStatus], Awaitable[Any]],
    *,
    on_error: Optional[Callable[[str], None]] = None,
) -> StatusChange:
    """Build a status change backed by the task service.

    Args:
        update_task_status: ``(project_id, task_id, status)`` coroutine function.
        on_error: Receives a user-facing message when the update fails.

    Returns:
        An ``on_status_change`` suitable for :func:`bind_move`.  Failures are
        re-raised so the board rolls the move back.
    """

    async def on_status_change(task: Task, status: TaskStatus) -> None:
        if not task.project_id:
            logger.warning("Task {} has no project; status change skipped", task.id)
            return
        try:
            await update_task_status(task.project_id, task.id, status)
        except Exception as exc:
            logger.warning(
                "Status change of {} to {} failed: {}",
                task.id,
                getattr(status, "value", status),
                exc,
            )
            if on_error is not None:
                on_error(str(exc) or MOVE_FAILED_MESSAGE)
            raise

    return on_status_change


class TasksKanban:
    """Kanban board over task records, one column per task status."""

    def __init__(
        self,
        tasks: Optional[Sequence[Task]] = None,
        *,
        on_move: Optional[MoveCallback] = None,
        on_status_change: Optional[StatusChange] = None,
    ) -> None:
        if on_move is not None and on_status_change is not None:
            raise ValueError("Pass either on_move or on_status_change, not both")
        if on_status_change is not None:
            on_move = bind_move(on_status_change)
        self.board: KanbanBoard[TaskStatus, TaskBoardItem] = KanbanBoard(
            project_tasks(tasks),
            on_move=on_move,
            is_column=is_task_status,
            parse_column=TaskStatus,
        )

    @property
    def items(self) -> tuple[TaskBoardItem, ...]:
        return self.board.board_items

    def update(self, tasks: Optional[Sequence[Task]]) -> tuple[TaskBoardItem, ...]:
        """Re-project *tasks* and reconcile the board with them."""
        return self.board.reconcile(project_tasks(tasks))

    def on_drag_start(self, event: DragStartEvent) -> None:
        self.board.on_drag_start(event)

    async def on_drag_end(self, event: DragEndEvent) -> Optional[MoveAttempt[TaskBoardItem, TaskStatus]]:
        return await self.board.on_drag_end(event)

    def move_optimistic(self, item_id: str, status: TaskStatus) -> None:
        self.board.move_optimistic(item_id, TaskStatus(status))
