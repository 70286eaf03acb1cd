"""Provide the public `kanban_sync` package exports."""

from __future__ import annotations

from .board import (
    BoardItem,
    DragEndEvent,
    DragStartEvent,
    DropTarget,
    KanbanBoard,
    MoveAttempt,
    MoveRequest,
    MoveState,
)
from .feed import KanbanTasksFeed
from .task_board import TaskBoardItem, TasksKanban, api_status_change, bind_move, project_tasks

__all__ = [
    "BoardItem",
    "DragEndEvent",
    "DragStartEvent",
    "DropTarget",
    "KanbanBoard",
    "KanbanTasksFeed",
    "MoveAttempt",
    "MoveRequest",
    "MoveState",
    "TaskBoardItem",
    "TasksKanban",
    "api_status_change",
    "bind_move",
    "project_tasks",
]
