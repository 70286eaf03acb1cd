"""Generic kanban board state: drag events and the board engine."""

from __future__ import annotations

from .engine import BoardItem, DragOrigin, KanbanBoard, MoveAttempt, MoveRequest, MoveState
from .events import DragEndEvent, DragStartEvent, DropTarget

__all__ = [
    "BoardItem",
    "DragEndEvent",
    "DragOrigin",
    "DragStartEvent",
    "DropTarget",
    "KanbanBoard",
    "MoveAttempt",
    "MoveRequest",
    "MoveState",
]
