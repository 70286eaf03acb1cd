"""Task model for the kanban board.

Defines the task record the board projects from, the closed status
enumeration that doubles as the set of board columns, and the
``is_task_status`` predicate handed to the board engine.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TaskStatus(str, Enum):
    """Board-level status used for Kanban columns."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    """Priority level."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


TASK_STATUSES: tuple[TaskStatus, ...] = tuple(TaskStatus)
_TASK_STATUS_VALUES = frozenset(s.value for s in TaskStatus)


def is_task_status(value: Any) -> bool:
    """Return True if *value* names one of the task statuses."""
    if isinstance(value, TaskStatus):
        return True
    if not isinstance(value, str):
        return False
    return value in _TASK_STATUS_VALUES


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# API payloads use camelCase keys.
_CAMEL_KEYS = {
    "projectId": "project_id",
    "projectName": "project_name",
    "assigneeId": "assignee_id",
    "dueDate": "due_date",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Assignee:
    """The user a task is assigned to."""

    id: str
    name: str = ""
    email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Assignee":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "") or ""),
            email=data.get("email"),
        )


@dataclass
class Task:
    """A task as returned by the task service."""

    id: str
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    project_id: str = ""
    project_name: Optional[str] = None
    assignee_id: Optional[str] = None
    assignee: Optional[Assignee] = None
    due_date: Optional[str] = None
    created_at: str = field(default_factory=_now_iso)
    updated_at: str = field(default_factory=_now_iso)

    @classmethod
    def validate_dict(cls, data: dict[str, Any]) -> list[str]:
        """Lightweight validation of a task dict.

        Returns a list of error strings (empty = valid).
        """
        errors: list[str] = []
        if not isinstance(data, dict):
            return ["Expected a dict"]
        if not data.get("id"):
            errors.append("'id' is required and must be non-empty")
        if not data.get("title"):
            errors.append("'title' is required and must be non-empty")
        status = data.get("status")
        if status is not None and not is_task_status(status):
            errors.append(f"'status' must be one of {sorted(_TASK_STATUS_VALUES)}, got '{status}'")
        priority = data.get("priority")
        if priority is not None:
            valid_prios = {e.value for e in TaskPriority}
            if priority not in valid_prios:
                errors.append(f"'priority' must be one of {sorted(valid_prios)}, got '{priority}'")
        assignee = data.get("assignee")
        if assignee is not None and not isinstance(assignee, dict):
            errors.append("'assignee' must be an object")
        return errors

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        data: dict[str, Any] = {}
        for k, v in asdict(self).items():
            data[k] = v.value if isinstance(v, Enum) else v
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Deserialize from a plain dict, coercing enums gracefully.

        Accepts both snake_case and the API's camelCase keys.
        """
        d = {_CAMEL_KEYS.get(k, k): v for k, v in data.items()}

        def _enum(enum_cls: type[Enum], key: str, default: Enum) -> Any:
            raw = d.pop(key, None)
            if raw is None:
                return default
            if isinstance(raw, enum_cls):
                return raw
            try:
                return enum_cls(str(raw))
            except (ValueError, KeyError):
                return default

        status = _enum(TaskStatus, "status", TaskStatus.TODO)
        priority = _enum(TaskPriority, "priority", TaskPriority.MEDIUM)
        assignee_raw = d.pop("assignee", None)
        assignee: Optional[Assignee] = None
        if isinstance(assignee_raw, Assignee):
            assignee = assignee_raw
        elif isinstance(assignee_raw, dict):
            assignee = Assignee.from_dict(assignee_raw)

        return cls(
            id=str(d.pop("id", "")),
            title=str(d.pop("title", "") or ""),
            description=str(d.pop("description", "") or ""),
            status=status,
            priority=priority,
            project_id=str(d.pop("project_id", "") or ""),
            project_name=d.pop("project_name", None),
            assignee_id=d.pop("assignee_id", None),
            assignee=assignee,
            due_date=d.pop("due_date", None),
            created_at=str(d.pop("created_at", None) or _now_iso()),
            updated_at=str(d.pop("updated_at", None) or _now_iso()),
        )
