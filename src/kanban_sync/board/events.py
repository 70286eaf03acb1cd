"""Drag lifecycle events delivered by the drag-and-drop surface."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


def _nested(payload: Any, *keys: str) -> Any:
    cur = payload
    for key in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


class DropTarget(BaseModel):
    """Whatever the pointer was over when the drag ended.

    ``id`` may name a column or another item. ``container_id`` is the
    sortable container hint some drop targets carry.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    container_id: Optional[str] = None

    @field_validator("id", "container_id", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        return None if value is None else str(value)

    @classmethod
    def from_payload(cls, payload: Optional[Any]) -> Optional["DropTarget"]:
        """Parse an ``over`` payload; ``None`` or empty means no target."""
        if not payload:
            return None
        return cls(
            id=_nested(payload, "id"),
            container_id=_nested(payload, "data", "current", "sortable", "containerId"),
        )


class DragStartEvent(BaseModel):
    """A drag began on ``active_id``."""

    model_config = ConfigDict(frozen=True)

    active_id: str

    @field_validator("active_id", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        return None if value is None else str(value)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "DragStartEvent":
        return cls(active_id=_nested(payload, "active", "id"))


class DragEndEvent(BaseModel):
    """A drag of ``active_id`` ended, over ``over`` if anything."""

    model_config = ConfigDict(frozen=True)

    active_id: str
    over: Optional[DropTarget] = None

    @field_validator("active_id", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        return None if value is None else str(value)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "DragEndEvent":
        """Parse a drag-end payload shaped ``{"active": {...}, "over": {...}}``."""
        return cls(
            active_id=_nested(payload, "active", "id"),
            over=DropTarget.from_payload(_nested(payload, "over")),
        )
