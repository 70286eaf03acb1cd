"""Board state engine: the local kanban board behind drag-and-drop views.

The engine owns an ordered, immutable snapshot of board items and keeps it
in step with an externally supplied item list.  Each cross-column drop runs
as optimistic apply → confirm → commit or rollback.

Every mutation swaps in a new tuple, so a caller holding an old
``board_items`` reference keeps a consistent snapshot and can detect
changes by identity.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar

from loguru import logger

from ..logging_utils import summarize_move
from .events import DragEndEvent, DragStartEvent


# ---------------------------------------------------------------------------
# Board data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BoardItem:
    """A draggable card.  Subclass to carry caller-defined fields."""

    id: str
    column: Any


ColumnT = TypeVar("ColumnT")
ItemT = TypeVar("ItemT", bound=BoardItem)


class MoveState(str, Enum):
    """Where a single cross-column move stands."""

    IDLE = "idle"
    APPLIED = "applied"
    CONFIRMING = "confirming"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True)
class DragOrigin(Generic[ColumnT]):
    """The column a drag started from."""

    id: str
    from_column: ColumnT


@dataclass(frozen=True)
class MoveRequest(Generic[ItemT, ColumnT]):
    """Arguments handed to the move callback."""

    item: ItemT
    from_column: ColumnT
    to_column: ColumnT


@dataclass
class MoveAttempt(Generic[ItemT, ColumnT]):
    """One optimistic move and the action that undoes it."""

    request: MoveRequest[ItemT, ColumnT]
    compensate: Callable[[], None]
    state: MoveState = MoveState.IDLE
    error: Optional[Exception] = None


MoveCallback = Callable[[MoveRequest[Any, Any]], Any]


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class KanbanBoard(Generic[ColumnT, ItemT]):
    """Locally mutable board mirroring an authoritative item list.

    Parameters
    ----------
    items:
        Initial board contents.
    on_move:
        Called with a :class:`MoveRequest` after each optimistic move.  May
        return an awaitable; raising (or a failing awaitable) rolls the move
        back.
    is_column:
        Predicate telling whether a drop target id names a column.  Without
        it, drops resolve only through the item under the pointer.
    parse_column:
        Converts a column id from a drop target into the board's column
        type (e.g. an enum).  Identity when omitted.
    """

    def __init__(
        self,
        items: Iterable[ItemT] = (),
        *,
        on_move: Optional[MoveCallback] = None,
        is_column: Optional[Callable[[str], bool]] = None,
        parse_column: Optional[Callable[[str], ColumnT]] = None,
    ) -> None:
        self._items: tuple[ItemT, ...] = ()
        self._index: dict[str, ItemT] = {}
        self._replace(items)
        self._on_move = on_move
        self._is_column = is_column
        self._parse_column = parse_column
        self._origin: Optional[DragOrigin[ColumnT]] = None
        self._pending: dict[str, MoveAttempt[ItemT, ColumnT]] = {}

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def board_items(self) -> tuple[ItemT, ...]:
        return self._items

    @property
    def drag_origin(self) -> Optional[DragOrigin[ColumnT]]:
        return self._origin

    @property
    def pending_moves(self) -> Mapping[str, MoveAttempt[ItemT, ColumnT]]:
        """Moves awaiting confirmation, keyed by item id."""
        return MappingProxyType(self._pending)

    def get_item(self, item_id: str) -> Optional[ItemT]:
        return self._index.get(item_id)

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def reconcile(self, external_items: Iterable[ItemT]) -> tuple[ItemT, ...]:
        """Adopt *external_items* unless they match the board by (id, column).

        Returns the board after reconciliation; the same object as before
        when nothing relevant changed.
        """
        external = tuple(external_items)
        current = self._items
        if len(current) == len(external) and all(
            mine.id == theirs.id and mine.column == theirs.column
            for mine, theirs in zip(current, external)
        ):
            return current
        self._replace(external)
        logger.debug("Board reconciled with {} external items", len(external))
        return self._items

    # ------------------------------------------------------------------
    # Drag handling
    # ------------------------------------------------------------------

    def on_drag_start(self, event: DragStartEvent) -> None:
        item = self._index.get(event.active_id)
        if item is None:
            self._origin = None
            return
        self._origin = DragOrigin(id=item.id, from_column=item.column)

    def resolve_target_column(self, event: DragEndEvent, fallback: Optional[ColumnT] = None) -> Optional[ColumnT]:
        """Work out which column a drop landed in.

        Precedence: the drop target itself when it is a column, then the
        target's container hint, then the column of the item under the
        pointer, then *fallback*.  ``None`` means unresolved.
        """
        over = event.over
        if over is None:
            return None
        if self._is_column is not None:
            if self._is_column(over.id):
                return self._column_from_id(over.id)
            if over.container_id is not None and self._is_column(over.container_id):
                return self._column_from_id(over.container_id)
        over_item = self._index.get(over.id)
        if over_item is not None:
            return over_item.column
        return fallback

    async def on_drag_end(self, event: DragEndEvent) -> Optional[MoveAttempt[ItemT, ColumnT]]:
        """Finish a drag; returns the move attempt, or None when nothing moved."""
        origin = self._origin
        if origin is not None and origin.id == event.active_id:
            self._origin = None
        else:
            origin = None

        if event.over is None:
            return None
        item = self._index.get(event.active_id)
        if item is None:
            return None

        from_column = origin.from_column if origin is not None else item.column
        to_column = self.resolve_target_column(event)
        if to_column is None:
            return None
        if from_column == to_column:
            # Same-column drops are reorders, not status changes.
            return None

        attempt = self._apply(item, from_column, to_column)
        await self._confirm(attempt)
        return attempt

    def move_optimistic(self, item_id: str, column: ColumnT) -> None:
        """Set an item's column right away, with no confirmation or rollback."""
        if self._set_column(item_id, column):
            logger.debug("Item {} moved optimistically", item_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _apply(self, item: ItemT, from_column: ColumnT, to_column: ColumnT) -> MoveAttempt[ItemT, ColumnT]:
        item_id = item.id

        def compensate() -> None:
            self._set_column(item_id, from_column)

        attempt: MoveAttempt[ItemT, ColumnT] = MoveAttempt(
            request=MoveRequest(item=item, from_column=from_column, to_column=to_column),
            compensate=compensate,
        )
        superseded = self._pending.get(item_id)
        if superseded is not None:
            # Last write wins; the earlier attempt may still roll back over us.
            logger.warning(
                "Move of {} started while an earlier move is unconfirmed: {}",
                item_id,
                summarize_move(superseded),
            )
        self._set_column(item_id, to_column)
        attempt.state = MoveState.APPLIED
        return attempt

    async def _confirm(self, attempt: MoveAttempt[ItemT, ColumnT]) -> None:
        if self._on_move is None:
            attempt.state = MoveState.COMMITTED
            return

        item_id = attempt.request.item.id
        attempt.state = MoveState.CONFIRMING
        self._pending[item_id] = attempt
        try:
            result = self._on_move(attempt.request)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            attempt.error = exc
            attempt.compensate()
            attempt.state = MoveState.ROLLED_BACK
            logger.error("Move failed, rolled back: {}", summarize_move(attempt))
        else:
            attempt.state = MoveState.COMMITTED
            logger.debug("Move committed: {}", summarize_move(attempt))
        finally:
            if self._pending.get(item_id) is attempt:
                del self._pending[item_id]

    def _column_from_id(self, raw: str) -> ColumnT:
        if self._parse_column is None:
            return raw  # type: ignore[return-value]
        return self._parse_column(raw)

    def _set_column(self, item_id: str, column: ColumnT) -> bool:
        current = self._index.get(item_id)
        if current is None:
            return False
        updated = replace(current, column=column)
        self._replace(updated if i.id == item_id else i for i in self._items)
        return True

    def _replace(self, items: Iterable[ItemT]) -> None:
        snapshot = tuple(items)
        index: dict[str, ItemT] = {}
        for item in snapshot:
            if item.id in index:
                raise ValueError(f"Duplicate board item id: {item.id}")
            index[item.id] = item
        self._items = snapshot
        self._index = index
