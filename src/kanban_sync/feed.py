"""Per-status paginated task loading for the kanban board.

Each task status is a column backed by its own paged search.  The feed
keeps the loaded pages, tracks loading/error state per column and exposes
the flattened task list that :class:`~kanban_sync.task_board.TasksKanban`
reconciles against.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, Optional, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from .config import get_feed_config
from .constants import DEFAULT_PAGE_SIZE, DEFAULT_STALE_AFTER_SECONDS
from .task_engine.model import TASK_STATUSES, Task, TaskStatus


_PAGINATION_KEYS = {"page", "limit", "status"}


def _unique(tasks: Iterable[Task]) -> list[Task]:
    seen: set[str] = set()
    unique: list[Task] = []
    for task in tasks:
        if task.id in seen:
            continue
        seen.add(task.id)
        unique.append(task)
    return unique


class TaskSearchPage(BaseModel):
    """One page of a task search response."""

    model_config = ConfigDict(populate_by_name=True)

    tasks: list[dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    has_next_page: bool = Field(default=False, alias="hasNextPage")


SearchFn = Callable[..., Awaitable[Union[TaskSearchPage, dict[str, Any]]]]


@dataclass
class ColumnData:
    """Snapshot of one column of the feed."""

    status: TaskStatus
    tasks: list[Task]
    total: int
    has_more: bool
    is_loading: bool
    error: Optional[Exception] = None


@dataclass
class _ColumnState:
    pages: list[list[Task]] = field(default_factory=list)
    total: int = 0
    has_more: bool = False
    is_loading: bool = False
    error: Optional[Exception] = None
    fetched_at: Optional[float] = None


class KanbanTasksFeed:
    """Load task columns page by page.

    Parameters
    ----------
    search:
        Coroutine function called as ``search(**filters, status=..., page=...,
        limit=...)`` returning a :class:`TaskSearchPage` or its dict form.
    filters:
        Extra search parameters; ``page``, ``limit`` and ``status`` are
        controlled by the feed and ignored here.
    """

    def __init__(
        self,
        search: SearchFn,
        filters: Optional[dict[str, Any]] = None,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        stale_after: float = DEFAULT_STALE_AFTER_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._search = search
        self._filters = {k: v for k, v in (filters or {}).items() if k not in _PAGINATION_KEYS}
        self._page_size = page_size
        self._stale_after = stale_after
        self._clock = clock
        self._columns: dict[TaskStatus, _ColumnState] = {s: _ColumnState() for s in TASK_STATUSES}

    @classmethod
    def from_config(
        cls,
        search: SearchFn,
        config: dict[str, Any],
        filters: Optional[dict[str, Any]] = None,
    ) -> "KanbanTasksFeed":
        feed_config = get_feed_config(config)
        return cls(
            search,
            filters,
            page_size=feed_config["page_size"],
            stale_after=feed_config["stale_after_seconds"],
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Fetch the first page of every column."""
        await asyncio.gather(*(self._reload(status, 1) for status in TASK_STATUSES))

    async def load_more(self, status: TaskStatus) -> bool:
        """Fetch the next page of *status*; False if there is none or it failed."""
        state = self._columns[TaskStatus(status)]
        if not state.pages or not state.has_more or state.is_loading:
            return False
        state.is_loading = True
        try:
            page = await self._fetch(TaskStatus(status), len(state.pages) + 1)
        finally:
            state.is_loading = False
        if page is None:
            return False
        state.pages.append(self._to_tasks(page))
        state.has_more = page.has_next_page
        state.error = None
        return True

    async def refetch(self) -> None:
        """Reload every column, keeping as many pages as are loaded now."""
        await asyncio.gather(
            *(self._reload(status, max(1, len(state.pages))) for status, state in self._columns.items())
        )

    async def refresh_stale(self) -> list[TaskStatus]:
        """Refetch columns older than the stale window; returns those refreshed."""
        stale = [status for status in TASK_STATUSES if self.is_stale(status)]
        await asyncio.gather(
            *(self._reload(status, max(1, len(self._columns[status].pages))) for status in stale)
        )
        return stale

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def columns(self) -> list[ColumnData]:
        return [
            ColumnData(
                status=status,
                tasks=_unique(task for page in state.pages for task in page),
                total=state.total,
                has_more=state.has_more,
                is_loading=state.is_loading,
                error=state.error,
            )
            for status, state in self._columns.items()
        ]

    def tasks(self) -> list[Task]:
        """All loaded tasks, column by column; the first copy of an id wins."""
        return _unique(task for column in self.columns() for task in column.tasks)

    @property
    def is_loading(self) -> bool:
        return any(state.is_loading for state in self._columns.values())

    @property
    def has_error(self) -> bool:
        return any(state.error is not None for state in self._columns.values())

    def is_stale(self, status: TaskStatus) -> bool:
        fetched_at = self._columns[TaskStatus(status)].fetched_at
        if fetched_at is None:
            return True
        return self._clock() - fetched_at >= self._stale_after

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _reload(self, status: TaskStatus, page_count: int) -> bool:
        state = self._columns[status]
        state.is_loading = True
        try:
            pages: list[TaskSearchPage] = []
            for number in range(1, page_count + 1):
                page = await self._fetch(status, number)
                if page is None:
                    return False
                pages.append(page)
                if not page.has_next_page:
                    break
        finally:
            state.is_loading = False
        state.pages = [self._to_tasks(page) for page in pages]
        state.total = pages[0].total
        state.has_more = pages[-1].has_next_page
        state.error = None
        state.fetched_at = self._clock()
        logger.debug("Loaded {} page(s) of {} tasks", len(pages), status.value)
        return True

    async def _fetch(self, status: TaskStatus, page: int) -> Optional[TaskSearchPage]:
        try:
            raw = await self._search(**self._filters, status=status.value, page=page, limit=self._page_size)
            if isinstance(raw, TaskSearchPage):
                return raw
            return TaskSearchPage.model_validate(raw)
        except Exception as exc:
            self._columns[status].error = exc
            logger.warning("Failed to load {} tasks (page {}): {}", status.value, page, exc)
            return None

    @staticmethod
    def _to_tasks(page: TaskSearchPage) -> list[Task]:
        tasks: list[Task] = []
        for raw in page.tasks:
            errors = Task.validate_dict(raw)
            if errors:
                logger.warning("Skipping invalid task {}: {}", raw.get("id"), "; ".join(errors))
                continue
            tasks.append(Task.from_dict(raw))
        return tasks
