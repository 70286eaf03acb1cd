"""Load optional board configuration from `.kanban_sync/config.yaml`."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .constants import (
    CONFIG_FILE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_STALE_AFTER_SECONDS,
    STATE_DIR_NAME,
    VALID_LOG_LEVELS,
)
from .io_utils import _load_data_with_error


def load_board_config(project_dir: Path) -> tuple[dict[str, Any], str | None]:
    """Load the optional board config file.

    Args:
        project_dir: Project root directory.

    Returns:
        A tuple of `(config, error_message)`. If the file is missing, returns `({}, None)`.
    """
    project_dir = project_dir.resolve()
    path = project_dir / STATE_DIR_NAME / CONFIG_FILE
    if not path.exists():
        return {}, None
    data, err = _load_data_with_error(path, {})
    if err:
        return {}, err
    return data, None


def _get_nested(config: dict[str, Any], *keys: str) -> Any:
    cur: Any = config
    for key in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def _positive_int(raw: Any, default: int) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return default
    value = int(raw)
    return value if value > 0 else default


def get_feed_config(config: dict[str, Any]) -> dict[str, int]:
    """Extract the column feed settings from the board config.

    Args:
        config: Board configuration dictionary.

    Returns:
        A mapping with `page_size` and `stale_after_seconds`, defaults filled in.
    """
    raw = _get_nested(config, "feed")
    raw = raw if isinstance(raw, dict) else {}
    return {
        "page_size": _positive_int(raw.get("page_size"), DEFAULT_PAGE_SIZE),
        "stale_after_seconds": _positive_int(raw.get("stale_after_seconds"), DEFAULT_STALE_AFTER_SECONDS),
    }


def get_logging_config(config: dict[str, Any]) -> dict[str, str]:
    """Extract the logging settings from the board config.

    Args:
        config: Board configuration dictionary.

    Returns:
        A mapping with a valid loguru `level`.
    """
    raw = _get_nested(config, "logging", "level")
    if isinstance(raw, str) and raw.upper() in VALID_LOG_LEVELS:
        return {"level": raw.upper()}
    return {"level": DEFAULT_LOG_LEVEL}
