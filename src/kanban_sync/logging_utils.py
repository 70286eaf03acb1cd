"""Configure loguru and summarize board moves for log output."""

from __future__ import annotations

import sys
from typing import Any

from loguru import logger

from .config import get_logging_config
from .constants import DEFAULT_LOG_LEVEL


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure loguru logger with the specified level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{module}</cyan>:<cyan>{line}</cyan>\n"
            "{message}"
        ),
    )


def configure_logging_from_config(config: dict[str, Any]) -> str:
    """Apply the `logging` block of the board config; returns the level used."""
    level = get_logging_config(config)["level"]
    configure_logging(level)
    return level


def summarize_move(attempt: Any) -> dict[str, Any]:
    """Render a compact, JSON-friendly summary of a move attempt.

    Args:
        attempt: A ``MoveAttempt`` (or None).

    Returns:
        A dictionary suitable for logging or serialization.
    """
    if attempt is None:
        return {"move": None}

    request = getattr(attempt, "request", None)
    item = getattr(request, "item", None)
    d: dict[str, Any] = {
        "item_id": getattr(item, "id", None),
        "from": _plain(getattr(request, "from_column", None)),
        "to": _plain(getattr(request, "to_column", None)),
    }

    state = getattr(attempt, "state", None)
    if state is not None:
        d["state"] = getattr(state, "value", str(state))

    error = getattr(attempt, "error", None)
    if error is not None:
        detail = f"{error.__class__.__name__}: {error}"
        d["error"] = (detail[:240] + "…") if len(detail) > 240 else detail
    return d


def _plain(value: Any) -> Any:
    return getattr(value, "value", value)

