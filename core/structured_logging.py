"""Shared structured JSON logging helpers."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

EventHook = Callable[[str, dict[str, Any]], None]


def emit_json_event(
    event_type: str,
    *,
    run_id: str | None = None,
    level: str = "info",
    **payload: Any,
) -> str:
    """Emit one JSON event line to stdout and return the rendered line."""
    event: dict[str, Any] = {
        "event_type": event_type,
        "level": level,
        "timestamp": datetime.now(UTC).isoformat(),
        "run_id": run_id,
    }
    event.update(payload)
    line = json.dumps(event, ensure_ascii=True, sort_keys=True, default=str)
    print(line)
    return line


def default_event_hook(event_type: str, payload: dict[str, Any]) -> None:
    """Event sink used when a component is not given one explicitly."""
    level = "warning" if event_type.endswith(("_failed", "_invalid_url")) else "info"
    emit_json_event(event_type, level=level, **payload)
