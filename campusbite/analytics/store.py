from __future__ import annotations

import time
from collections import Counter, deque
from typing import Any

# Oldest events fall off once the log is full; totals keep counting.
MAX_EVENTS = 10_000

_events: deque[dict[str, Any]] = deque(maxlen=MAX_EVENTS)
_totals: Counter[str] = Counter()


def record_event(event_type: str, data: dict[str, Any]) -> None:
    _totals[event_type] += 1
    _events.append({
        "type": event_type,
        "timestamp": time.time(),
        **data,
    })


def get_events(
    event_type: str | None = None, since: float | None = None,
) -> list[dict[str, Any]]:
    """Snapshot of the retained events, filtered by type and/or start time."""
    return [
        e for e in _events
        if (event_type is None or e["type"] == event_type)
        and (since is None or e["timestamp"] >= since)
    ]


def get_event_totals() -> dict[str, int]:
    """Events recorded per type, including ones evicted from the log."""
    return dict(_totals)


def clear_events() -> None:
    _events.clear()
    _totals.clear()
