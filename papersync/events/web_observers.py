"""Web-facing observers for sync and scanner events.

Subscribes to every event on the GLOBAL_EVENT_BUS and keeps a small in-memory
ring buffer the API exposes at /api/events, so the UI can show toasts for
syncs and scans finished by other requests.

Design:
  * Each event gets an auto-increment integer id (cursor); clients poll with
    since=<last_id_seen> and only receive newer events.
  * A Lock guards the buffer (uvicorn may serve requests from worker threads).
    The buffer is per process.
  * MAX_EVENTS caps memory use.
"""
from __future__ import annotations
from typing import List, Dict, Any
from threading import Lock
from datetime import datetime, timezone

from papersync.utilities.config import MAX_EVENTS
from .Event_Bus import GLOBAL_EVENT_BUS, ALL_EVENTS

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
_started = False


def _record(event_name: str, payload: Any):
    global _next_id
    evt: Dict[str, Any] = {
        'type': event_name,
        'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
    }
    if isinstance(payload, dict):
        for k, v in payload.items():
            if isinstance(v, (str, int, float, bool, list)) or v is None:
                evt.setdefault(k, v)
    with _lock:
        evt['id'] = _next_id
        _events.append(evt)
        _next_id += 1
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start(bus=GLOBAL_EVENT_BUS):
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    for name in ALL_EVENTS:
        bus.subscribe(name, _record)
    _started = True


def get_events(since: int | None = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive), plus next_cursor for the next poll."""
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    return {'events': data, 'next_cursor': next_cursor}


__all__ = ['start', 'get_events']
