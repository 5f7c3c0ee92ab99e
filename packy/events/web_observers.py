"""Web-facing observer for store change events.

ChangeFeed subscribes to a store's event bus for:
  - state.changed
  - state.undone
  - state.reset

and keeps a lightweight in-memory ring buffer of recent changes that the web
layer (FastAPI endpoint) can poll, so a page can refresh only when the list
actually changed.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * A Lock guards the buffer: sync FastAPI endpoints run in a thread pool.
  * MAX_EVENTS caps memory use.
"""
from __future__ import annotations
import logging
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, List, Optional

from .Event_Bus import EventBus, STATE_EVENTS

logger = logging.getLogger(__name__)

MAX_EVENTS = 300  # keep a few hundred recent events


def _summarize(event_name: str, state: Any) -> Dict[str, Any]:
    evt: Dict[str, Any] = {
        'type': event_name,
        'ts': datetime.now(timezone.utc).isoformat(),
    }
    if not isinstance(state, dict):
        return evt
    ui = state.get('ui') or {}
    evt['view'] = ui.get('currentView')
    document = state.get('currentList')
    if document:
        items = document.get('items') or []
        evt['trip'] = (document.get('trip') or {}).get('name')
        evt['items'] = len(items)
        evt['packed'] = sum(1 for i in items if i.get('packed'))
        evt['modifiedAt'] = (document.get('meta') or {}).get('modifiedAt')
    else:
        evt['trip'] = None
    return evt


class ChangeFeed:
    def __init__(self, max_events: int = MAX_EVENTS):
        self._lock = Lock()
        self._events: List[Dict[str, Any]] = []
        self._next_id = 1
        self.max_events = max_events
        self._bus: Optional[EventBus] = None

    def _record(self, event_name: str, payload: Any):  # signature expected by EventBus
        evt = _summarize(event_name, payload)
        with self._lock:
            evt['id'] = self._next_id
            self._events.append(evt)
            self._next_id += 1
            # Trim buffer
            if len(self._events) > self.max_events:
                del self._events[: len(self._events) - self.max_events]

    def start(self, bus: EventBus) -> 'ChangeFeed':
        """Idempotent start: subscribe to the given bus once."""
        if self._bus is bus:
            return self
        if self._bus is not None:
            self.stop()
        for event_name in STATE_EVENTS:
            bus.subscribe(event_name, self._record)
        self._bus = bus
        logger.debug("Change feed attached to %r", bus)
        return self

    def stop(self) -> None:
        if self._bus is None:
            return
        for event_name in STATE_EVENTS:
            self._bus.unsubscribe(event_name, self._record)
        self._bus = None

    def get_events(self, since: int | None = None) -> Dict[str, Any]:
        """Return events newer than 'since' (exclusive).

        If since is None, returns every buffered event. next_cursor is the largest
        id seen so the client can poll with since=next_cursor.
        """
        with self._lock:
            if since is None:
                data = list(self._events)
            else:
                data = [e for e in self._events if e['id'] > since]
            next_cursor = self._events[-1]['id'] if self._events else since or 0
        return {'events': data, 'next_cursor': next_cursor}


__all__ = ['ChangeFeed', 'MAX_EVENTS']
