"""Simple Event Bus / Observer implementation for store change notifications.

Event names used so far:
  state.changed -> payload: full state copy after a set_state()
  state.undone  -> payload: full state copy after an undo()
  state.reset   -> payload: full state copy after a reset()

Subscribers are callables taking (event_name, payload). Each Store owns its
own bus; there is no process-wide instance.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
STATE_CHANGED = "state.changed"
STATE_UNDONE = "state.undone"
STATE_RESET = "state.reset"
STATE_EVENTS = (STATE_CHANGED, STATE_UNDONE, STATE_RESET)

Callback = Callable[[str, Any], None]


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callback]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callback) -> Callable[[], None]:
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)
		return lambda: self.unsubscribe(event_name, callback)

	def unsubscribe(self, event_name: str, callback: Callback):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def subscriber_count(self, event_name: str) -> int:
		return len(self._subscribers.get(event_name, []))

	def publish(self, event_name: str, payload: Any):
		"""Deliver synchronously, in subscription order; one failing callback never blocks the rest."""
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


__all__ = ['EventBus', 'STATE_CHANGED', 'STATE_UNDONE', 'STATE_RESET', 'STATE_EVENTS']
