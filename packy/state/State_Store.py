"""In-memory state store with snapshot undo and change notifications.

State shape:
    {
      'currentList': <packing list document> | None,
      'ui':          { currentView, currentSubview, modal, toast, isLoading },
      'templates':   [ <manifest entries> ],
      'settings':    <dict> | None
    }

Only currentList, templates and settings are "data": they are archived before
every set_state() and restored by undo(). The ui branch is transient and survives
an undo untouched.
"""
from __future__ import annotations
import copy
import json
import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, Union

from packy.domain.PackingList import now_iso
from packy.events.Event_Bus import EventBus, STATE_CHANGED, STATE_UNDONE, STATE_RESET, STATE_EVENTS
from packy.utilities.config import HISTORY_LIMIT

logger = logging.getLogger(__name__)

DATA_KEYS = ('currentList', 'templates', 'settings')

Update = Union[Dict[str, Any], Callable[[Dict[str, Any]], Dict[str, Any]]]
Listener = Callable[[Dict[str, Any]], None]


def initial_state() -> Dict[str, Any]:
    return {
        'currentList': None,
        'ui': {
            'currentView': 'my-lists',
            'currentSubview': None,
            'modal': None,
            'toast': None,
            'isLoading': False,
        },
        'templates': [],
        'settings': None,
    }


class Store:
    def __init__(self, history_limit: int = HISTORY_LIMIT, event_bus: EventBus | None = None):
        if history_limit < 1:
            raise ValueError(f"history_limit must be positive: {history_limit}")
        self._state: Dict[str, Any] = initial_state()
        self._history: Deque[str] = deque(maxlen=history_limit)
        self._listeners: Dict[Listener, Callable[[str, Any], None]] = {}
        self.events = event_bus or EventBus()

    # --- Reading ----------------------------------------------------------
    def get_state(self) -> Dict[str, Any]:
        '''Returns a deep copy; changing it never touches the store.'''
        return copy.deepcopy(self._state)

    def select(self, selector: Callable[[Dict[str, Any]], Any]) -> Any:
        return selector(self.get_state())

    @property
    def history_limit(self) -> int:
        return self._history.maxlen

    @property
    def history_size(self) -> int:
        return len(self._history)

    def can_undo(self) -> bool:
        return len(self._history) > 0

    # --- Writing ----------------------------------------------------------
    def _snapshot(self) -> str:
        return json.dumps({key: self._state.get(key) for key in DATA_KEYS})

    def set_state(self, update: Update) -> None:
        '''Archives the data state, merges the update and notifies subscribers.

        update: a fragment dict, or a function receiving a state copy and returning one.
        The fragment is shallow-merged at the top level.
        '''
        fragment = update(self.get_state()) if callable(update) else update
        if not isinstance(fragment, dict):
            raise TypeError(f"State update must be a dict, got {type(fragment).__name__}")

        # deque(maxlen) evicts the oldest snapshot on overflow
        self._history.append(self._snapshot())
        self._state = {**self._state, **copy.deepcopy(fragment)}

        current = self._state.get('currentList')
        if current:
            current['meta'] = {**(current.get('meta') or {}), 'modifiedAt': now_iso()}

        self._notify(STATE_CHANGED)

    def undo(self) -> bool:
        '''Restores the most recent snapshot; returns False when there is nothing to undo.'''
        if not self._history:
            return False
        data = json.loads(self._history.pop())
        self._state = {**self._state, **data}
        logger.debug("Undo applied, %d snapshots left", len(self._history))
        self._notify(STATE_UNDONE)
        return True

    def reset(self) -> None:
        self._state = initial_state()
        self._history.clear()
        self._notify(STATE_RESET)

    # --- Observers --------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        '''Registers listener(state) for every change; returns a function that removes it.'''
        def _deliver(event_name: str, payload: Any):
            listener(payload)

        if listener in self._listeners:
            return lambda: self.unsubscribe(listener)
        self._listeners[listener] = _deliver
        for event_name in STATE_EVENTS:
            self.events.subscribe(event_name, _deliver)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        deliver = self._listeners.pop(listener, None)
        if deliver is None:
            return
        for event_name in STATE_EVENTS:
            self.events.unsubscribe(event_name, deliver)

    def _notify(self, event_name: str) -> None:
        self.events.publish(event_name, self.get_state())

    def debug(self) -> Dict[str, Any]:
        return {
            'state': self.get_state(),
            'historyLength': len(self._history),
            'listenerCount': len(self._listeners),
        }
