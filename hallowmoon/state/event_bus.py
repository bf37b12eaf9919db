"""
Publish/subscribe channel for session-level game events.

The reducer never sees this module. GameSession compares the state
before and after each dispatch and announces what changed; the console
(or a test) listens for the parts it cares about.

Usage:
    bus = get_event_bus()
    bus.on(EventType.SLOT_ADDED, lambda event: print(event.data["name"]))
    bus.emit(EventType.SLOT_ADDED, save_name="autosave", cycle=4,
             slot_id="slot-ruined-sanctum", name="Ruined Sanctum")
"""

import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 100


class EventType(Enum):
    # Reducer outcomes
    ACTION_DISPATCHED = "action.dispatched"
    DISCOVERY_UNLOCKED = "discovery.unlocked"
    CARDS_REVEALED = "cards.revealed"

    # Map changes
    SLOT_ADDED = "slot.added"
    SLOT_REMOVED = "slot.removed"

    # Clock
    TIME_SCALE_CHANGED = "time.scale_changed"

    # Session lifecycle
    GAME_STARTED = "game.started"
    GAME_LOADED = "game.loaded"
    GAME_SAVED = "game.saved"


@dataclass
class GameEvent:
    """One published event; `data` holds the type-specific fields."""

    type: EventType
    data: dict = field(default_factory=dict)
    save_name: str = ""
    cycle: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.type.value}] {self.data}"


Listener = Callable[[GameEvent], None]


class EventBus:
    """
    Synchronous dispatcher.

    emit() calls listeners in the order they subscribed and returns the
    event it built. A listener that raises is logged and skipped. The most
    recent HISTORY_LIMIT events are kept for inspection.
    """

    def __init__(self):
        self._subscribers: defaultdict[EventType, list[Listener]] = defaultdict(list)
        self._recent: deque[GameEvent] = deque(maxlen=HISTORY_LIMIT)

    def on(self, event_type: EventType, listener: Listener) -> None:
        listeners = self._subscribers[event_type]
        if listener not in listeners:
            listeners.append(listener)

    def off(self, event_type: EventType, listener: Listener) -> None:
        listeners = self._subscribers.get(event_type)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def emit(self, event_type: EventType, save_name: str = "", cycle: int = 0, **data) -> GameEvent:
        published = GameEvent(event_type, data, save_name, cycle)
        self._recent.append(published)

        for listener in tuple(self._subscribers.get(event_type, ())):
            try:
                listener(published)
            except Exception as e:
                logger.warning(f"Listener for {event_type.value} failed: {e}")
        return published

    def clear(self) -> None:
        """Drop every subscription; history is kept."""
        self._subscribers.clear()

    def get_history(self, event_type: EventType | None = None) -> list[GameEvent]:
        if event_type is None:
            return list(self._recent)
        return [event for event in self._recent if event.type == event_type]

    def listener_count(self, event_type: EventType) -> int:
        return len(self._subscribers.get(event_type, ()))


# -----------------------------------------------------------------------------
# Process-wide bus
# -----------------------------------------------------------------------------

_shared_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """The shared bus, created on first use."""
    global _shared_bus
    if _shared_bus is None:
        _shared_bus = EventBus()
    return _shared_bus


def reset_event_bus() -> None:
    """Forget the shared bus so the next get_event_bus() starts clean."""
    global _shared_bus
    _shared_bus = None
