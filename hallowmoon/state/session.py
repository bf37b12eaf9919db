"""
Game session lifecycle.

Holds the one mutable reference in the system: the current GameState.
Everything else is the pure reducer. The session dispatches actions,
persists snapshots through a GameStore and publishes what changed on
the event bus.

    session = GameSession(MemoryGameStore(), machine=GameMachine(runtime))
    session.new_game("persona-watcher")
    session.dispatch({"type": "ACTIVATE_SLOT", "slot_id": "slot-the-manor"})
    session.save()
"""

import logging
from pathlib import Path

from .. import HallowmoonError
from .actions import ActionType, parse_action
from .event_bus import EventBus, EventType, get_event_bus
from .machine import GameMachine
from .schema import GameState
from .store import GameStore, JsonGameStore, SaveGame

logger = logging.getLogger(__name__)

DEFAULT_SAVE_NAME = "autosave"


class SessionError(HallowmoonError):
    """Session used out of order, e.g. dispatch before a game exists."""
    pass


class GameSession:
    """
    Owns a GameMachine, the current state and a store.

    Storage is delegated to a GameStore implementation:
    - JsonGameStore for production (file-based)
    - MemoryGameStore for testing (in-memory)
    """

    def __init__(
        self,
        store: GameStore | Path | str = "saves",
        machine: GameMachine | None = None,
        bus: EventBus | None = None,
        autosave: bool = False,
    ):
        """
        Args:
            store: GameStore instance, or path for JsonGameStore
            machine: Reducer to drive; a default GameMachine if omitted
            bus: Event bus; the global one if omitted
            autosave: Save after every dispatch
        """
        if isinstance(store, (Path, str)):
            self.store = JsonGameStore(Path(store))
        else:
            self.store = store
        self.machine = machine or GameMachine()
        self.bus = bus or get_event_bus()
        self.autosave = autosave

        self.current: GameState | None = None
        self.save_name: str = DEFAULT_SAVE_NAME

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def new_game(self, persona_key: str | None = None, save_name: str = DEFAULT_SAVE_NAME) -> GameState:
        self.current = self.machine.initial_state(persona_key)
        self.save_name = save_name
        logger.info(f"New game '{save_name}' started (persona={persona_key or 'default'})")
        self.bus.emit(
            EventType.GAME_STARTED,
            save_name=save_name,
            cycle=self.current.cycle,
            hero_card_id=self.current.hero_card_id,
        )
        return self.current

    def load(self, name: str) -> GameState | None:
        save = self.store.load(name)
        if save is None:
            logger.warning(f"No save found for '{name}'")
            return None

        self.current = save.state
        self.save_name = save.meta.name
        logger.info(f"Loaded game '{save.meta.name}' at cycle {save.state.cycle}")
        self.bus.emit(EventType.GAME_LOADED, save_name=self.save_name, cycle=self.current.cycle)
        return self.current

    def save(self, name: str | None = None) -> SaveGame:
        state = self._require_state()
        if name:
            self.save_name = name
        save = SaveGame.from_state(self.save_name, state)
        self.store.save(save)
        self.bus.emit(EventType.GAME_SAVED, save_name=self.save_name, cycle=state.cycle)
        return save

    def list_saves(self) -> list[dict]:
        return self.store.list_all()

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def dispatch(self, action) -> GameState:
        """Reduce one action against the current state and publish the diff."""
        before = self._require_state()
        if isinstance(action, dict):
            action = parse_action(action)

        after = self.machine.reduce(before, action)
        self.current = after
        self._publish(before, after, ActionType(action.type))

        if self.autosave:
            try:
                self.save()
            except OSError as e:
                logger.warning(f"Autosave failed: {e}")
        return after

    def summaries(self, now: int | None = None) -> dict:
        """Slot summaries for the current state, with behaviour labels."""
        from .selectors import build_slot_summaries

        state = self._require_state()
        current = now if now is not None else self.machine.now()
        return build_slot_summaries(state, now=current, registry=self.machine.registry)

    def _require_state(self) -> GameState:
        if self.current is None:
            raise SessionError("No game loaded")
        return self.current

    def _publish(self, before: GameState, after: GameState, action_type: ActionType) -> None:
        emit = self.bus.emit
        context = {"save_name": self.save_name, "cycle": after.cycle}

        emit(EventType.ACTION_DISPATCHED, **context, action=action_type.value)

        known = {d.key for d in before.discoveries}
        for discovery in after.discoveries:
            if discovery.key not in known:
                emit(EventType.DISCOVERY_UNLOCKED, **context, key=discovery.key, name=discovery.name)

        revealed = [cid for cid in after.pending_reveals if cid not in before.pending_reveals]
        if revealed:
            emit(EventType.CARDS_REVEALED, **context, card_ids=revealed)

        for slot_id in after.slots.keys() - before.slots.keys():
            emit(EventType.SLOT_ADDED, **context, slot_id=slot_id, name=after.slots[slot_id].name)
        for slot_id in before.slots.keys() - after.slots.keys():
            emit(EventType.SLOT_REMOVED, **context, slot_id=slot_id, name=before.slots[slot_id].name)

        if before.time_scale != after.time_scale or before.is_paused != after.is_paused:
            emit(
                EventType.TIME_SCALE_CHANGED,
                **context,
                time_scale=after.time_scale,
                paused=after.is_paused,
            )
