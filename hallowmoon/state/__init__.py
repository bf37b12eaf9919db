"""State management for Hallowmoon games."""

from .schema import (
    AbilityEvent,
    AbilityKey,
    CardArchetype,
    CardInstance,
    Discovery,
    GameState,
    LocationTag,
    Resources,
    Slot,
    SlotAcceptance,
    SlotState,
    SlotType,
)
from .actions import (
    AcknowledgeCardReveal,
    ActionType,
    ActivateSlot,
    AdvanceTime,
    GameAction,
    MoveCardToSlot,
    RecallCard,
    ResolvePendingSlotActions,
    SetTimeScale,
    UpgradeSlot,
    parse_action,
)
from .machine import GameMachine
from .slots import SlotBehavior, SlotBehaviorRegistry
from .store import GameStore, JsonGameStore, MemoryGameStore, SaveGame
from .event_bus import (
    EventBus,
    EventType,
    GameEvent,
    get_event_bus,
    reset_event_bus,
)
from .session import GameSession, SessionError

__all__ = [
    # Schema
    "AbilityEvent",
    "AbilityKey",
    "CardArchetype",
    "CardInstance",
    "Discovery",
    "GameState",
    "LocationTag",
    "Resources",
    "Slot",
    "SlotAcceptance",
    "SlotState",
    "SlotType",
    # Actions
    "AcknowledgeCardReveal",
    "ActionType",
    "ActivateSlot",
    "AdvanceTime",
    "GameAction",
    "MoveCardToSlot",
    "RecallCard",
    "ResolvePendingSlotActions",
    "SetTimeScale",
    "UpgradeSlot",
    "parse_action",
    # Reducer
    "GameMachine",
    "SlotBehavior",
    "SlotBehaviorRegistry",
    # Store
    "GameStore",
    "JsonGameStore",
    "MemoryGameStore",
    "SaveGame",
    # Event Bus
    "EventBus",
    "EventType",
    "GameEvent",
    "get_event_bus",
    "reset_event_bus",
    # Session
    "GameSession",
    "SessionError",
]
