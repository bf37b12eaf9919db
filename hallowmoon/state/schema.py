"""
Pydantic models for Hallowmoon game state.

GameState is the aggregate root: it owns every card and slot. Reducer
steps never mutate a model in place; they build the next snapshot with
model_copy(update=...) and fresh dicts/lists, so any snapshot handed out
stays valid forever.

Serializes to plain JSON (model_dump(mode="json")) for the save layer.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


# -----------------------------------------------------------------------------
# Enums
# -----------------------------------------------------------------------------

class CardArchetype(str, Enum):
    PERSONA = "persona"
    INSPIRATION = "inspiration"
    RELIC = "relic"
    TASK = "task"


class SlotType(str, Enum):
    HEARTH = "hearth"
    WORK = "work"
    STUDY = "study"
    RITUAL = "ritual"
    EXPEDITION = "expedition"
    LOCATION = "location"      # Manor, town, forest, and damaged rooms
    BEDROOM = "bedroom"


class SlotState(str, Enum):
    ACTIVE = "active"
    DAMAGED = "damaged"


class SlotAcceptance(str, Enum):
    PERSONA_ONLY = "persona-only"
    NON_PERSONA = "non-persona"
    ANY = "any"


class LocationTag(str, Enum):
    MANOR = "manor"
    TOWN = "town"
    FOREST = "forest"


class AbilityKey(str, Enum):
    """Behaviour hooks a card can expose."""
    PERSONA_REFLECTION = "study:persona-reflection"
    REWARD = "study:reward"
    DREAM_RECORD = "study:dream-record"
    ASSIST_PERSONA = "assist:persona"
    ASSIST_JOURNAL = "assist:journal"
    EXPIRE_FADING = "expire:fading"


class AbilityEvent(str, Enum):
    ON_ACTIVATE = "on_activate"
    ON_ASSIST = "on_assist"
    ON_EXPIRE = "on_expire"


RESOURCE_KEYS = ("coin", "lore", "glimmer")

# Partial resource change, e.g. {"lore": 2, "glimmer": 1}
ResourceDelta = dict[str, int]


# -----------------------------------------------------------------------------
# Cards
# -----------------------------------------------------------------------------

class Resources(BaseModel):
    """Non-negative counters. Use helpers.apply_resources to change them."""
    coin: int = 0
    lore: int = 0
    glimmer: int = 0


class DiscoverySeed(BaseModel):
    key: str
    name: str
    description: str


class CardReward(BaseModel):
    resources: ResourceDelta | None = None
    discovery: DiscoverySeed | None = None


class CardAbilityMetadata(BaseModel):
    """Explicit per-card hooks; unset hooks fall back to the ability table."""
    on_activate: AbilityKey | None = None
    on_assist: AbilityKey | None = None
    on_expire: AbilityKey | None = None


class HandLocation(BaseModel):
    area: Literal["hand"] = "hand"


class SlotLocation(BaseModel):
    area: Literal["slot"] = "slot"
    slot_id: str


class LostLocation(BaseModel):
    """Staged outside the player's reach until a pending action delivers it."""
    area: Literal["lost"] = "lost"


CardLocation = Annotated[
    Union[HandLocation, SlotLocation, LostLocation],
    Field(discriminator="area"),
]


class CardInstance(BaseModel):
    id: str
    key: str  # Template key
    name: str
    type: CardArchetype
    description: str = ""
    traits: list[str] = Field(default_factory=list)
    permanent: bool = False
    remaining_turns: int | None = None  # None for permanent cards
    rewards: CardReward | None = None
    ability: CardAbilityMetadata | None = None
    location: CardLocation = Field(default_factory=HandLocation)

    def has_trait(self, trait: str) -> bool:
        return trait in self.traits

    @property
    def slot_id(self) -> str | None:
        if isinstance(self.location, SlotLocation):
            return self.location.slot_id
        return None


# -----------------------------------------------------------------------------
# Slots
# -----------------------------------------------------------------------------

class SlotRepair(BaseModel):
    target_key: str  # SLOT_TEMPLATES key the room becomes once restored
    remaining: int
    total: int


class ExploreManorAction(BaseModel):
    type: Literal["explore-manor"] = "explore-manor"


class ExploreLocationAction(BaseModel):
    type: Literal["explore-location"] = "explore-location"
    location: LocationTag | None = None


class DeliverCardsAction(BaseModel):
    type: Literal["deliver-cards"] = "deliver-cards"
    card_ids: list[str] = Field(default_factory=list)
    reveal: bool = False


PendingAction = Annotated[
    Union[ExploreManorAction, ExploreLocationAction, DeliverCardsAction],
    Field(discriminator="type"),
]


class Slot(BaseModel):
    id: str
    key: str
    name: str
    type: SlotType
    description: str = ""
    location: LocationTag | None = None
    level: int = 1
    upgrade_cost: int = 0
    traits: list[str] = Field(default_factory=list)
    accepted: SlotAcceptance = SlotAcceptance.ANY
    occupant_id: str | None = None
    assistant_id: str | None = None
    attached_card_ids: list[str] = Field(default_factory=list)
    unlocked: bool = True
    state: SlotState = SlotState.ACTIVE
    repair: SlotRepair | None = None
    repair_started: bool = False
    locked_until: int | None = None  # Epoch ms; busy until then
    lock_duration_ms: int | None = None  # Scaled length of the current lock
    lock_work_ms: float | None = None  # Unscaled work left as of lock_rebased_at
    lock_work_total_ms: float | None = None  # Unscaled length of the current lock
    lock_rebased_at: int | None = None
    pending_action: PendingAction | None = None

    def is_locked(self, now: int) -> bool:
        return self.locked_until is not None and self.locked_until > now

    def holds(self, card_id: str) -> bool:
        """True if the card sits here in any role."""
        return (
            self.occupant_id == card_id
            or self.assistant_id == card_id
            or card_id in self.attached_card_ids
        )


# -----------------------------------------------------------------------------
# Aggregate
# -----------------------------------------------------------------------------

class Discovery(BaseModel):
    id: str
    key: str  # Unique; unlocking a known key is a no-op
    name: str
    description: str
    cycle: int


class GameState(BaseModel):
    cycle: int = 1
    hero_card_id: str | None = None
    cards: dict[str, CardInstance] = Field(default_factory=dict)
    hand: list[str] = Field(default_factory=list)
    slots: dict[str, Slot] = Field(default_factory=dict)
    resources: Resources = Field(default_factory=Resources)
    log: list[str] = Field(default_factory=list)  # Newest first, capped
    discoveries: list[Discovery] = Field(default_factory=list)  # Newest first
    time_scale: float = 1.0
    paused_at: int | None = None
    pending_reveals: list[str] = Field(default_factory=list)

    @property
    def is_paused(self) -> bool:
        return self.paused_at is not None

    def effective_now(self, now: int) -> int:
        """Clock reading for lock checks; frozen at the pause instant."""
        if self.paused_at is not None:
            return self.paused_at
        return now

    def has_discovery(self, key: str) -> bool:
        return any(d.key == key for d in self.discoveries)
