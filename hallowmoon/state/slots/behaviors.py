"""
Slot behaviour contract.

One SlotBehavior per slot type. The reducer hands each behaviour a
context (state, slot, log) plus a SlotBehaviorUtils bound to the
machine's runtime, and gets back a SlotActionResult. A behaviour that
refuses returns the input state with one explanatory log line and
performed=False.

Optional hooks:
    lock_duration_ms  - override the per-type lock length
    accepts_card      - veto a card before the slot's `accepted` filter
    on_card_placed    - take over placement (study composition rules)
"""

from dataclasses import dataclass, field

from ...runtime import Runtime
from ..content import CardTemplate
from ..helpers import (
    add_to_hand,
    append_log,
    apply_discovery,
    apply_resources,
    instantiate_card,
    remove_from_hand,
    spawn_opportunity,
)
from ..schema import (
    CardArchetype,
    CardInstance,
    DiscoverySeed,
    GameState,
    ResourceDelta,
    Resources,
    Slot,
)


@dataclass
class SlotActionResult:
    state: GameState
    log: list[str]
    performed: bool


@dataclass
class SlotActivationContext:
    state: GameState
    slot: Slot
    log: list[str]


@dataclass
class SlotCardPlacementContext:
    state: GameState
    slot: Slot
    card: CardInstance
    occupant: CardInstance | None
    assistant: CardInstance | None
    attachments: list[CardInstance] = field(default_factory=list)
    log: list[str] = field(default_factory=list)


@dataclass
class SlotCardPlacementResult:
    state: GameState
    log: list[str]
    handled: bool


class SlotBehaviorUtils:
    """Helpers behaviours may call, bound to one runtime."""

    def __init__(self, runtime: Runtime):
        self.runtime = runtime

    append_log = staticmethod(append_log)
    add_to_hand = staticmethod(add_to_hand)
    remove_from_hand = staticmethod(remove_from_hand)

    def apply_resources(self, current: Resources, delta: ResourceDelta) -> Resources:
        return apply_resources(current, delta)

    def apply_discovery(self, state: GameState, seed: DiscoverySeed,
                        log: list[str]) -> tuple[GameState, list[str]]:
        return apply_discovery(state, seed, self.runtime.now(), log)

    def random(self) -> float:
        return self.runtime.random()

    def now(self) -> int:
        return self.runtime.now()

    def spawn_opportunity(self, state: GameState, log: list[str]) -> tuple[GameState, list[str]]:
        return spawn_opportunity(state, log, self.runtime)

    def create_card(self, template: CardTemplate, location=None, existing=()) -> CardInstance:
        return instantiate_card(template, self.runtime, location, existing)


class SlotBehavior:
    """Base strategy. Subclasses implement activate()."""

    # Display labels; the console falls back to utils.slot_actions
    labels: dict[str, str] = {}

    def activate(self, context: SlotActivationContext, utils: SlotBehaviorUtils) -> SlotActionResult:
        raise NotImplementedError

    def lock_duration_ms(self, context: SlotActivationContext, utils: SlotBehaviorUtils) -> int | None:
        return None

    def accepts_card(self, card: CardInstance, context: SlotActivationContext,
                     utils: SlotBehaviorUtils) -> bool:
        return True

    def on_card_placed(self, context: SlotCardPlacementContext,
                       utils: SlotBehaviorUtils) -> SlotCardPlacementResult | None:
        return None


# -----------------------------------------------------------------------------
# Occupant checks
# -----------------------------------------------------------------------------

def refuse(context: SlotActivationContext, message: str) -> SlotActionResult:
    return SlotActionResult(
        state=context.state,
        log=append_log(context.log, message),
        performed=False,
    )


def require_occupant(context: SlotActivationContext, message: str):
    """(card, None) when the slot is occupied, else (None, refusal)."""
    occupant_id = context.slot.occupant_id
    card = context.state.cards.get(occupant_id) if occupant_id else None
    if card is None:
        return None, refuse(context, message)
    return card, None


def require_persona(context: SlotActivationContext, message: str, invalid_message: str):
    card, refusal = require_occupant(context, message)
    if refusal is not None:
        return None, refusal
    if card.type != CardArchetype.PERSONA:
        return None, refuse(context, invalid_message)
    return card, None
