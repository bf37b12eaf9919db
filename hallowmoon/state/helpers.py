"""
Shared state helpers used by the reducer, slot behaviours and the resolver.

Everything here returns new containers; inputs are never mutated.
Functions that write narrative take a `log` list and hand back the
extended one alongside the state, so callers decide when it lands on
GameState.log.
"""

import logging

from ..runtime import Runtime, fraction_to_base36, to_base36
from .content import OPPORTUNITY_TEMPLATES, SLOT_TEMPLATES, CardTemplate, SlotTemplate
from .content.cards import create_card_instance
from .schema import (
    RESOURCE_KEYS,
    CardInstance,
    Discovery,
    DiscoverySeed,
    GameState,
    HandLocation,
    ResourceDelta,
    Resources,
    Slot,
    SlotRepair,
    SlotType,
)

logger = logging.getLogger(__name__)

LOG_CAPACITY = 14

UMBRAL_GATE_KEY = "umbral-gate"


# -----------------------------------------------------------------------------
# Log, hand, resources
# -----------------------------------------------------------------------------

def append_log(log: list[str], message: str) -> list[str]:
    """Prepend a message, dropping the oldest entries past capacity."""
    return [message, *log][:LOG_CAPACITY]


def remove_from_hand(hand: list[str], card_id: str) -> list[str]:
    return [entry for entry in hand if entry != card_id]


def add_to_hand(hand: list[str], card_id: str, to_front: bool = True) -> list[str]:
    filtered = remove_from_hand(hand, card_id)
    return [card_id, *filtered] if to_front else [*filtered, card_id]


def apply_resources(current: Resources, delta: ResourceDelta) -> Resources:
    """Add a delta, clamping every counter at zero."""
    return Resources(**{
        key: max(0, getattr(current, key) + delta.get(key, 0))
        for key in RESOURCE_KEYS
    })


def format_resource_delta(delta: ResourceDelta) -> str:
    """'2 lore and 1 glimmer' style fragment, in coin/lore/glimmer order."""
    fragments = [
        f"{delta[key]} {key}"
        for key in RESOURCE_KEYS
        if delta.get(key)
    ]
    if not fragments:
        return "nothing"
    if len(fragments) == 1:
        return fragments[0]
    return f"{', '.join(fragments[:-1])} and {fragments[-1]}"


# -----------------------------------------------------------------------------
# Instantiation
# -----------------------------------------------------------------------------

def create_card_id(template_key: str, runtime: Runtime, existing=()) -> str:
    """Template key plus a random base-36 suffix, unique against `existing`."""
    candidate = f"{template_key}-{fraction_to_base36(runtime.random())}"
    if candidate not in existing:
        return candidate
    n = 2
    while f"{candidate}-{n}" in existing:
        n += 1
    return f"{candidate}-{n}"


def instantiate_card(template: CardTemplate, runtime: Runtime,
                     location=None, existing=()) -> CardInstance:
    card_id = create_card_id(template.key, runtime, existing)
    return create_card_instance(template, card_id, location or HandLocation())


def instantiate_slot(template: SlotTemplate, slot_id: str | None = None) -> Slot:
    repair = None
    if template.repair is not None:
        repair = SlotRepair(
            target_key=template.repair.target_key,
            remaining=template.repair.time,
            total=template.repair.time,
        )
    return Slot(
        id=slot_id or f"slot-{template.key}",
        key=template.key,
        name=template.name,
        type=template.type,
        description=template.description,
        location=template.location,
        upgrade_cost=template.upgrade_cost,
        traits=list(template.traits),
        accepted=template.accepted,
        unlocked=template.unlocked,
        state=template.state,
        repair=repair,
    )


def spawn_opportunity(state: GameState, log: list[str], runtime: Runtime) -> tuple[GameState, list[str]]:
    """Draw one opportunity card uniformly and append it to the hand."""
    template = runtime.choice(OPPORTUNITY_TEMPLATES)
    card = instantiate_card(template, runtime, existing=state.cards)
    next_state = state.model_copy(update={
        "cards": {**state.cards, card.id: card},
        "hand": add_to_hand(state.hand, card.id, to_front=False),
    })
    return next_state, append_log(log, f"{card.name} drifts within reach, inviting attention.")


# -----------------------------------------------------------------------------
# Discoveries
# -----------------------------------------------------------------------------

def unlock_expedition_slot(state: GameState, log: list[str]) -> tuple[GameState, list[str]]:
    """Open the Chart Room once the Umbral Gate is known. Idempotent."""
    if any(slot.type == SlotType.EXPEDITION for slot in state.slots.values()):
        return state, log
    if not state.has_discovery(UMBRAL_GATE_KEY):
        return state, log

    slot = instantiate_slot(SLOT_TEMPLATES["expedition"]).model_copy(update={"unlocked": True})
    next_state = state.model_copy(update={"slots": {**state.slots, slot.id: slot}})
    return next_state, append_log(
        log, "The Umbral Gate yawns open, offering expeditions into the Hollow Ways."
    )


def apply_discovery(state: GameState, seed: DiscoverySeed, now: int,
                    log: list[str]) -> tuple[GameState, list[str]]:
    """Record a discovery once per key; repeats change nothing."""
    if state.has_discovery(seed.key):
        return state, log

    discovery = Discovery(
        id=f"{seed.key}-{to_base36(now)}",
        key=seed.key,
        name=seed.name,
        description=seed.description,
        cycle=state.cycle,
    )
    logger.info(f"Discovery unlocked: {seed.key}")
    next_state = state.model_copy(update={"discoveries": [discovery, *state.discoveries]})
    next_log = append_log(log, f"Discovery gained: {seed.name}. {seed.description}")
    return unlock_expedition_slot(next_state, next_log)


# -----------------------------------------------------------------------------
# Lookups
# -----------------------------------------------------------------------------

def slot_cards(state: GameState, slot: Slot) -> tuple[CardInstance | None, CardInstance | None, list[CardInstance]]:
    """(occupant, assistant, attachments) for a slot, skipping dangling ids."""
    occupant = state.cards.get(slot.occupant_id) if slot.occupant_id else None
    assistant = state.cards.get(slot.assistant_id) if slot.assistant_id else None
    attachments = [state.cards[cid] for cid in slot.attached_card_ids if cid in state.cards]
    return occupant, assistant, attachments

