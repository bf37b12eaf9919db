"""
Pending-action resolver.

Second phase of every deferred slot outcome: activation stages a
pending action and stamps a lock; once the lock is within tolerance of
`now`, this commits the outcome and clears the pending action.

Running it again with nothing newly matured returns the state unchanged,
so the reducer calls it freely before activations and on time advance.
"""

import logging

from .content import SLOT_ACTION_COMPLETION_TOLERANCE_MS, SLOT_TEMPLATES
from .helpers import add_to_hand, append_log, instantiate_slot
from .occupancy import return_to_hand
from .schema import (
    DeliverCardsAction,
    ExploreLocationAction,
    ExploreManorAction,
    GameState,
    HandLocation,
    LocationTag,
    Slot,
)
from .slots.location import get_location_definition, missing_location_template_keys

logger = logging.getLogger(__name__)


def is_matured(slot: Slot, now: int) -> bool:
    if slot.locked_until is None:
        return True
    return slot.locked_until - now <= SLOT_ACTION_COMPLETION_TOLERANCE_MS


def _cleared(slot: Slot, **extra) -> Slot:
    return slot.model_copy(update={
        "pending_action": None,
        "locked_until": None,
        "lock_duration_ms": None,
        "lock_work_ms": None,
        "lock_work_total_ms": None,
        "lock_rebased_at": None,
        **extra,
    })


def complete_exploration(state: GameState, slot_id: str, location: LocationTag | None) -> GameState:
    slot = state.slots.get(slot_id)
    if slot is None:
        return state

    definition = get_location_definition(location)
    persona = state.cards.get(slot.occupant_id) if slot.occupant_id else None
    explorer = persona.name if persona else "Your retinue"

    if definition is None:
        state = state.model_copy(update={
            "slots": {**state.slots, slot_id: _cleared(slot, occupant_id=None, assistant_id=None)},
            "log": append_log(state.log, f"{explorer} returns from {slot.name} with nothing to report."),
        })
        return return_to_hand(state, persona.id) if persona else state

    missing = missing_location_template_keys(state.slots.values(), definition.key)
    revealed_keys = missing[:definition.reveals_per_exploration]
    remaining = len(missing) - len(revealed_keys)
    remove_slot = definition.remove_when_complete and remaining == 0

    slots = dict(state.slots)
    revealed_names = []
    for key in revealed_keys:
        new_slot = instantiate_slot(SLOT_TEMPLATES[key])
        slots[new_slot.id] = new_slot
        revealed_names.append(new_slot.name)

    if remove_slot:
        del slots[slot_id]
    else:
        slots[slot_id] = _cleared(slot, occupant_id=None, assistant_id=None)

    messages = definition.messages
    if revealed_names:
        message = messages.reveal(explorer, slot.name, revealed_names, remaining, remove_slot)
    else:
        message = messages.nothing_found(explorer, slot.name)

    logger.debug(f"Exploration of {slot_id} revealed {revealed_keys}")
    state = state.model_copy(update={"slots": slots, "log": append_log(state.log, message)})

    for card_id in (slot.occupant_id, slot.assistant_id):
        if card_id and card_id in state.cards:
            state = return_to_hand(state, card_id)
    return state


def deliver_cards(state: GameState, slot_id: str, card_ids: list[str], reveal: bool) -> GameState:
    """Move staged cards into the hand and clear the slot's pending action."""
    slot = state.slots[slot_id]
    cards = dict(state.cards)
    hand = list(state.hand)
    delivered = []

    for card_id in card_ids:
        card = cards.get(card_id)
        if card is None:
            continue
        cards[card_id] = card.model_copy(update={"location": HandLocation()})
        hand = add_to_hand(hand, card_id, to_front=False)
        delivered.append(card)

    log = state.log
    if delivered:
        log = append_log(log, f"{slot.name} yields {', '.join(c.name for c in delivered)}.")

    reveals = state.pending_reveals
    if reveal:
        reveals = [*reveals, *(c.id for c in delivered)]

    return state.model_copy(update={
        "cards": cards,
        "hand": hand,
        "slots": {**state.slots, slot_id: _cleared(slot)},
        "log": log,
        "pending_reveals": reveals,
    })


def resolve_pending_slot_actions(state: GameState, now: int) -> GameState:
    """Commit every pending action whose lock has matured."""
    for slot_id in list(state.slots):
        slot = state.slots.get(slot_id)
        if slot is None or slot.pending_action is None:
            continue
        if not is_matured(slot, now):
            continue

        action = slot.pending_action
        if isinstance(action, ExploreManorAction):
            state = complete_exploration(state, slot_id, LocationTag.MANOR)
        elif isinstance(action, ExploreLocationAction):
            state = complete_exploration(state, slot_id, action.location or slot.location)
        elif isinstance(action, DeliverCardsAction):
            state = deliver_cards(state, slot_id, action.card_ids, action.reveal)
    return state
