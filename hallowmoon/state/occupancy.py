"""
Slot occupancy: taking cards out of a slot and seating them in one.

A slot holds up to three roles: occupant, assistant, and an ordered set of
attachments. When the occupant leaves, the assistant is promoted.
"""

from .helpers import add_to_hand, remove_from_hand
from .schema import GameState, HandLocation, Slot, SlotLocation


def release_from_slot(slot: Slot, card_id: str) -> Slot:
    """Slot with `card_id` removed from whichever role it held."""
    update: dict = {}
    if slot.occupant_id == card_id:
        promoted = slot.assistant_id if slot.assistant_id != card_id else None
        update["occupant_id"] = promoted
        update["assistant_id"] = None
    elif slot.assistant_id == card_id:
        update["assistant_id"] = None
    if card_id in slot.attached_card_ids:
        update["attached_card_ids"] = [cid for cid in slot.attached_card_ids if cid != card_id]
    if not update:
        return slot
    return slot.model_copy(update=update)


def detach_card(state: GameState, card_id: str) -> GameState:
    """Take a card out of the hand or its slot. Its location is left as is."""
    card = state.cards[card_id]
    if card.location.area == "hand":
        return state.model_copy(update={"hand": remove_from_hand(state.hand, card_id)})

    slot_id = card.slot_id
    if slot_id is not None and slot_id in state.slots:
        previous = state.slots[slot_id]
        released = release_from_slot(previous, card_id)
        if released is not previous:
            return state.model_copy(update={"slots": {**state.slots, slot_id: released}})
    return state


def return_to_hand(state: GameState, card_id: str, to_front: bool = True) -> GameState:
    card = state.cards[card_id]
    return state.model_copy(update={
        "cards": {**state.cards, card_id: card.model_copy(update={"location": HandLocation()})},
        "hand": add_to_hand(state.hand, card_id, to_front),
    })


def place_in_slot(state: GameState, card_id: str, slot_id: str) -> GameState:
    """Point a card at a slot. Does not touch the slot's role fields."""
    card = state.cards[card_id]
    located = card.model_copy(update={"location": SlotLocation(slot_id=slot_id)})
    return state.model_copy(update={"cards": {**state.cards, card_id: located}})


def seat_card(state: GameState, card_id: str, slot_id: str) -> GameState:
    """
    Make `card_id` the occupant of `slot_id`.

    A different occupant already seated is evicted to the hand together
    with the assistant and every attachment.
    """
    slot = state.slots[slot_id]
    occupant_id = slot.occupant_id

    if occupant_id and occupant_id != card_id:
        displaced = [occupant_id]
        if slot.assistant_id and slot.assistant_id != card_id:
            displaced.append(slot.assistant_id)
        displaced.extend(cid for cid in slot.attached_card_ids if cid != card_id)
        for cid in displaced:
            if cid in state.cards:
                state = return_to_hand(state, cid)
        seated = slot.model_copy(update={
            "occupant_id": card_id,
            "assistant_id": None,
            "attached_card_ids": [],
        })
    else:
        attachments = list(dict.fromkeys(cid for cid in slot.attached_card_ids if cid != card_id))
        seated = slot.model_copy(update={
            "occupant_id": card_id,
            "assistant_id": slot.assistant_id if slot.assistant_id != card_id else None,
            "attached_card_ids": attachments,
        })

    state = state.model_copy(update={"slots": {**state.slots, slot_id: seated}})
    return place_in_slot(state, card_id, slot_id)
