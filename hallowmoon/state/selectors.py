"""
Read-only projections of GameState for display.

Selectors never change state. Lock countdowns compensate for a pause:
while paused_at is set the remaining time is frozen at what it was at
the pause instant.
"""

from dataclasses import dataclass, field

from ..runtime import system_clock
from ..utils.slot_actions import SlotActionContext, get_slot_action_metadata
from .schema import CardInstance, GameState, LocationTag, SlotState, SlotType
from .slots.location import LOCATION_DEFINITIONS, missing_location_template_keys

LocationAvailability = dict[LocationTag, bool]


@dataclass
class SlotSummary:
    occupant: CardInstance | None
    assistant: CardInstance | None
    attachments: list[CardInstance] = field(default_factory=list)
    is_hero_in_slot: bool = False
    can_explore_location: bool = True
    is_slot_interactive: bool = False
    is_locked: bool = False
    is_resolving: bool = False
    action_label: str | None = None
    can_activate: bool = False
    availability_note: str | None = None
    lock_remaining_ms: int = 0
    lock_total_ms: int | None = None


def build_location_exploration_availability(slots) -> LocationAvailability:
    """Per location: can it still be explored given the slots on the map?"""
    slots = list(slots)
    return {
        tag: definition.allow_exploration_when_exhausted
        or bool(missing_location_template_keys(slots, tag))
        for tag, definition in LOCATION_DEFINITIONS.items()
    }


def build_slot_summaries(
    state: GameState,
    now: int | None = None,
    location_availability: LocationAvailability | None = None,
    registry=None,
) -> dict[str, SlotSummary]:
    """
    One SlotSummary per slot, keyed by slot id.

    Args:
        state: Snapshot to project
        now: Epoch ms; defaults to the wall clock
        location_availability: Precomputed exploration availability
        registry: Optional SlotBehaviorRegistry supplying action labels
    """
    current = now if now is not None else system_clock()
    if location_availability is None:
        location_availability = build_location_exploration_availability(state.slots.values())
    paused_elapsed = max(0, current - state.paused_at) if state.paused_at is not None else 0

    summaries = {}
    for slot in state.slots.values():
        occupant = state.cards.get(slot.occupant_id) if slot.occupant_id else None
        assistant = state.cards.get(slot.assistant_id) if slot.assistant_id else None
        attachments = [state.cards[cid] for cid in slot.attached_card_ids if cid in state.cards]

        hero = state.hero_card_id
        is_hero_in_slot = bool(hero) and hero in (slot.occupant_id, slot.assistant_id)

        can_explore = True
        if slot.type == SlotType.LOCATION and slot.state != SlotState.DAMAGED and slot.location:
            can_explore = location_availability.get(slot.location, True)

        remaining = 0
        if slot.locked_until:
            remaining = max(0, slot.locked_until - current + paused_elapsed)
        is_locked = bool(slot.locked_until) and remaining > 0
        is_resolving = slot.pending_action is not None
        interactive = slot.unlocked and not is_locked and not is_resolving

        labels = {}
        if registry is not None:
            behavior = registry.get_behavior(slot.type)
            labels = behavior.labels if behavior is not None else {}

        metadata = get_slot_action_metadata(SlotActionContext(
            slot=slot,
            occupant=occupant,
            assistant=assistant,
            attachments=attachments,
            resources=state.resources,
            can_explore_location=can_explore,
            is_slot_interactive=interactive,
            labels=labels,
        ))

        summaries[slot.id] = SlotSummary(
            occupant=occupant,
            assistant=assistant,
            attachments=attachments,
            is_hero_in_slot=is_hero_in_slot,
            can_explore_location=can_explore,
            is_slot_interactive=interactive,
            is_locked=is_locked,
            is_resolving=is_resolving,
            action_label=metadata.action_label,
            can_activate=metadata.can_activate,
            availability_note=metadata.availability_note,
            lock_remaining_ms=remaining,
            lock_total_ms=slot.lock_duration_ms,
        )
    return summaries
