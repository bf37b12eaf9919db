"""
Action labels and availability notes for slot summaries.

Pure presentation helpers: they never change state, they only tell a
host what the activate button should say and why it may be disabled.
Labels come from the slot behaviour's `labels` table when one is
supplied; the study derives its label from what is seated.
"""

from dataclasses import dataclass, field

from ..state.schema import CardArchetype, CardInstance, Resources, Slot, SlotState, SlotType
from ..state.slots.ritual import ritual_lore_cost
from ..state.slots.expedition import GLIMMER_COST

DEFAULT_LABELS: dict[SlotType, str] = {
    SlotType.WORK: "Work",
    SlotType.HEARTH: "Rest",
    SlotType.LOCATION: "Explore",
    SlotType.BEDROOM: "Slumber",
}


@dataclass
class SlotActionContext:
    slot: Slot
    occupant: CardInstance | None
    assistant: CardInstance | None
    attachments: list[CardInstance] = field(default_factory=list)
    resources: Resources = field(default_factory=Resources)
    can_explore_location: bool = True
    is_slot_interactive: bool = True
    labels: dict[str, str] = field(default_factory=dict)


@dataclass
class SlotActionMetadata:
    action_label: str | None
    can_activate: bool
    availability_note: str | None


def _is_persona(card: CardInstance | None) -> bool:
    return card is not None and card.type == CardArchetype.PERSONA


def _study_label(context: SlotActionContext) -> str:
    occupant = context.occupant
    persona_present = _is_persona(occupant) or _is_persona(context.assistant)
    occupant_is_dream = occupant.has_trait("dream")
    occupant_is_journal = occupant.has_trait("journal")
    journal_attached = any(card.has_trait("journal") for card in context.attachments)

    if persona_present and occupant_is_dream and journal_attached:
        return "Record Dream"
    if persona_present and (occupant_is_journal or journal_attached):
        return "Annotate Journal"
    if occupant_is_dream:
        return "Interpret Dream"
    return context.labels.get("activate", "Study")


def derive_action_label(context: SlotActionContext) -> str | None:
    if context.occupant is None:
        return None

    slot = context.slot
    if slot.type == SlotType.STUDY:
        return _study_label(context)
    if slot.type == SlotType.LOCATION and slot.state == SlotState.DAMAGED:
        return context.labels.get("repair", "Clear")
    return context.labels.get("activate", DEFAULT_LABELS.get(slot.type, "Activate"))


def get_slot_action_metadata(context: SlotActionContext) -> SlotActionMetadata:
    """Label, activatability and an optional reason the slot can't fire."""
    label = derive_action_label(context)
    occupant = context.occupant
    slot = context.slot

    if occupant is None or not context.is_slot_interactive:
        return SlotActionMetadata(label, False, None)

    def blocked(note: str) -> SlotActionMetadata:
        return SlotActionMetadata(label, False, note)

    if slot.type in (SlotType.HEARTH, SlotType.WORK, SlotType.BEDROOM):
        if not _is_persona(occupant):
            return blocked("Only a persona may make use of this slot.")

    elif slot.type == SlotType.LOCATION:
        if not _is_persona(occupant):
            return blocked("Only a persona can tend to this site.")
        if slot.state != SlotState.DAMAGED and not context.can_explore_location:
            return blocked("All discoverable opportunities have been secured here for now.")

    elif slot.type == SlotType.RITUAL:
        if not _is_persona(occupant):
            return blocked("A persona must anchor the ritual.")
        cost = ritual_lore_cost(slot.level)
        if context.resources.lore < cost:
            return blocked(f"Requires {cost} lore to perform this ritual.")

    elif slot.type == SlotType.EXPEDITION:
        if not _is_persona(occupant):
            return blocked("Only a persona can brave the Umbral Gate.")
        if context.resources.glimmer < GLIMMER_COST:
            return blocked(f"Requires {GLIMMER_COST} glimmer to light the path beyond the gate.")

    return SlotActionMetadata(label, True, None)


def describe_card_for_status(card: CardInstance | None) -> str | None:
    """'Name (Type)' for status lines; None when there is no card."""
    if card is None:
        return None
    return f"{card.name} ({card.type.value.capitalize()})"
