"""
Location slots: the manor, the town, the forest, and damaged rooms.

Activating an intact location sends its persona scouting; the findings
are staged as a pending exploration and applied by the pending-action
resolver once the lock matures. Activating a damaged room starts its
repair, which then progresses one step per ADVANCE_TIME.

Each location has a definition: which slot templates it can reveal,
whether the origin slot disappears once everything is found, and the
narrative lines used along the way.
"""

from dataclasses import dataclass, field
from typing import Callable

from ...utils.time import format_duration_label
from ..content import MANOR_ROOM_TEMPLATE_KEYS, SLOT_LOCK_BASE_MS, SLOT_TEMPLATES, base_lock_duration_ms
from ..schema import (
    ExploreLocationAction,
    ExploreManorAction,
    LocationTag,
    SlotState,
)
from .behaviors import (
    SlotActionResult,
    SlotActivationContext,
    SlotBehavior,
    SlotBehaviorUtils,
    refuse,
    require_persona,
)

DAMAGED_LOCK_MULTIPLIER = 2


@dataclass(frozen=True)
class LocationMessages:
    start: Callable[[str, str], str]
    already_exploring: Callable[[str, str], str]
    nothing_to_find: Callable[[str], str]
    # (persona, slot, revealed names, remaining discoveries, slot removed)
    reveal: Callable[[str, str, list[str], int, bool], str]
    nothing_found: Callable[[str, str], str]


def _default_reveal(persona, slot, revealed, remaining, removed):
    suffix = "More leads await discovery." if remaining > 0 else "The site is fully charted."
    return f"{persona} explores {slot}, revealing {', '.join(revealed)}. {suffix}"


DEFAULT_MESSAGES = LocationMessages(
    start=lambda persona, slot: (
        f"{persona} ventures into {slot}, scouting for new opportunities. They will report back soon."
    ),
    already_exploring=lambda persona, slot: f"{persona} is already scouting {slot}.",
    nothing_to_find=lambda slot: f"{slot} holds no new opportunities for now.",
    reveal=_default_reveal,
    nothing_found=lambda persona, slot: f"{persona} finds nothing new within {slot}.",
)


def _manor_reveal(persona, slot, revealed, remaining, removed):
    rooms = ", ".join(revealed)
    if removed:
        return (
            f"{persona} charts the manor’s halls, revealing {rooms} "
            "before the manor’s entrance seals behind them."
        )
    return f"{persona} charts the manor’s halls, revealing {rooms}. More ruined chambers await discovery."


MANOR_MESSAGES = LocationMessages(
    start=lambda persona, slot: (
        f"{persona} ventures deeper into {slot}, mapping its passages. They will report back soon."
    ),
    already_exploring=lambda persona, slot: f"{persona} is already charting the manor’s halls.",
    nothing_to_find=lambda slot: "The manor is quiet for now; every discovered room awaits restoration.",
    reveal=_manor_reveal,
    nothing_found=lambda persona, slot: (
        f"{persona} finds no further chambers awaiting discovery "
        "as the manor’s entrance seals behind them."
    ),
)


def _town_reveal(persona, slot, revealed, remaining, removed):
    sites = ", ".join(revealed)
    if remaining > 0:
        return f"{persona} surveys {slot}, establishing access to {sites}. The streets whisper of more locales."
    return f"{persona} surveys {slot}, establishing access to {sites}. The town’s paths feel familiar now."


TOWN_MESSAGES = LocationMessages(
    start=DEFAULT_MESSAGES.start,
    already_exploring=DEFAULT_MESSAGES.already_exploring,
    nothing_to_find=DEFAULT_MESSAGES.nothing_to_find,
    reveal=_town_reveal,
    nothing_found=DEFAULT_MESSAGES.nothing_found,
)

FOREST_MESSAGES = LocationMessages(
    start=lambda persona, slot: (
        f"{persona} slips into {slot}, following moonlit trails in search of hidden clearings."
    ),
    already_exploring=DEFAULT_MESSAGES.already_exploring,
    nothing_to_find=lambda slot: f"{slot} keeps its secrets tonight. Perhaps future scouts will have better luck.",
    reveal=_default_reveal,
    nothing_found=lambda persona, slot: (
        f"{persona} returns from {slot} empty-handed. The wilds reveal nothing new for now."
    ),
)


@dataclass(frozen=True)
class LocationDefinition:
    key: LocationTag
    discoverable_template_keys: tuple[str, ...] = field(default_factory=tuple)
    remove_when_complete: bool = False
    allow_exploration_when_exhausted: bool = True
    reveals_per_exploration: int = 1
    messages: LocationMessages = DEFAULT_MESSAGES


LOCATION_DEFINITIONS: dict[LocationTag, LocationDefinition] = {
    LocationTag.MANOR: LocationDefinition(
        key=LocationTag.MANOR,
        discoverable_template_keys=MANOR_ROOM_TEMPLATE_KEYS,
        remove_when_complete=True,
        allow_exploration_when_exhausted=False,
        messages=MANOR_MESSAGES,
    ),
    LocationTag.TOWN: LocationDefinition(
        key=LocationTag.TOWN,
        discoverable_template_keys=("town-chapel", "town-market"),
        messages=TOWN_MESSAGES,
    ),
    LocationTag.FOREST: LocationDefinition(
        key=LocationTag.FOREST,
        messages=FOREST_MESSAGES,
    ),
}


def get_location_definition(location: LocationTag | None) -> LocationDefinition | None:
    if location is None:
        return None
    return LOCATION_DEFINITIONS.get(location)


def template_present(existing_keys, template_key: str) -> bool:
    """A template counts as found if it, or the room it repairs into, exists."""
    template = SLOT_TEMPLATES.get(template_key)
    if template is None:
        return True
    if template.key in existing_keys:
        return True
    if template.repair is not None:
        restored = SLOT_TEMPLATES.get(template.repair.target_key)
        if restored is not None and restored.key in existing_keys:
            return True
    return False


def missing_location_template_keys(slots, location: LocationTag) -> list[str]:
    """Discoverable templates for `location` not yet on the map, in order."""
    definition = LOCATION_DEFINITIONS.get(location)
    if definition is None:
        return []
    existing = {slot.key for slot in slots}
    return [key for key in definition.discoverable_template_keys if not template_present(existing, key)]


# -----------------------------------------------------------------------------
# Behaviour
# -----------------------------------------------------------------------------

class LocationBehavior(SlotBehavior):

    labels = {"activate": "Explore", "repair": "Clear"}

    def lock_duration_ms(self, context: SlotActivationContext, utils: SlotBehaviorUtils) -> int | None:
        if context.slot.state == SlotState.DAMAGED:
            return base_lock_duration_ms(context.slot.type) * DAMAGED_LOCK_MULTIPLIER
        return None

    def activate(self, context: SlotActivationContext, utils: SlotBehaviorUtils) -> SlotActionResult:
        slot = context.slot
        if slot.state == SlotState.DAMAGED and slot.repair is not None:
            return self._repair(context, utils)
        return self._explore(context, utils)

    def _explore(self, context: SlotActivationContext, utils: SlotBehaviorUtils) -> SlotActionResult:
        state, slot = context.state, context.slot
        persona, refusal = require_persona(
            context,
            "Send a persona to scout this location before attempting to explore it.",
            "Only a living persona can brave this territory.",
        )
        if refusal:
            return refusal

        definition = get_location_definition(slot.location)
        if definition is None:
            return refuse(context, f"{slot.name} cannot be explored right now.")

        missing = missing_location_template_keys(state.slots.values(), definition.key)
        if not missing and not definition.allow_exploration_when_exhausted:
            return refuse(context, definition.messages.nothing_to_find(slot.name))

        if slot.pending_action is not None:
            return refuse(context, definition.messages.already_exploring(persona.name, slot.name))

        if definition.key == LocationTag.MANOR:
            pending = ExploreManorAction()
        else:
            pending = ExploreLocationAction(location=definition.key)

        staged = slot.model_copy(update={"pending_action": pending})
        return SlotActionResult(
            state.model_copy(update={"slots": {**state.slots, slot.id: staged}}),
            utils.append_log(context.log, definition.messages.start(persona.name, slot.name)),
            True,
        )

    def _repair(self, context: SlotActivationContext, utils: SlotBehaviorUtils) -> SlotActionResult:
        state, slot = context.state, context.slot
        persona, refusal = require_persona(
            context,
            "Assign a persona to clear the debris from this room.",
            "A persona must brave the dust and cobwebs to restore the room.",
        )
        if refusal:
            return refusal

        remaining = format_duration_label(slot.repair.remaining * SLOT_LOCK_BASE_MS)
        if slot.repair_started:
            return refuse(context, f"{persona.name} continues restoring {slot.name}. ≈ {remaining} remain.")

        started = slot.model_copy(update={"repair_started": True})
        return SlotActionResult(
            state.model_copy(update={"slots": {**state.slots, slot.id: started}}),
            utils.append_log(context.log, f"{persona.name} begins restoring {slot.name}. ≈ {remaining} remain."),
            True,
        )
