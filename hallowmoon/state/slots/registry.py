"""
Slot behaviour registry.

An explicit table from slot type to behaviour, handed to GameMachine at
construction. Tests and extensions register overrides on their own
registry instance; reset() restores the table it was built with.

Usage:
    registry = SlotBehaviorRegistry()          # built-in behaviours
    registry.register(SlotType.LOCATION, MyLocation())
    machine = GameMachine(runtime, registry=registry)
"""

import logging

from ..schema import SlotType
from .bedroom import BedroomBehavior
from .behaviors import SlotBehavior
from .expedition import ExpeditionBehavior
from .hearth import HearthBehavior
from .location import LocationBehavior
from .ritual import RitualBehavior
from .study import StudyBehavior
from .work import WorkBehavior

logger = logging.getLogger(__name__)


def default_slot_behaviors() -> dict[SlotType, SlotBehavior]:
    return {
        SlotType.HEARTH: HearthBehavior(),
        SlotType.WORK: WorkBehavior(),
        SlotType.STUDY: StudyBehavior(),
        SlotType.RITUAL: RitualBehavior(),
        SlotType.EXPEDITION: ExpeditionBehavior(),
        SlotType.LOCATION: LocationBehavior(),
        SlotType.BEDROOM: BedroomBehavior(),
    }


class SlotBehaviorRegistry:
    """Mutable slot-type -> behaviour table."""

    def __init__(self, behaviors: dict[SlotType, SlotBehavior] | None = None):
        self._defaults = dict(behaviors) if behaviors is not None else default_slot_behaviors()
        self._behaviors = dict(self._defaults)

    def get_behavior(self, slot_type: SlotType) -> SlotBehavior | None:
        return self._behaviors.get(slot_type)

    def register(self, slot_type: SlotType, behavior: SlotBehavior) -> None:
        logger.debug(f"Registering behavior for slot type {slot_type}")
        self._behaviors[slot_type] = behavior

    def unregister(self, slot_type: SlotType) -> None:
        self._behaviors.pop(slot_type, None)

    def reset(self) -> None:
        self._behaviors = dict(self._defaults)

    def registered_types(self) -> list[SlotType]:
        return list(self._behaviors)

    def __contains__(self, slot_type) -> bool:
        return slot_type in self._behaviors
