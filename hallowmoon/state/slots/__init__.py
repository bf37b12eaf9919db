"""Slot behaviours, one strategy per slot type, and their registry."""

from .behaviors import (
    SlotActionResult,
    SlotActivationContext,
    SlotBehavior,
    SlotBehaviorUtils,
    SlotCardPlacementContext,
    SlotCardPlacementResult,
)
from .location import LOCATION_DEFINITIONS, LocationDefinition, missing_location_template_keys
from .registry import SlotBehaviorRegistry, default_slot_behaviors

__all__ = [
    "SlotActionResult",
    "SlotActivationContext",
    "SlotBehavior",
    "SlotBehaviorUtils",
    "SlotCardPlacementContext",
    "SlotCardPlacementResult",
    "LOCATION_DEFINITIONS",
    "LocationDefinition",
    "missing_location_template_keys",
    "SlotBehaviorRegistry",
    "default_slot_behaviors",
]
