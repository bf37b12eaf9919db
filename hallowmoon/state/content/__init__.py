"""Static content: pure data, no behaviour."""

from .abilities import CARD_ABILITY_FALLBACKS, AbilityCondition, AbilityFallback
from .cards import (
    HERO_PERSONA_TEMPLATES,
    HERO_TEMPLATE,
    OPPORTUNITY_TEMPLATES,
    CardTemplate,
    create_card_instance,
    get_persona_template,
)
from .slots import (
    MANOR_ROOM_TEMPLATE_KEYS,
    MIN_LOCK_MS,
    MIN_TIME_SCALE,
    SLOT_ACTION_COMPLETION_TOLERANCE_MS,
    SLOT_LOCK_BASE_MS,
    SLOT_LOCK_DURATIONS,
    SLOT_TEMPLATES,
    SlotTemplate,
    base_lock_duration_ms,
    get_slot_template,
)
from .story import build_story_log

__all__ = [
    "CARD_ABILITY_FALLBACKS",
    "AbilityCondition",
    "AbilityFallback",
    "HERO_PERSONA_TEMPLATES",
    "HERO_TEMPLATE",
    "OPPORTUNITY_TEMPLATES",
    "CardTemplate",
    "create_card_instance",
    "get_persona_template",
    "MANOR_ROOM_TEMPLATE_KEYS",
    "MIN_LOCK_MS",
    "MIN_TIME_SCALE",
    "SLOT_ACTION_COMPLETION_TOLERANCE_MS",
    "SLOT_LOCK_BASE_MS",
    "SLOT_LOCK_DURATIONS",
    "SLOT_TEMPLATES",
    "SlotTemplate",
    "base_lock_duration_ms",
    "get_slot_template",
    "build_story_log",
]
