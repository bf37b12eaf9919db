"""
Ability fallback table.

When a card has no explicit hook for an event, the first row whose
conditions all match supplies one. Rows are evaluated top-down, so order
is priority: a dream persona would still record dreams.
"""

from dataclasses import dataclass
from typing import Literal

from ..schema import AbilityEvent, AbilityKey, CardArchetype

ConditionKind = Literal["trait", "card-type", "has-rewards", "permanent"]


@dataclass(frozen=True)
class AbilityCondition:
    kind: ConditionKind
    value: str | bool


@dataclass(frozen=True)
class AbilityFallback:
    event: AbilityEvent
    ability: AbilityKey
    conditions: tuple[AbilityCondition, ...]
    description: str = ""


CARD_ABILITY_FALLBACKS: tuple[AbilityFallback, ...] = (
    AbilityFallback(
        AbilityEvent.ON_ACTIVATE,
        AbilityKey.DREAM_RECORD,
        (AbilityCondition("trait", "dream"),),
        "Dream-tagged cards record their visions when studied.",
    ),
    AbilityFallback(
        AbilityEvent.ON_ACTIVATE,
        AbilityKey.PERSONA_REFLECTION,
        (AbilityCondition("card-type", CardArchetype.PERSONA.value),),
        "Personas reflect on their journeys when studied.",
    ),
    AbilityFallback(
        AbilityEvent.ON_ACTIVATE,
        AbilityKey.REWARD,
        (AbilityCondition("has-rewards", True),),
        "Cards that promise rewards yield them when studied.",
    ),
    AbilityFallback(
        AbilityEvent.ON_ASSIST,
        AbilityKey.ASSIST_JOURNAL,
        (AbilityCondition("trait", "journal"),),
        "Journals assist with recording dreams.",
    ),
    AbilityFallback(
        AbilityEvent.ON_ASSIST,
        AbilityKey.ASSIST_PERSONA,
        (AbilityCondition("card-type", CardArchetype.PERSONA.value),),
        "Personas lend aid when assisting other cards.",
    ),
    AbilityFallback(
        AbilityEvent.ON_EXPIRE,
        AbilityKey.EXPIRE_FADING,
        (AbilityCondition("permanent", False),),
        "Non-permanent cards fade when their time runs out.",
    ),
)
