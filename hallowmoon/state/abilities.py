"""
Card ability resolution.

A card's effective hooks come from its explicit `ability` metadata first,
then from CARD_ABILITY_FALLBACKS. Pure functions of the card.
"""

from dataclasses import dataclass

from .content.abilities import CARD_ABILITY_FALLBACKS, AbilityCondition, AbilityFallback
from .schema import AbilityEvent, AbilityKey, CardInstance


@dataclass(frozen=True)
class ResolvedCardAbility:
    on_activate: AbilityKey | None = None
    on_assist: AbilityKey | None = None
    on_expire: AbilityKey | None = None


def _matches(card: CardInstance, condition: AbilityCondition) -> bool:
    if condition.kind == "trait":
        return card.has_trait(condition.value)
    if condition.kind == "card-type":
        return card.type == condition.value
    if condition.kind == "has-rewards":
        return (card.rewards is not None) == condition.value
    if condition.kind == "permanent":
        return card.permanent == condition.value
    return False


def infer_ability(
    card: CardInstance,
    event: AbilityEvent,
    table: tuple[AbilityFallback, ...] = CARD_ABILITY_FALLBACKS,
) -> AbilityKey | None:
    """First fallback row for `event` whose conditions all hold."""
    for row in table:
        if row.event != event:
            continue
        if all(_matches(card, condition) for condition in row.conditions):
            return row.ability
    return None


def resolve_ability_key(card: CardInstance, event: AbilityEvent) -> AbilityKey | None:
    if card.ability is not None:
        explicit = getattr(card.ability, event.value)
        if explicit is not None:
            return explicit
    return infer_ability(card, event)


def resolve_card_ability(card: CardInstance) -> ResolvedCardAbility:
    return ResolvedCardAbility(
        on_activate=resolve_ability_key(card, AbilityEvent.ON_ACTIVATE),
        on_assist=resolve_ability_key(card, AbilityEvent.ON_ASSIST),
        on_expire=resolve_ability_key(card, AbilityEvent.ON_EXPIRE),
    )
