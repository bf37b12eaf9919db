"""
Study composition rules.

Dropping a card on a study slot first runs through these rules, top-down.
The first rule whose `matches` holds rewrites the slot's roles; when none
match, the reducer falls back to plain seating with eviction.

Roles are judged by resolved abilities, not card types: a "persona" is
anything that assists as assist:persona, a "journal" assists as
assist:journal, a "dream" activates as study:dream-record.
"""

from dataclasses import dataclass
from typing import Callable

from ..abilities import resolve_ability_key
from ..helpers import append_log
from ..occupancy import place_in_slot
from ..schema import AbilityEvent, AbilityKey, CardInstance, GameState
from .behaviors import SlotCardPlacementContext


def is_persona_role(card: CardInstance | None) -> bool:
    return card is not None and resolve_ability_key(card, AbilityEvent.ON_ASSIST) == AbilityKey.ASSIST_PERSONA


def is_journal_role(card: CardInstance | None) -> bool:
    return card is not None and resolve_ability_key(card, AbilityEvent.ON_ASSIST) == AbilityKey.ASSIST_JOURNAL


def is_dream_role(card: CardInstance | None) -> bool:
    return card is not None and resolve_ability_key(card, AbilityEvent.ON_ACTIVATE) == AbilityKey.DREAM_RECORD


@dataclass(frozen=True)
class CompositionRule:
    name: str
    matches: Callable[[SlotCardPlacementContext], bool]
    apply: Callable[[SlotCardPlacementContext], tuple[GameState, list[str]]]


def _commit(ctx: SlotCardPlacementContext, message: str, **roles) -> tuple[GameState, list[str]]:
    slot = ctx.slot.model_copy(update=roles)
    state = ctx.state.model_copy(update={"slots": {**ctx.state.slots, slot.id: slot}})
    state = place_in_slot(state, ctx.card.id, slot.id)
    return state, append_log(ctx.log, message)


def _attach(ids: list[str], card_id: str) -> list[str]:
    return list(dict.fromkeys([*ids, card_id]))


# (a) persona seated alone, journal dropped: journal assists
def _journal_assists_persona(ctx):
    return _commit(
        ctx,
        f"{ctx.card.name} lies open beside {ctx.occupant.name}, ready to take dictation.",
        assistant_id=ctx.card.id,
    )


# (b) persona seated, dream dropped: dream takes the desk, persona assists
def _dream_joins_persona(ctx):
    attachments = list(ctx.slot.attached_card_ids)
    if ctx.assistant is not None:
        attachments = _attach(attachments, ctx.assistant.id)
    return _commit(
        ctx,
        f"{ctx.occupant.name} settles in to interpret {ctx.card.name}.",
        occupant_id=ctx.card.id,
        assistant_id=ctx.occupant.id,
        attached_card_ids=attachments,
    )


# (c) dream seated without help, persona dropped: persona assists
def _persona_joins_dream(ctx):
    return _commit(
        ctx,
        f"{ctx.card.name} joins {ctx.occupant.name}, ready to record it.",
        assistant_id=ctx.card.id,
    )


# (d) dream with persona assistant, journal dropped: journal attaches
def _journal_attaches_to_dream(ctx):
    return _commit(
        ctx,
        f"{ctx.card.name} is set beside {ctx.occupant.name} to receive the entry.",
        attached_card_ids=_attach(ctx.slot.attached_card_ids, ctx.card.id),
    )


# (e) journal with persona assistant, dream dropped: roles rotate
def _dream_rotates_journal(ctx):
    return _commit(
        ctx,
        f"{ctx.card.name} takes the desk while {ctx.occupant.name} waits for its entry.",
        occupant_id=ctx.card.id,
        attached_card_ids=_attach(ctx.slot.attached_card_ids, ctx.occupant.id),
    )


STUDY_COMPOSITION_RULES: tuple[CompositionRule, ...] = (
    CompositionRule(
        "journal-assists-persona",
        lambda c: is_persona_role(c.occupant) and c.assistant is None and is_journal_role(c.card),
        _journal_assists_persona,
    ),
    CompositionRule(
        "dream-joins-persona",
        lambda c: (
            is_persona_role(c.occupant)
            and is_dream_role(c.card)
            and (c.assistant is None or is_journal_role(c.assistant))
        ),
        _dream_joins_persona,
    ),
    CompositionRule(
        "persona-joins-dream",
        lambda c: is_dream_role(c.occupant) and c.assistant is None and is_persona_role(c.card),
        _persona_joins_dream,
    ),
    CompositionRule(
        "journal-attaches-to-dream",
        lambda c: is_dream_role(c.occupant) and is_persona_role(c.assistant) and is_journal_role(c.card),
        _journal_attaches_to_dream,
    ),
    CompositionRule(
        "dream-rotates-journal",
        lambda c: is_journal_role(c.occupant) and is_persona_role(c.assistant) and is_dream_role(c.card),
        _dream_rotates_journal,
    ),
)


def find_composition_rule(ctx: SlotCardPlacementContext,
                          rules: tuple[CompositionRule, ...] = STUDY_COMPOSITION_RULES) -> CompositionRule | None:
    for rule in rules:
        if rule.matches(ctx):
            return rule
    return None
