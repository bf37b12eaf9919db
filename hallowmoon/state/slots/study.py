"""
Study slot: consume cards for their secrets.

What happens depends on the occupant's resolved on_activate hook:

    study:dream-record + persona assistant -> fold the dream into a journal
                                              and stage it for delivery
    study:persona-reflection               -> +1 lore, persona stays seated
    card has rewards                       -> apply them, consume the card
    anything else                          -> non-permanent cards dissolve;
                                              permanent cards refuse
"""

import logging

from ..abilities import resolve_ability_key, resolve_card_ability
from ..helpers import format_resource_delta, remove_from_hand
from ..schema import (
    AbilityEvent,
    AbilityKey,
    CardInstance,
    DeliverCardsAction,
    HandLocation,
    LostLocation,
    SlotLocation,
)
from .behaviors import (
    SlotActionResult,
    SlotActivationContext,
    SlotBehavior,
    SlotBehaviorUtils,
    SlotCardPlacementContext,
    SlotCardPlacementResult,
)
from .composition import STUDY_COMPOSITION_RULES, find_composition_rule
from .dreams import augment_journal_with_dream, extract_dream_title, journal_template

logger = logging.getLogger(__name__)

REFLECTION_LORE = 1


class StudyBehavior(SlotBehavior):

    labels = {"activate": "Study"}

    def __init__(self, rules=STUDY_COMPOSITION_RULES):
        self.rules = rules

    # -------------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------------

    def accepts_card(self, card, context, utils) -> bool:
        # Already assisting here; dropping it again would only reshuffle roles
        return context.slot.assistant_id != card.id

    def on_card_placed(self, context: SlotCardPlacementContext,
                       utils: SlotBehaviorUtils) -> SlotCardPlacementResult | None:
        rule = find_composition_rule(context, self.rules)
        if rule is None:
            return None
        logger.debug(f"Study composition rule {rule.name} for {context.card.id}")
        state, log = rule.apply(context)
        return SlotCardPlacementResult(state, log, handled=True)

    # -------------------------------------------------------------------------
    # Activation
    # -------------------------------------------------------------------------

    def activate(self, context: SlotActivationContext, utils: SlotBehaviorUtils) -> SlotActionResult:
        state, slot = context.state, context.slot
        card = state.cards.get(slot.occupant_id) if slot.occupant_id else None
        if card is None:
            return SlotActionResult(
                state,
                utils.append_log(context.log, f"Place a card upon {slot.name} to study it."),
                False,
            )

        assistant = state.cards.get(slot.assistant_id) if slot.assistant_id else None
        ability = resolve_card_ability(card)

        if (
            ability.on_activate == AbilityKey.DREAM_RECORD
            and assistant is not None
            and resolve_ability_key(assistant, AbilityEvent.ON_ASSIST) == AbilityKey.ASSIST_PERSONA
        ):
            return self._record_dream(context, utils, card, assistant)

        if ability.on_activate == AbilityKey.PERSONA_REFLECTION:
            return SlotActionResult(
                state.model_copy(update={
                    "resources": utils.apply_resources(state.resources, {"lore": REFLECTION_LORE}),
                }),
                utils.append_log(
                    context.log,
                    f"{card.name} reflects upon their path, gaining {REFLECTION_LORE} lore.",
                ),
                True,
            )

        if ability.on_activate == AbilityKey.REWARD and card.rewards is not None:
            return self._consume(context, utils, card, rewarded=True)

        if card.permanent:
            return SlotActionResult(
                state,
                utils.append_log(context.log, f"{card.name} resists being consumed by study."),
                False,
            )

        return self._consume(context, utils, card, rewarded=False)

    def _consume(self, context, utils, card: CardInstance, rewarded: bool) -> SlotActionResult:
        state, slot, log = context.state, context.slot, context.log
        rewards = card.rewards if rewarded else None

        if rewards is not None and rewards.resources:
            state = state.model_copy(update={
                "resources": utils.apply_resources(state.resources, rewards.resources),
            })
            log = utils.append_log(
                log, f"{card.name} is deciphered, yielding {format_resource_delta(rewards.resources)}."
            )
        elif rewards is not None:
            log = utils.append_log(log, f"{card.name} is deciphered.")
        else:
            log = utils.append_log(log, f"{card.name} reveals little before dissolving.")

        if rewards is not None and rewards.discovery is not None:
            state, log = utils.apply_discovery(state, rewards.discovery, log)

        cleared = state.slots[slot.id].model_copy(update={
            "occupant_id": None,
            "assistant_id": None,
            "attached_card_ids": [],
        })
        cards = {cid: c for cid, c in state.cards.items() if cid != card.id}
        # Anyone else seated here goes back to the hand
        hand = remove_from_hand(state.hand, card.id)
        for other_id in (slot.assistant_id, *slot.attached_card_ids):
            if other_id and other_id in cards and other_id != card.id:
                cards[other_id] = cards[other_id].model_copy(update={"location": HandLocation()})
                hand = utils.add_to_hand(hand, other_id)

        state = state.model_copy(update={
            "cards": cards,
            "slots": {**state.slots, slot.id: cleared},
            "hand": hand,
            "pending_reveals": [cid for cid in state.pending_reveals if cid != card.id],
        })
        return SlotActionResult(state, log, True)

    def _record_dream(self, context, utils, dream: CardInstance,
                      persona: CardInstance) -> SlotActionResult:
        state, slot = context.state, context.slot
        title = extract_dream_title(dream) or dream.name

        journal = next(
            (
                state.cards[cid]
                for cid in slot.attached_card_ids
                if cid in state.cards
                and resolve_ability_key(state.cards[cid], AbilityEvent.ON_ASSIST) == AbilityKey.ASSIST_JOURNAL
            ),
            None,
        )

        if journal is not None:
            staged = augment_journal_with_dream(journal, title).model_copy(
                update={"location": LostLocation()}
            )
            message = (
                f"{persona.name} expands {journal.name} with {dream.name}. "
                "The entry will be ready once the study concludes."
            )
        else:
            staged = utils.create_card(journal_template([title]), LostLocation(), existing=state.cards)
            message = (
                f"{persona.name} records {dream.name}, preserving it within {staged.name}. "
                "The entry will be ready once the study concludes."
            )

        cards = {cid: c for cid, c in state.cards.items() if cid != dream.id}
        cards[staged.id] = staged
        cards[persona.id] = persona.model_copy(update={"location": SlotLocation(slot_id=slot.id)})

        updated_slot = slot.model_copy(update={
            "occupant_id": persona.id,
            "assistant_id": None,
            "attached_card_ids": [cid for cid in slot.attached_card_ids if cid != staged.id],
            "pending_action": DeliverCardsAction(card_ids=[staged.id], reveal=True),
        })
        state = state.model_copy(update={
            "cards": cards,
            "slots": {**state.slots, slot.id: updated_slot},
            "hand": remove_from_hand(state.hand, dream.id),
            "pending_reveals": [cid for cid in state.pending_reveals if cid != dream.id],
        })
        return SlotActionResult(state, utils.append_log(context.log, message), True)
