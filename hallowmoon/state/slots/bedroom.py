from ..schema import DeliverCardsAction, LostLocation
from .behaviors import (
    SlotActionResult,
    SlotActivationContext,
    SlotBehavior,
    SlotBehaviorUtils,
    require_persona,
)
from .dreams import DREAM_TITLES, dream_template


class BedroomBehavior(SlotBehavior):
    """
    Slumber: stage a dream card for delivery.

    The dream sits in the lost area until the lock matures and the
    pending-action resolver moves it into the hand.
    """

    labels = {"activate": "Slumber"}

    def activate(self, context: SlotActivationContext, utils: SlotBehaviorUtils) -> SlotActionResult:
        persona, refusal = require_persona(
            context,
            "Let a persona rest within the bedroom to invite a dream.",
            "Only a persona may slumber deeply enough to dream here.",
        )
        if refusal:
            return refusal

        state, slot = context.state, context.slot
        title = utils.runtime.choice(DREAM_TITLES)
        dream = utils.create_card(dream_template(title), LostLocation(), existing=state.cards)

        staged = slot.model_copy(update={
            "pending_action": DeliverCardsAction(card_ids=[dream.id], reveal=True),
        })
        state = state.model_copy(update={
            "cards": {**state.cards, dream.id: dream},
            "slots": {**state.slots, slot.id: staged},
        })
        log = utils.append_log(
            context.log,
            f"{persona.name} slumbers in {slot.name}. A dream will surface when their rest concludes.",
        )
        return SlotActionResult(state, log, True)
