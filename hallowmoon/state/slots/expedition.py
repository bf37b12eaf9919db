from .behaviors import (
    SlotActionResult,
    SlotActivationContext,
    SlotBehavior,
    SlotBehaviorUtils,
    require_persona,
)

GLIMMER_COST = 1
OPPORTUNITY_CHANCE = 0.5


class ExpeditionBehavior(SlotBehavior):
    """Spend glimmer beyond the Umbral Gate for coin and lore."""

    labels = {"activate": "Embark"}

    def activate(self, context: SlotActivationContext, utils: SlotBehaviorUtils) -> SlotActionResult:
        card, refusal = require_persona(
            context,
            "A daring persona must step through the Umbral Gate.",
            "Only your persona can brave the Umbral Gate.",
        )
        if refusal:
            return refusal

        if context.state.resources.glimmer < GLIMMER_COST:
            return SlotActionResult(
                context.state,
                utils.append_log(
                    context.log, "At least 1 glimmer is needed to light the path beyond the gate."
                ),
                False,
            )

        level = context.slot.level
        coin_gain = 1 + level
        lore_gain = 2 + level
        state = context.state.model_copy(update={
            "resources": utils.apply_resources(context.state.resources, {
                "glimmer": -GLIMMER_COST,
                "coin": coin_gain,
                "lore": lore_gain,
            }),
        })
        log = utils.append_log(
            context.log,
            f"{card.name} ventures beyond the Umbral Gate, returning with {coin_gain} coin and {lore_gain} lore.",
        )

        if utils.random() < OPPORTUNITY_CHANCE:
            state, log = utils.spawn_opportunity(state, log)
        return SlotActionResult(state, log, True)
