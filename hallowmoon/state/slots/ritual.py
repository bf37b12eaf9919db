from .behaviors import (
    SlotActionResult,
    SlotActivationContext,
    SlotBehavior,
    SlotBehaviorUtils,
    require_persona,
)

OPPORTUNITY_CHANCE = 0.35


def ritual_lore_cost(level: int) -> int:
    return max(2, level + 1)


class RitualBehavior(SlotBehavior):
    """Convert lore into glimmer."""

    labels = {"activate": "Perform Rite"}

    def activate(self, context: SlotActivationContext, utils: SlotBehaviorUtils) -> SlotActionResult:
        card, refusal = require_persona(
            context,
            "Seat your persona within the circle to conduct a rite.",
            "A living persona must anchor the ritual.",
        )
        if refusal:
            return refusal

        level = context.slot.level
        lore_cost = ritual_lore_cost(level)
        if context.state.resources.lore < lore_cost:
            return SlotActionResult(
                context.state,
                utils.append_log(context.log, f"You require {lore_cost} lore to empower the ritual."),
                False,
            )

        glimmer_gain = 1 + level // 2
        state = context.state.model_copy(update={
            "resources": utils.apply_resources(
                context.state.resources, {"lore": -lore_cost, "glimmer": glimmer_gain}
            ),
        })
        log = utils.append_log(
            context.log,
            f"{card.name} completes a rite, converting {lore_cost} lore into {glimmer_gain} glimmer.",
        )

        if utils.random() < OPPORTUNITY_CHANCE:
            state, log = utils.spawn_opportunity(state, log)
        return SlotActionResult(state, log, True)
