from .behaviors import (
    SlotActionResult,
    SlotActivationContext,
    SlotBehavior,
    SlotBehaviorUtils,
    require_persona,
)

OPPORTUNITY_CHANCE = 0.4


class WorkBehavior(SlotBehavior):
    labels = {"activate": "Work"}

    def activate(self, context: SlotActivationContext, utils: SlotBehaviorUtils) -> SlotActionResult:
        card, refusal = require_persona(
            context,
            "Assign your persona to the job before attempting to work it.",
            f"Only a persona can take up the work at {context.slot.name}.",
        )
        if refusal:
            return refusal

        level = context.slot.level
        coin_gain = 2 + level
        lore_gain = 1 if level >= 2 else 0

        state = context.state.model_copy(update={
            "resources": utils.apply_resources(
                context.state.resources, {"coin": coin_gain, "lore": lore_gain}
            ),
        })
        earned = f"{coin_gain} coin" + (f" and {lore_gain} lore" if lore_gain else "")
        log = utils.append_log(context.log, f"{card.name} works {context.slot.name}, earning {earned}.")

        if utils.random() < OPPORTUNITY_CHANCE:
            state, log = utils.spawn_opportunity(state, log)
        return SlotActionResult(state, log, True)
