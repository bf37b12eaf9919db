from .behaviors import (
    SlotActionResult,
    SlotActivationContext,
    SlotBehavior,
    SlotBehaviorUtils,
    require_persona,
)


class HearthBehavior(SlotBehavior):
    """Rest: lore, plus glimmer from level 3."""

    labels = {"activate": "Rest"}

    def activate(self, context: SlotActivationContext, utils: SlotBehaviorUtils) -> SlotActionResult:
        card, refusal = require_persona(
            context,
            "The sanctum waits for someone to rest within it.",
            "Only a living persona can draw the sanctum’s calm.",
        )
        if refusal:
            return refusal

        level = context.slot.level
        lore_gain = 1 + level // 2
        glimmer_gain = 1 if level >= 3 else 0

        fragments = [f"{lore_gain} lore"]
        if glimmer_gain:
            fragments.append(f"{glimmer_gain} glimmer")

        state = context.state.model_copy(update={
            "resources": utils.apply_resources(
                context.state.resources, {"lore": lore_gain, "glimmer": glimmer_gain}
            ),
        })
        log = utils.append_log(
            context.log,
            f"{card.name} communes with {context.slot.name}, gaining {' and '.join(fragments)}.",
        )
        return SlotActionResult(state, log, True)
