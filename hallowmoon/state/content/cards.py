"""Card templates: the hero personas and the opportunity pool."""

from pydantic import BaseModel, Field

from ... import ContentError
from ..schema import (
    AbilityKey,
    CardAbilityMetadata,
    CardArchetype,
    CardInstance,
    CardReward,
    DiscoverySeed,
    HandLocation,
)


class CardTemplate(BaseModel):
    key: str
    name: str
    type: CardArchetype
    description: str
    traits: list[str] = Field(default_factory=list)
    permanent: bool = False
    lifetime: int | None = None  # Turns before a non-permanent card fades
    rewards: CardReward | None = None
    ability: CardAbilityMetadata | None = None


HERO_TEMPLATE = CardTemplate(
    key="persona-initiate",
    name="Initiate of the Veiled Star",
    type=CardArchetype.PERSONA,
    description="A seeker sworn to the Veiled Star, come to wake the sleeping manor.",
    traits=["permanent", "persona"],
    permanent=True,
)

HERO_PERSONA_TEMPLATES: tuple[CardTemplate, ...] = (
    CardTemplate(
        key="persona-watcher",
        name="The Watcher",
        type=CardArchetype.PERSONA,
        description="“You see what others overlook. The world speaks to those who listen.”",
        traits=["permanent", "persona"],
        permanent=True,
    ),
    CardTemplate(
        key="persona-weaver",
        name="The Weaver",
        type=CardArchetype.PERSONA,
        description="“You shape connections unseen, threads of fate, thought, and will.”",
        traits=["permanent", "persona"],
        permanent=True,
    ),
    CardTemplate(
        key="persona-outcast",
        name="The Outcast",
        type=CardArchetype.PERSONA,
        description=(
            "“You walk apart, unbound by the threads that bind others. "
            "The world turned its back, so you learned to face it alone.”"
        ),
        traits=["permanent", "persona"],
        permanent=True,
    ),
)

_STUDY_REWARD = CardAbilityMetadata(
    on_activate=AbilityKey.REWARD,
    on_expire=AbilityKey.EXPIRE_FADING,
)

UMBRAL_GATE = DiscoverySeed(
    key="umbral-gate",
    name="Umbral Gate Sigil",
    description="The sigil unlocks an expedition slot leading into the Hollow Ways.",
)

OPPORTUNITY_TEMPLATES: tuple[CardTemplate, ...] = (
    CardTemplate(
        key="fading-whisper",
        name="Fading Whisper",
        type=CardArchetype.INSPIRATION,
        description="Study before it unravels to gather 2 lore and a glimmer of moonlight.",
        traits=["fleeting", "memory"],
        lifetime=2,
        ability=_STUDY_REWARD,
        rewards=CardReward(resources={"lore": 2, "glimmer": 1}),
    ),
    CardTemplate(
        key="glimmering-spark",
        name="Glimmering Spark",
        type=CardArchetype.RELIC,
        description="A mote of wandering starlight. Study to harvest 2 glimmer.",
        traits=["fleeting", "starlight"],
        lifetime=3,
        ability=_STUDY_REWARD,
        rewards=CardReward(resources={"glimmer": 2}),
    ),
    CardTemplate(
        key="cartographer-echo",
        name="Cartographer’s Echo",
        type=CardArchetype.INSPIRATION,
        description=(
            "A half-remembered map etched in frost. "
            "Studying it may reveal new expedition grounds."
        ),
        traits=["fleeting", "map"],
        lifetime=4,
        ability=_STUDY_REWARD,
        rewards=CardReward(resources={"lore": 1}, discovery=UMBRAL_GATE),
    ),
)


def get_persona_template(key: str | None) -> CardTemplate:
    """Hero template for a persona key; None means the default initiate."""
    if key is None or key == HERO_TEMPLATE.key:
        return HERO_TEMPLATE
    for template in HERO_PERSONA_TEMPLATES:
        if template.key == key:
            return template
    raise ContentError(f"Unknown persona template: {key}")


def create_card_instance(template: CardTemplate, card_id: str, location=None) -> CardInstance:
    return CardInstance(
        id=card_id,
        key=template.key,
        name=template.name,
        type=template.type,
        description=template.description,
        traits=list(template.traits),
        permanent=template.permanent,
        remaining_turns=None if template.permanent else template.lifetime,
        rewards=template.rewards,
        ability=template.ability,
        location=location if location is not None else HandLocation(),
    )
