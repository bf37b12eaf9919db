"""
Slot templates and lock timing.

SLOT_TEMPLATES is keyed by content key ("hearth", "damaged-archive"); the
template's own `key` field is what lands on the Slot instance. Damaged
rooms carry a repair target pointing back into this table.
"""

from pydantic import BaseModel, Field

from ... import ContentError
from ..schema import LocationTag, SlotAcceptance, SlotState, SlotType

SLOT_LOCK_BASE_MS = 60000
SLOT_ACTION_COMPLETION_TOLERANCE_MS = 250
MIN_LOCK_MS = 250
MIN_TIME_SCALE = 0.25

SLOT_LOCK_DURATIONS: dict[SlotType, int] = {
    SlotType.HEARTH: SLOT_LOCK_BASE_MS,
    SlotType.WORK: SLOT_LOCK_BASE_MS * 2,
    SlotType.STUDY: 90000,
    SlotType.RITUAL: SLOT_LOCK_BASE_MS * 3,
    SlotType.EXPEDITION: SLOT_LOCK_BASE_MS * 4,
    SlotType.LOCATION: SLOT_LOCK_BASE_MS,
    SlotType.BEDROOM: 90000,
}


class RepairSpec(BaseModel):
    target_key: str
    time: int  # Cycles of persona labour


class SlotTemplate(BaseModel):
    key: str
    name: str
    type: SlotType
    description: str
    traits: list[str] = Field(default_factory=list)
    accepted: SlotAcceptance = SlotAcceptance.ANY
    upgrade_cost: int = 0
    unlocked: bool = True
    state: SlotState = SlotState.ACTIVE
    repair: RepairSpec | None = None
    location: LocationTag | None = None


def _damaged_room(key: str, name: str, description: str, traits: list[str],
                  target: str, time: int, accepted=SlotAcceptance.PERSONA_ONLY) -> SlotTemplate:
    return SlotTemplate(
        key=key,
        name=name,
        type=SlotType.LOCATION,
        description=description,
        traits=["damaged", *traits],
        accepted=accepted,
        state=SlotState.DAMAGED,
        repair=RepairSpec(target_key=target, time=time),
        location=LocationTag.MANOR,
    )


SLOT_TEMPLATES: dict[str, SlotTemplate] = {
    "manor": SlotTemplate(
        key="the-manor",
        name="The Manor",
        type=SlotType.LOCATION,
        description=(
            "Dusty corridors wind through a neglected estate. "
            "Explore to reveal the rooms hidden within."
        ),
        traits=["domain"],
        accepted=SlotAcceptance.PERSONA_ONLY,
        location=LocationTag.MANOR,
    ),
    "town": SlotTemplate(
        key="moonlit-town",
        name="Moonlit Town",
        type=SlotType.LOCATION,
        description=(
            "Lantern-lit avenues hum with quiet gossip. "
            "Explore to uncover sanctified halls and merchant stalls."
        ),
        traits=["domain", "urban"],
        accepted=SlotAcceptance.PERSONA_ONLY,
        location=LocationTag.TOWN,
    ),
    "forest": SlotTemplate(
        key="whispering-forest",
        name="Whispering Forest",
        type=SlotType.LOCATION,
        description=(
            "Moonlight threads between ancient pines. "
            "Scouts slip through the undergrowth hunting for secrets."
        ),
        traits=["domain", "wilds"],
        accepted=SlotAcceptance.PERSONA_ONLY,
        location=LocationTag.FOREST,
    ),
    "hearth": SlotTemplate(
        key="veiled-sanctum",
        name="Veiled Sanctum",
        type=SlotType.HEARTH,
        description=(
            "A private chamber of incense and mirrors. "
            "Rest here to gather calm and crystallised lore."
        ),
        traits=["haven"],
        accepted=SlotAcceptance.PERSONA_ONLY,
        upgrade_cost=3,
        location=LocationTag.MANOR,
    ),
    "work": SlotTemplate(
        key="scribe-post",
        name="Moonlit Scriptorium",
        type=SlotType.WORK,
        description=(
            "Ledger clerks of the cult require steady hands. "
            "Work shifts here to earn coin and whispers."
        ),
        traits=["job"],
        accepted=SlotAcceptance.PERSONA_ONLY,
        upgrade_cost=4,
        location=LocationTag.MANOR,
    ),
    "study": SlotTemplate(
        key="night-archive",
        name="Night Archive Desk",
        type=SlotType.STUDY,
        description="A desk piled with occult fragments. Feed it cards to glean their secrets.",
        traits=["study"],
        accepted=SlotAcceptance.ANY,
        upgrade_cost=3,
        location=LocationTag.MANOR,
    ),
    "ritual": SlotTemplate(
        key="moonlit-circle",
        name="Moonlit Circle",
        type=SlotType.RITUAL,
        description=(
            "Ink sigils breathe in argent vapours. "
            "Offerings channel the moon’s wild resonance."
        ),
        traits=["ritual"],
        accepted=SlotAcceptance.ANY,
        upgrade_cost=5,
        location=LocationTag.MANOR,
    ),
    "expedition": SlotTemplate(
        key="chart-room",
        name="Chart Room",
        type=SlotType.EXPEDITION,
        description=(
            "Maps of impossible cities stretch across the tables. "
            "Prepare expeditions into the Ways."
        ),
        traits=["expedition"],
        accepted=SlotAcceptance.ANY,
        upgrade_cost=6,
        unlocked=False,  # Opened by the Umbral Gate discovery
        location=LocationTag.MANOR,
    ),
    "bedroom": SlotTemplate(
        key="astral-chamber",
        name="Astral Chamber",
        type=SlotType.BEDROOM,
        description=(
            "Silken drapes shroud a bed carved of pale wood. "
            "Dreams here may mingle with the moon."
        ),
        traits=["dream"],
        accepted=SlotAcceptance.PERSONA_ONLY,
        upgrade_cost=4,
        location=LocationTag.MANOR,
    ),
    "town-chapel": SlotTemplate(
        key="lunar-church",
        name="Lunar Church",
        type=SlotType.RITUAL,
        description=(
            "Candles gutter before silver icons. "
            "Petition the moon for blessings to ward the hunt."
        ),
        traits=["church", "urban"],
        accepted=SlotAcceptance.PERSONA_ONLY,
        upgrade_cost=3,
        location=LocationTag.TOWN,
    ),
    "town-market": SlotTemplate(
        key="moonlit-shop",
        name="Moonlit Shop",
        type=SlotType.WORK,
        description=(
            "Vendors trade charms and reagents beneath lantern glow. "
            "Work the stalls to gather coin and favors."
        ),
        traits=["shop", "urban"],
        accepted=SlotAcceptance.PERSONA_ONLY,
        upgrade_cost=3,
        location=LocationTag.TOWN,
    ),
    "damaged-sanctum": _damaged_room(
        "ruined-sanctum", "Ruined Sanctum",
        "Collapsed beams choke the hearth. Clearing the rubble could restore a place of rest.",
        ["haven"], "hearth", 2,
    ),
    "damaged-scriptorium": _damaged_room(
        "ruined-scriptorium", "Ruined Scriptorium",
        "Tumbled shelves choke the worktables. Clearing the debris will reopen the scriptorium.",
        ["job"], "work", 3,
    ),
    "damaged-archive": _damaged_room(
        "ruined-archive", "Ruined Archive",
        "Boxes of mildew and collapsed shelves hide the Night Archive. "
        "Patient sorting can restore it.",
        ["study"], "study", 2, accepted=SlotAcceptance.ANY,
    ),
    "damaged-circle": _damaged_room(
        "ruined-circle", "Ruined Circle",
        "The ritual chamber is cracked and waterlogged. "
        "Restoring the sigils will take devoted focus.",
        ["ritual"], "ritual", 3,
    ),
    "damaged-bedroom": _damaged_room(
        "ruined-bedroom", "Ruined Bedroom",
        "Mattresses are mouldering and windows broken. "
        "Careful effort will make it fit for dreaming again.",
        ["dream"], "bedroom", 2,
    ),
}

MANOR_ROOM_TEMPLATE_KEYS = (
    "damaged-sanctum",
    "damaged-scriptorium",
    "damaged-archive",
    "damaged-circle",
    "damaged-bedroom",
)


def get_slot_template(key: str) -> SlotTemplate:
    try:
        return SLOT_TEMPLATES[key]
    except KeyError:
        raise ContentError(f"Unknown slot template: {key}") from None


def base_lock_duration_ms(slot_type: SlotType) -> int:
    return SLOT_LOCK_DURATIONS.get(slot_type, SLOT_LOCK_BASE_MS)
