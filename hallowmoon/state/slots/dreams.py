"""
Dream and journal cards.

Bedrooms produce fleeting dream cards; the study folds them into a
permanent "Private Journal" whose entries live in `dream:<title>` traits.
"""

from ..content import CardTemplate
from ..schema import AbilityKey, CardAbilityMetadata, CardArchetype, CardInstance

DREAM_TITLES = (
    "Silver Staircases",
    "Echoing Halls",
    "Frosted Lanterns",
    "Lunar Choirs",
    "Velvet Storms",
    "Shattered Constellations",
)

DREAM_PREFIX = "Fleeting Dream: "
JOURNAL_CARD_NAME = "Private Journal"
DREAM_LIFETIME = 3


def extract_dream_title(dream: CardInstance) -> str:
    if dream.name.startswith(DREAM_PREFIX):
        return dream.name[len(DREAM_PREFIX):].strip()
    return dream.name


def dream_template(title: str) -> CardTemplate:
    return CardTemplate(
        key="fleeting-dream",
        name=f"{DREAM_PREFIX}{title}",
        type=CardArchetype.INSPIRATION,
        description=f"A fleeting vision of {title.lower()}. Document it before it fades.",
        traits=["dream", "fleeting"],
        permanent=False,
        lifetime=DREAM_LIFETIME,
        ability=CardAbilityMetadata(
            on_activate=AbilityKey.DREAM_RECORD,
            on_expire=AbilityKey.EXPIRE_FADING,
        ),
    )


# -----------------------------------------------------------------------------
# Journals
# -----------------------------------------------------------------------------

def journal_entries(journal: CardInstance) -> list[str]:
    return [trait[len("dream:"):] for trait in journal.traits if trait.startswith("dream:")]


def _entries_sentence(entries: list[str]) -> str:
    if not entries:
        return "Blank pages await recorded dreams."
    if len(entries) == 1:
        return f"Pages capture the dream of {entries[0]}."
    if len(entries) == 2:
        return f"Entries chronicle the dreams of {entries[0]} and {entries[1]}."
    return f"Entries chronicle the dreams of {', '.join(entries[:-1])}, and {entries[-1]}."


def describe_journal(entries: list[str]) -> str:
    return f"A bound journal cataloguing lucid recollections. {_entries_sentence(entries)}"


def _journal_traits(traits: list[str], entries: list[str]) -> list[str]:
    base = [t for t in traits if not t.startswith("dream:") and t not in ("journal", "dream-record")]
    return [*dict.fromkeys(base), "journal", "dream-record", *(f"dream:{e}" for e in entries)]


def with_journal_entries(journal: CardInstance, entries: list[str]) -> CardInstance:
    return journal.model_copy(update={
        "name": JOURNAL_CARD_NAME,
        "description": describe_journal(entries),
        "traits": _journal_traits(journal.traits, entries),
        "permanent": True,
        "remaining_turns": None,
    })


def augment_journal_with_dream(journal: CardInstance, title: str) -> CardInstance:
    entries = journal_entries(journal)
    if title not in entries:
        entries.append(title)
    return with_journal_entries(journal, entries)


def journal_template(entries: list[str]) -> CardTemplate:
    return CardTemplate(
        key="private-journal",
        name=JOURNAL_CARD_NAME,
        type=CardArchetype.INSPIRATION,
        description=describe_journal(entries),
        traits=_journal_traits([], entries),
        permanent=True,
    )
