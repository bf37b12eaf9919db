"""Tests for the study slot, composition rules, dreams and journals."""

import pytest

from hallowmoon.state.actions import (
    AcknowledgeCardReveal,
    ActivateSlot,
    MoveCardToSlot,
    ResolvePendingSlotActions,
)
from hallowmoon.state.content import OPPORTUNITY_TEMPLATES
from hallowmoon.state.schema import DeliverCardsAction, Resources
from hallowmoon.state.slots import SlotCardPlacementContext
from hallowmoon.state.slots.composition import find_composition_rule
from hallowmoon.state.slots.dreams import (
    augment_journal_with_dream,
    dream_template,
    journal_entries,
    journal_template,
)
from hallowmoon.state.content.cards import create_card_instance

HERO_NAME = "Initiate of the Veiled Star"
STUDY_LOCK_MS = 90000


@pytest.fixture
def study_state(state, with_slot):
    """Fresh game plus a Night Archive Desk; returns (state, study_id)."""
    return with_slot(state, "study")


def move(machine, state, card_id, slot_id):
    return machine.reduce(state, MoveCardToSlot(card_id=card_id, slot_id=slot_id))


class TestStudyActivation:
    """Test what studying each kind of card does."""

    def test_empty_study_refuses(self, machine, study_state):
        """An empty desk asks for a card."""
        state, study = study_state
        activated = machine.reduce(state, ActivateSlot(slot_id=study))
        assert activated.log[0] == "Place a card upon Night Archive Desk to study it."
        assert activated.slots[study].locked_until is None

    def test_persona_reflection(self, machine, study_state):
        """A persona alone gains 1 lore and stays seated."""
        state, study = study_state
        state = move(machine, state, state.hero_card_id, study)
        activated = machine.reduce(state, ActivateSlot(slot_id=study))

        assert activated.resources.lore == 1
        assert activated.slots[study].occupant_id == state.hero_card_id
        assert activated.log[1] == f"{HERO_NAME} reflects upon their path, gaining 1 lore."

    def test_reward_card_is_consumed(self, machine, study_state):
        """Reward cards pay out and disappear."""
        state, study = study_state
        whisper_id = state.hand[1]
        state = move(machine, state, whisper_id, study)
        activated = machine.reduce(state, ActivateSlot(slot_id=study))

        assert whisper_id not in activated.cards
        assert activated.resources == Resources(coin=0, lore=2, glimmer=2)
        assert activated.slots[study].occupant_id is None
        assert activated.log[1] == "Fading Whisper is deciphered, yielding 2 lore and 1 glimmer."
        assert activated.log[0] == "Night Archive Desk will be ready again in about 1m 30s."

    def test_consumed_card_leaves_pending_reveals(self, machine, study_state):
        """A card studied before its reveal was acknowledged is no longer announced."""
        state, study = study_state
        whisper_id = state.hand[1]
        state = state.model_copy(update={"pending_reveals": [whisper_id]})
        state = move(machine, state, whisper_id, study)

        activated = machine.reduce(state, ActivateSlot(slot_id=study))
        assert whisper_id not in activated.cards
        assert activated.pending_reveals == []

    def test_permanent_card_resists(self, machine, study_state, with_card):
        """Permanent cards without a study hook refuse and nothing locks."""
        state, study = study_state
        state, journal_id = with_card(state, journal_template([]))
        state = move(machine, state, journal_id, study)
        activated = machine.reduce(state, ActivateSlot(slot_id=study))

        assert activated.log[0] == "Private Journal resists being consumed by study."
        assert journal_id in activated.cards
        assert activated.slots[study].locked_until is None

    def test_discovery_unlocks_expedition(self, machine, study_state, with_card):
        """The Cartographer's Echo reveals the Umbral Gate once."""
        state, study = study_state
        state, echo_id = with_card(state, OPPORTUNITY_TEMPLATES[2])
        state = move(machine, state, echo_id, study)
        activated = machine.reduce(state, ActivateSlot(slot_id=study))

        assert [d.key for d in activated.discoveries] == ["umbral-gate"]
        chart_room = activated.slots["slot-chart-room"]
        assert chart_room.unlocked is True
        assert "Discovery gained: Umbral Gate Sigil. " in " ".join(activated.log)
        assert any(line.startswith("Cartographer’s Echo is deciphered") for line in activated.log)

    def test_discovery_is_idempotent(self, machine, study_state, with_card, clock):
        """Studying a second echo adds lore but no second discovery."""
        state, study = study_state
        state, first = with_card(state, OPPORTUNITY_TEMPLATES[2])
        state, second = with_card(state, OPPORTUNITY_TEMPLATES[2])

        state = machine.reduce(move(machine, state, first, study), ActivateSlot(slot_id=study))
        clock.advance(STUDY_LOCK_MS)
        state = machine.reduce(move(machine, state, second, study), ActivateSlot(slot_id=study))

        assert len(state.discoveries) == 1
        assert state.resources.lore == 2
        assert sum(1 for s in state.slots.values() if s.key == "chart-room") == 1

    def test_consume_returns_helpers(self, machine, study_state, with_card):
        """Cards seated alongside a consumed card go back to the hand."""
        state, study = study_state
        whisper_id = state.hand[1]
        state, journal_id = with_card(state, journal_template([]))
        state = move(machine, state, whisper_id, study)
        slot = state.slots[study].model_copy(update={"assistant_id": journal_id})
        state = state.model_copy(update={"slots": {**state.slots, study: slot}})

        activated = machine.reduce(state, ActivateSlot(slot_id=study))
        assert activated.cards[journal_id].location.area == "hand"
        assert journal_id in activated.hand


class TestStudyComposition:
    """Test how drops on the study rearrange roles."""

    def test_journal_assists_persona(self, machine, study_state, with_card):
        """A journal dropped on a seated persona becomes the assistant."""
        state, study = study_state
        state, journal_id = with_card(state, journal_template([]))
        state = move(machine, state, state.hero_card_id, study)
        state = move(machine, state, journal_id, study)

        slot = state.slots[study]
        assert slot.occupant_id == state.hero_card_id
        assert slot.assistant_id == journal_id
        assert state.cards[journal_id].location.area == "slot"

    def test_dream_joins_persona(self, machine, study_state, with_card):
        """A dream dropped on a persona takes the desk; the persona assists."""
        state, study = study_state
        state, dream_id = with_card(state, dream_template("Silver Staircases"))
        state = move(machine, state, state.hero_card_id, study)
        state = move(machine, state, dream_id, study)

        slot = state.slots[study]
        assert slot.occupant_id == dream_id
        assert slot.assistant_id == state.hero_card_id
        assert dream_id not in state.hand

    def test_dream_moves_journal_assistant_to_attachments(self, machine, study_state, with_card):
        """A journal that was assisting the persona becomes an attachment."""
        state, study = study_state
        state, journal_id = with_card(state, journal_template([]))
        state, dream_id = with_card(state, dream_template("Echoing Halls"))
        state = move(machine, state, state.hero_card_id, study)
        state = move(machine, state, journal_id, study)
        state = move(machine, state, dream_id, study)

        slot = state.slots[study]
        assert slot.occupant_id == dream_id
        assert slot.assistant_id == state.hero_card_id
        assert slot.attached_card_ids == [journal_id]

    def test_persona_joins_dream(self, machine, study_state, with_card):
        """A persona dropped on a lone dream assists it."""
        state, study = study_state
        state, dream_id = with_card(state, dream_template("Lunar Choirs"))
        state = move(machine, state, dream_id, study)
        state = move(machine, state, state.hero_card_id, study)

        slot = state.slots[study]
        assert slot.occupant_id == dream_id
        assert slot.assistant_id == state.hero_card_id

    def test_journal_attaches_to_dream(self, machine, study_state, with_card):
        """A journal dropped on a dream with its persona attaches."""
        state, study = study_state
        state, dream_id = with_card(state, dream_template("Lunar Choirs"))
        state, journal_id = with_card(state, journal_template([]))
        state = move(machine, state, dream_id, study)
        state = move(machine, state, state.hero_card_id, study)
        state = move(machine, state, journal_id, study)

        assert state.slots[study].attached_card_ids == [journal_id]

    def test_dream_rotates_journal(self, study_state):
        """A dream dropped on a journal with a persona assistant takes the desk."""
        state, study = study_state
        journal = create_card_instance(journal_template([]), "journal-1")
        dream = create_card_instance(dream_template("Velvet Storms"), "dream-1")
        hero = state.cards[state.hero_card_id]
        slot = state.slots[study].model_copy(update={
            "occupant_id": journal.id,
            "assistant_id": hero.id,
        })
        state = state.model_copy(update={
            "cards": {**state.cards, journal.id: journal, dream.id: dream},
            "slots": {**state.slots, study: slot},
        })

        context = SlotCardPlacementContext(
            state=state, slot=slot, card=dream, occupant=journal, assistant=hero, log=state.log,
        )
        rule = find_composition_rule(context)
        assert rule.name == "dream-rotates-journal"

        new_state, log = rule.apply(context)
        rotated = new_state.slots[study]
        assert rotated.occupant_id == dream.id
        assert rotated.assistant_id == hero.id
        assert rotated.attached_card_ids == [journal.id]

    def test_assistant_cannot_be_dropped_again(self, machine, study_state, with_card):
        """Dropping the current assistant onto its own study is refused."""
        state, study = study_state
        state, dream_id = with_card(state, dream_template("Lunar Choirs"))
        state = move(machine, state, state.hero_card_id, study)
        state = move(machine, state, dream_id, study)

        again = move(machine, state, state.hero_card_id, study)
        assert again.log[0] == f"{HERO_NAME} is not suited for Night Archive Desk."


class TestDreamJournal:
    """Test recording dreams into the Private Journal."""

    def test_hero_records_dream_into_new_journal(self, machine, study_state, with_card, clock):
        """Studying a dream with a persona yields a Private Journal after the lock."""
        state, study = study_state
        state, dream_id = with_card(state, dream_template("Silver Staircases"))
        state = move(machine, state, state.hero_card_id, study)
        state = move(machine, state, dream_id, study)

        recorded = machine.reduce(state, ActivateSlot(slot_id=study))
        slot = recorded.slots[study]
        assert dream_id not in recorded.cards
        assert slot.occupant_id == state.hero_card_id
        assert isinstance(slot.pending_action, DeliverCardsAction)
        journal_id = slot.pending_action.card_ids[0]
        assert recorded.cards[journal_id].location.area == "lost"
        assert journal_id not in recorded.hand

        clock.advance(STUDY_LOCK_MS)
        delivered = machine.reduce(recorded, ResolvePendingSlotActions())
        journal = delivered.cards[journal_id]

        assert journal.name == "Private Journal"
        assert journal.has_trait("journal")
        assert journal_entries(journal) == ["Silver Staircases"]
        assert delivered.hand[-1] == journal_id
        assert delivered.pending_reveals == [journal_id]
        assert delivered.log[0] == "Night Archive Desk yields Private Journal."
        assert delivered.slots[study].pending_action is None

        acknowledged = machine.reduce(delivered, AcknowledgeCardReveal(card_id=journal_id))
        assert acknowledged.pending_reveals == []

    def test_existing_journal_is_expanded(self, machine, study_state, with_card, clock):
        """An attached journal gains the entry instead of a new journal appearing."""
        state, study = study_state
        state, journal_id = with_card(state, journal_template(["Echoing Halls"]))
        state, dream_id = with_card(state, dream_template("Frosted Lanterns"))
        state = move(machine, state, state.hero_card_id, study)
        state = move(machine, state, journal_id, study)
        state = move(machine, state, dream_id, study)

        recorded = machine.reduce(state, ActivateSlot(slot_id=study))
        assert recorded.log[1].startswith(f"{HERO_NAME} expands Private Journal with Fleeting Dream: Frosted Lanterns.")
        assert recorded.slots[study].attached_card_ids == []

        clock.advance(STUDY_LOCK_MS)
        delivered = machine.reduce(recorded, ResolvePendingSlotActions())
        assert journal_entries(delivered.cards[journal_id]) == ["Echoing Halls", "Frosted Lanterns"]
        journals = [c for c in delivered.cards.values() if c.has_trait("journal")]
        assert len(journals) == 1

    def test_unacknowledged_dream_leaves_pending_reveals(self, machine, study_state, with_card):
        """Recording a dream still awaiting acknowledgement drops its reveal."""
        state, study = study_state
        state, dream_id = with_card(state, dream_template("Shattered Constellations"))
        state = state.model_copy(update={"pending_reveals": [dream_id]})
        state = move(machine, state, state.hero_card_id, study)
        state = move(machine, state, dream_id, study)

        recorded = machine.reduce(state, ActivateSlot(slot_id=study))
        assert dream_id not in recorded.cards
        assert recorded.pending_reveals == []

    def test_augment_is_idempotent(self):
        """Recording the same title twice keeps one entry."""
        journal = create_card_instance(journal_template(["Echoing Halls"]), "journal-1")
        again = augment_journal_with_dream(journal, "Echoing Halls")
        assert journal_entries(again) == ["Echoing Halls"]
        assert again.permanent is True


class TestBedroom:
    """Test dreaming in the bedroom."""

    def test_slumber_delivers_a_dream(self, machine, state, with_slot, clock):
        """A persona's rest stages a dream that surfaces after the lock."""
        state, bedroom = with_slot(state, "bedroom")
        state = move(machine, state, state.hero_card_id, bedroom)
        slept = machine.reduce(state, ActivateSlot(slot_id=bedroom))

        pending = slept.slots[bedroom].pending_action
        dream_id = pending.card_ids[0]
        assert slept.cards[dream_id].location.area == "lost"
        assert slept.log[1] == (
            f"{HERO_NAME} slumbers in Astral Chamber. A dream will surface when their rest concludes."
        )

        clock.advance(STUDY_LOCK_MS)
        woke = machine.reduce(slept, ResolvePendingSlotActions())
        dream = woke.cards[dream_id]
        assert dream.location.area == "hand"
        assert dream.name.startswith("Fleeting Dream: ")
        assert woke.pending_reveals == [dream_id]
        assert woke.slots[bedroom].occupant_id == state.hero_card_id
