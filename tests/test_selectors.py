"""Tests for slot summaries and action metadata."""

from hallowmoon.state.actions import ActivateSlot, MoveCardToSlot, SetTimeScale
from hallowmoon.state.content import HERO_TEMPLATE, MANOR_ROOM_TEMPLATE_KEYS, SLOT_TEMPLATES, create_card_instance
from hallowmoon.state.helpers import instantiate_slot
from hallowmoon.state.schema import LocationTag, Resources
from hallowmoon.state.selectors import build_location_exploration_availability, build_slot_summaries
from hallowmoon.state.slots.dreams import dream_template, journal_template
from hallowmoon.utils.slot_actions import (
    SlotActionContext,
    describe_card_for_status,
    get_slot_action_metadata,
)

MANOR = "slot-the-manor"


def context_for(template_key, occupant=None, **kwargs):
    return SlotActionContext(
        slot=instantiate_slot(SLOT_TEMPLATES[template_key]),
        occupant=occupant,
        assistant=kwargs.pop("assistant", None),
        **kwargs,
    )


class TestLocationAvailability:
    """Test which locations can still be explored."""

    def test_fresh_map(self, state):
        """Every location starts explorable."""
        availability = build_location_exploration_availability(state.slots.values())
        assert availability == {
            LocationTag.MANOR: True,
            LocationTag.TOWN: True,
            LocationTag.FOREST: True,
        }

    def test_manor_exhausted(self):
        """The manor closes once every room is on the map."""
        slots = [instantiate_slot(SLOT_TEMPLATES[key]) for key in MANOR_ROOM_TEMPLATE_KEYS]
        availability = build_location_exploration_availability(slots)
        assert availability[LocationTag.MANOR] is False
        assert availability[LocationTag.TOWN] is True

    def test_restored_rooms_count_as_found(self):
        """A room repaired into its target still counts as discovered."""
        keys = [key for key in MANOR_ROOM_TEMPLATE_KEYS if key != "damaged-sanctum"]
        slots = [instantiate_slot(SLOT_TEMPLATES[key]) for key in keys]
        slots.append(instantiate_slot(SLOT_TEMPLATES["hearth"]))
        assert build_location_exploration_availability(slots)[LocationTag.MANOR] is False


class TestBuildSlotSummaries:
    """Test the per-slot projection."""

    def test_empty_slot(self, state, clock):
        """An empty slot has no label and cannot activate."""
        summary = build_slot_summaries(state, clock.current)[MANOR]
        assert summary.occupant is None
        assert summary.action_label is None
        assert summary.can_activate is False
        assert summary.is_slot_interactive is True

    def test_hero_ready_to_explore(self, machine, state, clock):
        """A seated hero makes the manor activatable."""
        state = machine.reduce(state, MoveCardToSlot(card_id=state.hero_card_id, slot_id=MANOR))
        summary = build_slot_summaries(state, clock.current)[MANOR]

        assert summary.is_hero_in_slot
        assert summary.action_label == "Explore"
        assert summary.can_activate
        assert summary.availability_note is None

    def test_locked_slot(self, machine, state, clock):
        """An activated slot reports its countdown and is not interactive."""
        state = machine.reduce(state, MoveCardToSlot(card_id=state.hero_card_id, slot_id=MANOR))
        state = machine.reduce(state, ActivateSlot(slot_id=MANOR))
        clock.advance(20000)
        summary = build_slot_summaries(state, clock.current)[MANOR]

        assert summary.is_locked
        assert summary.is_resolving
        assert not summary.is_slot_interactive
        assert not summary.can_activate
        assert summary.lock_remaining_ms == 40000
        assert summary.lock_total_ms == 60000

    def test_pause_freezes_countdown(self, machine, state, clock):
        """Remaining time stops at its value when the game was paused."""
        state = machine.reduce(state, MoveCardToSlot(card_id=state.hero_card_id, slot_id=MANOR))
        state = machine.reduce(state, ActivateSlot(slot_id=MANOR))
        clock.advance(1000)
        state = machine.reduce(state, SetTimeScale(scale=0))
        clock.advance(599000)

        summary = build_slot_summaries(state, clock.current)[MANOR]
        assert summary.lock_remaining_ms == 59000
        assert summary.is_locked

    def test_registry_labels(self, machine, registry, state, clock, with_slot):
        """Behaviour labels replace the defaults when a registry is given."""
        state, ritual = with_slot(state, "ritual")
        state = machine.reduce(state, MoveCardToSlot(card_id=state.hero_card_id, slot_id=ritual))

        summary = build_slot_summaries(state, clock.current, registry=registry)[ritual]
        assert summary.action_label == "Perform Rite"
        assert summary.can_activate is False
        assert summary.availability_note == "Requires 2 lore to perform this ritual."

    def test_selectors_do_not_change_state(self, state, clock):
        """Building summaries leaves the snapshot untouched."""
        before = state.model_copy(deep=True)
        build_slot_summaries(state, clock.current)
        assert state == before


class TestSlotActionMetadata:
    """Test labels and availability notes."""

    def test_non_persona_refused_at_work(self):
        """Work and rest slots need a persona."""
        dream = create_card_instance(dream_template("Echoing Halls"), "dream-1")
        metadata = get_slot_action_metadata(context_for("work", dream))
        assert metadata.can_activate is False
        assert metadata.availability_note == "Only a persona may make use of this slot."

    def test_expedition_needs_glimmer(self):
        """Expeditions report the glimmer they require."""
        hero = create_card_instance(HERO_TEMPLATE, "hero")
        metadata = get_slot_action_metadata(context_for("expedition", hero, resources=Resources(glimmer=0)))
        assert metadata.availability_note == "Requires 1 glimmer to light the path beyond the gate."

    def test_exhausted_location(self):
        """A charted location explains why it is idle."""
        hero = create_card_instance(HERO_TEMPLATE, "hero")
        metadata = get_slot_action_metadata(context_for("manor", hero, can_explore_location=False))
        assert metadata.availability_note == "All discoverable opportunities have been secured here for now."

    def test_damaged_room_label(self):
        """Damaged rooms offer to clear debris."""
        hero = create_card_instance(HERO_TEMPLATE, "hero")
        metadata = get_slot_action_metadata(context_for("damaged-sanctum", hero))
        assert metadata.action_label == "Clear"
        assert metadata.can_activate

    def test_study_labels(self):
        """The study label follows what is seated."""
        hero = create_card_instance(HERO_TEMPLATE, "hero")
        dream = create_card_instance(dream_template("Echoing Halls"), "dream-1")
        journal = create_card_instance(journal_template([]), "journal-1")

        recording = context_for("study", dream, assistant=hero, attachments=[journal])
        assert get_slot_action_metadata(recording).action_label == "Record Dream"

        annotating = context_for("study", journal, assistant=hero)
        assert get_slot_action_metadata(annotating).action_label == "Annotate Journal"

        interpreting = context_for("study", dream)
        assert get_slot_action_metadata(interpreting).action_label == "Interpret Dream"

        plain = context_for("study", hero)
        assert get_slot_action_metadata(plain).action_label == "Study"

    def test_describe_card_for_status(self):
        """Status lines show the card name and archetype."""
        hero = create_card_instance(HERO_TEMPLATE, "hero")
        assert describe_card_for_status(hero) == "Initiate of the Veiled Star (Persona)"
        assert describe_card_for_status(None) is None
