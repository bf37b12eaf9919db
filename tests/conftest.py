"""
Pytest fixtures for Hallowmoon tests.

Provides a fixed clock, a scripted random source, in-memory stores and
small builders for putting extra slots and cards into a state.
"""

import pytest

from hallowmoon.runtime import Runtime
from hallowmoon.state import (
    GameMachine,
    GameSession,
    MemoryGameStore,
    SlotBehaviorRegistry,
    get_event_bus,
    reset_event_bus,
)
from hallowmoon.state.content import SLOT_TEMPLATES
from hallowmoon.state.helpers import instantiate_card, instantiate_slot
from hallowmoon.state.schema import HandLocation

START_TIME = 1_000_000


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = START_TIME):
        self.current = start

    def __call__(self) -> int:
        return self.current

    def advance(self, ms: int) -> None:
        self.current += ms


class ScriptedRandom:
    """Returns queued values first, then `default` forever."""

    def __init__(self, values=(), default: float = 0.99):
        self.queue = list(values)
        self.default = default

    def __call__(self) -> float:
        if self.queue:
            return self.queue.pop(0)
        return self.default

    def push(self, *values: float) -> None:
        self.queue.extend(values)


@pytest.fixture(autouse=True)
def fresh_event_bus():
    """Every test gets its own global event bus."""
    reset_event_bus()
    yield
    reset_event_bus()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return ScriptedRandom()


@pytest.fixture
def runtime(rng, clock):
    return Runtime(random=rng, clock=clock)


@pytest.fixture
def registry():
    """Fresh registry so overrides never leak between tests."""
    return SlotBehaviorRegistry()


@pytest.fixture
def machine(runtime, registry):
    return GameMachine(runtime, registry=registry)


@pytest.fixture
def state(machine):
    """Fresh game with the default initiate."""
    return machine.initial_state()


@pytest.fixture
def with_slot():
    """Builder: add a slot from SLOT_TEMPLATES, returning (state, slot_id)."""
    def build(state, template_key: str):
        slot = instantiate_slot(SLOT_TEMPLATES[template_key])
        return state.model_copy(update={"slots": {**state.slots, slot.id: slot}}), slot.id
    return build


@pytest.fixture
def with_card(runtime):
    """Builder: add a card from a template to the end of the hand, returning (state, card_id)."""
    def build(state, template):
        card = instantiate_card(template, runtime, HandLocation(), existing=state.cards)
        return state.model_copy(update={
            "cards": {**state.cards, card.id: card},
            "hand": [*state.hand, card.id],
        }), card.id
    return build


@pytest.fixture
def memory_store():
    """In-memory save store for testing."""
    return MemoryGameStore()


@pytest.fixture
def event_bus():
    return get_event_bus()


@pytest.fixture
def session(memory_store, machine, event_bus):
    """Game session with in-memory store."""
    return GameSession(memory_store, machine=machine, bus=event_bus)
