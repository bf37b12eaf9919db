"""Tests for save-game storage."""

from hallowmoon.state import GameStore, JsonGameStore, SaveGame
from hallowmoon.state.actions import ActivateSlot, MoveCardToSlot


class TestSaveGame:
    """Test the save wrapper."""

    def test_from_state_records_hero(self, state):
        """Metadata captures the hero name and cycle."""
        save = SaveGame.from_state("first", state)
        assert save.meta.name == "first"
        assert save.meta.persona == "Initiate of the Veiled Star"
        assert save.meta.cycle == 1

    def test_checkpoint_refreshes_cycle(self, state):
        """save_checkpoint copies the state's cycle into the metadata."""
        save = SaveGame.from_state("first", state)
        save.state = state.model_copy(update={"cycle": 7})
        save.save_checkpoint()
        assert save.meta.cycle == 7


class TestJsonGameStore:
    """Test file-based storage."""

    def test_implements_protocol(self, tmp_path):
        """JsonGameStore satisfies the GameStore protocol."""
        assert isinstance(JsonGameStore(tmp_path), GameStore)

    def test_save_and_load(self, tmp_path, machine, state):
        """A saved state loads back identical, pending actions included."""
        state = machine.reduce(state, MoveCardToSlot(card_id=state.hero_card_id, slot_id="slot-the-manor"))
        state = machine.reduce(state, ActivateSlot(slot_id="slot-the-manor"))
        store = JsonGameStore(tmp_path)

        store.save(SaveGame.from_state("run", state))
        loaded = store.load("run")

        assert loaded is not None
        assert loaded.state == state
        assert (tmp_path / "run.json").exists()

    def test_backup_on_overwrite(self, tmp_path, state):
        """Saving over an existing file keeps the previous copy."""
        store = JsonGameStore(tmp_path)
        store.save(SaveGame.from_state("run", state))
        store.save(SaveGame.from_state("run", state.model_copy(update={"cycle": 2})))

        assert (tmp_path / "run.json.bak").exists()
        assert store.load("run").meta.cycle == 2

    def test_prefix_load(self, tmp_path, state):
        """A unique prefix finds the save."""
        store = JsonGameStore(tmp_path)
        store.save(SaveGame.from_state("moonlit-run", state))
        assert store.load("moon").meta.name == "moonlit-run"

    def test_missing_save(self, tmp_path):
        """Unknown names load as None."""
        assert JsonGameStore(tmp_path).load("nothing") is None

    def test_corrupt_save(self, tmp_path):
        """Unreadable files load as None and are skipped in listings."""
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        store = JsonGameStore(tmp_path)
        assert store.load("broken") is None
        assert store.list_all() == []

    def test_list_and_delete(self, tmp_path, state):
        """Listings show every save; delete removes one."""
        store = JsonGameStore(tmp_path)
        store.save(SaveGame.from_state("a", state))
        store.save(SaveGame.from_state("b", state))

        assert {entry["name"] for entry in store.list_all()} == {"a", "b"}
        assert store.delete("a")
        assert not store.exists("a")
        assert not store.delete("a")

    def test_creates_directory(self, tmp_path):
        """The saves directory is created on demand."""
        target = tmp_path / "nested" / "saves"
        JsonGameStore(target)
        assert target.is_dir()


class TestMemoryGameStore:
    """Test in-memory storage."""

    def test_round_trip(self, memory_store, state):
        """Saves are kept by name."""
        memory_store.save(SaveGame.from_state("run", state))
        assert memory_store.exists("run")
        assert memory_store.load("run").state == state

    def test_prefix_and_missing(self, memory_store, state):
        """Prefixes match; unknown names return None."""
        memory_store.save(SaveGame.from_state("moonlit-run", state))
        assert memory_store.load("moon") is not None
        assert memory_store.load("sun") is None

    def test_clear(self, memory_store, state):
        """clear() drops every save."""
        memory_store.save(SaveGame.from_state("run", state))
        memory_store.clear()
        assert memory_store.list_all() == []
