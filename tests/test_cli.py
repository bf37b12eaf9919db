"""Tests for console command parsing and the entry point."""

import pytest

from hallowmoon.interface import cli
from hallowmoon.interface.cli import Command, CommandError, parse_command, run_command
from hallowmoon.interface.config import load_config
from hallowmoon.state.actions import (
    AcknowledgeCardReveal,
    ActivateSlot,
    AdvanceTime,
    MoveCardToSlot,
    SetTimeScale,
)


class TestParseCommand:
    """Test turning console lines into commands."""

    def test_move_by_hand_index(self, state):
        """Cards can be named by their position in the hand."""
        command = parse_command("move 1 the-manor", state)
        assert command.action == MoveCardToSlot(card_id=state.hero_card_id, slot_id="slot-the-manor")

    def test_prefixes(self, state):
        """Unique prefixes resolve for cards and slots."""
        command = parse_command("move fading the", state)
        assert command.action == MoveCardToSlot(card_id=state.hand[1], slot_id="slot-the-manor")

    def test_full_slot_id(self, state):
        """Full slot ids are accepted as-is."""
        assert parse_command("activate slot-the-manor", state).action == ActivateSlot(slot_id="slot-the-manor")

    def test_ambiguous_prefix(self, state, with_slot):
        """Prefixes matching several slots are rejected."""
        state, _ = with_slot(state, "damaged-sanctum")
        state, _ = with_slot(state, "damaged-scriptorium")
        with pytest.raises(CommandError, match="ambiguous"):
            parse_command("activate ruined-s", state)

    def test_no_match(self, state):
        """Unknown references are rejected."""
        with pytest.raises(CommandError, match="No slot matches"):
            parse_command("activate cellar", state)

    def test_hand_index_out_of_range(self, state):
        """Indices beyond the hand are rejected."""
        with pytest.raises(CommandError, match="no card #9"):
            parse_command("recall 9", state)

    def test_missing_argument(self, state):
        """Commands report their usage when arguments are missing."""
        with pytest.raises(CommandError, match="Usage: move"):
            parse_command("move 1", state)

    def test_unknown_verb(self, state):
        """Unknown verbs are rejected."""
        with pytest.raises(CommandError, match="Unknown command 'dance'"):
            parse_command("dance", state)

    def test_blank_line(self, state):
        """Blank input asks for a command."""
        with pytest.raises(CommandError):
            parse_command("   ", state)

    def test_time_commands(self, state):
        """advance, pause and speed map onto reducer actions."""
        assert parse_command("advance", state).action == AdvanceTime()
        assert parse_command("pause", state).action == SetTimeScale(scale=0)
        assert parse_command("speed 2", state).action == SetTimeScale(scale=2.0)
        with pytest.raises(CommandError, match="not a number"):
            parse_command("speed fast", state)

    def test_ack(self, state):
        """ack takes the oldest reveal unless one is named."""
        with pytest.raises(CommandError, match="Nothing is waiting"):
            parse_command("ack", state)

        state = state.model_copy(update={"pending_reveals": ["journal-a", "dream-b"]})
        assert parse_command("ack", state).action == AcknowledgeCardReveal(card_id="journal-a")
        assert parse_command("ack dream", state).action == AcknowledgeCardReveal(card_id="dream-b")

    def test_session_commands(self, state):
        """save, load, saves, look, help and quit carry no action."""
        assert parse_command("save", None) == Command("save")
        assert parse_command("save late-night", state) == Command("save", argument="late-night")
        assert parse_command("load run", None) == Command("load", argument="run")
        assert parse_command("quit", None).action is None
        with pytest.raises(CommandError, match="Usage: load"):
            parse_command("load", None)

    def test_actions_need_a_game(self):
        """Reducer commands fail without a loaded game."""
        with pytest.raises(CommandError, match="No game loaded"):
            parse_command("advance", None)


class TestRunCommand:
    """Test executing parsed commands."""

    def test_action_dispatches(self, session):
        """Action commands go through the session."""
        session.new_game()
        assert run_command(session, Command("advance", AdvanceTime()))
        assert session.current.cycle == 2

    def test_quit_stops_loop(self, session):
        """quit ends the loop."""
        assert run_command(session, Command("quit")) is False

    def test_save_command(self, session, memory_store):
        """save writes to the store."""
        session.new_game()
        run_command(session, Command("save", argument="named"))
        assert memory_store.exists("named")


def _end_of_input(*args, **kwargs):
    raise EOFError


class TestMain:
    """Test the entry point without a terminal."""

    def test_new_game_and_autosave(self, tmp_path, monkeypatch):
        """A fresh run starts a game and autosaves on exit."""
        monkeypatch.setattr(cli.Prompt, "ask", _end_of_input)
        assert cli.main(["--saves-dir", str(tmp_path), "--seed", "3"]) == 0
        assert (tmp_path / "autosave.json").exists()

    def test_preferences_remembered(self, tmp_path, monkeypatch):
        """Command-line preferences are written to the config file."""
        monkeypatch.setattr(cli.Prompt, "ask", _end_of_input)
        cli.main([
            "--saves-dir", str(tmp_path),
            "--persona", "persona-weaver",
            "--speed", "2",
            "--no-autosave",
        ])

        config = load_config(tmp_path)
        assert config["persona"] == "persona-weaver"
        assert config["time_scale"] == 2.0
        assert config["autosave"] is False
        assert not (tmp_path / "autosave.json").exists()

    def test_unknown_persona(self, tmp_path, monkeypatch):
        """An unknown persona exits with an error code."""
        monkeypatch.setattr(cli.Prompt, "ask", _end_of_input)
        assert cli.main(["--saves-dir", str(tmp_path), "--persona", "persona-nobody"]) == 1

    def test_missing_save(self, tmp_path):
        """Loading a save that does not exist exits with an error code."""
        assert cli.main(["--saves-dir", str(tmp_path), "--load", "ghost"]) == 1
