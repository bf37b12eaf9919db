"""
Command-line interface for Hallowmoon.

Main entry point and game loop. Each line typed at the prompt is parsed
into either a reducer action or a session command (save, load, look).

Cards and slots can be named by full id, by unique id prefix, or (for
cards) by their 1-based position in the hand. Slot ids may drop the
leading "slot-".
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel
from rich.prompt import Prompt

from .. import HallowmoonError, __version__
from ..runtime import Runtime
from ..state import GameMachine, GameSession, GameState
from ..state.actions import (
    AcknowledgeCardReveal,
    ActivateSlot,
    AdvanceTime,
    MoveCardToSlot,
    RecallCard,
    ResolvePendingSlotActions,
    SetTimeScale,
    UpgradeSlot,
)
from .config import load_config, set_autosave, set_persona, set_time_scale
from .renderer import console, show_banner, show_error, show_info, show_saves, show_state

logger = logging.getLogger(__name__)


class CommandError(HallowmoonError):
    """A console line could not be turned into a command."""
    pass


COMMAND_HELP = {
    "move": "move <card> <slot>  Place a card in a slot",
    "recall": "recall <card>       Return a seated card to your hand",
    "activate": "activate <slot>     Perform the slot's action",
    "upgrade": "upgrade <slot>      Spend glimmer to raise a slot's level",
    "advance": "advance             Let a cycle pass",
    "resolve": "resolve             Settle finished slot actions",
    "speed": "speed <n>           Set the clock speed (0 pauses)",
    "pause": "pause               Freeze the clock",
    "ack": "ack [card]          Acknowledge a newly revealed card",
    "save": "save [name]         Save the game",
    "load": "load <name>         Load a saved game",
    "saves": "saves               List saved games",
    "look": "look                Redraw the manor",
    "help": "help                Show this list",
    "quit": "quit                Leave (autosaves if enabled)",
}


@dataclass
class Command:
    """Parsed console line: a reducer action or a named session command."""
    name: str
    action: BaseModel | None = None
    argument: str | None = None


# -----------------------------------------------------------------------------
# Parsing
# -----------------------------------------------------------------------------

def _match_prefix(ref: str, candidates, kind: str) -> str:
    if ref in candidates:
        return ref
    matches = [c for c in candidates if c.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise CommandError(f"No {kind} matches '{ref}'.")
    raise CommandError(f"'{ref}' is ambiguous: {', '.join(sorted(matches))}")


def resolve_card_ref(ref: str, state: GameState) -> str:
    if ref.isdigit():
        index = int(ref) - 1
        if 0 <= index < len(state.hand):
            return state.hand[index]
        raise CommandError(f"Your hand has no card #{ref}.")
    return _match_prefix(ref, list(state.cards), "card")


def resolve_slot_ref(ref: str, state: GameState) -> str:
    slot_ids = list(state.slots)
    if ref not in slot_ids and not ref.startswith("slot-"):
        ref = f"slot-{ref}"
    return _match_prefix(ref, slot_ids, "slot")


def _arity(parts: list[str], count: int, usage: str) -> None:
    if len(parts) - 1 < count:
        raise CommandError(f"Usage: {usage}")


def parse_command(line: str, state: GameState | None) -> Command:
    """
    Turn a console line into a Command.

    Raises CommandError for unknown verbs, missing arguments or
    references that match nothing.
    """
    parts = line.strip().split()
    if not parts:
        raise CommandError("Type a command, or 'help'.")

    verb = parts[0].lower()
    if verb not in COMMAND_HELP:
        raise CommandError(f"Unknown command '{verb}'. Type 'help'.")

    if verb in ("help", "quit", "look", "saves"):
        return Command(verb)
    if verb in ("save", "load"):
        if verb == "load":
            _arity(parts, 1, COMMAND_HELP["load"])
        return Command(verb, argument=parts[1] if len(parts) > 1 else None)

    if state is None:
        raise CommandError("No game loaded.")

    if verb == "move":
        _arity(parts, 2, COMMAND_HELP["move"])
        return Command(verb, MoveCardToSlot(
            card_id=resolve_card_ref(parts[1], state),
            slot_id=resolve_slot_ref(parts[2], state),
        ))
    if verb == "recall":
        _arity(parts, 1, COMMAND_HELP["recall"])
        return Command(verb, RecallCard(card_id=resolve_card_ref(parts[1], state)))
    if verb == "activate":
        _arity(parts, 1, COMMAND_HELP["activate"])
        return Command(verb, ActivateSlot(slot_id=resolve_slot_ref(parts[1], state)))
    if verb == "upgrade":
        _arity(parts, 1, COMMAND_HELP["upgrade"])
        return Command(verb, UpgradeSlot(slot_id=resolve_slot_ref(parts[1], state)))
    if verb == "advance":
        return Command(verb, AdvanceTime())
    if verb == "resolve":
        return Command(verb, ResolvePendingSlotActions())
    if verb == "pause":
        return Command(verb, SetTimeScale(scale=0))
    if verb == "speed":
        _arity(parts, 1, COMMAND_HELP["speed"])
        try:
            scale = float(parts[1])
        except ValueError:
            raise CommandError(f"'{parts[1]}' is not a number.") from None
        return Command(verb, SetTimeScale(scale=scale))

    # ack
    if len(parts) > 1:
        card_id = _match_prefix(parts[1], state.pending_reveals, "revealed card")
    elif state.pending_reveals:
        card_id = state.pending_reveals[0]
    else:
        raise CommandError("Nothing is waiting to be revealed.")
    return Command(verb, AcknowledgeCardReveal(card_id=card_id))


# -----------------------------------------------------------------------------
# Main Loop
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Hallowmoon - a moonlit manor idle game")
    parser.add_argument("--saves-dir", default="saves", help="Directory for saves and config")
    parser.add_argument("--persona", help="Persona template key for a new game")
    parser.add_argument("--load", metavar="NAME", help="Resume a saved game")
    parser.add_argument("--seed", type=int, help="Fixed random seed")
    parser.add_argument("--speed", type=float, help="Clock speed (1.0 is real time)")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument(
        "--autosave",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Save after every command (remembered)",
    )
    parser.add_argument("--version", action="version", version=f"hallowmoon {__version__}")
    return parser


def show_help() -> None:
    for line in COMMAND_HELP.values():
        show_info(line)


def run_command(session: GameSession, command: Command) -> bool:
    """Execute one parsed command. Returns False when the loop should end."""
    logger.debug(f"Running command {command.name}")
    if command.action is not None:
        session.dispatch(command.action)
        return True

    if command.name == "quit":
        return False
    if command.name == "help":
        show_help()
    elif command.name == "saves":
        show_saves(session.list_saves())
    elif command.name == "save":
        save = session.save(command.argument)
        show_info(f"Saved as '{save.meta.name}'.")
    elif command.name == "load":
        if session.load(command.argument) is None:
            show_error(f"No save named '{command.argument}'.")
    return True


def _settle(session: GameSession) -> None:
    """Commit slot actions that finished while the player was away."""
    if any(slot.pending_action is not None for slot in session.current.slots.values()):
        session.dispatch(ResolvePendingSlotActions())


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    saves_dir = Path(args.saves_dir)
    config = load_config(saves_dir)

    logging.basicConfig(
        level=(args.log_level or config.get("log_level", "WARNING")).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.autosave is not None:
        set_autosave(args.autosave, saves_dir)
        autosave = args.autosave
    else:
        autosave = config.get("autosave", True)

    seed = args.seed if args.seed is not None else config.get("seed")
    session = GameSession(
        saves_dir,
        machine=GameMachine(Runtime(seed=seed)),
        autosave=autosave,
    )

    show_banner()

    if args.load:
        if session.load(args.load) is None:
            show_error(f"No save named '{args.load}'.")
            return 1
    else:
        persona = args.persona or config.get("persona")
        try:
            session.new_game(persona)
        except HallowmoonError as e:
            show_error(str(e))
            return 1
        if args.persona:
            set_persona(args.persona, saves_dir)

    speed = args.speed if args.speed is not None else config.get("time_scale", 1.0)
    if speed != session.current.time_scale:
        session.dispatch(SetTimeScale(scale=speed))
        if args.speed is not None:
            set_time_scale(args.speed, saves_dir)

    show_info("Type 'help' for commands.")
    show_state(session.current, session.summaries())

    while True:
        try:
            line = Prompt.ask("[medium_purple]>[/medium_purple]", console=console)
        except (EOFError, KeyboardInterrupt):
            break

        _settle(session)
        try:
            command = parse_command(line, session.current)
        except CommandError as e:
            show_error(str(e))
            continue

        if not run_command(session, command):
            break
        if command.name not in ("help", "saves", "save"):
            show_state(session.current, session.summaries())

    if session.autosave and session.current is not None:
        session.save()
    return 0


if __name__ == "__main__":
    sys.exit(main())
