"""
Display and rendering helpers for the Hallowmoon console.

Handles theming, the slot map, the hand and the chronicle panel.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..state.schema import CardInstance, GameState
from ..state.selectors import SlotSummary
from ..utils.slot_actions import describe_card_for_status
from ..utils.time import format_duration

# Shared console instance
console = Console()

# -----------------------------------------------------------------------------
# Theme: candlelight on old silver
# -----------------------------------------------------------------------------

THEME = {
    "primary": "medium_purple",     # moonlit violet
    "secondary": "grey70",          # pale silver
    "warning": "dark_goldenrod",    # guttering candle
    "danger": "dark_red",
    "accent": "cyan",
    "dim": "dim",
    "text": "grey85",
}

RESOURCE_GLYPHS = {
    "coin": "¤",
    "lore": "§",
    "glimmer": "✦",
}


def _styled(text: str, key: str) -> str:
    return f"[{THEME[key]}]{text}[/{THEME[key]}]"


def show_banner() -> None:
    console.print(Panel(
        Text("HALLOWMOON", justify="center", style=f"bold {THEME['primary']}"),
        subtitle=_styled("the manor wakes", "dim"),
        border_style=THEME["primary"],
    ))


def render_resources(state: GameState) -> Text:
    text = Text()
    for key, glyph in RESOURCE_GLYPHS.items():
        text.append(f"{glyph} {getattr(state.resources, key)} {key}   ", style=THEME["secondary"])
    text.append(f"cycle {state.cycle}", style=THEME["dim"])
    if state.is_paused:
        text.append("   paused", style=THEME["warning"])
    elif state.time_scale != 1.0:
        text.append(f"   x{state.time_scale:g}", style=THEME["accent"])
    return text


def render_slots(state: GameState, summaries: dict[str, SlotSummary]) -> Table:
    table = Table(title=_styled("Manor", "primary"), expand=True)
    table.add_column("Slot", style=THEME["text"])
    table.add_column("Seated", style=THEME["secondary"])
    table.add_column("Action", style=THEME["accent"])
    table.add_column("Status", style=THEME["dim"])

    for slot_id, summary in summaries.items():
        slot = state.slots[slot_id]
        name = f"{slot.name} [dim]({slot.id})[/dim]"
        if slot.level > 1:
            name += f" L{slot.level}"

        seated = [describe_card_for_status(card) for card in (summary.occupant, summary.assistant) if card]
        seated += [f"+ {card.name}" for card in summary.attachments]

        if summary.is_resolving and summary.is_locked:
            status = f"resolving, {format_duration(summary.lock_remaining_ms)}"
        elif summary.is_locked:
            status = f"ready in {format_duration(summary.lock_remaining_ms)}"
        elif summary.availability_note:
            status = summary.availability_note
        elif not slot.unlocked:
            status = "sealed"
        else:
            status = ""

        action = summary.action_label or ""
        if action and not summary.can_activate:
            action = f"[dim]{action}[/dim]"

        table.add_row(name, "\n".join(seated), action, status)
    return table


def render_hand(state: GameState) -> Table:
    table = Table(title=_styled("Hand", "primary"), expand=True)
    table.add_column("#", style=THEME["dim"], width=3)
    table.add_column("Card", style=THEME["text"])
    table.add_column("Type", style=THEME["secondary"])
    table.add_column("Fades", style=THEME["warning"])

    for index, card_id in enumerate(state.hand, start=1):
        card: CardInstance | None = state.cards.get(card_id)
        if card is None:
            continue
        fades = "" if card.permanent else f"{card.remaining_turns}"
        marker = " *" if card_id in state.pending_reveals else ""
        table.add_row(str(index), f"{card.name}{marker} [dim]({card.id})[/dim]", card.type.value, fades)
    return table


def render_log(state: GameState, limit: int = 6) -> Panel:
    lines = state.log[:limit]
    body = "\n".join(lines) if lines else _styled("Silence.", "dim")
    return Panel(body, title="Chronicle", border_style=THEME["secondary"])


def show_state(state: GameState, summaries: dict[str, SlotSummary]) -> None:
    console.print(render_resources(state))
    console.print(render_slots(state, summaries))
    console.print(render_hand(state))
    console.print(render_log(state))


def show_saves(saves: list[dict]) -> None:
    if not saves:
        console.print(_styled("No saves yet", "dim"))
        return
    table = Table(title=_styled("Saves", "primary"))
    table.add_column("Name")
    table.add_column("Persona")
    table.add_column("Cycle", justify="right")
    table.add_column("Updated", style=THEME["dim"])
    for save in saves:
        table.add_row(
            save["name"],
            save.get("persona") or "",
            str(save.get("cycle", "")),
            save["updated_at"].strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


def show_error(message: str) -> None:
    console.print(_styled(message, "danger"))


def show_info(message: str) -> None:
    console.print(_styled(message, "dim"))
