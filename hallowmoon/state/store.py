"""
Save-game storage abstraction.

Separates persistence from the reducer for testability. A save wraps
the GameState snapshot with a little metadata for listings.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field, ValidationError

from .schema import GameState

logger = logging.getLogger(__name__)


class SaveMeta(BaseModel):
    name: str
    persona: str | None = None  # Hero card name at save time
    cycle: int = 1
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class SaveGame(BaseModel):
    meta: SaveMeta
    state: GameState

    @classmethod
    def from_state(cls, name: str, state: GameState) -> "SaveGame":
        hero = state.cards.get(state.hero_card_id) if state.hero_card_id else None
        return cls(
            meta=SaveMeta(name=name, persona=hero.name if hero else None, cycle=state.cycle),
            state=state,
        )

    def save_checkpoint(self) -> None:
        """Refresh metadata before writing."""
        self.meta.cycle = self.state.cycle
        self.meta.updated_at = datetime.now()


@runtime_checkable
class GameStore(Protocol):
    """
    Abstract storage interface for saves.

    Implementations:
    - JsonGameStore: File-based persistence (production)
    - MemoryGameStore: In-memory storage (testing)
    """

    def save(self, save: SaveGame) -> None:
        """Persist a save."""
        ...

    def load(self, name: str) -> SaveGame | None:
        """Load a save by name. Returns None if not found."""
        ...

    def delete(self, name: str) -> bool:
        """Delete a save. Returns True if deleted."""
        ...

    def list_all(self) -> list[dict]:
        """List all saves with metadata."""
        ...

    def exists(self, name: str) -> bool:
        """Check if a save exists."""
        ...


class JsonGameStore:
    """
    File-based save storage using JSON.

    Features:
    - Automatic backup on save
    - Prefix matching on load
    """

    def __init__(self, saves_dir: Path | str = "saves"):
        self.saves_dir = Path(saves_dir)
        self.saves_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, name: str) -> Path:
        return self.saves_dir / f"{name}.json"

    def save(self, save: SaveGame) -> None:
        """Save to JSON file with backup."""
        save.save_checkpoint()

        save_file = self._path(save.meta.name)

        # Backup previous save
        if save_file.exists():
            backup = save_file.with_suffix(".json.bak")
            backup.write_text(save_file.read_text(encoding="utf-8"), encoding="utf-8")

        save_file.write_text(save.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"Saved game '{save.meta.name}' at cycle {save.meta.cycle}")

    def load(self, name: str) -> SaveGame | None:
        """
        Load a save by name or unique prefix.

        Returns None when nothing matches or the file is corrupt.
        """
        save_file = self._path(name)

        if not save_file.exists():
            for f in self.saves_dir.glob("*.json"):
                if f.name.startswith("."):
                    continue
                if f.stem.startswith(name):
                    save_file = f
                    break

        if not save_file.exists():
            return None

        try:
            data = json.loads(save_file.read_text(encoding="utf-8"))
            return SaveGame.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Could not load save {save_file.name}: {e}")
            return None

    def delete(self, name: str) -> bool:
        save_file = self._path(name)
        if save_file.exists():
            save_file.unlink()
            return True
        return False

    def list_all(self) -> list[dict]:
        """
        List all saves, most recently written first.

        Returns list of dicts with: name, persona, cycle, updated_at
        """
        saves = []

        for f in sorted(
            self.saves_dir.glob("*.json"),
            key=lambda x: x.stat().st_mtime,
            reverse=True,
        ):
            if f.name.startswith("."):
                continue
            try:
                data = json.loads(f.read_text(encoding="utf-8"))
                meta = data.get("meta")
                if not isinstance(meta, dict):
                    continue

                saves.append({
                    "name": meta.get("name", f.stem),
                    "persona": meta.get("persona"),
                    "cycle": meta.get("cycle", 1),
                    "updated_at": datetime.fromisoformat(meta.get("updated_at", "2000-01-01")),
                })
            except (json.JSONDecodeError, ValueError):
                continue

        return saves

    def exists(self, name: str) -> bool:
        return self._path(name).exists()


class MemoryGameStore:
    """
    In-memory save storage for testing.

    No file I/O - all data lives in memory.
    """

    def __init__(self):
        self.saves: dict[str, SaveGame] = {}

    def save(self, save: SaveGame) -> None:
        save.save_checkpoint()
        self.saves[save.meta.name] = save

    def load(self, name: str) -> SaveGame | None:
        if name in self.saves:
            return self.saves[name]

        for saved_name, save in self.saves.items():
            if saved_name.startswith(name):
                return save

        return None

    def delete(self, name: str) -> bool:
        if name in self.saves:
            del self.saves[name]
            return True
        return False

    def list_all(self) -> list[dict]:
        saves = [
            {
                "name": save.meta.name,
                "persona": save.meta.persona,
                "cycle": save.meta.cycle,
                "updated_at": save.meta.updated_at,
            }
            for save in self.saves.values()
        ]
        saves.sort(key=lambda x: x["updated_at"], reverse=True)
        return saves

    def exists(self, name: str) -> bool:
        return name in self.saves

    def clear(self) -> None:
        """Clear all saves (test utility)."""
        self.saves.clear()
