"""
Console preferences, kept as JSON beside the saves.

Only the launcher reads these. Values given on the command line win and
are written back so the next session starts the same way.
"""

import json
import logging
from pathlib import Path
from typing import Any, TypedDict

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".hallowmoon_config.json"


class Config(TypedDict, total=False):
    saves_dir: str
    persona: str | None  # persona-watcher, persona-weaver, persona-outcast
    time_scale: float  # 1.0 is real time
    seed: int | None
    log_level: str
    autosave: bool  # write autosave.json after each command


DEFAULT_CONFIG: Config = {
    "saves_dir": "saves",
    "persona": None,
    "time_scale": 1.0,
    "seed": None,
    "log_level": "WARNING",
    "autosave": True,
}


def get_config_path(saves_dir: Path | str = "saves") -> Path:
    return Path(saves_dir) / CONFIG_FILENAME


def load_config(saves_dir: Path | str = "saves") -> Config:
    """Read preferences, filling gaps from DEFAULT_CONFIG.

    A missing or unreadable file yields a fresh copy of the defaults.
    """
    merged: Config = dict(DEFAULT_CONFIG)
    path = get_config_path(saves_dir)
    if not path.exists():
        return merged

    try:
        stored = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return merged

    if isinstance(stored, dict):
        merged.update(stored)
    return merged


def save_config(config: Config, saves_dir: Path | str = "saves") -> bool:
    """Write preferences; False if the file could not be written."""
    path = get_config_path(saves_dir)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    except OSError as e:
        logger.error(f"Could not write config {path}: {e}")
        return False
    return True


def _remember(key: str, value: Any, saves_dir: Path | str) -> None:
    config = load_config(saves_dir)
    config[key] = value
    save_config(config, saves_dir)


def set_persona(persona: str | None, saves_dir: Path | str = "saves") -> None:
    _remember("persona", persona, saves_dir)


def set_time_scale(scale: float, saves_dir: Path | str = "saves") -> None:
    """Remember the clock speed; 0 is stored as-is and means paused."""
    _remember("time_scale", scale, saves_dir)


def set_autosave(enabled: bool, saves_dir: Path | str = "saves") -> None:
    _remember("autosave", enabled, saves_dir)
