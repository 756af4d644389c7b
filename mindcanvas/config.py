"""Persisted application settings."""

import json
from dataclasses import dataclass, asdict
from typing import Optional

from mindcanvas.database import Database

SETTINGS_KEY = "canvas_settings"


@dataclass
class CanvasSettings:
    """User preferences for the canvas."""
    show_grid: bool = True
    grid_size: int = 30
    confirm_destructive: bool = True
    backup_count: int = 10

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, data: Optional[str]) -> "CanvasSettings":
        if not data:
            return cls()
        try:
            d = json.loads(data)
            # Filter to only known fields to handle schema evolution
            known = {f.name for f in cls.__dataclass_fields__.values()}
            return cls(**{k: v for k, v in d.items() if k in known})
        except (json.JSONDecodeError, TypeError, AttributeError):
            return cls()


def load_settings(db: Database) -> CanvasSettings:
    return CanvasSettings.from_json(db.get_raw(SETTINGS_KEY))


def save_settings(db: Database, settings: CanvasSettings):
    db.set_raw(SETTINGS_KEY, settings.to_json())
