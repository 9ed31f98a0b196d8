"""
Encounter configuration: difficulty percentages, modifier cap, settle delay.

Defaults come from settings.py; a JSON file can override them.
"""

import json
from pathlib import Path
from typing import Optional, Dict, Any

import settings
from engine.error_handler import ConfigError, get_logger, log_error

logger = get_logger("config")

# Config file location
CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
CONFIG_FILE = CONFIG_DIR / "encounter.json"


class EncounterConfig:
    """Tunable values for floor difficulty and encounter completion."""

    def __init__(self) -> None:
        self.enemy_health_increase_per_floor: float = settings.ENEMY_HEALTH_INCREASE_PER_FLOOR
        self.enemy_damage_increase_per_floor: float = settings.ENEMY_DAMAGE_INCREASE_PER_FLOOR
        self.enemy_count_increase_per_floor: float = settings.ENEMY_COUNT_INCREASE_PER_FLOOR
        self.max_modifiers_per_floor: int = settings.MAX_MODIFIERS_PER_FLOOR
        self.settle_delay: float = settings.SETTLE_DELAY
        self.boss_floor: int = settings.BOSS_FLOOR
        self.fps: int = settings.FPS

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for saving."""
        return {
            "enemy_health_increase_per_floor": self.enemy_health_increase_per_floor,
            "enemy_damage_increase_per_floor": self.enemy_damage_increase_per_floor,
            "enemy_count_increase_per_floor": self.enemy_count_increase_per_floor,
            "max_modifiers_per_floor": self.max_modifiers_per_floor,
            "settle_delay": self.settle_delay,
            "boss_floor": self.boss_floor,
            "fps": self.fps,
        }

    def from_dict(self, data: Dict[str, Any]) -> None:
        """Load config from dictionary. Missing keys keep the settings.py default."""
        self.enemy_health_increase_per_floor = float(
            data.get("enemy_health_increase_per_floor", settings.ENEMY_HEALTH_INCREASE_PER_FLOOR)
        )
        self.enemy_damage_increase_per_floor = float(
            data.get("enemy_damage_increase_per_floor", settings.ENEMY_DAMAGE_INCREASE_PER_FLOOR)
        )
        self.enemy_count_increase_per_floor = float(
            data.get("enemy_count_increase_per_floor", settings.ENEMY_COUNT_INCREASE_PER_FLOOR)
        )
        self.max_modifiers_per_floor = int(data.get("max_modifiers_per_floor", settings.MAX_MODIFIERS_PER_FLOOR))
        self.settle_delay = float(data.get("settle_delay", settings.SETTLE_DELAY))
        self.boss_floor = int(data.get("boss_floor", settings.BOSS_FLOOR))
        self.fps = int(data.get("fps", settings.FPS))

    def validate(self) -> None:
        """Raise ConfigError if a value is out of range."""
        if not 0 <= self.max_modifiers_per_floor <= 3:
            raise ConfigError(
                f"max_modifiers_per_floor must be within 0-3, got {self.max_modifiers_per_floor}"
            )
        if self.settle_delay < 0:
            raise ConfigError(f"settle_delay must not be negative, got {self.settle_delay}")
        if self.boss_floor < 1:
            raise ConfigError(f"boss_floor must be at least 1, got {self.boss_floor}")
        if self.fps <= 0:
            raise ConfigError(f"fps must be positive, got {self.fps}")

    def save(self, path: Optional[Path] = None) -> bool:
        """Save config to file."""
        target = path or CONFIG_FILE
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
            return True
        except OSError as e:
            log_error(e, "config_save")
            return False

    def load(self, path: Optional[Path] = None) -> bool:
        """
        Load config from file.

        Returns False (keeping the current values) when the file is missing,
        unreadable or holds invalid values.
        """
        source = path or CONFIG_FILE
        if not source.exists():
            return False

        previous = self.to_dict()
        try:
            with source.open("r", encoding="utf-8") as f:
                data = json.load(f)
            self.from_dict(data)
            self.validate()
            return True
        except (OSError, ValueError, TypeError, AttributeError, ConfigError) as e:
            log_error(e, "config_load")
            self.from_dict(previous)
            return False


# Global config instance
_config = EncounterConfig()


def get_config() -> EncounterConfig:
    """Get the global config instance."""
    return _config


def load_config(path: Optional[Path] = None) -> EncounterConfig:
    """Load and return the config."""
    if path is not None and not _config.load(path):
        logger.warning(f"Could not load config from {path}; using defaults")
    elif path is None:
        _config.load()
    return _config
