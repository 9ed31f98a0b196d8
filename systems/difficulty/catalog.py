"""
Floor modifier catalog.

Static table of every attribute a floor modifier can touch, who owns it
(player or enemies), and the text shown for it. Also holds the value tables
used by the apply step.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Iterable


class ModifierAttribute(Enum):
    PLAYER_SPEED = "PlayerSpeed"
    PLAYER_DAMAGE = "PlayerDamage"
    PLAYER_HEALTH = "PlayerHealth"
    PLAYER_HEALTH_REGEN = "PlayerHealthRegen"
    ENEMY_DAMAGE = "EnemyDamage"
    ENEMY_SPEED = "EnemySpeed"


class IntensityLevel(IntEnum):
    SMALL = 0
    MEDIUM = 1
    LARGE = 2


@dataclass(frozen=True)
class ModifierDef:
    """
    Catalog entry for one attribute.

    - player_owned: True for player stats (increasing is good), False for
      enemy stats (decreasing is good).
    - good_text / bad_text: description used when the modifier helps / hurts
      the player.
    """
    attribute: ModifierAttribute
    player_owned: bool
    good_text: str
    bad_text: str


MODIFIER_CATALOG: Dict[ModifierAttribute, ModifierDef] = {
    d.attribute: d
    for d in (
        ModifierDef(ModifierAttribute.PLAYER_SPEED, True,
                    "Increases player movement speed", "Decreases player movement speed"),
        ModifierDef(ModifierAttribute.PLAYER_DAMAGE, True,
                    "Increases player damage", "Decreases player damage"),
        ModifierDef(ModifierAttribute.PLAYER_HEALTH, True,
                    "Increases player health", "Decreases player health"),
        ModifierDef(ModifierAttribute.PLAYER_HEALTH_REGEN, True,
                    "Player health slowly regenerates", "Player health slowly decreases"),
        ModifierDef(ModifierAttribute.ENEMY_DAMAGE, False,
                    "Decreases enemy damage", "Increases enemy damage"),
        ModifierDef(ModifierAttribute.ENEMY_SPEED, False,
                    "Decreases enemy speed", "Increases enemy speed"),
    )
}

# Fractional change per intensity (2% / 5% / 8%)
MODIFIER_VALUES: Dict[IntensityLevel, float] = {
    IntensityLevel.SMALL: 0.02,
    IntensityLevel.MEDIUM: 0.05,
    IntensityLevel.LARGE: 0.08,
}

# Health regen is an absolute rate (HP/sec), not a fraction
REGEN_VALUES: Dict[IntensityLevel, float] = {
    IntensityLevel.SMALL: 0.5,
    IntensityLevel.MEDIUM: 1.0,
    IntensityLevel.LARGE: 1.5,
}

INTENSITY_ADVERBS: Dict[IntensityLevel, str] = {
    IntensityLevel.SMALL: "Slightly",
    IntensityLevel.MEDIUM: "Moderately",
    IntensityLevel.LARGE: "Greatly",
}


def get_modifier_def(attribute: ModifierAttribute) -> ModifierDef:
    return MODIFIER_CATALOG[attribute]


def is_good_for_player(attribute: ModifierAttribute, increasing: bool) -> bool:
    """
    Valence rule: player stats going up help the player, enemy stats going
    up hurt the player.
    """
    if get_modifier_def(attribute).player_owned:
        return increasing
    return not increasing


def modifier_value(intensity: IntensityLevel) -> float:
    return MODIFIER_VALUES[IntensityLevel(intensity)]


def regen_value(intensity: IntensityLevel) -> float:
    return REGEN_VALUES[IntensityLevel(intensity)]


@dataclass(frozen=True)
class FloorModifier:
    """One rolled perturbation for the current floor. Immutable."""
    attribute: ModifierAttribute
    is_good: bool
    intensity: IntensityLevel

    @property
    def description(self) -> str:
        """Player-facing text, e.g. 'Greatly Decreases enemy damage'."""
        entry = get_modifier_def(self.attribute)
        effect = entry.good_text if self.is_good else entry.bad_text
        return f"{INTENSITY_ADVERBS[self.intensity]} {effect}"

    @property
    def label(self) -> str:
        """Compact log form, e.g. 'Good EnemyDamage (Large)'."""
        direction = "Good" if self.is_good else "Bad"
        return f"{direction} {self.attribute.value} ({self.intensity.name.capitalize()})"


@dataclass(frozen=True)
class ModifierSummary:
    blessings: int
    curses: int

    @property
    def hint(self) -> str:
        if self.blessings == 0 and self.curses == 0:
            return "No modifiers on this floor"

        blessing_text = _plural(self.blessings, "blessing") if self.blessings else ""
        curse_text = _plural(self.curses, "curse") if self.curses else ""

        if blessing_text and curse_text:
            return f"{blessing_text} and {curse_text} await"

        count = self.blessings or self.curses
        verb = "awaits" if count == 1 else "await"
        return f"{blessing_text or curse_text} {verb}"


def _plural(count: int, noun: str) -> str:
    if count == 1:
        return f"a {noun}"
    return f"{count} {noun}s"


def summarize_modifiers(modifiers: Iterable[FloorModifier]) -> ModifierSummary:
    """Count blessings (good) and curses (bad) for the floor preview."""
    blessings = 0
    curses = 0
    for modifier in modifiers:
        if modifier.is_good:
            blessings += 1
        else:
            curses += 1
    return ModifierSummary(blessings=blessings, curses=curses)
