"""
Floor difficulty module.

Modifier catalog, difficulty generator and the multiplier apply step.
"""

from .catalog import (
    ModifierAttribute, IntensityLevel, ModifierDef, FloorModifier,
    ModifierSummary, MODIFIER_CATALOG,
    get_modifier_def, is_good_for_player, modifier_value, regen_value,
    summarize_modifiers,
)
from .multipliers import (
    MultiplierState, AppliedModifiers,
    MIN_PLAYER_MULTIPLIER, MIN_ENEMY_MULTIPLIER,
    apply_modifiers, clamp_state,
)
from .generator import DifficultyGenerator, sample_modifier_count

__all__ = [
    "ModifierAttribute",
    "IntensityLevel",
    "ModifierDef",
    "FloorModifier",
    "ModifierSummary",
    "MODIFIER_CATALOG",
    "get_modifier_def",
    "is_good_for_player",
    "modifier_value",
    "regen_value",
    "summarize_modifiers",
    "MultiplierState",
    "AppliedModifiers",
    "MIN_PLAYER_MULTIPLIER",
    "MIN_ENEMY_MULTIPLIER",
    "apply_modifiers",
    "clamp_state",
    "DifficultyGenerator",
    "sample_modifier_count",
]
