"""
Multiplier state and the apply step.

Combines a floor's baseline scaling with its rolled modifiers into the
multipliers gameplay code reads for the rest of the floor.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, NamedTuple

from .catalog import FloorModifier, ModifierAttribute, modifier_value, regen_value

# Floors for the clamped fields
MIN_PLAYER_MULTIPLIER = 0.5
MIN_ENEMY_MULTIPLIER = 1.0


@dataclass(frozen=True)
class MultiplierState:
    """
    Snapshot of every multiplier active on a floor.

    Player multipliers never drop below 0.5 and enemy multipliers never drop
    below 1.0 once the apply step has run. The regen rate is in HP/sec and
    may be negative (health drains).
    """
    enemy_health_mult: float = 1.0
    enemy_damage_mult: float = 1.0
    enemy_count_mult: float = 1.0
    player_speed_mult: float = 1.0
    player_damage_mult: float = 1.0
    player_health_mult: float = 1.0
    player_health_regen_rate: float = 0.0

    @classmethod
    def neutral(cls) -> "MultiplierState":
        return cls()

    def to_dict(self) -> Dict[str, float]:
        return {
            "enemy_health_mult": self.enemy_health_mult,
            "enemy_damage_mult": self.enemy_damage_mult,
            "enemy_count_mult": self.enemy_count_mult,
            "player_speed_mult": self.player_speed_mult,
            "player_damage_mult": self.player_damage_mult,
            "player_health_mult": self.player_health_mult,
            "player_health_regen_rate": self.player_health_regen_rate,
        }


class AppliedModifiers(NamedTuple):
    state: MultiplierState
    # Signed fraction handed to spawners; not part of MultiplierState
    enemy_speed_adjustment: float


def clamp_state(state: MultiplierState) -> MultiplierState:
    return replace(
        state,
        player_speed_mult=max(state.player_speed_mult, MIN_PLAYER_MULTIPLIER),
        player_damage_mult=max(state.player_damage_mult, MIN_PLAYER_MULTIPLIER),
        player_health_mult=max(state.player_health_mult, MIN_PLAYER_MULTIPLIER),
        enemy_health_mult=max(state.enemy_health_mult, MIN_ENEMY_MULTIPLIER),
        enemy_damage_mult=max(state.enemy_damage_mult, MIN_ENEMY_MULTIPLIER),
        enemy_count_mult=max(state.enemy_count_mult, MIN_ENEMY_MULTIPLIER),
    )


def apply_modifiers(baseline: MultiplierState, modifiers: Iterable[FloorModifier]) -> AppliedModifiers:
    """
    Layer modifiers on top of a baseline and clamp the result.

    - Player speed/damage/health: good adds the value, bad subtracts it.
    - Enemy damage: good subtracts, bad adds.
    - Enemy speed: accumulated into the separate enemy speed adjustment,
      same sign convention as enemy damage.
    - Player health regen: *sets* the rate to +/- the regen value.

    Pure function: the same inputs always give the same result. Attribute
    uniqueness is the generator's job, not checked here.
    """
    values = baseline.to_dict()
    enemy_speed_adjustment = 0.0

    for modifier in modifiers:
        value = modifier_value(modifier.intensity)
        sign = 1.0 if modifier.is_good else -1.0

        if modifier.attribute is ModifierAttribute.PLAYER_SPEED:
            values["player_speed_mult"] += sign * value
        elif modifier.attribute is ModifierAttribute.PLAYER_DAMAGE:
            values["player_damage_mult"] += sign * value
        elif modifier.attribute is ModifierAttribute.PLAYER_HEALTH:
            values["player_health_mult"] += sign * value
        elif modifier.attribute is ModifierAttribute.PLAYER_HEALTH_REGEN:
            values["player_health_regen_rate"] = sign * regen_value(modifier.intensity)
        elif modifier.attribute is ModifierAttribute.ENEMY_DAMAGE:
            values["enemy_damage_mult"] -= sign * value
        elif modifier.attribute is ModifierAttribute.ENEMY_SPEED:
            enemy_speed_adjustment -= sign * value

    return AppliedModifiers(
        state=clamp_state(MultiplierState(**values)),
        enemy_speed_adjustment=enemy_speed_adjustment,
    )
