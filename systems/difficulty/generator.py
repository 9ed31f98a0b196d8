"""
Difficulty generator.

Produces a floor's baseline scaling and its random set of 0-3 modifiers.
"""

from __future__ import annotations

import random
from typing import List, Optional, Tuple

import settings
from engine.error_handler import get_logger

from .catalog import FloorModifier, IntensityLevel, ModifierAttribute, is_good_for_player
from .multipliers import MultiplierState

logger = get_logger("difficulty")

# Cumulative thresholds for the modifier count roll:
# 10% -> 0, 20% -> 1, 30% -> 2, 40% -> 3
MODIFIER_COUNT_THRESHOLDS: Tuple[Tuple[float, int], ...] = (
    (0.10, 0),
    (0.30, 1),
    (0.60, 2),
)
MAX_MODIFIER_COUNT = 3


def sample_modifier_count(value: float, max_count: int = MAX_MODIFIER_COUNT) -> int:
    """Map a uniform draw in [0, 1) to a modifier count."""
    count = MAX_MODIFIER_COUNT
    for threshold, mapped in MODIFIER_COUNT_THRESHOLDS:
        if value < threshold:
            count = mapped
            break
    return min(count, max_count)


class DifficultyGenerator:
    """
    Rolls floor difficulty.

    Percentages are per completed floor (floor 1 is the baseline). The modifier
    count distribution is fixed; max_modifiers only caps it.
    """

    def __init__(
        self,
        health_increase_per_floor: float = settings.ENEMY_HEALTH_INCREASE_PER_FLOOR,
        damage_increase_per_floor: float = settings.ENEMY_DAMAGE_INCREASE_PER_FLOOR,
        count_increase_per_floor: float = settings.ENEMY_COUNT_INCREASE_PER_FLOOR,
        max_modifiers: int = settings.MAX_MODIFIERS_PER_FLOOR,
    ) -> None:
        self.health_increase_per_floor = health_increase_per_floor
        self.damage_increase_per_floor = damage_increase_per_floor
        self.count_increase_per_floor = count_increase_per_floor
        self.max_modifiers = max(0, min(MAX_MODIFIER_COUNT, max_modifiers))

    @classmethod
    def from_config(cls, config) -> "DifficultyGenerator":
        return cls(
            health_increase_per_floor=config.enemy_health_increase_per_floor,
            damage_increase_per_floor=config.enemy_damage_increase_per_floor,
            count_increase_per_floor=config.enemy_count_increase_per_floor,
            max_modifiers=config.max_modifiers_per_floor,
        )

    def compute_baseline(self, floor_number: int) -> MultiplierState:
        """Enemy scaling from the floor number; player fields stay neutral."""
        floors_completed = floor_number - 1
        return MultiplierState(
            enemy_health_mult=1.0 + floors_completed * self.health_increase_per_floor / 100.0,
            enemy_damage_mult=1.0 + floors_completed * self.damage_increase_per_floor / 100.0,
            enemy_count_mult=1.0 + floors_completed * self.count_increase_per_floor / 100.0,
            player_speed_mult=1.0,
            player_damage_mult=1.0,
            player_health_mult=1.0,
            player_health_regen_rate=0.0,
        )

    def roll_modifiers(self, rng: random.Random, count: int) -> List[FloorModifier]:
        """
        Draw `count` modifiers without repeating an attribute.

        Each pick removes its attribute from the pool, so the result never
        holds two modifiers for the same stat.
        """
        pool = list(ModifierAttribute)
        count = min(count, len(pool))
        modifiers: List[FloorModifier] = []

        for _ in range(count):
            if not pool:
                break

            attribute = pool.pop(rng.randrange(len(pool)))
            increasing = rng.random() < 0.5
            intensity = IntensityLevel(rng.randrange(3))

            modifier = FloorModifier(
                attribute=attribute,
                is_good=is_good_for_player(attribute, increasing),
                intensity=intensity,
            )
            modifiers.append(modifier)
            logger.debug(f"Added {modifier.label} modifier")

        return modifiers

    def generate(
        self,
        floor_number: int,
        rng_seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> Tuple[MultiplierState, List[FloorModifier]]:
        """
        Baseline multipliers plus a fresh modifier set for a floor.

        Pass rng_seed for a reproducible roll, or rng to share a stream.
        """
        if rng is None:
            rng = random.Random(rng_seed)

        baseline = self.compute_baseline(floor_number)
        count = sample_modifier_count(rng.random(), self.max_modifiers)
        logger.info(f"Generating {count} random modifiers for floor {floor_number}")

        modifiers = self.roll_modifiers(rng, count)
        return baseline, modifiers
