"""
Campaign progression.

Tracks the current floor, endless mode and the boss flag, and turns an
encounter resolution into the next step of the run (advance, campaign won,
defeated). Floor-to-floor state travels in a FloorTransitionContext instead
of a global key/value store.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import settings
from engine.error_handler import get_logger
from telemetry.logger import telemetry

from .floor_difficulty_manager import FloorDifficultyManager

logger = get_logger("progression")


class ProgressionResult(Enum):
    ADVANCED = "advanced"
    CAMPAIGN_WON = "campaign_won"
    DEFEATED = "defeated"


@dataclass(frozen=True)
class FloorTransitionContext:
    """Handed from the outgoing scene's controller to the incoming one."""
    floor_number: int
    enemy_speed_adjustment: float = 0.0
    boss_pending: bool = False
    endless_mode: bool = False


class ProgressionManager:
    """
    Run-level state across floors.

    The boss floor is reached at `boss_floor`; from there the player may
    keep going in endless mode. Turning endless mode off again makes the
    next floor a boss floor.
    """

    def __init__(
        self,
        difficulty: Optional[FloorDifficultyManager] = None,
        boss_floor: int = settings.BOSS_FLOOR,
    ) -> None:
        self.difficulty = difficulty
        self.boss_floor = boss_floor
        self.current_floor: int = 1
        self.score: int = 0
        self.endless_mode: bool = False
        self.next_floor_is_boss: bool = False

        if difficulty is None:
            logger.warning("ProgressionManager has no difficulty manager; floors will not be scaled")

    def start_new_game(self) -> None:
        self.current_floor = 1
        self.score = 0
        self.endless_mode = False
        self.next_floor_is_boss = False
        if self.difficulty is not None:
            self.difficulty.mark_for_modifier_generation()

    # ------------------------------------------------------------------
    # Endless mode / boss floor
    # ------------------------------------------------------------------

    def can_toggle_endless_mode(self) -> bool:
        return self.current_floor >= self.boss_floor

    def set_endless_mode(self, enabled: bool) -> bool:
        """
        Toggle endless mode. Returns False (and forces it off) before the boss
        floor has been reached.
        """
        if not self.can_toggle_endless_mode():
            logger.warning(f"Cannot toggle endless mode before floor {self.boss_floor}")
            self.endless_mode = False
            self.next_floor_is_boss = False
            return False

        # Leaving endless mode sends the player to the boss
        self.next_floor_is_boss = self.endless_mode and not enabled
        if self.next_floor_is_boss:
            logger.info("Endless mode disabled - next floor will be the boss floor!")

        self.endless_mode = enabled
        logger.info(f"Endless mode set to: {enabled}")
        return True

    def is_next_floor_boss(self) -> bool:
        if self.next_floor_is_boss:
            return True
        return self.current_floor == self.boss_floor and not self.endless_mode

    # ------------------------------------------------------------------
    # Floor transitions
    # ------------------------------------------------------------------

    def prepare_next_floor(self, rng_seed: Optional[int] = None) -> None:
        """Roll modifiers for the upcoming floor unless they already exist."""
        if self.difficulty is None:
            return
        if not self.difficulty.are_modifiers_generated():
            self.difficulty.generate_floor_modifiers(self.current_floor, rng_seed=rng_seed)

    def build_transition_context(self) -> FloorTransitionContext:
        adjustment = self.difficulty.get_enemy_speed_adjustment() if self.difficulty else 0.0
        return FloorTransitionContext(
            floor_number=self.current_floor,
            enemy_speed_adjustment=adjustment,
            boss_pending=self.next_floor_is_boss,
            endless_mode=self.endless_mode,
        )

    def enter_floor(self, context: FloorTransitionContext) -> None:
        """Restore carried-over flags and replay the floor's modifiers."""
        self.current_floor = context.floor_number
        self.next_floor_is_boss = context.boss_pending
        self.endless_mode = context.endless_mode

        if self.difficulty is not None:
            self.difficulty.apply_existing_modifiers(self.current_floor)

        logger.info(
            f"[Floor Start] Floor: {self.current_floor}, Boss Flag: {self.next_floor_is_boss}, "
            f"Endless: {self.endless_mode}"
        )

    def add_score(self, amount: int) -> None:
        self.score += amount

    def complete_floor(self, resolution) -> ProgressionResult:
        """
        Decide what a resolved encounter means for the run.

        A won boss encounter outside endless mode wins the campaign; any other
        win advances one floor and asks for a fresh modifier roll.
        """
        if not resolution.won:
            logger.info(f"Defeated on floor {self.current_floor}")
            result = ProgressionResult.DEFEATED
        elif resolution.boss_encounter and not resolution.endless_mode:
            logger.info(f"Boss defeated on floor {self.current_floor}. Campaign won")
            self.next_floor_is_boss = False
            result = ProgressionResult.CAMPAIGN_WON
        else:
            logger.info(f"Completed floor {self.current_floor}")
            self.next_floor_is_boss = False
            self.current_floor += 1
            if self.difficulty is not None:
                self.difficulty.mark_for_modifier_generation()
            logger.info(f"Next floor will be {self.current_floor}")
            result = ProgressionResult.ADVANCED

        telemetry.log(
            "floor_completed",
            floor=resolution.floor_number,
            result=result.value,
            score=self.score,
        )
        return result
