"""
Floor difficulty management.

Owns the current floor's modifier set and multiplier state, and applies them
to entities and values handed in by gameplay code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

from engine.error_handler import get_logger
from systems.difficulty import (
    DifficultyGenerator,
    FloorModifier,
    MultiplierState,
    apply_modifiers,
)
from telemetry.logger import telemetry

if TYPE_CHECKING:
    from world.entities import Enemy, Player

logger = get_logger("floor_difficulty")


class FloorDifficultyManager:
    """
    Multiplier store for the current floor.

    Responsibilities:
    - Generate a floor's baseline + modifiers once per floor
    - Replay the same modifiers when the floor is re-entered
    - Expose the resulting multipliers through getters
    - Scale entities and values for gameplay collaborators

    Only generate_floor_modifiers() / apply_existing_modifiers() write the
    state, and they always replace it whole.
    """

    def __init__(self, generator: Optional[DifficultyGenerator] = None) -> None:
        self.generator = generator or DifficultyGenerator()
        self._baseline: MultiplierState = MultiplierState.neutral()
        self._state: MultiplierState = MultiplierState.neutral()
        self._active_modifiers: List[FloorModifier] = []
        self._enemy_speed_adjustment: float = 0.0
        self._modifiers_generated: bool = False
        self._floor_number: Optional[int] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def generate_floor_modifiers(self, floor_number: int, rng_seed: Optional[int] = None) -> MultiplierState:
        """Roll a fresh modifier set for the floor and apply it."""
        self._active_modifiers.clear()

        baseline, modifiers = self.generator.generate(floor_number, rng_seed=rng_seed)
        self._baseline = baseline
        self._active_modifiers.extend(modifiers)
        self._floor_number = floor_number

        self._apply()
        self._log_floor_settings()

        self._modifiers_generated = True
        telemetry.log(
            "floor_modifiers_generated",
            floor=floor_number,
            modifiers=[m.label for m in self._active_modifiers],
            state=self._state.to_dict(),
            enemy_speed_adjustment=self._enemy_speed_adjustment,
        )
        return self._state

    def apply_existing_modifiers(self, floor_number: int) -> MultiplierState:
        """
        Re-apply the already-rolled modifiers without regenerating them.

        Falls back to generating when nothing was rolled for this floor yet.
        """
        if self._modifiers_generated:
            logger.info("Applying existing modifiers to the current floor")
            self._apply()
            return self._state

        logger.info("No modifiers exist for the current floor, generating new ones")
        return self.generate_floor_modifiers(floor_number)

    def mark_for_modifier_generation(self) -> None:
        """Called when a floor is completed: the next floor needs a new roll."""
        self._modifiers_generated = False

    def _apply(self) -> None:
        applied = apply_modifiers(self._baseline, self._active_modifiers)
        self._state = applied.state
        self._enemy_speed_adjustment = applied.enemy_speed_adjustment
        logger.debug(f"Applied enemy speed modifier: {self._enemy_speed_adjustment}")

    def _log_floor_settings(self) -> None:
        s = self._state
        logger.info(f"===== Floor {self._floor_number} Settings =====")
        logger.info(f"Enemy Health Multiplier: {s.enemy_health_mult:.2f}x")
        logger.info(f"Enemy Damage Multiplier: {s.enemy_damage_mult:.2f}x")
        logger.info(f"Enemy Count Multiplier: {s.enemy_count_mult:.2f}x")
        logger.info(f"Player Speed Multiplier: {s.player_speed_mult:.2f}x")
        logger.info(f"Player Damage Multiplier: {s.player_damage_mult:.2f}x")
        logger.info(f"Player Health Multiplier: {s.player_health_mult:.2f}x")
        logger.info(f"Player Health Regen Rate: {s.player_health_regen_rate:.2f} HP/sec")
        logger.info("Active Modifiers:")
        for modifier in self._active_modifiers:
            logger.info(f"- {modifier.label}")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> MultiplierState:
        return self._state

    @property
    def floor_number(self) -> Optional[int]:
        return self._floor_number

    def get_enemy_health_multiplier(self) -> float:
        return self._state.enemy_health_mult

    def get_enemy_damage_multiplier(self) -> float:
        return self._state.enemy_damage_mult

    def get_enemy_count_multiplier(self) -> float:
        return self._state.enemy_count_mult

    def get_player_speed_multiplier(self) -> float:
        return self._state.player_speed_mult

    def get_player_damage_multiplier(self) -> float:
        return self._state.player_damage_mult

    def get_player_health_multiplier(self) -> float:
        return self._state.player_health_mult

    def get_player_health_regen_rate(self) -> float:
        return self._state.player_health_regen_rate

    def get_enemy_speed_adjustment(self) -> float:
        return self._enemy_speed_adjustment

    def get_active_modifiers(self) -> Tuple[FloorModifier, ...]:
        """Read-only copy of the active modifiers, in roll order."""
        return tuple(self._active_modifiers)

    def are_modifiers_generated(self) -> bool:
        return self._modifiers_generated

    # ------------------------------------------------------------------
    # Integration helpers
    # ------------------------------------------------------------------

    def modify_enemy_health(self, enemy: Optional["Enemy"]) -> None:
        """Scale a freshly spawned enemy's max health and fill it."""
        if enemy is None:
            logger.warning("modify_enemy_health called without an enemy; skipping")
            return
        enemy.max_health *= self._state.enemy_health_mult
        enemy.current_health = enemy.max_health

    def modify_enemy_damage(self, damage: float) -> float:
        return damage * self._state.enemy_damage_mult

    def modify_enemy_spawn_rate(self, spawn_interval: float) -> float:
        """Shorter interval between spawns means more enemies in the same time."""
        return spawn_interval / self._state.enemy_count_mult

    def modify_enemy_speed(self, enemy: Optional["Enemy"], adjustment: Optional[float] = None) -> None:
        """
        Apply the signed enemy speed adjustment (e.g. -0.05 is 5% slower).

        Spawners on a fresh scene pass the adjustment carried over in the
        floor transition context.
        """
        if enemy is None:
            logger.warning("modify_enemy_speed called without an enemy; skipping")
            return
        if adjustment is None:
            adjustment = self._enemy_speed_adjustment
        enemy.speed = enemy.base_speed * (1.0 + adjustment)

    def modify_player_health(self, player: Optional["Player"]) -> None:
        """Scale max health, keeping the current health ratio."""
        if player is None:
            logger.warning("modify_player_health called without a player; skipping")
            return
        old_max = player.max_health
        player.max_health *= self._state.player_health_mult
        if old_max > 0:
            player.current_health = (player.current_health / old_max) * player.max_health
        else:
            player.current_health = player.max_health

    def modify_player_damage(self, damage: float) -> float:
        return damage * self._state.player_damage_mult

    def modify_player_speed(self, player: Optional["Player"]) -> None:
        if player is None:
            logger.warning("modify_player_speed called without a player; skipping")
            return
        player.base_speed *= self._state.player_speed_mult
        player.speed = player.base_speed

    def apply_health_regen_tick(self, player: Optional["Player"], dt: float) -> None:
        """
        Regenerate (positive rate) or drain (negative rate) health for one tick.

        A player at or below zero health is left alone.
        """
        if player is None or not player.is_alive:
            return
        rate = self._state.player_health_regen_rate
        if rate == 0:
            return

        amount = rate * dt
        if amount > 0:
            player.restore_health(amount)
        else:
            player.take_damage(-amount)
