"""
Floor session.

Builds everything one floor needs (registries, completion monitor, started
spawners) and passes the references around explicitly. The host loop calls
update(dt) once per tick.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

import settings
from engine.error_handler import get_logger
from systems.population import PopulationRegistry, make_enemy_registry, make_spawner_registry

from .monitor import EncounterMonitor, EncounterResolution

if TYPE_CHECKING:
    from engine.managers.floor_difficulty_manager import FloorDifficultyManager
    from engine.managers.progression_manager import FloorTransitionContext
    from world.entities import Enemy, Player
    from world.spawner import WaveSpawner

logger = get_logger("session")


class FloorSession:
    """
    One floor, from start to resolution.

    Tick order: spawners, enemies, player (vitals, then regen), monitor. Deaths
    and registry changes therefore land before the monitor's settle timer
    advances on the same tick.
    """

    def __init__(
        self,
        context: "FloorTransitionContext",
        difficulty: Optional["FloorDifficultyManager"],
        player: Optional["Player"] = None,
        spawners: Sequence["WaveSpawner"] = (),
        boss_encounter: bool = False,
        settle_delay: float = settings.SETTLE_DELAY,
        on_resolved: Optional[Callable[[EncounterResolution], None]] = None,
    ) -> None:
        self.context = context
        self.difficulty = difficulty
        self.player = player
        self.spawners: List["WaveSpawner"] = list(spawners)
        self.enemies: PopulationRegistry = make_enemy_registry()
        self.spawner_registry: PopulationRegistry = make_spawner_registry()
        self.kills: int = 0
        self.score: int = 0
        self.started: bool = False

        self.monitor = EncounterMonitor(
            self.enemies,
            self.spawner_registry,
            player=player,
            settle_delay=settle_delay,
            floor_number=context.floor_number,
            boss_encounter=boss_encounter,
            endless_mode=context.endless_mode,
            on_resolved=on_resolved,
        )

    @property
    def resolution(self) -> Optional[EncounterResolution]:
        return self.monitor.resolution

    @property
    def is_resolved(self) -> bool:
        return self.monitor.is_resolved

    def start(self) -> None:
        """Scale the player and start every spawner."""
        if self.started:
            return
        self.started = True

        if self.difficulty is None:
            logger.warning("Floor started without a difficulty manager; nothing will be scaled")
        elif self.player is not None:
            self.difficulty.modify_player_health(self.player)
            self.difficulty.modify_player_speed(self.player)

        for spawner in self.spawners:
            spawner.start(
                self.spawner_registry,
                self.enemies,
                difficulty=self.difficulty,
                enemy_speed_adjustment=self.context.enemy_speed_adjustment,
            )

        logger.info(
            f"Initialized floor {self.context.floor_number} with {len(self.spawner_registry)} active spawners"
        )

    def update(self, dt: float) -> None:
        if not self.started:
            self.start()

        for spawner in self.spawners:
            for enemy in spawner.update(dt):
                enemy.on_destroyed.connect(self._on_enemy_destroyed)

        for enemy in self.enemies.members():
            enemy.update(dt)

        if self.player is not None:
            # Vitals before regen; a dead player is never healed
            self.player.update(dt)
            if self.difficulty is not None:
                self.difficulty.apply_health_regen_tick(self.player, dt)

        self.monitor.update(dt)

    def _on_enemy_destroyed(self, enemy: "Enemy") -> None:
        if enemy.current_health <= 0:
            self.kills += 1
            self.score += enemy.score_value

    def teardown(self) -> None:
        """Scene unload: stop listening and forget the population."""
        self.monitor.detach()
        for spawner in self.spawners:
            spawner.active = False
        self.enemies.clear()
        self.spawner_registry.clear()
