"""
Wave spawner.

Spawns enemies on a fixed interval between start_time and end_time. While it
runs it is a member of the spawner registry, so a floor is not "clear" until
every spawner has finished.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Sequence

import pygame

from engine.error_handler import get_logger
from systems.population import PopulationRegistry

from .entities import Enemy, EnemyTemplate

if TYPE_CHECKING:
    from engine.managers.floor_difficulty_manager import FloorDifficultyManager

logger = get_logger("spawner")


@dataclass(eq=False)
class WaveSpawner:
    """
    Timer-driven enemy source, advanced by update(dt).

    - spawn_interval: seconds between spawns (scaled by the enemy count
      multiplier when started with a difficulty manager)
    - start_time / end_time: seconds since the spawner started
    - scale_duration: optional extension; stretches the active window
      (end_time - start_time) by the enemy count multiplier
    """
    templates: Sequence[EnemyTemplate] = field(default_factory=lambda: (EnemyTemplate(),))
    spawn_interval: float = 2.0
    start_time: float = 0.0
    end_time: float = 20.0
    spawn_radius: float = 10.0
    circular: bool = True
    center: pygame.math.Vector2 = field(default_factory=pygame.math.Vector2)
    scale_duration: bool = False
    rng: random.Random = field(default_factory=random.Random)

    elapsed: float = field(default=0.0, init=False)
    active: bool = field(default=False, init=False)
    finished: bool = field(default=False, init=False)
    _next_spawn_at: float = field(default=0.0, init=False, repr=False)
    _registry: Optional[PopulationRegistry] = field(default=None, init=False, repr=False)
    _enemy_registry: Optional[PopulationRegistry] = field(default=None, init=False, repr=False)
    _difficulty: Optional["FloorDifficultyManager"] = field(default=None, init=False, repr=False)
    _speed_adjustment: Optional[float] = field(default=None, init=False, repr=False)
    # Unscaled values, captured on the first start()
    _base_spawn_interval: Optional[float] = field(default=None, init=False, repr=False)
    _base_end_time: Optional[float] = field(default=None, init=False, repr=False)

    def start(
        self,
        spawner_registry: Optional[PopulationRegistry],
        enemy_registry: Optional[PopulationRegistry],
        difficulty: Optional["FloorDifficultyManager"] = None,
        enemy_speed_adjustment: Optional[float] = None,
    ) -> bool:
        """
        Register with the spawner registry and arm the timers.

        Returns False (and stays inactive) when there is nothing to spawn.
        A restart scales from the unscaled interval and end time again.
        """
        if not self.templates:
            logger.error("No enemy templates assigned to WaveSpawner!")
            return False
        if self.spawn_interval <= 0:
            logger.error(f"WaveSpawner spawn_interval must be positive, got {self.spawn_interval}")
            return False

        self._enemy_registry = enemy_registry
        self._difficulty = difficulty
        self._speed_adjustment = enemy_speed_adjustment

        if self._base_spawn_interval is None:
            self._base_spawn_interval = self.spawn_interval
            self._base_end_time = self.end_time
        self.spawn_interval = self._base_spawn_interval
        self.end_time = self._base_end_time

        if difficulty is not None:
            self.spawn_interval = difficulty.modify_enemy_spawn_rate(self.spawn_interval)
            if self.scale_duration:
                window = self.end_time - self.start_time
                self.end_time = self.start_time + window * difficulty.get_enemy_count_multiplier()
        else:
            logger.warning("WaveSpawner started without difficulty scaling")

        self.elapsed = 0.0
        self._next_spawn_at = self.start_time
        self.active = True
        self.finished = False

        if spawner_registry is None:
            logger.warning("WaveSpawner started without a spawner registry; it will not be tracked")
        else:
            self._registry = spawner_registry
            spawner_registry.add(self)
        return True

    def update(self, dt: float) -> List[Enemy]:
        """Advance the timers; returns the enemies spawned this tick."""
        if not self.active:
            return []

        self.elapsed += dt
        spawned: List[Enemy] = []

        while self._next_spawn_at <= self.elapsed and self._next_spawn_at < self.end_time:
            spawned.append(self.spawn())
            self._next_spawn_at += self.spawn_interval

        if self.elapsed >= self.end_time:
            self.finish()

        return spawned

    def spawn(self) -> Enemy:
        template = self.templates[self.rng.randrange(len(self.templates))]
        pos = self.random_spawn_position()
        enemy = Enemy.from_template(template, x=pos.x, y=pos.y)

        if self._difficulty is not None:
            self._difficulty.modify_enemy_health(enemy)
            self._difficulty.modify_enemy_speed(enemy, self._speed_adjustment)

        enemy.spawn(self._enemy_registry)
        return enemy

    def random_spawn_position(self) -> pygame.math.Vector2:
        if self.circular:
            # Uniform over the disc
            radius = self.spawn_radius * math.sqrt(self.rng.random())
            offset = pygame.math.Vector2(radius, 0).rotate(self.rng.uniform(0.0, 360.0))
        else:
            offset = pygame.math.Vector2(
                self.rng.uniform(-self.spawn_radius, self.spawn_radius),
                self.rng.uniform(-self.spawn_radius, self.spawn_radius),
            )
        return self.center + offset

    def finish(self) -> None:
        """Stop spawning and leave the spawner registry (idempotent)."""
        if self.finished:
            return
        self.active = False
        self.finished = True
        if self._registry is not None:
            self._registry.remove(self)
