# world/entities.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pygame

import settings
from engine.error_handler import get_logger
from systems.population import PopulationRegistry, Signal

logger = get_logger("entities")


@dataclass(eq=False)
class Entity:
    """Base entity that lives on a floor."""
    x: float = 0.0
    y: float = 0.0
    width: int = 1
    height: int = 1

    @property
    def position(self) -> pygame.math.Vector2:
        return pygame.math.Vector2(self.x, self.y)

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), self.width, self.height)

    def distance_to(self, other: "Entity") -> float:
        return self.position.distance_to(other.position)


@dataclass(eq=False)
class Player(Entity):
    """
    Player vitals and movement stats.

    on_death fires on every update() while health is at or below zero;
    listeners are expected to latch.
    """
    max_health: float = settings.PLAYER_MAX_HEALTH
    current_health: Optional[float] = None
    base_speed: float = settings.PLAYER_BASE_SPEED
    speed: Optional[float] = None
    damage_per_second: float = settings.PLAYER_DAMAGE_PER_SECOND
    on_death: Signal = field(default_factory=lambda: Signal("player.on_death"))

    def __post_init__(self) -> None:
        if self.current_health is None:
            self.current_health = self.max_health
        if self.speed is None:
            self.speed = self.base_speed

    def take_damage(self, amount: float) -> None:
        self.current_health -= amount

    def restore_health(self, amount: float) -> None:
        self.current_health = min(self.max_health, self.current_health + amount)

    @property
    def is_alive(self) -> bool:
        return self.current_health > 0

    def update(self, dt: float) -> None:
        if self.current_health <= 0:
            self.on_death.emit(self)


@dataclass(frozen=True)
class EnemyTemplate:
    """Unscaled stats a spawner stamps onto each enemy it creates."""
    name: str = "grunt"
    max_health: float = settings.ENEMY_MAX_HEALTH
    base_speed: float = settings.ENEMY_BASE_SPEED
    contact_damage: float = settings.ENEMY_CONTACT_DAMAGE
    score_value: int = 10


@dataclass(eq=False)
class Enemy(Entity):
    """
    A live enemy.

    Registers with the enemy registry in spawn() and unregisters exactly once,
    either when destroy() is called or when update() sees it at zero health.
    """
    name: str = "grunt"
    max_health: float = settings.ENEMY_MAX_HEALTH
    current_health: Optional[float] = None
    base_speed: float = settings.ENEMY_BASE_SPEED
    speed: Optional[float] = None
    contact_damage: float = settings.ENEMY_CONTACT_DAMAGE
    score_value: int = 10
    on_destroyed: Signal = field(default_factory=lambda: Signal("enemy.on_destroyed"))
    _registry: Optional[PopulationRegistry] = field(default=None, init=False, repr=False)
    _destroyed: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.current_health is None:
            self.current_health = self.max_health
        if self.speed is None:
            self.speed = self.base_speed

    @classmethod
    def from_template(cls, template: EnemyTemplate, x: float = 0.0, y: float = 0.0) -> "Enemy":
        return cls(
            x=x,
            y=y,
            name=template.name,
            max_health=template.max_health,
            base_speed=template.base_speed,
            contact_damage=template.contact_damage,
            score_value=template.score_value,
        )

    def spawn(self, registry: Optional[PopulationRegistry]) -> None:
        if registry is None:
            logger.warning(f"{self.name} spawned without an enemy registry; it will not be tracked")
            return
        self._registry = registry
        registry.add(self)

    def take_damage(self, amount: float) -> None:
        self.current_health -= amount

    @property
    def is_alive(self) -> bool:
        return self.current_health > 0

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def update(self, dt: float) -> None:
        if not self._destroyed and self.current_health <= 0:
            self.destroy()

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._destroyed = True
        self.on_destroyed.emit(self)
        if self._registry is not None:
            self._registry.remove(self)
