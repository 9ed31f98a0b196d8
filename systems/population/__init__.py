from .signals import Signal
from .registry import PopulationRegistry, make_enemy_registry, make_spawner_registry

__all__ = [
    "Signal",
    "PopulationRegistry",
    "make_enemy_registry",
    "make_spawner_registry",
]
