"""
Pytest configuration and shared fixtures.

This file is automatically discovered by pytest and provides fixtures
available to all test files.
"""

import os
from typing import Generator, Iterable, List

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame


@pytest.fixture(scope="session", autouse=True)
def pygame_init() -> Generator[None, None, None]:
    """
    Initialize pygame for the test session.
    This runs once before all tests and cleans up after.
    """
    pygame.init()
    yield
    pygame.quit()


class ScriptedRandom:
    """
    Stand-in for random.Random that replays fixed draws.

    floats feed random(), ints feed randrange(); running out is a test bug.
    """

    def __init__(self, floats: Iterable[float] = (), ints: Iterable[int] = ()) -> None:
        self.floats: List[float] = list(floats)
        self.ints: List[int] = list(ints)

    def random(self) -> float:
        return self.floats.pop(0)

    def randrange(self, stop: int) -> int:
        value = self.ints.pop(0)
        assert 0 <= value < stop, f"scripted randrange value {value} outside [0, {stop})"
        return value


@pytest.fixture
def scripted_random():
    """Factory for ScriptedRandom instances."""
    return ScriptedRandom


@pytest.fixture
def generator():
    """
    Create a DifficultyGenerator with default percentages (10/10/30).
    """
    from systems.difficulty import DifficultyGenerator
    return DifficultyGenerator()


@pytest.fixture
def difficulty_manager(generator):
    """
    Create a FloorDifficultyManager for testing.
    """
    from engine.managers.floor_difficulty_manager import FloorDifficultyManager
    return FloorDifficultyManager(generator)


@pytest.fixture
def enemy_registry():
    from systems.population import make_enemy_registry
    return make_enemy_registry()


@pytest.fixture
def spawner_registry():
    from systems.population import make_spawner_registry
    return make_spawner_registry()


@pytest.fixture
def player():
    """
    Create a Player with 100 max health.
    """
    from world.entities import Player
    return Player(max_health=100.0, base_speed=5.0)


@pytest.fixture
def memory_telemetry():
    """
    Route the global telemetry logger to memory for one test.
    """
    from telemetry.logger import telemetry
    telemetry.keep_in_memory = True
    telemetry.rows.clear()
    yield telemetry
    telemetry.keep_in_memory = False
    telemetry.rows.clear()
