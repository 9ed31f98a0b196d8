"""
Unit tests for FloorSession wiring.
"""

import random

import pytest
from engine.encounter import EncounterOutcome, FloorSession
from engine.managers import FloorDifficultyManager, FloorTransitionContext
from systems.difficulty import DifficultyGenerator, FloorModifier, IntensityLevel, ModifierAttribute
from world.entities import EnemyTemplate, Player
from world.spawner import WaveSpawner


@pytest.fixture
def plain_difficulty():
    manager = FloorDifficultyManager(DifficultyGenerator(max_modifiers=0))
    manager.generate_floor_modifiers(1)
    return manager


@pytest.fixture
def regen_difficulty():
    """Floor with a large health regen blessing and nothing else."""
    manager = FloorDifficultyManager(DifficultyGenerator(max_modifiers=0))
    manager.generate_floor_modifiers(1)
    manager._active_modifiers[:] = [
        FloorModifier(ModifierAttribute.PLAYER_HEALTH_REGEN, True, IntensityLevel.LARGE),
    ]
    manager.apply_existing_modifiers(1)
    return manager


def make_session(difficulty, player=None, spawners=None, **kwargs):
    if spawners is None:
        spawners = [WaveSpawner(spawn_interval=1.0, end_time=2.5, rng=random.Random(1))]
    return FloorSession(
        FloorTransitionContext(floor_number=1),
        difficulty,
        player=player,
        spawners=spawners,
        settle_delay=1.0,
        **kwargs
    )


def kill_all(session):
    for enemy in session.enemies.members():
        enemy.take_damage(enemy.max_health)


class TestFloorSession:
    """Tests for FloorSession."""

    def test_start_registers_spawners(self, plain_difficulty):
        session = make_session(plain_difficulty)
        session.start()
        assert session.spawner_registry.count() == 1

    def test_full_clear_wins(self, plain_difficulty):
        """Test spawn, kill, settle and win across a few ticks."""
        results = []
        session = make_session(plain_difficulty, player=Player(), on_resolved=results.append)
        session.start()

        for _ in range(3):
            session.update(1.0)
            kill_all(session)

        # Last kills are removed on the next tick, then the settle delay runs
        for _ in range(3):
            session.update(1.0)

        assert session.is_resolved
        assert session.resolution.outcome is EncounterOutcome.WON
        assert session.kills == 3
        assert session.score == 30
        assert len(results) == 1

    def test_player_death_loses(self, plain_difficulty):
        player = Player()
        session = make_session(plain_difficulty, player=player)
        session.update(0.5)
        player.take_damage(1000)
        session.update(0.5)
        assert session.resolution.outcome is EncounterOutcome.LOST

    def test_enemies_stay_while_alive(self, plain_difficulty):
        session = make_session(plain_difficulty)
        for _ in range(4):
            session.update(1.0)
        assert session.enemies.count() == 3
        assert not session.is_resolved

    def test_player_scaled_on_start(self):
        difficulty = FloorDifficultyManager()
        difficulty.generate_floor_modifiers(1, rng_seed=11)
        player = Player(max_health=100.0, base_speed=5.0)

        make_session(difficulty, player=player).start()

        assert player.max_health == pytest.approx(100.0 * difficulty.get_player_health_multiplier())
        assert player.speed == pytest.approx(5.0 * difficulty.get_player_speed_multiplier())

    def test_enemy_speed_from_context(self, plain_difficulty):
        template = EnemyTemplate(base_speed=4.0)
        session = FloorSession(
            FloorTransitionContext(floor_number=1, enemy_speed_adjustment=0.05),
            plain_difficulty,
            spawners=[WaveSpawner(templates=(template,), spawn_interval=1.0, end_time=2.0)],
        )
        session.update(0.0)
        (enemy,) = session.enemies.members()
        assert enemy.speed == pytest.approx(4.2)

    def test_no_spawners_never_wins(self, plain_difficulty):
        session = make_session(plain_difficulty, spawners=[])
        for _ in range(5):
            session.update(1.0)
        assert not session.is_resolved

    def test_teardown_detaches(self, plain_difficulty):
        player = Player()
        session = make_session(plain_difficulty, player=player)
        session.update(0.5)
        session.teardown()

        player.take_damage(1000)
        player.update(0.1)

        assert not session.is_resolved
        assert session.enemies.count() == 0
        assert session.spawner_registry.count() == 0


class TestLethalDamageWithRegen:
    """A lethal hit is reported even when health regen is active."""

    def test_regen_does_not_revive(self, regen_difficulty):
        player = Player()
        session = make_session(regen_difficulty, player=player)
        session.update(1 / 60)

        player.take_damage(player.current_health + 0.01)
        session.update(1 / 60)

        assert session.resolution.outcome is EncounterOutcome.LOST
        for _ in range(60):
            session.update(1 / 60)
        assert player.current_health <= 0
        assert session.resolution.outcome is EncounterOutcome.LOST

    def test_last_kill_and_death_same_tick(self, regen_difficulty):
        """Test that clearing the floor on the tick the player dies still loses."""
        player = Player()
        spawner = WaveSpawner(spawn_interval=1.0, end_time=0.5, rng=random.Random(2))
        session = make_session(regen_difficulty, player=player, spawners=[spawner])

        session.update(0.0)
        session.update(1.0)
        assert spawner.finished
        (enemy,) = session.enemies.members()

        enemy.take_damage(enemy.max_health)
        player.take_damage(player.current_health + 0.01)
        session.update(1 / 60)

        assert session.resolution.outcome is EncounterOutcome.LOST
        for _ in range(120):
            session.update(1 / 60)
        assert session.resolution.outcome is EncounterOutcome.LOST
