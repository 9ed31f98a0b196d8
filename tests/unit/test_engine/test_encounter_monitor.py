"""
Unit tests for the EncounterMonitor class.
"""

import pytest
from engine.encounter import EncounterMonitor, EncounterOutcome, EncounterState


class Member:
    pass


@pytest.fixture
def populated(enemy_registry, spawner_registry):
    """Registries holding one spawner and one enemy."""
    spawner, enemy = Member(), Member()
    spawner_registry.add(spawner)
    enemy_registry.add(enemy)
    return spawner, enemy


@pytest.fixture
def monitor(enemy_registry, spawner_registry, player, populated):
    return EncounterMonitor(enemy_registry, spawner_registry, player=player, settle_delay=1.0, floor_number=4)


def clear(enemy_registry, spawner_registry, populated):
    spawner, enemy = populated
    spawner_registry.remove(spawner)
    enemy_registry.remove(enemy)


class TestWin:
    """Tests for the win path."""

    def test_starts_active(self, monitor):
        assert monitor.state is EncounterState.ACTIVE
        assert monitor.outcome is None
        assert monitor.settle_remaining is None

    def test_partial_clear_stays_active(self, monitor, enemy_registry, populated):
        """Test that an empty enemy registry alone is not a win while spawners run."""
        enemy_registry.remove(populated[1])
        assert monitor.state is EncounterState.ACTIVE

    def test_won_after_settle_delay(self, monitor, enemy_registry, spawner_registry, populated):
        results = []
        monitor.resolved.connect(results.append)

        clear(enemy_registry, spawner_registry, populated)
        assert monitor.state is EncounterState.COMPLETING
        assert monitor.settle_remaining == pytest.approx(1.0)

        # Entry tick does not count toward the settle delay
        monitor.update(0.5)
        assert monitor.settle_remaining == pytest.approx(1.0)
        monitor.update(0.5)
        assert monitor.state is EncounterState.COMPLETING
        monitor.update(0.5)

        assert monitor.outcome is EncounterOutcome.WON
        assert len(results) == 1
        assert results[0].floor_number == 4
        assert results[0].won

    def test_won_reported_once(self, monitor, enemy_registry, spawner_registry, populated, memory_telemetry):
        results = []
        monitor.resolved.connect(results.append)
        clear(enemy_registry, spawner_registry, populated)

        for _ in range(10):
            monitor.update(0.5)
        monitor.check_win_condition()

        assert len(results) == 1
        assert len(memory_telemetry.events("encounter_resolved")) == 1

    def test_repeated_clear_notifications_do_not_restart_settle(
        self, monitor, enemy_registry, spawner_registry, populated
    ):
        """Test that two more empty-population changes keep the settle timer running."""
        results = []
        monitor.resolved.connect(results.append)
        clear(enemy_registry, spawner_registry, populated)

        # Two qualifying notifications in immediate succession
        enemy_registry.changed.emit(enemy_registry)
        spawner_registry.changed.emit(spawner_registry)
        monitor.update(0.5)
        monitor.update(0.5)
        assert monitor.settle_remaining == pytest.approx(0.5)

        extra = Member()
        enemy_registry.add(extra)
        enemy_registry.remove(extra)
        spawner_registry.add(extra)
        spawner_registry.remove(extra)
        assert monitor.settle_remaining == pytest.approx(0.5)
        assert results == []

        monitor.update(0.5)

        assert monitor.outcome is EncounterOutcome.WON
        assert len(results) == 1

    def test_repopulation_during_settle_does_not_cancel(self, monitor, enemy_registry, spawner_registry, populated):
        clear(enemy_registry, spawner_registry, populated)
        enemy_registry.add(Member())
        monitor.update(0.0)
        monitor.update(1.0)
        assert monitor.outcome is EncounterOutcome.WON

    def test_zero_settle_delay_wins_next_tick(self, enemy_registry, spawner_registry, populated):
        monitor = EncounterMonitor(enemy_registry, spawner_registry, settle_delay=0.0)
        clear(enemy_registry, spawner_registry, populated)
        monitor.update(0.016)
        assert monitor.state is EncounterState.COMPLETING
        monitor.update(0.016)
        assert monitor.outcome is EncounterOutcome.WON

    def test_resolution_carries_flags(self, enemy_registry, spawner_registry, populated):
        results = []
        monitor = EncounterMonitor(
            enemy_registry,
            spawner_registry,
            settle_delay=0.0,
            floor_number=10,
            boss_encounter=True,
            endless_mode=False,
            on_resolved=results.append,
        )
        clear(enemy_registry, spawner_registry, populated)
        monitor.update(0.1)
        monitor.update(0.1)

        (resolution,) = results
        assert resolution.boss_encounter is True
        assert resolution.endless_mode is False
        assert resolution.elapsed == pytest.approx(0.2)


class TestLoss:
    """Tests for the loss path and its precedence over a win."""

    def test_player_death_loses(self, monitor, player):
        player.take_damage(200)
        player.update(0.1)
        assert monitor.outcome is EncounterOutcome.LOST

    def test_repeated_death_events_resolve_once(self, monitor, player):
        results = []
        monitor.resolved.connect(results.append)
        player.take_damage(200)
        for _ in range(5):
            player.update(0.1)
            monitor.update(0.1)
        assert len(results) == 1

    def test_death_then_clear_same_tick(self, monitor, player, enemy_registry, spawner_registry, populated):
        player.take_damage(200)
        player.update(0.1)
        clear(enemy_registry, spawner_registry, populated)
        monitor.update(0.1)
        monitor.update(5.0)
        assert monitor.outcome is EncounterOutcome.LOST

    def test_clear_then_death_same_tick(self, monitor, player, enemy_registry, spawner_registry, populated):
        """Test that a death on the clearing tick still loses."""
        clear(enemy_registry, spawner_registry, populated)
        player.take_damage(200)
        player.update(0.1)
        monitor.update(0.1)
        assert monitor.outcome is EncounterOutcome.LOST

    def test_death_during_settle_is_ignored(self, monitor, player, enemy_registry, spawner_registry, populated):
        clear(enemy_registry, spawner_registry, populated)
        monitor.update(0.1)

        player.take_damage(200)
        player.update(0.1)
        assert monitor.state is EncounterState.COMPLETING

        monitor.update(1.0)
        assert monitor.outcome is EncounterOutcome.WON


class TestMissingCollaborators:
    """Tests for absent player or registries."""

    def test_no_player_accepts_direct_death_report(self, enemy_registry, spawner_registry, populated):
        monitor = EncounterMonitor(enemy_registry, spawner_registry, player=None, settle_delay=0.0)
        monitor.handle_player_death()
        assert monitor.outcome is EncounterOutcome.LOST

    def test_no_player_still_wins(self, enemy_registry, spawner_registry, populated):
        monitor = EncounterMonitor(enemy_registry, spawner_registry, player=None, settle_delay=0.0)
        clear(enemy_registry, spawner_registry, populated)
        monitor.update(0.1)
        monitor.update(0.1)
        assert monitor.outcome is EncounterOutcome.WON

    def test_missing_spawner_registry_is_vacuous(self, enemy_registry):
        enemy = Member()
        enemy_registry.add(enemy)
        monitor = EncounterMonitor(enemy_registry, None, settle_delay=0.0)

        monitor.check_win_condition()
        assert monitor.state is EncounterState.ACTIVE

        enemy_registry.remove(enemy)
        assert monitor.state is EncounterState.COMPLETING

    def test_missing_enemy_registry_is_vacuous(self, spawner_registry):
        spawner = Member()
        spawner_registry.add(spawner)
        monitor = EncounterMonitor(None, spawner_registry, settle_delay=0.0)
        spawner_registry.remove(spawner)
        assert monitor.state is EncounterState.COMPLETING

    def test_both_registries_missing_never_wins(self, player):
        monitor = EncounterMonitor(None, None, player=player, settle_delay=0.0)
        monitor.check_win_condition()
        for _ in range(5):
            monitor.update(1.0)
        assert monitor.state is EncounterState.ACTIVE

    def test_empty_registries_without_events_stay_active(self, enemy_registry, spawner_registry):
        monitor = EncounterMonitor(enemy_registry, spawner_registry, settle_delay=0.0)
        monitor.update(1.0)
        assert monitor.state is EncounterState.ACTIVE


class TestDetach:
    """Tests for teardown."""

    def test_detach_ignores_later_events(self, monitor, player, enemy_registry, spawner_registry, populated):
        monitor.detach()
        clear(enemy_registry, spawner_registry, populated)
        player.take_damage(200)
        player.update(0.1)
        assert monitor.state is EncounterState.ACTIVE
        assert len(player.on_death) == 0

    def test_detach_stops_pending_settle(self, monitor, enemy_registry, spawner_registry, populated):
        clear(enemy_registry, spawner_registry, populated)
        monitor.detach()
        monitor.update(0.5)
        monitor.update(5.0)
        assert monitor.state is EncounterState.COMPLETING
        assert monitor.outcome is None
