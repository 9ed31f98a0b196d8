"""
Encounter completion monitor.

Watches the enemy and spawner registries plus the player's death signal and
reports exactly one outcome per floor:

    ACTIVE --player death--------------------------> RESOLVED(LOST)
    ACTIVE --no enemies and no spawners------------> COMPLETING
    COMPLETING --settle delay elapsed (update)-----> RESOLVED(WON)

A death arriving on the same tick COMPLETING was entered still wins the race
(LOST). Once RESOLVED, every further event is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Optional

import settings
from engine.error_handler import get_logger
from systems.population import PopulationRegistry, Signal
from telemetry.logger import telemetry

if TYPE_CHECKING:
    from world.entities import Player

logger = get_logger("monitor")


class EncounterState(Enum):
    ACTIVE = auto()
    COMPLETING = auto()
    RESOLVED = auto()


class EncounterOutcome(Enum):
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class EncounterResolution:
    """
    What the monitor hands to the progression controller.

    boss_encounter / endless_mode are passed through untouched; whether a
    boss win ends the campaign is the controller's call.
    """
    outcome: EncounterOutcome
    floor_number: int
    boss_encounter: bool = False
    endless_mode: bool = False
    elapsed: float = 0.0

    @property
    def won(self) -> bool:
        return self.outcome is EncounterOutcome.WON


class EncounterMonitor:
    """
    Win/lose detector for one floor.

    Driven by synchronous callbacks (registry changes, player death) and by
    update(dt) from the host loop for the settle delay. Must be built once per
    floor; detach() on teardown.
    """

    def __init__(
        self,
        enemy_registry: Optional[PopulationRegistry],
        spawner_registry: Optional[PopulationRegistry],
        player: Optional["Player"] = None,
        settle_delay: float = settings.SETTLE_DELAY,
        floor_number: int = 1,
        boss_encounter: bool = False,
        endless_mode: bool = False,
        on_resolved: Optional[Callable[[EncounterResolution], None]] = None,
    ) -> None:
        self.enemy_registry = enemy_registry
        self.spawner_registry = spawner_registry
        self.player = player
        self.settle_delay = max(0.0, settle_delay)
        self.floor_number = floor_number
        self.boss_encounter = boss_encounter
        self.endless_mode = endless_mode

        self.resolved = Signal("encounter.resolved")
        if on_resolved is not None:
            self.resolved.connect(on_resolved)

        self._state = EncounterState.ACTIVE
        self._resolution: Optional[EncounterResolution] = None
        self._tick = 0
        self._elapsed = 0.0
        self._completing_tick: Optional[int] = None
        self._settle_elapsed = 0.0
        # Registries that have notified at least once
        self._observed: set = set()
        self._detached = False

        self._attach()

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------

    def _attach(self) -> None:
        for name, registry in (("enemy", self.enemy_registry), ("spawner", self.spawner_registry)):
            if registry is None:
                logger.warning(f"No {name} registry wired; that half of the win condition is vacuous")
                continue
            registry.changed.connect(self._on_population_changed)

        if self.player is None:
            logger.warning("No player vital-sign source wired; the encounter can't be lost")
        else:
            self.player.on_death.connect(self._on_player_death)

    def detach(self) -> None:
        """Unsubscribe from everything. A pending settle never resolves."""
        for registry in (self.enemy_registry, self.spawner_registry):
            if registry is not None:
                registry.changed.disconnect(self._on_population_changed)
        if self.player is not None:
            self.player.on_death.disconnect(self._on_player_death)
        self._detached = True

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> EncounterState:
        return self._state

    @property
    def outcome(self) -> Optional[EncounterOutcome]:
        return self._resolution.outcome if self._resolution else None

    @property
    def resolution(self) -> Optional[EncounterResolution]:
        return self._resolution

    @property
    def is_resolved(self) -> bool:
        return self._state is EncounterState.RESOLVED

    @property
    def settle_remaining(self) -> Optional[float]:
        if self._state is not EncounterState.COMPLETING:
            return None
        return max(0.0, self.settle_delay - self._settle_elapsed)

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def _on_population_changed(self, registry: PopulationRegistry) -> None:
        self._observed.add(id(registry))
        self.check_win_condition()

    def _on_player_death(self, player: object = None) -> None:
        self.handle_player_death()

    def handle_player_death(self) -> None:
        if self._state is EncounterState.ACTIVE:
            logger.info("Player died. Encounter lost")
            self._resolve(EncounterOutcome.LOST)
        elif self._state is EncounterState.COMPLETING and self._completing_tick == self._tick:
            logger.info("Player died on the tick the floor was cleared. Encounter lost")
            self._resolve(EncounterOutcome.LOST)

    def check_win_condition(self) -> None:
        """Cheap and idempotent; safe to call on every registry change."""
        if self._state is not EncounterState.ACTIVE:
            return
        if not self._population_cleared():
            return

        logger.info("Floor cleared. Settling before reporting the win")
        self._state = EncounterState.COMPLETING
        self._completing_tick = self._tick
        self._settle_elapsed = 0.0
        telemetry.log("encounter_state_change", floor=self.floor_number, state=self._state.name)

    def _population_cleared(self) -> bool:
        present = [r for r in (self.enemy_registry, self.spawner_registry) if r is not None]
        if not present:
            return False

        if len(present) < 2:
            # The missing half only counts once every wired registry has spoken
            if any(id(r) not in self._observed for r in present):
                return False

        return all(r.count() == 0 for r in present)

    # ------------------------------------------------------------------
    # Host tick
    # ------------------------------------------------------------------

    def update(self, dt: float) -> None:
        """Advance the settle timer. Call once per host tick, after gameplay."""
        if self._detached:
            return
        if self._state is not EncounterState.RESOLVED:
            self._elapsed += dt

        if self._state is EncounterState.COMPLETING and self._completing_tick != self._tick:
            self._settle_elapsed += dt
            if self._settle_elapsed >= self.settle_delay:
                logger.info("Player win")
                self._resolve(EncounterOutcome.WON)

        self._tick += 1

    def _resolve(self, outcome: EncounterOutcome) -> None:
        self._state = EncounterState.RESOLVED
        self._resolution = EncounterResolution(
            outcome=outcome,
            floor_number=self.floor_number,
            boss_encounter=self.boss_encounter,
            endless_mode=self.endless_mode,
            elapsed=self._elapsed,
        )
        telemetry.log(
            "encounter_resolved",
            floor=self.floor_number,
            outcome=outcome.value,
            boss=self.boss_encounter,
            elapsed=round(self._elapsed, 3),
        )
        self.resolved.emit(self._resolution)
