"""
Headless floor runner.

Drives floor sessions with a pygame clock until the run is defeated, the
campaign is won, or --floors floors have been cleared. Combat is a stand-in:
the player grinds down the nearest enemy and every live enemy deals contact
damage each second.
"""

import argparse
import os
import random
import sys
from pathlib import Path
from typing import Optional

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame

import settings

from engine.config import load_config
from engine.encounter import FloorSession
from engine.error_handler import get_logger, handle_critical_error
from engine.managers import FloorDifficultyManager, ProgressionManager, ProgressionResult
from systems.difficulty import DifficultyGenerator, summarize_modifiers
from telemetry.logger import telemetry
from world.entities import Player
from world.spawner import WaveSpawner

logger = get_logger("main")


def resolve_contact(session: FloorSession, dt: float) -> None:
    """Trade damage between the player and the live enemies for one tick."""
    player = session.player
    if player is None or not player.is_alive:
        return
    difficulty = session.difficulty

    enemies = [e for e in session.enemies.members() if e.is_alive]
    if not enemies:
        return

    target = min(enemies, key=player.distance_to)
    damage = player.damage_per_second * dt
    if difficulty is not None:
        damage = difficulty.modify_player_damage(damage)
    target.take_damage(damage)

    for enemy in enemies:
        incoming = enemy.contact_damage * dt
        if difficulty is not None:
            incoming = difficulty.modify_enemy_damage(incoming)
        player.take_damage(incoming)


def build_spawners(floor_number: int, rng: random.Random) -> list:
    # Later floors keep spawning a little longer
    return [
        WaveSpawner(spawn_interval=2.0, start_time=0.5, end_time=8.0 + floor_number, rng=rng),
        WaveSpawner(spawn_interval=3.0, start_time=2.0, end_time=10.0 + floor_number, circular=False, rng=rng),
    ]


def run_floor(
    progression: ProgressionManager,
    clock: pygame.time.Clock,
    fps: int,
    settle_delay: float,
    rng: random.Random,
    max_seconds: float,
    fixed_step: bool,
) -> Optional[ProgressionResult]:
    context = progression.build_transition_context()
    progression.enter_floor(context)

    difficulty = progression.difficulty
    summary = summarize_modifiers(difficulty.get_active_modifiers())
    print(f"Floor {context.floor_number}: {summary.hint}")
    for modifier in difficulty.get_active_modifiers():
        print(f"  - {modifier.description}")

    session = FloorSession(
        context,
        difficulty,
        player=Player(),
        spawners=build_spawners(context.floor_number, rng),
        boss_encounter=progression.is_next_floor_boss(),
        settle_delay=settle_delay,
    )
    session.start()

    elapsed = 0.0
    while not session.is_resolved and elapsed < max_seconds:
        dt = 1.0 / fps if fixed_step else clock.tick(fps) / 1000.0
        elapsed += dt
        resolve_contact(session, dt)
        session.update(dt)

    resolution = session.resolution
    session.teardown()
    if resolution is None:
        logger.warning(f"Floor {context.floor_number} did not resolve within {max_seconds}s")
        return None

    progression.add_score(session.score)
    result = progression.complete_floor(resolution)
    print(f"Floor {context.floor_number}: {resolution.outcome.value} -> {result.value} (score {progression.score})")
    return result


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=f"{settings.TITLE}: run floor encounters headless")
    parser.add_argument("--floor", type=int, default=1, help="starting floor")
    parser.add_argument("--floors", type=int, default=3, help="floors to play before stopping")
    parser.add_argument("--seed", type=int, default=None, help="seed for modifiers and spawns")
    parser.add_argument("--endless", action="store_true", help="enable endless mode once allowed")
    parser.add_argument("--max-seconds", type=float, default=120.0, help="give up on a floor after this long")
    parser.add_argument("--fps", type=int, default=None, help="tick rate (defaults to config)")
    parser.add_argument("--fixed-step", action="store_true", help="use 1/fps per tick instead of wall time")
    parser.add_argument("--config", type=Path, default=None, help="JSON config file")
    parser.add_argument("--telemetry", type=Path, default=None, help="write JSONL telemetry here")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    config = load_config(args.config)
    fps = args.fps or config.fps

    if args.telemetry is not None:
        telemetry.bind(seed=args.seed)
        telemetry.init(args.telemetry)

    pygame.init()
    clock = pygame.time.Clock()
    rng = random.Random(args.seed)

    difficulty = FloorDifficultyManager(DifficultyGenerator.from_config(config))
    progression = ProgressionManager(difficulty, boss_floor=config.boss_floor)
    progression.start_new_game()
    progression.current_floor = max(1, args.floor)

    exit_code = 0
    try:
        for index in range(args.floors):
            if args.endless and progression.can_toggle_endless_mode():
                progression.set_endless_mode(True)

            seed = None if args.seed is None else args.seed + index
            progression.prepare_next_floor(rng_seed=seed)
            result = run_floor(
                progression, clock, fps, config.settle_delay, rng, args.max_seconds, args.fixed_step
            )
            if result is None:
                exit_code = 2
                break
            if result is not ProgressionResult.ADVANCED:
                break
    except Exception as e:
        if not handle_critical_error(e, "floor_run"):
            raise
    finally:
        pygame.quit()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
