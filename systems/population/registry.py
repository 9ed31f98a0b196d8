"""
Population registries.

Tracks the live members of one category (enemies, spawners) and notifies
listeners on every change. One registry instance per category per floor;
instances are passed to whoever needs them, never looked up globally.
"""

from __future__ import annotations

from typing import Dict, Generic, List, TypeVar

from engine.error_handler import get_logger

from .signals import Signal

logger = get_logger("population")

T = TypeVar("T")


class PopulationRegistry(Generic[T]):
    """
    Live membership set with a "changed" notification.

    - add(): on creation of a member; a second add of the same member is ignored.
    - remove(): on destruction; removing a member that is not present is a
      no-op (double unregistration during teardown).
    - changed: emitted synchronously after every effective add/remove, with
      the registry as the only argument.

    Members are tracked by identity, so unhashable objects are fine.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._members: Dict[int, T] = {}
        self.changed = Signal(f"{name}.changed")

    def add(self, member: T) -> bool:
        key = id(member)
        if key in self._members:
            logger.debug(f"{self.name}: ignoring duplicate add of {member!r}")
            return False
        self._members[key] = member
        self.changed.emit(self)
        return True

    def remove(self, member: T) -> bool:
        if self._members.pop(id(member), None) is None:
            return False
        self.changed.emit(self)
        return True

    def count(self) -> int:
        return len(self._members)

    def members(self) -> List[T]:
        """Snapshot of the current members (safe to iterate while mutating)."""
        return list(self._members.values())

    def clear(self) -> None:
        """Drop every member without notifying (floor teardown)."""
        self._members.clear()

    def __len__(self) -> int:
        return len(self._members)

    def __contains__(self, member: object) -> bool:
        return id(member) in self._members

    def __repr__(self) -> str:
        return f"PopulationRegistry({self.name!r}, count={self.count()})"


def make_enemy_registry() -> PopulationRegistry:
    return PopulationRegistry("enemies")


def make_spawner_registry() -> PopulationRegistry:
    return PopulationRegistry("spawners")
