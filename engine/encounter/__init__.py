from .monitor import EncounterMonitor, EncounterOutcome, EncounterResolution, EncounterState
from .session import FloorSession

__all__ = [
    "EncounterMonitor",
    "EncounterOutcome",
    "EncounterResolution",
    "EncounterState",
    "FloorSession",
]
