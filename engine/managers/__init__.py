from .floor_difficulty_manager import FloorDifficultyManager
from .progression_manager import ProgressionManager, ProgressionResult, FloorTransitionContext

__all__ = [
    "FloorDifficultyManager",
    "ProgressionManager",
    "ProgressionResult",
    "FloorTransitionContext",
]
