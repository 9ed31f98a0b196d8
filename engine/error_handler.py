"""
Centralized error handling and logging system.

This module provides:
- The package logger (file + console handlers)
- Custom exception types for the encounter engine
- Error logging / recovery helpers

Faults inside the encounter core are recovered locally: they are logged and
the dependent feature degrades. Nothing here is meant to stop a floor.
"""
import logging
import traceback
from pathlib import Path
from typing import Optional, Callable
from datetime import datetime

# Setup logging directory
LOG_DIR = Path(__file__).resolve().parent.parent / "logs"

LOGGER_NAME = "floorwarden"

# Configure logger
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.DEBUG)

# Prevent duplicate handlers
if not logger.handlers:
    # Console handler for warnings/errors
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter('%(levelname)s: %(message)s')
    )
    logger.addHandler(console_handler)

    # File handler for detailed logs
    try:
        LOG_DIR.mkdir(exist_ok=True)
        log_file = LOG_DIR / f"floorwarden_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )
        logger.addHandler(file_handler)
    except OSError as e:
        logger.warning(f"File logging disabled: {e}")


def get_logger(name: str) -> logging.Logger:
    """Child logger under the package logger (e.g. 'floorwarden.monitor')."""
    return logger.getChild(name)


class GameError(Exception):
    """Base exception for game-specific errors."""
    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class ConfigError(GameError):
    """Error when configuration values are missing or out of range."""
    pass


def log_error(
    error: Exception,
    context: str = "",
    user_message: Optional[str] = None,
) -> None:
    """
    Log an error with context information.

    Args:
        error: The exception that occurred
        context: Where the error occurred (e.g., "config_load", "floor_start")
        user_message: Optional friendlier text, logged alongside the error.
            Defaults to the user_message carried by a GameError.
    """
    if user_message is None and isinstance(error, GameError):
        user_message = error.user_message

    error_type = type(error).__name__
    trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))

    logger.error(f"Error in {context}: {error_type}: {error}\n{trace}")
    if user_message:
        logger.info(f"User message for {context}: {user_message}")


def handle_critical_error(
    error: Exception,
    context: str,
    recovery_action: Optional[Callable[[], None]] = None,
) -> bool:
    """
    Handle an error that would otherwise end the floor.

    Args:
        error: The exception that occurred
        context: Where the error occurred
        recovery_action: Optional function to try for recovery

    Returns:
        True if the error was recovered, False if the caller should re-raise
    """
    log_error(error, context)

    if recovery_action:
        try:
            recovery_action()
            logger.info(f"Recovery action executed for {context}")
            return True
        except Exception as recovery_error:
            log_error(recovery_error, f"{context}_recovery")

    return False
