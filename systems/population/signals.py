"""
Synchronous observer list.

Callbacks run in connection order, on the caller's tick, before emit()
returns. There is no queueing and no cross-thread dispatch.
"""

from typing import Any, Callable, List

Callback = Callable[..., Any]


class Signal:
    """A named list of callbacks."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._callbacks: List[Callback] = []

    def connect(self, callback: Callback) -> Callback:
        """Add a callback. Connecting the same callback twice is a no-op."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)
        return callback

    def disconnect(self, callback: Callback) -> bool:
        """Remove a callback. Returns False if it was not connected."""
        try:
            self._callbacks.remove(callback)
        except ValueError:
            return False
        return True

    def emit(self, *args: Any) -> None:
        # Snapshot so callbacks may disconnect themselves mid-emit
        for callback in list(self._callbacks):
            callback(*args)

    def clear(self) -> None:
        self._callbacks.clear()

    def __len__(self) -> int:
        return len(self._callbacks)

    def __repr__(self) -> str:
        return f"Signal({self.name!r}, callbacks={len(self._callbacks)})"
