from __future__ import annotations

from threading import Lock
from typing import Callable

from models.records import SensorState
from services.deriver import NO_DATA_MESSAGE


def initial_state() -> SensorState:
    return SensorState(
        ir_triggered=False,
        rfid_authorized=False,
        last_updated=None,
        message=NO_DATA_MESSAGE,
    )


class ReadingStore:
    """Holds the single current reading.

    ``SensorState`` is immutable, so swapping the reference under the lock is
    enough for readers to always see a whole reading.
    """

    def __init__(self, initial: SensorState | None = None) -> None:
        self._current = initial or initial_state()
        self._lock = Lock()

    def get(self) -> SensorState:
        with self._lock:
            return self._current

    def replace(self, build: Callable[[], SensorState]) -> SensorState:
        """Build the next reading and install it atomically."""
        with self._lock:
            state = build()
            self._current = state
            return state
