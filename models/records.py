"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True, slots=True)
class UpdateFlags:
    """Sensor booleans after the request payload has been normalized."""

    ir_triggered: bool = False
    rfid_authorized: bool = False


@dataclass(frozen=True, slots=True)
class SensorState:
    """The current snapshot reported by the device."""

    ir_triggered: bool
    rfid_authorized: bool
    last_updated: Optional[datetime]
    message: str
