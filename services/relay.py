"""Ingest and query orchestration for the device reading."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from datastore.key_store import KeyStore
from datastore.reading_store import ReadingStore
from models.records import SensorState, UpdateFlags
from services.deriver import derive_message
from settings import get_settings

logger = logging.getLogger(__name__)


class UnauthorizedError(Exception):
    """Raised when an update arrives without a valid API key."""

    def __init__(self, message: str = "Invalid or missing API key") -> None:
        super().__init__(message)
        self.message = message


class RelayService:
    """Owns the key set and the current reading; all writes go through here."""

    def __init__(
        self,
        keys: KeyStore,
        readings: ReadingStore,
        require_api_key: bool = False,
    ) -> None:
        self.keys = keys
        self.readings = readings
        self.require_api_key = require_api_key

    def issue_key(self) -> str:
        key = self.keys.issue()
        logger.info(
            "Issued API key %s...", key[:8], extra={"key_count": len(self.keys)}
        )
        return key

    def update(self, flags: UpdateFlags, api_key: Any = None) -> SensorState:
        """Replace the current reading with one derived from ``flags``."""
        if self.require_api_key and not self.keys.validate(api_key):
            logger.warning(
                "Rejected sensor update",
                extra={"status": "unauthorized", "reason": "invalid or missing api_key"},
            )
            raise UnauthorizedError()

        def build() -> SensorState:
            return SensorState(
                ir_triggered=flags.ir_triggered,
                rfid_authorized=flags.rfid_authorized,
                last_updated=datetime.now(timezone.utc),
                message=derive_message(flags.ir_triggered, flags.rfid_authorized),
            )

        state = self.readings.replace(build)
        logger.info(
            "Sensor update received: %s",
            state.message,
            extra={
                "ir_triggered": state.ir_triggered,
                "rfid_authorized": state.rfid_authorized,
                "last_updated": state.last_updated.isoformat() if state.last_updated else None,
            },
        )
        return state

    def current_reading(self) -> SensorState:
        return self.readings.get()


@lru_cache
def build_default_relay() -> RelayService:
    """Factory that wires the relay with fresh in-memory stores."""
    settings = get_settings()
    return RelayService(
        keys=KeyStore(),
        readings=ReadingStore(),
        require_api_key=settings.require_api_key,
    )
