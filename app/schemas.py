"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import SensorState, UpdateFlags


def coerce_flag(value: Any) -> bool:
    """Truthiness as the device firmware sees it: empty containers still count."""
    if isinstance(value, (list, dict)):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


class SensorUpdate(BaseModel):
    """Body posted by the device. Every field is optional and loosely typed."""

    model_config = ConfigDict(extra="ignore")

    api_key: Any = Field(default=None, description="Key from /api/generate-api-key.")
    ir_triggered: Any = Field(default=None, description="Legacy name for the IR flag.")
    rfid_authorized: Any = Field(default=None, description="Legacy name for the RFID flag.")
    unauthorized_suspect: Any = Field(
        default=None, description="IR flag; wins over ir_triggered when sent."
    )
    access_granted: Any = Field(
        default=None, description="RFID flag; wins over rfid_authorized when sent."
    )

    def to_flags(self) -> UpdateFlags:
        sent = self.model_fields_set
        ir = self.unauthorized_suspect if "unauthorized_suspect" in sent else self.ir_triggered
        rfid = self.access_granted if "access_granted" in sent else self.rfid_authorized
        return UpdateFlags(ir_triggered=coerce_flag(ir), rfid_authorized=coerce_flag(rfid))


class SensorReading(BaseModel):
    """Current device reading as served to the dashboard."""

    ir_triggered: bool
    rfid_authorized: bool
    last_updated: Optional[datetime] = None
    message: str

    @classmethod
    def from_state(cls, state: SensorState) -> "SensorReading":
        return cls(
            ir_triggered=state.ir_triggered,
            rfid_authorized=state.rfid_authorized,
            last_updated=state.last_updated,
            message=state.message,
        )


class UpdateResponse(BaseModel):
    status: str = "success"
    received: SensorReading


class ApiKeyResponse(BaseModel):
    status: str = "success"
    api_key: str
    instruction: str = "Use this key in your ESP32 code to send data"


class ServiceInfo(BaseModel):
    """Metadata returned from the root endpoint."""

    status: str = "online"
    version: str
    message: str
    require_api_key: bool
    endpoints: Dict[str, str] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    error: str
