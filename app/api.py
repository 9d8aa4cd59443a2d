"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.schemas import (
    ApiKeyResponse,
    ErrorResponse,
    SensorReading,
    SensorUpdate,
    ServiceInfo,
    UpdateResponse,
)
from services.relay import RelayService, build_default_relay

SERVICE_VERSION = "1.2.0"

ENDPOINTS = {
    "generateKey": "GET /api/generate-api-key",
    "updateData": "POST /api/update",
    "getReadings": "GET /api/readings",
    "dashboard": "GET /ui",
}

router = APIRouter()


def get_relay() -> RelayService:
    return build_default_relay()


@router.get(
    "/",
    response_model=ServiceInfo,
    summary="Service metadata and the available operations.",
)
async def root(relay: RelayService = Depends(get_relay)) -> ServiceInfo:
    return ServiceInfo(
        version=SERVICE_VERSION,
        message="Sensor relay is running",
        require_api_key=relay.require_api_key,
        endpoints=dict(ENDPOINTS),
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/api/generate-api-key",
    response_model=ApiKeyResponse,
    summary="Issue a new API key for a device.",
)
def generate_api_key(relay: RelayService = Depends(get_relay)) -> ApiKeyResponse:
    return ApiKeyResponse(api_key=relay.issue_key())


@router.post(
    "/api/update",
    response_model=UpdateResponse,
    responses={status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}},
    summary="Accept the latest sensor flags from the device.",
)
def update_reading(
    payload: SensorUpdate,
    relay: RelayService = Depends(get_relay),
) -> UpdateResponse:
    state = relay.update(payload.to_flags(), api_key=payload.api_key)
    return UpdateResponse(received=SensorReading.from_state(state))


@router.get(
    "/api/readings",
    response_model=SensorReading,
    summary="Current reading for the dashboard.",
)
def get_readings(relay: RelayService = Depends(get_relay)) -> SensorReading:
    return SensorReading.from_state(relay.current_reading())
