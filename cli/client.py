from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the relay service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def generate_key(self) -> str:
        payload = self._request("GET", "/api/generate-api-key")
        api_key = payload.get("api_key")
        if not isinstance(api_key, str):
            raise typer.BadParameter("Unexpected response payload when generating a key.")
        return api_key

    def send_update(
        self,
        ir_triggered: bool,
        rfid_authorized: bool,
        legacy: bool = False,
        api_key: Optional[str] = None,
    ) -> Dict[str, Any]:
        if legacy:
            body: Dict[str, Any] = {
                "ir_triggered": ir_triggered,
                "rfid_authorized": rfid_authorized,
            }
        else:
            body = {
                "unauthorized_suspect": ir_triggered,
                "access_granted": rfid_authorized,
            }
        key = api_key or self._config.api_key
        if key:
            body["api_key"] = key
        payload = self._request("POST", "/api/update", json=body)
        received = payload.get("received")
        if not isinstance(received, dict):
            raise typer.BadParameter("Unexpected response payload when sending an update.")
        return received

    def get_readings(self) -> Dict[str, Any]:
        return self._request("GET", "/api/readings")

    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            if isinstance(data, dict):
                detail = data.get("error") or data.get("detail")
            else:
                detail = str(data)
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
