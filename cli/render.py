from __future__ import annotations

from typing import Any, Dict

import typer

_INTRUSION_PREFIX = "⚠️"


def _message_color(message: str) -> str:
    if message.startswith(_INTRUSION_PREFIX):
        return typer.colors.RED
    if message.startswith("Authorized"):
        return typer.colors.GREEN
    return typer.colors.WHITE


def _flag(value: Any) -> str:
    return "yes" if value else "no"


def render_reading(payload: Dict[str, Any]) -> None:
    message = str(payload.get("message") or "")
    typer.secho(message, bold=True, fg=_message_color(message))
    typer.echo(f"ir_triggered: {_flag(payload.get('ir_triggered'))}")
    typer.echo(f"rfid_authorized: {_flag(payload.get('rfid_authorized'))}")
    typer.echo(f"last_updated: {payload.get('last_updated') or 'never'}")


def render_key(api_key: str) -> None:
    typer.secho("API key issued", bold=True)
    typer.echo(api_key)
