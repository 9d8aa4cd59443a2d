from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_key, render_reading


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Device simulator and dashboard reader for the sensor relay.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Relay base URL (defaults to RELAY_BASE_URL env or http://localhost:3000).",
    ),
    api_key: Optional[str] = typer.Option(
        None,
        "--api-key",
        "-k",
        help="Key sent with updates (defaults to RELAY_API_KEY env).",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, api_key=api_key)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("generate-key")
def generate_key_command(ctx: typer.Context) -> None:
    """Ask the relay for a new API key."""
    state = _get_state(ctx)
    render_key(state.client.generate_key())


@app.command("send")
def send_command(
    ctx: typer.Context,
    ir: bool = typer.Option(False, "--ir/--no-ir", help="IR sensor fired."),
    rfid: bool = typer.Option(False, "--rfid/--no-rfid", help="Authorized RFID badge present."),
    legacy: bool = typer.Option(
        False,
        "--legacy",
        help="Send ir_triggered/rfid_authorized instead of the current field names.",
    ),
) -> None:
    """Post a sensor update as the device would."""
    state = _get_state(ctx)
    received = state.client.send_update(ir_triggered=ir, rfid_authorized=rfid, legacy=legacy)
    typer.secho("Update accepted.", fg=typer.colors.GREEN)
    render_reading(received)


@app.command("readings")
def readings_command(ctx: typer.Context) -> None:
    """Show the current reading."""
    state = _get_state(ctx)
    render_reading(state.client.get_readings())


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        help="Seconds between polls (defaults to RELAY_WATCH_INTERVAL env or 2).",
    ),
    count: Optional[int] = typer.Option(
        None,
        "--count",
        "-n",
        min=1,
        help="Stop after this many polls.",
    ),
) -> None:
    """Poll the relay and print the reading whenever it changes."""
    state = _get_state(ctx)
    delay = interval if interval is not None else state.config.watch_interval
    last: Dict[str, Any] | None = None
    polls = 0
    while count is None or polls < count:
        if polls:
            time.sleep(delay)
        reading = state.client.get_readings()
        polls += 1
        if reading != last:
            if last is not None:
                typer.echo()
            render_reading(reading)
            last = reading
