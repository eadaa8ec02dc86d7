from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_accepted, render_readings

DEFAULT_TEMPERATURE = 25.0
DEFAULT_HUMIDITY = 60.0


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for pushing readings to and inspecting the sensors dashboard.",
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
        help="Dashboard base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        help="Default seconds between simulated readings.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, simulate_interval=interval)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("send")
def send_command(
    ctx: typer.Context,
    temperature: float = typer.Option(..., "--temperature", "-t", help="Temperature in °C."),
    humidity: float = typer.Option(..., "--humidity", "-H", help="Relative humidity in %."),
    timestamp: Optional[str] = typer.Option(
        None,
        "--timestamp",
        help="ISO 8601 sample time; the server uses arrival time when omitted.",
    ),
) -> None:
    """Push a single reading."""
    state = _get_state(ctx)
    payload = state.client.send_reading(temperature, humidity, timestamp)
    render_accepted(payload)


@app.command("history")
def history_command(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(
        None, "--limit", "-n", min=1, help="Number of stored readings to show."
    ),
) -> None:
    """Show stored readings, most recent last."""
    state = _get_state(ctx)
    render_readings(state.client.list_readings(limit))


def _next_sample(rng: random.Random, temperature: float, humidity: float) -> tuple[float, float]:
    temperature = round(temperature + rng.uniform(-0.5, 0.5), 1)
    humidity = round(min(100.0, max(0.0, humidity + rng.uniform(-1.0, 1.0))), 1)
    return temperature, humidity


@app.command("simulate")
def simulate_command(
    ctx: typer.Context,
    count: int = typer.Option(10, "--count", "-c", min=1, help="Number of readings to send."),
    interval: Optional[float] = typer.Option(
        None, "--interval", min=0.0, help="Seconds between readings."
    ),
    temperature: float = typer.Option(DEFAULT_TEMPERATURE, "--temperature", help="Starting temperature."),
    humidity: float = typer.Option(DEFAULT_HUMIDITY, "--humidity", help="Starting humidity."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible walks."),
) -> None:
    """Act as a device, pushing a random walk of readings."""
    state = _get_state(ctx)
    pause = interval if interval is not None else state.config.simulate_interval
    rng = random.Random(seed)
    typer.echo(f"Sending {count} readings to {state.config.base_url} every {pause}s ...")

    for index in range(count):
        if index:
            time.sleep(pause)
            temperature, humidity = _next_sample(rng, temperature, humidity)
        payload = state.client.send_reading(temperature, humidity)
        typer.echo(
            f"[{index + 1}/{count}] temperature={temperature} humidity={humidity} "
            f"delivered_to={payload.get('delivered_to')}"
        )

    typer.secho("Simulation finished.", fg=typer.colors.GREEN)
