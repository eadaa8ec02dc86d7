from __future__ import annotations

from typing import Any, Dict, Iterable

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_accepted(payload: Dict[str, Any]) -> None:
    echo_heading("Reading Accepted")
    echo_key_values(
        [
            ("id", payload.get("id")),
            ("timestamp", payload.get("timestamp")),
            ("delivered_to", payload.get("delivered_to")),
        ]
    )


def render_readings(readings: list[Dict[str, Any]]) -> None:
    echo_heading(f"Readings ({len(readings)})")
    if not readings:
        typer.echo("No readings stored.")
        return
    for reading in readings:
        typer.echo(
            f"  - {reading.get('timestamp')}: "
            f"temperature={reading.get('temperature')} humidity={reading.get('humidity')}"
        )
