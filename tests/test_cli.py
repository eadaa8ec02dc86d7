from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from typer.testing import CliRunner

from cli.app import app


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.sent: List[Dict[str, Any]] = []
        self.limits: List[Optional[int]] = []
        self.readings: List[Dict[str, Any]] = [
            {
                "id": "a1",
                "temperature": 20.0,
                "humidity": 50.0,
                "timestamp": "2024-01-01T00:00:00Z",
            },
            {
                "id": "b2",
                "temperature": 21.0,
                "humidity": 51.0,
                "timestamp": "2024-01-01T00:00:01Z",
            },
        ]
        self.closed = False

    def send_reading(
        self, temperature: float, humidity: float, timestamp: Optional[str] = None
    ) -> Dict[str, Any]:
        self.sent.append(
            {"temperature": temperature, "humidity": humidity, "timestamp": timestamp}
        )
        return {
            "id": f"reading-{len(self.sent)}",
            "timestamp": timestamp or "2024-01-01T00:00:00Z",
            "delivered_to": 2,
        }

    def list_readings(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        self.limits.append(limit)
        return self.readings if limit is None else self.readings[-limit:]

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    client = StubClient(config=None)

    def factory(config):
        client.config = config
        return client

    monkeypatch.setattr("cli.app.ApiClient", factory)
    monkeypatch.setattr("cli.app.time.sleep", lambda _seconds: None)
    return client


def test_send_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["send", "--temperature", "20", "--humidity", "50"])

    assert result.exit_code == 0
    assert "Reading Accepted" in result.stdout
    assert "id: reading-1" in result.stdout
    assert "delivered_to: 2" in result.stdout
    assert stub.sent == [{"temperature": 20.0, "humidity": 50.0, "timestamp": None}]
    assert stub.closed is True


def test_send_command_with_timestamp_and_base_url(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(
        app,
        [
            "--base-url",
            "http://sensors.local:9000/",
            "send",
            "-t",
            "19.5",
            "-H",
            "45",
            "--timestamp",
            "2024-02-02T10:00:00Z",
        ],
    )

    assert result.exit_code == 0
    assert stub.config.base_url == "http://sensors.local:9000"
    assert stub.sent[0]["timestamp"] == "2024-02-02T10:00:00Z"


def test_history_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["history", "--limit", "1"])

    assert result.exit_code == 0
    assert "Readings (1)" in result.stdout
    assert "temperature=21.0 humidity=51.0" in result.stdout
    assert "temperature=20.0" not in result.stdout
    assert stub.limits == [1]


def test_history_command_empty(runner: CliRunner, stub: StubClient) -> None:
    stub.readings = []

    result = runner.invoke(app, ["history"])

    assert result.exit_code == 0
    assert "No readings stored." in result.stdout
    assert stub.limits == [None]


def test_simulate_command_walks_from_baseline(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(
        app,
        ["simulate", "--count", "5", "--interval", "0", "--seed", "7", "--humidity", "99.8"],
    )

    assert result.exit_code == 0
    assert "Simulation finished." in result.stdout
    assert len(stub.sent) == 5
    assert stub.sent[0]["temperature"] == 25.0
    assert stub.sent[0]["humidity"] == 99.8
    for previous, current in zip(stub.sent, stub.sent[1:]):
        assert abs(current["temperature"] - previous["temperature"]) <= 0.51
        assert 0.0 <= current["humidity"] <= 100.0


def test_simulate_interval_defaults_from_environment(
    runner: CliRunner, stub: StubClient, monkeypatch
) -> None:
    monkeypatch.setenv("CLI_SIMULATE_INTERVAL", "2.5")

    result = runner.invoke(app, ["simulate", "--count", "1"])

    assert result.exit_code == 0
    assert "every 2.5s" in result.stdout
    assert stub.config.simulate_interval == 2.5
