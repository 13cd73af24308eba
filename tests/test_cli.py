"""Integration tests for the CLI interface."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
import yaml
from typer.testing import CliRunner

from incidentapi import cli
from incidentapi.cli import app
from incidentapi.gateway import HTTPGateway

runner = CliRunner()

INCIDENT = {
    "id": "Q1",
    "incident_number": 7,
    "title": "db down",
    "status": "triggered",
    "urgency": "high",
    "service": {"id": "PSVC1", "summary": "payments-db"},
}


class Recorder:
    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: dict[tuple[str, str], httpx.Response] = {}

    def on(self, method: str, path: str, status: int, payload: object) -> None:
        self.responses[(method, path)] = httpx.Response(status, json=payload)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.get(
            (request.method, request.url.path), httpx.Response(404, json={})
        )


@pytest.fixture
def recorder(monkeypatch) -> Recorder:
    rec = Recorder()
    monkeypatch.setattr(
        cli,
        "build_gateway",
        lambda config: HTTPGateway(config, transport=httpx.MockTransport(rec)),
    )
    return rec


@pytest.fixture
def config_path(tmp_path: Path) -> str:
    path = tmp_path / "incidentapi.yaml"
    path.write_text(
        yaml.dump(
            {
                "client": {
                    "base_url": "https://api.example.com",
                    "api_token": "t0k3n",
                    "default_actor": "ops@example.com",
                }
            }
        )
    )
    return str(path)


# ── read commands ──────────────────────────────────────────────────────────


def test_list_table_output(recorder, config_path):
    recorder.on("GET", "/incidents", 200, {"incidents": [INCIDENT], "more": False})

    result = runner.invoke(app, ["list", "--config", config_path, "-s", "triggered"])

    assert result.exit_code == 0
    assert "db down" in result.output
    assert recorder.requests[0].url.params.get_list("statuses[]") == ["triggered"]


def test_list_empty(recorder, config_path):
    recorder.on("GET", "/incidents", 200, {"incidents": []})

    result = runner.invoke(app, ["list", "--config", config_path])

    assert result.exit_code == 0
    assert "No incidents found" in result.output


def test_list_json_output(recorder, config_path):
    recorder.on("GET", "/incidents", 200, {"incidents": [INCIDENT], "limit": 25})

    result = runner.invoke(app, ["list", "--json", "--config", config_path])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["items"][0]["id"] == "Q1"
    assert data["limit"] == 25


def test_list_rejects_unknown_status(recorder, config_path):
    result = runner.invoke(app, ["list", "--config", config_path, "-s", "exploded"])

    assert result.exit_code == 1
    assert "Error" in result.output
    assert recorder.requests == []


def test_show(recorder, config_path):
    recorder.on("GET", "/incidents/Q1", 200, {"incident": INCIDENT})

    result = runner.invoke(app, ["show", "Q1", "--config", config_path])

    assert result.exit_code == 0
    assert "db down" in result.output
    assert "triggered" in result.output


def test_show_not_found(recorder, config_path):
    result = runner.invoke(app, ["show", "NOPE", "--config", config_path])

    assert result.exit_code == 1
    assert "404" in result.output


def test_notes(recorder, config_path):
    recorder.on(
        "GET",
        "/incidents/Q1/notes",
        200,
        {"notes": [{"id": "N1", "content": "rolled back", "user": {"summary": "Ana"}}]},
    )

    result = runner.invoke(app, ["notes", "Q1", "--config", config_path])

    assert result.exit_code == 0
    assert "rolled back" in result.output

def test_alerts(recorder, config_path):
    recorder.on(
        "GET",
        "/incidents/Q1/alerts",
        200,
        {
            "alerts": [
                {"id": "A1", "status": "triggered", "alert_key": "disk-full"}
            ],
            "more": False,
        },
    )

    result = runner.invoke(
        app, ["alerts", "Q1", "-s", "triggered", "--config", config_path]
    )

    assert result.exit_code == 0
    request = recorder.requests[0]
    assert request.url.path == "/incidents/Q1/alerts"
    assert request.url.params.get_list("statuses[]") == ["triggered"]
    assert "A1" in result.output


def test_log_overview(recorder, config_path):
    recorder.on(
        "GET",
        "/incidents/Q1/log_entries",
        200,
        {
            "log_entries": [
                {"type": "trigger_log_entry", "summary": "Triggered via API"}
            ],
            "more": False,
        },
    )

    result = runner.invoke(app, ["log", "Q1", "--overview", "--config", config_path])

    assert result.exit_code == 0
    request = recorder.requests[0]
    assert request.url.path == "/incidents/Q1/log_entries"
    assert request.url.params["is_overview"] == "true"
    assert "Triggered via API" in result.output


def test_log_without_overview_sends_no_query(recorder, config_path):
    recorder.on("GET", "/incidents/Q1/log_entries", 200, {"log_entries": []})

    result = runner.invoke(app, ["log", "Q1", "--config", config_path])

    assert result.exit_code == 0
    assert recorder.requests[0].url.query == b""
    assert "No log entries found." in result.output



def test_missing_config(tmp_path):
    result = runner.invoke(app, ["list", "--config", str(tmp_path / "none.yaml")])

    assert result.exit_code == 1
    assert "Missing configuration file" in result.output


# ── write commands ─────────────────────────────────────────────────────────


def test_create_uses_default_actor(recorder, config_path):
    recorder.on("POST", "/incidents", 201, {"incident": INCIDENT})

    result = runner.invoke(
        app,
        ["create", "--title", "db down", "--service", "PSVC1", "--config", config_path],
    )

    assert result.exit_code == 0
    request = recorder.requests[0]
    assert request.headers["From"] == "ops@example.com"
    assert json.loads(request.content)["incident"]["title"] == "db down"


def test_ack_with_explicit_actor(recorder, config_path):
    recorder.on(
        "PUT",
        "/incidents",
        200,
        {"incidents": [{**INCIDENT, "status": "acknowledged"}]},
    )

    result = runner.invoke(
        app, ["ack", "Q1", "--from", "sre@example.com", "--config", config_path]
    )

    assert result.exit_code == 0
    request = recorder.requests[0]
    assert request.headers["From"] == "sre@example.com"
    assert json.loads(request.content)["incidents"][0]["status"] == "acknowledged"


def test_merge(recorder, config_path):
    recorder.on("PUT", "/incidents/Q1/merge", 200, {"incident": INCIDENT})

    result = runner.invoke(app, ["merge", "Q1", "Q2", "Q3", "--config", config_path])

    assert result.exit_code == 0
    body = json.loads(recorder.requests[0].content)
    assert [s["id"] for s in body["source_incidents"]] == ["Q2", "Q3"]


def test_note(recorder, config_path):
    recorder.on("POST", "/incidents/Q1/notes", 201, {"note": {"id": "N9"}})

    result = runner.invoke(app, ["note", "Q1", "paging dba", "--config", config_path])

    assert result.exit_code == 0
    assert "N9" in result.output


def test_resolve(recorder, config_path):
    recorder.on(
        "PUT", "/incidents", 200, {"incidents": [{**INCIDENT, "status": "resolved"}]}
    )

    result = runner.invoke(app, ["resolve", "Q1", "Q2", "--config", config_path])

    assert result.exit_code == 0
    request = recorder.requests[0]
    assert request.method == "PUT"
    assert request.url.path == "/incidents"
    assert request.headers["From"] == "ops@example.com"
    assert json.loads(request.content) == {
        "incidents": [
            {"id": "Q1", "type": "incident_reference", "status": "resolved"},
            {"id": "Q2", "type": "incident_reference", "status": "resolved"},
        ]
    }


def test_snooze(recorder, config_path):
    recorder.on(
        "POST",
        "/incidents/Q1/snooze",
        201,
        {"incident": {**INCIDENT, "status": "acknowledged"}},
    )

    result = runner.invoke(app, ["snooze", "Q1", "3600", "--config", config_path])

    assert result.exit_code == 0
    request = recorder.requests[0]
    assert request.headers["From"] == "ops@example.com"
    assert json.loads(request.content) == {"duration": 3600}
    assert "db down" in result.output


def test_snooze_rejects_zero_duration(recorder, config_path):
    result = runner.invoke(app, ["snooze", "Q1", "0", "--config", config_path])

    assert result.exit_code == 1
    assert "positive" in result.output
    assert recorder.requests == []


def test_responders(recorder, config_path):
    recorder.on(
        "POST",
        "/incidents/Q1/responder_requests",
        200,
        {
            "responder_request": {
                "message": "need a hand",
                "responder_request_targets": [
                    {
                        "responder_request_target": {
                            "id": "U2",
                            "type": "user",
                            "summary": "Dana",
                            "incident_responders": [
                                {"state": "pending", "user": {"summary": "Dana"}}
                            ],
                        }
                    }
                ],
            }
        },
    )

    result = runner.invoke(
        app,
        [
            "responders",
            "Q1",
            "--requester",
            "U1",
            "-m",
            "need a hand",
            "-u",
            "U2",
            "-u",
            "U3",
            "--config",
            config_path,
        ],
    )

    assert result.exit_code == 0
    request = recorder.requests[0]
    assert request.headers["From"] == "ops@example.com"
    assert json.loads(request.content) == {
        "requester_id": "U1",
        "message": "need a hand",
        "responder_request_targets": [
            {"responder_request_target": {"id": "U2", "type": "user_reference"}},
            {"responder_request_target": {"id": "U3", "type": "user_reference"}},
        ],
    }
    assert "pending" in result.output
