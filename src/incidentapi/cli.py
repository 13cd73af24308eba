"""CLI interface for the incidents API client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, Optional, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from incidentapi.client import IncidentsClient
from incidentapi.config import DEFAULT_CONFIG_PATH, ClientConfig, load_config
from incidentapi.errors import IncidentAPIError
from incidentapi.gateway import HTTPGateway
from incidentapi.models import APIReference
from incidentapi.options import (
    CreateIncidentOptions,
    IncidentDetails,
    ListIncidentAlertsOptions,
    ListIncidentLogEntriesOptions,
    ListIncidentsOptions,
    ManageIncidentOptions,
    ResponderRequestOptions,
)
from incidentapi.output import (
    render_alerts,
    render_incident,
    render_incidents,
    render_json,
    render_log_entries,
    render_notes,
    render_responder_request,
)

T = TypeVar("T")

console = Console()

app = typer.Typer(
    name="incidentapi",
    help="Incident API client: list, create and manage incidents.",
    no_args_is_help=True,
)

ConfigOption = Annotated[
    Path, typer.Option("--config", "-c", help="Path to the client config file.")
]
ActorOption = Annotated[
    Optional[str],
    typer.Option("--from", help="Acting user's email; defaults to default_actor."),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON.")]


def build_gateway(config: ClientConfig) -> HTTPGateway:
    return HTTPGateway(config)


def _run(
    config_path: Path,
    action: Callable[[IncidentsClient, ClientConfig], Awaitable[T]],
) -> T:
    """Load config, open a gateway, run ``action`` and exit 1 on any API error."""
    try:
        config = load_config(config_path)

        async def main() -> T:
            async with build_gateway(config) as gateway:
                return await action(IncidentsClient(gateway), config)

        return asyncio.run(main())
    except (IncidentAPIError, ValueError) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)


def _actor(actor: str | None, config: ClientConfig) -> str:
    actor = actor or config.default_actor
    if not actor:
        raise ValueError("No acting user: pass --from or set default_actor")
    return actor


@app.callback()
def configure(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log every request.")
    ] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command("list")
def list_cmd(
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    status: Annotated[
        Optional[list[str]], typer.Option("--status", "-s", help="Filter by status.")
    ] = None,
    urgency: Annotated[
        Optional[list[str]], typer.Option("--urgency", help="Filter by urgency.")
    ] = None,
    service: Annotated[
        Optional[list[str]], typer.Option("--service", help="Filter by service ID.")
    ] = None,
    offset: Annotated[Optional[int], typer.Option("--offset")] = None,
    limit: Annotated[Optional[int], typer.Option("--limit")] = None,
    as_json: JsonOption = False,
) -> None:
    """List incidents (one page)."""

    async def action(client: IncidentsClient, _: ClientConfig):
        options = ListIncidentsOptions(
            statuses=status or [],
            urgencies=urgency or [],
            service_ids=service or [],
            offset=offset,
            limit=limit,
        )
        return await client.list_incidents(options)

    page = _run(config, action)
    if as_json:
        render_json(page)
    else:
        render_incidents(page)


@app.command("show")
def show_cmd(
    incident_id: Annotated[str, typer.Argument(help="Incident ID.")],
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    as_json: JsonOption = False,
) -> None:
    """Show one incident."""
    incident = _run(config, lambda client, _: client.get_incident(incident_id))
    if as_json:
        render_json(incident)
    else:
        render_incident(incident)


@app.command("notes")
def notes_cmd(
    incident_id: Annotated[str, typer.Argument(help="Incident ID.")],
    config: ConfigOption = DEFAULT_CONFIG_PATH,
) -> None:
    """List the notes of an incident."""
    page = _run(config, lambda client, _: client.list_incident_notes(incident_id))
    render_notes(page)


@app.command("alerts")
def alerts_cmd(
    incident_id: Annotated[str, typer.Argument(help="Incident ID.")],
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    status: Annotated[
        Optional[list[str]], typer.Option("--status", "-s", help="Filter by status.")
    ] = None,
) -> None:
    """List the alerts of an incident."""

    async def action(client: IncidentsClient, _: ClientConfig):
        options = ListIncidentAlertsOptions(statuses=status or [])
        return await client.list_incident_alerts(incident_id, options)

    page = _run(config, action)
    render_alerts(page)


@app.command("log")
def log_cmd(
    incident_id: Annotated[str, typer.Argument(help="Incident ID.")],
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    overview: Annotated[
        bool, typer.Option("--overview", help="Only the most important entries.")
    ] = False,
) -> None:
    """List the log entries of an incident."""
    options = ListIncidentLogEntriesOptions(is_overview=True if overview else None)
    page = _run(
        config,
        lambda client, _: client.list_incident_log_entries(incident_id, options),
    )
    render_log_entries(page)


@app.command("create")
def create_cmd(
    title: Annotated[str, typer.Option("--title", help="Incident title.")],
    service: Annotated[str, typer.Option("--service", help="Service ID.")],
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    actor: ActorOption = None,
    urgency: Annotated[
        Optional[str], typer.Option("--urgency", help="high or low.")
    ] = None,
    details: Annotated[
        Optional[str], typer.Option("--details", help="Incident body text.")
    ] = None,
) -> None:
    """Create an incident."""

    async def action(client: IncidentsClient, cfg: ClientConfig):
        options = CreateIncidentOptions(
            title=title,
            service=APIReference(id=service, type="service_reference"),
            urgency=urgency,
            body=IncidentDetails(details=details) if details else None,
        )
        return await client.create_incident(_actor(actor, cfg), options)

    render_incident(_run(config, action))


def _set_status(
    status: str, incident_ids: list[str], config: Path, actor: str | None
) -> None:
    async def action(client: IncidentsClient, cfg: ClientConfig):
        mutations = [ManageIncidentOptions(id=i, status=status) for i in incident_ids]
        return await client.manage_incidents(_actor(actor, cfg), mutations)

    render_incidents(_run(config, action))


@app.command("ack")
def ack_cmd(
    incident_ids: Annotated[list[str], typer.Argument(help="Incident IDs.")],
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    actor: ActorOption = None,
) -> None:
    """Acknowledge one or more incidents."""
    _set_status("acknowledged", incident_ids, config, actor)


@app.command("resolve")
def resolve_cmd(
    incident_ids: Annotated[list[str], typer.Argument(help="Incident IDs.")],
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    actor: ActorOption = None,
) -> None:
    """Resolve one or more incidents."""
    _set_status("resolved", incident_ids, config, actor)


@app.command("merge")
def merge_cmd(
    target_id: Annotated[str, typer.Argument(help="Incident to merge into.")],
    source_ids: Annotated[list[str], typer.Argument(help="Incidents to merge.")],
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    actor: ActorOption = None,
) -> None:
    """Merge source incidents into a target incident."""
    incident = _run(
        config,
        lambda client, cfg: client.merge_incidents(
            _actor(actor, cfg), target_id, source_ids
        ),
    )
    render_incident(incident)


@app.command("note")
def note_cmd(
    incident_id: Annotated[str, typer.Argument(help="Incident ID.")],
    content: Annotated[str, typer.Argument(help="Note text.")],
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    actor: ActorOption = None,
) -> None:
    """Add a note to an incident."""
    note = _run(
        config,
        lambda client, cfg: client.create_incident_note(
            _actor(actor, cfg), incident_id, content
        ),
    )
    console.print(f"[green]Note {note.id} added.[/green]")


@app.command("snooze")
def snooze_cmd(
    incident_id: Annotated[str, typer.Argument(help="Incident ID.")],
    duration: Annotated[int, typer.Argument(help="Seconds to snooze for.")],
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    actor: ActorOption = None,
) -> None:
    """Snooze an acknowledged incident."""
    incident = _run(
        config,
        lambda client, cfg: client.snooze_incident(
            _actor(actor, cfg), incident_id, duration
        ),
    )
    render_incident(incident)


@app.command("responders")
def responders_cmd(
    incident_id: Annotated[str, typer.Argument(help="Incident ID.")],
    requester: Annotated[str, typer.Option("--requester", help="Requesting user ID.")],
    message: Annotated[str, typer.Option("--message", "-m", help="Request message.")],
    user: Annotated[
        list[str], typer.Option("--user", "-u", help="User ID to request.")
    ],
    config: ConfigOption = DEFAULT_CONFIG_PATH,
    actor: ActorOption = None,
) -> None:
    """Ask users to respond to an incident."""
    options = ResponderRequestOptions.for_targets(
        requester,
        message,
        [APIReference(id=u, type="user_reference") for u in user],
    )
    request = _run(
        config,
        lambda client, cfg: client.create_responder_request(
            _actor(actor, cfg), incident_id, options
        ),
    )
    render_responder_request(request)
