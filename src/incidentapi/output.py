"""Rich output formatting for CLI results."""

from __future__ import annotations

import json

from pydantic import BaseModel
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from incidentapi.models import (
    Incident,
    IncidentAlert,
    IncidentNote,
    LogEntry,
    Page,
    ResponderRequest,
)

console = Console()

STATUS_COLORS: dict[str, str] = {
    "triggered": "red bold",
    "acknowledged": "yellow",
    "resolved": "green",
}


def _status(status: str | None) -> Text:
    if status is None:
        return Text("-", style="dim")
    return Text(status, style=STATUS_COLORS.get(status, "white"))


def _summary(ref) -> str:
    if ref is None:
        return "-"
    return ref.summary or ref.id or "-"


def _page_footer(page: Page) -> None:
    footer = f"  offset {page.offset}"
    if page.limit is not None:
        footer += f", limit {page.limit}"
    if page.total is not None:
        footer += f", total {page.total}"
    if page.more:
        footer += " (more available)"
    console.print(Text(footer, style="dim"))


def render_json(value: BaseModel) -> None:
    """Output a model as formatted JSON, omitting unset fields."""
    data = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    console.print_json(json.dumps(data))


def render_incidents(page: Page[Incident]) -> None:
    """Render a page of incidents as a Rich table.

    Args:
        page: The page returned by ``list_incidents`` or ``manage_incidents``.
    """
    if not page.items:
        console.print(Text("No incidents found.", style="dim"))
        return

    table = Table(title="Incidents", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("ID")
    table.add_column("Status")
    table.add_column("Urgency")
    table.add_column("Title", min_width=20)
    table.add_column("Service")

    for incident in page.items:
        table.add_row(
            str(incident.incident_number or ""),
            incident.id or "",
            _status(incident.status),
            incident.urgency or "-",
            incident.title or "",
            _summary(incident.service),
        )

    console.print(table)
    _page_footer(page)


def render_incident(incident: Incident) -> None:
    """Render one incident as a panel."""
    content = Text()
    content.append(incident.title or "(untitled)", style="bold")
    content.append("\n")
    content.append("  status    ", style="dim")
    content.append_text(_status(incident.status))
    content.append("\n")
    content.append("  urgency   ", style="dim")
    content.append(f"{incident.urgency or '-'}\n")
    content.append("  service   ", style="dim")
    content.append(f"{_summary(incident.service)}\n")
    if incident.priority is not None:
        content.append("  priority  ", style="dim")
        content.append(f"{incident.priority.name or _summary(incident.priority)}\n")
    if incident.assignments:
        names = ", ".join(_summary(a.assignee) for a in incident.assignments)
        content.append("  assigned  ", style="dim")
        content.append(f"{names}\n")
    if incident.alert_counts is not None:
        counts = incident.alert_counts
        content.append("  alerts    ", style="dim")
        content.append(
            f"{counts.triggered} triggered, {counts.resolved} resolved, "
            f"{counts.all} total\n"
        )
    if incident.resolve_reason is not None and incident.resolve_reason.incident:
        content.append("  merged    ", style="dim")
        content.append(f"into {_summary(incident.resolve_reason.incident)}\n")
    if incident.created_at:
        content.append("  created   ", style="dim")
        content.append(f"{incident.created_at}\n")

    title = f"Incident {incident.id}"
    if incident.incident_number is not None:
        title += f" (#{incident.incident_number})"
    console.print(Panel(content, title=title, border_style="blue"))


def render_notes(page: Page[IncidentNote]) -> None:
    if not page.items:
        console.print(Text("No notes found.", style="dim"))
        return

    table = Table(title="Notes", show_header=True, header_style="bold")
    table.add_column("Created")
    table.add_column("Author")
    table.add_column("Content", min_width=30)

    for note in page.items:
        table.add_row(note.created_at or "", _summary(note.user), note.content or "")

    console.print(table)


def render_alerts(page: Page[IncidentAlert]) -> None:
    if not page.items:
        console.print(Text("No alerts found.", style="dim"))
        return

    table = Table(title="Alerts", show_header=True, header_style="bold")
    table.add_column("ID")
    table.add_column("Status")
    table.add_column("Severity")
    table.add_column("Alert Key")
    table.add_column("Summary", min_width=20)

    for alert in page.items:
        table.add_row(
            alert.id or "",
            _status(alert.status),
            alert.severity or "-",
            alert.alert_key or "-",
            alert.summary or "",
        )

    console.print(table)
    _page_footer(page)


def render_log_entries(page: Page[LogEntry]) -> None:
    if not page.items:
        console.print(Text("No log entries found.", style="dim"))
        return

    table = Table(title="Log Entries", show_header=True, header_style="bold")
    table.add_column("Created")
    table.add_column("Type")
    table.add_column("Agent")
    table.add_column("Summary", min_width=30)

    for entry in page.items:
        table.add_row(
            entry.created_at or "",
            entry.type or "",
            _summary(entry.agent),
            entry.summary or "",
        )

    console.print(table)
    _page_footer(page)


def render_responder_request(request: ResponderRequest) -> None:
    """Render the per-target state of a responder request."""
    table = Table(title="Responder Request", show_header=True, header_style="bold")
    table.add_column("Target")
    table.add_column("Responder")
    table.add_column("State")

    for wrapper in request.responder_request_targets:
        target = wrapper.responder_request_target
        if not target.incident_responders:
            table.add_row(_summary(target), "-", "-")
        for responder in target.incident_responders:
            table.add_row(
                _summary(target), _summary(responder.user), responder.state or "-"
            )

    console.print(table)
    if request.message:
        console.print(Text(f"  Message: {request.message}", style="dim"))
