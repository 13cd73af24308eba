"""Pydantic models for incidents, their sub-resources, and list pages."""

from __future__ import annotations

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, JsonValue

T = TypeVar("T")

IncidentStatus = Literal["triggered", "acknowledged", "resolved"]
AlertStatus = Literal["triggered", "resolved"]
Urgency = Literal["high", "low"]


class APIObject(BaseModel):
    """Reference to another object as embedded in responses."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    type: str | None = None
    summary: str | None = None
    self_url: str | None = Field(None, alias="self")
    html_url: str | None = None


class APIReference(BaseModel):
    """Reference sent to the service in write payloads."""

    id: str
    type: str


class Priority(APIObject):
    name: str | None = None
    description: str | None = None


class PendingAction(BaseModel):
    type: str | None = None
    at: str | None = None


class Assignment(BaseModel):
    at: str | None = None
    assignee: APIObject | None = None


class Acknowledgement(BaseModel):
    at: str | None = None
    acknowledger: APIObject | None = None


class AlertCounts(BaseModel):
    triggered: int = 0
    resolved: int = 0
    all: int = 0


class ResolveReason(BaseModel):
    type: str | None = None
    incident: APIObject | None = None


class IncidentBody(BaseModel):
    type: str | None = None
    details: str | None = None


class ConferenceBridge(BaseModel):
    conference_number: str | None = None
    conference_url: str | None = None


class FirstTriggerLogEntry(APIObject):
    created_at: str | None = None
    incident: APIObject | None = None


class Incident(APIObject):
    """An incident as reported by the service.

    Every field is owned by the service. A write call returns a fresh
    Incident which replaces whatever the caller held before.
    """

    incident_number: int | None = None
    title: str | None = None
    description: str | None = None
    created_at: str | None = None
    status: IncidentStatus | None = None
    urgency: Urgency | None = None
    incident_key: str | None = None
    priority: Priority | None = None
    service: APIObject | None = None
    escalation_policy: APIObject | None = None
    teams: list[APIObject] = Field(default_factory=list)
    pending_actions: list[PendingAction] = Field(default_factory=list)
    assignments: list[Assignment] = Field(default_factory=list)
    acknowledgements: list[Acknowledgement] = Field(default_factory=list)
    last_status_change_at: str | None = None
    last_status_change_by: APIObject | None = None
    first_trigger_log_entry: FirstTriggerLogEntry | None = None
    alert_counts: AlertCounts | None = None
    resolve_reason: ResolveReason | None = None
    body: IncidentBody | None = None
    conference_bridge: ConferenceBridge | None = None
    is_mergeable: bool = False


class IncidentNote(BaseModel):
    id: str | None = None
    user: APIObject | None = None
    content: str | None = None
    created_at: str | None = None


class IncidentAlert(APIObject):
    created_at: str | None = None
    status: AlertStatus | None = None
    alert_key: str | None = None
    service: APIObject | None = None
    body: dict[str, JsonValue] | None = None
    incident: APIObject | None = None
    suppressed: bool = False
    severity: str | None = None
    integration: APIObject | None = None


class LogEntry(APIObject):
    created_at: str | None = None
    agent: APIObject | None = None
    channel: dict[str, JsonValue] | None = None
    incident: APIObject | None = None
    service: APIObject | None = None
    teams: list[APIObject] = Field(default_factory=list)
    contexts: list[dict[str, JsonValue]] = Field(default_factory=list)


class IncidentResponder(BaseModel):
    state: Literal["pending", "accepted", "declined"] | None = None
    user: APIObject | None = None
    incident: APIObject | None = None
    updated_at: str | None = None
    message: str | None = None
    requester: APIObject | None = None
    requested_at: str | None = None


class ResponderRequestTarget(APIObject):
    incident_responders: list[IncidentResponder] = Field(default_factory=list)


class ResponderRequestTargetWrapper(BaseModel):
    responder_request_target: ResponderRequestTarget


class ResponderRequest(BaseModel):
    incident: Incident | None = None
    requester: APIObject | None = None
    requested_at: str | None = None
    message: str | None = None
    responder_request_targets: list[ResponderRequestTargetWrapper] = Field(
        default_factory=list
    )


class Page(BaseModel, Generic[T]):
    """One page of a list response."""

    items: list[T] = Field(default_factory=list)
    offset: int = 0
    limit: int | None = None
    more: bool = False
    total: int | None = None
