"""List filters and write payloads accepted by the client."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, JsonValue

from incidentapi.models import AlertStatus, APIReference, IncidentStatus, Urgency


class ListOptions(BaseModel):
    """Pagination fields shared by every list endpoint.

    Leaving a field unset omits it from the query string, so an empty
    options value requests the first page at the service's default size.
    """

    offset: int | None = Field(None, ge=0)
    limit: int | None = Field(None, ge=0)
    total: bool | None = None

    model_config = ConfigDict(populate_by_name=True)


class ListIncidentsOptions(ListOptions):
    since: str | None = None
    until: str | None = None
    date_range: str | None = None
    statuses: list[IncidentStatus] = Field(default_factory=list)
    incident_key: str | None = None
    service_ids: list[str] = Field(default_factory=list)
    team_ids: list[str] = Field(default_factory=list)
    user_ids: list[str] = Field(default_factory=list)
    urgencies: list[Urgency] = Field(default_factory=list)
    time_zone: str | None = None
    sort_by: str | None = None
    includes: list[str] = Field(default_factory=list, alias="include")


class ListIncidentAlertsOptions(ListOptions):
    statuses: list[AlertStatus] = Field(default_factory=list)
    sort_by: str | None = None
    includes: list[str] = Field(default_factory=list, alias="include")


class ListIncidentLogEntriesOptions(ListOptions):
    includes: list[str] = Field(default_factory=list, alias="include")
    is_overview: bool | None = None
    time_zone: str | None = None
    since: str | None = None
    until: str | None = None


class Assignee(BaseModel):
    assignee: APIReference


class IncidentDetails(BaseModel):
    type: str = "incident_body"
    details: str


class CreateIncidentOptions(BaseModel):
    """Body of a new incident, sent under the ``incident`` key."""

    type: Literal["incident"] = "incident"
    title: str
    service: APIReference
    priority: APIReference | None = None
    urgency: Urgency | None = None
    incident_key: str | None = None
    body: IncidentDetails | None = None
    escalation_policy: APIReference | None = None
    assignments: list[Assignee] | None = None


class ManageIncidentOptions(BaseModel):
    """One entry of a bulk incident update, targeting a single incident."""

    id: str
    type: Literal["incident_reference", "incident"] = "incident_reference"
    status: IncidentStatus | None = None
    priority: APIReference | None = None
    assignments: list[Assignee] | None = None
    resolution: str | None = None
    escalation_level: int | None = Field(None, gt=0)


class MergeSource(BaseModel):
    id: str
    type: Literal["incident_reference"] = "incident_reference"


class ManageAlertOptions(BaseModel):
    """One entry of a bulk alert update within an incident."""

    id: str
    type: Literal["alert_reference", "alert"] = "alert_reference"
    status: AlertStatus | None = None
    incident: APIReference | None = None
    body: dict[str, JsonValue] | None = None


class ResponderRequestOptions(BaseModel):
    """Payload of a responder request; sent without an envelope."""

    requester_id: str
    message: str
    responder_request_targets: list[dict[str, APIReference]] = Field(
        default_factory=list
    )

    @classmethod
    def for_targets(
        cls, requester_id: str, message: str, targets: list[APIReference]
    ) -> ResponderRequestOptions:
        """Build a request from plain target references (users or policies)."""
        return cls(
            requester_id=requester_id,
            message=message,
            responder_request_targets=[
                {"responder_request_target": t} for t in targets
            ],
        )
