"""Incident operations and their sub-resource variants."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from incidentapi import paths
from incidentapi.actor import attribution_headers
from incidentapi.envelope import (
    ResourceKind,
    dump_payload,
    parse_json,
    unwrap_one,
    unwrap_page,
    wrap,
    wrap_many,
)
from incidentapi.errors import (
    DeadlineExceeded,
    TransportError,
    status_error,
)
from incidentapi.gateway import Gateway
from incidentapi.models import (
    Incident,
    IncidentAlert,
    IncidentNote,
    LogEntry,
    Page,
    ResponderRequest,
)
from incidentapi.options import (
    CreateIncidentOptions,
    ListIncidentAlertsOptions,
    ListIncidentLogEntriesOptions,
    ListIncidentsOptions,
    ManageAlertOptions,
    ManageIncidentOptions,
    MergeSource,
    ResponderRequestOptions,
)
from incidentapi.query import with_query

logger = logging.getLogger(__name__)


class IncidentsClient:
    """Typed access to the incidents API.

    Every call is a single request/response round trip through ``gateway``.
    The client keeps no other state, so one instance can be shared between
    concurrent tasks. ``timeout`` on each call is a deadline in seconds for
    that call alone.
    """

    def __init__(self, gateway: Gateway) -> None:
        self.gateway = gateway

    async def _call(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        logger.debug("%s %s", method, path)
        try:
            async with asyncio.timeout(timeout):
                if method == "GET":
                    response = await self.gateway.get(path)
                elif method == "POST":
                    response = await self.gateway.post(path, body, headers)
                else:
                    response = await self.gateway.put(path, body, headers)
        except (TimeoutError, httpx.TimeoutException) as e:
            logger.warning("%s %s: deadline exceeded", method, path)
            raise DeadlineExceeded(f"{method} {path} exceeded its deadline") from e
        except httpx.RequestError as e:
            logger.warning("%s %s: transport error: %s", method, path, e)
            raise TransportError(f"{method} {path} failed: {e}") from e
        except asyncio.CancelledError:
            logger.debug("%s %s: cancelled", method, path)
            raise

        if response.status_code >= 400:
            logger.warning("%s %s: HTTP %d", method, path, response.status_code)
            raise status_error(response.status_code, response.text, method, path)

        return parse_json(response.content)

    async def list_incidents(
        self,
        options: ListIncidentsOptions | None = None,
        *,
        timeout: float | None = None,
    ) -> Page[Incident]:
        """List incidents matching ``options``.

        An empty result is an empty page. Only one page is fetched; advance
        ``options.offset`` to read the next one.
        """
        path = with_query(paths.build_path(paths.INCIDENTS), options)
        data = await self._call("GET", path, timeout=timeout)
        return unwrap_page(ResourceKind.INCIDENT, data, Incident)

    async def get_incident(
        self, incident_id: str, *, timeout: float | None = None
    ) -> Incident:
        """Fetch one incident.

        Raises:
            NotFound: If the service has no incident with this id.
            MissingEnvelopeKey: If a successful response lacks ``incident``.
        """
        path = paths.build_path(paths.INCIDENTS, incident_id)
        data = await self._call("GET", path, timeout=timeout)
        return unwrap_one(ResourceKind.INCIDENT, data, Incident)

    async def create_incident(
        self,
        actor: str,
        options: CreateIncidentOptions,
        *,
        timeout: float | None = None,
    ) -> Incident:
        """Create an incident and return the service-assigned representation."""
        headers = attribution_headers(actor)
        data = await self._call(
            "POST",
            paths.build_path(paths.INCIDENTS),
            wrap(ResourceKind.INCIDENT, options),
            headers,
            timeout,
        )
        return unwrap_one(ResourceKind.INCIDENT, data, Incident)

    async def manage_incidents(
        self,
        actor: str,
        mutations: list[ManageIncidentOptions],
        *,
        timeout: float | None = None,
    ) -> Page[Incident]:
        """Acknowledge, resolve, escalate or reassign several incidents at once.

        The batch is not atomic. The returned page holds whatever the
        service reports for each item.
        """
        headers = attribution_headers(actor)
        data = await self._call(
            "PUT",
            paths.build_path(paths.INCIDENTS),
            wrap_many(ResourceKind.INCIDENT.plural, mutations),
            headers,
            timeout,
        )
        return unwrap_page(ResourceKind.INCIDENT, data, Incident)

    async def merge_incidents(
        self,
        actor: str,
        incident_id: str,
        source_ids: list[str],
        *,
        timeout: float | None = None,
    ) -> Incident:
        """Fold ``source_ids`` into ``incident_id`` and return the target.

        Source incidents stop existing on their own after this call.
        """
        if not source_ids:
            raise ValueError("At least one source incident is required")
        headers = attribution_headers(actor)
        sources = [MergeSource(id=sid) for sid in source_ids]
        data = await self._call(
            "PUT",
            paths.build_path(paths.INCIDENTS, incident_id, paths.MERGE),
            wrap_many("source_incidents", sources),
            headers,
            timeout,
        )
        return unwrap_one(ResourceKind.INCIDENT, data, Incident)

    async def snooze_incident(
        self,
        actor: str,
        incident_id: str,
        duration: int,
        *,
        timeout: float | None = None,
    ) -> Incident:
        """Silence an acknowledged incident for ``duration`` seconds."""
        if duration <= 0:
            raise ValueError("Snooze duration must be a positive number of seconds")
        headers = attribution_headers(actor)
        data = await self._call(
            "POST",
            paths.build_path(paths.INCIDENTS, incident_id, paths.SNOOZE),
            {"duration": duration},
            headers,
            timeout,
        )
        return unwrap_one(ResourceKind.INCIDENT, data, Incident)

    async def list_incident_notes(
        self, incident_id: str, *, timeout: float | None = None
    ) -> Page[IncidentNote]:
        path = paths.build_path(paths.INCIDENTS, incident_id, paths.NOTES)
        data = await self._call("GET", path, timeout=timeout)
        return unwrap_page(ResourceKind.NOTE, data, IncidentNote)

    async def create_incident_note(
        self,
        actor: str,
        incident_id: str,
        content: str,
        *,
        timeout: float | None = None,
    ) -> IncidentNote:
        headers = attribution_headers(actor)
        data = await self._call(
            "POST",
            paths.build_path(paths.INCIDENTS, incident_id, paths.NOTES),
            wrap(ResourceKind.NOTE, IncidentNote(content=content)),
            headers,
            timeout,
        )
        return unwrap_one(ResourceKind.NOTE, data, IncidentNote)

    async def list_incident_alerts(
        self,
        incident_id: str,
        options: ListIncidentAlertsOptions | None = None,
        *,
        timeout: float | None = None,
    ) -> Page[IncidentAlert]:
        path = with_query(
            paths.build_path(paths.INCIDENTS, incident_id, paths.ALERTS), options
        )
        data = await self._call("GET", path, timeout=timeout)
        return unwrap_page(ResourceKind.ALERT, data, IncidentAlert)

    async def get_incident_alert(
        self, incident_id: str, alert_id: str, *, timeout: float | None = None
    ) -> IncidentAlert:
        path = paths.build_path(paths.INCIDENTS, incident_id, paths.ALERTS, alert_id)
        data = await self._call("GET", path, timeout=timeout)
        return unwrap_one(ResourceKind.ALERT, data, IncidentAlert)

    async def manage_incident_alerts(
        self,
        actor: str,
        incident_id: str,
        mutations: list[ManageAlertOptions],
        *,
        timeout: float | None = None,
    ) -> Page[IncidentAlert]:
        """Resolve or re-associate several alerts of one incident."""
        headers = attribution_headers(actor)
        data = await self._call(
            "PUT",
            paths.build_path(paths.INCIDENTS, incident_id, paths.ALERTS),
            wrap_many(ResourceKind.ALERT.plural, mutations),
            headers,
            timeout,
        )
        return unwrap_page(ResourceKind.ALERT, data, IncidentAlert)

    async def list_incident_log_entries(
        self,
        incident_id: str,
        options: ListIncidentLogEntriesOptions | None = None,
        *,
        timeout: float | None = None,
    ) -> Page[LogEntry]:
        path = with_query(
            paths.build_path(paths.INCIDENTS, incident_id, paths.LOG_ENTRIES), options
        )
        data = await self._call("GET", path, timeout=timeout)
        return unwrap_page(ResourceKind.LOG_ENTRY, data, LogEntry)

    async def create_responder_request(
        self,
        actor: str,
        incident_id: str,
        options: ResponderRequestOptions,
        *,
        timeout: float | None = None,
    ) -> ResponderRequest:
        """Ask users or escalation policies to join an incident.

        Per-target responder state comes back in the response; the client
        does not follow it afterwards.
        """
        headers = attribution_headers(actor)
        data = await self._call(
            "POST",
            paths.build_path(paths.INCIDENTS, incident_id, paths.RESPONDER_REQUESTS),
            dump_payload(options),
            headers,
            timeout,
        )
        return unwrap_one(ResourceKind.RESPONDER_REQUEST, data, ResponderRequest)
