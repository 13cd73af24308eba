"""REST path construction for resources and their sub-resources."""

from __future__ import annotations

from urllib.parse import quote

INCIDENTS = "incidents"

NOTES = "notes"
ALERTS = "alerts"
LOG_ENTRIES = "log_entries"
RESPONDER_REQUESTS = "responder_requests"
MERGE = "merge"
SNOOZE = "snooze"


def _segment(value: str) -> str:
    # Identifiers are opaque; separators are passed through untouched.
    return quote(value, safe="/")


def build_path(
    resource: str,
    id: str | None = None,
    subresource: str | None = None,
    sub_id: str | None = None,
) -> str:
    """Build a resource path.

    - ``/{resource}``
    - ``/{resource}/{id}``
    - ``/{resource}/{id}/{subresource}``
    - ``/{resource}/{id}/{subresource}/{sub_id}``

    Raises:
        ValueError: If a deeper segment is given without the one above it.
    """
    if subresource is not None and id is None:
        raise ValueError(f"Sub-resource '{subresource}' requires a {resource} id")
    if sub_id is not None and subresource is None:
        raise ValueError("A sub-resource id requires a sub-resource name")

    parts = [resource]
    for part in (id, subresource, sub_id):
        if part is None:
            break
        parts.append(_segment(part))
    return "/" + "/".join(parts)
