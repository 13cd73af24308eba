"""Single-key JSON envelopes used by requests and responses."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from incidentapi.errors import DecodeError, MissingEnvelopeKey
from incidentapi.models import Page

M = TypeVar("M", bound=BaseModel)

PAGE_FIELDS = ("offset", "limit", "more", "total")


class ResourceKind(Enum):
    """Resource kinds and their ``(singular, plural)`` envelope keys."""

    INCIDENT = ("incident", "incidents")
    NOTE = ("note", "notes")
    ALERT = ("alert", "alerts")
    LOG_ENTRY = ("log_entry", "log_entries")
    RESPONDER_REQUEST = ("responder_request", "responder_requests")

    @property
    def singular(self) -> str:
        return self.value[0]

    @property
    def plural(self) -> str:
        return self.value[1]


def dump_payload(payload: BaseModel) -> dict[str, Any]:
    """Serialise a write payload, dropping unset fields."""
    return payload.model_dump(mode="json", by_alias=True, exclude_none=True)


def wrap(kind: ResourceKind, payload: BaseModel) -> dict[str, Any]:
    """Wrap a single payload under the kind's singular key."""
    return {kind.singular: dump_payload(payload)}


def wrap_many(key: str, payloads: list[BaseModel]) -> dict[str, Any]:
    """Wrap a list of payloads under ``key`` exactly as given."""
    return {key: [dump_payload(p) for p in payloads]}


def parse_json(raw: bytes | str) -> dict[str, Any]:
    """Parse a response body that must be a JSON object.

    Raises:
        DecodeError: If the body is not valid JSON or not an object.
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise DecodeError(f"Malformed JSON response: {e}") from e
    if not isinstance(data, dict):
        raise DecodeError(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    return data


def _field(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise MissingEnvelopeKey(key, sorted(data))
    return data[key]


def _validate(model: type[M], value: Any, key: str) -> M:
    try:
        return model.model_validate(value)
    except ValidationError as e:
        err = e.errors()[0]
        path = ".".join(str(p) for p in (key, *err["loc"]))
        raise DecodeError(err["msg"], path=path) from e


def unwrap_one(kind: ResourceKind, data: dict[str, Any], model: type[M]) -> M:
    """Decode the object stored under the kind's singular key."""
    return _validate(model, _field(data, kind.singular), kind.singular)


def unwrap_page(kind: ResourceKind, data: dict[str, Any], model: type[M]) -> Page[M]:
    """Decode the list under the kind's plural key plus pagination fields."""
    key = kind.plural
    raw_items = _field(data, key)
    if raw_items is None:
        raw_items = []
    if not isinstance(raw_items, list):
        raise DecodeError(
            f"Expected a list, got {type(raw_items).__name__}", path=key
        )

    items = [
        _validate(model, item, f"{key}.{idx}") for idx, item in enumerate(raw_items)
    ]
    meta = {f: data[f] for f in PAGE_FIELDS if data.get(f) is not None}
    try:
        return Page[model](items=items, **meta)
    except ValidationError as e:
        err = e.errors()[0]
        raise DecodeError(err["msg"], path=".".join(str(p) for p in err["loc"])) from e
