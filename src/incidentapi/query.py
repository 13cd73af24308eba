"""Encode list options into query strings."""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode

from pydantic import BaseModel


def _scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def query_pairs(options: BaseModel | None) -> list[tuple[str, str]]:
    """Flatten an options model into ordered ``(key, value)`` pairs.

    Fields are visited in declaration order. Unset fields and empty
    sequences are skipped; each sequence element becomes its own
    ``key[]`` pair.
    """
    if options is None:
        return []

    pairs: list[tuple[str, str]] = []
    for name, field in type(options).model_fields.items():
        value = getattr(options, name)
        if value is None:
            continue
        key = field.alias or name
        if isinstance(value, (list, tuple)):
            pairs.extend((f"{key}[]", _scalar(item)) for item in value)
        else:
            pairs.append((key, _scalar(value)))
    return pairs


def encode_query(options: BaseModel | None) -> str:
    """Return the URL query string for ``options`` (without the ``?``)."""
    return urlencode(query_pairs(options))


def decode_query(query: str) -> dict[str, str | list[str]]:
    """Parse an encoded query string back into keys and values.

    Bracketed keys come back as lists under their bare name, e.g.
    ``statuses[]=a&statuses[]=b`` gives ``{"statuses": ["a", "b"]}``.
    """
    result: dict[str, str | list[str]] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        if key.endswith("[]"):
            existing = result.get(key[:-2])
            if isinstance(existing, list):
                existing.append(value)
            else:
                result[key[:-2]] = [value]
        else:
            result[key] = value
    return result


def with_query(path: str, options: BaseModel | None) -> str:
    """Append the encoded ``options`` to ``path`` when there is anything to add."""
    query = encode_query(options)
    return f"{path}?{query}" if query else path
