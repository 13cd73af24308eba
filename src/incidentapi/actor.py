"""Attribution header for state-changing calls."""

from __future__ import annotations

FROM_HEADER = "From"


def attribution_headers(actor: str) -> dict[str, str]:
    """Return the ``From`` header naming the acting user.

    Raises:
        ValueError: If ``actor`` is empty or blank.
    """
    if not actor or not actor.strip():
        raise ValueError("An acting user is required for write operations")
    return {FROM_HEADER: actor.strip()}
