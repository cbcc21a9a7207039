"""Helpers for resolving runtime configuration."""

from __future__ import annotations

import os

from pathbackup.core.constants import DEFAULT_COPY_CONCURRENCY, ENV_COPY_CONCURRENCY

__all__ = ["resolve_copy_concurrency"]


def resolve_copy_concurrency(concurrency: int | None = None) -> int:
    """Resolve the worker bound used for concurrent directory copies.

    Args:
        concurrency: Optional explicit value. Falls back to the
            `PATHBACKUP_COPY_CONCURRENCY` environment variable, then to
            `DEFAULT_COPY_CONCURRENCY`.

    Returns:
        Non-negative worker bound; 0 means unbounded.

    Raises:
        ValueError: If the value is negative or not an integer.
    """

    chosen: int | str | None = concurrency
    env_value = os.getenv(ENV_COPY_CONCURRENCY)
    if chosen is None and env_value:
        chosen = env_value.strip()
    if chosen is None:
        return DEFAULT_COPY_CONCURRENCY

    try:
        resolved = int(chosen)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Invalid copy concurrency {chosen!r}; expected a non-negative integer"
        ) from exc

    if resolved < 0:
        raise ValueError(f"Copy concurrency must be >= 0, got {resolved}")
    return resolved
