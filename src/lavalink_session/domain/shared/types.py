"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from lavalink_session.domain.shared.types import SessionKey, DurationMs

    class MyModel(BaseModel):
        guild_id: SessionKey
        duration: DurationMs
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

# ── Identifiers ─────────────────────────────────────────────────────

def _stringify_snowflake(v: object) -> object:
    """Accept integer snowflakes, the node protocol carries ids as strings."""
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)
    return v


SessionKey = Annotated[str, BeforeValidator(_stringify_snowflake), Field(min_length=1)]
"""Stable session key of a player (the guild id)."""

SnowflakeStr = Annotated[str, BeforeValidator(_stringify_snowflake), Field(min_length=1)]
"""Channel or user id, carried as a string."""

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

RegionCode = Annotated[str, Field(min_length=1, max_length=32)]
"""Voice region code advertised by nodes, e.g. ``us-east``."""


# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

DurationMs = Annotated[int, Field(ge=0)]
"""Track duration or position in milliseconds."""

PortNumber = Annotated[int, Field(ge=1, le=65535)]
"""TCP port."""


# ── Settings-specific constraints ──────────────────────────────────

BusyTimeoutMs = Annotated[int, Field(ge=1000, le=30000)]
"""SQLite busy timeout in milliseconds: 1 000 … 30 000."""

ConnectionTimeoutS = Annotated[int, Field(ge=1, le=60)]
"""SQLite connection timeout in seconds: 1 … 60."""

RequestTimeoutS = Annotated[float, Field(gt=0.0, le=120.0)]
"""HTTP request timeout in seconds."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if v.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return v.astimezone(UTC)


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""


def utcnow() -> datetime:
    """Timezone-aware ``datetime.now`` in UTC."""
    return datetime.now(UTC)
