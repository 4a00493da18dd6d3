"""Core domain models for taskgate.

These models represent what flows through the gateway: alias bindings
held by the session registry, the resolved target of a continue request,
and the results handed back to the HTTP layer.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ReferenceSource(str, enum.Enum):
    """Where a resolved session identifier came from."""

    EXPLICIT = "explicit"  # taskId supplied by the caller
    ALIAS = "alias"  # looked up from a customId binding


class AliasBinding(BaseModel):
    """One caller alias mapped to a host-assigned session identifier."""

    model_config = ConfigDict(frozen=True)

    alias: str = Field(description="Caller-chosen identifier (customId)")
    session_id: str = Field(description="Host-assigned task identifier")


class SessionReference(BaseModel):
    """The resolved target of a continue request."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    source: ReferenceSource
    alias: str | None = Field(
        default=None, description="Alias used for the lookup, if any"
    )


class CreateSessionResult(BaseModel):
    """Outcome of starting a new host session.

    ``session_id`` is None when the host had no surface to create the
    session on. That still counts as success, but no alias is bound.
    """

    success: bool = True
    session_id: str | None = None
    alias: str | None = None


class ContinueSessionResult(BaseModel):
    """Outcome of sending a message to an existing host session."""

    success: bool = True
    result: Any = Field(default=None, description="Host payload, passed through as-is")
