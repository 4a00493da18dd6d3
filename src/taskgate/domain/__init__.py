"""Domain models and errors for taskgate.

All models use Pydantic v2 for validation and serialization.
"""

from taskgate.domain.errors import (
    BindError,
    HostExecutionError,
    TaskGateError,
    ValidationError,
)
from taskgate.domain.models import (
    AliasBinding,
    ContinueSessionResult,
    CreateSessionResult,
    ReferenceSource,
    SessionReference,
)

__all__ = [
    "AliasBinding",
    "BindError",
    "ContinueSessionResult",
    "CreateSessionResult",
    "HostExecutionError",
    "ReferenceSource",
    "SessionReference",
    "TaskGateError",
    "ValidationError",
]
