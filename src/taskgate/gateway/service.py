"""The command gateway.

Each request is an independent cycle: validate the payload, resolve or
record an alias in the session registry, await one host command, and
return its result. Validation happens before the host is touched, so a
rejected request has no side effects. Host failures are never retried.
"""

from __future__ import annotations

import logging
from typing import Any

from taskgate.domain.errors import HostExecutionError, ValidationError
from taskgate.domain.models import (
    ContinueSessionResult,
    CreateSessionResult,
    ReferenceSource,
    SessionReference,
)
from taskgate.host.base import HostCommandExecutor
from taskgate.session.registry import SessionRegistry

logger = logging.getLogger(__name__)


class CommandGateway:
    """Dispatches session commands to a host on behalf of remote callers.

    Args:
        executor: Backend that reaches the host runtime.
        registry: Alias registry to read and write. A fresh, empty
                  registry is created when omitted.
    """

    def __init__(
        self,
        executor: HostCommandExecutor,
        registry: SessionRegistry | None = None,
    ) -> None:
        self._executor = executor
        self._registry = registry if registry is not None else SessionRegistry()

    @property
    def executor(self) -> HostCommandExecutor:
        return self._executor

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    async def create_session(
        self,
        description: str | None,
        images: list[Any] | None = None,
        alias: str | None = None,
    ) -> CreateSessionResult:
        """Start a new host session, optionally binding ``alias`` to it.

        Raises:
            ValidationError: If ``description`` is missing or empty.
            HostExecutionError: If the host command fails.
        """
        if not description:
            raise ValidationError("Task description is required")

        try:
            session_id = await self._executor.start_new_session(description, images or [])
        except Exception as e:
            logger.error("API error creating task: %s", e)
            raise HostExecutionError(str(e)) from e

        if alias and session_id:
            self._registry.bind(alias, session_id)
        elif session_id is None:
            logger.warning("Host returned no task id (no active editor surface?)")

        logger.info("Created task %s (customId=%s)", session_id, alias or "-")
        return CreateSessionResult(session_id=session_id, alias=alias or None)

    async def continue_session(
        self,
        message: str | None,
        session_id: str | None = None,
        alias: str | None = None,
        images: list[Any] | None = None,
    ) -> ContinueSessionResult:
        """Send ``message`` to the session named by ``session_id`` or ``alias``.

        An explicit ``session_id`` always wins; ``alias`` is only looked
        up when no identifier is given.

        Raises:
            ValidationError: If ``message`` is missing or no session can
                             be resolved.
            HostExecutionError: If the host command fails.
        """
        if not message:
            raise ValidationError("Message is required")

        reference = self.resolve_reference(session_id, alias)
        if reference is None:
            raise ValidationError("Valid taskId or customId is required")

        try:
            result = await self._executor.continue_session(
                reference.session_id, message, images or []
            )
        except Exception as e:
            logger.error("API error continuing task: %s", e)
            raise HostExecutionError(str(e)) from e

        logger.info(
            "Continued task %s (%s)", reference.session_id, reference.source.value
        )
        return ContinueSessionResult(result=result)

    def resolve_reference(
        self, session_id: str | None, alias: str | None
    ) -> SessionReference | None:
        """Work out which session a continue request targets.

        Returns None when neither an identifier nor a bound alias is
        available.
        """
        if session_id:
            return SessionReference(session_id=session_id, source=ReferenceSource.EXPLICIT)
        if alias:
            resolved = self._registry.resolve(alias)
            if resolved:
                return SessionReference(
                    session_id=resolved, source=ReferenceSource.ALIAS, alias=alias
                )
        return None
