"""In-memory registry of caller aliases.

Maps a caller-supplied alias (``customId``) to the session identifier
the host generated for it. The registry lives for the lifetime of the
process and is never persisted. Bindings can be overwritten but never
removed.
"""

from __future__ import annotations

import logging

from taskgate.domain.models import AliasBinding

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Alias -> session identifier map with last-write-wins semantics.

    Example usage::

        registry = SessionRegistry()
        registry.bind("c1", "T1")
        registry.resolve("c1")  # "T1"
        registry.resolve("c2")  # None
    """

    def __init__(self) -> None:
        self._bindings: dict[str, str] = {}

    def bind(self, alias: str, session_id: str) -> None:
        """Bind ``alias`` to ``session_id``, replacing any earlier binding."""
        previous = self._bindings.get(alias)
        self._bindings[alias] = session_id
        if previous is not None and previous != session_id:
            logger.debug("Rebound alias %s: %s -> %s", alias, previous, session_id)
        else:
            logger.debug("Bound alias %s -> %s", alias, session_id)

    def resolve(self, alias: str) -> str | None:
        """Return the session identifier bound to ``alias``, or None."""
        return self._bindings.get(alias)

    def bindings(self) -> list[AliasBinding]:
        """Snapshot of all current bindings."""
        return [
            AliasBinding(alias=alias, session_id=session_id)
            for alias, session_id in self._bindings.items()
        ]

    def __contains__(self, alias: object) -> bool:
        return alias in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)
