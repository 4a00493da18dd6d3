"""Session alias registry for taskgate.

Public API:
    SessionRegistry -- in-memory customId -> taskId map
"""

from taskgate.session.registry import SessionRegistry

__all__ = ["SessionRegistry"]
