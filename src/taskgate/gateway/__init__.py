"""Command gateway for taskgate.

Translates create/continue requests into host commands, recording and
resolving caller aliases along the way.
"""

from taskgate.gateway.service import CommandGateway

__all__ = ["CommandGateway"]
