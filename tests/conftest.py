"""Shared test fixtures for the taskgate test suite.

Provides a mock host executor, a fresh session registry, and a gateway
wired to both.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from taskgate.gateway.service import CommandGateway
from taskgate.host.base import HostCommandExecutor
from taskgate.session.registry import SessionRegistry


@pytest.fixture
def mock_executor() -> AsyncMock:
    """A mock HostCommandExecutor with all async methods stubbed.

    start_new_session returns "T1"; continue_session returns a small
    result payload.
    """
    executor = AsyncMock(spec=HostCommandExecutor)
    executor.start_new_session.return_value = "T1"
    executor.continue_session.return_value = {"taskId": "T1", "accepted": True}
    return executor


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def gateway(mock_executor: AsyncMock, registry: SessionRegistry) -> CommandGateway:
    return CommandGateway(mock_executor, registry=registry)
