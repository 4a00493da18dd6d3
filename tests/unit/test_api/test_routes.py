"""Tests for the task control HTTP routes."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from taskgate.api.server import create_app
from taskgate.gateway.service import CommandGateway
from taskgate.host.base import HostCommandError


@pytest.fixture
def client(gateway: CommandGateway) -> TestClient:
    """A test client with a gateway over a mock executor injected."""
    return TestClient(create_app(gateway=gateway))


class TestHealthEndpoint:
    def test_health_returns_ok(self, client: TestClient) -> None:
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestNewTaskEndpoint:
    def test_new_task_success(self, client: TestClient, mock_executor: AsyncMock) -> None:
        resp = client.post("/api/tasks/new", json={"description": "fix bug"})
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "taskId": "T1"}
        mock_executor.start_new_session.assert_awaited_once_with("fix bug", [])

    def test_new_task_echoes_custom_id(self, client: TestClient) -> None:
        resp = client.post("/api/tasks/new", json={"description": "fix bug", "customId": "c1"})
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "taskId": "T1", "customId": "c1"}

    def test_new_task_forwards_images(self, client: TestClient, mock_executor: AsyncMock) -> None:
        client.post("/api/tasks/new", json={"description": "d", "images": ["a", "b"]})
        mock_executor.start_new_session.assert_awaited_once_with("d", ["a", "b"])

    def test_new_task_null_task_id(self, client: TestClient, mock_executor: AsyncMock) -> None:
        mock_executor.start_new_session.return_value = None
        resp = client.post("/api/tasks/new", json={"description": "fix bug", "customId": "c1"})
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "taskId": None, "customId": "c1"}

    @pytest.mark.parametrize("body", [{}, {"description": ""}, {"customId": "c1"}])
    def test_new_task_missing_description(
        self, client: TestClient, mock_executor: AsyncMock, body: dict
    ) -> None:
        resp = client.post("/api/tasks/new", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Task description is required"}
        mock_executor.start_new_session.assert_not_called()

    def test_new_task_host_failure(self, client: TestClient, mock_executor: AsyncMock) -> None:
        mock_executor.start_new_session.side_effect = HostCommandError("No active webview")
        resp = client.post("/api/tasks/new", json={"description": "fix bug"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "No active webview"}

    def test_new_task_malformed_body(self, client: TestClient, mock_executor: AsyncMock) -> None:
        resp = client.post("/api/tasks/new", json={"description": "d", "images": "nope"})
        assert resp.status_code == 400
        assert list(resp.json()) == ["error"]
        mock_executor.start_new_session.assert_not_called()


class TestContinueTaskEndpoint:
    def test_continue_by_task_id(self, client: TestClient, mock_executor: AsyncMock) -> None:
        resp = client.post("/api/tasks/continue", json={"taskId": "T7", "message": "hi"})
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "result": {"taskId": "T1", "accepted": True}}
        mock_executor.continue_session.assert_awaited_once_with("T7", "hi", [])

    def test_continue_missing_message(self, client: TestClient, mock_executor: AsyncMock) -> None:
        resp = client.post("/api/tasks/continue", json={"taskId": "T1"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Message is required"}
        mock_executor.continue_session.assert_not_called()

    def test_continue_without_reference(
        self, client: TestClient, mock_executor: AsyncMock
    ) -> None:
        resp = client.post("/api/tasks/continue", json={"message": "hi"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Valid taskId or customId is required"}
        mock_executor.continue_session.assert_not_called()

    def test_continue_unknown_custom_id(self, client: TestClient) -> None:
        resp = client.post("/api/tasks/continue", json={"customId": "zz", "message": "hi"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Valid taskId or customId is required"}

    def test_continue_host_failure(self, client: TestClient, mock_executor: AsyncMock) -> None:
        mock_executor.continue_session.side_effect = RuntimeError("Task T1 not found")
        resp = client.post("/api/tasks/continue", json={"taskId": "T1", "message": "hi"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Task T1 not found"}

    def test_task_id_wins_over_custom_id(
        self, client: TestClient, mock_executor: AsyncMock
    ) -> None:
        client.post("/api/tasks/new", json={"description": "fix bug", "customId": "c1"})
        client.post(
            "/api/tasks/continue", json={"taskId": "T5", "customId": "c1", "message": "hi"}
        )
        mock_executor.continue_session.assert_awaited_once_with("T5", "hi", [])


class TestCustomIdScenario:
    def test_create_then_continue_by_custom_id(
        self, client: TestClient, mock_executor: AsyncMock
    ) -> None:
        mock_executor.continue_session.return_value = "ok"

        resp = client.post("/api/tasks/new", json={"description": "fix bug", "customId": "c1"})
        assert resp.json() == {"success": True, "taskId": "T1", "customId": "c1"}

        resp = client.post(
            "/api/tasks/continue", json={"customId": "c1", "message": "also fix typo"}
        )
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "result": "ok"}
        mock_executor.continue_session.assert_awaited_once_with("T1", "also fix typo", [])

    def test_second_create_rebinds_custom_id(
        self, client: TestClient, mock_executor: AsyncMock
    ) -> None:
        client.post("/api/tasks/new", json={"description": "one", "customId": "c1"})
        mock_executor.start_new_session.return_value = "T2"
        client.post("/api/tasks/new", json={"description": "two", "customId": "c1"})
        client.post("/api/tasks/continue", json={"customId": "c1", "message": "hi"})
        mock_executor.continue_session.assert_awaited_once_with("T2", "hi", [])

    def test_apps_do_not_share_bindings(self, mock_executor: AsyncMock) -> None:
        first = TestClient(create_app(gateway=CommandGateway(mock_executor)))
        second = TestClient(create_app(gateway=CommandGateway(mock_executor)))
        first.post("/api/tasks/new", json={"description": "fix bug", "customId": "c1"})
        resp = second.post("/api/tasks/continue", json={"customId": "c1", "message": "hi"})
        assert resp.status_code == 400


class TestMissingOrNonObjectBody:
    @pytest.mark.parametrize("kwargs", [{}, {"json": []}, {"json": "fix bug"}, {"json": None}])
    def test_new_task_reports_missing_description(
        self, client: TestClient, mock_executor: AsyncMock, kwargs: dict
    ) -> None:
        resp = client.post("/api/tasks/new", **kwargs)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Task description is required"}
        mock_executor.start_new_session.assert_not_called()

    @pytest.mark.parametrize("kwargs", [{}, {"json": []}, {"json": 42}])
    def test_continue_task_reports_missing_message(
        self, client: TestClient, mock_executor: AsyncMock, kwargs: dict
    ) -> None:
        resp = client.post("/api/tasks/continue", **kwargs)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Message is required"}
        mock_executor.continue_session.assert_not_called()

    def test_invalid_json_is_400(self, client: TestClient, mock_executor: AsyncMock) -> None:
        resp = client.post(
            "/api/tasks/new",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert list(resp.json()) == ["error"]
        mock_executor.start_new_session.assert_not_called()


class TestNumericIdentifiers:
    def test_numeric_task_id_forwarded_as_string(
        self, client: TestClient, mock_executor: AsyncMock
    ) -> None:
        resp = client.post("/api/tasks/continue", json={"taskId": 42, "message": "hi"})
        assert resp.status_code == 200
        mock_executor.continue_session.assert_awaited_once_with("42", "hi", [])

    def test_numeric_custom_id_resolves_string_binding(
        self, client: TestClient, mock_executor: AsyncMock
    ) -> None:
        client.post("/api/tasks/new", json={"description": "fix bug", "customId": "7"})
        resp = client.post("/api/tasks/continue", json={"customId": 7, "message": "hi"})
        assert resp.status_code == 200
        mock_executor.continue_session.assert_awaited_once_with("T1", "hi", [])

    def test_boolean_task_id_rejected(self, client: TestClient, mock_executor: AsyncMock) -> None:
        resp = client.post("/api/tasks/continue", json={"taskId": True, "message": "hi"})
        assert resp.status_code == 400
        mock_executor.continue_session.assert_not_called()


class TestErrorEnvelope:
    def test_unknown_route(self, client: TestClient) -> None:
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Not Found"}

    def test_wrong_method(self, client: TestClient) -> None:
        resp = client.get("/api/tasks/new")
        assert resp.status_code == 405
        assert resp.json() == {"error": "Method Not Allowed"}
        assert "POST" in resp.headers.get("allow", "")


class TestNumericCustomIdOnCreate:
    def test_numeric_custom_id_bound_as_string(
        self, client: TestClient, gateway: CommandGateway
    ) -> None:
        resp = client.post("/api/tasks/new", json={"description": "fix bug", "customId": 7})
        assert resp.json() == {"success": True, "taskId": "T1", "customId": "7"}
        assert gateway.registry.resolve("7") == "T1"
