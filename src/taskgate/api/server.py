"""FastAPI application for remote task control.

Routes:

    GET  /api/health          -> {"status": "ok"}
    POST /api/tasks/new       <- {"description": "...", "images": [...], "customId": "..."}
    POST /api/tasks/continue  <- {"taskId": "...", "customId": "...", "message": "...", "images": [...]}

Every error response is ``{"error": "<message>"}``: 400 for invalid
payloads, 500 when the host command fails.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated, Any, AsyncIterator, TypeVar

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskgate.domain.errors import HostExecutionError, ValidationError
from taskgate.gateway.service import CommandGateway
from taskgate.host.base import HostCommandError
from taskgate.host.http_backend import (
    DEFAULT_CONTINUE_COMMAND,
    DEFAULT_START_COMMAND,
    HttpHostExecutor,
)

logger = logging.getLogger(__name__)

_Request = TypeVar("_Request", bound=BaseModel)


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------

def _numeric_id_as_str(value: Any) -> Any:
    # Callers may send ids as JSON numbers; the host and registry only see strings.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


RequestId = Annotated[str | None, BeforeValidator(_numeric_id_as_str)]


class NewTaskRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str | None = Field(default=None, description="Initial task text")
    images: list[Any] | None = Field(default=None, description="Opaque image payloads")
    custom_id: RequestId = Field(
        default=None, alias="customId", description="Caller alias for the new task"
    )


class ContinueTaskRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    task_id: RequestId = Field(default=None, alias="taskId")
    custom_id: RequestId = Field(default=None, alias="customId")
    message: str | None = Field(default=None, description="Message to send to the task")
    images: list[Any] | None = None


class HealthResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app(
    gateway: CommandGateway | None = None,
    host_base_url: str = "http://localhost:3100",
    host_timeout: float | None = None,
    start_command: str = DEFAULT_START_COMMAND,
    continue_command: str = DEFAULT_CONTINUE_COMMAND,
) -> FastAPI:
    """Create the task control API.

    Args:
        gateway: Optional pre-built gateway (for testing). When omitted,
                 one backed by an HttpHostExecutor is built on startup.
        host_base_url: Base URL of the editor's command bridge.
        host_timeout: Per-request timeout for host commands, None for none.
        start_command: Host command that starts a new task.
        continue_command: Host command that adds a message to a task.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        g: CommandGateway | None = app.state.gateway
        if g is None:
            executor = HttpHostExecutor(
                base_url=host_base_url,
                timeout=host_timeout,
                start_command=start_command,
                continue_command=continue_command,
            )
            g = CommandGateway(executor)
            app.state.gateway = g
        try:
            await g.executor.connect()
        except HostCommandError as e:
            logger.warning(
                "Host not reachable at startup (%s); commands will retry the connection", e
            )
        logger.info("Task API started")
        yield
        await g.executor.disconnect()
        logger.info("Task API stopped")

    app = FastAPI(
        title="taskgate",
        description="Remote control API for editor-hosted agent tasks",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.gateway = gateway

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def handle_bad_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _describe_errors(exc)})

    @app.exception_handler(HostExecutionError)
    async def handle_host_error(request: Request, exc: HostExecutionError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.get("/api/health")
    async def health_check() -> HealthResponse:
        return HealthResponse()

    @app.post("/api/tasks/new")
    async def new_task(payload: Any = Body(default=None)) -> dict[str, Any]:
        request = _parse_body(NewTaskRequest, payload)
        g: CommandGateway = app.state.gateway
        result = await g.create_session(
            request.description, images=request.images, alias=request.custom_id
        )
        body: dict[str, Any] = {"success": result.success, "taskId": result.session_id}
        if result.alias is not None:
            body["customId"] = result.alias
        return body

    @app.post("/api/tasks/continue")
    async def continue_task(payload: Any = Body(default=None)) -> dict[str, Any]:
        request = _parse_body(ContinueTaskRequest, payload)
        g: CommandGateway = app.state.gateway
        result = await g.continue_session(
            request.message,
            session_id=request.task_id,
            alias=request.custom_id,
            images=request.images,
        )
        return {"success": result.success, "result": result.result}

    return app


def _parse_body(model: type[_Request], payload: Any) -> _Request:
    """Validate a JSON body into ``model``.

    A missing or non-object body counts as an empty object, so the
    gateway reports which required field is absent.
    """
    try:
        return model.model_validate(payload if isinstance(payload, dict) else {})
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors()) from e


def _describe_errors(exc: RequestValidationError) -> str:
    """Flatten FastAPI's validation errors into one line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "Invalid request body: " + "; ".join(parts)
