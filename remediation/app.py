from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from .config import Settings
from .errors import InvalidRequest, RemediationError
from .executor import RemediationDispatcher, error_body
from .logging_config import setup_logging
from .models import RemediationRequest


logger = logging.getLogger(__name__)


def error_response(exc: Exception) -> JSONResponse:
    """Single mapping point from a failure to the HTTP answer."""

    if isinstance(exc, RemediationError):
        return JSONResponse(status_code=exc.http_status, content=error_body(exc))
    return JSONResponse(status_code=500, content={"status": "error", "message": str(exc)})


async def _parse_request(request: Request) -> RemediationRequest:
    body_bytes = await request.body()
    if not body_bytes.strip():
        return RemediationRequest()

    try:
        payload = await request.json()
    except ValueError as exc:
        raise InvalidRequest("Invalid JSON body") from exc

    if not isinstance(payload, dict):
        raise InvalidRequest("Request body must be a JSON object")

    return RemediationRequest.model_validate(payload)


def create_app(settings: Optional[Settings] = None, dispatcher: Optional[RemediationDispatcher] = None) -> FastAPI:
    if settings is None:
        settings = Settings.from_env()
    if dispatcher is None:
        dispatcher = RemediationDispatcher(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.strict_config:
            settings.check_required()
        logger.info("HTTP Remediation Service running on port %s", settings.port)
        yield

    app = FastAPI(title="ThreatPilot Remediation Service", lifespan=lifespan)
    app.state.settings = settings
    app.state.dispatcher = dispatcher

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/execute")
    async def execute(request: Request) -> JSONResponse:
        """Carry out, ticket, or announce one remediation action.

        The outbound call is blocking, so it runs in the thread pool. An
        abandoned client connection does not cancel it.
        """

        try:
            req = await _parse_request(request)
            result = await run_in_threadpool(dispatcher.execute, req)
        except Exception as exc:
            return error_response(exc)

        return JSONResponse(status_code=200, content=result.to_body())

    return app


settings = Settings.from_env()
setup_logging(settings.log_level)
app = create_app(settings)


def main() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
