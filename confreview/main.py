from __future__ import annotations

import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from confreview.api.routes import files, organizer, reviewer, submissions
from confreview.core.config import settings
from confreview.core.errors import InvalidArgument, WorkflowError
from confreview.core.logging import configure_logger, get_logger

logger = get_logger(__name__)


async def workflow_error_handler(request: Request, exc: WorkflowError) -> JSONResponse:
    logger.info(
        "request_rejected",
        path=request.url.path,
        code=exc.code,
        message=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = InvalidArgument(
        "Request validation failed",
        errors=[{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()],
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_app() -> FastAPI:
    configure_logger(settings.log_level, json_logs=settings.log_json)

    app = FastAPI(title=settings.app_name)

    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers["X-Request-Id"] = request_id
        return response

    app.add_exception_handler(WorkflowError, workflow_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(submissions.router)
    app.include_router(organizer.router)
    app.include_router(reviewer.router)
    app.include_router(files.router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
