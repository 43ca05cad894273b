# timeblock/main.py
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from timeblock import __version__
from timeblock.api.v1.auth import router as auth_router
from timeblock.api.v1.calendar import router as calendar_router
from timeblock.api.v1.chat import router as chat_router
from timeblock.api.v1.chats import router as chats_router
from timeblock.api.v1.health import router as health_router
from timeblock.api.v1.tasks import router as tasks_router
from timeblock.config import settings
from timeblock.core.errors import MaterializationFailure, TimeblockError
from timeblock.core.llm.providers import close_llm_provider

logging.basicConfig(level=settings.LOG_LEVEL.upper())
log = logging.getLogger(__name__)

description = """
Chat with a scheduling assistant and turn its replies into time-blocked
calendar events.
"""
tags_metadata = [
    {"name": "Authentication & Testing", "description": "Development login."},
    {"name": "chat", "description": "Chat round trip with the assistant."},
    {"name": "chats", "description": "Conversations and their messages."},
    {"name": "tasks", "description": "Task extraction from assistant replies."},
    {"name": "calendar", "description": "Calendar events created from tasks."},
    {"name": "Health", "description": "Liveness checks."},
]

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": settings.CORS_ALLOW_ORIGIN,
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
}

app = FastAPI(
    title="timeblock API",
    description=description,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=tags_metadata,
)

app.include_router(auth_router)
app.include_router(chat_router)
app.include_router(chats_router)
app.include_router(tasks_router)
app.include_router(calendar_router)
app.include_router(health_router)


@app.middleware("http")
async def cors_headers(request: Request, call_next) -> Response:
    # Hand-rolled instead of CORSMiddleware: preflight must answer an empty
    # body, and every response carries the headers whether or not Origin is set.
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(TimeblockError)
async def timeblock_error_handler(request: Request, exc: TimeblockError) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "error": exc.message}
    if isinstance(exc, MaterializationFailure):
        content["outcomes"] = [o.model_dump(mode="json") for o in exc.report.outcomes]
    return JSONResponse(status_code=exc.status_code, content=content, headers=CORS_HEADERS)


def _describe_validation_error(exc: RequestValidationError) -> str:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "Invalid request: " + "; ".join(problems)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation_error(exc)
    log.info("[API %s] rejected request: %s", request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"success": False, "error": message},
        headers=CORS_HEADERS,
    )


@app.on_event("shutdown")
async def shutdown_event() -> None:
    await close_llm_provider()
    log.info("FastAPI application shutdown.")


log.info("\U0001F331 FastAPI application configured. Environment: %s", settings.ENVIRONMENT)
