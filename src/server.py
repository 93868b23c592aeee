"""
Schema UI Service - HTTP Entry Point
Prompt shell over the schema interpreter: pick an app from a prompt, then
drive it with click and change events.
"""

import asyncio
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST

from apps import example_prompts, list_apps, select_app
from core import (
    EventRequest,
    PromptRequest,
    Settings,
    ValidationError,
    configure_logging,
    get_logger,
    get_settings,
)
from handlers import SessionManager, SessionNotFoundError, TargetNotFoundError
from monitoring import metrics_collector

logger = get_logger(__name__)

SERVICE_NAME = "Schema UI Service"
VERSION = "0.1.0"
PURGE_INTERVAL = 60.0


async def _purge_loop(sessions: SessionManager, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        purged = sessions.purge_expired()
        if purged:
            logger.info("sessions_purged", count=purged)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the HTTP app around a fresh session store."""
    settings = settings or get_settings()
    sessions = SessionManager(settings.session_cache_size, settings.session_ttl)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level, settings.json_logs)
        logger.info("starting", host=settings.host, port=settings.port, apps=[a.name for a in list_apps()])
        purge_task = asyncio.create_task(_purge_loop(sessions, PURGE_INTERVAL))
        try:
            yield
        finally:
            purge_task.cancel()
            logger.info("stopped")

    app = FastAPI(
        title=SERVICE_NAME,
        description="Interprets declarative UI schemas into live element trees",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.sessions = sessions

    # Enable CORS for local development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SessionNotFoundError)
    @app.exception_handler(TargetNotFoundError)
    async def not_found(request: Request, exc: LookupError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def invalid(request: Request, exc: ValidationError) -> JSONResponse:
        logger.warning("validation", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.get("/")
    async def root():
        """Health check endpoint"""
        return {
            "status": "online",
            "service": SERVICE_NAME,
            "version": VERSION,
            "timestamp": time.time(),
        }

    @app.get("/health")
    async def health():
        """Detailed health check"""
        return {
            "status": "healthy",
            "apps": [a.name for a in list_apps()],
            "sessions": sessions.stats(),
            "metrics_enabled": settings.enable_metrics,
        }

    @app.get("/apps")
    async def apps():
        """Apps a prompt can select, with example prompts."""
        return {
            "apps": [a.describe() for a in list_apps()],
            "examples": example_prompts(),
        }

    @app.post("/sessions")
    async def create_session(request: PromptRequest):
        """
        Select an app from a prompt and start a session for it.

        Answers ``{"app": null}`` when the prompt names no known app.
        """
        logger.info("prompt_received", prompt=request.prompt[:50])
        if settings.selection_delay > 0:
            await asyncio.sleep(settings.selection_delay)

        selected = select_app(request.prompt)
        if selected is None:
            return {
                "app": None,
                "message": "No app matches that prompt",
                "examples": example_prompts(),
            }

        session = sessions.create(selected)
        return session.snapshot()

    @app.get("/sessions/{session_id}")
    def get_session(session_id: str):
        return sessions.get(session_id).snapshot()

    @app.post("/sessions/{session_id}/events")
    def send_event(session_id: str, event: EventRequest):
        """Deliver a click or change to an element, answering with the new tree."""
        session = sessions.get(session_id)
        session.handle_event(event.target, event.type, event.value)
        return session.snapshot()

    @app.delete("/sessions/{session_id}", status_code=204)
    def delete_session(session_id: str) -> Response:
        sessions.delete(session_id)
        return Response(status_code=204)

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics."""
        if not settings.enable_metrics:
            raise HTTPException(status_code=404, detail="Metrics disabled")
        return Response(content=metrics_collector.get_metrics(), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()


def run() -> None:
    """Entry point - serve with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
