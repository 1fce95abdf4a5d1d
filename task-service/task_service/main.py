import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_service import __version__
from task_service.config import Settings
from task_service.handlers import router
from task_service.store import TaskStore

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[TaskStore] = None,
    clock: Callable[[], datetime] = utc_now,
) -> FastAPI:
    """Build the task API.

    With ``store`` given, the app uses it as-is and leaves its lifecycle to
    the caller. Otherwise a store is opened from ``settings.redis_url`` at
    startup and closed at shutdown; an unreachable store aborts startup.
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if store is not None:
            yield
            return
        owned = TaskStore.from_url(settings.redis_url)
        try:
            await owned.ping()
        except Exception:
            await owned.close()
            raise
        app.state.store = owned
        try:
            yield
        finally:
            await owned.close()

    app = FastAPI(title="Task Service", version=__version__, lifespan=lifespan)
    app.state.store = store
    app.state.clock = clock

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        # An exception escaping call_next is answered with a 500 further out.
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "%s %s -> %s (%.1fms)",
                request.method,
                request.url.path,
                status_code,
                elapsed_ms,
            )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def invalid_payload(request: Request, exc: RequestValidationError):
        logger.debug("rejected payload on %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid input data"})

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    app.include_router(router)
    return app


app = create_app()
