from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import NotFoundError, StorageError, ValidationError
from .logging_config import configure_logging
from .repositories import Repository, get_repository
from .routers import tasks as tasks_router
from .seed import seed_if_empty
from .service import TaskService
from .settings import Settings, get_settings

logger = structlog.get_logger(__name__)

SERVICE_NAME = "Task Management API"

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "tasks",
        "description": "CRUD operations for tasks with an optional status filter.",
    },
]


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def task_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"message": exc.message})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"message": exc.message})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure", path=request.url.path, error=exc.message, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal storage error"})

    # Global exception handler for consistent JSON on malformed requests
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=422,
            content={
                "error": "ValidationError",
                "message": "Request validation failed",
                "detail": exc.errors(),
            },
        )


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[Repository] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use; loaded from the environment when omitted.
        repository: Store to use; built from settings at startup when omitted.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        repo = repository or get_repository(settings)
        if settings.seed_on_startup:
            seed_if_empty(repo)
        app.state.task_service = TaskService(repo)
        logger.info(
            "Task Management API started",
            store=type(repo).__name__,
            tasks=repo.count(),
        )
        yield
        logger.info("Task Management API shut down")

    app = FastAPI(
        title=SERVICE_NAME,
        description="A simple API for managing tasks",
        version="1.0.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS)
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    # PUBLIC_INTERFACE
    @app.get("/health", summary="Health check endpoint", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
        }

    app.include_router(tasks_router.router)
    return app


app = create_app()


# PUBLIC_INTERFACE
def run() -> None:
    """Console entry point: configure logging and serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)
    uvicorn.run("task_api.main:app", host="0.0.0.0", port=8000)
