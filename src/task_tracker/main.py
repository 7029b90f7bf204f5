from __future__ import annotations

from typing import Optional

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .container import Container, get_container
from .errors import ApplicationError
from .logging_config import configure_logging
from .routers import todos as todos_router
from .routers import users as users_router
from .settings import get_settings

logger = structlog.get_logger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "users", "description": "Create and fetch users."},
    {"name": "todos", "description": "Create, list and complete Todo items."},
]


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    """Render a use-case error with its status classification: {"error": message}."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
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
            "detail": jsonable_encoder(exc.errors()),
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and answer with an opaque 500."""
    logger.exception("unhandled_error", method=request.method, path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


# PUBLIC_INTERFACE
def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        container: Pre-built Container to serve instead of the process-wide one.
            Mainly used by tests to inject repositories and id factories.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, log_json=settings.log_json)

    app = FastAPI(
        title="Task Tracker",
        description="Backend API service for managing users and their todos.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )

    # Configure CORS based on settings (CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    if container is not None:
        app.dependency_overrides[get_container] = lambda: container

    @app.get("/", summary="Health Check", tags=["health"])
    def health_check(current: Container = Depends(get_container)) -> dict:
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health and the active storage backend.
        """
        return {"message": "Healthy", "backend": current.backend}

    app.include_router(users_router.router)
    app.include_router(todos_router.router)
    return app


app = create_app()


# PUBLIC_INTERFACE
def run() -> None:
    """Serve the application with uvicorn on HOST:PORT."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
