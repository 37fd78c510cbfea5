"""
Backend entry point.

Wires the MongoDB client, the generic middleware stack (CORS, request
logging, security headers, rate limiting), the auth and users route groups,
the health endpoints and the app-wide error handlers. When a built client
bundle exists it is served with a fallback to index.html so the client-side
router can resolve its own pages.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.routing import APIRoute
from fastapi.staticfiles import StaticFiles
from starlette.routing import Match

from starter_backend import __version__
from starter_backend.errors import (
    DatabaseConnectionError,
    InvalidTokenError,
    UserAlreadyExistsError,
)
from starter_backend.managers.config import AppSettings, config_manager
from starter_backend.managers.database import DatabaseManager
from starter_backend.managers.logging import setup_logging
from starter_backend.managers.users import UserRepository
from starter_backend.middleware import (
    ErrorHandlingMiddleware,
    FixedWindowRateLimiter,
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from starter_backend.routes import auth_router, health_router, users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: AppSettings = app.state.settings
    database_manager: DatabaseManager = app.state.database_manager
    logger.info(f"Starting {settings.app_name} ({settings.environment})")

    # An unreachable database aborts start-up
    await database_manager.connect()
    await UserRepository(database_manager.get_database()).ensure_indexes()
    yield
    logger.info(f"Shutting down {settings.app_name}")
    await database_manager.close()


# --- Error handlers ---


async def user_exists_handler(request: Request, exc: UserAlreadyExistsError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def invalid_token_handler(request: Request, exc: InvalidTokenError):
    return JSONResponse(
        status_code=401,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def database_unavailable_handler(request: Request, exc: DatabaseConnectionError):
    logger.error(f"Database unavailable for {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Database unavailable"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UserAlreadyExistsError, user_exists_handler)
    app.add_exception_handler(InvalidTokenError, invalid_token_handler)
    app.add_exception_handler(DatabaseConnectionError, database_unavailable_handler)


# --- Middleware ---


def register_middleware(app: FastAPI, settings: AppSettings) -> None:
    """Add middleware; the last one added is the outermost."""
    # Innermost, so the fixed 500 still passes through every outer layer
    app.add_middleware(ErrorHandlingMiddleware)
    if settings.rate_limit_enabled:
        limiter = FixedWindowRateLimiter(
            max_requests=settings.rate_limit_rpm,
            window_seconds=settings.rate_limit_window_seconds,
            per_path=settings.rate_limit_per_path,
        )
        app.add_middleware(RateLimitMiddleware, limiter=limiter)
    app.add_middleware(SecurityHeadersMiddleware, settings=settings)
    app.add_middleware(RequestLoggingMiddleware)

    origins = settings.cors_origin_list
    allow_any = "*" in origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_any else origins,
        # Browsers reject credentialed requests against a wildcard origin
        allow_credentials=not allow_any,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
        max_age=3600,
    )


# --- Client bundle ---


def mount_frontend(app: FastAPI, static_dir: Path) -> bool:
    """Serve a built client bundle with fallback to index.html."""
    index_file = static_dir / "index.html"
    if not index_file.exists():
        logger.info(f"No client bundle at {static_dir}; serving API only")
        return False

    assets_dir = static_dir / "assets"
    if assets_dir.exists():
        app.mount("/assets", StaticFiles(directory=assets_dir), name="assets")

    root = static_dir.resolve()
    # Routes registered so far; a partial match on them means the method is wrong
    app_routes = [route for route in app.router.routes if isinstance(route, APIRoute)]

    @app.get("/", include_in_schema=False)
    async def read_root():
        return FileResponse(str(index_file))

    @app.get("/{full_path:path}", include_in_schema=False)
    async def spa_fallback(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            raise HTTPException(status_code=404, detail="Not Found")
        candidate = (root / full_path).resolve()
        if candidate.is_file() and candidate.is_relative_to(root):
            return FileResponse(str(candidate))
        return FileResponse(str(index_file))

    @app.api_route(
        "/{full_path:path}", methods=["POST", "PUT", "PATCH", "DELETE"], include_in_schema=False
    )
    async def unmatched_write(request: Request, full_path: str):
        if any(route.matches(request.scope)[0] == Match.PARTIAL for route in app_routes):
            raise HTTPException(status_code=405, detail="Method Not Allowed")
        raise HTTPException(status_code=404, detail="Not Found")

    logger.info(f"Serving client bundle from {static_dir}")
    return True


def create_app(
    settings: Optional[AppSettings] = None,
    database_manager: Optional[DatabaseManager] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or config_manager.app_settings
    logging_manager = setup_logging(settings) if configure_logging else None

    app = FastAPI(
        title=settings.app_name,
        description="FastAPI + MongoDB backend for a single-page client",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database_manager = database_manager or DatabaseManager(settings)

    register_exception_handlers(app)
    register_middleware(app, settings)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)

    mount_frontend(app, config_manager.resolve_path(settings.frontend_dist_dir))

    if logging_manager is not None:
        logging_manager.instrument_fastapi(app)
    return app


app = create_app()


def main() -> None:
    settings = config_manager.app_settings
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
