"""FastAPI application entry point."""

import logging
import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from metalflow.api.errors import register_exception_handlers
from metalflow.api.v1.router import api_v1_router
from metalflow.core.config import DEV_JWT_SECRET, settings
from metalflow.core.database import async_session_factory, close_db, init_db
from metalflow.db.seed import seed_roles

logger = logging.getLogger(__name__)
request_logger = logging.getLogger("metalflow.requests")


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    )


configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle."""
    logger.info("Starting %s ...", settings.PROJECT_NAME)
    if settings.is_production and settings.JWT_SECRET == DEV_JWT_SECRET:
        raise RuntimeError("JWT_SECRET must be configured in production")

    # Startup
    await init_db()
    logger.info("Database initialized")

    async with async_session_factory() as session:
        created = await seed_roles(session)
        if created:
            await session.commit()
        else:
            logger.info("Built-in roles present, skipping seed")

    yield

    # Shutdown
    await close_db()
    logger.info("Database disconnected")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

register_exception_handlers(app)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept"],
)


@app.middleware("http")
async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    request_logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


@app.middleware("http")
async def case_insensitive_routes(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    # Route matching ignores case; every path parameter is numeric.
    request.scope["path"] = request.scope["path"].lower()
    return await call_next(request)


# Register API v1 router
app.include_router(api_v1_router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("metalflow.main:app", host=settings.BACKEND_HOST, port=settings.BACKEND_PORT)
