"""FastAPI application for the users service.

Run with::

    virgin-initiatives-api            # console script
    uvicorn --factory virgin_initiatives.api.app:create_app --port 8000
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from virgin_initiatives import __version__
from virgin_initiatives.application.user.handlers import register_user_handlers
from virgin_initiatives.config import Settings, get_settings
from virgin_initiatives.domain.user.core.exceptions.user_errors import (
    UserStoreUnavailableError,
)
from virgin_initiatives.domain.user.core.ports.user_store import IUserStore
from virgin_initiatives.infrastructure.events.in_memory_bus import InMemoryEventBus
from virgin_initiatives.infrastructure.user.store_factory import create_user_store

from .users import router as users_router

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
    )


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    locations = [tuple(error.get("loc", ())) for error in exc.errors()]
    if ("path", "user_id") in locations:
        message = "Invalid user ID"
    else:
        message = "Invalid request"
    logger.info("Request rejected", extra={"path": request.url.path, "errors": len(locations)})
    return JSONResponse(status_code=400, content={"success": False, "message": message})


async def _store_unavailable(request: Request, exc: UserStoreUnavailableError) -> JSONResponse:
    logger.error(
        "User store unavailable",
        extra={"path": request.url.path, "operation": exc.operation, "reason": exc.reason},
    )
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )


def create_app(
    settings: Optional[Settings] = None,
    user_store: Optional[IUserStore] = None,
) -> FastAPI:
    """Build the users service.

    Args:
        settings: Configuration (defaults to environment)
        user_store: Store override (tests); built from settings otherwise
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    store = user_store if user_store is not None else create_user_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "lifespan.startup",
            extra={"user_store": settings.user_store, "version": __version__},
        )
        yield
        aclose = getattr(store, "aclose", None)
        if aclose is not None:
            await aclose()
        logger.info("lifespan.shutdown")

    app = FastAPI(title="Virgin Initiatives Users API", version=__version__, lifespan=lifespan)

    event_bus = InMemoryEventBus()
    register_user_handlers(event_bus)
    app.state.user_store = store
    app.state.event_bus = event_bus

    app.add_exception_handler(HTTPException, _http_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(UserStoreUnavailableError, _store_unavailable)  # type: ignore[arg-type]
    app.include_router(users_router)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    return app


def main() -> None:
    import uvicorn

    uvicorn.run(
        "virgin_initiatives.api.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )
