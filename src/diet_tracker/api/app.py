"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from zoneinfo import ZoneInfoNotFoundError

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from diet_tracker.api.auth import router as auth_router
from diet_tracker.api.diet_plans import router as diet_plan_router
from diet_tracker.api.events import router as events_router
from diet_tracker.api.food_logs import router as food_log_router
from diet_tracker.app_logging import configure_logging
from diet_tracker.config import parse_allowed_origins
from diet_tracker.containers import AppContainer
from diet_tracker.domain.errors import (
    DietTrackerError,
    EmailAlreadyRegistered,
    InvalidCredentials,
    NotAuthorized,
    NotFound,
    ProfileIncomplete,
)

_STATUS_BY_ERROR: dict[type[DietTrackerError], int] = {
    ProfileIncomplete: status.HTTP_400_BAD_REQUEST,
    EmailAlreadyRegistered: status.HTTP_400_BAD_REQUEST,
    InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    NotAuthorized: status.HTTP_401_UNAUTHORIZED,
    NotFound: status.HTTP_404_NOT_FOUND,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.cors_allowed_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(diet_plan_router)
    app.include_router(food_log_router)
    app.include_router(events_router)

    @app.exception_handler(DietTrackerError)
    async def domain_error(request: Request, exc: DietTrackerError) -> JSONResponse:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        for error_type, code in _STATUS_BY_ERROR.items():
            if isinstance(exc, error_type):
                status_code = code
                break
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Unhandled %s on %s: %s", type(exc).__name__, request.url.path, exc
            )
        body: dict[str, object] = {"message": exc.message}
        if isinstance(exc, ProfileIncomplete):
            body["missingFields"] = exc.missing_fields
        return JSONResponse(status_code=status_code, content=body)

    @app.exception_handler(ZoneInfoNotFoundError)
    async def unknown_timezone(
        request: Request, exc: ZoneInfoNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": f"Unknown timezone: {exc}"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
