"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nutriscan.api.food import router as food_router
from nutriscan.api.logs import router as logs_router
from nutriscan.api.user import router as user_router
from nutriscan.app_logging import configure_logging
from nutriscan.containers import AppContainer
from nutriscan.errors import (
    NotFoundError,
    NutriScanError,
    StorageError,
    UpstreamInferenceError,
    ValidationError,
)

_ERROR_STATUS: dict[type[NutriScanError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    UpstreamInferenceError: status.HTTP_502_BAD_GATEWAY,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
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

    app.include_router(logs_router)
    app.include_router(food_router)
    app.include_router(user_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(NutriScanError)
    async def domain_error(request: Request, exc: NutriScanError) -> JSONResponse:
        status_code = _status_for(exc)
        if isinstance(exc, StorageError):
            logger.error("Storage failure path=%s error=%s", request.url.path, exc)
            message = "Internal server error"
        elif isinstance(exc, UpstreamInferenceError):
            logger.warning("Inference failure path=%s error=%s", request.url.path, exc)
            message = "Could not analyze food right now. Please try again later."
        else:
            message = str(exc)
        return JSONResponse(
            status_code=status_code, content={"success": False, "message": message}
        )

    @app.exception_handler(RequestValidationError)
    async def request_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "message": "Invalid request",
                "errors": [
                    {
                        "field": ".".join(str(part) for part in err["loc"]),
                        "message": err["msg"],
                    }
                    for err in exc.errors()
                ],
            },
        )

    return app


def _status_for(exc: NutriScanError) -> int:
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR
