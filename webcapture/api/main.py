"""
FastAPI Application
==================

Application factory for the screenshot capture API, with CORS handling,
error translation and the development server runner.
"""

from contextlib import asynccontextmanager
import uuid
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from webcapture.config.settings import get_settings, Settings
from webcapture.config.logging import get_logger, setup_logging
from webcapture.core.errors import CaptureError, CaptureValidationError
from webcapture.core.rendering.capture import ScreenshotCapturer
from webcapture.models.schemas import ErrorResponse

logger = get_logger(__name__)

CAPTURE_FAILED_MESSAGE = "Error occurred while capturing screenshot"


def cors_headers(settings: Settings, origin: Optional[str]) -> Dict[str, str]:
    """
    Build the CORS headers attached to every response.

    Access-Control-Allow-Origin is omitted when the caller's origin is not allowed.
    """
    headers = {
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }

    if "*" in settings.allowed_origins:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin and origin in settings.allowed_origins:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"

    return headers


def error_response(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=content)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    capturer: ScreenshotCapturer = app.state.capturer

    logger.info(
        "Starting screenshot API",
        port=settings.port,
        output_dir=str(settings.output_dir),
    )

    try:
        await capturer.start()
    except CaptureError as e:
        # Launch is retried on the first capture
        logger.warning("Browser not started at startup", error=str(e))

    logger.info("Screenshot API ready", endpoint=f"http://localhost:{settings.port}/api/capture")

    try:
        yield
    finally:
        logger.info("Shutting down screenshot API")
        try:
            await capturer.close()
        except Exception as e:
            logger.error("Error closing screenshot capturer", error=str(e))


def create_app(
    settings: Optional[Settings] = None, capturer: Optional[ScreenshotCapturer] = None
) -> FastAPI:
    """
    Application factory function for creating a FastAPI app instance.

    Args:
        settings: Settings to use, defaults to the global settings
        capturer: Screenshot capturer, built from ``settings`` when omitted

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Render web pages in a headless browser and store them as WebP screenshots",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        redirect_slashes=False,
    )

    app.state.settings = settings
    app.state.capture_defaults = settings.capture_defaults()
    app.state.capturer = capturer or ScreenshotCapturer(settings)

    from webcapture.api.routes.capture import router as capture_router

    app.include_router(capture_router)

    # CORS middleware; OPTIONS requests never reach the router
    @app.middleware("http")
    async def apply_cors(request: Request, call_next) -> Response:  # type: ignore
        headers = cors_headers(settings, request.headers.get("origin"))

        if request.method == "OPTIONS":
            return Response(status_code=200, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next) -> Response:  # type: ignore
        """Add request ID to all requests."""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Unmatched paths and methods both answer 404."""
        if exc.status_code in (404, 405):
            return error_response(404, "Endpoint not found")

        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(CaptureValidationError)
    async def validation_exception_handler(
        request: Request, exc: CaptureValidationError
    ) -> JSONResponse:
        logger.info(
            "Capture request rejected",
            error=exc.message,
            field=getattr(exc, "field", None),
            request_id=getattr(request.state, "request_id", None),
        )
        return error_response(400, exc.message)

    @app.exception_handler(CaptureError)
    async def capture_exception_handler(request: Request, exc: CaptureError) -> JSONResponse:
        logger.error(
            "Screenshot capture failed",
            error=str(exc),
            cause=repr(exc.__cause__) if exc.__cause__ else None,
            request_id=getattr(request.state, "request_id", None),
        )
        return error_response(500, CAPTURE_FAILED_MESSAGE, details=str(exc))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """General exception handler for unexpected errors."""
        logger.error(
            "Unhandled exception",
            exception=str(exc),
            request_id=getattr(request.state, "request_id", None),
            exc_info=True,
        )
        response = error_response(500, "Internal server error", details=str(exc))
        # Runs outside the middleware stack, so CORS and request ID headers are added here
        response.headers.update(cors_headers(settings, request.headers.get("origin")))
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            response.headers["X-Request-ID"] = request_id
        return response

    return app


def run_server() -> None:
    """Run the API server with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "webcapture.api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run_server()
