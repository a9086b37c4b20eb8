"""
Capture Routes
==============

FastAPI route for rendering a URL to a WebP screenshot.
"""

import json
import time
from typing import Any, Dict

from fastapi import APIRouter, Request

from webcapture.config.logging import get_logger
from webcapture.core.errors import InvalidBodyError
from webcapture.core.validation import validate_capture_request
from webcapture.models.schemas import CaptureResponse, ResolvedOptions

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Capture"])


async def read_json_object(request: Request) -> Dict[str, Any]:
    """
    Read the whole request body and decode it as a JSON object.

    An empty body decodes to an empty object.

    Raises:
        InvalidBodyError: If the body is not JSON or not an object
    """
    body = await request.body()
    if not body.strip():
        return {}

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidBodyError("Invalid JSON body")

    if not isinstance(payload, dict):
        raise InvalidBodyError("Request body must be a JSON object")
    return payload


@router.post("/capture", response_model=CaptureResponse)
async def capture_screenshot(request: Request) -> CaptureResponse:
    """
    Render a URL in a headless browser and save it as a WebP image.

    Validation failures are answered with 400 and capture failures with 500
    by the application's exception handlers.
    """
    payload = await read_json_object(request)
    options = validate_capture_request(payload, request.app.state.capture_defaults)

    logger.info(
        "Capture requested",
        url=options.url,
        request_id=getattr(request.state, "request_id", None),
    )

    result = await request.app.state.capturer.capture(options)

    return CaptureResponse(
        filename=result.filename,
        timestamp=int(time.time() * 1000),
        options=ResolvedOptions.from_options(options),
    )
