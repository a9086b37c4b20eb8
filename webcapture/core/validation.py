"""
Capture Request Validation
==========================

Turns the raw JSON body of a capture request into immutable ``CaptureOptions``.

Checks run in a fixed order and the first failure is raised. A field whose
value is ``null`` is treated as absent and takes its default.
"""

import math
import re
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

from webcapture.core.errors import (
    InvalidOptionError,
    InvalidURLError,
    MissingURLError,
)
from webcapture.models.schemas import CaptureDefaults, CaptureOptions

_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")

# Schemes whose URLs are meaningless without an authority component
_HOST_REQUIRED_SCHEMES = {"http", "https", "ftp", "ws", "wss"}


def validate_url(raw: Any) -> str:
    """
    Validate that ``raw`` is an absolute URI.

    Args:
        raw: Value of the ``url`` field

    Returns:
        The URL with surrounding whitespace removed

    Raises:
        MissingURLError: If the value is absent or empty
        InvalidURLError: If the value does not parse as an absolute URI
    """
    if raw is None or raw == "":
        raise MissingURLError()
    if not isinstance(raw, str):
        raise InvalidURLError()

    candidate = raw.strip()
    try:
        parts = urlsplit(candidate)
        # Accessing the port validates it
        parts.port
    except ValueError:
        raise InvalidURLError()

    if not parts.scheme or not _SCHEME_PATTERN.match(parts.scheme):
        raise InvalidURLError()
    if parts.scheme.lower() in _HOST_REQUIRED_SCHEMES and not parts.hostname:
        raise InvalidURLError()
    if not (parts.netloc or parts.path or parts.query or parts.fragment):
        raise InvalidURLError()
    if any(ch.isspace() for ch in parts.netloc):
        raise InvalidURLError()

    return candidate


def _to_number(value: Any, field: str, message: str) -> float:
    """Coerce a JSON number or numeric string to a finite float."""
    if isinstance(value, bool):
        raise InvalidOptionError(field, message)
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise InvalidOptionError(field, message)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidOptionError(field, message)
    else:
        raise InvalidOptionError(field, message)

    if not math.isfinite(number):
        raise InvalidOptionError(field, message)
    return number


def _positive_int(value: Any, field: str, message: str) -> int:
    number = _to_number(value, field, message)
    if number <= 0 or int(number) < 1:
        raise InvalidOptionError(field, message)
    return int(number)


def _positive_float(value: Any, field: str, message: str) -> float:
    number = _to_number(value, field, message)
    if number <= 0:
        raise InvalidOptionError(field, message)
    return number


def _quality(value: Any) -> int:
    message = "Quality must be between 0 and 100"
    number = _to_number(value, "quality", message)
    if number < 0 or number > 100:
        raise InvalidOptionError("quality", message)
    return int(number)


def _filename(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        raise InvalidOptionError("filename", "Filename must be a string")
    if value == "":
        return None
    if "/" in value or "\\" in value or "\x00" in value:
        raise InvalidOptionError("filename", "Filename must not contain path separators")
    return value


def validate_capture_request(
    payload: Mapping[str, Any], defaults: CaptureDefaults
) -> CaptureOptions:
    """
    Validate a capture request body and substitute defaults.

    Args:
        payload: Decoded JSON object from the request body
        defaults: Values used for absent options

    Returns:
        Fully populated capture options

    Raises:
        MissingURLError: If ``url`` is absent or empty
        InvalidURLError: If ``url`` is not an absolute URI
        InvalidOptionError: For the first option that fails its check
    """
    url = validate_url(payload.get("url"))

    width = payload.get("width")
    height = payload.get("height")
    scale = payload.get("scale")
    quality = payload.get("quality")
    full_page = payload.get("fullPage")
    filename = payload.get("filename")

    resolved_width = (
        defaults.width
        if width is None
        else _positive_int(width, "width", "Width must be a positive number")
    )
    resolved_height = (
        defaults.height
        if height is None
        else _positive_int(height, "height", "Height must be a positive number")
    )
    resolved_scale = (
        defaults.scale
        if scale is None
        else _positive_float(scale, "scale", "Scale must be a positive number")
    )
    resolved_quality = defaults.quality if quality is None else _quality(quality)

    if full_page is None:
        resolved_full_page = defaults.full_page
    elif isinstance(full_page, bool):
        resolved_full_page = full_page
    else:
        raise InvalidOptionError("fullPage", "FullPage must be a boolean value")

    resolved_filename = None if filename is None else _filename(filename)

    return CaptureOptions(
        url=url,
        width=resolved_width,
        height=resolved_height,
        scale=resolved_scale,
        quality=resolved_quality,
        full_page=resolved_full_page,
        filename=resolved_filename,
    )
