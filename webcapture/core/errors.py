"""
Error Types
===========

Errors raised while validating and serving capture requests.

Validation errors map to HTTP 400 and are always raised before any browser
resource is acquired. ``CaptureError`` covers every failure after that point
and maps to HTTP 500.
"""


class CaptureValidationError(Exception):
    """Base class for request validation failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidBodyError(CaptureValidationError):
    """Request body is not a JSON object."""

    pass


class MissingURLError(CaptureValidationError):
    """The ``url`` field is absent or empty."""

    def __init__(self, message: str = "URL is required"):
        super().__init__(message)


class InvalidURLError(CaptureValidationError):
    """The ``url`` field is not an absolute URI."""

    def __init__(self, message: str = "Invalid URL"):
        super().__init__(message)


class InvalidOptionError(CaptureValidationError):
    """A rendering option failed its type or range check."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class CaptureError(Exception):
    """Exception raised when a screenshot capture fails."""

    pass
