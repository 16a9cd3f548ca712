# =============================================================================
# Vision Regression - Vision Service Errors
# =============================================================================
# Exceptions that abort a regression run.  A run that raises one of these is
# inconclusive: no verdict is produced.  Degenerate embeddings are NOT errors;
# they score 0.0 and fail the run as an ordinary verdict.
# =============================================================================

from typing import Any, Optional


class VisionError(Exception):
    """Base class for failures talking to the vision service."""


class TransportError(VisionError):
    """
    The vectorization call could not complete.

    Raised for network failures, timeouts and non-2xx responses.

    Args:
        message:     Human readable description.
        status_code: HTTP status when the service answered, else None.
        detail:      Response text or underlying error string.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class VisionTimeoutError(TransportError):
    """The vectorization call exceeded the configured timeout."""


class ParseError(VisionError):
    """
    The response body is not a JSON object.

    Args:
        message: Human readable description.
        body:    Leading part of the offending body, for diagnostics.
    """

    def __init__(self, message: str, body: Optional[str] = None):
        super().__init__(message)
        self.body = body
