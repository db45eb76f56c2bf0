# backend/interview_coach/errors.py
import enum
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class CoachError(RuntimeError):
    """
    Base for every error the API maps to a response.

    - status_code: HTTP status returned to the client
    - message: short, non-sensitive text returned to the client
    - extra: additional fields merged into the error body (e.g. {"saved": False})
    The exception's own str() may carry internal detail; it is only shown in development
    unless expose_detail is set.
    """
    status_code = 500
    message = "Internal server error"
    expose_detail = False

    def __init__(self, detail: Optional[str] = None, extra: Optional[Dict[str, Any]] = None):
        super().__init__(detail or self.message)
        self.detail = detail or self.message
        self.extra = extra or {}


class InputValidationError(CoachError):
    status_code = 400
    message = "Invalid request"
    expose_detail = True


class UpstreamUnavailableError(CoachError):
    status_code = 500
    message = "Upstream service unavailable"


class UpstreamTimeoutError(CoachError):
    status_code = 504
    message = "Request timeout - please try again"


class UnparseableResponseError(CoachError):
    status_code = 500
    message = "Could not extract structured data from model output"


class StoreUnavailableError(CoachError):
    status_code = 500
    message = "Session store unavailable"


class AuthFailure(str, enum.Enum):
    MISSING_TOKEN = "missing token"
    INVALID_TOKEN = "invalid token"


class Unauthorized(CoachError):
    status_code = 401
    expose_detail = True

    def __init__(self, reason: AuthFailure):
        self.reason = reason
        self.message = f"Unauthorized: {reason.value}"
        super().__init__(self.message)


def safe_log(user_message: str, exc: Optional[Exception] = None) -> None:
    """
    Log an error server-side; the stack trace is kept when an exception is given.
    """
    if exc is not None:
        logger.error("%s: %s", user_message, exc, exc_info=exc)
    else:
        logger.error(user_message)
