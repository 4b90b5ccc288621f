from fastapi import HTTPException, status

from app.core.exceptions.exceptions import (
    RateLimitExceededError,
    UpstreamHttpError,
    UpstreamThrottledError,
)
from app.utils.log import app_logger


def handle_api_error(error: Exception) -> HTTPException:
    """Translate a dispatcher failure into what end users are allowed to see.

    Only rate limiting is reported as such (with a retry hint); everything
    else collapses to a generic 500 so upstream codes and credentials never
    leak.
    """
    app_logger.error("api.error", exc_type=type(error).__name__, exc_info=error)

    if isinstance(error, (RateLimitExceededError, UpstreamThrottledError)):
        retry_after = error.retry_after
        return HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={"error": "Rate limit reached. Please try again later.", "retryAfter": retry_after},
            headers={"Retry-After": str(retry_after)},
        )

    if isinstance(error, UpstreamHttpError) and error.status_code == 401:
        app_logger.error("api.invalid_key", hint="check the NEWS_API_KEY configuration")
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error. Please try again later.",
        )

    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An error occurred while fetching the data.",
    )
