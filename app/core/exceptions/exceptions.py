from typing import Optional


class AppError(Exception):
    """Base class for all application-level errors."""
    pass



class InfrastructureError(AppError):
    """Base for infrastructure-related errors (upstream API, dispatcher)."""
    pass

class DispatcherClosedError(InfrastructureError):
    def __init__(self):
        self.message = "Request dispatcher is shut down"
        super().__init__(self.message)

class ExternalAPIError(InfrastructureError):
    def __init__(self, service: str, detail: str = ""):
        self.service = service
        self.detail = detail
        self.message = f"Error with external service '{service}': {detail}"
        super().__init__(self.message)

class RateLimitExceededError(ExternalAPIError):
    """Daily quota used up; the call was never issued."""
    def __init__(self, retry_after: int, service: str = "newsapi"):
        self.retry_after = retry_after
        super().__init__(service, f"daily API rate limit exceeded, retry in {retry_after}s")

class UpstreamThrottledError(ExternalAPIError):
    """Upstream answered 429."""
    def __init__(self, retry_after: int, service: str = "newsapi"):
        self.retry_after = retry_after
        super().__init__(service, f"throttled by upstream (status: 429), retry after {retry_after}s")

class UpstreamHttpError(ExternalAPIError):
    def __init__(self, status_code: int, service: str = "newsapi"):
        self.status_code = status_code
        super().__init__(service, f"HTTP error! status: {status_code}")

class InvalidResponseError(ExternalAPIError):
    def __init__(self, detail: str, code: Optional[str] = None, service: str = "newsapi"):
        self.code = code
        super().__init__(service, detail)

class NetworkError(ExternalAPIError):
    def __init__(self, detail: str, service: str = "newsapi"):
        super().__init__(service, detail)
