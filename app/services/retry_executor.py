import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional

import requests

from app.clients.base_http_client import BaseHTTPClient
from app.core.exceptions.exceptions import (
    ExternalAPIError,
    InvalidResponseError,
    NetworkError,
    UpstreamHttpError,
    UpstreamThrottledError,
)
from app.services.validation import validate_response
from app.utils.log import app_logger, sanitize


class RetryExecutor:
    """Run one logical upstream call with bounded retries.

    Every attempt, including a throttled one, consumes the attempt budget.
    Ordinary failures back off `2 ** attempt` seconds before the next try;
    a 429 waits for its Retry-After instead, never less than the pacing
    floor `min_interval`, and the following attempt starts without extra
    backoff. The wait also applies after the last attempt so whatever runs
    next does not hit a throttled upstream.
    """

    def __init__(
        self,
        client: BaseHTTPClient,
        max_retries: int = 3,
        default_retry_after: int = 5,
        min_interval: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.max_retries = max_retries
        self.default_retry_after = default_retry_after
        self.min_interval = min_interval
        self.sleep = sleep

    def _retry_after(self, response) -> int:
        try:
            return int(response.headers.get('Retry-After', self.default_retry_after))
        except (TypeError, ValueError):
            app_logger.debug("request.retry_after_invalid", value=response.headers.get('Retry-After'))
            return self.default_retry_after

    async def execute(self, url: str, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        last_error: Optional[ExternalAPIError] = None
        throttled = False

        for attempt in range(self.max_retries):
            if attempt > 0 and not throttled:
                # exponential backoff
                await self.sleep(2 ** attempt)
            throttled = False

            try:
                response = await asyncio.to_thread(self.client.send, url, options)

                # check rate limiting
                if response.status_code == 429:
                    retry_after = self._retry_after(response)
                    wait = max(retry_after, self.min_interval)
                    app_logger.warning("request.rate_limited", url=url, attempt=attempt + 1, wait=wait)
                    last_error = UpstreamThrottledError(max(retry_after, 1))
                    throttled = True
                    await self.sleep(wait)
                    continue

                if not 200 <= response.status_code < 300:
                    app_logger.debug("request.status", url=url, status_code=response.status_code)
                    raise UpstreamHttpError(response.status_code)

                try:
                    data = response.json()
                except ValueError:
                    raise InvalidResponseError('Upstream returned a non-JSON body')

                return validate_response(data)

            except requests.exceptions.RequestException as e:
                last_error = NetworkError(sanitize(e))
                app_logger.error("request.failed", url=url, attempt=attempt + 1,
                                 exc_type=type(e).__name__, error=last_error.detail)
            except ExternalAPIError as e:
                last_error = e
                app_logger.error("request.failed", url=url, attempt=attempt + 1,
                                 exc_type=type(e).__name__, error=e.detail)

        app_logger.error("request.exhausted", url=url, attempts=self.max_retries,
                         exc_type=type(last_error).__name__)
        raise last_error or ExternalAPIError("newsapi", "Maximum retries exceeded")
