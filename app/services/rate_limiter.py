import asyncio
import math
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from app.core.exceptions.exceptions import RateLimitExceededError
from app.utils.log import app_logger

DAY_SECONDS = 24 * 60 * 60


@dataclass
class RateLimitState:
    last_request_time: float = 0.0
    requests_issued_today: int = 0
    window_start: float = 0.0


class RateLimiter:
    """Pacing floor plus a rolling daily quota against the upstream limits.

    `acquire` checks then increments without any lock; it must only be
    awaited from the dispatch queue's single drain loop.
    """

    def __init__(
        self,
        requests_per_day: int = 100,
        requests_per_second: float = 1,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.requests_per_day = requests_per_day
        self.min_interval = 1.0 / requests_per_second
        self.clock = clock
        self.sleep = sleep
        self.state = RateLimitState(window_start=clock())

    def _reset_if_needed(self) -> None:
        now = self.clock()
        if now - self.state.window_start >= DAY_SECONDS:
            app_logger.info("ratelimit.window_reset", issued=self.state.requests_issued_today)
            self.state.requests_issued_today = 0
            self.state.window_start = now

    async def acquire(self) -> None:
        self._reset_if_needed()

        elapsed = self.clock() - self.state.last_request_time
        if elapsed < self.min_interval:
            await self.sleep(self.min_interval - elapsed)

        if self.state.requests_issued_today >= self.requests_per_day:
            retry_after = self.retry_after()
            app_logger.warning("ratelimit.exceeded", quota=self.requests_per_day, retry_after=retry_after)
            raise RateLimitExceededError(retry_after)

        self.state.last_request_time = self.clock()
        self.state.requests_issued_today += 1

    def retry_after(self) -> int:
        """seconds until the current day window closes"""
        left = DAY_SECONDS - (self.clock() - self.state.window_start)
        return max(1, math.ceil(left))

    def remaining(self) -> int:
        """quota left; an elapsed window counts as full without being reset here"""
        if self.clock() - self.state.window_start >= DAY_SECONDS:
            return self.requests_per_day
        return max(0, self.requests_per_day - self.state.requests_issued_today)
