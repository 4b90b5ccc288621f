import asyncio
import copy
import time
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import Request

from app.clients.news_api_client import NewsApiClient
from app.config.settings import Settings, settings as default_settings
from app.services.dispatch_queue import DispatchQueue
from app.services.rate_limiter import RateLimiter
from app.services.response_cache import ResponseCache
from app.services.retry_executor import RetryExecutor
from app.utils.log import app_logger


class NewsDispatcher:
    """Entry point for every upstream news API call.

    Owns the cache, rate limiter, retry executor and dispatch queue. A cache
    hit younger than the TTL is answered directly; anything else waits on
    the queue and the validated result is cached under `cache_key`.
    Concurrent misses on one key share a single queued call.
    Errors settled by the queue are propagated unchanged.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        client: Optional[NewsApiClient] = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        config = config or default_settings
        self.config = config
        self.clock = clock
        self.client = client or NewsApiClient(config)
        self.cache = ResponseCache(max_entries=config.CACHE_MAX_ENTRIES, clock=clock)
        self.rate_limiter = RateLimiter(
            requests_per_day=config.REQUESTS_PER_DAY,
            requests_per_second=config.REQUESTS_PER_SECOND,
            clock=clock,
            sleep=sleep,
        )
        self.executor = RetryExecutor(
            self.client,
            max_retries=config.MAX_RETRIES,
            default_retry_after=config.DEFAULT_RETRY_AFTER_SECONDS,
            min_interval=self.rate_limiter.min_interval,
            sleep=sleep,
        )
        self.queue = DispatchQueue(
            self.rate_limiter,
            self.executor,
            drain_delay=config.QUEUE_DRAIN_DELAY_SECONDS,
            sleep=sleep,
        )
        self._inflight: Dict[str, asyncio.Future] = {}

    def build_url(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> str:
        return self.client.build_url(endpoint, params)

    def cached(self, cache_key: str) -> Optional[Dict[str, Any]]:
        """fresh cached payload for `cache_key`, or None"""
        entry = self.cache.get(cache_key)
        if entry is None or self.cache.is_expired(entry, self.config.CACHE_TTL_SECONDS):
            return None
        return copy.deepcopy(entry.payload)

    async def fetch(self, url: str, options: Optional[Dict[str, Any]] = None,
                    cache_key: Optional[str] = None) -> Dict[str, Any]:
        if cache_key:
            payload = self.cached(cache_key)
            if payload is not None:
                app_logger.debug("cache.hit", cache_key=cache_key)
                return payload

            pending = self._inflight.get(cache_key)
            if pending is not None:
                app_logger.debug("cache.coalesced", cache_key=cache_key)
                return await asyncio.shield(pending)
            app_logger.debug("cache.miss", cache_key=cache_key)

        future = self.queue.enqueue(url, options, cache_key)
        if cache_key:
            self._inflight[cache_key] = future
            future.add_done_callback(lambda f: self._settled(cache_key, f))

        # a caller giving up must not cancel the queued call others may share
        return await asyncio.shield(future)

    def _settled(self, cache_key: str, future: asyncio.Future) -> None:
        self._inflight.pop(cache_key, None)
        if future.cancelled() or future.exception() is not None:
            return
        self.cache.put(cache_key, future.result())

    def retry_after(self) -> int:
        return self.rate_limiter.retry_after()

    def stats(self) -> Dict[str, Any]:
        return {
            "pending": self.queue.pending,
            "draining": self.queue.draining,
            "remaining_quota": self.rate_limiter.remaining(),
            "cached": len(self.cache),
        }

    async def close(self) -> None:
        await self.queue.close()
        self.client.close()


def get_dispatcher(request: Request) -> NewsDispatcher:
    """
    returns the dispatcher created by the application lifespan.
    """
    return request.app.state.dispatcher
