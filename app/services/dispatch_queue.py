import asyncio
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Deque, Dict, Optional

from app.core.exceptions.exceptions import DispatcherClosedError
from app.services.rate_limiter import RateLimiter
from app.services.retry_executor import RetryExecutor
from app.utils.log import app_logger


@dataclass
class QueueEntry:
    url: str
    options: Optional[Dict[str, Any]]
    cache_key: Optional[str]
    future: asyncio.Future


class DispatchQueue:
    """FIFO, single-consumer queue in front of the upstream API.

    One drain task at most (the `draining` flag); it services one entry at a
    time, so a single upstream call is in flight and the rate limiter is
    never entered concurrently.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        executor: RetryExecutor,
        drain_delay: float = 1.1,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.rate_limiter = rate_limiter
        self.executor = executor
        self.drain_delay = drain_delay
        self.sleep = sleep
        self._queue: Deque[QueueEntry] = deque()
        self._draining = False
        self._drain_task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def draining(self) -> bool:
        return self._draining

    def enqueue(self, url: str, options: Optional[Dict[str, Any]] = None,
                cache_key: Optional[str] = None) -> asyncio.Future:
        if self._closed:
            raise DispatcherClosedError()

        future = asyncio.get_running_loop().create_future()
        self._queue.append(QueueEntry(url=url, options=options, cache_key=cache_key, future=future))
        app_logger.debug("dispatch.enqueued", cache_key=cache_key, pending=len(self._queue))

        if not self._draining:
            self._draining = True
            self._drain_task = asyncio.ensure_future(self._drain())
        return future

    async def _drain(self) -> None:
        try:
            while self._queue:
                entry = self._queue.popleft()
                await self._service(entry)

                # keep spacing between drain cycles above the pacing floor
                if self._queue:
                    await self.sleep(self.drain_delay)
        finally:
            self._draining = False

    async def _service(self, entry: QueueEntry) -> None:
        try:
            await self.rate_limiter.acquire()
            result = await self.executor.execute(entry.url, entry.options)
        except asyncio.CancelledError:
            if not entry.future.done():
                entry.future.set_exception(DispatcherClosedError())
            raise
        except Exception as e:
            if not entry.future.done():
                entry.future.set_exception(e)
            app_logger.debug("dispatch.failed", cache_key=entry.cache_key, exc_type=type(e).__name__)
        else:
            if not entry.future.done():
                entry.future.set_result(result)
            app_logger.debug("dispatch.settled", cache_key=entry.cache_key)

    async def close(self) -> None:
        """stop draining and fail whatever is still queued"""
        self._closed = True
        if self._drain_task and not self._drain_task.done():
            self._drain_task.cancel()
            try:
                await self._drain_task
            except asyncio.CancelledError:
                pass
        while self._queue:
            entry = self._queue.popleft()
            if not entry.future.done():
                entry.future.set_exception(DispatcherClosedError())
        app_logger.info("dispatch.closed")
