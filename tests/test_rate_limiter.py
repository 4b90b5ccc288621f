"""
Unit tests for pacing and the daily quota.
"""
import pytest

from app.core.exceptions.exceptions import RateLimitExceededError
from app.services.rate_limiter import DAY_SECONDS, RateLimiter


def make_limiter(clock, per_day=100):
    return RateLimiter(requests_per_day=per_day, requests_per_second=1, clock=clock, sleep=clock.sleep)


class TestPacing:

    @pytest.mark.asyncio
    async def test_first_acquire_does_not_wait(self, clock):
        limiter = make_limiter(clock)
        await limiter.acquire()

        assert clock.sleeps == []
        assert limiter.state.requests_issued_today == 1
        assert limiter.state.last_request_time == clock.now

    @pytest.mark.asyncio
    async def test_back_to_back_acquire_waits_for_floor(self, clock):
        limiter = make_limiter(clock)
        await limiter.acquire()
        clock.now += 0.25
        await limiter.acquire()

        assert clock.sleeps == [pytest.approx(0.75)]
        assert limiter.state.requests_issued_today == 2

    @pytest.mark.asyncio
    async def test_no_wait_once_floor_has_passed(self, clock):
        limiter = make_limiter(clock)
        await limiter.acquire()
        clock.now += 1.5
        await limiter.acquire()

        assert clock.sleeps == []


class TestDailyQuota:

    @pytest.mark.asyncio
    async def test_exceeding_quota_raises_without_incrementing(self, clock):
        limiter = make_limiter(clock, per_day=2)
        await limiter.acquire()
        await limiter.acquire()

        with pytest.raises(RateLimitExceededError) as exc:
            await limiter.acquire()

        assert limiter.state.requests_issued_today == 2
        assert exc.value.retry_after > 0
        assert exc.value.retry_after <= DAY_SECONDS

    @pytest.mark.asyncio
    async def test_quota_resets_exactly_after_24h(self, clock):
        limiter = make_limiter(clock, per_day=1)
        window_start = limiter.state.window_start
        await limiter.acquire()

        clock.now = window_start + DAY_SECONDS - 1
        with pytest.raises(RateLimitExceededError):
            await limiter.acquire()

        clock.now = window_start + DAY_SECONDS
        await limiter.acquire()

        assert limiter.state.requests_issued_today == 1
        assert limiter.state.window_start == window_start + DAY_SECONDS

    def test_retry_after_counts_down_window(self, clock):
        limiter = make_limiter(clock)
        clock.now += 3600
        assert limiter.retry_after() == DAY_SECONDS - 3600

    @pytest.mark.asyncio
    async def test_remaining(self, clock):
        limiter = make_limiter(clock, per_day=3)
        await limiter.acquire()
        assert limiter.remaining() == 2

    @pytest.mark.asyncio
    async def test_remaining_after_window_does_not_touch_state(self, clock):
        limiter = make_limiter(clock, per_day=1)
        window_start = limiter.state.window_start
        await limiter.acquire()
        assert limiter.remaining() == 0

        clock.now = window_start + DAY_SECONDS

        assert limiter.remaining() == 1
        assert limiter.state.requests_issued_today == 1
        assert limiter.state.window_start == window_start
