import asyncio
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import pytest

from app.config.settings import Settings


class FakeClock:
    """Virtual wall clock; `sleep` advances time instead of waiting."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += max(seconds, 0)
        await asyncio.sleep(0)


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, headers: Optional[Dict[str, str]] = None):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeNewsClient:
    """Scripted stand-in for NewsApiClient.

    Each `send` pops the next scripted item: a FakeResponse is returned, an
    exception is raised. When the script runs out, `default` is returned.
    """

    def __init__(self, clock: FakeClock, script: Optional[list] = None, default: Optional[FakeResponse] = None):
        self.clock = clock
        self.script = list(script or [])
        self.default = default or FakeResponse(200, ok_payload())
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def send(self, url, options=None):
        self.calls.append({"url": url, "options": options, "at": self.clock()})
        item = self.script.pop(0) if self.script else self.default
        if isinstance(item, Exception):
            raise item
        return item

    def build_url(self, endpoint, params=None):
        return f"https://news.test/{endpoint}?{urlencode(params or {})}"

    def close(self):
        self.closed = True


def article(title: str = "A", description: str = "B", **extra) -> Dict[str, Any]:
    data = {
        "source": {"id": None, "name": "Example"},
        "author": None,
        "title": title,
        "description": description,
        "url": f"https://example.com/{title}",
        "urlToImage": f"https://example.com/{title}.png",
        "publishedAt": "2024-05-01T10:00:00Z",
        "content": "...",
    }
    data.update(extra)
    return data


def ok_payload(articles: Optional[list] = None) -> Dict[str, Any]:
    articles = [article()] if articles is None else articles
    return {"status": "ok", "totalResults": len(articles), "articles": articles}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def test_settings():
    return Settings(
        NEWS_API_KEY="test-key",
        NEWS_API_BASE_URL="https://news.test/v2",
        REQUESTS_PER_DAY=100,
        REQUESTS_PER_SECOND=1,
        MAX_RETRIES=3,
        CACHE_TTL_SECONDS=300,
        CACHE_MAX_ENTRIES=50,
        QUEUE_DRAIN_DELAY_SECONDS=1.1,
    )
