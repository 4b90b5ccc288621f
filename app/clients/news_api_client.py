from typing import Any, Dict, Optional

from app.clients.base_http_client import BaseHTTPClient
from app.config.settings import Settings, settings as default_settings


class NewsApiClient(BaseHTTPClient):
    def __init__(self, config: Optional[Settings] = None):
        config = config or default_settings
        self.endpoints = dict(config.NEWS_API_ENDPOINTS)
        super().__init__(
            base_url=config.NEWS_API_BASE_URL,
            api_key=config.NEWS_API_KEY,
            timeout=config.REQUEST_TIMEOUT_SECONDS,
            user_agent=config.USER_AGENT,
        )

    def _setup_authentication(self):
        # header only, so request URLs can be logged as-is
        self.session.headers['X-Api-Key'] = self.api_key

    def build_url(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> str:
        """ build the upstream URL for one of `everything`, `topHeadlines`, `sources` """
        if endpoint not in self.endpoints:
            raise ValueError(f"unknown news api endpoint: {endpoint}")
        return self._build_url(self.endpoints[endpoint], params)
