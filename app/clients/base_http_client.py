# clients/base_http_client.py
import requests

from typing import Dict, Any, Optional
from urllib.parse import urljoin, urlencode
from abc import ABC
from app.utils.log import app_logger


class BaseHTTPClient(ABC):
    """Base HTTP client holding a session, default headers and authentication.

    `send` performs exactly one request. Retries, backoff and pacing belong
    to the dispatcher, which has to account for every call against the
    upstream quota.
    """

    def __init__(self,
                 base_url: str,
                 api_key: Optional[str] = None,
                 timeout: float = 30,
                 user_agent: str = 'NewsHub/1.0',
                 accept: Optional[str] = 'application/json'
                 ):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.user_agent = user_agent
        self.accept = accept
        self.session = requests.Session()

        # setup default headers
        self._setup_default_headers()

    def _setup_default_headers(self):
        """setup default headers for the client"""
        self.session.headers.update({
            'User-Agent': self.user_agent,
            'Accept': self.accept,
        })

        # add authentication header if api_key is provided
        if self.api_key:
            self._setup_authentication()

    def _setup_authentication(self):
        """setup authentication with API key (can be overridden)"""
        pass

    def _build_url(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> str:
        """build full URL, dropping empty query values"""
        url = urljoin(f"{self.base_url}/", endpoint.lstrip('/'))
        query = {
            k: str(v) for k, v in (params or {}).items()
            if v is not None and v != ''
        }
        return f"{url}?{urlencode(query)}" if query else url

    def send(self, url: str, options: Optional[Dict[str, Any]] = None) -> requests.Response:
        """do a single HTTP request; `options` may carry method, headers and timeout"""
        options = options or {}
        method = options.get('method', 'GET')
        app_logger.debug("request.send", method=method, url=url)
        return self.session.request(
            method=method,
            url=url,
            headers=options.get('headers'),
            timeout=options.get('timeout', self.timeout),
        )

    def close(self):
        """close HTTP session"""
        self.session.close()
