from pydantic_settings import BaseSettings
from dotenv import load_dotenv, find_dotenv
from os import getenv
from typing import Dict

_env_path = find_dotenv()  # locate a .env file in this folder or parent folders
if _env_path:
    load_dotenv(_env_path)


class Settings(BaseSettings):
    # Upstream news api
    NEWS_API_KEY: str = getenv('NEWS_API_KEY', '')
    NEWS_API_BASE_URL: str = 'https://newsapi.org/v2'
    NEWS_API_ENDPOINTS: Dict[str, str] = {
        'everything': '/everything',
        'topHeadlines': '/top-headlines',
        'sources': '/top-headlines/sources',
    }
    NEWS_API_DEFAULT_PARAMS: Dict[str, str] = {
        'language': 'en',
        'pageSize': '20',
        'sortBy': 'publishedAt',
    }
    USER_AGENT: str = 'NewsHub/1.0'
    REQUEST_TIMEOUT_SECONDS: float = 30

    # Rate limiting (free tier limits)
    REQUESTS_PER_DAY: int = 100
    REQUESTS_PER_SECOND: float = 1
    MAX_RETRIES: int = 3
    DEFAULT_RETRY_AFTER_SECONDS: int = 5
    QUEUE_DRAIN_DELAY_SECONDS: float = 1.1

    # Response cache
    CACHE_TTL_SECONDS: float = 5 * 60
    CACHE_MAX_ENTRIES: int = 500

    LOG_LEVEL: str = getenv('LOG_LEVEL', 'INFO')


settings = Settings()
