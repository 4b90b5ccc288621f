import asyncio
from datetime import datetime
from typing import Any, Dict, List
from urllib.parse import urlencode

from app.config.settings import settings
from app.services.news_dispatcher import NewsDispatcher
from app.services.validation import is_displayable_article
from app.utils.log import app_logger

STUDENT_QUERIES: Dict[str, List[str]] = {
    "ai": [
        "artificial intelligence education",
        "machine learning students",
        "ChatGPT education",
        "AI learning tools",
        "generative AI education",
    ],
    "programming": [
        "programming education",
        "coding students",
        "web development learning",
        "software development education",
        "programming tools students",
    ],
    "tech": [
        "technology education",
        "tech innovation students",
        "digital learning",
        "edtech news",
        "technology students",
    ],
    "science": [
        "science education news",
        "scientific discoveries students",
        "science learning",
        "research education",
        "science innovations students",
    ],
    "all": [
        "education technology",
        "student innovation",
        "learning technology",
        "education news",
        "student technology",
    ],
}

TRENDING_PARAMS = {"country": "us", "category": "general", "pageSize": "10", "language": "en"}
TRENDING_CACHE_KEY = "trending-news"


def format_news_query_params(params: Dict[str, Any]) -> Dict[str, str]:
    """overlay caller params on the configured defaults, dropping unset values"""
    formatted = dict(settings.NEWS_API_DEFAULT_PARAMS)
    formatted.update({k: str(v) for k, v in params.items() if v is not None and v != ''})
    formatted["page"] = str(params.get("page") or "1")
    formatted["pageSize"] = str(params.get("pageSize") or settings.NEWS_API_DEFAULT_PARAMS.get("pageSize", "20"))
    return formatted


def news_cache_key(prefix: str, params: Dict[str, Any]) -> str:
    """deterministic key covering every forwarded parameter"""
    return f"{prefix}-{urlencode(sorted(params.items()))}"


def _published_at(article: Dict[str, Any]) -> float:
    value = article.get("publishedAt")
    if not isinstance(value, str):
        return 0.0
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()
    except ValueError:
        return 0.0


def merge_articles(responses: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten several responses into one feed.

    Keeps only articles with an image, deduplicates by title (the last copy
    wins, first position kept) and sorts newest first.
    """
    by_title: Dict[str, Dict[str, Any]] = {}
    for response in responses:
        for article in (response or {}).get("articles") or []:
            if is_displayable_article(article, require_image=True):
                by_title[article["title"]] = article
    return sorted(by_title.values(), key=_published_at, reverse=True)


def filter_trending(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [
        a for a in data["articles"]
        if is_displayable_article(a, require_image=True)
    ]


async def fetch_student_feed(dispatcher: NewsDispatcher, category: str,
                             page: int, page_size: int) -> Dict[str, Any]:
    category = category if category in STUDENT_QUERIES else "all"
    queries = STUDENT_QUERIES[category]

    async def run(q: str) -> Dict[str, Any]:
        params = {"q": q, "language": "en", "sortBy": "publishedAt",
                  "page": str(page), "pageSize": str(page_size)}
        url = dispatcher.build_url("everything", params)
        return await dispatcher.fetch(url, None, f"student-{category}-{q}-{page}-{page_size}")

    responses = await asyncio.gather(*(run(q) for q in queries))
    articles = merge_articles(responses)

    start = (page - 1) * page_size
    page_articles = articles[start:start + page_size]
    app_logger.info("student_feed.built", category=category, queries=len(queries),
                    total=len(articles), returned=len(page_articles))
    return {"status": "ok", "totalResults": len(articles), "articles": page_articles}
