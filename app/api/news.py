from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.errors import handle_api_error
from app.middleware.security import Security
from app.schemas.news import NewsResponse, SourcesResponse
from app.services.news_dispatcher import NewsDispatcher, get_dispatcher
from app.services.news_service import format_news_query_params, news_cache_key
from app.utils.log import app_logger

router = APIRouter(prefix="/api", tags=["News"])


@router.get("/news", response_model=NewsResponse)
async def news(
    q: Optional[str] = None,
    category: Optional[str] = None,
    language: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    page: Optional[int] = None,
    page_size: Optional[int] = Query(None, alias="pageSize"),
    sources: Optional[str] = None,
    domains: Optional[str] = None,
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    dispatcher: NewsDispatcher = Depends(get_dispatcher),
) -> dict:
    """Search everything when `q` is given, otherwise list US top headlines."""
    sec = Security()

    if date_from and not sec.is_valid_date(date_from):
        raise HTTPException(status_code=400, detail="Invalid 'from' date format. Use YYYY-MM-DD")
    if date_to and not sec.is_valid_date(date_to):
        raise HTTPException(status_code=400, detail="Invalid 'to' date format. Use YYYY-MM-DD")
    if category and not sec.is_valid_category(category):
        raise HTTPException(status_code=400, detail="Invalid category")
    if sort_by and not sec.is_valid_sort_by(sort_by):
        raise HTTPException(status_code=400, detail="Invalid sortBy value")
    if language and not sec.is_valid_language(language):
        raise HTTPException(status_code=400, detail="Invalid language code")
    if page is not None and not sec.is_valid_page(page):
        raise HTTPException(status_code=400, detail="Invalid page")
    if page_size is not None and not sec.is_valid_page_size(page_size):
        raise HTTPException(status_code=400, detail="Invalid pageSize. Use a value between 1 and 100")
    if domains:
        domains = sec.normalize_domains(domains)
        if domains is None:
            raise HTTPException(status_code=400, detail="Invalid domains filter")

    params = format_news_query_params({
        "q": q,
        "category": category,
        "language": language,
        "sortBy": sort_by,
        "page": page,
        "pageSize": page_size,
        "sources": sources,
        "domains": domains,
        "from": date_from,
        "to": date_to,
    })

    endpoint = "everything" if q else "topHeadlines"
    if not q:
        params["country"] = "us"

    try:
        url = dispatcher.build_url(endpoint, params)
        return await dispatcher.fetch(url, None, news_cache_key("news", params))
    except HTTPException:
        raise
    except Exception as e:
        raise handle_api_error(e)


@router.get("/sources", response_model=SourcesResponse)
async def sources(
    category: Optional[str] = None,
    language: Optional[str] = None,
    country: Optional[str] = None,
    dispatcher: NewsDispatcher = Depends(get_dispatcher),
) -> dict:
    """List the publishers the upstream API can filter on."""
    sec = Security()
    if category and not sec.is_valid_category(category):
        raise HTTPException(status_code=400, detail="Invalid category")
    if language and not sec.is_valid_language(language):
        raise HTTPException(status_code=400, detail="Invalid language code")

    params = {k: v for k, v in {"category": category, "language": language, "country": country}.items() if v}

    try:
        url = dispatcher.build_url("sources", params)
        data = await dispatcher.fetch(url, None, news_cache_key("sources", params))
        app_logger.debug("api.sources", count=len(data.get("sources") or []))
        return data
    except HTTPException:
        raise
    except Exception as e:
        raise handle_api_error(e)
