from fastapi import APIRouter, Depends, HTTPException

from app.api.errors import handle_api_error
from app.schemas.news import NewsResponse
from app.services.news_dispatcher import NewsDispatcher, get_dispatcher
from app.services.news_service import TRENDING_CACHE_KEY, TRENDING_PARAMS, filter_trending

router = APIRouter(prefix="/api", tags=["Trending"])


@router.get("/trending", response_model=NewsResponse)
async def trending(dispatcher: NewsDispatcher = Depends(get_dispatcher)) -> dict:
    try:
        url = dispatcher.build_url("topHeadlines", TRENDING_PARAMS)
        data = await dispatcher.fetch(url, None, TRENDING_CACHE_KEY)

        if not isinstance(data.get("articles"), list):
            raise HTTPException(status_code=502, detail="Invalid API response format")

        articles = filter_trending(data)
        if not articles:
            raise HTTPException(status_code=404, detail="No valid articles found")

        return {**data, "articles": articles}
    except HTTPException:
        raise
    except Exception as e:
        raise handle_api_error(e)
