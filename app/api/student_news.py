from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.errors import handle_api_error
from app.schemas.news import NewsResponse
from app.services.news_dispatcher import NewsDispatcher, get_dispatcher
from app.services.news_service import fetch_student_feed

router = APIRouter(prefix="/api", tags=["Student_News"])


@router.get(
    "/student-news",
    response_model=NewsResponse,
    summary="Curated student tech feed",
    description="Expands the category into several searches, then merges, "
                "deduplicates and sorts the results newest first.",
)
async def student_news(
    category: str = "all",
    page: int = Query(1, ge=1),
    page_size: int = Query(12, alias="pageSize", ge=1, le=100),
    dispatcher: NewsDispatcher = Depends(get_dispatcher),
) -> dict:
    try:
        feed = await fetch_student_feed(dispatcher, category, page, page_size)
        if not feed["articles"]:
            raise HTTPException(status_code=404, detail="No articles found for the given category")
        return feed
    except HTTPException:
        raise
    except Exception as e:
        raise handle_api_error(e)
