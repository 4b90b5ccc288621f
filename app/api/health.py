from fastapi import APIRouter, Depends

from app.schemas.news import HealthResponse
from app.services.news_dispatcher import NewsDispatcher, get_dispatcher

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health(dispatcher: NewsDispatcher = Depends(get_dispatcher)) -> HealthResponse:
    return HealthResponse(status="ok", **dispatcher.stats())
