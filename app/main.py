from fastapi import FastAPI
from contextlib import asynccontextmanager
from app.api.news import router as news_router
from app.api.trending import router as trending_router
from app.api.student_news import router as student_news_router
from app.api.health import router as health_router
from app.services.news_dispatcher import NewsDispatcher
from app.utils.log import app_logger

@asynccontextmanager
async def lifespan(app: FastAPI):
    # one dispatcher per process, owned by the app
    app.state.dispatcher = NewsDispatcher()
    app_logger.info("app.startup")
    yield
    await app.state.dispatcher.close()
    app_logger.info("app.shutdown")

app = FastAPI(title="NewsHub", lifespan=lifespan)

# include routes
app.include_router(news_router)
app.include_router(trending_router)
app.include_router(student_news_router)
app.include_router(health_router)
