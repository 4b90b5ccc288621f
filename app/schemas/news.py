from typing import List, Optional
from pydantic import BaseModel, Field


class ArticleSource(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None


class Article(BaseModel):
    source: Optional[ArticleSource] = None
    author: Optional[str] = None
    title: str
    description: str
    url: Optional[str] = None
    urlToImage: Optional[str] = None
    publishedAt: Optional[str] = None
    content: Optional[str] = None


class NewsResponse(BaseModel):
    """Article listing as returned by the upstream API after validation."""
    status: str = Field(..., description="Always 'ok' for successful responses")
    totalResults: Optional[int] = None
    articles: List[Article] = Field(default_factory=list)


class NewsSource(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    category: Optional[str] = None
    language: Optional[str] = None
    country: Optional[str] = None


class SourcesResponse(BaseModel):
    status: str
    sources: List[NewsSource] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service status")
    pending: int = Field(..., description="Requests waiting in the dispatch queue")
    draining: bool
    remaining_quota: int = Field(..., description="Upstream calls left in the current day window")
    cached: int = Field(..., description="Entries held by the response cache")
