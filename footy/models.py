from pydantic import BaseModel, Field
from typing import List, Optional


class Subscriptions(BaseModel):
    leagues: List[str] = Field(default_factory=list)
    teams: List[str] = Field(default_factory=list)
    players: List[str] = Field(default_factory=list)
    tournaments: List[str] = Field(default_factory=list)


class NewsItem(BaseModel):
    id: str
    title: str
    date: str
    url: str


class NewsResponse(BaseModel):
    news: List[NewsItem]


class FeedResponse(BaseModel):
    news: List[NewsItem]
    error: Optional[str] = None


class TimelineResponse(BaseModel):
    news: List[NewsItem]
    upcoming: List[NewsItem]
    error: Optional[str] = None


class SummaryResponse(BaseModel):
    summary: str
    error: Optional[str] = None


class OperationResponse(BaseModel):
    success: bool
    error: Optional[str] = None
