"""
Aggregated feeds built on top of the gateway.

These never fail as a whole: a gateway error turns into one placeholder item
with the failure title plus a short message for the error banner.
"""
from __future__ import annotations
from typing import List, Optional, Tuple
import uuid

from footy import config
from footy.errors import FootyError
from footy.gateway import NewsGateway, today_utc
from footy.logging_config import get_logger
from footy.models import FeedResponse, NewsItem, TimelineResponse
from footy.prompts import LATEST_NEWS_QUERY, UPCOMING_MATCHES_QUERY
from footy.store import SubscriptionStore

logger = get_logger(__name__)

NEWS_FAILED = "Couldn’t fetch news."
TIMELINE_FAILED = "Couldn’t fetch timeline news."
UPCOMING_FAILED = "Couldn’t fetch upcoming games."


def placeholder_item(title: str) -> NewsItem:
    return NewsItem(
        id=uuid.uuid4().hex,
        title=title,
        date=today_utc(),
        url=config.PLACEHOLDER_URL,
    )


def _join_errors(errors: List[str]) -> Optional[str]:
    return "\n".join(errors) if errors else None


def collect(gateway: NewsGateway, query: str, failure_title: str = NEWS_FAILED) -> Tuple[List[NewsItem], Optional[str]]:
    try:
        return gateway.fetch_news(query), None
    except FootyError as e:
        logger.warning("feed query %r failed: %s", query, e, extra={"event": "feed.query_failed", "query": query})
        return [placeholder_item(failure_title)], e.user_message


def timeline(gateway: NewsGateway) -> TimelineResponse:
    """Latest news plus the upcoming European fixtures."""
    news, news_err = collect(gateway, LATEST_NEWS_QUERY, TIMELINE_FAILED)
    upcoming, upcoming_err = collect(gateway, UPCOMING_MATCHES_QUERY, UPCOMING_FAILED)
    errors = [e for e in (news_err, upcoming_err) if e]
    return TimelineResponse(news=news, upcoming=upcoming, error=_join_errors(errors))


def subscription_feed(gateway: NewsGateway, store: SubscriptionStore) -> FeedResponse:
    """News for every subscribed term, leagues first, then teams, players, tournaments."""
    subs = store.load()
    news: List[NewsItem] = []
    errors: List[str] = []
    for bucket in config.BUCKET_ORDER:
        for term in getattr(subs, bucket):
            items, err = collect(gateway, term)
            news.extend(items)
            if err and err not in errors:
                errors.append(err)
    return FeedResponse(news=news, error=_join_errors(errors))
