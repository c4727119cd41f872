from datetime import datetime, timedelta, timezone

from footy import feeds, gateway
from footy.config import PLACEHOLDER_URL
from footy.errors import NoResultsError, RateLimitedError, TransportError
from footy.prompts import LATEST_NEWS_QUERY, UPCOMING_MATCHES_QUERY
from footy.store import MemoryStorage, SubscriptionStore

from conftest import FakeGateway


def test_timeline_success():
    gw = FakeGateway({LATEST_NEWS_QUERY: ["Derby day"], UPCOMING_MATCHES_QUERY: ["PSG v Inter", "Real v City"]})
    out = feeds.timeline(gw)
    assert [i.title for i in out.news] == ["Derby day"]
    assert [i.title for i in out.upcoming] == ["PSG v Inter", "Real v City"]
    assert out.error is None


def test_timeline_failures_become_placeholders():
    gw = FakeGateway({LATEST_NEWS_QUERY: RateLimitedError(), UPCOMING_MATCHES_QUERY: TransportError("down")})
    out = feeds.timeline(gw)

    assert [i.title for i in out.news] == [feeds.TIMELINE_FAILED]
    assert [i.title for i in out.upcoming] == [feeds.UPCOMING_FAILED]
    placeholder = out.news[0]
    assert placeholder.date == gateway.today_utc()
    assert placeholder.url == PLACEHOLDER_URL
    assert out.error == "Rate limit exceeded for xAI API\nFailed to fetch news from xAI"


def test_subscription_feed_walks_buckets_in_order():
    storage = MemoryStorage({
        "leagues": ["Premier League"],
        "teams": ["Arsenal", "Chelsea"],
        "players": [],
        "tournaments": ["Champions League"],
    })
    gw = FakeGateway({
        "Premier League": ["PL title race"],
        "Arsenal": ["Arsenal win"],
        "Chelsea": NoResultsError("nothing"),
        "Champions League": ["UCL draw"],
    })
    out = feeds.subscription_feed(gw, SubscriptionStore(storage))

    assert gw.queries == ["Premier League", "Arsenal", "Chelsea", "Champions League"]
    assert [i.title for i in out.news] == ["PL title race", "Arsenal win", feeds.NEWS_FAILED, "UCL draw"]
    assert out.error == "Failed to fetch news from xAI"


def test_subscription_feed_empty_store(memory_store):
    gw = FakeGateway({})
    out = feeds.subscription_feed(gw, memory_store)
    assert out.news == []
    assert out.error is None
    assert gw.queries == []


def test_repeated_errors_are_reported_once():
    storage = MemoryStorage({"leagues": [], "teams": ["A", "B"], "players": [], "tournaments": []})
    gw = FakeGateway({"A": TransportError("x"), "B": TransportError("y")})
    out = feeds.subscription_feed(gw, SubscriptionStore(storage))
    assert [i.title for i in out.news] == [feeds.NEWS_FAILED, feeds.NEWS_FAILED]
    assert out.error == "Failed to fetch news from xAI"


def test_placeholder_uses_the_utc_day(monkeypatch):
    class _Clock(datetime):
        @classmethod
        def now(cls, tz=None):
            # 2026-10-17 21:00 at UTC-6
            moment = datetime(2026, 10, 18, 3, 0, tzinfo=timezone.utc)
            return moment.astimezone(tz) if tz else moment.astimezone(timezone(timedelta(hours=-6))).replace(tzinfo=None)

    monkeypatch.setattr(gateway, "datetime", _Clock)
    assert feeds.placeholder_item("x").date == "2026-10-18"
