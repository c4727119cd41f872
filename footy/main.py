# footy/main.py
"""
Footy API.

This file:
- Exposes subscription CRUD over the JSON-backed SubscriptionStore
- Proxies news and summary queries to the xAI chat-completion gateway
- Serves the aggregated timeline and per-subscription feeds
- Maps every store/gateway error to a JSON error body with a matching status
"""

import json
import re
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from footy import config, feeds
from footy.errors import FootyError, InvalidCategory, PersistenceError
from footy.gateway import NewsGateway
from footy.logging_config import get_logger, setup_logging
from footy.models import (
    FeedResponse,
    NewsResponse,
    OperationResponse,
    Subscriptions,
    SummaryResponse,
    TimelineResponse,
)
from footy.store import SubscriptionStore

logger = get_logger(__name__)

# letters (any script), digits, spaces and hyphens
_TERM_RE = re.compile(r"^(?:[^\W_]|[\s-])+$")

def valid_term(term: Any) -> bool:
    return isinstance(term, str) and bool(term.strip()) and bool(_TERM_RE.match(term.strip()))

def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())

# --- dependencies (overridden in tests) ---
def get_store() -> SubscriptionStore:
    return SubscriptionStore()

def get_gateway() -> NewsGateway:
    return NewsGateway()

@asynccontextmanager
async def lifespan(_app: FastAPI):
    setup_logging(config.LOG_LEVEL)
    yield

app = FastAPI(title="Footy", lifespan=lifespan)

@app.exception_handler(FootyError)
async def _footy_error(request: Request, exc: FootyError):
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.user_message})

@app.get("/health")
@app.get("/healthz")
def _health():
    return {"status": "ok"}

# --- subscriptions ---

@app.get("/api/subscriptions", response_model=Subscriptions)
def _subscriptions_get(store: SubscriptionStore = Depends(get_store)):
    return store.load()

def _subscription_op(payload: Dict[str, Any], op, invalid_msg: str, failed_msg: str, check_term) -> JSONResponse:
    term = payload.get("term") if isinstance(payload, dict) else None
    category = payload.get("category") if isinstance(payload, dict) else None
    if not check_term(term) or not _is_text(category):
        return JSONResponse(status_code=400, content=OperationResponse(success=False, error=invalid_msg).model_dump())
    try:
        op(term.strip(), category)
    except InvalidCategory:
        return JSONResponse(status_code=400, content=OperationResponse(success=False, error="Invalid category").model_dump())
    except PersistenceError as e:
        logger.error("subscription change failed: %s", e, extra={"event": "subscriptions.op_failed", "term": term, "category": category})
        return JSONResponse(status_code=500, content=OperationResponse(success=False, error=failed_msg).model_dump())
    return JSONResponse(OperationResponse(success=True).model_dump(exclude_none=True))

@app.post("/api/subscriptions")
def _subscriptions_post(payload: Dict[str, Any], store: SubscriptionStore = Depends(get_store)):
    return _subscription_op(payload, store.add, "Invalid subscription data", "Failed to subscribe", valid_term)

@app.delete("/api/subscriptions")
def _subscriptions_delete(payload: Dict[str, Any], store: SubscriptionStore = Depends(get_store)):
    return _subscription_op(payload, store.remove, "Invalid unsubscribe data", "Failed to unsubscribe", _is_text)

@app.get("/api/subscriptions/news", response_model=FeedResponse)
def _subscriptions_news(
    store: SubscriptionStore = Depends(get_store),
    gateway: NewsGateway = Depends(get_gateway),
):
    return feeds.subscription_feed(gateway, store)

# --- news ---

@app.post("/api/news", response_model=NewsResponse)
def _news(payload: Dict[str, Any], gateway: NewsGateway = Depends(get_gateway)):
    q = payload.get("q")
    if not _is_text(q):
        return JSONResponse(status_code=400, content={"error": "Please provide a valid query"})
    return NewsResponse(news=gateway.fetch_news(q))

@app.post("/api/news/summary", response_model=SummaryResponse)
def _news_summary(payload: Dict[str, Any], gateway: NewsGateway = Depends(get_gateway)):
    news_id, title = payload.get("newsId"), payload.get("title")
    if not _is_text(news_id) or not _is_text(title):
        return JSONResponse(status_code=400, content=SummaryResponse(summary="", error="Invalid news ID or title").model_dump())
    try:
        summary = gateway.summarize(title)
    except FootyError as e:
        logger.error("summary for %r failed: %s", title, e, extra={"event": "summary.failed", "news_id": news_id})
        message = e.user_message if e.status_code in (401, 403, 429) else "Failed to fetch the summary"
        return JSONResponse(status_code=e.status_code, content=SummaryResponse(summary="", error=message).model_dump())
    return SummaryResponse(summary=summary)

@app.get("/api/timeline", response_model=TimelineResponse)
def _timeline(gateway: NewsGateway = Depends(get_gateway)):
    return feeds.timeline(gateway)

# CLI helper (local debug)
def _cli(argv: Optional[list] = None) -> int:
    import sys
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: python -m footy.main <query>")
        return 1
    setup_logging(config.LOG_LEVEL)
    items = NewsGateway().fetch_news(args[0])
    print(json.dumps({"news": [i.model_dump() for i in items]}, ensure_ascii=False, indent=2))
    return 0

if __name__ == "__main__":
    raise SystemExit(_cli())
