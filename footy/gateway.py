# footy/gateway.py
from __future__ import annotations
from typing import List, Dict, Any, Optional, Callable
from datetime import datetime, timezone
import uuid

import httpx

from footy import config
from footy.errors import (
    AuthError,
    GatewayError,
    InvalidQuery,
    NoResultsError,
    SummaryUnavailableError,
    TransportError,
    UpstreamError,
    error_for_status,
)
from footy.logging_config import get_logger
from footy.models import NewsItem
from footy.prompts import Prompt, news_prompt, summary_prompt

logger = get_logger(__name__)

USER_AGENT = "Footy/1.0"

# ------------------ REPLY PARSING (best effort) -------------------------------

def today_utc() -> str:
    """Current UTC day as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()

def _new_id() -> str:
    return uuid.uuid4().hex

def parse_news(
    text: str,
    today: Optional[Callable[[], str]] = None,
    placeholder_url: str = config.PLACEHOLDER_URL,
) -> List[NewsItem]:
    """
    Turn the model's free-text reply into news items.

    One item per non-empty line, fields split on "|" as title | date | url.
    Missing or blank date/url fall back to today / the placeholder URL and
    anything past the third field is ignored. Lines never get rejected.
    """
    today = today or today_utc
    items: List[NewsItem] = []
    for raw_line in (text or "").splitlines():
        line = raw_line.strip()
        if not line:
            continue
        parts = [p.strip() for p in line.split("|")]
        title = parts[0]
        day = parts[1] if len(parts) > 1 and parts[1] else today()
        url = parts[2] if len(parts) > 2 and parts[2] else placeholder_url
        items.append(NewsItem(id=_new_id(), title=title, date=day, url=url))
    return items

def _upstream_message(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        msg = body["error"].get("message")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()
    return None

def _reply_content(body: Any) -> str:
    """Pull choices[0].message.content out of a chat-completion body."""
    if not isinstance(body, dict):
        raise UpstreamError("Malformed response from xAI API", status_code=502)
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            raise UpstreamError(str(err["message"]), status_code=502)
        raise UpstreamError("Malformed response from xAI API", status_code=502)
    first = choices[0] if isinstance(choices[0], dict) else {}
    message = first.get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""

# ---------------------------------------------------------------------------

class NewsGateway:
    """
    Single-shot client for the upstream chat-completion endpoint.

    Each public call is exactly one POST to {base_url}/chat/completions.
    Nothing is retried; every failure surfaces as a GatewayError subclass.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._client = client
        self.api_key = config.XAI_API_KEY if api_key is None else api_key
        self.base_url = (base_url or config.XAI_BASE_URL).rstrip("/")
        self.model = model or config.XAI_MODEL
        self.timeout = config.UPSTREAM_TIMEOUT if timeout is None else timeout

    # --- public operations ---

    def fetch_news(self, query: str) -> List[NewsItem]:
        if not isinstance(query, str) or not query.strip():
            raise InvalidQuery()
        prompt = news_prompt(query)
        text = self._complete(prompt)
        items = parse_news(text)
        if not items:
            logger.warning("no news parsed from upstream reply (intent=%s, query=%r)", prompt.intent, query)
            raise NoResultsError("No news or game data returned from xAI API")
        logger.info("fetched %d news items (intent=%s, query=%r)", len(items), prompt.intent, query)
        return items

    def summarize(self, title: str) -> str:
        if not isinstance(title, str) or not title.strip():
            raise InvalidQuery("Invalid news title")
        text = self._complete(summary_prompt(title)).strip()
        if not text:
            logger.warning("empty summary from upstream (title=%r)", title)
            raise SummaryUnavailableError("No summary returned from xAI API")
        return text

    # --- transport ---

    def _payload(self, prompt: Prompt) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user},
            ],
            "max_tokens": prompt.max_tokens,
        }

    def _post(self, client: httpx.Client, payload: Dict[str, Any]) -> httpx.Response:
        kwargs: Dict[str, Any] = {
            "json": payload,
            "headers": {
                "Authorization": f"Bearer {self.api_key}",
                "User-Agent": USER_AGENT,
            },
        }
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return client.post(f"{self.base_url}/chat/completions", **kwargs)

    def _complete(self, prompt: Prompt) -> str:
        if not self.api_key:
            logger.error("xAI API key is not configured (set XAI_API_KEY)")
            raise AuthError()

        payload = self._payload(prompt)
        try:
            if self._client is not None:
                resp = self._post(self._client, payload)
            else:
                with httpx.Client() as client:
                    resp = self._post(client, payload)
        except httpx.HTTPError as e:
            # no response at all: DNS, connect, timeout, protocol
            logger.error("upstream request failed: %s", e, extra={"event": "gateway.transport_error", "intent": prompt.intent})
            raise TransportError(f"Request to xAI API failed: {e}") from e

        if not resp.is_success:
            upstream_msg = _upstream_message(resp)
            err = error_for_status(resp.status_code, upstream_msg)
            logger.error(
                "upstream returned %s: %s", resp.status_code, upstream_msg or "-",
                extra={"event": "gateway.upstream_error", "status": resp.status_code, "intent": prompt.intent},
            )
            raise err

        try:
            body = resp.json()
        except ValueError as e:
            logger.error("upstream body is not JSON (status=%s)", resp.status_code)
            raise UpstreamError("Malformed response from xAI API", status_code=502) from e
        try:
            return _reply_content(body)
        except GatewayError:
            logger.error("unusable upstream body (status=%s)", resp.status_code, extra={"event": "gateway.bad_body"})
            raise
