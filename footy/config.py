# footy/config.py
import logging
import math
import os
from typing import Dict, Optional

logger = logging.getLogger(__name__)


def parse_timeout(raw: Optional[str]) -> Optional[float]:
    """Seconds from FOOTY_UPSTREAM_TIMEOUT; None (httpx default) when unset or unusable."""
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning("ignoring FOOTY_UPSTREAM_TIMEOUT=%r: not a number", raw)
        return None
    if not math.isfinite(value) or value <= 0:
        logger.warning("ignoring FOOTY_UPSTREAM_TIMEOUT=%r: must be a positive number", raw)
        return None
    return value


# Upstream chat-completion API (xAI speaks the OpenAI wire format)
XAI_API_KEY = os.environ.get("XAI_API_KEY", "")
XAI_BASE_URL = os.environ.get("FOOTY_XAI_BASE_URL", "https://api.x.ai/v1")
XAI_MODEL = os.environ.get("FOOTY_XAI_MODEL", "grok-beta")

# None keeps the httpx client default
UPSTREAM_TIMEOUT = parse_timeout(os.environ.get("FOOTY_UPSTREAM_TIMEOUT"))

# Subscriptions live in one JSON document next to the process
SUBSCRIPTIONS_PATH = os.environ.get("FOOTY_SUBSCRIPTIONS_PATH", "subscriptions.json")

LOG_LEVEL = os.environ.get("FOOTY_LOG_LEVEL", "INFO")

PLACEHOLDER_URL = "https://example.com/placeholder"

# Canonical category name -> bucket on the subscription document
CATEGORY_BUCKETS: Dict[str, str] = {
    "league": "leagues",
    "team": "teams",
    "player": "players",
    "tournament": "tournaments",
}

# Bucket order used when walking every subscription
BUCKET_ORDER = ("leagues", "teams", "players", "tournaments")
