import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import yaml

from footy.config import PLACEHOLDER_URL

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
PROMPTS_FILE = "prompts.yaml"

# Canned queries the feeds send; they hit the matching intents below
LATEST_NEWS_QUERY = "latest football news"
UPCOMING_MATCHES_QUERY = "upcoming important football matches in Europe"


@dataclass(frozen=True)
class Prompt:
    system: str
    user: str
    max_tokens: int
    intent: str


class _FileCache:
    def __init__(self) -> None:
        self._cache: Dict[str, Tuple[float, Any]] = {}

    def load_yaml(self, path: str) -> Any:
        abspath = os.path.join(DATA_DIR, path)
        mtime = os.path.getmtime(abspath)
        cached = self._cache.get(abspath)
        if cached and cached[0] == mtime:
            return cached[1]
        with open(abspath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        self._cache[abspath] = (mtime, data)
        return data


_cache = _FileCache()


def get_catalog() -> Dict[str, Any]:
    return _cache.load_yaml(PROMPTS_FILE)


def get_intents() -> List[Dict[str, Any]]:
    return get_catalog().get("news", {}).get("intents", [])


def classify(query: str) -> Optional[Dict[str, Any]]:
    """Return the canned intent whose phrase occurs in the query, if any."""
    q = (query or "").lower()
    for intent in get_intents():
        if intent["match"].lower() in q:
            return intent
    return None


def news_prompt(query: str) -> Prompt:
    """
    Build the news prompt for a free-text query.

    Canned intents ("latest football news", "upcoming important football
    matches in europe") win over the per-entity template.
    """
    section = get_catalog()["news"]
    intent = classify(query)
    if intent is not None:
        user = intent["prompt"].format(placeholder_url=PLACEHOLDER_URL)
        name = intent["name"]
    else:
        user = section["entity"].format(query=query, placeholder_url=PLACEHOLDER_URL)
        name = "entity"
    return Prompt(system=section["system"], user=user, max_tokens=int(section["max_tokens"]), intent=name)


def summary_prompt(title: str) -> Prompt:
    section = get_catalog()["summary"]
    return Prompt(
        system=section["system"],
        user=section["prompt"].format(title=title),
        max_tokens=int(section["max_tokens"]),
        intent="summary",
    )
