from __future__ import annotations

import json
from typing import Callable, Dict, List, Optional, Union

import httpx
import pytest

from footy.errors import FootyError
from footy.gateway import NewsGateway
from footy.models import NewsItem
from footy.store import JsonFileStorage, MemoryStorage, SubscriptionStore


def chat_body(content: str) -> Dict:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }


class Recorder:
    """MockTransport handler that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self._handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def payloads(self) -> List[Dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def make_gateway():
    """
    Build a NewsGateway over httpx.MockTransport.

    Pass `reply` for a 200 chat-completion answer, or `status`/`body` for an
    error answer, or a full `handler`.
    """

    def _make(
        reply: Optional[str] = None,
        status: int = 200,
        body: Optional[Union[Dict, str]] = None,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
        api_key: str = "test-key",
    ):
        if handler is None:
            def handler(request: httpx.Request) -> httpx.Response:
                if reply is not None:
                    return httpx.Response(200, json=chat_body(reply))
                if isinstance(body, str):
                    return httpx.Response(status, text=body)
                return httpx.Response(status, json=body if body is not None else {})
        recorder = Recorder(handler)
        client = httpx.Client(transport=httpx.MockTransport(recorder))
        gateway = NewsGateway(client=client, api_key=api_key, base_url="https://llm.test/v1", model="grok-test")
        return gateway, recorder

    return _make


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def memory_store(memory_storage) -> SubscriptionStore:
    return SubscriptionStore(memory_storage)


@pytest.fixture
def subs_path(tmp_path):
    return tmp_path / "subscriptions.json"


@pytest.fixture
def file_store(subs_path) -> SubscriptionStore:
    return SubscriptionStore(JsonFileStorage(str(subs_path)))


class FakeGateway:
    """Answers fetch_news from a query -> titles (or exception) table."""

    def __init__(self, answers: Dict[str, Union[List[str], FootyError]]) -> None:
        self.answers = answers
        self.queries: List[str] = []

    def fetch_news(self, query: str) -> List[NewsItem]:
        self.queries.append(query)
        answer = self.answers[query]
        if isinstance(answer, Exception):
            raise answer
        return [NewsItem(id=f"{query}-{i}", title=t, date="2025-03-01", url="https://x.com/a") for i, t in enumerate(answer)]
