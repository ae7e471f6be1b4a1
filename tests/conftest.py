# tests/conftest.py
import sys
import os
import json
from unittest.mock import Mock

import pytest
import requests

# --- ensure project root is on sys.path ---
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.cache import SimpleTTLCache
from app.services import MemeService

REDDIT_BASE = "https://reddit.test/r"
FALLBACK_BASE = "https://memeapi.test/gimme"


class FakeClock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def fake_response(status: int = 200, payload=None, text: str | None = None):
    """Stand-in for requests.Response; payload=None means the body is not JSON."""
    resp = Mock()
    resp.status_code = status
    if payload is None:
        resp.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        resp.text = text if text is not None else "<html>nope</html>"
    else:
        resp.json.return_value = payload
        resp.text = text if text is not None else json.dumps(payload)
    return resp


def reddit_post(i: int, **overrides) -> dict:
    post = {
        "id": f"p{i}",
        "subreddit": "memes",
        "title": f"meme {i}",
        "url": f"https://i.redd.it/img{i}.jpg",
        "author": f"user{i}",
        "ups": 100 + i,
        "stickied": False,
        "over_18": False,
        "spoiler": False,
    }
    post.update(overrides)
    return {"kind": "t3", "data": post}


def reddit_listing(*children) -> dict:
    return {"kind": "Listing", "data": {"after": None, "children": list(children)}}


def fallback_item(i: int, **overrides) -> dict:
    item = {
        "postLink": f"https://redd.it/f{i}",
        "subreddit": "memes",
        "title": f"fallback meme {i}",
        "url": f"https://i.redd.it/f{i}.png",
        "nsfw": False,
        "spoiler": False,
        "author": f"fuser{i}",
        "ups": 10 + i,
        "preview": [],
    }
    item.update(overrides)
    return item


class FakeUpstreams:
    """Session double: answers Reddit and meme-api urls with queued responses.

    A queued item may be an exception instance, which is raised instead.
    """

    def __init__(self):
        self.reddit = []
        self.fallback = []
        self.session = Mock(spec=requests.Session)
        self.session.get.side_effect = self._get

    def _get(self, url, **kwargs):
        queue = self.reddit if url.startswith(REDDIT_BASE) else self.fallback
        if not queue:
            raise AssertionError(f"unexpected request to {url}")
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def urls(self):
        return [c.args[0] for c in self.session.get.call_args_list]

    @property
    def calls(self) -> int:
        return self.session.get.call_count


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstreams():
    return FakeUpstreams()


@pytest.fixture
def service(clock, upstreams):
    return MemeService(
        cache=SimpleTTLCache(ttl=300, clock=clock),
        session=upstreams.session,
        reddit_base=REDDIT_BASE,
        fallback_base=FALLBACK_BASE,
        timeout=5,
    )
