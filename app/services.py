# app/services.py
"""
Meme fetching: Reddit first, meme-api.com when Reddit fails, results cached.

Functions / classes:
- is_meme_post(post): filter rule for a raw Reddit post
- reddit_post_to_meme(post), fallback_item_to_meme(item, subreddit): map upstream shapes onto MemeItem
- placeholder_meme(subreddit): what the fallback returns when it has nothing usable
- MemeService: cache lookup -> ordered fetch stages -> cache store
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import requests

from app import config
from app.cache import CacheBackend, SimpleTTLCache
from app.errors import FallbackExhausted, UpstreamError, UpstreamRejected
from app.models import MemeItem, RequestParams, ResultSet

LOG = logging.getLogger("app.services")

# hosts Reddit serves uploaded media from
MEDIA_HOSTS = ("i.redd.it", "v.redd.it", "preview.redd.it")

# Reddit answers 403 when it blocks the client (datacenter IPs, missing UA, ...)
REDDIT_BLOCKED_STATUS = 403

PLACEHOLDER_AUTHOR = "meme-proxy"
PLACEHOLDER_IMAGE_URL = "https://placehold.co/600x400/png?text=No+memes+available"
PLACEHOLDER_POST_LINK = "https://github.com/D3vd/Meme_Api"

REDDIT_HEADERS = {
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "DNT": "1",
    "Connection": "keep-alive",
    "Sec-Fetch-Dest": "empty",
    "Sec-Fetch-Mode": "cors",
    "Sec-Fetch-Site": "same-origin",
}


def is_meme_post(post: Dict[str, Any]) -> bool:
    """Direct media url, not pinned, not NSFW, has a title."""
    url = post.get("url")
    return (
        isinstance(url, str)
        and any(host in url for host in MEDIA_HOSTS)
        and not post.get("stickied")
        and not post.get("over_18")
        and bool(post.get("title"))
    )


def reddit_post_to_meme(post: Dict[str, Any]) -> MemeItem:
    return MemeItem(
        postLink=f"https://redd.it/{post.get('id', '')}",
        subreddit=post.get("subreddit") or "",
        title=post["title"],
        url=post["url"],
        nsfw=bool(post.get("over_18") or False),
        spoiler=bool(post.get("spoiler") or False),
        author=post.get("author") or "unknown",
        ups=int(post.get("ups") or 0),
    )


def fallback_item_to_meme(item: Dict[str, Any], subreddit: str) -> MemeItem:
    return MemeItem(
        postLink=item.get("postLink") or "",
        subreddit=item.get("subreddit") or subreddit,
        title=item.get("title") or "",
        url=item["url"],
        nsfw=bool(item.get("nsfw") or False),
        spoiler=bool(item.get("spoiler") or False),
        author=item.get("author") or "unknown",
        ups=int(item.get("ups") or 0),
    )


def placeholder_meme(subreddit: str) -> MemeItem:
    return MemeItem(
        postLink=PLACEHOLDER_POST_LINK,
        subreddit=subreddit,
        title="No memes available right now, try again later",
        url=PLACEHOLDER_IMAGE_URL,
        author=PLACEHOLDER_AUTHOR,
    )


def _excerpt(text: str, limit: int = 200) -> str:
    text = (text or "").strip()
    return text if len(text) <= limit else text[:limit] + "..."


class MemeService:
    """Fetch pipeline behind /give.

    The cache and the HTTP session are injected so tests (or a shared store)
    can replace them. Stages run strictly one after the other: a stage either
    returns a ResultSet or raises UpstreamError, in which case the next one is
    tried.
    """

    def __init__(
        self,
        cache: Optional[CacheBackend] = None,
        session: Optional[Any] = None,
        reddit_base: str = config.REDDIT_API_BASE,
        fallback_base: str = config.FALLBACK_API_BASE,
        timeout: float = config.REQUEST_TIMEOUT,
    ):
        self.cache = cache if cache is not None else SimpleTTLCache(ttl=config.CACHE_TTL)
        # no shared Session by default: module-level requests.get is safe across worker threads
        self.session = session if session is not None else requests
        self.reddit_base = reddit_base.rstrip("/")
        self.fallback_base = fallback_base.rstrip("/")
        self.timeout = timeout
        self.stages: Sequence[Tuple[str, Callable[[RequestParams], ResultSet]]] = (
            ("reddit", self.fetch_from_reddit),
            ("meme-api", self.fetch_from_fallback),
        )

    # --- pipeline ---

    def get_memes(self, params: RequestParams) -> ResultSet:
        key = params.cache_key
        cached = self.cache.get(key)
        if cached is not None:
            LOG.debug(f"cache hit for {key}")
            return cached

        result = self._run_stages(params)
        self.cache.set(key, result)
        return result

    def _run_stages(self, params: RequestParams) -> ResultSet:
        failures: List[str] = []
        for name, stage in self.stages:
            try:
                result = stage(params)
            except UpstreamError as e:
                LOG.warning(
                    f"source '{name}' failed for r/{params.subreddit} count={params.count}: {e.message}"
                )
                failures.append(f"{name}: {e.message}")
                continue
            LOG.info(f"r/{params.subreddit} count={params.count}: {result.count} memes from '{name}'")
            return result

        message = "All meme sources are unavailable (" + "; ".join(failures) + ")"
        LOG.error(message)
        raise FallbackExhausted(message)

    # --- stages ---

    def _get_json(self, source: str, url: str, blocked_status: Optional[int] = None, **kwargs) -> Any:
        try:
            resp = self.session.get(url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            LOG.error(f"{source} request to {url} failed: {e}")
            raise UpstreamError(source, f"{source} unreachable: {e}")

        if blocked_status is not None and resp.status_code == blocked_status:
            LOG.error(f"{source} rejected request to {url}: {_excerpt(resp.text)}")
            raise UpstreamRejected(
                source,
                "Reddit is temporarily blocking requests, please try again later",
                upstream_status=resp.status_code,
            )
        if not 200 <= resp.status_code < 300:
            body = _excerpt(resp.text)
            LOG.error(f"{source} API response {resp.status_code} for {url}: {body}")
            raise UpstreamError(
                source, f"{source} API error: {resp.status_code} - {body}", upstream_status=resp.status_code
            )

        try:
            return resp.json()
        except ValueError as e:
            LOG.error(f"{source} returned a non-JSON body for {url}: {e}")
            raise UpstreamError(source, f"Invalid {source} response", upstream_status=resp.status_code)

    def fetch_from_reddit(self, params: RequestParams) -> ResultSet:
        """Hot listing of the subreddit, over-fetched (2x) to make up for filtered posts."""
        url = f"{self.reddit_base}/{params.subreddit}/hot.json"
        limit = min(params.count * 2, 100)
        headers = dict(REDDIT_HEADERS, **{"User-Agent": config.USER_AGENT})
        data = self._get_json(
            "reddit", url, blocked_status=REDDIT_BLOCKED_STATUS, params={"limit": limit}, headers=headers
        )

        listing = data.get("data") if isinstance(data, dict) else None
        children = listing.get("children") if isinstance(listing, dict) else None
        if not isinstance(children, list):
            LOG.error(f"Reddit response for r/{params.subreddit} has no data.children envelope")
            raise UpstreamError("reddit", "Invalid Reddit response")

        memes: List[MemeItem] = []
        for child in children:
            post = child.get("data") if isinstance(child, dict) else None
            if not isinstance(post, dict) or not is_meme_post(post):
                continue
            try:
                meme = reddit_post_to_meme(post)
            except (TypeError, ValueError) as e:
                LOG.error(f"Reddit post {post.get('id')!r} in r/{params.subreddit} is malformed: {e}")
                raise UpstreamError("reddit", "Invalid Reddit response")
            memes.append(meme)
            if len(memes) >= params.count:
                break
        return ResultSet.from_memes(memes)

    def fetch_from_fallback(self, params: RequestParams) -> ResultSet:
        url = f"{self.fallback_base}/{params.subreddit}/{params.count}"
        data = self._get_json("meme-api", url)

        if isinstance(data, dict) and isinstance(data.get("memes"), list):
            items = data["memes"]
        elif isinstance(data, dict) and data.get("url"):
            # /gimme without a count answers with a single meme
            items = [data]
        else:
            items = []

        memes: List[MemeItem] = []
        for item in items:
            if not isinstance(item, dict) or not item.get("url"):
                continue
            try:
                memes.append(fallback_item_to_meme(item, params.subreddit))
            except (TypeError, ValueError) as e:
                LOG.warning(f"skipping malformed meme-api item for r/{params.subreddit}: {e}")
        if not memes:
            LOG.warning(f"meme-api returned no usable memes for r/{params.subreddit}; using placeholder")
            memes = [placeholder_meme(params.subreddit)]
        return ResultSet.from_memes(memes[: params.count])
