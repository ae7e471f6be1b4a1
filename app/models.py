# app/models.py
"""
Response / request shapes shared by the service and the routes.

- MemeItem: one post, identical for both sources
- ResultSet: what /give returns on success (and what the cache stores)
- RequestParams: validated (subreddit, count) pair
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

SUBREDDIT_PATTERN = r"^[A-Za-z0-9_]+$"


class MemeItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    postLink: str
    subreddit: str
    title: str
    url: str
    nsfw: bool = False
    spoiler: bool = False
    author: str = "unknown"
    ups: int = 0


class ResultSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    memes: Tuple[MemeItem, ...] = ()

    @classmethod
    def from_memes(cls, memes) -> "ResultSet":
        memes = tuple(memes)
        return cls(count=len(memes), memes=memes)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class RequestParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    subreddit: str = Field(pattern=SUBREDDIT_PATTERN)
    count: int = Field(ge=1, le=100)

    @property
    def cache_key(self) -> str:
        return f"{self.subreddit}_{self.count}"
