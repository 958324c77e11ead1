"""Response models for ``app.bsky.feed.searchPosts``.

Only the fields the widget renders are declared. Unknown fields are kept
on the model (``extra="allow"``) and never interpreted, so schema
additions upstream do not break parsing.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

_BSKY_APP = "https://bsky.app/profile"


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Author(_Lenient):
    did: str | None = None
    handle: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    avatar: str | None = None


class PostRecord(_Lenient):
    record_type: str | None = Field(default=None, alias="$type")
    text: str | None = None
    created_at: str | None = Field(default=None, alias="createdAt")


class Post(_Lenient):
    uri: str
    cid: str | None = None
    indexed_at: str = Field(alias="indexedAt")
    author: Author | None = None
    record: PostRecord
    repost_count: int | None = Field(default=None, alias="repostCount")
    reply_count: int | None = Field(default=None, alias="replyCount")
    like_count: int | None = Field(default=None, alias="likeCount")
    quote_count: int | None = Field(default=None, alias="quoteCount")

    @property
    def author_handle(self) -> str:
        return (self.author.handle if self.author else None) or ""

    @property
    def rkey(self) -> str:
        """Record key: last path segment of the ``at://`` URI."""
        return self.uri.rsplit("/", 1)[-1]

    @property
    def web_url(self) -> str:
        return f"{_BSKY_APP}/{self.author_handle}/post/{self.rkey}"

    @property
    def author_url(self) -> str:
        return f"{_BSKY_APP}/{self.author_handle}"


class SearchPostsResponse(_Lenient):
    posts: list[Post] = Field(default_factory=list)
    cursor: str | None = None
    hits_total: int | None = Field(default=None, alias="hitsTotal")
