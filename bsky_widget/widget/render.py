"""HTML rendering for the Glance widget."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from html import escape
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bsky_widget.bluesky.models import Post
    from bsky_widget.widget.params import WidgetParams

NO_TAGS_HINT = "No tags specified. Try ?tags=rust,actix&limit=5"
NO_POSTS = "No posts found for those hashtags."

_HEADER = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8"/>
    <title>Bluesky Hashtag Viewer</title>
    <style>
        .post-container {{
            margin-bottom: 1em;
            padding: 0.5em;
            border: 1px solid #ccc;
            text-align: left;
        }}
        .post-text {{ margin: 0; font-size: 1em; }}
        .post-text a {{ color: #{text_color}; text-decoration: none; }}
        .post-text a:hover {{ color: #{text_hover_color}; text-decoration: none; }}
        .post-author, .post-stats {{
            margin: 0.25em 0 0 0;
            font-size: 0.85em;
            color: #{author_color};
        }}
        .post-author a, .post-stats a {{ color: inherit; text-decoration: none; }}
        .post-author a:hover, .post-stats a:hover {{
            color: #{author_hover_color};
            text-decoration: none;
        }}
    </style>
</head>
<body>
"""

_POST = """<li class="post-container">
    <p class="post-text"><a href="{post_url}">{text}</a></p>
    <p class="post-author">
        <a href="{author_url}">{handle}</a>
        &nbsp;&middot;&nbsp;
        {created_at}
    </p>
    <p class="post-stats">
        Likes: {likes} &nbsp;&middot;&nbsp;
        Quotes: {quotes} &nbsp;&middot;&nbsp;
        Replies: {replies} &nbsp;&middot;&nbsp;
        Reposts: {reposts}
    </p>
</li>"""


def render_header(params: WidgetParams) -> str:
    return _HEADER.format(
        text_color=escape(params.text_color),
        text_hover_color=escape(params.text_hover_color),
        author_color=escape(params.author_color),
        author_hover_color=escape(params.author_hover_color),
    )


def render_message(message: str) -> str:
    """A plain paragraph, used for hints and errors."""
    return f"<p>{escape(message)}</p>"


def render_debug(query: Iterable[tuple[str, str]] | Mapping[str, str]) -> str:
    """List the raw query parameters."""
    items = query.items() if isinstance(query, Mapping) else query
    lines = ['<p class="size-h1">Parameters:</p>']
    lines.extend(f"<p><strong>{escape(k)}:</strong> {escape(v)}</p>" for k, v in items)
    return "".join(lines)


def render_post(post: Post) -> str:
    return _POST.format(
        post_url=escape(post.web_url),
        text=escape(post.record.text or "<no text>"),
        author_url=escape(post.author_url),
        handle=escape(post.author_handle),
        created_at=escape(post.record.created_at or "<unknown date>"),
        likes=post.like_count or 0,
        quotes=post.quote_count or 0,
        replies=post.reply_count or 0,
        reposts=post.repost_count or 0,
    )


def render_posts(posts: Sequence[Post], collapse_after: int) -> str:
    if not posts:
        return render_message(NO_POSTS)
    items = "".join(render_post(p) for p in posts)
    return (
        f'<ul class="list collapsible-container" data-collapse-after="{collapse_after}">'
        f"{items}</ul>"
    )
