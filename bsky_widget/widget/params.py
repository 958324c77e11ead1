"""Query-string parsing for the widget endpoint."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

_UNITS: dict[str, str] = {"d": "days", "h": "hours", "m": "minutes", "s": "seconds"}
_HEX_COLOR = re.compile(r"[0-9a-fA-F]{3,8}")


@dataclass(frozen=True, slots=True)
class WidgetParams:
    """Parsed widget options with their defaults."""

    tags: list[str] = field(default_factory=list)
    limit: int = 10
    debug: bool = False
    text_color: str = "000000"
    author_color: str = "666"
    text_hover_color: str = "000000"
    author_hover_color: str = "666"
    since: datetime | None = None
    sort: str = "latest"
    title: str = "Bluesky"
    collapse_after: int = 5


def parse_relative_time(value: str, now: datetime | None = None) -> datetime | None:
    """Turn ``-<n><d|h|m|s>`` (e.g. ``-2d``) into ``now - n units``.

    Returns None for anything else.
    """
    if not value.startswith("-") or len(value) < 3:
        return None
    digits, unit = value[1:-1], value[-1]
    if not (digits.isascii() and digits.isdigit()) or unit not in _UNITS:
        return None
    now = now or datetime.now(UTC)
    try:
        return now - timedelta(**{_UNITS[unit]: int(digits)})
    except (OverflowError, ValueError):
        return None


def _parse_count(raw: str | None, default: int) -> int:
    if raw is None or not (raw.isascii() and raw.isdigit()):
        return default
    return int(raw)


def _parse_bool(raw: str | None, default: bool) -> bool:
    if raw == "true":
        return True
    if raw == "false":
        return False
    return default


def _parse_color(raw: str | None, default: str) -> str:
    # lands inside a <style> block
    if raw is None or not _HEX_COLOR.fullmatch(raw):
        return default
    return raw


def parse_tags(raw: str) -> list[str]:
    """Split ``rust, actix,,web`` into ``["rust", "actix", "web"]``."""
    return [tag for tag in (part.strip() for part in raw.split(",")) if tag]


def parse_params(query: Mapping[str, str]) -> WidgetParams:
    """Build `WidgetParams` from the request query; bad values fall back to defaults."""
    defaults = WidgetParams()
    since_raw = query.get("since", "")
    return WidgetParams(
        tags=parse_tags(query.get("tags", "")),
        limit=_parse_count(query.get("limit"), defaults.limit),
        debug=_parse_bool(query.get("debug"), defaults.debug),
        text_color=_parse_color(query.get("text_color"), defaults.text_color),
        author_color=_parse_color(query.get("author_color"), defaults.author_color),
        text_hover_color=_parse_color(query.get("text_hover_color"), defaults.text_hover_color),
        author_hover_color=_parse_color(query.get("author_hover_color"), defaults.author_hover_color),
        since=parse_relative_time(since_raw) if since_raw else None,
        sort=query.get("sort", defaults.sort),
        title=query.get("title", defaults.title),
        collapse_after=_parse_count(query.get("collapse_after"), defaults.collapse_after),
    )
