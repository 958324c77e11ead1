"""Central path resolution for runtime data.

Every file the widget writes lives under ``widget_home``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from bsky_widget.config import WidgetConfig, resolve_home


@dataclass(frozen=True)
class WidgetPaths:
    """Resolved, immutable paths derived from ``widget_home`` (default ``~/.bsky_widget``)."""

    widget_home: Path

    @property
    def session_path(self) -> Path:
        return self.widget_home / "session.json"

    @property
    def logs_dir(self) -> Path:
        return self.widget_home / "logs"


def resolve_paths(config: WidgetConfig) -> WidgetPaths:
    """Build paths from the configured home directory."""
    return WidgetPaths(widget_home=resolve_home(config))
