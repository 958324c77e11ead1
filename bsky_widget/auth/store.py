"""Single-record JSON persistence for the Bluesky session."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from bsky_widget.auth.models import Session
from bsky_widget.errors import PersistError

logger = logging.getLogger(__name__)


class SessionStore:
    """Reads and writes one session record as a whole JSON file.

    A missing or unreadable file is never fatal: ``load`` degrades to
    "no cached session" so the next request simply logs in again.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Session | None:
        """Return the persisted session, or None if absent or unusable."""
        if not self._path.exists():
            logger.debug("No session file at %s", self._path)
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            session = Session.from_dict(data)
        except (OSError, json.JSONDecodeError, ValueError):
            logger.warning("Corrupt session file %s, ignoring", self._path)
            return None
        logger.info("Loaded persisted session did=%s", session.did)
        return session

    def save(self, session: Session) -> None:
        """Atomically overwrite the session file (temp write + rename)."""
        content = json.dumps(session.to_dict(), indent=2) + "\n"
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self._path.parent), suffix=".tmp")
        except OSError as exc:
            msg = f"Cannot write session file {self._path}: {exc}"
            raise PersistError(msg) from exc
        tmp = Path(tmp_path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            tmp.replace(self._path)
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            msg = f"Cannot write session file {self._path}: {exc}"
            raise PersistError(msg) from exc
        logger.debug("Session persisted to %s", self._path)

    def clear(self) -> bool:
        """Delete the session file. Returns False if there was none."""
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        logger.info("Session file removed: %s", self._path)
        return True
