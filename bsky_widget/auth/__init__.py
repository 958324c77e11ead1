"""Session lifecycle: persistence, transport, validity probing, single-flight resolution."""

from bsky_widget.auth.cache import SessionCache as SessionCache
from bsky_widget.auth.manager import TokenManager as TokenManager
from bsky_widget.auth.models import Session as Session
from bsky_widget.auth.probe import ValidityProber as ValidityProber
from bsky_widget.auth.store import SessionStore as SessionStore
from bsky_widget.auth.transport import AuthClient as AuthClient

__all__ = [
    "AuthClient",
    "Session",
    "SessionCache",
    "SessionStore",
    "TokenManager",
    "ValidityProber",
]
