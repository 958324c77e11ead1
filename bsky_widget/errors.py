"""Project-level exception hierarchy."""

from __future__ import annotations


class WidgetError(Exception):
    """Base for all bsky-widget exceptions."""


class ConfigError(WidgetError):
    """Configuration is invalid."""


class MissingConfigError(ConfigError):
    """Required configuration (credentials) is not set."""


class AuthError(WidgetError):
    """Authentication against the Bluesky API failed."""


class LoginFailedError(AuthError):
    """Creating a new session with identifier and password failed."""


class RefreshFailedError(AuthError):
    """Renewing a session with the refresh token failed."""


class SessionError(WidgetError):
    """Session cache or persistence misuse."""


class PersistError(SessionError):
    """Writing the session file failed."""


class OperationError(WidgetError):
    """An authenticated downstream operation failed."""


class SearchError(OperationError):
    """Post search request failed."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
