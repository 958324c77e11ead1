"""Session record shared by the cache, the store and the transport."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any


@dataclass(frozen=True, slots=True, repr=False)
class Session:
    """An authenticated Bluesky session.

    Both JWTs are opaque: they are passed through, never decoded.
    Construction fails unless all three fields are non-empty strings.
    """

    access_jwt: str
    refresh_jwt: str
    did: str

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str) or not value:
                msg = f"Session field {f.name!r} must be a non-empty string"
                raise ValueError(msg)

    @classmethod
    def from_api(cls, payload: Any) -> Session:
        """Build from a createSession/refreshSession response body."""
        if not isinstance(payload, dict):
            msg = "Session response is not a JSON object"
            raise ValueError(msg)  # noqa: TRY004
        return cls(
            access_jwt=payload.get("accessJwt"),  # type: ignore[arg-type]
            refresh_jwt=payload.get("refreshJwt"),  # type: ignore[arg-type]
            did=payload.get("did"),  # type: ignore[arg-type]
        )

    @classmethod
    def from_dict(cls, data: Any) -> Session:
        """Build from the persisted file format."""
        if not isinstance(data, dict):
            msg = "Session record is not a JSON object"
            raise ValueError(msg)  # noqa: TRY004
        return cls(
            access_jwt=data.get("access_jwt"),  # type: ignore[arg-type]
            refresh_jwt=data.get("refresh_jwt"),  # type: ignore[arg-type]
            did=data.get("did"),  # type: ignore[arg-type]
        )

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    def __repr__(self) -> str:
        return f"Session(did={self.did!r})"
