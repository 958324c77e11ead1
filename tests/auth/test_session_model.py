"""Tests for the Session record."""

from __future__ import annotations

import pytest

from bsky_widget.auth.models import Session


def test_from_api_maps_xrpc_fields() -> None:
    session = Session.from_api(
        {"accessJwt": "A1", "refreshJwt": "R1", "did": "did:plc:u1", "handle": "me.bsky.social"}
    )
    assert session == Session(access_jwt="A1", refresh_jwt="R1", did="did:plc:u1")


@pytest.mark.parametrize(
    "payload",
    [
        {"accessJwt": "A1", "refreshJwt": "R1"},
        {"accessJwt": "", "refreshJwt": "R1", "did": "u1"},
        {"accessJwt": 123, "refreshJwt": "R1", "did": "u1"},
        ["A1", "R1", "u1"],
        None,
    ],
)
def test_from_api_rejects_partial_payload(payload: object) -> None:
    with pytest.raises(ValueError):
        Session.from_api(payload)


def test_dict_form_uses_snake_case_keys() -> None:
    session = Session(access_jwt="A1", refresh_jwt="R1", did="u1")
    assert session.to_dict() == {"access_jwt": "A1", "refresh_jwt": "R1", "did": "u1"}
    assert Session.from_dict(session.to_dict()) == session


def test_tokens_are_opaque() -> None:
    session = Session(access_jwt="not.a.jwt at all", refresh_jwt="???", did="u1")
    assert session.access_jwt == "not.a.jwt at all"


def test_repr_hides_tokens() -> None:
    text = repr(Session(access_jwt="secret-access", refresh_jwt="secret-refresh", did="u1"))
    assert "secret" not in text
    assert "u1" in text
