"""Tests for the local session provider."""

import pytest

from moneybox.session import AuthEvent, AuthEventKind, LocalSessionProvider


def test_sign_in_and_out_notify_listeners():
    session = LocalSessionProvider()
    events = []
    session.subscribe(events.append)

    session.sign_in("u1")
    session.refresh()
    session.sign_out()

    assert events == [
        AuthEvent(AuthEventKind.SIGNED_IN, "u1"),
        AuthEvent(AuthEventKind.TOKEN_REFRESHED, "u1"),
        AuthEvent(AuthEventKind.SIGNED_OUT, None),
    ]
    assert session.get_current_user_id() is None


def test_unsubscribe_stops_notifications():
    session = LocalSessionProvider()
    events = []
    unsubscribe = session.subscribe(events.append)
    unsubscribe()
    unsubscribe()

    session.sign_in("u1")
    assert events == []


def test_refresh_without_user_is_silent():
    session = LocalSessionProvider()
    events = []
    session.subscribe(events.append)
    session.refresh()
    assert events == []


def test_sign_in_requires_user_id():
    with pytest.raises(ValueError):
        LocalSessionProvider().sign_in("")
