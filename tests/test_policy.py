"""Tests for the row-level authorization predicates."""
from types import SimpleNamespace

import pytest

from sportclub import policy
from sportclub.errors import AuthenticationRequired, PermissionDenied
from sportclub.session import Session

ADMIN = Session(principal_id='admin-1', profile=SimpleNamespace(role='admin'))
ALICE = Session(principal_id='alice-1', profile=SimpleNamespace(role='user'))
BOB = Session(principal_id='bob-1', profile=SimpleNamespace(role='user'))
ANON = Session.anonymous()

ALICE_PROFILE = SimpleNamespace(id='alice-1')
ACTIVE_GAME = SimpleNamespace(is_active=True)
INACTIVE_GAME = SimpleNamespace(is_active=False)
ALICE_BOOKING = SimpleNamespace(user_id='alice-1')


@pytest.mark.parametrize('session, action, expected', [
    (ANON, policy.READ, True),
    (BOB, policy.READ, True),
    (ALICE, policy.UPDATE, True),
    (BOB, policy.UPDATE, False),
    (ADMIN, policy.UPDATE, False),
    (ANON, policy.UPDATE, False),
    (ALICE, policy.INSERT, True),
    (BOB, policy.INSERT, False),
])
def test_profile_policy(session, action, expected):
    assert policy.is_allowed(session, policy.PROFILE, action, ALICE_PROFILE) is expected


@pytest.mark.parametrize('session, action, record, expected', [
    (ANON, policy.READ, ACTIVE_GAME, True),
    (ANON, policy.READ, INACTIVE_GAME, False),
    (ALICE, policy.READ, INACTIVE_GAME, False),
    (ADMIN, policy.READ, INACTIVE_GAME, True),
    (ALICE, policy.INSERT, None, False),
    (ADMIN, policy.INSERT, None, True),
    (ALICE, policy.UPDATE, ACTIVE_GAME, False),
    (ADMIN, policy.UPDATE, ACTIVE_GAME, True),
    (ADMIN, policy.DELETE, ACTIVE_GAME, True),
    (ALICE, policy.DELETE, ACTIVE_GAME, False),
])
def test_game_policy(session, action, record, expected):
    assert policy.is_allowed(session, policy.GAME, action, record) is expected


@pytest.mark.parametrize('session, action, expected', [
    (ALICE, policy.READ, True),
    (BOB, policy.READ, False),
    (ANON, policy.READ, False),
    (ADMIN, policy.READ, True),
    (ALICE, policy.INSERT, True),
    (BOB, policy.INSERT, False),
    (ADMIN, policy.INSERT, False),
    (ALICE, policy.UPDATE, True),
    (BOB, policy.UPDATE, False),
    (ADMIN, policy.UPDATE, True),
    (ALICE, policy.DELETE, False),
    (ADMIN, policy.DELETE, True),
])
def test_booking_policy(session, action, expected):
    assert policy.is_allowed(session, policy.BOOKING, action, ALICE_BOOKING) is expected


def test_unknown_pair_is_denied():
    assert policy.is_allowed(ADMIN, policy.PROFILE, policy.DELETE, ALICE_PROFILE) is False


def test_authorize_distinguishes_anonymous_from_forbidden():
    with pytest.raises(AuthenticationRequired):
        policy.authorize(ANON, policy.BOOKING, policy.INSERT, ALICE_BOOKING)
    with pytest.raises(PermissionDenied) as excinfo:
        policy.authorize(BOB, policy.BOOKING, policy.INSERT, ALICE_BOOKING)
    assert not isinstance(excinfo.value, AuthenticationRequired)
    policy.authorize(ALICE, policy.BOOKING, policy.INSERT, ALICE_BOOKING)


def test_session_lifecycle():
    session = Session(principal_id='alice-1', profile=SimpleNamespace(role='admin'), token='t')
    assert session.is_authenticated
    assert session.is_admin
    session.clear()
    assert not session.is_authenticated
    assert not session.is_admin
    assert session.token is None
    assert session.to_dict() == {'authenticated': False, 'user': None}
