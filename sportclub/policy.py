"""Row-level authorization predicates evaluated before every entity operation.

Each (entity, action) pair maps to a predicate taking the acting session and
the target row. Single-row operations call ``authorize`` and get an exception
on denial; list operations go through ``visible_games`` / ``visible_bookings``
so rows the actor may not read are filtered out rather than reported.
"""
from sqlalchemy import false

from sportclub.errors import AuthenticationRequired, PermissionDenied
from sportclub.models import Booking, Game

PROFILE = 'profile'
GAME = 'game'
BOOKING = 'booking'

READ = 'read'
INSERT = 'insert'
UPDATE = 'update'
DELETE = 'delete'


def _anyone(session, record):
    return True


def _self(session, record):
    return session.is_authenticated and record is not None and record.id == session.principal_id


def _admin(session, record):
    return session.is_admin


def _active_or_admin(session, record):
    if session.is_admin:
        return True
    return record is not None and bool(record.is_active)


def _owner_is_self(session, record):
    return session.is_authenticated and record is not None and record.user_id == session.principal_id


def _owner_or_admin(session, record):
    return session.is_admin or _owner_is_self(session, record)


POLICIES = {
    (PROFILE, READ): _anyone,
    (PROFILE, INSERT): _self,
    (PROFILE, UPDATE): _self,
    (GAME, READ): _active_or_admin,
    (GAME, INSERT): _admin,
    (GAME, UPDATE): _admin,
    (GAME, DELETE): _admin,
    (BOOKING, READ): _owner_or_admin,
    (BOOKING, INSERT): _owner_is_self,
    (BOOKING, UPDATE): _owner_or_admin,
    (BOOKING, DELETE): _admin,
}


def is_allowed(session, entity, action, record=None):
    predicate = POLICIES.get((entity, action))
    if predicate is None:
        return False
    return bool(predicate(session, record))


def authorize(session, entity, action, record=None):
    """Raise unless ``session`` may perform ``action`` on ``record``."""
    if is_allowed(session, entity, action, record):
        return
    if not session.is_authenticated:
        raise AuthenticationRequired()
    raise PermissionDenied(f'Not allowed to {action} this {entity}')


def visible_games(session, query=None):
    if query is None:
        query = Game.query
    if session.is_admin:
        return query
    return query.filter(Game.is_active.is_(True))


def visible_bookings(session, query=None):
    if query is None:
        query = Booking.query
    if session.is_admin:
        return query
    if not session.is_authenticated:
        return query.filter(false())
    return query.filter(Booking.user_id == session.principal_id)
