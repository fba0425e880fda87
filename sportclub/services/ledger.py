"""Booking ledger: slot reservation and the booking status lifecycle.

Slot uniqueness is owned by the ``uq_booking_game_date_slot`` constraint on
the booking table. ``create_booking`` never checks availability before
inserting; it lets the insert fail and reports the IntegrityError as a
``ConflictError``, so two racing requests for one slot cannot both succeed.
``list_booked_slots`` and ``available_slots`` are advisory only.
"""
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from sportclub import policy
from sportclub.app import db
from sportclub.errors import (
    AuthenticationRequired, ConflictError, InvalidTransition, NotFoundError,
    PermissionDenied, ValidationError,
)
from sportclub.models import (
    BOOKING_STATUSES, OCCUPYING_STATUSES, STATUS_CANCELED, STATUS_CONFIRMED,
    STATUS_NO_SHOW, STATUS_PENDING, Booking, Profile,
)
from sportclub.services import catalog
from sportclub.time_utils import parse_booking_date, today

logger = logging.getLogger(__name__)

TRANSITIONS = {
    STATUS_PENDING: frozenset({STATUS_CONFIRMED, STATUS_CANCELED}),
    STATUS_CONFIRMED: frozenset({STATUS_NO_SHOW}),
    STATUS_CANCELED: frozenset(),
    STATUS_NO_SHOW: frozenset(),
}

# Owners may withdraw their own pending request; everything else is admin work.
OWNER_TRANSITIONS = frozenset({(STATUS_PENDING, STATUS_CANCELED)})

_NOTES_MAX_LENGTH = 1000
# Largest value a Numeric(10, 2) column holds.
_COST_MAX = Decimal('99999999.99')


def can_transition(current_status, new_status):
    return new_status in TRANSITIONS.get(current_status, ())


def configured_time_slots():
    return list(current_app.config.get('BOOKING_TIME_SLOTS') or [])


def normalize_time_slot(raw_value):
    """Return the slot as HH:MM, accepting HH:MM or HH:MM:SS input."""
    text = str(raw_value or '').strip()
    for fmt in ('%H:%M', '%H:%M:%S'):
        try:
            return datetime.strptime(text, fmt).strftime('%H:%M')
        except ValueError:
            continue
    return None


def _require_date(raw_value):
    booking_date = parse_booking_date(raw_value)
    if booking_date is None:
        raise ValidationError('Booking date must be in YYYY-MM-DD format')
    return booking_date


def _require_slot(raw_value):
    time_slot = normalize_time_slot(raw_value)
    if time_slot is None or time_slot not in configured_time_slots():
        raise ValidationError('Time slot is not available for booking')
    return time_slot


def _parse_cost(raw_cost):
    if raw_cost is None:
        return None
    if isinstance(raw_cost, bool):
        raise ValidationError('Cost must be a number')
    try:
        cost = Decimal(str(raw_cost).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError('Cost must be a number')
    if not cost.is_finite() or cost < 0:
        raise ValidationError('Cost must be a non-negative number')
    if cost > _COST_MAX:
        raise ValidationError('Cost is too large')
    try:
        return cost.quantize(Decimal('0.01'))
    except InvalidOperation:
        raise ValidationError('Cost is too large')


def _parse_status_filter(raw_status):
    if raw_status in (None, '', 'all'):
        return None
    if raw_status not in BOOKING_STATUSES:
        raise ValidationError(f'Unknown booking status: {raw_status}')
    return raw_status


def _require_self_or_admin(session, user_id):
    if not session.is_authenticated:
        raise AuthenticationRequired()
    if not session.is_admin and session.principal_id != user_id:
        raise PermissionDenied('Not allowed to read these bookings')


def _require_admin(session):
    if not session.is_authenticated:
        raise AuthenticationRequired()
    if not session.is_admin:
        raise PermissionDenied('Admin access required')


def get_booking(session, booking_id):
    booking = db.session.get(Booking, booking_id) if booking_id else None
    if booking is None or not policy.is_allowed(session, policy.BOOKING, policy.READ, booking):
        raise NotFoundError('Booking not found')
    return booking


def create_booking(session, user_id, game_id, booking_date, time_slot, notes=None):
    """Request a slot for ``user_id``; the new booking starts pending with no cost."""
    booking = Booking(user_id=user_id, status=STATUS_PENDING, cost=None)
    policy.authorize(session, policy.BOOKING, policy.INSERT, booking)
    if not game_id or not booking_date or not time_slot:
        raise ValidationError('Game, date, and time slot are required')

    parsed_date = _require_date(booking_date)
    if parsed_date < today():
        raise ValidationError('Cannot book a date in the past')
    slot = _require_slot(time_slot)
    game = catalog.get(session, game_id)
    if db.session.get(Profile, user_id) is None:
        raise NotFoundError('Profile not found')

    cleaned_notes = str(notes).strip()[:_NOTES_MAX_LENGTH] if notes else None
    booking.game_id = game.id
    booking.booking_date = parsed_date
    booking.time_slot = slot
    booking.notes = cleaned_notes or None

    db.session.add(booking)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.info('Slot conflict for game %s on %s at %s', game.id, parsed_date, slot)
        raise ConflictError('This slot is already booked. Please choose another time.')

    logger.info('Booking %s requested by %s', booking.id, user_id)
    return booking


def list_for_user(session, user_id, status=None, limit=None):
    _require_self_or_admin(session, user_id)
    status = _parse_status_filter(status)

    query = policy.visible_bookings(session).options(joinedload(Booking.game)).filter(
        Booking.user_id == user_id,
    )
    if status:
        query = query.filter(Booking.status == status)
    query = query.order_by(Booking.created_at.desc())
    if limit is not None:
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            raise ValidationError('Limit must be a positive integer')
        if limit <= 0:
            raise ValidationError('Limit must be a positive integer')
        query = query.limit(limit)
    return query.all()


def list_all(session, status=None):
    _require_admin(session)
    status = _parse_status_filter(status)

    query = policy.visible_bookings(session).options(
        joinedload(Booking.user), joinedload(Booking.game),
    )
    if status:
        query = query.filter(Booking.status == status)
    return query.order_by(Booking.created_at.desc()).all()


def list_booked_slots(game_id, booking_date):
    """Slots held by pending or confirmed bookings; owners are not exposed."""
    parsed_date = _require_date(booking_date)
    rows = db.session.query(Booking.time_slot).filter(
        Booking.game_id == game_id,
        Booking.booking_date == parsed_date,
        Booking.status.in_(OCCUPYING_STATUSES),
    ).all()
    return sorted({row[0] for row in rows})


def available_slots(game_id, booking_date):
    booked = set(list_booked_slots(game_id, booking_date))
    return [slot for slot in configured_time_slots() if slot not in booked]


def transition(session, booking_id, new_status, cost=None):
    """Move a booking along its lifecycle, optionally pricing it."""
    booking = get_booking(session, booking_id)
    policy.authorize(session, policy.BOOKING, policy.UPDATE, booking)

    if new_status not in BOOKING_STATUSES:
        raise ValidationError(f'Unknown booking status: {new_status}')
    current_status = booking.status
    if not can_transition(current_status, new_status):
        raise InvalidTransition(current_status, new_status)

    if not session.is_admin:
        if (current_status, new_status) not in OWNER_TRANSITIONS:
            raise PermissionDenied('Only admins can make this status change')
        if cost is not None:
            raise PermissionDenied('Only admins can set booking cost')
    if cost is not None and (current_status, new_status) != (STATUS_PENDING, STATUS_CONFIRMED):
        raise ValidationError('Cost can only be set when confirming a booking')

    parsed_cost = _parse_cost(cost)
    booking.status = new_status
    if parsed_cost is not None:
        booking.cost = parsed_cost
    db.session.commit()

    logger.info(
        'Booking %s moved %s -> %s by %s',
        booking.id, current_status, new_status, session.principal_id,
    )
    return booking


def delete_booking(session, booking_id):
    """Remove a booking row, which frees its slot again."""
    booking = get_booking(session, booking_id)
    policy.authorize(session, policy.BOOKING, policy.DELETE, booking)

    db.session.delete(booking)
    db.session.commit()
    logger.info('Booking %s deleted by %s', booking_id, session.principal_id)


def summary(session, user_id=None):
    """Booking counts per status plus revenue from confirmed bookings."""
    if user_id is None:
        _require_admin(session)
    else:
        _require_self_or_admin(session, user_id)

    query = policy.visible_bookings(session, db.session.query(
        Booking.status, func.count(Booking.id), func.sum(Booking.cost),
    ))
    if user_id is not None:
        query = query.filter(Booking.user_id == user_id)
    rows = query.group_by(Booking.status).all()

    by_status = {status: 0 for status in BOOKING_STATUSES}
    revenue = Decimal('0')
    for status, count, total_cost in rows:
        by_status[status] = int(count)
        if status == STATUS_CONFIRMED and total_cost is not None:
            revenue += Decimal(str(total_cost))

    return {
        'total': sum(by_status.values()),
        'by_status': by_status,
        'revenue': float(revenue),
    }
