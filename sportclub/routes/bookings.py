from flask import Blueprint, request, jsonify
from sportclub.auth_utils import login_required
from sportclub.errors import ValidationError
from sportclub.realtime import notify_booking_created, notify_booking_update
from sportclub.services import ledger

bookings_bp = Blueprint('bookings', __name__)


def _json_payload():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Invalid JSON payload')
    return data


@bookings_bp.route('', methods=['POST'])
@login_required
def create_booking():
    data = _json_payload()
    session = request.current_session
    booking = ledger.create_booking(
        session,
        user_id=data.get('user_id') or session.principal_id,
        game_id=data.get('game_id'),
        booking_date=data.get('booking_date'),
        time_slot=data.get('time_slot'),
        notes=data.get('notes'),
    )
    notify_booking_created(booking)
    return jsonify({'booking': booking.to_dict()}), 201


@bookings_bp.route('/my', methods=['GET'])
@login_required
def get_my_bookings():
    """Current user's bookings, newest first; supports ``status`` and ``limit``."""
    session = request.current_session
    bookings = ledger.list_for_user(
        session, session.principal_id,
        status=request.args.get('status'),
        limit=request.args.get('limit'),
    )
    return jsonify({'bookings': [b.to_dict() for b in bookings]})


@bookings_bp.route('/user/<user_id>', methods=['GET'])
@login_required
def get_user_bookings(user_id):
    bookings = ledger.list_for_user(
        request.current_session, user_id, status=request.args.get('status'),
    )
    return jsonify({'bookings': [b.to_dict() for b in bookings]})


@bookings_bp.route('', methods=['GET'])
@login_required
def get_all_bookings():
    bookings = ledger.list_all(request.current_session, status=request.args.get('status'))
    return jsonify({'bookings': [b.to_dict(include_owner=True) for b in bookings]})


@bookings_bp.route('/slots', methods=['GET'])
def get_slots():
    game_id = request.args.get('game_id', '')
    booking_date = request.args.get('date', '')
    if not game_id or not booking_date:
        raise ValidationError('game_id and date are required')
    return jsonify({
        'game_id': game_id,
        'date': booking_date,
        'booked': ledger.list_booked_slots(game_id, booking_date),
        'available': ledger.available_slots(game_id, booking_date),
    })


@bookings_bp.route('/summary', methods=['GET'])
@login_required
def get_summary():
    session = request.current_session
    scope = request.args.get('scope', 'mine')
    if scope == 'all':
        stats = ledger.summary(session)
    else:
        stats = ledger.summary(session, user_id=session.principal_id)
    return jsonify({'summary': stats})


@bookings_bp.route('/<booking_id>', methods=['GET'])
@login_required
def get_booking(booking_id):
    session = request.current_session
    booking = ledger.get_booking(session, booking_id)
    return jsonify({'booking': booking.to_dict(include_owner=session.is_admin)})


@bookings_bp.route('/<booking_id>/status', methods=['POST'])
@login_required
def update_booking_status(booking_id):
    data = _json_payload()
    new_status = str(data.get('status') or '').strip()
    if not new_status:
        raise ValidationError('Status is required')
    booking = ledger.transition(
        request.current_session, booking_id, new_status, cost=data.get('cost'),
    )
    notify_booking_update(booking)
    return jsonify({'booking': booking.to_dict()})


@bookings_bp.route('/<booking_id>', methods=['DELETE'])
@login_required
def delete_booking(booking_id):
    ledger.delete_booking(request.current_session, booking_id)
    return jsonify({'message': 'Booking deleted'})
