"""Socket.IO rooms and booking notifications."""
import re
from flask import request
from flask_socketio import emit, join_room, leave_room
from sportclub.app import socketio
from sportclub.auth_utils import resolve_session

ADMIN_ROOM = 'admins'
_USER_ROOM_PATTERN = re.compile(r'^user_([0-9a-fA-F-]{1,36})$')


def user_room(user_id):
    return f'user_{user_id}'


def authorize_room_join(room, token):
    """Return the session allowed to join ``room``, or an error message."""
    session = resolve_session(token)
    if not session.is_authenticated:
        return None, 'Authentication required'

    if room == ADMIN_ROOM:
        if not session.is_admin:
            return None, 'Forbidden room'
        return session, None

    room_match = _USER_ROOM_PATTERN.match(room)
    if not room_match:
        return None, 'Invalid room'
    if room_match.group(1) != session.principal_id:
        return None, 'Forbidden room'
    return session, None


def notify_booking_created(booking):
    socketio.emit('booking_created', booking.to_dict(include_owner=True), room=ADMIN_ROOM)


def notify_booking_update(booking):
    payload = booking.to_dict()
    socketio.emit('booking_update', payload, room=user_room(booking.user_id))
    socketio.emit('booking_update', payload, room=ADMIN_ROOM)


@socketio.on('join')
def on_join(data):
    payload = data if isinstance(data, dict) else {}
    room = str(payload.get('room') or '').strip()
    token = payload.get('token') or request.args.get('token') or ''
    _, error = authorize_room_join(room, token)
    if error:
        emit('status', {'error': error})
        return

    join_room(room)
    emit('status', {'message': f'Joined {room}'})


@socketio.on('leave')
def on_leave(data):
    room = data.get('room', '') if isinstance(data, dict) else ''
    if room:
        leave_room(room)
