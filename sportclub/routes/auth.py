from flask import Blueprint, request, jsonify
from sportclub.auth_utils import current_session, csrf_token_for_bearer, login_required
from sportclub.errors import ValidationError
from sportclub.services import identity

auth_bp = Blueprint('auth', __name__)


def _json_payload():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Invalid JSON payload')
    return data


def _session_response(session):
    return {'token': session.token, 'user': session.profile.to_dict()}


@auth_bp.route('/register', methods=['POST'])
def register():
    data = _json_payload()
    session = identity.sign_up(
        data.get('email'), data.get('password'), name=data.get('name'),
    )
    return jsonify(_session_response(session)), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = _json_payload()
    session = identity.sign_in(data.get('email'), data.get('password'))
    return jsonify(_session_response(session))


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    identity.sign_out(request.current_session)
    return jsonify({'message': 'Signed out'})


@auth_bp.route('/me', methods=['GET'])
def get_me():
    return jsonify(current_session().to_dict())


@auth_bp.route('/csrf', methods=['GET'])
@login_required
def get_csrf_token():
    auth_header = request.headers.get('Authorization', '')
    token = csrf_token_for_bearer(auth_header)
    if not token:
        return jsonify({'error': 'Unable to generate CSRF token'}), 400
    return jsonify({'csrf_token': token})


@auth_bp.route('/profile', methods=['PUT'])
@login_required
def update_profile():
    data = _json_payload()
    session = request.current_session
    profile = identity.update_profile(
        session, session.principal_id,
        name=data.get('name'), email=data.get('email'),
    )
    return jsonify({'user': profile.to_dict()})


@auth_bp.route('/profile/<profile_id>', methods=['GET'])
def get_profile(profile_id):
    """Profiles are public; contact details are only shown to the owner and admins."""
    session = current_session()
    profile = identity.get_profile(session, profile_id)
    if session.is_admin or session.principal_id == profile.id:
        return jsonify({'user': profile.to_dict()})
    return jsonify({'user': profile.to_public_dict()})
