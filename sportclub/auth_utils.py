import hashlib
import hmac
from datetime import datetime, timedelta, timezone
from functools import wraps
from flask import request, jsonify, current_app
import jwt
from sportclub.app import db
from sportclub.models import Principal
from sportclub.session import Session


def generate_token(principal):
    """Generate a JWT bound to the principal's current token version."""
    payload = {
        'user_id': principal.id,
        'tv': int(principal.token_version or 0),
        'exp': datetime.now(timezone.utc) + timedelta(
            hours=current_app.config.get('JWT_EXPIRATION_HOURS', 24)
        ),
    }
    return jwt.encode(payload, current_app.config['SECRET_KEY'], algorithm='HS256')


def _normalize_bearer_token(raw_token):
    token = str(raw_token or '').strip()
    if token.startswith('Bearer '):
        token = token.split(' ', 1)[1].strip()
    return token


def _decode_session_from_token(token):
    normalized = _normalize_bearer_token(token)
    if not normalized:
        return None, 'Authentication required'
    try:
        payload = jwt.decode(
            normalized, current_app.config['SECRET_KEY'], algorithms=['HS256']
        )
    except jwt.ExpiredSignatureError:
        return None, 'Token expired'
    except jwt.InvalidTokenError:
        return None, 'Invalid token'

    principal = db.session.get(Principal, payload.get('user_id'))
    if not principal:
        return None, 'User not found'
    if int(payload.get('tv', -1)) != int(principal.token_version or 0):
        return None, 'Session has been signed out'

    from sportclub.services.identity import load_profile
    profile = load_profile(principal)
    return Session(principal_id=principal.id, profile=profile, token=normalized), None


def resolve_session(token):
    """Resolve a session from a raw bearer token; anonymous when invalid."""
    session, _ = _decode_session_from_token(token)
    return session or Session.anonymous()


def current_session():
    """Session for the active request, resolving the Authorization header once."""
    session = getattr(request, 'current_session', None)
    if session is None:
        session = resolve_session(request.headers.get('Authorization', ''))
        request.current_session = session
    return session


def csrf_token_for_bearer(token):
    """Build deterministic CSRF token tied to bearer token."""
    normalized = _normalize_bearer_token(token)
    if not normalized:
        return ''
    secret = str(current_app.config.get('SECRET_KEY') or '')
    if not secret:
        return ''
    return hmac.new(
        secret.encode('utf-8'),
        normalized.encode('utf-8'),
        hashlib.sha256,
    ).hexdigest()


def csrf_token_matches(token, candidate):
    expected = csrf_token_for_bearer(token)
    provided = str(candidate or '').strip()
    if not expected or not provided:
        return False
    return hmac.compare_digest(expected, provided)


def login_required(f):
    """Decorator to require authentication on a route."""
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization', '')
        session, error = _decode_session_from_token(auth_header)
        if error:
            return jsonify({'error': error}), 401
        request.current_session = session
        return f(*args, **kwargs)
    return decorated

