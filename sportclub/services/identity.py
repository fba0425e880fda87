"""Sign-up, sign-in, sign-out and profile bootstrap."""
import logging
import re

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from sportclub import policy
from sportclub.app import db
from sportclub.auth_utils import generate_token
from sportclub.errors import (
    AuthenticationRequired, ConflictError, NotFoundError, ValidationError,
)
from sportclub.models import ROLE_ADMIN, ROLE_USER, Principal, Profile
from sportclub.session import GuestProfile, Session

logger = logging.getLogger(__name__)

_EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
_NAME_MAX_LENGTH = 120


def _normalize_email(raw_value):
    return str(raw_value or '').strip().lower()


def _bootstrap_admin_email():
    return _normalize_email(current_app.config.get('BOOTSTRAP_ADMIN_EMAIL', ''))


def role_for_email(email):
    """Admin for the single bootstrap address, user for everyone else."""
    bootstrap = _bootstrap_admin_email()
    if bootstrap and _normalize_email(email) == bootstrap:
        return ROLE_ADMIN
    return ROLE_USER


def _default_name(email, name=None):
    cleaned = str(name or '').strip()[:_NAME_MAX_LENGTH]
    if cleaned:
        return cleaned
    local_part = email.split('@', 1)[0] if '@' in email else ''
    return local_part or 'User'


def _password_complexity_error(raw_password):
    password = str(raw_password or '')
    if len(password) < 8:
        return 'Password must be at least 8 characters long'
    if not re.search(r'[A-Za-z]', password) or not re.search(r'\d', password):
        return 'Password must include at least one letter and one number'
    return None


def _email_error(email):
    if not email:
        return 'Email is required'
    if not _EMAIL_PATTERN.match(email):
        return 'Email address is invalid'
    return None


def ensure_profile(principal, name=None):
    """Return the principal's profile, creating it on first authentication."""
    profile = db.session.get(Profile, principal.id)
    if profile is not None:
        return profile

    profile = Profile(
        id=principal.id,
        email=principal.email,
        name=_default_name(principal.email, name),
        role=role_for_email(principal.email),
    )
    db.session.add(profile)
    db.session.commit()
    logger.info('Created %s profile for principal %s', profile.role, principal.id)
    return profile


def load_profile(principal):
    """Profile for an authenticated principal, or a guest profile if unreadable."""
    try:
        return ensure_profile(principal)
    except SQLAlchemyError:
        db.session.rollback()
        logger.warning('Falling back to guest profile for principal %s', principal.id,
                       exc_info=True)
        return GuestProfile(principal.id, principal.email)


def _issue_session(principal, profile):
    return Session(
        principal_id=principal.id,
        profile=profile,
        token=generate_token(principal),
    )


def sign_up(email, password, name=None):
    email = _normalize_email(email)
    if not email or not password:
        raise ValidationError('Email and password are required')
    email_error = _email_error(email)
    if email_error:
        raise ValidationError(email_error)
    password_error = _password_complexity_error(password)
    if password_error:
        raise ValidationError(password_error)

    if Principal.query.filter_by(email=email).first():
        raise ConflictError('Email already registered')

    principal = Principal(email=email, password_hash=generate_password_hash(password))
    db.session.add(principal)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError('Email already registered')

    profile = ensure_profile(principal, name=name)
    return _issue_session(principal, profile)


def sign_in(email, password):
    email = _normalize_email(email)
    if not email or not password:
        raise ValidationError('Email and password are required')

    principal = Principal.query.filter_by(email=email).first()
    if not principal or not check_password_hash(principal.password_hash, str(password)):
        raise AuthenticationRequired('Invalid email or password')

    return _issue_session(principal, load_profile(principal))


def sign_out(session):
    """Revoke every token issued to the session's principal and clear it."""
    if not session.is_authenticated:
        return
    principal = db.session.get(Principal, session.principal_id)
    if principal is not None:
        principal.token_version = int(principal.token_version or 0) + 1
        db.session.commit()
    session.clear()


def get_profile(session, profile_id):
    profile = db.session.get(Profile, profile_id)
    if profile is None:
        raise NotFoundError('Profile not found')
    policy.authorize(session, policy.PROFILE, policy.READ, profile)
    return profile


def update_profile(session, profile_id, name=None, email=None):
    profile = db.session.get(Profile, profile_id)
    if profile is None:
        raise NotFoundError('Profile not found')
    policy.authorize(session, policy.PROFILE, policy.UPDATE, profile)

    if name is not None:
        cleaned = str(name).strip()[:_NAME_MAX_LENGTH]
        if not cleaned:
            raise ValidationError('Name cannot be empty')
        profile.name = cleaned
    if email is not None:
        normalized = _normalize_email(email)
        email_error = _email_error(normalized)
        if email_error:
            raise ValidationError(email_error)
        profile.email = normalized

    db.session.commit()
    if session.profile is not None and session.profile.id == profile.id:
        session.profile = profile
    return profile
