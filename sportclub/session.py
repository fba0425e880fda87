"""Explicit per-request session carrying the acting principal and profile."""
from sportclub.models import ROLE_ADMIN, ROLE_USER


class GuestProfile:
    """Minimal stand-in used when a signed-in principal's profile cannot be read."""

    role = ROLE_USER

    def __init__(self, principal_id, email):
        self.id = principal_id
        self.email = email or ''
        self.name = (self.email.split('@', 1)[0] if '@' in self.email else '') or 'User'

    @property
    def is_admin(self):
        return False

    def to_dict(self):
        return {
            'id': self.id, 'email': self.email, 'name': self.name,
            'role': self.role, 'created_at': None, 'updated_at': None,
        }


class Session:
    """Acting identity for one request.

    Populated by sign-up, sign-in or token resolution; ``clear()`` is called on
    sign-out. An anonymous session has no principal and no profile.
    """

    def __init__(self, principal_id=None, profile=None, token=None):
        self.principal_id = principal_id
        self.profile = profile
        self.token = token

    @classmethod
    def anonymous(cls):
        return cls()

    @property
    def is_authenticated(self):
        return self.principal_id is not None

    @property
    def is_admin(self):
        return bool(self.profile is not None and self.profile.role == ROLE_ADMIN)

    @property
    def role(self):
        if self.profile is None:
            return None
        return self.profile.role

    def clear(self):
        self.principal_id = None
        self.profile = None
        self.token = None

    def to_dict(self):
        return {
            'authenticated': self.is_authenticated,
            'user': self.profile.to_dict() if self.profile is not None else None,
        }

    def __repr__(self):
        return f'<Session principal={self.principal_id!r} role={self.role!r}>'
