import uuid
from sportclub.app import db
from sportclub.time_utils import utcnow_naive

ROLE_USER = 'user'
ROLE_ADMIN = 'admin'
ROLES = (ROLE_USER, ROLE_ADMIN)

STATUS_PENDING = 'pending'
STATUS_CONFIRMED = 'confirmed'
STATUS_CANCELED = 'canceled'
STATUS_NO_SHOW = 'no-show'
BOOKING_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_CANCELED, STATUS_NO_SHOW)
OCCUPYING_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED)


def _new_id():
    return str(uuid.uuid4())


def _iso(value):
    return value.isoformat() if value else None


class Principal(db.Model):
    """Credential record owned by the auth layer; its id is shared with Profile."""
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    token_version = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())

    profile = db.relationship('Profile', backref='principal', uselist=False,
                              cascade='all, delete-orphan')


class Profile(db.Model):
    id = db.Column(db.String(36), db.ForeignKey('principal.id', ondelete='CASCADE'),
                   primary_key=True)
    email = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    role = db.Column(db.Enum(*ROLES, name='user_role'), default=ROLE_USER, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())
    updated_at = db.Column(db.DateTime, default=lambda: utcnow_naive(),
                           onupdate=lambda: utcnow_naive())

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    def to_dict(self):
        return {
            'id': self.id, 'email': self.email, 'name': self.name,
            'role': self.role,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }

    def to_public_dict(self):
        return {'id': self.id, 'name': self.name, 'role': self.role}


class Game(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())
    updated_at = db.Column(db.DateTime, default=lambda: utcnow_naive(),
                           onupdate=lambda: utcnow_naive())

    def to_dict(self):
        return {
            'id': self.id, 'name': self.name,
            'description': self.description, 'is_active': self.is_active,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class Booking(db.Model):
    # One row per (game, date, slot) whatever its status.
    __table_args__ = (
        db.UniqueConstraint('game_id', 'booking_date', 'time_slot',
                            name='uq_booking_game_date_slot'),
        db.Index('ix_booking_user_created', 'user_id', 'created_at'),
    )

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('profile.id', ondelete='CASCADE'),
                        nullable=False)
    game_id = db.Column(db.String(36), db.ForeignKey('game.id', ondelete='CASCADE'),
                        nullable=False)
    booking_date = db.Column(db.Date, nullable=False)
    time_slot = db.Column(db.String(5), nullable=False)  # HH:MM
    status = db.Column(db.Enum(*BOOKING_STATUSES, name='booking_status'),
                       default=STATUS_PENDING, nullable=False)
    cost = db.Column(db.Numeric(10, 2), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: utcnow_naive())
    updated_at = db.Column(db.DateTime, default=lambda: utcnow_naive(),
                           onupdate=lambda: utcnow_naive())

    user = db.relationship('Profile', backref='bookings')
    game = db.relationship('Game', backref='bookings')

    def to_dict(self, include_owner=False):
        data = {
            'id': self.id, 'user_id': self.user_id, 'game_id': self.game_id,
            'booking_date': _iso(self.booking_date),
            'time_slot': self.time_slot, 'status': self.status,
            'cost': float(self.cost) if self.cost is not None else None,
            'notes': self.notes,
            'game': {'id': self.game.id, 'name': self.game.name} if self.game else None,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }
        if include_owner:
            data['user'] = {
                'id': self.user.id, 'name': self.user.name, 'email': self.user.email,
            } if self.user else None
        return data
