"""Seed the catalog with the club's default games."""

from sportclub.app import db
from sportclub.models import Game

DEFAULT_GAMES = (
    ('Cricket', 'Outdoor cricket field'),
    ('Carrom', 'Indoor carrom board'),
    ('Badminton', 'Indoor badminton court'),
    ('Table Tennis', 'Indoor table tennis'),
)


def seed_games():
    """Insert the default games only when the catalog is empty."""
    if Game.query.first():
        return 0

    try:
        for name, description in DEFAULT_GAMES:
            db.session.add(Game(name=name, description=description, is_active=True))
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return len(DEFAULT_GAMES)
