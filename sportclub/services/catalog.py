"""Game catalog: listing, creation and activation toggles."""
import logging

from sportclub import policy
from sportclub.app import db
from sportclub.errors import NotFoundError, ValidationError
from sportclub.models import Game

logger = logging.getLogger(__name__)

_NAME_MAX_LENGTH = 120


def list_active():
    return Game.query.filter(Game.is_active.is_(True)).order_by(Game.name.asc()).all()


def list_all(session):
    """Every game for admins; the row filter leaves only active games otherwise."""
    return policy.visible_games(session).order_by(Game.name.asc()).all()


def get(session, game_id):
    game = db.session.get(Game, game_id) if game_id else None
    if game is None or not policy.is_allowed(session, policy.GAME, policy.READ, game):
        raise NotFoundError('Game not found')
    return game


def create(session, name, description=None):
    policy.authorize(session, policy.GAME, policy.INSERT)

    cleaned_name = str(name or '').strip()
    if not cleaned_name:
        raise ValidationError('Game name is required')
    if len(cleaned_name) > _NAME_MAX_LENGTH:
        raise ValidationError(f'Game name must be at most {_NAME_MAX_LENGTH} characters')
    cleaned_description = str(description).strip() if description is not None else None

    game = Game(name=cleaned_name, description=cleaned_description or None, is_active=True)
    db.session.add(game)
    db.session.commit()
    logger.info('Game %s (%s) created by %s', game.id, game.name, session.principal_id)
    return game


def set_active(session, game_id, active):
    policy.authorize(session, policy.GAME, policy.UPDATE)

    game = db.session.get(Game, game_id) if game_id else None
    if game is None:
        raise NotFoundError('Game not found')

    active = bool(active)
    if game.is_active != active:
        game.is_active = active
        db.session.commit()
        logger.info('Game %s set active=%s by %s', game.id, active, session.principal_id)
    return game
