from flask import Blueprint, request, jsonify
from sportclub.auth_utils import current_session, login_required
from sportclub.errors import ValidationError
from sportclub.services import catalog

games_bp = Blueprint('games', __name__)


def _coerce_bool(raw_value):
    if isinstance(raw_value, bool):
        return raw_value
    if isinstance(raw_value, (int, float)):
        return raw_value == 1
    if raw_value is None:
        return False
    return str(raw_value).strip().lower() in {'1', 'true', 'yes', 'on'}


@games_bp.route('', methods=['GET'])
def get_games():
    """List active games; ``all=true`` lists every game the caller may see."""
    if _coerce_bool(request.args.get('all', 'false')):
        games = catalog.list_all(current_session())
    else:
        games = catalog.list_active()
    return jsonify({'games': [game.to_dict() for game in games]})


@games_bp.route('/<game_id>', methods=['GET'])
def get_game(game_id):
    game = catalog.get(current_session(), game_id)
    return jsonify({'game': game.to_dict()})


@games_bp.route('', methods=['POST'])
@login_required
def create_game():
    data = request.get_json(silent=True) or {}
    game = catalog.create(
        request.current_session, data.get('name'), data.get('description'),
    )
    return jsonify({'game': game.to_dict()}), 201


@games_bp.route('/<game_id>', methods=['PATCH'])
@login_required
def update_game(game_id):
    data = request.get_json(silent=True) or {}
    if 'is_active' not in data:
        raise ValidationError('is_active is required')
    game = catalog.set_active(
        request.current_session, game_id, _coerce_bool(data.get('is_active')),
    )
    return jsonify({'game': game.to_dict()})
