"""Tests for the game catalog."""
import json

import pytest

from sportclub.app import db
from sportclub.errors import AuthenticationRequired, NotFoundError, PermissionDenied, ValidationError
from sportclub.models import Game
from sportclub.services import catalog
from sportclub.services.game_seeder import seed_games
from sportclub.session import Session


def _auth(client, email):
    res = client.post('/api/auth/register', json={
        'email': email, 'password': 'password123',
    })
    return {'Authorization': f'Bearer {json.loads(res.data)["token"]}'}


def _create_game(client, headers, name='Badminton', description='Indoor badminton court'):
    res = client.post('/api/games', json={'name': name, 'description': description},
        headers=headers)
    return res


def test_admin_creates_game(client, admin_headers):
    res = _create_game(client, admin_headers)
    assert res.status_code == 201
    game = json.loads(res.data)['game']
    assert game['name'] == 'Badminton'
    assert game['is_active'] is True


def test_create_game_requires_name(client, admin_headers):
    res = _create_game(client, admin_headers, name='   ')
    assert res.status_code == 400


def test_non_admin_cannot_create_game(client, auth_headers):
    res = _create_game(client, auth_headers)
    assert res.status_code == 403
    assert Game.query.count() == 0


def test_anonymous_cannot_create_game(client):
    res = client.post('/api/games', json={'name': 'Carrom'})
    assert res.status_code == 401


def test_list_active_games_hides_inactive(client, admin_headers):
    kept = json.loads(_create_game(client, admin_headers, 'Carrom').data)['game']
    hidden = json.loads(_create_game(client, admin_headers, 'Cricket').data)['game']
    client.patch(f'/api/games/{hidden["id"]}', json={'is_active': False},
        headers=admin_headers)

    res = client.get('/api/games')
    assert res.status_code == 200
    ids = [g['id'] for g in json.loads(res.data)['games']]
    assert kept['id'] in ids
    assert hidden['id'] not in ids


def test_list_all_games_depends_on_role(client, admin_headers, auth_headers):
    _create_game(client, admin_headers, 'Carrom')
    hidden = json.loads(_create_game(client, admin_headers, 'Cricket').data)['game']
    client.patch(f'/api/games/{hidden["id"]}', json={'is_active': False},
        headers=admin_headers)

    admin_view = json.loads(client.get('/api/games?all=true', headers=admin_headers).data)
    user_view = json.loads(client.get('/api/games?all=true', headers=auth_headers).data)
    anon_view = json.loads(client.get('/api/games?all=true').data)

    assert len(admin_view['games']) == 2
    assert [g['name'] for g in user_view['games']] == ['Carrom']
    assert [g['name'] for g in anon_view['games']] == ['Carrom']


def test_games_sorted_by_name(client, admin_headers):
    for name in ('Table Tennis', 'Badminton', 'Cricket'):
        _create_game(client, admin_headers, name)
    res = client.get('/api/games')
    names = [g['name'] for g in json.loads(res.data)['games']]
    assert names == ['Badminton', 'Cricket', 'Table Tennis']


def test_set_active_is_idempotent(client, admin_headers):
    game = json.loads(_create_game(client, admin_headers).data)['game']
    for _ in range(2):
        res = client.patch(f'/api/games/{game["id"]}', json={'is_active': False},
            headers=admin_headers)
        assert res.status_code == 200
        assert json.loads(res.data)['game']['is_active'] is False

    res = client.patch(f'/api/games/{game["id"]}', json={'is_active': True},
        headers=admin_headers)
    assert json.loads(res.data)['game']['is_active'] is True


def test_set_active_requires_flag(client, admin_headers):
    game = json.loads(_create_game(client, admin_headers).data)['game']
    res = client.patch(f'/api/games/{game["id"]}', json={}, headers=admin_headers)
    assert res.status_code == 400


def test_non_admin_cannot_toggle_game(client, admin_headers):
    game = json.loads(_create_game(client, admin_headers).data)['game']
    user_headers = _auth(client, 'toggler@test.com')
    res = client.patch(f'/api/games/{game["id"]}', json={'is_active': False},
        headers=user_headers)
    assert res.status_code == 403


def test_toggle_unknown_game(client, admin_headers):
    res = client.patch('/api/games/missing', json={'is_active': False},
        headers=admin_headers)
    assert res.status_code == 404


def test_inactive_game_detail_hidden_from_users(client, admin_headers, auth_headers):
    game = json.loads(_create_game(client, admin_headers).data)['game']
    client.patch(f'/api/games/{game["id"]}', json={'is_active': False},
        headers=admin_headers)

    assert client.get(f'/api/games/{game["id"]}', headers=auth_headers).status_code == 404
    assert client.get(f'/api/games/{game["id"]}', headers=admin_headers).status_code == 200


def test_catalog_service_guards(app, sample_game):
    anonymous = Session.anonymous()
    with pytest.raises(AuthenticationRequired):
        catalog.create(anonymous, 'Chess')
    with pytest.raises(AuthenticationRequired):
        catalog.set_active(anonymous, sample_game.id, False)

    user = Session(principal_id='someone', profile=None)
    with pytest.raises(PermissionDenied):
        catalog.create(user, 'Chess')

    with pytest.raises(NotFoundError):
        catalog.get(anonymous, 'missing')


def test_catalog_service_create_validates(app, client, admin_headers):
    from sportclub.auth_utils import resolve_session
    admin = resolve_session(admin_headers['Authorization'])
    with pytest.raises(ValidationError):
        catalog.create(admin, '')
    game = catalog.create(admin, 'Squash', '')
    assert game.description is None


def test_seed_games_only_when_empty(app):
    assert seed_games() == 4
    names = sorted(g.name for g in Game.query.all())
    assert names == ['Badminton', 'Carrom', 'Cricket', 'Table Tennis']
    assert seed_games() == 0
    assert Game.query.count() == 4


def test_updated_at_refreshes_on_change(app, sample_game):
    before = sample_game.updated_at
    sample_game.is_active = False
    db.session.commit()
    assert sample_game.updated_at >= before
