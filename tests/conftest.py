import pytest
from sportclub.app import create_app, db

ADMIN_EMAIL = 'admin@sportclub.com'


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, email, password='password123', name=''):
    res = client.post('/api/auth/register', json={
        'email': email, 'password': password, 'name': name,
    })
    data = res.get_json()
    return data['token'], data['user']


@pytest.fixture
def auth_headers(client):
    """Register a regular user and return auth headers."""
    token, _ = register(client, 'test@example.com', name='Test User')
    return {'Authorization': f'Bearer {token}', 'Content-Type': 'application/json'}


@pytest.fixture
def admin_headers(client):
    """Register the bootstrap admin and return auth headers."""
    token, _ = register(client, ADMIN_EMAIL, name='Club Admin')
    return {'Authorization': f'Bearer {token}', 'Content-Type': 'application/json'}


@pytest.fixture
def sample_game(app):
    """Create an active game for booking tests."""
    from sportclub.models import Game
    game = Game(name='Cricket', description='Outdoor cricket field', is_active=True)
    db.session.add(game)
    db.session.commit()
    return game
