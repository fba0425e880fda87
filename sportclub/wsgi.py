"""WSGI entrypoint used by Gunicorn."""
import os

from sportclub.app import create_app
from sportclub.services.game_seeder import seed_games

config_name = os.environ.get('FLASK_ENV', 'production')
app = create_app(config_name)

if app.config.get('AUTO_SEED_GAMES'):
    with app.app_context():
        seeded = seed_games()
        if seeded:
            print(f"Seeded {seeded} games")
