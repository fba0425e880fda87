#!/usr/bin/env python3
"""Entry point for the Sport Club booking service."""
import os
from sportclub.app import create_app, socketio

config_name = os.environ.get('FLASK_ENV', 'development')
app = create_app(config_name)

# Seed the default games on first run
with app.app_context():
    from sportclub.services.game_seeder import seed_games
    count = seed_games()
    if count:
        print(f"Seeded {count} default games")

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5001))
    print(f"Sport Club booking starting on http://localhost:{port}")
    socketio.run(
        app, host='0.0.0.0', port=port,
        debug=(config_name == 'development'),
        allow_unsafe_werkzeug=True,
    )
