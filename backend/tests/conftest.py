import os
import random
import sys
import pytest

# Ensure the backend root (containing the `pong_server` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from pong_server import create_app, socketio
from pong_server.services.arena import Arena


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    TICK_RATE_HZ = 60
    MATCHMAKING_INTERVAL_SEC = 1.0
    STATS_LOG_INTERVAL_SEC = 0


class RecordingGateway:
    """Collects outbound events as (name, target, payload) tuples."""

    def __init__(self):
        self.events = []

    def names(self):
        return [e[0] for e in self.events]

    def of(self, name):
        return [e for e in self.events if e[0] == name]

    def clear(self):
        self.events = []

    def waiting(self, player_id):
        self.events.append(('waiting', player_id, None))

    def subscribe(self, room_id, player_ids):
        self.events.append(('subscribe', room_id, list(player_ids)))

    def close(self, room_id):
        self.events.append(('close', room_id, None))

    def game_start(self, room, player_id):
        self.events.append(('game_start', player_id, {
            'room_id': room.id,
            'side': room.players[player_id].side,
            'state': room.snapshot(),
        }))

    def game_update(self, room_id, snapshot):
        self.events.append(('game_update', room_id, snapshot))

    def game_started(self, room_id):
        self.events.append(('game_started', room_id, None))

    def game_over(self, room_id, result):
        self.events.append(('game_over', room_id, result))

    def player_disconnected(self, room_id, message='Opponent disconnected'):
        self.events.append(('player_disconnected', room_id, message))


@pytest.fixture()
def gateway():
    return RecordingGateway()


@pytest.fixture()
def arena(gateway):
    return Arena(gateway, rng=random.Random(1234))


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
