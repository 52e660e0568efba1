from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import logging
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(raw):
    origins = [o.strip() for o in (raw or '*').split(',') if o.strip()]
    return '*' if origins in ([], ['*']) else origins


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    if not flask_app.config.get('TESTING'):
        logging.basicConfig(
            level=flask_app.config.get('LOG_LEVEL', 'INFO'),
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS'))
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from pong_server.main import main
    flask_app.register_blueprint(main)

    # One arena per app: owns the queue, the rooms and the live connections
    from pong_server.services.arena import Arena
    from pong_server.socketio_events import SocketIOGateway, register_socketio_handlers
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    arena = Arena(SocketIOGateway(socketio, namespace))
    flask_app.extensions['pong'] = arena
    register_socketio_handlers(namespace)

    from pong_server.services.scheduler import start_loops
    flask_app.extensions['pong_loops'] = start_loops(flask_app, arena)

    return flask_app
