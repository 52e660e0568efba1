from flask import current_app, request
from flask_socketio import emit
from typing import Any, Dict, Iterable
import logging

from pong_server import socketio
from pong_server.constants import DIRECTIONS

logger = logging.getLogger(__name__)


class SocketIOGateway:
    """Outbound side of the message channel.

    Each room gets a Socket.IO room of the same id, so room events are a
    single emit. Uses ``socketio.emit`` throughout since most calls come
    from the background drivers, outside any request context.
    """

    def __init__(self, sio, namespace: str = '/'):
        self.sio = sio
        self.namespace = namespace

    def _emit(self, event: str, payload: Dict[str, Any], to: str) -> None:
        self.sio.emit(event, payload, to=to, namespace=self.namespace)

    def waiting(self, player_id: str) -> None:
        self._emit('waiting', {'message': 'Waiting for an opponent...'}, player_id)

    def subscribe(self, room_id: str, player_ids: Iterable[str]) -> None:
        for pid in player_ids:
            try:
                self.sio.server.enter_room(pid, room_id, namespace=self.namespace)
            except KeyError:
                # Socket already gone; its disconnect handler aborts the room
                logger.warning("[subscribe-miss] room=%s player=%s", room_id, pid)

    def close(self, room_id: str) -> None:
        self.sio.server.close_room(room_id, namespace=self.namespace)

    def game_start(self, room, player_id: str) -> None:
        self._emit('game_start', {
            'room_id': room.id,
            'side': room.players[player_id].side,
            'state': room.snapshot(),
        }, player_id)

    def game_update(self, room_id: str, snapshot: Dict[str, Any]) -> None:
        self._emit('game_update', snapshot, room_id)

    def game_started(self, room_id: str) -> None:
        self._emit('game_started', {'room_id': room_id}, room_id)

    def game_over(self, room_id: str, result) -> None:
        self._emit('game_over', result.to_dict(), room_id)

    def player_disconnected(self, room_id: str, message: str = 'Opponent disconnected') -> None:
        self._emit('player_disconnected', {'message': message, 'winner': None}, room_id)


def _arena():
    return current_app.extensions['pong']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    _arena().connect(_get_sid())


def handle_disconnect(reason=None):
    _arena().disconnect(_get_sid())


def handle_ready(data=None):
    _arena().set_ready(_get_sid())


def handle_move(data):
    direction = data.get('direction') if isinstance(data, dict) else None
    if direction not in DIRECTIONS:
        logger.warning("[bad-move] player=%s payload=%r", _get_sid(), data)
        emit('error', {'message': 'direction must be one of: up, down'})
        return
    _arena().move(_get_sid(), direction)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('ready', handle_ready, namespace=namespace)
    socketio.on_event('move', handle_move, namespace=namespace)
