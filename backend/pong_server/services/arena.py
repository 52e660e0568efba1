"""Process-wide owner of connections, the waiting queue and live rooms.

One ``Arena`` is created per app and handed to the socket handlers and to
the background drivers. Every room mutation goes through here so the
broadcast for a change is sent while the room lock is still held; two
events for the same room therefore always leave in the order they happened.
"""
import logging
import threading
from typing import List

from pong_server.models import Room
from .matchmaking import MatchmakingQueue
from .physics import step
from .registry import SessionRegistry

logger = logging.getLogger(__name__)


class Arena:
    def __init__(self, gateway, rng=None):
        self.gateway = gateway
        self.rng = rng
        self.queue = MatchmakingQueue()
        self.registry = SessionRegistry()
        self._lock = threading.Lock()
        self._connections = set()

    def is_live(self, player_id: str) -> bool:
        with self._lock:
            return player_id in self._connections

    def stats(self):
        with self._lock:
            connections = len(self._connections)
        return {
            'rooms': len(self.registry),
            'waiting': len(self.queue),
            'connections': connections,
        }

    # ---- connection lifecycle ----

    def connect(self, player_id: str) -> None:
        with self._lock:
            self._connections.add(player_id)
        self.queue.enqueue(player_id)
        self.gateway.waiting(player_id)
        logger.info("Player connected: %s (waiting=%d)", player_id, len(self.queue))

    def disconnect(self, player_id: str) -> bool:
        """Forget a connection and abort its room.

        Returns True when this call aborted a room and sent the notice. A
        second call, or a room already finished by the tick driver, sends
        nothing.
        """
        with self._lock:
            self._connections.discard(player_id)
        self.queue.remove(player_id)
        room = self.registry.room_for(player_id)
        if room is None:
            logger.info("Player disconnected: %s", player_id)
            return False
        with room.lock:
            aborted = room.abort()
            if aborted:
                self.gateway.player_disconnected(room.id)
        self._teardown(room)
        if aborted:
            logger.info("[room-aborted] room=%s left_by=%s", room.id, player_id)
        return aborted

    # ---- matchmaking ----

    def pair_waiting(self) -> List[Room]:
        """Drain the queue two at a time, oldest first."""
        paired = []
        while True:
            room = self.queue.try_pair(self.is_live, self.registry, self.rng)
            if room is None:
                break
            with room.lock:
                # A player dropped before anyone was told about the room
                if room.is_terminal:
                    self._teardown(room)
                    self._requeue_survivors(room)
                    continue
                self.gateway.subscribe(room.id, room.player_ids)
                for player_id in room.player_ids:
                    self.gateway.game_start(room, player_id)
            logger.info("[room-created] room=%s left=%s right=%s",
                        room.id, room.left.player_id, room.right.player_id)
            paired.append(room)
        return paired

    def _requeue_survivors(self, room: Room) -> None:
        # Reversed so the left player ends up first again
        for player_id in reversed(room.player_ids):
            if self.is_live(player_id):
                self.queue.enqueue(player_id, front=True)
                self.gateway.waiting(player_id)
                logger.info("[room-unpaired] room=%s requeued=%s", room.id, player_id)

    # ---- inbound intents ----

    def set_ready(self, player_id: str) -> bool:
        room = self.registry.room_for(player_id)
        if room is None:
            return False
        with room.lock:
            if not room.is_pending or player_id not in room.players:
                return False
            activated = room.set_ready(player_id)
            self.gateway.game_update(room.id, room.snapshot())
            if activated:
                self.gateway.game_started(room.id)
        if activated:
            logger.info("[room-started] room=%s", room.id)
        return True

    def move(self, player_id: str, direction: str) -> bool:
        room = self.registry.room_for(player_id)
        if room is None:
            return False
        return room.apply_move(player_id, direction)

    # ---- tick ----

    def tick(self) -> int:
        """Run one simulation pass over every live room.

        Returns how many rooms were stepped.
        """
        stepped = 0
        for room in self.registry.rooms():
            if len(room.players) != 2:
                logger.warning("[tick-drop] room=%s players=%d", room.id, len(room.players))
                with room.lock:
                    if room.abort():
                        self.gateway.player_disconnected(room.id, message='Game aborted')
                self._teardown(room)
                continue
            ended = False
            with room.lock:
                if not room.active:
                    continue
                try:
                    result = step(room, self.rng)
                except Exception:
                    logger.exception("[tick-error] room=%s", room.id)
                    ended = room.abort()
                    if ended:
                        self.gateway.player_disconnected(room.id, message='Game aborted')
                    result = None
                else:
                    stepped += 1
                    if result is None:
                        self.gateway.game_update(room.id, room.snapshot())
                    elif room.finish(result):
                        ended = True
                        self.gateway.game_over(room.id, result)
            # A room aborted by a concurrent disconnect is torn down there
            if ended:
                self._teardown(room)
                if result is not None:
                    logger.info("[room-finished] room=%s winner=%s scores=%s",
                                room.id, result.winner_id, result.scores)
        return stepped

    def _teardown(self, room: Room) -> None:
        if self.registry.remove(room.id) is not None:
            self.gateway.close(room.id)
