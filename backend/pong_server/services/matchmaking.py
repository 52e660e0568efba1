import logging
import threading
from collections import deque
from typing import Callable, List, Optional

from pong_server.models import Ball, Room
from .physics import serve
from .registry import SessionRegistry

logger = logging.getLogger(__name__)


class MatchmakingQueue:
    """FIFO of connection ids waiting for an opponent.

    Pairing holds the queue lock while it registers the new room, so an id
    is never visible in the queue and the registry at the same time. Lock
    order is always queue, then registry.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._waiting = deque()

    def __len__(self):
        with self._lock:
            return len(self._waiting)

    def __contains__(self, player_id):
        with self._lock:
            return player_id in self._waiting

    def waiting(self) -> List[str]:
        with self._lock:
            return list(self._waiting)

    def enqueue(self, player_id: str, front: bool = False) -> bool:
        """Add a waiting id; ``front`` puts it back ahead of later arrivals."""
        with self._lock:
            if player_id in self._waiting:
                return False
            if front:
                self._waiting.appendleft(player_id)
            else:
                self._waiting.append(player_id)
            return True

    def remove(self, player_id: str) -> bool:
        with self._lock:
            try:
                self._waiting.remove(player_id)
            except ValueError:
                return False
            return True

    def _pop_live(self, is_live: Callable[[str], bool]) -> Optional[str]:
        while self._waiting:
            player_id = self._waiting.popleft()
            if is_live(player_id):
                return player_id
            logger.debug("[queue-stale] dropped player=%s", player_id)
        return None

    def try_pair(self, is_live: Callable[[str], bool], registry: SessionRegistry, rng=None) -> Optional[Room]:
        """Pair the two oldest live ids into a new registered room.

        Stale ids met on the way are discarded. A lone live id stays at the
        head of the queue.
        """
        with self._lock:
            first = self._pop_live(is_live)
            if first is None:
                return None
            second = self._pop_live(is_live)
            if second is None:
                self._waiting.appendleft(first)
                return None
            ball = Ball()
            serve(ball, rng)
            room = Room(first, second, ball=ball)
            registry.add(room)
            return room
