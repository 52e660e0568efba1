import threading
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .constants import (
    CENTER_X, CENTER_Y, DOWN, LEFT, PADDLE_MAX_Y, PADDLE_SPEED, PADDLE_START_Y, RIGHT, UP,
)


class RoomState(str, Enum):
    WAITING = 'waiting'
    READY_CHECK = 'ready_check'  # at least one player readied
    ACTIVE = 'active'
    FINISHED = 'finished'
    ABORTED = 'aborted'


PENDING_STATES = (RoomState.WAITING, RoomState.READY_CHECK)
TERMINAL_STATES = (RoomState.FINISHED, RoomState.ABORTED)


@dataclass
class Player:
    player_id: str
    side: str
    paddle_y: float = PADDLE_START_Y
    score: int = 0
    ready: bool = False

    def to_dict(self):
        return {
            'id': self.player_id,
            'paddle_y': self.paddle_y,
            'score': self.score,
            'side': self.side,
            'ready': self.ready,
        }


@dataclass
class Ball:
    x: float = CENTER_X
    y: float = CENTER_Y
    vx: float = 0.0
    vy: float = 0.0

    def to_dict(self):
        return {'x': self.x, 'y': self.y, 'vx': self.vx, 'vy': self.vy}


@dataclass(frozen=True)
class GameResult:
    winner_id: str
    winner_side: str
    scores: Dict[str, int] = field(default_factory=dict)  # {'left': n, 'right': m}

    def to_dict(self):
        return {
            'winner': self.winner_id,
            'winner_side': self.winner_side,
            'scores': dict(self.scores),
        }


def generate_room_id() -> str:
    return f"room_{uuid.uuid4().hex}"


class Room:
    """One isolated two-player match.

    All player and ball fields are guarded by ``lock``. Readiness, paddle
    moves and physics steps on the same room therefore never interleave.
    The lock is re-entrant so callers may hold it across several calls,
    e.g. to broadcast a snapshot consistent with the change they just made.
    """

    def __init__(self, left_id: str, right_id: str, room_id: Optional[str] = None, ball: Optional[Ball] = None):
        if left_id == right_id:
            raise ValueError('a room needs two distinct players')
        self.id = room_id or generate_room_id()
        self.players: Dict[str, Player] = {
            left_id: Player(player_id=left_id, side=LEFT),
            right_id: Player(player_id=right_id, side=RIGHT),
        }
        self.ball = ball or Ball()
        self.state = RoomState.WAITING
        self.started = False
        self.result: Optional[GameResult] = None
        self.lock = threading.RLock()

    def __repr__(self):
        return f"<Room {self.id} {self.state.value} {self.player_ids}>"

    @property
    def player_ids(self) -> List[str]:
        return list(self.players)

    @property
    def active(self) -> bool:
        return self.state is RoomState.ACTIVE

    @property
    def is_pending(self) -> bool:
        return self.state in PENDING_STATES

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def player_on(self, side: str) -> Optional[Player]:
        for player in self.players.values():
            if player.side == side:
                return player
        return None

    @property
    def left(self) -> Optional[Player]:
        return self.player_on(LEFT)

    @property
    def right(self) -> Optional[Player]:
        return self.player_on(RIGHT)

    def set_ready(self, player_id: str) -> bool:
        """Mark a player ready.

        Returns True only for the call that moved the room to ACTIVE.
        Unknown players and rooms past the ready check are ignored.
        """
        with self.lock:
            player = self.players.get(player_id)
            if player is None or not self.is_pending:
                return False
            player.ready = True
            if all(p.ready for p in self.players.values()):
                self.state = RoomState.ACTIVE
                self.started = True
                return True
            self.state = RoomState.READY_CHECK
            return False

    def apply_move(self, player_id: str, direction: str) -> bool:
        if direction not in (UP, DOWN):
            raise ValueError(f"unknown direction: {direction!r}")
        with self.lock:
            player = self.players.get(player_id)
            if player is None or not self.active:
                return False
            if direction == UP:
                player.paddle_y = max(0, player.paddle_y - PADDLE_SPEED)
            else:
                player.paddle_y = min(PADDLE_MAX_Y, player.paddle_y + PADDLE_SPEED)
            return True

    def finish(self, result: GameResult) -> bool:
        with self.lock:
            if self.state is not RoomState.ACTIVE:
                return False
            self.state = RoomState.FINISHED
            self.started = False
            self.result = result
            return True

    def abort(self) -> bool:
        with self.lock:
            if self.is_terminal:
                return False
            self.state = RoomState.ABORTED
            return True

    def snapshot(self):
        """Copy of the room's public state, safe to hand to the transport."""
        with self.lock:
            return {
                'players': {pid: p.to_dict() for pid, p in self.players.items()},
                'ball': self.ball.to_dict(),
                'active': self.active,
                'started': self.started,
            }
