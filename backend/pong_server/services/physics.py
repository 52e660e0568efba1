import random
from typing import Optional

from pong_server.constants import (
    BALL_MAX_Y, BALL_SIZE, BALL_SPEED, CENTER_X, CENTER_Y, DEFLECTION_FACTOR, FIELD_WIDTH,
    LEFT, PADDLE_HEIGHT, PADDLE_WIDTH, RIGHT, WINNING_SCORE,
)
from pong_server.models import Ball, GameResult, Player, Room


def serve(ball: Ball, rng=None) -> None:
    """Put the ball back at the centre with a fresh random velocity."""
    rng = rng or random
    ball.x = CENTER_X
    ball.y = CENTER_Y
    ball.vx = BALL_SPEED if rng.random() > 0.5 else -BALL_SPEED
    ball.vy = (rng.random() - 0.5) * BALL_SPEED


def deflection(ball_y: float, paddle_y: float) -> float:
    """Vertical velocity after a paddle hit.

    The hit offset runs from 0 at the paddle's top edge to 1 at its bottom
    edge; the centre returns the ball flat.
    """
    hit = (ball_y + BALL_SIZE / 2 - paddle_y) / PADDLE_HEIGHT
    hit = max(0.0, min(1.0, hit))
    return (hit - 0.5) * BALL_SPEED * DEFLECTION_FACTOR


def _overlaps(ball: Ball, paddle: Player) -> bool:
    return ball.y + BALL_SIZE >= paddle.paddle_y and ball.y <= paddle.paddle_y + PADDLE_HEIGHT


def _reflect_walls(ball: Ball) -> None:
    if ball.y <= 0 or ball.y >= BALL_MAX_Y:
        ball.vy = -ball.vy
        ball.y = max(0, min(BALL_MAX_Y, ball.y))


def _collide_paddles(ball: Ball, left: Player, right: Player) -> None:
    if ball.x <= PADDLE_WIDTH and _overlaps(ball, left):
        ball.vx = abs(ball.vx)
        ball.x = PADDLE_WIDTH
        ball.vy = deflection(ball.y, left.paddle_y)
    if ball.x + BALL_SIZE >= FIELD_WIDTH - PADDLE_WIDTH and _overlaps(ball, right):
        ball.vx = -abs(ball.vx)
        ball.x = FIELD_WIDTH - PADDLE_WIDTH - BALL_SIZE
        ball.vy = deflection(ball.y, right.paddle_y)


def _result(winner: Player, left: Player, right: Player) -> GameResult:
    return GameResult(
        winner_id=winner.player_id,
        winner_side=winner.side,
        scores={LEFT: left.score, RIGHT: right.score},
    )


def step(room: Room, rng=None) -> Optional[GameResult]:
    """Advance one tick of ball physics for the room.

    Walls are resolved before paddles, paddles before scoring. A ball that
    touches a wall and a paddle in the same tick gets both corrections.
    Returns the final result when this tick's point wins the game.
    """
    left, right = room.left, room.right
    if left is None or right is None:
        return None
    ball = room.ball

    ball.x += ball.vx
    ball.y += ball.vy

    _reflect_walls(ball)
    _collide_paddles(ball, left, right)

    scorer = None
    if ball.x <= 0:
        scorer = right
    elif ball.x >= FIELD_WIDTH:
        scorer = left
    if scorer is None:
        return None

    scorer.score += 1
    serve(ball, rng)
    if scorer.score >= WINNING_SCORE:
        return _result(scorer, left, right)
    return None
