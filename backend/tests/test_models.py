import pytest

from pong_server.constants import PADDLE_MAX_Y, PADDLE_SPEED, PADDLE_START_Y
from pong_server.models import GameResult, Room, RoomState


@pytest.fixture()
def room():
    return Room('alice', 'bob')


def test_new_room_waits_with_centred_paddles(room):
    assert room.state is RoomState.WAITING
    assert not room.active and not room.started
    assert room.left.player_id == 'alice'
    assert room.right.player_id == 'bob'
    assert room.left.paddle_y == room.right.paddle_y == PADDLE_START_Y
    assert room.id.startswith('room_')


def test_room_ids_are_unique():
    assert Room('a', 'b').id != Room('a', 'b').id


def test_room_rejects_same_player_twice():
    with pytest.raises(ValueError):
        Room('alice', 'alice')


@pytest.mark.parametrize('order', [('alice', 'bob'), ('bob', 'alice')])
def test_both_ready_activates_once(room, order):
    first, second = order
    assert room.set_ready(first) is False
    assert room.state is RoomState.READY_CHECK
    assert room.set_ready(second) is True
    assert room.state is RoomState.ACTIVE
    assert room.active and room.started
    # further readies are ignored
    assert room.set_ready(first) is False
    assert room.set_ready(second) is False


def test_ready_from_stranger_is_ignored(room):
    assert room.set_ready('mallory') is False
    assert room.state is RoomState.WAITING


def test_moves_ignored_until_active(room):
    assert room.apply_move('alice', 'up') is False
    assert room.left.paddle_y == PADDLE_START_Y


def test_moves_clamp_to_field(room):
    room.set_ready('alice')
    room.set_ready('bob')
    assert room.apply_move('alice', 'up') is True
    assert room.left.paddle_y == PADDLE_START_Y - PADDLE_SPEED
    for _ in range(100):
        room.apply_move('alice', 'up')
        room.apply_move('bob', 'down')
    assert room.left.paddle_y == 0
    assert room.right.paddle_y == PADDLE_MAX_Y
    assert room.apply_move('mallory', 'down') is False


def test_unknown_direction_raises(room):
    with pytest.raises(ValueError):
        room.apply_move('alice', 'sideways')


def test_finish_only_from_active(room):
    result = GameResult('alice', 'left', {'left': 6, 'right': 0})
    assert room.finish(result) is False
    room.set_ready('alice')
    room.set_ready('bob')
    assert room.finish(result) is True
    assert room.state is RoomState.FINISHED
    assert room.result == result
    assert not room.active and not room.started
    assert room.finish(result) is False
    assert room.abort() is False


def test_abort_is_terminal_and_idempotent(room):
    assert room.abort() is True
    assert room.state is RoomState.ABORTED
    assert room.abort() is False
    assert room.set_ready('alice') is False


def test_snapshot_is_a_detached_copy(room):
    snap = room.snapshot()
    assert set(snap) == {'players', 'ball', 'active', 'started'}
    assert snap['players']['alice'] == {
        'id': 'alice', 'paddle_y': PADDLE_START_Y, 'score': 0, 'side': 'left', 'ready': False,
    }
    snap['players']['alice']['score'] = 99
    snap['ball']['x'] = -1
    assert room.left.score == 0
    assert room.ball.x != -1
