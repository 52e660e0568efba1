"""Gameplay constants shared with the rendering client.

The client draws with the same numbers, so these are not configuration.
"""

FIELD_WIDTH = 800
FIELD_HEIGHT = 400
PADDLE_WIDTH = 10
PADDLE_HEIGHT = 80
BALL_SIZE = 10
PADDLE_SPEED = 5
BALL_SPEED = 4
WINNING_SCORE = 6

# Vertical speed factor applied to the normalized paddle hit offset
DEFLECTION_FACTOR = 1.5

LEFT = 'left'
RIGHT = 'right'

UP = 'up'
DOWN = 'down'
DIRECTIONS = (UP, DOWN)

PADDLE_START_Y = FIELD_HEIGHT / 2 - PADDLE_HEIGHT / 2
PADDLE_MAX_Y = FIELD_HEIGHT - PADDLE_HEIGHT
BALL_MAX_Y = FIELD_HEIGHT - BALL_SIZE
CENTER_X = FIELD_WIDTH / 2
CENTER_Y = FIELD_HEIGHT / 2
