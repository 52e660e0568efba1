"""Room simulation and the shared structures around it.

Ball physics, the waiting queue, the player-to-room index, the arena that
ties them together, and the fixed-rate drivers. Nothing here imports Flask
request state; the socket layer talks to it through ``Arena``.
"""
