import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated; '*' accepts every origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Simulation driver (ticks per second)
    TICK_RATE_HZ = int(os.environ.get('TICK_RATE_HZ', '60'))
    # Matchmaking driver period (seconds)
    MATCHMAKING_INTERVAL_SEC = float(os.environ.get('MATCHMAKING_INTERVAL_SEC', '1.0'))
    # Optional: heartbeat interval for room/queue stats logs (sec). 0 disables.
    STATS_LOG_INTERVAL_SEC = int(os.environ.get('STATS_LOG_INTERVAL_SEC', '0'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3001'))
