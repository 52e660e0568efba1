import time
from typing import Callable, List

from pong_server import socketio


class FixedRateLoop:
    """Call ``callback`` every ``interval`` seconds on a background task.

    Deadlines are computed from the loop's start so a slow pass does not
    push every later pass back. If a pass overruns by more than a whole
    interval the missed passes are skipped, not replayed.
    """

    def __init__(self, app, name: str, interval: float, callback: Callable[[], object]):
        if interval <= 0:
            raise ValueError('interval must be positive')
        self.app = app
        self.name = name
        self.interval = interval
        self.callback = callback
        self.running = False
        self._task = None

    def start(self) -> None:
        if self.running:
            return
        self.running = True
        self._task = socketio.start_background_task(self._run)
        self.app.logger.info(f"[loop-start] {self.name} interval={self.interval:.4f}s")

    def stop(self) -> None:
        self.running = False

    def run_once(self) -> None:
        try:
            self.callback()
        except Exception:
            self.app.logger.exception(f"[loop-error] {self.name}")

    def _run(self) -> None:
        next_at = time.monotonic()
        while self.running:
            self.run_once()
            next_at += self.interval
            now = time.monotonic()
            if next_at < now - self.interval:
                next_at = now
            socketio.sleep(max(0.0, next_at - now))
        self.app.logger.info(f"[loop-stop] {self.name}")


def start_loops(app, arena) -> List[FixedRateLoop]:
    """Start the tick driver and the matchmaking driver for the arena.

    - No-ops in TESTING mode unless ENABLE_LOOPS_IN_TESTS is set
    - The two drivers run independently; neither waits on the other
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_LOOPS_IN_TESTS'):
        return []

    tick_rate = int(app.config.get('TICK_RATE_HZ', 60))
    pairing_interval = float(app.config.get('MATCHMAKING_INTERVAL_SEC', 1.0))
    heartbeat = int(app.config.get('STATS_LOG_INTERVAL_SEC', 0))
    last_heartbeat = time.monotonic()

    def _matchmaking():
        nonlocal last_heartbeat
        arena.pair_waiting()
        if heartbeat > 0 and time.monotonic() - last_heartbeat >= heartbeat:
            last_heartbeat = time.monotonic()
            stats = arena.stats()
            app.logger.info(
                f"[stats-heartbeat] rooms={stats['rooms']} waiting={stats['waiting']} connections={stats['connections']}"
            )

    loops = [
        FixedRateLoop(app, 'tick', 1.0 / tick_rate, arena.tick),
        FixedRateLoop(app, 'matchmaking', pairing_interval, _matchmaking),
    ]
    for loop in loops:
        loop.start()
    return loops
