"""
Response timer - measures one question/answer cycle
"""
import enum
import time
from typing import Callable, Optional

from learn_cricket.engine.errors import InvalidStateError


class TimerState(enum.Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPED = "stopped"


class ResponseTimer:
    """
    Restartable stopwatch for a single active question.

    The time source is injected so tests can drive it; it must be monotonic
    and return seconds.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._state = TimerState.NOT_STARTED
        self._started_at: Optional[float] = None
        self._elapsed = 0.0

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == TimerState.RUNNING

    @property
    def elapsed(self) -> float:
        """Seconds elapsed so far (live while running, frozen once stopped)"""
        if self._state == TimerState.RUNNING:
            return max(0.0, self._clock() - self._started_at)
        return self._elapsed

    def start(self) -> None:
        if self._state == TimerState.RUNNING:
            raise InvalidStateError("Timer is already running")
        self._started_at = self._clock()
        self._elapsed = 0.0
        self._state = TimerState.RUNNING

    def stop(self) -> float:
        """Stop the timer and return elapsed seconds since start()"""
        if self._state != TimerState.RUNNING:
            raise InvalidStateError("Timer is not running")
        self._elapsed = max(0.0, self._clock() - self._started_at)
        self._state = TimerState.STOPPED
        return self._elapsed

    def reset(self) -> None:
        self._started_at = None
        self._elapsed = 0.0
        self._state = TimerState.NOT_STARTED
