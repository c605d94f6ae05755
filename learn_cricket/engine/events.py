"""
Session events - published once a ball has been fully applied
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable

from learn_cricket.engine.innings import InningsState, InningsStatus, OverSummary
from learn_cricket.engine.scoring import BallOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BallScored:
    ball_number: int
    outcome: BallOutcome
    response_time: float
    question_id: str
    topic: str
    state: InningsState


@dataclass(frozen=True)
class OverCompleted:
    summary: OverSummary
    state: InningsState


@dataclass(frozen=True)
class InningsCompleted:
    status: InningsStatus
    state: InningsState
    summary: dict


@dataclass(frozen=True)
class SessionPaused:
    reason: str
    balls_bowled: int


class EventBus:
    """Synchronous publish/subscribe; handlers run in subscription order"""

    def __init__(self):
        self._handlers: dict[type, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Callable) -> Callable[[], None]:
        """Register a handler; returns a callable that unsubscribes it"""
        self._handlers[event_type].append(handler)

        def unsubscribe():
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

        return unsubscribe

    def publish(self, event) -> None:
        handlers = list(self._handlers.get(type(event), ()))
        logger.debug("Publishing %s to %d handler(s)", type(event).__name__, len(handlers))
        for handler in handlers:
            handler(event)
