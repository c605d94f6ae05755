"""
Scoring policy - turns a timed answer into a cricket delivery outcome
"""
import enum
import math
from dataclasses import dataclass
from typing import Optional

from learn_cricket.engine.errors import RangeError


class BallOutcome(enum.Enum):
    """Result of one delivery, valued by its scorebook symbol"""
    SIX = "6"
    FOUR = "4"
    SINGLE = "1"
    DOT = "0"
    WICKET = "W"
    NOT_BOWLED = "-"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def runs(self) -> int:
        """Runs credited for the ball (wickets and unbowled balls score nothing)"""
        return _RUNS.get(self, 0)

    @property
    def is_wicket(self) -> bool:
        return self is BallOutcome.WICKET

    @property
    def is_bowled(self) -> bool:
        return self is not BallOutcome.NOT_BOWLED

    @property
    def is_correct(self) -> Optional[bool]:
        """Whether the answer behind this ball was correct (None if not bowled)"""
        if self is BallOutcome.NOT_BOWLED:
            return None
        return self is not BallOutcome.WICKET

    @property
    def is_boundary(self) -> bool:
        return self in (BallOutcome.FOUR, BallOutcome.SIX)

    @property
    def label(self) -> str:
        return _LABELS[self]


_RUNS = {
    BallOutcome.SIX: 6,
    BallOutcome.FOUR: 4,
    BallOutcome.SINGLE: 1,
    BallOutcome.DOT: 0,
}

_LABELS = {
    BallOutcome.SIX: "Six!",
    BallOutcome.FOUR: "Four!",
    BallOutcome.SINGLE: "Single",
    BallOutcome.DOT: "Dot Ball",
    BallOutcome.WICKET: "Out!",
    BallOutcome.NOT_BOWLED: "",
}


@dataclass(frozen=True)
class ScoringThresholds:
    """Response time bounds in seconds; each bound belongs to the slower bucket"""
    six: float = 3.0
    four: float = 5.0
    single: float = 10.0

    def __post_init__(self):
        bounds = (self.six, self.four, self.single)
        if any(math.isnan(b) or b < 0 for b in bounds):
            raise RangeError(f"Thresholds must be non-negative, got {bounds}")
        if not (self.six <= self.four <= self.single):
            raise RangeError(f"Thresholds must ascend six <= four <= single, got {bounds}")


class ScoringPolicy:
    """
    Maps (response time, correctness) to a BallOutcome.

    Wrong answers are always a wicket. Correct answers are bucketed by time:
    under `six` seconds scores a six, under `four` a four, under `single`
    a single, anything slower is a dot ball.
    """

    def __init__(self, thresholds: Optional[ScoringThresholds] = None):
        self.thresholds = thresholds or ScoringThresholds()

    def evaluate(self, response_time: float, is_correct: bool) -> BallOutcome:
        if response_time is None or math.isnan(response_time) or response_time < 0:
            raise RangeError(f"Response time must be a non-negative number, got {response_time}")

        if not is_correct:
            return BallOutcome.WICKET

        t = self.thresholds
        if response_time < t.six:
            return BallOutcome.SIX
        if response_time < t.four:
            return BallOutcome.FOUR
        if response_time < t.single:
            return BallOutcome.SINGLE
        return BallOutcome.DOT
