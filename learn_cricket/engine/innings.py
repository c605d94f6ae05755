"""
Innings state machine - applies scored balls to the match state
"""
import copy
import enum
from dataclasses import dataclass, field
from typing import Optional

from learn_cricket.engine.errors import RangeError, TerminalStateError
from learn_cricket.engine.scoring import BallOutcome


class InningsStatus(enum.Enum):
    IN_PROGRESS = "in_progress"
    ALL_OUT = "all_out"
    OVERS_COMPLETE = "overs_complete"

    @property
    def is_terminal(self) -> bool:
        return self is not InningsStatus.IN_PROGRESS


@dataclass(frozen=True)
class InningsConfig:
    """Shape of an innings"""
    total_overs: int = 2
    balls_per_over: int = 6
    total_wickets: int = 5

    def __post_init__(self):
        if self.total_overs < 1:
            raise RangeError(f"total_overs must be at least 1, got {self.total_overs}")
        if self.balls_per_over < 1:
            raise RangeError(f"balls_per_over must be at least 1, got {self.balls_per_over}")
        # The last wicket is always held in reserve, so one wicket means no innings at all
        if self.total_wickets < 2:
            raise RangeError(f"total_wickets must be at least 2, got {self.total_wickets}")

    @property
    def total_balls(self) -> int:
        return self.total_overs * self.balls_per_over

    @property
    def all_out_wickets(self) -> int:
        """Wickets that end the innings: one short of the full pool"""
        return self.total_wickets - 1


@dataclass
class Boundaries:
    fours: int = 0
    sixes: int = 0


@dataclass
class InningsState:
    """Current state of an innings"""
    balls_per_over: int
    ball_results: list[BallOutcome]
    runs: int = 0
    wickets_lost: int = 0
    balls_bowled: int = 0
    boundaries: Boundaries = field(default_factory=Boundaries)
    dot_balls: int = 0
    singles: int = 0
    status: InningsStatus = InningsStatus.IN_PROGRESS

    @property
    def overs_played(self) -> float:
        return self.balls_bowled // self.balls_per_over + (self.balls_bowled % self.balls_per_over) / self.balls_per_over

    @property
    def overs_display(self) -> str:
        return f"{self.balls_bowled // self.balls_per_over}.{self.balls_bowled % self.balls_per_over}"

    @property
    def strike_rate(self) -> float:
        if self.balls_bowled == 0:
            return 0.0
        return (self.runs / self.balls_bowled) * 100

    @property
    def run_rate(self) -> float:
        if self.balls_bowled == 0:
            return 0.0
        return self.runs / self.overs_played

    @property
    def balls_remaining(self) -> int:
        return len(self.ball_results) - self.balls_bowled

    @property
    def score_display(self) -> str:
        return f"{self.runs}/{self.wickets_lost}"

    def __repr__(self):
        return f"<Innings {self.score_display} ({self.overs_display}) {self.status.value}>"


@dataclass(frozen=True)
class OverSummary:
    """Breakdown of one started over"""
    over_index: int
    runs_in_over: int
    wickets_in_over: int
    dots_in_over: int
    balls: tuple[BallOutcome, ...]

    @property
    def is_maiden(self) -> bool:
        return self.runs_in_over == 0 and len(self.balls) > 0


class InningsStateMachine:
    """
    Owns the authoritative innings state and applies outcomes ball by ball.

    The innings ends when `total_wickets - 1` wickets have fallen (all out)
    or every ball has been bowled (overs complete). When both happen on the
    same ball, all out wins.
    """

    def __init__(self, config: Optional[InningsConfig] = None):
        self.config = config or InningsConfig()
        self._state = InningsState(
            balls_per_over=self.config.balls_per_over,
            ball_results=[BallOutcome.NOT_BOWLED] * self.config.total_balls,
        )

    @property
    def state(self) -> InningsState:
        """Detached copy of the current state"""
        return copy.deepcopy(self._state)

    @property
    def status(self) -> InningsStatus:
        return self._state.status

    @property
    def is_terminal(self) -> bool:
        return self._state.status.is_terminal

    @property
    def balls_bowled(self) -> int:
        return self._state.balls_bowled

    @property
    def balls_remaining(self) -> int:
        return self._state.balls_remaining

    @property
    def overs_started(self) -> int:
        bpo = self.config.balls_per_over
        return (self._state.balls_bowled + bpo - 1) // bpo

    def apply_ball(self, outcome: BallOutcome) -> InningsState:
        """Apply one delivery and return a copy of the resulting state"""
        if self.is_terminal:
            raise TerminalStateError(f"Innings already finished ({self._state.status.value})")
        if not isinstance(outcome, BallOutcome) or outcome is BallOutcome.NOT_BOWLED:
            raise RangeError(f"Cannot apply {outcome!r} as a delivery")

        state = self._state
        state.ball_results[state.balls_bowled] = outcome
        state.balls_bowled += 1
        state.runs += outcome.runs

        if outcome is BallOutcome.SIX:
            state.boundaries.sixes += 1
        elif outcome is BallOutcome.FOUR:
            state.boundaries.fours += 1
        elif outcome is BallOutcome.SINGLE:
            state.singles += 1
        elif outcome is BallOutcome.DOT:
            state.dot_balls += 1
        elif outcome is BallOutcome.WICKET:
            state.wickets_lost += 1

        if state.wickets_lost >= self.config.all_out_wickets:
            state.status = InningsStatus.ALL_OUT
        elif state.balls_bowled >= self.config.total_balls:
            state.status = InningsStatus.OVERS_COMPLETE

        return self.state

    def is_over_complete(self) -> bool:
        """True when the last ball closed an over and play continues"""
        balls = self._state.balls_bowled
        return (
            balls > 0
            and balls % self.config.balls_per_over == 0
            and not self.is_terminal
        )

    def get_over_summary(self, over_index: int) -> OverSummary:
        if not isinstance(over_index, int) or over_index < 0 or over_index >= self.overs_started:
            raise RangeError(f"Over {over_index} has not been started ({self.overs_started} overs started)")

        bpo = self.config.balls_per_over
        start = over_index * bpo
        end = min(start + bpo, self._state.balls_bowled)
        balls = tuple(self._state.ball_results[start:end])
        return OverSummary(
            over_index=over_index,
            runs_in_over=sum(b.runs for b in balls),
            wickets_in_over=sum(1 for b in balls if b is BallOutcome.WICKET),
            dots_in_over=sum(1 for b in balls if b is BallOutcome.DOT),
            balls=balls,
        )

    def over_summaries(self) -> list[OverSummary]:
        return [self.get_over_summary(i) for i in range(self.overs_started)]
