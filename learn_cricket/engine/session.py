"""
Session orchestrator - runs one innings of timed questions end to end
"""
import enum
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol, Sequence

from learn_cricket.engine.adaptive import (
    AdaptiveRecommendation,
    AdaptiveSelector,
    Difficulty,
    SupplyRequest,
)
from learn_cricket.engine.errors import (
    InvalidStateError,
    MalformedQuestionError,
    RangeError,
    SupplyExhaustedError,
    TerminalStateError,
)
from learn_cricket.engine.events import (
    BallScored,
    EventBus,
    InningsCompleted,
    OverCompleted,
    SessionPaused,
)
from learn_cricket.engine.innings import InningsConfig, InningsState, InningsStateMachine, OverSummary
from learn_cricket.engine.performance import AggregatePerformance, PerformanceRecord, PerformanceTracker
from learn_cricket.engine.scoring import BallOutcome, ScoringPolicy, ScoringThresholds
from learn_cricket.engine.timer import ResponseTimer
from learn_cricket.validators.question_validator import Question, QuestionValidator

logger = logging.getLogger(__name__)


class SessionStatus(enum.Enum):
    NOT_STARTED = "not_started"
    AWAITING_SUPPLY = "awaiting_supply"
    AWAITING_ANSWER = "awaiting_answer"
    SCORING = "scoring"
    PAUSED = "paused"
    COMPLETE = "complete"
    ABORTED = "aborted"

    @property
    def is_finished(self) -> bool:
        return self in (SessionStatus.COMPLETE, SessionStatus.ABORTED)


@dataclass(frozen=True)
class AnswerResult:
    """Everything produced by scoring one answer"""
    ball_number: int
    question: Question
    option_index: int
    is_correct: bool
    response_time: float
    outcome: BallOutcome
    state: InningsState
    over_completed: bool
    over_summary: Optional[OverSummary]
    innings_complete: bool
    recommendation: AdaptiveRecommendation

    def to_ball_record(self) -> dict:
        return {
            "ball_number": self.ball_number,
            "outcome": self.outcome.symbol,
            "runs": self.outcome.runs,
            "is_correct": self.is_correct,
            "response_time": self.response_time,
            "question_id": self.question.id,
            "topic": self.question.topic,
            "difficulty": self.question.difficulty.value,
        }


class QuestionSupply(Protocol):
    async def fetch_questions(self, request: SupplyRequest) -> Sequence[dict]:
        ...


class ProgressPersistence(Protocol):
    def load_progress(self, session_key: str) -> Optional[dict]:
        ...

    def save_progress(self, session_key: str, snapshot: dict) -> None:
        ...

    def save_innings(self, session_key: str, config: InningsConfig, state: InningsState,
                     balls: Iterable[dict], summary: Optional[dict] = None) -> int:
        ...


class SessionOrchestrator:
    """
    Owns one session's timer, scoring policy, innings, tracker and selector.

    Each answer runs scoring, the innings update, performance recording and
    the next recommendation in that order without yielding, so an abort or a
    concurrent call never sees a half-applied ball. The only suspension point
    is the question supply.
    """

    def __init__(
        self,
        supply: QuestionSupply,
        store: Optional[ProgressPersistence] = None,
        session_key: str = "default",
        config: Optional[InningsConfig] = None,
        thresholds: Optional[ScoringThresholds] = None,
        clock: Callable[[], float] = time.monotonic,
        known_topics: Iterable[str] = (),
        buffer_ahead: int = 2,
        batch_size: int = 3,
        max_supply_attempts: int = 3,
        focus_count: int = 3,
        min_attempts: int = 3,
        recent_window: int = 3,
        difficulty_floor: Optional[Difficulty] = None,
        difficulty_ceiling: Optional[Difficulty] = None,
        bus: Optional[EventBus] = None,
    ):
        if buffer_ahead < 0:
            raise RangeError(f"buffer_ahead must be non-negative, got {buffer_ahead}")
        if batch_size < 1:
            raise RangeError(f"batch_size must be at least 1, got {batch_size}")
        if max_supply_attempts < 1:
            raise RangeError(f"max_supply_attempts must be at least 1, got {max_supply_attempts}")
        if difficulty_floor is not None and difficulty_ceiling is not None \
                and difficulty_floor.rank > difficulty_ceiling.rank:
            raise RangeError(
                f"Difficulty floor {difficulty_floor.value} is above ceiling {difficulty_ceiling.value}"
            )

        self.supply = supply
        self.store = store
        self.session_key = session_key
        self.bus = bus or EventBus()

        self.timer = ResponseTimer(clock)
        self.scoring = ScoringPolicy(thresholds)
        self.innings = InningsStateMachine(config)
        self.tracker = PerformanceTracker(min_attempts=min_attempts)
        self.selector = AdaptiveSelector(known_topics, focus_count=focus_count, min_attempts=min_attempts)

        self.buffer_ahead = buffer_ahead
        self.batch_size = batch_size
        self.max_supply_attempts = max_supply_attempts
        self.recent_window = recent_window
        self.difficulty_floor = difficulty_floor
        self.difficulty_ceiling = difficulty_ceiling

        self.status = SessionStatus.NOT_STARTED
        self.recommendation: Optional[AdaptiveRecommendation] = None
        self.history: list[AnswerResult] = []
        self.innings_record_id: Optional[int] = None
        self._queue: deque[Question] = deque()
        self._seen_ids: set[str] = set()
        self._current: Optional[Question] = None

    # ---- inspection ----

    @property
    def current_question(self) -> Optional[Question]:
        return self._current

    @property
    def buffered(self) -> int:
        """Questions queued behind the current one"""
        return len(self._queue)

    @property
    def state(self) -> InningsState:
        return self.innings.state

    @property
    def config(self) -> InningsConfig:
        return self.innings.config

    @property
    def last_result(self) -> Optional[AnswerResult]:
        return self.history[-1] if self.history else None

    def aggregate(self) -> AggregatePerformance:
        return self.tracker.aggregate()

    def summary(self) -> dict:
        return self.tracker.summary()

    def get_over_summary(self, over_index: int) -> OverSummary:
        return self.innings.get_over_summary(over_index)

    # ---- lifecycle ----

    async def start(self) -> Question:
        """Load stored progress, fill the buffer and present the first question"""
        if self.status is not SessionStatus.NOT_STARTED:
            raise InvalidStateError(f"Session already started ({self.status.value})")

        if self.store is not None:
            snapshot = self.store.load_progress(self.session_key)
            if snapshot:
                self.tracker.restore(AggregatePerformance.from_dict(snapshot))
                logger.info("Loaded progress for %s (%d questions)", self.session_key, self.tracker.aggregate().attempted)

        self.recommendation = self._recommend()
        logger.info(
            "Session %s started: %d overs, %d wickets, level %s",
            self.session_key, self.config.total_overs, self.config.total_wickets,
            self.recommendation.knowledge_level.value,
        )

        await self._advance()
        if self.status is SessionStatus.PAUSED:
            raise SupplyExhaustedError("Question supply could not provide the first question")
        return self._current

    async def submit_answer(self, option_index: int) -> AnswerResult:
        if self.status is SessionStatus.COMPLETE:
            raise TerminalStateError("Innings is over")
        if self.status is not SessionStatus.AWAITING_ANSWER:
            raise InvalidStateError(f"Not awaiting an answer ({self.status.value})")

        question = self._current
        if not isinstance(option_index, int) or isinstance(option_index, bool) \
                or not 0 <= option_index < len(question.options):
            raise RangeError(f"Option index must be in [0, {len(question.options) - 1}], got {option_index!r}")

        result = self._score(question, option_index)

        try:
            if self.store is not None:
                self.store.save_progress(self.session_key, self.tracker.aggregate().to_dict())
        except Exception as exc:
            # The ball stands; leave SCORING so the session can still finish or resume
            logger.error("Could not save progress for %s: %s", self.session_key, exc)
            if result.innings_complete:
                self.status = SessionStatus.COMPLETE
            else:
                self._pause("progress save failed")
            raise

        self.bus.publish(BallScored(
            ball_number=result.ball_number,
            outcome=result.outcome,
            response_time=result.response_time,
            question_id=question.id,
            topic=question.topic,
            state=result.state,
        ))
        if result.over_completed:
            self.bus.publish(OverCompleted(summary=result.over_summary, state=result.state))

        if result.innings_complete:
            self._complete(result)
            return result

        await self._advance()
        if self.status is SessionStatus.PAUSED:
            raise SupplyExhaustedError("Question supply exhausted; session paused", result=result)
        return result

    async def resume(self) -> Question:
        """Retry the supply for a paused session"""
        if self.status is not SessionStatus.PAUSED:
            raise InvalidStateError(f"Only a paused session can resume ({self.status.value})")
        logger.info("Resuming session %s", self.session_key)
        await self._advance()
        if self.status is SessionStatus.PAUSED:
            raise SupplyExhaustedError("Question supply still exhausted")
        return self._current

    def abort(self) -> None:
        """Stop the session, keeping the last fully applied ball"""
        if self.status.is_finished:
            return
        self.timer.reset()
        self._current = None
        self._queue.clear()
        self.status = SessionStatus.ABORTED
        logger.info("Session %s aborted at %r", self.session_key, self.innings.state)

    # ---- internals ----

    def _recommend(self) -> AdaptiveRecommendation:
        return self.selector.recommend(
            self.tracker.aggregate(),
            floor=self.difficulty_floor,
            ceiling=self.difficulty_ceiling,
        )

    def _score(self, question: Question, option_index: int) -> AnswerResult:
        self.status = SessionStatus.SCORING
        elapsed = self.timer.stop()
        is_correct = question.is_correct(option_index)

        outcome = self.scoring.evaluate(elapsed, is_correct)
        state = self.innings.apply_ball(outcome)
        self.tracker.record(PerformanceRecord(
            topic=question.topic,
            difficulty=question.difficulty.value,
            is_correct=is_correct,
            response_time_seconds=elapsed,
            question_id=question.id,
        ))
        self.recommendation = self._recommend()

        over_completed = self.innings.is_over_complete()
        over_summary = None
        if over_completed:
            over_summary = self.innings.get_over_summary(state.balls_bowled // state.balls_per_over - 1)

        result = AnswerResult(
            ball_number=state.balls_bowled,
            question=question,
            option_index=option_index,
            is_correct=is_correct,
            response_time=elapsed,
            outcome=outcome,
            state=state,
            over_completed=over_completed,
            over_summary=over_summary,
            innings_complete=state.status.is_terminal,
            recommendation=self.recommendation,
        )
        self.history.append(result)
        self._current = None
        logger.debug("Ball %d: %s in %.2fs -> %r", result.ball_number, outcome.label, elapsed, state)
        return result

    def _complete(self, result: AnswerResult) -> None:
        self.status = SessionStatus.COMPLETE
        self._queue.clear()
        summary = self.tracker.summary()
        if self.store is not None:
            self.innings_record_id = self.store.save_innings(
                self.session_key,
                self.config,
                result.state,
                [r.to_ball_record() for r in self.history],
                summary,
            )
        logger.info("Session %s complete: %r", self.session_key, result.state)
        self.bus.publish(InningsCompleted(status=result.state.status, state=result.state, summary=summary))

    async def _advance(self) -> None:
        """Refill the buffer, then present the next question or pause"""
        self.status = SessionStatus.AWAITING_SUPPLY
        try:
            await self._refill()
        except Exception:
            if self.status is SessionStatus.AWAITING_SUPPLY:
                self._pause("question supply failed")
            raise

        if self.status is not SessionStatus.AWAITING_SUPPLY:
            # aborted while waiting on the supply
            return
        if not self._queue:
            self._pause("question supply exhausted")
            return

        self._current = self._queue.popleft()
        self.timer.reset()
        self.timer.start()
        self.status = SessionStatus.AWAITING_ANSWER

    async def _refill(self) -> None:
        failures = 0
        while self.selector.needs_supply(len(self._queue) - 1, self.buffer_ahead, self.innings.balls_remaining):
            if failures >= self.max_supply_attempts:
                logger.warning(
                    "Could not refill question buffer for %s (%d queued) after %d attempts",
                    self.session_key, len(self._queue), failures,
                )
                return
            request = self.selector.build_request(
                self.recommendation,
                self.tracker.recent_topics(self.recent_window),
                count=self.batch_size,
            )
            logger.debug("Requesting %d question(s): %s", request.count, request)
            records = await self.supply.fetch_questions(request)
            if self.status is not SessionStatus.AWAITING_SUPPLY:
                return
            if self._accept(records or ()) == 0:
                failures += 1
            else:
                failures = 0

    def _accept(self, records: Iterable[dict]) -> int:
        accepted = 0
        for raw in records:
            try:
                question = QuestionValidator.parse(raw)
            except MalformedQuestionError as exc:
                logger.warning("Discarding malformed question: %s", exc)
                continue
            if question.id in self._seen_ids:
                logger.warning("Discarding duplicate question %s", question.id)
                continue
            self._seen_ids.add(question.id)
            self._queue.append(question)
            accepted += 1
        return accepted

    def _pause(self, reason: str) -> None:
        self.status = SessionStatus.PAUSED
        logger.info("Session %s paused: %s", self.session_key, reason)
        self.bus.publish(SessionPaused(reason=reason, balls_bowled=self.innings.balls_bowled))
