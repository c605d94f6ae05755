"""
Performance tracking - per topic and per difficulty accuracy across a session
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from learn_cricket.engine.errors import RangeError

DEFAULT_MIN_ATTEMPTS = 3
WEAK_ACCURACY = 0.5
STRONG_ACCURACY = 0.8


@dataclass(frozen=True)
class PerformanceRecord:
    """One answered question"""
    topic: str
    difficulty: str
    is_correct: bool
    response_time_seconds: float
    timestamp: datetime = field(default_factory=datetime.utcnow)
    question_id: Optional[str] = None


@dataclass
class TopicStats:
    """Attempt counters for one topic or difficulty bucket"""
    attempted: int = 0
    correct: int = 0

    @property
    def accuracy(self) -> float:
        if self.attempted == 0:
            return 0.0
        return self.correct / self.attempted


def _accuracy(buckets: dict, key: str) -> float:
    bucket = buckets.get(key)
    return bucket.accuracy if bucket else 0.0


@dataclass(frozen=True)
class AggregatePerformance:
    """Derived view of all performance records (plus any restored history)"""
    attempted: int = 0
    correct: int = 0
    topics: dict[str, TopicStats] = field(default_factory=dict)
    difficulties: dict[str, TopicStats] = field(default_factory=dict)
    current_streak: int = 0
    best_streak: int = 0
    total_response_time: float = 0.0

    @property
    def average_response_time(self) -> float:
        if self.attempted == 0:
            return 0.0
        return self.total_response_time / self.attempted

    def accuracy(self) -> float:
        if self.attempted == 0:
            return 0.0
        return self.correct / self.attempted

    def topic_accuracy(self, topic: str) -> float:
        return _accuracy(self.topics, topic)

    def difficulty_accuracy(self, level: str) -> float:
        return _accuracy(self.difficulties, level)

    def weak_topics(self, min_attempts: int = DEFAULT_MIN_ATTEMPTS) -> set[str]:
        return {
            topic for topic, stats in self.topics.items()
            if stats.attempted >= min_attempts and stats.accuracy < WEAK_ACCURACY
        }

    def strong_topics(self, min_attempts: int = DEFAULT_MIN_ATTEMPTS) -> set[str]:
        return {
            topic for topic, stats in self.topics.items()
            if stats.attempted >= min_attempts and stats.accuracy > STRONG_ACCURACY
        }

    def to_dict(self) -> dict:
        """JSON-safe snapshot for persistence"""
        return {
            "attempted": self.attempted,
            "correct": self.correct,
            "topics": {k: {"attempted": v.attempted, "correct": v.correct} for k, v in self.topics.items()},
            "difficulties": {k: {"attempted": v.attempted, "correct": v.correct} for k, v in self.difficulties.items()},
            "current_streak": self.current_streak,
            "best_streak": self.best_streak,
            "total_response_time": self.total_response_time,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AggregatePerformance":
        def buckets(raw) -> dict[str, TopicStats]:
            result = {}
            for key, value in (raw or {}).items():
                attempted = int(value.get("attempted", 0))
                correct = int(value.get("correct", 0))
                if attempted < 0 or correct < 0 or correct > attempted:
                    raise RangeError(f"Invalid bucket '{key}': {correct}/{attempted}")
                result[key] = TopicStats(attempted=attempted, correct=correct)
            return result

        attempted = int(data.get("attempted", 0))
        correct = int(data.get("correct", 0))
        if attempted < 0 or correct < 0 or correct > attempted:
            raise RangeError(f"Invalid totals: {correct}/{attempted}")

        return cls(
            attempted=attempted,
            correct=correct,
            topics=buckets(data.get("topics")),
            difficulties=buckets(data.get("difficulties")),
            current_streak=int(data.get("current_streak", 0)),
            best_streak=int(data.get("best_streak", 0)),
            total_response_time=float(data.get("total_response_time", 0.0)),
        )


def performance_level(accuracy: float) -> str:
    if accuracy >= 0.8:
        return "Excellent"
    if accuracy >= 0.6:
        return "Good"
    if accuracy >= 0.4:
        return "Fair"
    return "Needs Practice"


class PerformanceTracker:
    """
    Append-only log of answered questions with running counters.

    Counters may be seeded from a persisted AggregatePerformance so the
    adaptive policy sees cross-session history; `records` only ever holds
    the answers given in this session.
    """

    def __init__(self, min_attempts: int = DEFAULT_MIN_ATTEMPTS, baseline: Optional[AggregatePerformance] = None):
        if min_attempts < 1:
            raise RangeError(f"min_attempts must be at least 1, got {min_attempts}")
        self.min_attempts = min_attempts
        self._records: list[PerformanceRecord] = []
        self._attempted = 0
        self._correct = 0
        self._topics: dict[str, TopicStats] = {}
        self._difficulties: dict[str, TopicStats] = {}
        self._current_streak = 0
        self._best_streak = 0
        self._total_time = 0.0
        if baseline is not None:
            self.restore(baseline)

    def restore(self, baseline: AggregatePerformance) -> None:
        """Seed counters from a snapshot (only before any answer is recorded)"""
        if self._records:
            raise RangeError("Cannot restore a baseline after records were added")
        self._attempted = baseline.attempted
        self._correct = baseline.correct
        self._topics = {k: TopicStats(v.attempted, v.correct) for k, v in baseline.topics.items()}
        self._difficulties = {k: TopicStats(v.attempted, v.correct) for k, v in baseline.difficulties.items()}
        self._current_streak = baseline.current_streak
        self._best_streak = max(baseline.best_streak, baseline.current_streak)
        self._total_time = baseline.total_response_time

    @property
    def records(self) -> tuple[PerformanceRecord, ...]:
        return tuple(self._records)

    @property
    def current_streak(self) -> int:
        return self._current_streak

    @property
    def best_streak(self) -> int:
        return self._best_streak

    def record(self, entry: PerformanceRecord) -> None:
        if entry.response_time_seconds < 0:
            raise RangeError(f"Negative response time: {entry.response_time_seconds}")

        self._records.append(entry)
        self._attempted += 1
        self._total_time += entry.response_time_seconds

        topic = self._topics.setdefault(entry.topic, TopicStats())
        difficulty = self._difficulties.setdefault(entry.difficulty, TopicStats())
        topic.attempted += 1
        difficulty.attempted += 1

        if entry.is_correct:
            self._correct += 1
            topic.correct += 1
            difficulty.correct += 1
            self._current_streak += 1
            self._best_streak = max(self._best_streak, self._current_streak)
        else:
            self._current_streak = 0

    def aggregate(self) -> AggregatePerformance:
        return AggregatePerformance(
            attempted=self._attempted,
            correct=self._correct,
            topics={k: TopicStats(v.attempted, v.correct) for k, v in self._topics.items()},
            difficulties={k: TopicStats(v.attempted, v.correct) for k, v in self._difficulties.items()},
            current_streak=self._current_streak,
            best_streak=self._best_streak,
            total_response_time=self._total_time,
        )

    def accuracy(self) -> float:
        if self._attempted == 0:
            return 0.0
        return self._correct / self._attempted

    def topic_accuracy(self, topic: str) -> float:
        return _accuracy(self._topics, topic)

    def difficulty_accuracy(self, level: str) -> float:
        return _accuracy(self._difficulties, level)

    def weak_topics(self) -> set[str]:
        return self.aggregate().weak_topics(self.min_attempts)

    def strong_topics(self) -> set[str]:
        return self.aggregate().strong_topics(self.min_attempts)

    def recent_topics(self, count: int) -> list[str]:
        """Distinct topics of the latest answers, most recent first"""
        seen: list[str] = []
        for entry in reversed(self._records):
            if entry.topic not in seen:
                seen.append(entry.topic)
            if len(seen) >= count:
                break
        return seen

    def summary(self) -> dict:
        aggregate = self.aggregate()
        accuracy = aggregate.accuracy()
        return {
            "total_questions": aggregate.attempted,
            "accuracy": accuracy,
            "current_streak": aggregate.current_streak,
            "best_streak": aggregate.best_streak,
            "average_response_time": aggregate.average_response_time,
            "weak_topics": sorted(aggregate.weak_topics(self.min_attempts)),
            "strong_topics": sorted(aggregate.strong_topics(self.min_attempts)),
            "performance_level": performance_level(accuracy),
        }


def summarize(aggregate: AggregatePerformance, min_attempts: int = DEFAULT_MIN_ATTEMPTS) -> dict:
    """Summary of a persisted aggregate (same shape as PerformanceTracker.summary)"""
    return PerformanceTracker(min_attempts=min_attempts, baseline=aggregate).summary()


def topics_by_attempts(aggregate: AggregatePerformance, catalogue: Iterable[str] = ()) -> list[tuple[str, int]]:
    """(topic, attempts) pairs including unseen catalogue topics, fewest attempts first"""
    counts = {topic: 0 for topic in catalogue}
    for topic, stats in aggregate.topics.items():
        counts[topic] = stats.attempted
    order = {topic: i for i, topic in enumerate(counts)}
    return sorted(counts.items(), key=lambda item: (item[1], order[item[0]]))
