"""
Adaptive selector - picks difficulty and topic focus for the next questions
"""
import enum
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from learn_cricket.engine.errors import RangeError
from learn_cricket.engine.performance import (
    DEFAULT_MIN_ATTEMPTS,
    AggregatePerformance,
    topics_by_attempts,
)


class Difficulty(enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def rank(self) -> int:
        return _DIFFICULTY_ORDER.index(self)

    @classmethod
    def parse(cls, value) -> "Difficulty":
        """Accept a Difficulty, its value, or a knowledge level alias"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in DIFFICULTY_ALIASES:
                return DIFFICULTY_ALIASES[key]
        raise RangeError(f"Unknown difficulty: {value!r}")


_DIFFICULTY_ORDER = [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD]


class KnowledgeLevel(enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def difficulty(self) -> Difficulty:
        return _LEVEL_DIFFICULTY[self]


_LEVEL_DIFFICULTY = {
    KnowledgeLevel.BEGINNER: Difficulty.EASY,
    KnowledgeLevel.INTERMEDIATE: Difficulty.MEDIUM,
    KnowledgeLevel.ADVANCED: Difficulty.HARD,
}

DIFFICULTY_ALIASES = {
    "easy": Difficulty.EASY,
    "medium": Difficulty.MEDIUM,
    "hard": Difficulty.HARD,
    "beginner": Difficulty.EASY,
    "intermediate": Difficulty.MEDIUM,
    "advanced": Difficulty.HARD,
}


def classify_knowledge(accuracy: float) -> KnowledgeLevel:
    if accuracy < 0.5:
        return KnowledgeLevel.BEGINNER
    if accuracy > 0.8:
        return KnowledgeLevel.ADVANCED
    return KnowledgeLevel.INTERMEDIATE


@dataclass(frozen=True)
class AdaptiveRecommendation:
    suggested_difficulty: Difficulty
    focus_topics: tuple[str, ...]
    knowledge_level: KnowledgeLevel

    def to_dict(self) -> dict:
        return {
            "suggested_difficulty": self.suggested_difficulty.value,
            "focus_topics": list(self.focus_topics),
            "knowledge_level": self.knowledge_level.value,
        }


@dataclass(frozen=True)
class SupplyRequest:
    """Parameters handed to the question supply"""
    topic: Optional[str]
    difficulty: Difficulty
    exclude_recent_topics: tuple[str, ...] = ()
    count: int = 1


class AdaptiveSelector:
    """
    Turns aggregate performance into the next question parameters.

    Weak topics (worst first) are the focus. When nothing qualifies as weak,
    the least attempted topics are explored instead, with catalogue topics
    that were never asked counting as zero attempts.
    """

    def __init__(
        self,
        known_topics: Iterable[str] = (),
        focus_count: int = 3,
        min_attempts: int = DEFAULT_MIN_ATTEMPTS,
    ):
        if focus_count < 1:
            raise RangeError(f"focus_count must be at least 1, got {focus_count}")
        if min_attempts < 1:
            raise RangeError(f"min_attempts must be at least 1, got {min_attempts}")
        self.known_topics = tuple(known_topics)
        self.focus_count = focus_count
        self.min_attempts = min_attempts

    def recommend(
        self,
        aggregate: AggregatePerformance,
        floor: Optional[Difficulty] = None,
        ceiling: Optional[Difficulty] = None,
    ) -> AdaptiveRecommendation:
        if floor is not None and ceiling is not None and floor.rank > ceiling.rank:
            raise RangeError(f"Difficulty floor {floor.value} is above ceiling {ceiling.value}")

        level = classify_knowledge(aggregate.accuracy())
        difficulty = level.difficulty
        if floor is not None and difficulty.rank < floor.rank:
            difficulty = floor
        if ceiling is not None and difficulty.rank > ceiling.rank:
            difficulty = ceiling

        return AdaptiveRecommendation(
            suggested_difficulty=difficulty,
            focus_topics=self._focus_topics(aggregate),
            knowledge_level=level,
        )

    def _focus_topics(self, aggregate: AggregatePerformance) -> tuple[str, ...]:
        weak = aggregate.weak_topics(self.min_attempts)
        if weak:
            ranked = sorted(weak, key=lambda t: (aggregate.topic_accuracy(t), t))
        else:
            ranked = [topic for topic, _ in topics_by_attempts(aggregate, self.known_topics)]
        return tuple(ranked[:self.focus_count])

    @staticmethod
    def needs_supply(buffered_ahead: int, buffer_ahead: int, balls_remaining: int) -> bool:
        """True when fewer questions are queued than the innings can still use"""
        target = min(buffer_ahead, max(0, balls_remaining - 1))
        return buffered_ahead < target

    def build_request(
        self,
        recommendation: AdaptiveRecommendation,
        recent_topics: Sequence[str] = (),
        count: int = 1,
    ) -> SupplyRequest:
        recent = tuple(recent_topics)
        # Prefer a focus topic that was not just asked
        topic = next((t for t in recommendation.focus_topics if t not in recent), None)
        if topic is None and recommendation.focus_topics:
            # Every focus topic was just asked; the requested topic must not also be excluded
            topic = recommendation.focus_topics[0]
            recent = tuple(t for t in recent if t != topic)
        return SupplyRequest(
            topic=topic,
            difficulty=recommendation.suggested_difficulty,
            exclude_recent_topics=recent,
            count=count,
        )
