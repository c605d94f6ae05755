"""
Tests for performance tracking.
"""
import random

import pytest

from learn_cricket.engine.errors import RangeError
from learn_cricket.engine.performance import (
    AggregatePerformance,
    PerformanceRecord,
    PerformanceTracker,
    performance_level,
    topics_by_attempts,
)


def rec(topic="basic rules", correct=True, seconds=2.0, difficulty="easy"):
    return PerformanceRecord(topic=topic, difficulty=difficulty, is_correct=correct, response_time_seconds=seconds)


class TestPerformanceTracker:
    """Accuracy, streaks and topic sets."""

    def test_empty_tracker_reports_zero(self):
        tracker = PerformanceTracker()
        assert tracker.accuracy() == 0.0
        assert tracker.topic_accuracy("equipment") == 0.0
        assert tracker.difficulty_accuracy("hard") == 0.0
        assert tracker.weak_topics() == set()

    def test_accuracy_by_topic_and_difficulty(self):
        tracker = PerformanceTracker()
        tracker.record(rec("equipment", True, difficulty="easy"))
        tracker.record(rec("equipment", False, difficulty="hard"))
        tracker.record(rec("basic rules", True, difficulty="easy"))
        assert tracker.accuracy() == pytest.approx(2 / 3)
        assert tracker.topic_accuracy("equipment") == pytest.approx(0.5)
        assert tracker.difficulty_accuracy("easy") == 1.0
        assert tracker.difficulty_accuracy("hard") == 0.0

    def test_streaks(self):
        """A wrong answer resets the current streak; the best is kept."""
        tracker = PerformanceTracker()
        for correct in (True, True, True, False, True):
            tracker.record(rec(correct=correct))
        assert tracker.current_streak == 1
        assert tracker.best_streak == 3

    def test_weak_topics_need_min_attempts(self):
        """Two misses are not enough to call a topic weak."""
        tracker = PerformanceTracker()
        tracker.record(rec("bowling types", False))
        tracker.record(rec("bowling types", False))
        assert tracker.weak_topics() == set()
        tracker.record(rec("bowling types", False))
        assert tracker.weak_topics() == {"bowling types"}

    def test_strong_topics(self):
        tracker = PerformanceTracker()
        for _ in range(5):
            tracker.record(rec("equipment", True))
        tracker.record(rec("match formats", True))
        assert tracker.strong_topics() == {"equipment"}

    def test_weak_topics_never_below_floor_for_random_sequences(self):
        rng = random.Random(3)
        topics = ["a", "b", "c", "d"]
        for _ in range(30):
            tracker = PerformanceTracker()
            for _ in range(rng.randint(0, 25)):
                tracker.record(rec(rng.choice(topics), rng.random() < 0.4))
            aggregate = tracker.aggregate()
            for topic in tracker.weak_topics():
                assert aggregate.topics[topic].attempted >= 3

    def test_buckets_respect_attempted_ge_correct(self):
        tracker = PerformanceTracker()
        for i in range(10):
            tracker.record(rec("a" if i % 2 else "b", i % 3 == 0))
        for stats in tracker.aggregate().topics.values():
            assert stats.attempted >= stats.correct >= 0

    def test_records_are_append_only_copies(self):
        tracker = PerformanceTracker()
        tracker.record(rec())
        records = tracker.records
        assert isinstance(records, tuple)
        assert len(records) == 1

    def test_negative_response_time_rejected(self):
        tracker = PerformanceTracker()
        with pytest.raises(RangeError):
            tracker.record(rec(seconds=-1.0))
        assert tracker.aggregate().attempted == 0

    def test_recent_topics(self):
        tracker = PerformanceTracker()
        for topic in ("a", "b", "a", "c"):
            tracker.record(rec(topic))
        assert tracker.recent_topics(2) == ["c", "a"]
        assert tracker.recent_topics(5) == ["c", "a", "b"]

    def test_summary(self):
        tracker = PerformanceTracker()
        tracker.record(rec(seconds=2.0))
        tracker.record(rec(correct=False, seconds=4.0))
        summary = tracker.summary()
        assert summary["total_questions"] == 2
        assert summary["accuracy"] == 0.5
        assert summary["average_response_time"] == pytest.approx(3.0)
        assert summary["performance_level"] == "Fair"


class TestBaseline:
    """Restoring persisted aggregates."""

    def test_round_trip_through_dict(self):
        tracker = PerformanceTracker()
        tracker.record(rec("equipment", True, 1.0))
        tracker.record(rec("equipment", False, 3.0))
        data = tracker.aggregate().to_dict()
        assert AggregatePerformance.from_dict(data) == tracker.aggregate()

    def test_baseline_seeds_counters_but_not_records(self):
        baseline = AggregatePerformance.from_dict({
            "attempted": 4, "correct": 1,
            "topics": {"equipment": {"attempted": 4, "correct": 1}},
            "current_streak": 0, "best_streak": 1,
        })
        tracker = PerformanceTracker(baseline=baseline)
        assert tracker.weak_topics() == {"equipment"}
        assert tracker.records == ()
        tracker.record(rec("equipment", True))
        assert tracker.aggregate().topics["equipment"].attempted == 5

    def test_invalid_snapshot_rejected(self):
        with pytest.raises(RangeError):
            AggregatePerformance.from_dict({"attempted": 1, "correct": 2})


class TestHelpers:
    @pytest.mark.parametrize("accuracy,level", [
        (0.9, "Excellent"), (0.8, "Excellent"), (0.6, "Good"), (0.4, "Fair"), (0.1, "Needs Practice"),
    ])
    def test_performance_level(self, accuracy, level):
        assert performance_level(accuracy) == level

    def test_topics_by_attempts_includes_unseen_catalogue_topics(self):
        tracker = PerformanceTracker()
        tracker.record(rec("b"))
        tracker.record(rec("b"))
        tracker.record(rec("a"))
        ordered = topics_by_attempts(tracker.aggregate(), ["a", "b", "c"])
        assert ordered == [("c", 0), ("a", 1), ("b", 2)]
