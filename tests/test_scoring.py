"""
Tests for the scoring policy and ball outcomes.
"""
import math

import pytest

from learn_cricket.engine.errors import RangeError
from learn_cricket.engine.scoring import BallOutcome, ScoringPolicy, ScoringThresholds


class TestScoringPolicy:
    """Response time buckets with default thresholds."""

    def setup_method(self):
        self.policy = ScoringPolicy()

    def test_fast_correct_answer_is_six(self):
        """2.0s correct scores a six."""
        assert self.policy.evaluate(2.0, True) == BallOutcome.SIX

    def test_boundary_value_goes_to_slower_bucket(self):
        """Exactly 3.0s is a four, not a six."""
        assert self.policy.evaluate(3.0, True) == BallOutcome.FOUR
        assert self.policy.evaluate(5.0, True) == BallOutcome.SINGLE
        assert self.policy.evaluate(10.0, True) == BallOutcome.DOT

    def test_wrong_answer_is_wicket_regardless_of_time(self):
        """20.0s incorrect is a wicket, and so is a fast incorrect answer."""
        assert self.policy.evaluate(20.0, False) == BallOutcome.WICKET
        assert self.policy.evaluate(0.5, False) == BallOutcome.WICKET

    @pytest.mark.parametrize("seconds,expected", [
        (0.0, BallOutcome.SIX),
        (2.999, BallOutcome.SIX),
        (4.99, BallOutcome.FOUR),
        (9.99, BallOutcome.SINGLE),
        (60.0, BallOutcome.DOT),
    ])
    def test_buckets(self, seconds, expected):
        """Each time bucket maps to its outcome."""
        assert self.policy.evaluate(seconds, True) == expected

    def test_evaluate_is_deterministic(self):
        """Same inputs give the same outcome."""
        for t in (0.1, 3.0, 7.7, 12.0):
            for correct in (True, False):
                assert self.policy.evaluate(t, correct) == self.policy.evaluate(t, correct)

    def test_rejects_negative_or_nan_time(self):
        """Invalid response times are a range error."""
        with pytest.raises(RangeError):
            self.policy.evaluate(-0.1, True)
        with pytest.raises(RangeError):
            self.policy.evaluate(math.nan, True)

    def test_custom_thresholds(self):
        """Thresholds are configurable."""
        policy = ScoringPolicy(ScoringThresholds(six=1.0, four=2.0, single=4.0))
        assert policy.evaluate(1.5, True) == BallOutcome.FOUR
        assert policy.evaluate(4.0, True) == BallOutcome.DOT


class TestScoringThresholds:
    """Threshold validation."""

    def test_must_ascend(self):
        """six <= four <= single."""
        with pytest.raises(RangeError):
            ScoringThresholds(six=5.0, four=3.0, single=10.0)

    def test_must_be_non_negative(self):
        """Negative bounds are rejected."""
        with pytest.raises(RangeError):
            ScoringThresholds(six=-1.0)

    def test_range_error_is_value_error(self):
        """RangeError can be caught as ValueError."""
        with pytest.raises(ValueError):
            ScoringThresholds(six=20.0)


class TestBallOutcome:
    """Outcome runs, symbols and labels."""

    def test_runs(self):
        assert [o.runs for o in BallOutcome] == [6, 4, 1, 0, 0, 0]

    def test_correctness_flag(self):
        """Every bowled outcome except a wicket came from a correct answer."""
        assert BallOutcome.WICKET.is_correct is False
        assert BallOutcome.DOT.is_correct is True
        assert BallOutcome.NOT_BOWLED.is_correct is None

    def test_symbols_and_labels(self):
        assert BallOutcome.WICKET.symbol == "W"
        assert BallOutcome.NOT_BOWLED.symbol == "-"
        assert BallOutcome.SIX.label == "Six!"
        assert BallOutcome.DOT.label == "Dot Ball"
        assert BallOutcome.FOUR.is_boundary and not BallOutcome.SINGLE.is_boundary
