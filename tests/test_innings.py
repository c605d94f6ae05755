"""
Tests for the innings state machine.

Run with: pytest tests/test_innings.py -v
"""
import copy
import random

import pytest

from learn_cricket.engine.errors import RangeError, TerminalStateError
from learn_cricket.engine.innings import InningsConfig, InningsStateMachine, InningsStatus
from learn_cricket.engine.scoring import BallOutcome

SCORING_OUTCOMES = [BallOutcome.SIX, BallOutcome.FOUR, BallOutcome.SINGLE, BallOutcome.DOT]


def play(machine: InningsStateMachine, outcomes):
    state = None
    for outcome in outcomes:
        state = machine.apply_ball(outcome)
    return state


class TestTerminalConditions:
    """All out and overs complete."""

    def test_four_wickets_of_five_is_all_out(self):
        """With five wickets the innings ends on the fourth."""
        machine = InningsStateMachine(InningsConfig(total_overs=2, balls_per_over=6, total_wickets=5))
        state = play(machine, [BallOutcome.WICKET] * 3)
        assert state.status == InningsStatus.IN_PROGRESS
        state = machine.apply_ball(BallOutcome.WICKET)
        assert state.status == InningsStatus.ALL_OUT
        assert state.wickets_lost == 4

    def test_overs_complete_on_last_ball(self):
        """Twelve scoring balls complete a two-over innings exactly on the twelfth."""
        machine = InningsStateMachine(InningsConfig(total_overs=2, balls_per_over=6))
        for i in range(11):
            state = machine.apply_ball(BallOutcome.SINGLE)
            assert state.status == InningsStatus.IN_PROGRESS, f"ended early at ball {i + 1}"
        state = machine.apply_ball(BallOutcome.SINGLE)
        assert state.status == InningsStatus.OVERS_COMPLETE
        assert state.balls_bowled == 12

    def test_all_out_wins_on_last_ball(self):
        """When the final ball is also the last wicket, the innings is all out."""
        machine = InningsStateMachine(InningsConfig(total_overs=1, balls_per_over=6, total_wickets=3))
        state = play(machine, [BallOutcome.DOT] * 4 + [BallOutcome.WICKET] * 2)
        assert state.balls_bowled == 6
        assert state.status == InningsStatus.ALL_OUT

    def test_apply_after_terminal_fails_without_change(self):
        """A finished innings rejects balls and stays identical."""
        machine = InningsStateMachine(InningsConfig(total_overs=1, balls_per_over=2, total_wickets=2))
        machine.apply_ball(BallOutcome.WICKET)
        before = machine.state
        with pytest.raises(TerminalStateError):
            machine.apply_ball(BallOutcome.SIX)
        assert machine.state == before

    def test_not_bowled_is_rejected(self):
        """NOT_BOWLED is not a delivery."""
        machine = InningsStateMachine()
        with pytest.raises(RangeError):
            machine.apply_ball(BallOutcome.NOT_BOWLED)
        assert machine.balls_bowled == 0


class TestInningsCounters:
    """Counters, derived rates and ball history."""

    def test_counters(self):
        machine = InningsStateMachine()
        state = play(machine, [BallOutcome.SIX, BallOutcome.FOUR, BallOutcome.SINGLE,
                               BallOutcome.DOT, BallOutcome.WICKET])
        assert state.runs == 11
        assert state.boundaries.sixes == 1
        assert state.boundaries.fours == 1
        assert state.singles == 1
        assert state.dot_balls == 1
        assert state.wickets_lost == 1
        assert state.balls_bowled == 5
        assert state.score_display == "11/1"
        assert state.overs_display == "0.5"

    def test_rates_are_zero_before_first_ball(self):
        state = InningsStateMachine().state
        assert state.strike_rate == 0.0
        assert state.run_rate == 0.0

    def test_rates(self):
        """Strike rate is per 100 balls, run rate per over."""
        machine = InningsStateMachine()
        state = play(machine, [BallOutcome.FOUR] * 6 + [BallOutcome.SIX] * 3)
        assert state.strike_rate == pytest.approx(42 / 9 * 100)
        assert state.run_rate == pytest.approx(42 / 1.5)
        assert state.overs_display == "1.3"

    def test_random_sequences_keep_invariants(self):
        """Counters always agree with the ball history, for every prefix."""
        rng = random.Random(7)
        for _ in range(50):
            machine = InningsStateMachine(InningsConfig(total_overs=3, balls_per_over=6, total_wickets=6))
            applied = 0
            while not machine.is_terminal:
                outcome = rng.choice(SCORING_OUTCOMES + [BallOutcome.WICKET])
                state = machine.apply_ball(outcome)
                applied += 1

                bowled = [b for b in state.ball_results if b is not BallOutcome.NOT_BOWLED]
                assert state.balls_bowled == applied == len(bowled)
                wickets = sum(1 for b in bowled if b is BallOutcome.WICKET)
                assert state.wickets_lost == wickets
                assert state.wickets_lost + (len(bowled) - wickets) == applied
                assert state.runs == sum(b.runs for b in bowled)

                overs = applied // 6 + (applied % 6) / 6
                assert state.strike_rate == pytest.approx(state.runs / applied * 100)
                assert state.run_rate == pytest.approx(state.runs / overs)

    def test_state_is_a_detached_copy(self):
        """Mutating a returned state does not touch the machine."""
        machine = InningsStateMachine()
        state = machine.apply_ball(BallOutcome.SIX)
        state.runs = 999
        state.ball_results[1] = BallOutcome.SIX
        assert machine.state.runs == 6
        assert machine.state.ball_results[1] is BallOutcome.NOT_BOWLED

    def test_ball_results_length_fixed(self):
        machine = InningsStateMachine(InningsConfig(total_overs=3, balls_per_over=4))
        assert len(machine.state.ball_results) == 12
        assert machine.balls_remaining == 12


class TestOvers:
    """Over completion and summaries."""

    def test_over_complete_only_at_boundary_while_in_progress(self):
        machine = InningsStateMachine(InningsConfig(total_overs=2, balls_per_over=3))
        assert not machine.is_over_complete()
        machine.apply_ball(BallOutcome.SIX)
        machine.apply_ball(BallOutcome.DOT)
        assert not machine.is_over_complete()
        machine.apply_ball(BallOutcome.SINGLE)
        assert machine.is_over_complete()
        machine.apply_ball(BallOutcome.FOUR)
        assert not machine.is_over_complete()

    def test_over_boundary_at_all_out_is_terminal_not_over_complete(self):
        machine = InningsStateMachine(InningsConfig(total_overs=2, balls_per_over=3, total_wickets=2))
        play(machine, [BallOutcome.DOT, BallOutcome.DOT, BallOutcome.WICKET])
        assert machine.status == InningsStatus.ALL_OUT
        assert not machine.is_over_complete()

    def test_over_summary(self):
        machine = InningsStateMachine(InningsConfig(total_overs=2, balls_per_over=3))
        play(machine, [BallOutcome.SIX, BallOutcome.WICKET, BallOutcome.DOT, BallOutcome.FOUR])

        first = machine.get_over_summary(0)
        assert first.runs_in_over == 6
        assert first.wickets_in_over == 1
        assert first.dots_in_over == 1
        assert not first.is_maiden

        partial = machine.get_over_summary(1)
        assert partial.balls == (BallOutcome.FOUR,)
        assert partial.runs_in_over == 4
        assert len(machine.over_summaries()) == 2

    def test_maiden_over(self):
        machine = InningsStateMachine(InningsConfig(total_overs=2, balls_per_over=2))
        play(machine, [BallOutcome.DOT, BallOutcome.WICKET])
        assert machine.get_over_summary(0).is_maiden

    def test_over_summary_out_of_range(self):
        """Only started overs have summaries."""
        machine = InningsStateMachine()
        with pytest.raises(RangeError):
            machine.get_over_summary(0)
        machine.apply_ball(BallOutcome.SIX)
        with pytest.raises(RangeError):
            machine.get_over_summary(1)
        with pytest.raises(RangeError):
            machine.get_over_summary(-1)


class TestInningsConfig:
    """Configuration validation."""

    @pytest.mark.parametrize("kwargs", [
        {"total_overs": 0},
        {"balls_per_over": 0},
        {"total_wickets": 1},
    ])
    def test_invalid_config(self, kwargs):
        with pytest.raises(RangeError):
            InningsConfig(**kwargs)

    def test_defaults(self):
        config = InningsConfig()
        assert config.total_balls == 12
        assert config.all_out_wickets == 4

    def test_state_copy_equality(self):
        """Deep copies compare equal, so terminal immutability is checkable."""
        machine = InningsStateMachine()
        machine.apply_ball(BallOutcome.FOUR)
        assert copy.deepcopy(machine.state) == machine.state
