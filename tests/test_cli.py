"""
Tests for the terminal commands.
"""
import pytest
from click.testing import CliRunner

import cli
from learn_cricket.engine.innings import InningsConfig, InningsStateMachine
from learn_cricket.engine.scoring import BallOutcome


@pytest.fixture
def runner(store, monkeypatch):
    monkeypatch.setattr(cli, "init_db", lambda: None)
    monkeypatch.setattr(cli, "ProgressStore", lambda: store)
    return CliRunner()


class TestBenchmark:
    def test_reports_statistics(self, runner):
        result = runner.invoke(cli.cli, ["benchmark", "--sessions", "5", "--seed", "7"])
        assert result.exit_code == 0, result.output
        assert "Simulation Statistics" in result.output
        assert "Score Distribution" in result.output

    def test_perfect_fast_learner_never_all_out(self, runner):
        result = runner.invoke(cli.cli, [
            "benchmark", "--sessions", "3", "--accuracy", "1.0", "--mean-time", "0.5", "--seed", "3",
        ])
        assert result.exit_code == 0, result.output
        assert "All Out %: 0.0%" in result.output


    def test_rejects_zero_sessions(self, runner):
        result = runner.invoke(cli.cli, ["benchmark", "--sessions", "0"])
        assert result.exit_code == 2
        assert "Simulation Statistics" not in result.output


class TestProgressCommands:
    def test_progress_without_data(self, runner):
        result = runner.invoke(cli.cli, ["progress", "--key", "ghost"])
        assert result.exit_code == 0
        assert "No progress stored" in result.output

    def test_progress_lists_topics(self, runner, store):
        store.save_progress("alice", {
            "attempted": 4, "correct": 1,
            "topics": {"equipment": {"attempted": 4, "correct": 1}},
        })
        result = runner.invoke(cli.cli, ["progress", "--key", "alice"])
        assert result.exit_code == 0, result.output
        assert "Learning Summary" in result.output
        assert "Next up:" in result.output
        assert "equipment" in result.output

    def test_history(self, runner, store):
        machine = InningsStateMachine(InningsConfig(total_overs=1, balls_per_over=1))
        state = machine.apply_ball(BallOutcome.FOUR)
        store.save_innings("alice", machine.config, state, [])
        result = runner.invoke(cli.cli, ["history", "--key", "alice"])
        assert result.exit_code == 0, result.output
        assert "4/0" in result.output

    def test_reset_progress(self, runner, store):
        store.save_progress("alice", {"attempted": 1, "correct": 1})
        result = runner.invoke(cli.cli, ["reset-progress", "--key", "alice", "--yes"])
        assert result.exit_code == 0, result.output
        assert store.load_progress("alice") is None
