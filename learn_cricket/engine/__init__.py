from learn_cricket.engine.timer import ResponseTimer
from learn_cricket.engine.scoring import BallOutcome, ScoringPolicy
from learn_cricket.engine.innings import InningsStateMachine
from learn_cricket.engine.performance import PerformanceTracker
from learn_cricket.engine.adaptive import AdaptiveSelector

__all__ = ["ResponseTimer", "BallOutcome", "ScoringPolicy", "InningsStateMachine", "PerformanceTracker", "AdaptiveSelector"]
