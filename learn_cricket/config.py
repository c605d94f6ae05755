"""
Game configuration
"""
import os
from dotenv import load_dotenv

from learn_cricket.engine.innings import InningsConfig
from learn_cricket.engine.scoring import ScoringThresholds

load_dotenv()


class GameSettings:
    """Learn Cricket settings from environment variables"""

    # Innings shape
    TOTAL_OVERS: int = int(os.getenv("LEARN_CRICKET_TOTAL_OVERS", "2"))
    BALLS_PER_OVER: int = int(os.getenv("LEARN_CRICKET_BALLS_PER_OVER", "6"))
    TOTAL_WICKETS: int = int(os.getenv("LEARN_CRICKET_TOTAL_WICKETS", "5"))

    # Response time thresholds (seconds)
    SIX_THRESHOLD: float = float(os.getenv("LEARN_CRICKET_SIX_THRESHOLD", "3"))
    FOUR_THRESHOLD: float = float(os.getenv("LEARN_CRICKET_FOUR_THRESHOLD", "5"))
    SINGLE_THRESHOLD: float = float(os.getenv("LEARN_CRICKET_SINGLE_THRESHOLD", "10"))

    # Question supply
    BUFFER_AHEAD: int = int(os.getenv("LEARN_CRICKET_BUFFER_AHEAD", "2"))
    SUPPLY_BATCH_SIZE: int = int(os.getenv("LEARN_CRICKET_SUPPLY_BATCH_SIZE", "3"))
    MAX_SUPPLY_ATTEMPTS: int = int(os.getenv("LEARN_CRICKET_MAX_SUPPLY_ATTEMPTS", "3"))

    # Adaptive selection
    FOCUS_TOPIC_COUNT: int = int(os.getenv("LEARN_CRICKET_FOCUS_TOPIC_COUNT", "3"))
    MIN_TOPIC_ATTEMPTS: int = int(os.getenv("LEARN_CRICKET_MIN_TOPIC_ATTEMPTS", "3"))
    RECENT_TOPIC_WINDOW: int = int(os.getenv("LEARN_CRICKET_RECENT_TOPIC_WINDOW", "3"))

    # Infrastructure
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "learn_cricket.db")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def innings_config(self) -> InningsConfig:
        return InningsConfig(
            total_overs=self.TOTAL_OVERS,
            balls_per_over=self.BALLS_PER_OVER,
            total_wickets=self.TOTAL_WICKETS,
        )

    def scoring_thresholds(self) -> ScoringThresholds:
        return ScoringThresholds(
            six=self.SIX_THRESHOLD,
            four=self.FOUR_THRESHOLD,
            single=self.SINGLE_THRESHOLD,
        )

    def session_options(self) -> dict:
        """Keyword arguments for SessionOrchestrator"""
        return {
            "config": self.innings_config(),
            "thresholds": self.scoring_thresholds(),
            "buffer_ahead": self.BUFFER_AHEAD,
            "batch_size": self.SUPPLY_BATCH_SIZE,
            "max_supply_attempts": self.MAX_SUPPLY_ATTEMPTS,
            "focus_count": self.FOCUS_TOPIC_COUNT,
            "min_attempts": self.MIN_TOPIC_ATTEMPTS,
            "recent_window": self.RECENT_TOPIC_WINDOW,
        }


settings = GameSettings()
