from sqlalchemy import String, Integer, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
import json
from learn_cricket.database import Base


class LearningProgress(Base):
    """Cross-session performance aggregate for one learner"""
    __tablename__ = "learning_progress"

    id: Mapped[int] = mapped_column(primary_key=True)
    session_key: Mapped[str] = mapped_column(String(100), unique=True, index=True)

    # AggregatePerformance snapshot (JSON)
    snapshot: Mapped[str] = mapped_column(Text, default="{}")
    questions_attempted: Mapped[int] = mapped_column(Integer, default=0)

    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def snapshot_dict(self) -> dict:
        return json.loads(self.snapshot) if self.snapshot else {}

    def __repr__(self):
        return f"<LearningProgress {self.session_key}: {self.questions_attempted} questions>"
