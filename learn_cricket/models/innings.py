from typing import Optional, List
from sqlalchemy import String, Integer, Float, ForeignKey, Enum, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
from learn_cricket.database import Base
from learn_cricket.engine.innings import InningsStatus


class InningsRecord(Base):
    __tablename__ = "innings_records"

    id: Mapped[int] = mapped_column(primary_key=True)
    session_key: Mapped[str] = mapped_column(String(100), index=True)

    # Shape
    total_overs: Mapped[int] = mapped_column(Integer)
    balls_per_over: Mapped[int] = mapped_column(Integer)
    total_wickets: Mapped[int] = mapped_column(Integer)

    # Score
    runs: Mapped[int] = mapped_column(Integer, default=0)
    wickets_lost: Mapped[int] = mapped_column(Integer, default=0)
    balls_bowled: Mapped[int] = mapped_column(Integer, default=0)
    fours: Mapped[int] = mapped_column(Integer, default=0)
    sixes: Mapped[int] = mapped_column(Integer, default=0)
    strike_rate: Mapped[float] = mapped_column(Float, default=0.0)
    run_rate: Mapped[float] = mapped_column(Float, default=0.0)

    status: Mapped[InningsStatus] = mapped_column(Enum(InningsStatus))
    ball_symbols: Mapped[str] = mapped_column(String(200), default="")  # e.g. "641W0-"

    # Learning summary at the end of the innings (JSON)
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    played_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    balls: Mapped[List["BallRecord"]] = relationship(
        "BallRecord", back_populates="innings", order_by="BallRecord.ball_number",
        cascade="all, delete-orphan",
    )

    @property
    def overs_display(self) -> str:
        return f"{self.balls_bowled // self.balls_per_over}.{self.balls_bowled % self.balls_per_over}"

    @property
    def score_display(self) -> str:
        return f"{self.runs}/{self.wickets_lost}"

    def __repr__(self):
        return f"<InningsRecord {self.session_key}: {self.score_display} ({self.overs_display})>"


class BallRecord(Base):
    __tablename__ = "ball_records"

    id: Mapped[int] = mapped_column(primary_key=True)
    innings_id: Mapped[int] = mapped_column(ForeignKey("innings_records.id"))
    innings: Mapped["InningsRecord"] = relationship("InningsRecord", back_populates="balls")

    ball_number: Mapped[int] = mapped_column(Integer)  # 1-based across the innings
    outcome: Mapped[str] = mapped_column(String(1))  # scorebook symbol
    runs: Mapped[int] = mapped_column(Integer, default=0)
    is_correct: Mapped[bool] = mapped_column(default=False)
    response_time: Mapped[float] = mapped_column(Float, default=0.0)

    # Question
    question_id: Mapped[str] = mapped_column(String(100))
    topic: Mapped[str] = mapped_column(String(100))
    difficulty: Mapped[str] = mapped_column(String(20))

    def __repr__(self):
        return f"<Ball {self.ball_number}: {self.outcome}>"
