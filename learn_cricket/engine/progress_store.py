"""
Progress store - SQL-backed persistence for learning progress and innings history
"""
import json
import logging
from typing import Callable, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from learn_cricket.database import get_session
from learn_cricket.engine.innings import InningsConfig, InningsState
from learn_cricket.models.innings import BallRecord, InningsRecord
from learn_cricket.models.progress import LearningProgress

logger = logging.getLogger(__name__)


class ProgressStore:
    """
    Key-value persistence of AggregatePerformance snapshots, one row per
    session key, plus the archive of completed innings.

    Every call opens and closes its own database session.
    """

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self.session_factory = session_factory

    def load_progress(self, session_key: str) -> Optional[dict]:
        """Stored snapshot for the key, or None for a fresh learner"""
        db = self.session_factory()
        try:
            row = db.scalar(select(LearningProgress).where(LearningProgress.session_key == session_key))
            if row is None:
                return None
            return row.snapshot_dict
        finally:
            db.close()

    def save_progress(self, session_key: str, snapshot: dict) -> None:
        db = self.session_factory()
        try:
            row = db.scalar(select(LearningProgress).where(LearningProgress.session_key == session_key))
            if row is None:
                row = LearningProgress(session_key=session_key)
                db.add(row)
            row.snapshot = json.dumps(snapshot)
            row.questions_attempted = int(snapshot.get("attempted", 0))
            db.commit()
        finally:
            db.close()

    def reset_progress(self, session_key: str) -> bool:
        """Delete stored progress; returns False when there was nothing to delete"""
        db = self.session_factory()
        try:
            row = db.scalar(select(LearningProgress).where(LearningProgress.session_key == session_key))
            if row is None:
                return False
            db.delete(row)
            db.commit()
            logger.info("Reset learning progress for %s", session_key)
            return True
        finally:
            db.close()

    def save_innings(
        self,
        session_key: str,
        config: InningsConfig,
        state: InningsState,
        balls: Iterable[dict],
        summary: Optional[dict] = None,
    ) -> int:
        """Archive a finished innings with its ball-by-ball records; returns the record id"""
        db = self.session_factory()
        try:
            record = InningsRecord(
                session_key=session_key,
                total_overs=config.total_overs,
                balls_per_over=config.balls_per_over,
                total_wickets=config.total_wickets,
                runs=state.runs,
                wickets_lost=state.wickets_lost,
                balls_bowled=state.balls_bowled,
                fours=state.boundaries.fours,
                sixes=state.boundaries.sixes,
                strike_rate=state.strike_rate,
                run_rate=state.run_rate,
                status=state.status,
                ball_symbols="".join(b.symbol for b in state.ball_results),
                summary=json.dumps(summary) if summary is not None else None,
            )
            for ball in balls:
                record.balls.append(BallRecord(**ball))
            db.add(record)
            db.commit()
            logger.info("Archived innings %s for %s (%d balls)", record.score_display, session_key, len(record.balls))
            return record.id
        finally:
            db.close()

    def list_innings(self, session_key: str, limit: Optional[int] = None) -> list[dict]:
        """Stored innings for the key, newest first"""
        db = self.session_factory()
        try:
            query = (
                select(InningsRecord)
                .where(InningsRecord.session_key == session_key)
                .order_by(InningsRecord.played_at.desc(), InningsRecord.id.desc())
            )
            if limit is not None:
                query = query.limit(limit)
            return [self._innings_dict(r) for r in db.scalars(query).all()]
        finally:
            db.close()

    @staticmethod
    def _innings_dict(record: InningsRecord) -> dict:
        return {
            "id": record.id,
            "session_key": record.session_key,
            "score": record.score_display,
            "runs": record.runs,
            "wickets_lost": record.wickets_lost,
            "balls_bowled": record.balls_bowled,
            "overs": record.overs_display,
            "fours": record.fours,
            "sixes": record.sixes,
            "strike_rate": record.strike_rate,
            "run_rate": record.run_rate,
            "status": record.status.value,
            "ball_symbols": record.ball_symbols,
            "summary": json.loads(record.summary) if record.summary else None,
            "played_at": record.played_at.isoformat() if record.played_at else None,
            "balls": [
                {
                    "ball_number": b.ball_number,
                    "outcome": b.outcome,
                    "runs": b.runs,
                    "is_correct": b.is_correct,
                    "response_time": b.response_time,
                    "question_id": b.question_id,
                    "topic": b.topic,
                    "difficulty": b.difficulty,
                }
                for b in record.balls
            ],
        }
