from fastapi import APIRouter, Depends, HTTPException
from typing import Dict, Optional
import logging
import uuid

from learn_cricket.config import settings
from learn_cricket.engine.adaptive import AdaptiveSelector, Difficulty
from learn_cricket.engine.errors import (
    InvalidStateError, RangeError, SupplyExhaustedError, TerminalStateError
)
from learn_cricket.engine.innings import OverSummary
from learn_cricket.engine.performance import AggregatePerformance, summarize
from learn_cricket.engine.progress_store import ProgressStore
from learn_cricket.engine.session import AnswerResult, SessionOrchestrator
from learn_cricket.generators.question_generator import QuestionGenerator
from learn_cricket.generators.topics import CRICKET_TOPICS
from learn_cricket.api.schemas import (
    StartSessionRequest, AnswerRequest, SessionStateResponse, AnswerResultResponse,
    OverSummaryResponse, ProgressResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Learn Cricket"])

# In-memory store for active sessions
# Each orchestrator owns its own engine components
active_sessions: Dict[str, SessionOrchestrator] = {}


def get_question_supply():
    """One offline question bank per session"""
    return QuestionGenerator()


def get_progress_store():
    return ProgressStore()


def _get_active(session_id: str) -> SessionOrchestrator:
    if session_id not in active_sessions:
        raise HTTPException(status_code=404, detail="Session not found")
    return active_sessions[session_id]


def _over_summary_response(summary: OverSummary) -> dict:
    return {
        "over_index": summary.over_index,
        "runs_in_over": summary.runs_in_over,
        "wickets_in_over": summary.wickets_in_over,
        "dots_in_over": summary.dots_in_over,
        "balls": [b.symbol for b in summary.balls],
        "is_maiden": summary.is_maiden,
    }


def _session_state_response(session_id: str, session: SessionOrchestrator) -> dict:
    state = session.state
    config = session.config
    question = session.current_question
    return {
        "session_id": session_id,
        "session_key": session.session_key,
        "status": session.status.value,
        "innings": {
            "score": state.score_display,
            "runs": state.runs,
            "wickets_lost": state.wickets_lost,
            "total_wickets": config.total_wickets,
            "balls_bowled": state.balls_bowled,
            "balls_remaining": state.balls_remaining,
            "overs": state.overs_display,
            "total_overs": config.total_overs,
            "fours": state.boundaries.fours,
            "sixes": state.boundaries.sixes,
            "singles": state.singles,
            "dot_balls": state.dot_balls,
            "strike_rate": round(state.strike_rate, 2),
            "run_rate": round(state.run_rate, 2),
            "status": state.status.value,
            "ball_symbols": [b.symbol for b in state.ball_results],
        },
        "current_question": question.public_dict() if question else None,
        "recommendation": session.recommendation.to_dict() if session.recommendation else None,
    }


def _answer_response(session_id: str, session: SessionOrchestrator, result: AnswerResult, paused: bool = False) -> dict:
    return {
        "ball_number": result.ball_number,
        "outcome": result.outcome.symbol,
        "label": result.outcome.label,
        "runs": result.outcome.runs,
        "is_correct": result.is_correct,
        "correct_option_index": result.question.correct_option_index,
        "explanation": result.question.explanation,
        "response_time": round(result.response_time, 3),
        "over_completed": result.over_completed,
        "over_summary": _over_summary_response(result.over_summary) if result.over_summary else None,
        "innings_complete": result.innings_complete,
        "paused": paused,
        "session": _session_state_response(session_id, session),
    }


def _supply_unavailable(session_id: str, session: SessionOrchestrator, exc: SupplyExhaustedError,
                        result: Optional[AnswerResult] = None) -> HTTPException:
    detail = {
        "message": str(exc),
        "status": session.status.value,
        "session": _session_state_response(session_id, session),
    }
    if result is not None:
        detail["result"] = _answer_response(session_id, session, result, paused=True)
    return HTTPException(status_code=503, detail=detail)


@router.post("/sessions", response_model=SessionStateResponse)
async def start_session(
    request: Optional[StartSessionRequest] = None,
    supply=Depends(get_question_supply),
    store=Depends(get_progress_store),
):
    """Start a new innings and return the first question"""
    request = request or StartSessionRequest()
    floor = Difficulty(request.difficulty_floor.value) if request.difficulty_floor else None
    ceiling = Difficulty(request.difficulty_ceiling.value) if request.difficulty_ceiling else None

    try:
        session = SessionOrchestrator(
            supply,
            store,
            session_key=request.session_key,
            known_topics=CRICKET_TOPICS,
            difficulty_floor=floor,
            difficulty_ceiling=ceiling,
            **settings.session_options(),
        )
    except RangeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    session_id = uuid.uuid4().hex
    active_sessions[session_id] = session

    try:
        await session.start()
    except SupplyExhaustedError as e:
        raise _supply_unavailable(session_id, session, e)

    return _session_state_response(session_id, session)


@router.get("/sessions/{session_id}", response_model=SessionStateResponse)
def get_session_state(session_id: str):
    session = _get_active(session_id)
    return _session_state_response(session_id, session)


@router.post("/sessions/{session_id}/answer", response_model=AnswerResultResponse)
async def submit_answer(session_id: str, request: AnswerRequest):
    """Score an answer against the running clock"""
    session = _get_active(session_id)
    try:
        result = await session.submit_answer(request.option_index)
    except (InvalidStateError, TerminalStateError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SupplyExhaustedError as e:
        raise _supply_unavailable(session_id, session, e, e.result)

    return _answer_response(session_id, session, result)


@router.post("/sessions/{session_id}/resume", response_model=SessionStateResponse)
async def resume_session(session_id: str):
    session = _get_active(session_id)
    try:
        await session.resume()
    except InvalidStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SupplyExhaustedError as e:
        raise _supply_unavailable(session_id, session, e)

    return _session_state_response(session_id, session)


@router.get("/sessions/{session_id}/overs/{over_index}", response_model=OverSummaryResponse)
def get_over_summary(session_id: str, over_index: int):
    session = _get_active(session_id)
    try:
        summary = session.get_over_summary(over_index)
    except RangeError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _over_summary_response(summary)


@router.delete("/sessions/{session_id}", response_model=SessionStateResponse)
def abort_session(session_id: str):
    """Abort the session and drop it from memory"""
    session = _get_active(session_id)
    session.abort()
    del active_sessions[session_id]
    return _session_state_response(session_id, session)


@router.get("/progress/{session_key}", response_model=ProgressResponse)
def get_progress(session_key: str, store=Depends(get_progress_store)):
    """Learning summary and next recommendation from stored progress"""
    snapshot = store.load_progress(session_key)
    aggregate = AggregatePerformance.from_dict(snapshot) if snapshot else AggregatePerformance()
    selector = AdaptiveSelector(
        CRICKET_TOPICS,
        focus_count=settings.FOCUS_TOPIC_COUNT,
        min_attempts=settings.MIN_TOPIC_ATTEMPTS,
    )
    return {
        "session_key": session_key,
        "has_progress": snapshot is not None,
        "summary": summarize(aggregate, settings.MIN_TOPIC_ATTEMPTS),
        "recommendation": selector.recommend(aggregate).to_dict(),
    }
