"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel
from typing import Optional
from enum import Enum


# Enums
class SessionStatusEnum(str, Enum):
    NOT_STARTED = "not_started"
    AWAITING_SUPPLY = "awaiting_supply"
    AWAITING_ANSWER = "awaiting_answer"
    SCORING = "scoring"
    PAUSED = "paused"
    COMPLETE = "complete"
    ABORTED = "aborted"


class DifficultyEnum(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# Session Schemas
class StartSessionRequest(BaseModel):
    session_key: str = "default"
    difficulty_floor: Optional[DifficultyEnum] = None
    difficulty_ceiling: Optional[DifficultyEnum] = None


class AnswerRequest(BaseModel):
    option_index: int


class QuestionResponse(BaseModel):
    id: str
    prompt: str
    options: list[str]
    topic: str
    difficulty: str


class RecommendationResponse(BaseModel):
    suggested_difficulty: str
    focus_topics: list[str]
    knowledge_level: str


class InningsStateResponse(BaseModel):
    score: str
    runs: int
    wickets_lost: int
    total_wickets: int
    balls_bowled: int
    balls_remaining: int
    overs: str
    total_overs: int
    fours: int
    sixes: int
    singles: int
    dot_balls: int
    strike_rate: float
    run_rate: float
    status: str
    ball_symbols: list[str]


class SessionStateResponse(BaseModel):
    session_id: str
    session_key: str
    status: SessionStatusEnum
    innings: InningsStateResponse
    current_question: Optional[QuestionResponse] = None
    recommendation: Optional[RecommendationResponse] = None


class OverSummaryResponse(BaseModel):
    over_index: int
    runs_in_over: int
    wickets_in_over: int
    dots_in_over: int
    balls: list[str]
    is_maiden: bool


class AnswerResultResponse(BaseModel):
    ball_number: int
    outcome: str
    label: str
    runs: int
    is_correct: bool
    correct_option_index: int
    explanation: str
    response_time: float
    over_completed: bool
    over_summary: Optional[OverSummaryResponse] = None
    innings_complete: bool
    paused: bool = False
    session: SessionStateResponse


# Progress Schemas
class PerformanceSummaryResponse(BaseModel):
    total_questions: int
    accuracy: float
    current_streak: int
    best_streak: int
    average_response_time: float
    weak_topics: list[str]
    strong_topics: list[str]
    performance_level: str


class ProgressResponse(BaseModel):
    session_key: str
    has_progress: bool
    summary: PerformanceSummaryResponse
    recommendation: RecommendationResponse
