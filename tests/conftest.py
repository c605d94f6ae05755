"""
Shared fixtures: fake clock, scripted question supply, in-memory database.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from learn_cricket.database import Base
from learn_cricket.engine.progress_store import ProgressStore
import learn_cricket.models  # noqa: F401

TOPICS = ["basic rules", "field positions", "bowling types", "equipment"]


class FakeClock:
    """Monotonic clock driven by the test"""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_question(qid: str, topic: str = "basic rules", difficulty: str = "easy", answer: int = 0, **overrides):
    """Build a raw question record as the supply would send it."""
    record = {
        "id": qid,
        "prompt": f"Question {qid}?",
        "options": ["Option A", "Option B", "Option C", "Option D"],
        "correct_option_index": answer,
        "explanation": f"Explanation for {qid}.",
        "topic": topic,
        "difficulty": difficulty,
    }
    record.update(overrides)
    return record


def question_bank(count: int, topics=TOPICS) -> list[dict]:
    return [make_question(f"q{i}", topic=topics[i % len(topics)]) for i in range(count)]


class ScriptedSupply:
    """
    Deterministic question supply.

    With `batches`, each call returns the next scripted batch (empty once
    they run out); otherwise questions are dealt from the bank in order.
    """

    def __init__(self, questions=None, batches=None):
        self.questions = list(questions or [])
        self.batches = list(batches) if batches is not None else None
        self.requests = []

    async def fetch_questions(self, request):
        self.requests.append(request)
        if self.batches is not None:
            return self.batches.pop(0) if self.batches else []
        batch, self.questions = self.questions[:request.count], self.questions[request.count:]
        return batch


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def supply():
    return ScriptedSupply(question_bank(40))


@pytest.fixture
def db_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def store(db_session_factory):
    return ProgressStore(db_session_factory)
