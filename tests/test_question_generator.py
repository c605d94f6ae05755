"""
Tests for the offline question supply.
"""
import asyncio

from learn_cricket.engine.adaptive import Difficulty, SupplyRequest
from learn_cricket.generators.question_generator import SEED_QUESTIONS, QuestionGenerator
from learn_cricket.generators.topics import CRICKET_TOPICS, TOPIC_DESCRIPTIONS, TOPIC_DIFFICULTY


class TestTopicCatalogue:
    def test_ten_topics_with_metadata(self):
        assert len(CRICKET_TOPICS) == 10
        assert set(TOPIC_DESCRIPTIONS) == set(CRICKET_TOPICS)
        assert set(TOPIC_DIFFICULTY) == set(CRICKET_TOPICS)

    def test_three_seed_questions_per_topic(self):
        for topic in CRICKET_TOPICS:
            assert sum(1 for q in SEED_QUESTIONS if q["topic"] == topic) == 3


class TestQuestionGenerator:
    def test_prefers_requested_topic_and_difficulty(self):
        generator = QuestionGenerator(seed=1)
        batch = generator.generate(SupplyRequest(topic="equipment", difficulty=Difficulty.EASY, count=2))
        assert [q["topic"] for q in batch] == ["equipment", "equipment"]
        assert all(q["difficulty"] == "easy" for q in batch)

    def test_avoids_recent_topics(self):
        generator = QuestionGenerator(seed=2)
        batch = generator.generate(SupplyRequest(
            topic=None,
            difficulty=Difficulty.MEDIUM,
            exclude_recent_topics=("basic rules", "equipment"),
            count=5,
        ))
        assert all(q["topic"] not in ("basic rules", "equipment") for q in batch)

    def test_never_repeats_and_exhausts(self):
        generator = QuestionGenerator(seed=3)
        seen = []
        while True:
            batch = asyncio.run(generator.fetch_questions(SupplyRequest(topic=None, difficulty=Difficulty.HARD, count=4)))
            if not batch:
                break
            seen.extend(q["id"] for q in batch)
        assert sorted(seen) == sorted(q["id"] for q in SEED_QUESTIONS)
        assert generator.remaining == 0

    def test_returns_copies(self):
        generator = QuestionGenerator(seed=4)
        batch = generator.generate(SupplyRequest(topic=None, difficulty=Difficulty.EASY, count=1))
        batch[0]["options"].append("extra")
        assert all(len(q["options"]) == 4 for q in SEED_QUESTIONS)
