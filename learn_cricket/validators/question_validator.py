from dataclasses import dataclass

from learn_cricket.engine.adaptive import DIFFICULTY_ALIASES, Difficulty
from learn_cricket.engine.errors import MalformedQuestionError

OPTION_COUNT = 4


@dataclass(frozen=True)
class Question:
    """A question record that passed structural validation"""
    id: str
    prompt: str
    options: tuple[str, ...]
    correct_option_index: int
    explanation: str
    topic: str
    difficulty: Difficulty

    def is_correct(self, option_index: int) -> bool:
        return option_index == self.correct_option_index

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_option_index]

    def public_dict(self) -> dict:
        """Question as shown to the player (no answer)"""
        return {
            "id": self.id,
            "prompt": self.prompt,
            "options": list(self.options),
            "topic": self.topic,
            "difficulty": self.difficulty.value,
        }


def _field(raw: dict, *names, default=None):
    for name in names:
        if name in raw:
            return raw[name]
    return default


class QuestionValidator:
    @staticmethod
    def validate(raw) -> dict:
        """
        Validate a raw question record from the supply.

        Rules:
        1. Non-empty string id and prompt
        2. Exactly 4 non-empty string options
        3. Correct option index is an integer in [0, 3]
        4. Topic is a string, difficulty a known level
        """
        if not isinstance(raw, dict):
            return {"valid": False, "errors": [f"Record must be a mapping, got {type(raw).__name__}"]}

        errors = []

        qid = _field(raw, "id")
        if not isinstance(qid, str) or not qid.strip():
            errors.append("Missing question id")

        prompt = _field(raw, "prompt", "question")
        if not isinstance(prompt, str) or not prompt.strip():
            errors.append("Prompt must be a non-empty string")

        options = _field(raw, "options")
        if not isinstance(options, (list, tuple)):
            errors.append("Options must be a list")
        else:
            if len(options) != OPTION_COUNT:
                errors.append(f"Must have exactly {OPTION_COUNT} options, got {len(options)}")
            if any(not isinstance(o, str) or not o.strip() for o in options):
                errors.append("Options must be non-empty strings")

        index = _field(raw, "correct_option_index", "correctOptionIndex", "correctAnswer")
        # bool is an int subclass but never a valid index
        if not isinstance(index, int) or isinstance(index, bool):
            errors.append(f"Correct option index must be an integer, got {index!r}")
        elif not 0 <= index < OPTION_COUNT:
            errors.append(f"Correct option index must be in [0, {OPTION_COUNT - 1}], got {index}")

        topic = _field(raw, "topic", "category")
        if not isinstance(topic, str) or not topic.strip():
            errors.append("Topic must be a non-empty string")

        difficulty = _field(raw, "difficulty")
        if not isinstance(difficulty, str) or difficulty.strip().lower() not in DIFFICULTY_ALIASES:
            errors.append(f"Unknown difficulty {difficulty!r}")

        return {"valid": len(errors) == 0, "errors": errors}

    @classmethod
    def parse(cls, raw) -> Question:
        """Validate and build a Question, raising MalformedQuestionError on any problem"""
        result = cls.validate(raw)
        if not result["valid"]:
            qid = raw.get("id") if isinstance(raw, dict) else None
            raise MalformedQuestionError(result["errors"], question_id=qid if isinstance(qid, str) else None)

        explanation = _field(raw, "explanation", default="") or ""
        return Question(
            id=raw["id"].strip(),
            prompt=_field(raw, "prompt", "question").strip(),
            options=tuple(o.strip() for o in raw["options"]),
            correct_option_index=_field(raw, "correct_option_index", "correctOptionIndex", "correctAnswer"),
            explanation=str(explanation),
            topic=_field(raw, "topic", "category").strip(),
            difficulty=Difficulty.parse(raw["difficulty"]),
        )
