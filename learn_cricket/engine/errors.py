"""
Engine error kinds
"""
from typing import Optional


class LearnCricketError(Exception):
    """Base class for all engine errors"""


class InvalidStateError(LearnCricketError):
    """Operation is not valid for the component's current state"""


class TerminalStateError(LearnCricketError):
    """Mutation attempted on a finished innings"""


class RangeError(LearnCricketError, ValueError):
    """Invalid index or argument, rejected before any mutation"""


class MalformedQuestionError(LearnCricketError):
    """Question record failed structural validation"""

    def __init__(self, errors: list[str], question_id: Optional[str] = None):
        self.errors = list(errors)
        self.question_id = question_id
        label = question_id or "<unknown>"
        super().__init__(f"Malformed question {label}: {'; '.join(self.errors)}")


class SupplyExhaustedError(LearnCricketError):
    """Question supply could not provide a next question; the session is paused"""

    def __init__(self, message: str, result=None):
        super().__init__(message)
        # AnswerResult of the answer scored just before the supply ran dry
        self.result = result
