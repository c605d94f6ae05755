from learn_cricket.models.progress import LearningProgress
from learn_cricket.models.innings import InningsRecord, BallRecord

__all__ = [
    "LearningProgress",
    "InningsRecord",
    "BallRecord",
]
