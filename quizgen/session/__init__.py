"""Quiz taking: the session state machine and randomized retakes."""

from .engine import (
    NO_ANSWER,
    AsyncioScheduler,
    QuizSession,
    ReviewItem,
    Scheduler,
    SessionStatus,
    calculate_score,
    is_correct,
    percentage,
    review,
)
from .shuffle import shuffle_questions, shuffled_quiz

__all__ = [
    "NO_ANSWER",
    "AsyncioScheduler",
    "QuizSession",
    "ReviewItem",
    "Scheduler",
    "SessionStatus",
    "calculate_score",
    "is_correct",
    "percentage",
    "review",
    "shuffle_questions",
    "shuffled_quiz",
]
