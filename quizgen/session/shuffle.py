"""Randomized retakes: reorder a quiz's questions without touching the original."""

import random
from typing import Sequence, TypeVar

from quizgen.models.quiz import Quiz

T = TypeVar("T")


def shuffle_questions(questions: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """
    Return a uniformly shuffled copy using a backward Fisher-Yates pass.

    Args:
        questions: Sequence to shuffle; left unchanged
        rng: Random source, a fresh random.Random() if omitted

    Returns:
        New list holding the same items in random order
    """
    rng = rng or random.Random()
    shuffled = list(questions)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def shuffled_quiz(quiz: Quiz, rng: random.Random | None = None) -> Quiz:
    """Copy of the quiz with its questions shuffled; the id is kept."""
    return quiz.model_copy(
        update={"questions": tuple(shuffle_questions(quiz.questions, rng))}
    )
