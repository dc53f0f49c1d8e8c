"""Quiz session state machine: navigation, answers, auto-advance and scoring."""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol, Sequence

from quizgen.models.quiz import Question, Quiz, QuizAttempt

logger = logging.getLogger(__name__)

NO_ANSWER = "No answer"
DEFAULT_AUTO_ADVANCE_DELAY = 0.7


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback later and hand back a cancelable task."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask: ...


class AsyncioScheduler:
    """
    Schedules callbacks on an asyncio event loop.

    The loop is bound on creation, so a session built outside a running loop
    fails there instead of on its first auto-advance.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise RuntimeError(
                    "QuizSession needs a running event loop; create it inside "
                    "a coroutine or pass a scheduler"
                ) from e
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._loop.call_later(delay, callback)


class SessionStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


CompletionHandler = Callable[[Quiz, QuizAttempt], None]


def normalize_answer(value: str) -> str:
    """Case-fold and strip an answer for comparison."""
    return value.strip().casefold()


def is_correct(question: Question, answer: str | None) -> bool:
    """Whether an answer matches the key, ignoring case and outer whitespace."""
    if answer is None:
        return False
    return normalize_answer(answer) == normalize_answer(question.correct_answer)


def calculate_score(questions: Sequence[Question], answers: dict[str, str]) -> int:
    """Count correctly answered questions; unanswered ones count as wrong."""
    return sum(1 for q in questions if is_correct(q, answers.get(q.id)))


def percentage(score: int, total: int) -> int:
    """Score as a whole percentage, halves rounded up."""
    if total <= 0:
        return 0
    return math.floor(score * 100 / total + 0.5)


@dataclass(frozen=True)
class ReviewItem:
    """How one question was answered, for the results screen."""

    question: Question
    user_answer: str
    correct_answer: str
    is_correct: bool
    explanation: str | None
    answered: bool


def review(questions: Sequence[Question], answers: dict[str, str]) -> list[ReviewItem]:
    """Build review rows; explanations are kept only for wrong answers."""
    items = []
    for question in questions:
        answer = answers.get(question.id)
        correct = is_correct(question, answer)
        items.append(
            ReviewItem(
                question=question,
                user_answer=answer if answer is not None else NO_ANSWER,
                correct_answer=question.correct_answer,
                is_correct=correct,
                explanation=None if correct else question.explanation,
                answered=answer is not None,
            )
        )
    return items


class QuizSession:
    """
    Drives one attempt at a quiz.

    The session starts in progress at the first question with no answers.
    Selection questions (multiple choice, true/false) move on by themselves
    shortly after being answered, unless they are the last question. That
    pending move is canceled whenever the index changes some other way, the
    session finishes, a different quiz is loaded, or the session is exited.

    Calls made outside their preconditions are ignored and return False.
    """

    def __init__(
        self,
        quiz: Quiz | None = None,
        *,
        scheduler: Scheduler | None = None,
        on_complete: CompletionHandler | None = None,
        auto_advance_delay: float = DEFAULT_AUTO_ADVANCE_DELAY,
    ) -> None:
        self._scheduler: Scheduler = scheduler or AsyncioScheduler()
        self._on_complete = on_complete
        self._auto_advance_delay = auto_advance_delay
        self._pending: ScheduledTask | None = None

        self.quiz: Quiz | None = None
        self.current_question_index: int = 0
        self.answers: dict[str, str] = {}
        self.show_feedback: bool = False
        self.status: SessionStatus = SessionStatus.IN_PROGRESS
        self.attempt: QuizAttempt | None = None
        self._closed: bool = False

        if quiz is not None:
            self.load(quiz)

    # Lifecycle

    def load(self, quiz: Quiz) -> None:
        """Open a quiz; a quiz with a different id starts from scratch."""
        if self.quiz is not None and self.quiz.id == quiz.id and not self._closed:
            return
        self.quiz = quiz
        self._reset()
        logger.debug("Loaded quiz %s (%d questions)", quiz.id, quiz.total_questions)

    def restart(self, quiz: Quiz | None = None) -> None:
        """Start over, optionally with a reordered copy of the quiz."""
        if quiz is not None:
            self.quiz = quiz
        self._reset()

    def exit(self) -> None:
        """Tear the session down; nothing scheduled may fire afterwards."""
        self._cancel_pending()
        self._closed = True

    def _reset(self) -> None:
        self._cancel_pending()
        self.current_question_index = 0
        self.answers = {}
        self.show_feedback = False
        self.status = SessionStatus.IN_PROGRESS
        self.attempt = None
        self._closed = False

    # State

    @property
    def is_active(self) -> bool:
        return (
            self.quiz is not None
            and not self._closed
            and self.status is SessionStatus.IN_PROGRESS
        )

    @property
    def is_finished(self) -> bool:
        return self.status is SessionStatus.FINISHED

    @property
    def questions(self) -> tuple[Question, ...]:
        return self.quiz.questions if self.quiz is not None else ()

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Question | None:
        if not self.questions:
            return None
        return self.questions[self.current_question_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_question_index >= self.total_questions - 1

    @property
    def current_answer(self) -> str | None:
        question = self.current_question
        return self.answers.get(question.id) if question is not None else None

    @property
    def can_go_next(self) -> bool:
        return self.is_active and self.current_answer is not None

    @property
    def can_go_previous(self) -> bool:
        return self.is_active and self.current_question_index > 0

    @property
    def has_pending_advance(self) -> bool:
        return self._pending is not None

    @property
    def score(self) -> int:
        """Correct answers so far; fixed once the session has finished."""
        if self.attempt is not None:
            return self.attempt.score
        return calculate_score(self.questions, self.answers)

    @property
    def percentage(self) -> int:
        return percentage(self.score, self.total_questions)

    def review(self) -> list[ReviewItem]:
        return review(self.questions, self.answers)

    # Transitions

    def submit_answer(self, question_id: str, value: str) -> bool:
        """
        Record an answer, replacing any earlier one.

        An empty string clears the answer. Answering the current selection
        question schedules the auto-advance unless it is the last one.
        """
        if not self.is_active or self.show_feedback:
            return False
        question = self.quiz.get_question(question_id)
        if question is None:
            logger.warning("Ignoring answer for unknown question %s", question_id)
            return False

        current = self.current_question
        if (
            value != ""
            and question.auto_advances
            and current is not None
            and current.id == question_id
            and not self.is_last_question
        ):
            # A scheduler failure must leave the answers untouched
            self._schedule_advance()

        if value == "":
            self.answers.pop(question_id, None)
        else:
            self.answers[question_id] = value
        return True

    def go_next(self) -> bool:
        """Move to the next question, or finish from the last one."""
        if not self.can_go_next:
            return False
        if self.is_last_question:
            self._finish()
        else:
            self._move_to(self.current_question_index + 1)
        return True

    def go_previous(self) -> bool:
        if not self.can_go_previous:
            return False
        self._move_to(self.current_question_index - 1)
        return True

    def reveal_feedback(self) -> bool:
        """Show feedback for the answered current question and lock its answer."""
        if not self.can_go_next or self.show_feedback:
            return False
        self._cancel_pending()
        self.show_feedback = True
        return True

    def _move_to(self, index: int) -> None:
        self._cancel_pending()
        self.current_question_index = index
        self.show_feedback = False

    def _finish(self) -> None:
        self._cancel_pending()
        score = calculate_score(self.questions, self.answers)
        self.status = SessionStatus.FINISHED
        self.show_feedback = False
        self.attempt = QuizAttempt(answers=dict(self.answers), score=score)
        logger.info(
            "Finished quiz %s: %d/%d", self.quiz.id, score, self.total_questions
        )
        if self._on_complete is not None:
            self._on_complete(self.quiz, self.attempt)

    # Auto-advance

    def _schedule_advance(self) -> None:
        self._cancel_pending()
        expected_index = self.current_question_index
        self._pending = self._scheduler.call_later(
            self._auto_advance_delay, lambda: self._auto_advance(expected_index)
        )

    def _auto_advance(self, expected_index: int) -> None:
        self._pending = None
        # Manual navigation, finishing or exiting may have happened meanwhile
        if not self.is_active or self.current_question_index != expected_index:
            return
        if self.is_last_question:
            return
        self.current_question_index = expected_index + 1
        self.show_feedback = False

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
