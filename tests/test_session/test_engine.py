"""Tests for the quiz session state machine."""

import asyncio

import pytest

from quizgen.models.quiz import Quiz, QuizAttempt
from quizgen.session.engine import NO_ANSWER, QuizSession, SessionStatus

DELAY = 0.7


@pytest.fixture
def completed() -> list:
    """Collects (quiz, attempt) pairs emitted on completion."""
    return []


@pytest.fixture
def session(sample_quiz: Quiz, scheduler, completed: list) -> QuizSession:
    return QuizSession(
        sample_quiz,
        scheduler=scheduler,
        on_complete=lambda quiz, attempt: completed.append((quiz, attempt)),
        auto_advance_delay=DELAY,
    )


class TestInitialState:
    """Test a freshly loaded session."""

    def test_starts_at_first_question(self, session: QuizSession):
        assert session.current_question_index == 0
        assert session.answers == {}
        assert session.show_feedback is False
        assert session.status is SessionStatus.IN_PROGRESS
        assert session.is_finished is False

    def test_current_question(self, session: QuizSession):
        assert session.current_question.id == "q1"


class TestSubmitAnswer:
    """Test answer capture."""

    def test_records_answer(self, session: QuizSession):
        assert session.submit_answer("q1", "4") is True
        assert session.answers == {"q1": "4"}

    def test_overwrites_answer(self, session: QuizSession):
        session.submit_answer("q1", "3")
        session.submit_answer("q1", "4")
        assert session.answers == {"q1": "4"}

    def test_empty_string_clears_answer(self, session: QuizSession):
        session.submit_answer("q1", "4")
        session.submit_answer("q1", "")
        assert "q1" not in session.answers

    def test_unknown_question_ignored(self, session: QuizSession):
        assert session.submit_answer("nope", "x") is False
        assert session.answers == {}

    def test_rejected_while_feedback_shown(self, session: QuizSession):
        session.submit_answer("q1", "3")
        session.reveal_feedback()

        assert session.submit_answer("q1", "4") is False
        assert session.answers == {"q1": "3"}


class TestAutoAdvance:
    """Test the delayed move after selection answers."""

    def test_multiple_choice_advances_after_delay(self, session: QuizSession, scheduler):
        session.submit_answer("q1", "4")

        scheduler.advance(0.5)
        assert session.current_question_index == 0

        scheduler.advance(0.5)
        assert session.current_question_index == 1
        assert session.show_feedback is False
        assert session.has_pending_advance is False

    def test_true_false_advances(self, session: QuizSession, scheduler):
        session.submit_answer("q1", "4")
        scheduler.advance(DELAY)
        assert session.current_question_index == 1

        session.submit_answer("q2", "True")
        scheduler.advance(DELAY)
        assert session.current_question_index == 2

    def test_short_answer_never_advances(self, session: QuizSession, scheduler):
        session.submit_answer("q1", "4")
        session.go_next()
        session.submit_answer("q2", "True")
        session.go_next()
        assert session.current_question_index == 2

        session.submit_answer("q3", "Paris")
        assert session.has_pending_advance is False
        scheduler.advance(10)
        assert session.current_question_index == 2
        assert session.is_finished is False

    def test_last_question_does_not_advance(self, scheduler, completed):
        quiz = Quiz(
            id="tf-only",
            title="One",
            source_file_name="a.pdf",
            questions=(
                {"id": "t1", "type": "TRUE_FALSE", "question": "Yes?", "correctAnswer": "True"},
            ),
        )
        session = QuizSession(quiz, scheduler=scheduler, auto_advance_delay=DELAY)

        session.submit_answer("t1", "True")

        assert session.has_pending_advance is False
        scheduler.advance(DELAY)
        assert session.current_question_index == 0
        assert session.is_finished is False

    def test_manual_next_cancels_pending_advance(self, session: QuizSession, scheduler):
        session.submit_answer("q1", "4")
        session.go_next()
        assert session.current_question_index == 1

        scheduler.advance(DELAY)
        # The stale timer must not skip question 2
        assert session.current_question_index == 1

    def test_manual_previous_cancels_pending_advance(self, session: QuizSession, scheduler):
        session.submit_answer("q1", "4")
        scheduler.advance(DELAY)
        session.submit_answer("q2", "False")
        session.go_previous()

        scheduler.advance(DELAY)
        assert session.current_question_index == 0

    def test_stale_timer_checks_index(self, session: QuizSession, scheduler):
        """Test that a timer firing after the index moved does nothing."""
        session.submit_answer("q1", "4")
        # Move the index without going through a transition
        session.current_question_index = 2
        scheduler.advance(DELAY)
        assert session.current_question_index == 2

    def test_reanswering_restarts_delay(self, session: QuizSession, scheduler):
        session.submit_answer("q1", "3")
        scheduler.advance(0.5)
        session.submit_answer("q1", "4")
        scheduler.advance(0.5)
        assert session.current_question_index == 0
        scheduler.advance(0.3)
        assert session.current_question_index == 1
        assert len(scheduler.pending) == 0

    def test_exit_cancels_pending_advance(self, session: QuizSession, scheduler):
        session.submit_answer("q1", "4")
        session.exit()

        scheduler.advance(DELAY)
        assert session.current_question_index == 0
        assert scheduler.pending == []
        assert session.is_active is False

    def test_reveal_feedback_cancels_pending_advance(self, session: QuizSession, scheduler):
        session.submit_answer("q1", "4")
        assert session.reveal_feedback() is True

        scheduler.advance(DELAY)
        assert session.current_question_index == 0
        assert session.show_feedback is True


class TestNavigation:
    """Test next and previous."""

    def test_next_requires_answer(self, session: QuizSession):
        assert session.go_next() is False
        assert session.current_question_index == 0

    def test_next_moves_and_clears_feedback(self, session: QuizSession):
        session.submit_answer("q1", "4")
        session.reveal_feedback()

        assert session.go_next() is True
        assert session.current_question_index == 1
        assert session.show_feedback is False

    def test_previous_at_start_is_noop(self, session: QuizSession):
        assert session.go_previous() is False
        assert session.current_question_index == 0

    def test_previous_moves_back(self, session: QuizSession):
        session.submit_answer("q1", "4")
        session.go_next()
        session.submit_answer("q2", "True")
        session.reveal_feedback()

        assert session.go_previous() is True
        assert session.current_question_index == 0
        assert session.show_feedback is False

    def test_answers_survive_navigation(self, session: QuizSession):
        session.submit_answer("q1", "4")
        session.go_next()
        session.go_previous()
        assert session.current_answer == "4"

    def test_next_on_last_question_finishes(self, session: QuizSession, completed: list):
        session.submit_answer("q1", "4")
        session.go_next()
        session.submit_answer("q2", "True")
        session.go_next()
        session.submit_answer("q3", "paris ")

        assert session.go_next() is True
        assert session.is_finished is True
        assert len(completed) == 1

    def test_no_transitions_after_finish(self, session: QuizSession):
        session.submit_answer("q1", "4")
        session.go_next()
        session.submit_answer("q2", "True")
        session.go_next()
        session.submit_answer("q3", "Paris")
        session.go_next()

        assert session.submit_answer("q3", "Lyon") is False
        assert session.go_previous() is False
        assert session.go_next() is False
        assert session.answers["q3"] == "Paris"


class TestCompletion:
    """Test scoring and the emitted attempt."""

    def test_all_correct_scenario(self, session: QuizSession, completed: list):
        session.submit_answer("q1", "4")
        session.go_next()
        session.submit_answer("q2", "True")
        session.go_next()
        session.submit_answer("q3", "paris ")
        session.go_next()

        assert session.score == 3
        assert session.percentage == 100

        quiz, attempt = completed[0]
        assert quiz.id == "quiz-a"
        assert attempt == QuizAttempt(
            answers={"q1": "4", "q2": "True", "q3": "paris "}, is_submitted=True, score=3
        )

    def test_all_wrong_with_blank_scenario(self, session: QuizSession, completed: list):
        session.submit_answer("q1", "3")
        session.go_next()
        session.submit_answer("q2", "False")
        session.go_next()
        # Type an answer to enable finishing, then clear it
        session.submit_answer("q3", "x")
        session.submit_answer("q3", "")
        assert session.go_next() is False

        session.submit_answer("q3", "Lyon")
        session.go_next()
        assert session.score == 0

        items = session.review()
        assert [item.is_correct for item in items] == [False, False, False]

    def test_unanswered_shows_no_answer_in_review(self, sample_quiz: Quiz, scheduler):
        session = QuizSession(sample_quiz, scheduler=scheduler)
        session.submit_answer("q1", "3")
        session.go_next()
        session.submit_answer("q2", "False")
        session.go_next()

        items = session.review()

        assert session.score == 0
        assert items[2].user_answer == NO_ANSWER
        assert items[2].answered is False
        assert items[2].explanation == sample_quiz.questions[2].explanation

    def test_attempt_emitted_once(self, session: QuizSession, completed: list):
        session.submit_answer("q1", "4")
        session.go_next()
        session.submit_answer("q2", "True")
        session.go_next()
        session.submit_answer("q3", "Paris")
        session.go_next()
        session.go_next()
        session.exit()

        assert len(completed) == 1

    def test_attempt_not_affected_by_later_changes(self, session: QuizSession, completed: list):
        session.submit_answer("q1", "4")
        session.go_next()
        session.submit_answer("q2", "True")
        session.go_next()
        session.submit_answer("q3", "Paris")
        session.go_next()

        session.answers["q3"] = "Lyon"
        assert completed[0][1].answers["q3"] == "Paris"
        assert session.score == 3


class TestReset:
    """Test loading another quiz into the session."""

    def test_loading_other_quiz_resets(self, session: QuizSession, other_quiz: Quiz):
        session.submit_answer("q1", "4")
        session.go_next()
        session.submit_answer("q2", "True")

        session.load(other_quiz)

        assert session.quiz is other_quiz
        assert session.current_question_index == 0
        assert session.answers == {}
        assert session.is_finished is False
        assert session.show_feedback is False

    def test_loading_after_finish_resets(self, session: QuizSession, other_quiz: Quiz):
        session.submit_answer("q1", "4")
        session.go_next()
        session.submit_answer("q2", "True")
        session.go_next()
        session.submit_answer("q3", "Paris")
        session.go_next()
        assert session.is_finished

        session.load(other_quiz)

        assert session.current_question_index == 0
        assert session.answers == {}
        assert session.is_finished is False
        assert session.attempt is None

    def test_loading_other_quiz_cancels_pending_advance(
        self, session: QuizSession, other_quiz: Quiz, scheduler
    ):
        session.submit_answer("q1", "4")
        session.load(other_quiz)

        scheduler.advance(DELAY)
        assert session.current_question_index == 0

    def test_reloading_same_quiz_keeps_progress(self, session: QuizSession, sample_quiz: Quiz):
        session.submit_answer("q1", "4")
        session.load(sample_quiz)
        assert session.answers == {"q1": "4"}

    def test_restart(self, session: QuizSession):
        session.submit_answer("q1", "4")
        session.go_next()

        session.restart()

        assert session.current_question_index == 0
        assert session.answers == {}


class FailingScheduler:
    """Scheduler whose call_later always fails."""

    def call_later(self, delay, callback):
        raise RuntimeError("scheduler unavailable")


class TestDefaultScheduler:
    """Test the asyncio scheduler a session uses by default."""

    def test_auto_advance_fires_on_running_loop(self, sample_quiz: Quiz):
        async def run() -> QuizSession:
            session = QuizSession(sample_quiz, auto_advance_delay=0.01)
            session.submit_answer("q1", "4")
            assert session.has_pending_advance
            await asyncio.sleep(0.1)
            return session

        session = asyncio.run(run())

        assert session.current_question_index == 1
        assert session.has_pending_advance is False

    def test_exit_cancels_on_running_loop(self, sample_quiz: Quiz):
        async def run() -> QuizSession:
            session = QuizSession(sample_quiz, auto_advance_delay=0.01)
            session.submit_answer("q1", "4")
            session.exit()
            await asyncio.sleep(0.05)
            return session

        assert asyncio.run(run()).current_question_index == 0

    def test_requires_running_loop(self, sample_quiz: Quiz):
        """Test that a session without a loop or scheduler fails on creation."""
        with pytest.raises(RuntimeError, match="running event loop"):
            QuizSession(sample_quiz)

    def test_scheduler_failure_leaves_answers_untouched(self, sample_quiz: Quiz):
        session = QuizSession(sample_quiz, scheduler=FailingScheduler())

        with pytest.raises(RuntimeError, match="scheduler unavailable"):
            session.submit_answer("q1", "4")

        assert session.answers == {}
        assert session.current_question_index == 0
