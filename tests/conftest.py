"""Shared test fixtures and configuration for pytest."""

import io
from datetime import datetime, timezone
from typing import Callable

import fitz
import openpyxl
import pytest

from quizgen.config.settings import get_settings
from quizgen.models.quiz import (
    GeneratedQuestion,
    GeneratedQuiz,
    MultipleChoiceQuestion,
    QuestionType,
    Quiz,
    ShortAnswerQuestion,
    TrueFalseQuestion,
)


class ManualTask:
    """Scheduled callback driven by ManualScheduler."""

    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when a test calls advance()."""

    def __init__(self):
        self.now = 0.0
        self.tasks: list[ManualTask] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTask:
        task = ManualTask(self.now + delay, callback)
        self.tasks.append(task)
        return task

    @property
    def pending(self) -> list[ManualTask]:
        return [t for t in self.tasks if not t.cancelled]

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = sorted(
            (t for t in self.pending if t.when <= self.now), key=lambda t: t.when
        )
        for task in due:
            self.tasks.remove(task)
            task.callback()


class MemoryStore:
    """In-memory KeyValueStore."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data = dict(data or {})
        self.writes = 0

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
        self.writes += 1


def make_pdf(pages: list[str]) -> bytes:
    """Build a PDF with one page per entry; empty strings make blank pages."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def make_workbook(sheets: dict[str, list[list]]) -> bytes:
    """Build an .xlsx with the given sheets, in order."""
    workbook = openpyxl.Workbook()
    for index, (name, rows) in enumerate(sheets.items()):
        sheet = workbook.active if index == 0 else workbook.create_sheet()
        sheet.title = name
        for row in rows:
            sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_questions() -> list:
    """Three questions, one of each type."""
    return [
        MultipleChoiceQuestion(
            id="q1",
            question="What is 2 + 2?",
            options=("3", "4", "5", "6"),
            correct_answer="4",
            explanation="Basic addition: 2 + 2 = 4",
        ),
        TrueFalseQuestion(
            id="q2",
            question="The sky is blue.",
            correct_answer="True",
            explanation="Rayleigh scattering makes the sky look blue.",
        ),
        ShortAnswerQuestion(
            id="q3",
            question="What is the capital of France?",
            correct_answer="Paris",
            explanation="Paris has been the capital of France since 987 AD.",
        ),
    ]


@pytest.fixture
def sample_quiz(sample_questions: list) -> Quiz:
    return Quiz(
        id="quiz-a",
        title="Test Quiz",
        source_file_name="notes.pdf",
        created_at=datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
        questions=tuple(sample_questions),
    )


@pytest.fixture
def other_quiz() -> Quiz:
    return Quiz(
        id="quiz-b",
        title="Other Quiz",
        source_file_name="sheet.xlsx",
        created_at=datetime(2024, 2, 1, 9, 30, 0, tzinfo=timezone.utc),
        questions=(
            ShortAnswerQuestion(
                id="b1",
                question="Chemical symbol for gold?",
                correct_answer="Au",
                explanation="From the Latin aurum.",
            ),
            TrueFalseQuestion(
                id="b2",
                question="Water boils at 50 degrees Celsius at sea level.",
                correct_answer="False",
                explanation="It boils at 100 degrees Celsius.",
            ),
        ),
    )


@pytest.fixture
def sample_generated_quiz() -> GeneratedQuiz:
    """A well-formed payload as the generation model would return it."""
    return GeneratedQuiz(
        title="Arithmetic and Geography",
        questions=[
            GeneratedQuestion(
                id="q1",
                type=QuestionType.MULTIPLE_CHOICE,
                question="What is 2 + 2?",
                options=["3", "4", "5", "6"],
                correct_answer="4",
                explanation="Basic addition.",
            ),
            GeneratedQuestion(
                id="q2",
                type=QuestionType.TRUE_FALSE,
                question="The sky is blue.",
                correct_answer="true",
                explanation="Rayleigh scattering.",
            ),
            GeneratedQuestion(
                id="q3",
                type=QuestionType.SHORT_ANSWER,
                question="What is the capital of France?",
                correct_answer="Paris",
                explanation="Since 987 AD.",
            ),
        ],
    )


@pytest.fixture
def pdf_factory() -> Callable[[list[str]], bytes]:
    return make_pdf


@pytest.fixture
def workbook_factory() -> Callable[[dict[str, list[list]]], bytes]:
    return make_workbook


@pytest.fixture
def pdf_bytes() -> bytes:
    return make_pdf(["Photosynthesis converts light", "Chlorophyll absorbs light"])


@pytest.fixture
def workbook_bytes() -> bytes:
    return make_workbook(
        {
            "Vocabulary": [["Term", "Definition"], ["Cell", "Basic unit of life"]],
            "Notes": [["Hidden", "Second sheet"]],
        }
    )
