"""Pydantic models for quiz data structures."""

import uuid
from abc import abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel


class QuestionType(str, Enum):
    """Question formats a quiz can mix."""

    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TRUE_FALSE = "TRUE_FALSE"
    SHORT_ANSWER = "SHORT_ANSWER"


class Difficulty(str, Enum):
    """Difficulty requested from the generator."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


TRUE_FALSE_CHOICES = ("True", "False")


class _BaseQuestion(BaseModel):
    """Fields shared by every question variant."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str = Field(..., min_length=1, description="Unique within its quiz")
    question: str = Field(..., min_length=1, description="The prompt text")
    correct_answer: str = Field(..., description="Authoritative answer key")
    explanation: str = Field(default="", description="Shown when answered wrong")

    @property
    @abstractmethod
    def choices(self) -> tuple[str, ...] | None:
        """Selectable answers, or None when the answer is typed."""

    @property
    def auto_advances(self) -> bool:
        """Whether answering moves the session on by itself."""
        return self.choices is not None


class MultipleChoiceQuestion(_BaseQuestion):
    """A question answered by picking one of several options."""

    type: Literal["MULTIPLE_CHOICE"] = "MULTIPLE_CHOICE"
    options: tuple[str, ...] = Field(..., min_length=1)

    @property
    def choices(self) -> tuple[str, ...]:
        return self.options


class TrueFalseQuestion(_BaseQuestion):
    """A statement judged True or False."""

    type: Literal["TRUE_FALSE"] = "TRUE_FALSE"

    @property
    def choices(self) -> tuple[str, ...]:
        return TRUE_FALSE_CHOICES


class ShortAnswerQuestion(_BaseQuestion):
    """A question answered with free text."""

    type: Literal["SHORT_ANSWER"] = "SHORT_ANSWER"

    @property
    def choices(self) -> None:
        return None


Question = Annotated[
    Union[MultipleChoiceQuestion, TrueFalseQuestion, ShortAnswerQuestion],
    Field(discriminator="type"),
]


class Quiz(BaseModel):
    """A generated quiz as kept in the library."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str = Field(..., min_length=1, description="Quiz title")
    source_file_name: str = Field(..., description="Name of the uploaded file")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    questions: tuple[Question, ...] = Field(default_factory=tuple)
    score: int | None = Field(
        None,
        ge=0,
        description="Score of the most recent completed attempt",
    )

    @field_validator("created_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        """Store creation times in UTC; naive values are taken as local time."""
        return v.astimezone(timezone.utc)

    @computed_field
    @property
    def total_questions(self) -> int:
        """Number of questions in the quiz."""
        return len(self.questions)

    def get_question(self, question_id: str) -> Question | None:
        """Look up a question by id."""
        return next((q for q in self.questions if q.id == question_id), None)


class QuizAttempt(BaseModel):
    """Outcome of one finished session."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    answers: dict[str, str] = Field(default_factory=dict)
    is_submitted: bool = True
    score: int = Field(..., ge=0)


class GenerationConfig(BaseModel):
    """User choices for a generation request."""

    question_count: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Number of questions to generate",
    )
    difficulty: Difficulty = Field(
        default=Difficulty.MEDIUM,
        description="Overall difficulty level",
    )


# Structured output models for LLM responses


class GeneratedQuestion(BaseModel):
    """A question exactly as the model returns it, before validation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Unique identifier like q1, q2")
    type: QuestionType
    question: str
    options: list[str] = Field(
        default_factory=list,
        description="Array of 4 options. Required for MULTIPLE_CHOICE, empty for others.",
    )
    correct_answer: str = Field(..., description="The exact correct answer string.")
    explanation: str = Field(default="", description="Why this answer is correct.")

    @field_validator("options", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        """Treat a null options array as empty."""
        return [] if v is None else v


class GeneratedQuiz(BaseModel):
    """Quiz payload from the generation service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(
        ..., description="A creative title for the quiz based on the topic."
    )
    questions: list[GeneratedQuestion] = Field(
        ...,
        description="List of generated questions",
    )
