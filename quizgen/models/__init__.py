"""Data models for quiz generation and quiz taking."""

from .content import (
    ExtractedContent,
    ExtractedImage,
    ExtractedText,
    ImagePayload,
    NormalizedContent,
    SourceFile,
    TextPayload,
)
from .quiz import (
    TRUE_FALSE_CHOICES,
    Difficulty,
    GenerationConfig,
    # Structured output models
    GeneratedQuestion,
    GeneratedQuiz,
    MultipleChoiceQuestion,
    Question,
    QuestionType,
    Quiz,
    QuizAttempt,
    ShortAnswerQuestion,
    TrueFalseQuestion,
)

__all__ = [
    "Question",
    "QuestionType",
    "MultipleChoiceQuestion",
    "TrueFalseQuestion",
    "ShortAnswerQuestion",
    "TRUE_FALSE_CHOICES",
    "Quiz",
    "QuizAttempt",
    "Difficulty",
    "GenerationConfig",
    "GeneratedQuestion",
    "GeneratedQuiz",
    "SourceFile",
    "ExtractedContent",
    "ExtractedText",
    "ExtractedImage",
    "NormalizedContent",
    "TextPayload",
    "ImagePayload",
]
