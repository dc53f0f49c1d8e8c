"""State passed between the nodes of the generation workflow."""

from typing import Optional, TypedDict, Union

from quizgen.models.content import (
    ExtractedImage,
    ExtractedText,
    ImagePayload,
    SourceFile,
    TextPayload,
)
from quizgen.models.quiz import GeneratedQuiz, GenerationConfig, Question, Quiz


class QuizState(TypedDict):
    """Everything known about one upload on its way to becoming a quiz."""

    source: SourceFile
    config: GenerationConfig
    max_content_chars: int
    extracted: Optional[Union[ExtractedText, ExtractedImage]]
    normalized: Optional[Union[TextPayload, ImagePayload]]
    generated: Optional[GeneratedQuiz]
    questions: list[Question]
    final_quiz: Optional[Quiz]


def create_initial_state(
    source: SourceFile,
    config: GenerationConfig,
    max_content_chars: int = 100_000,
) -> QuizState:
    """
    Create the initial state for one generation run.

    Args:
        source: The uploaded file
        config: Question count and difficulty
        max_content_chars: Cap on the text sent to the generator

    Returns:
        State with only the inputs filled in
    """
    return {
        "source": source,
        "config": config,
        "max_content_chars": max_content_chars,
        "extracted": None,
        "normalized": None,
        "generated": None,
        "questions": [],
        "final_quiz": None,
    }
