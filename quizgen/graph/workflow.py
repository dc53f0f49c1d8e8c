"""LangGraph workflow definition for turning an upload into a quiz."""

import logging
from typing import Any, Callable

from langgraph.graph import END, StateGraph

from quizgen.agents.coordinator import assemble_quiz
from quizgen.agents.generator import generate_quiz
from quizgen.agents.validator import validate_generated_quiz
from quizgen.extract import extract_content, normalize_content
from quizgen.graph.state import QuizState, create_initial_state
from quizgen.models.content import NormalizedContent, SourceFile
from quizgen.models.quiz import GeneratedQuiz, GenerationConfig, Quiz

logger = logging.getLogger(__name__)

Generator = Callable[[NormalizedContent, GenerationConfig], GeneratedQuiz]


def extract_step(state: QuizState) -> dict[str, Any]:
    """Decode the upload into text or an image."""
    return {"extracted": extract_content(state["source"])}


def normalize_step(state: QuizState) -> dict[str, Any]:
    """Re-tag the content and cap its length."""
    return {
        "normalized": normalize_content(
            state["extracted"], max_chars=state["max_content_chars"]
        )
    }


def validate_step(state: QuizState) -> dict[str, Any]:
    """Reject malformed generations and type the questions."""
    return {"questions": validate_generated_quiz(state["generated"])}


def assemble_step(state: QuizState) -> dict[str, Any]:
    """Build the library quiz."""
    quiz = assemble_quiz(
        title=state["generated"].title,
        questions=state["questions"],
        source_file_name=state["source"].filename,
    )
    return {"final_quiz": quiz}


def create_quiz_workflow(generator: Generator = generate_quiz) -> StateGraph:
    """
    Create the LangGraph workflow for quiz generation.

    The workflow follows this structure:
    1. Extract - Decode the PDF, spreadsheet or image
    2. Normalize - Reduce to text or inline image, truncating text
    3. Generate - One call to the generation model
    4. Validate - Check the generated questions
    5. Assemble - Build the final quiz

    Any step that raises ends the run; the error reaches the caller unchanged.

    Args:
        generator: Callable producing a GeneratedQuiz from content and config

    Returns:
        Uncompiled StateGraph
    """
    def generate_step(state: QuizState) -> dict[str, Any]:
        """Ask the generator for questions."""
        return {"generated": generator(state["normalized"], state["config"])}

    workflow = StateGraph(QuizState)

    workflow.add_node("extractor", extract_step)
    workflow.add_node("normalizer", normalize_step)
    workflow.add_node("generator", generate_step)
    workflow.add_node("validator", validate_step)
    workflow.add_node("coordinator", assemble_step)

    workflow.set_entry_point("extractor")
    workflow.add_edge("extractor", "normalizer")
    workflow.add_edge("normalizer", "generator")
    workflow.add_edge("generator", "validator")
    workflow.add_edge("validator", "coordinator")
    workflow.add_edge("coordinator", END)

    return workflow


def compile_workflow(generator: Generator = generate_quiz):
    """
    Compile the workflow and return it ready for execution.

    Returns:
        Compiled workflow
    """
    return create_quiz_workflow(generator).compile()


def generate_quiz_from_file(
    source: SourceFile,
    config: GenerationConfig,
    max_content_chars: int = 100_000,
    generator: Generator = generate_quiz,
) -> Quiz:
    """
    Run the whole pipeline for one upload.

    Exactly one outcome per call: the new quiz, or the first error raised.

    Args:
        source: The uploaded file
        config: Question count and difficulty
        max_content_chars: Cap on the text sent to the generator
        generator: Generation callable, the Bedrock generator by default

    Returns:
        The assembled Quiz
    """
    workflow = compile_workflow(generator)
    state = create_initial_state(source, config, max_content_chars)
    logger.debug("Starting generation for %s", source.filename)
    final_state = workflow.invoke(state)
    return final_state["final_quiz"]
