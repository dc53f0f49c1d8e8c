"""Upload-to-quiz pipeline built on LangGraph."""

from .state import QuizState, create_initial_state
from .workflow import compile_workflow, create_quiz_workflow, generate_quiz_from_file

__all__ = [
    "QuizState",
    "create_initial_state",
    "compile_workflow",
    "create_quiz_workflow",
    "generate_quiz_from_file",
]
