"""AI agents for quiz generation."""

from .coordinator import assemble_quiz
from .generator import generate_quiz
from .validator import validate_generated_quiz

__all__ = [
    "generate_quiz",
    "validate_generated_quiz",
    "assemble_quiz",
]
