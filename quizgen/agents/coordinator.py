"""Quiz Coordinator Agent - Assembles validated questions into a library quiz."""

import time
from datetime import datetime, timezone

from quizgen.models.quiz import Question, Quiz


def new_quiz_id() -> str:
    """Millisecond timestamp id, matching quizzes already in users' libraries."""
    return str(time.time_ns() // 1_000_000)


def assemble_quiz(
    title: str,
    questions: list[Question],
    source_file_name: str,
    created_at: datetime | None = None,
) -> Quiz:
    """
    Coordinator Agent: build the Quiz record that goes into the library.

    Args:
        title: Title chosen by the generator
        questions: Validated questions, in generated order
        source_file_name: Name of the uploaded file
        created_at: Creation time, now (UTC) if omitted

    Returns:
        New Quiz with no score yet
    """
    return Quiz(
        id=new_quiz_id(),
        title=title.strip() or source_file_name,
        source_file_name=source_file_name,
        created_at=created_at or datetime.now(timezone.utc),
        questions=tuple(questions),
    )
