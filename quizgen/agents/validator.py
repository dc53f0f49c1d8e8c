"""Question Validator Agent - Checks generated questions before they are stored."""

from quizgen.errors import GenerationError
from quizgen.models.quiz import (
    TRUE_FALSE_CHOICES,
    GeneratedQuestion,
    GeneratedQuiz,
    MultipleChoiceQuestion,
    Question,
    QuestionType,
    ShortAnswerQuestion,
    TrueFalseQuestion,
)


def find_question_issues(question: GeneratedQuestion) -> list[str]:
    """
    List what is wrong with one generated question.

    Args:
        question: Question as returned by the model

    Returns:
        Human-readable issues, empty when the question is usable
    """
    issues = []
    if not question.question.strip():
        issues.append("question text is empty")
    if not question.correct_answer.strip():
        issues.append("correct answer is empty")

    if question.type is QuestionType.MULTIPLE_CHOICE:
        if not question.options:
            issues.append("multiple choice question has no options")
        elif question.correct_answer not in question.options:
            issues.append("options do not contain the correct answer")
    elif question.type is QuestionType.TRUE_FALSE:
        if question.correct_answer.strip().capitalize() not in TRUE_FALSE_CHOICES:
            issues.append("true/false answer is neither True nor False")

    return issues


def to_question(question: GeneratedQuestion) -> Question:
    """Convert a checked generated question into its question variant."""
    common = {
        "id": question.id,
        "question": question.question,
        "explanation": question.explanation,
    }
    if question.type is QuestionType.MULTIPLE_CHOICE:
        return MultipleChoiceQuestion(
            options=tuple(question.options),
            correct_answer=question.correct_answer,
            **common,
        )
    if question.type is QuestionType.TRUE_FALSE:
        return TrueFalseQuestion(
            correct_answer=question.correct_answer.strip().capitalize(), **common
        )
    if question.type is QuestionType.SHORT_ANSWER:
        return ShortAnswerQuestion(correct_answer=question.correct_answer, **common)
    raise GenerationError(f"Unknown question type: {question.type}")


def validate_generated_quiz(generated: GeneratedQuiz) -> list[Question]:
    """
    Validator Agent: reject malformed generations at ingestion.

    Checks:
    - At least one question was returned
    - Question ids are unique
    - Multiple choice options contain the correct answer verbatim
    - True/false answers are True or False

    Args:
        generated: Raw output of the generator

    Returns:
        Questions converted to their typed variants

    Raises:
        GenerationError: Describing every problem found
    """
    if not generated.questions:
        raise GenerationError("The model returned no questions.")

    problems = []
    seen_ids: set[str] = set()
    for index, question in enumerate(generated.questions):
        if question.id in seen_ids:
            problems.append(f"Question {index + 1} ({question.id}): duplicate id")
        seen_ids.add(question.id)
        for issue in find_question_issues(question):
            problems.append(f"Question {index + 1} ({question.id}): {issue}")

    if problems:
        raise GenerationError(
            "The model returned invalid questions:\n" + "\n".join(problems)
        )

    return [to_question(q) for q in generated.questions]
