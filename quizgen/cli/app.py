"""Typer CLI application for generating and taking quizzes."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Prompt
from rich.table import Table

from quizgen.config.settings import Settings, get_settings
from quizgen.errors import QuizGenError
from quizgen.extract import detect_format, read_source_file
from quizgen.graph.workflow import generate_quiz_from_file
from quizgen.models.quiz import Difficulty, GenerationConfig, Question, Quiz
from quizgen.session import QuizSession, is_correct, percentage, shuffled_quiz
from quizgen.storage import JsonFileStore, QuizLibrary
from quizgen.utils.logging_config import configure_logging

app = typer.Typer(
    name="quizgen",
    help="Turn PDFs, spreadsheets and images into quizzes, then take them",
    add_completion=False,
)

console = Console()

NAVIGATION_HELP = (
    "[dim]Commands: [bold]:n[/bold] next  [bold]:p[/bold] previous  "
    "[bold]:c[/bold] check answer  [bold]:q[/bold] quit  "
    "(an empty answer moves on)[/dim]"
)


def open_library(settings: Settings) -> QuizLibrary:
    """Load the quiz library configured in settings."""
    library = QuizLibrary(JsonFileStore(settings.library_path), key=settings.library_key)
    library.load()
    return library


def fail(message: str) -> None:
    """Print an error and exit with code 1."""
    console.print(f"[red]Error:[/red] {message}", style="bold")
    raise typer.Exit(code=1)


def find_quiz(library: QuizLibrary, quiz_id: str) -> Quiz:
    quiz = library.get(quiz_id)
    if quiz is None:
        fail(f"No quiz with id {quiz_id}. Run 'quizgen list' to see your quizzes.")
    return quiz


@app.command()
def generate(
    file: Path = typer.Argument(
        ...,
        help="PDF, Excel or image file to build the quiz from",
    ),
    questions: Optional[int] = typer.Option(
        None,
        "--questions",
        "-q",
        help="Number of questions to generate",
        min=1,
        max=50,
    ),
    difficulty: Optional[Difficulty] = typer.Option(
        None,
        "--difficulty",
        "-d",
        help="Overall difficulty level",
        case_sensitive=False,
    ),
    media_type: Optional[str] = typer.Option(
        None,
        "--media-type",
        help="MIME type of the file, guessed from the extension if omitted",
    ),
    take_now: bool = typer.Option(
        False,
        "--take/--no-take",
        help="Start the quiz as soon as it is generated",
    ),
) -> None:
    """
    Generate a quiz from a document or image.

    Example:
        quizgen generate notes.pdf -q 10 -d hard --take
    """
    settings = get_settings()

    # Reject bad uploads before reading anything
    try:
        detect_format(file.name, media_type)
    except QuizGenError as e:
        fail(e.message)

    if not settings.has_aws_credentials:
        console.print(
            "[red]Error:[/red] AWS credentials are not set.",
            style="bold",
        )
        console.print(
            "\nPlease set your credentials:\n"
            "  export AWS_ACCESS_KEY_ID='...'\n"
            "  export AWS_SECRET_ACCESS_KEY='...'"
        )
        raise typer.Exit(code=1)

    config = GenerationConfig(
        question_count=questions or settings.default_question_count,
        difficulty=difficulty or settings.default_difficulty,
    )
    display_config(file, config)

    library = open_library(settings)

    try:
        source = read_source_file(file, media_type)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("[cyan]Reading file and writing questions...", total=None)
            quiz = generate_quiz_from_file(
                source, config, max_content_chars=settings.max_content_chars
            )
            progress.update(task, description="[green]Quiz generation complete!")
    except QuizGenError as e:
        fail(e.message)

    library.add(quiz)
    display_quiz_summary(quiz)

    if take_now:
        run_session(quiz, library, settings)


@app.command("list")
def list_quizzes() -> None:
    """List the quizzes in your library, newest first."""
    library = open_library(get_settings())

    if not library.quizzes:
        console.print("[yellow]Your library is empty.[/yellow] Generate a quiz to get started.")
        return

    table = Table(title="Quiz Library", border_style="cyan")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="white")
    table.add_column("Source", style="white")
    table.add_column("Questions", justify="right")
    table.add_column("Last Score", justify="right")

    for quiz in library.quizzes:
        table.add_row(
            quiz.id,
            quiz.title,
            quiz.source_file_name,
            str(quiz.total_questions),
            format_last_score(quiz),
        )

    console.print(table)


@app.command()
def show(quiz_id: str = typer.Argument(..., help="ID of the quiz")) -> None:
    """Preview a quiz without starting it."""
    quiz = find_quiz(open_library(get_settings()), quiz_id)
    display_quiz_summary(quiz)


@app.command()
def take(
    quiz_id: str = typer.Argument(..., help="ID of the quiz"),
    shuffle: bool = typer.Option(
        False,
        "--shuffle/--in-order",
        help="Randomize the question order for this attempt",
    ),
) -> None:
    """Take a quiz from your library."""
    settings = get_settings()
    library = open_library(settings)
    quiz = find_quiz(library, quiz_id)

    if shuffle:
        quiz = shuffled_quiz(quiz)

    run_session(quiz, library, settings)


@app.command()
def delete(
    quiz_id: str = typer.Argument(..., help="ID of the quiz"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Remove a quiz from your library."""
    library = open_library(get_settings())
    quiz = find_quiz(library, quiz_id)

    if not yes and not typer.confirm(f"Delete '{quiz.title}'?"):
        raise typer.Abort()

    library.delete(quiz_id)
    console.print(f"[green]✓[/green] Deleted '{quiz.title}'")


@app.command()
def info() -> None:
    """Display information about quizgen."""
    settings = get_settings()
    info_text = f"""
[bold cyan]quizgen[/bold cyan]
Version: 0.1.0

[bold]Pipeline:[/bold]
  • Extractor - Reads PDF text, the first Excel sheet, or images
  • Normalizer - Reduces content to text or an inline image
  • Generator - Writes questions with an AWS Bedrock model
  • Validator - Rejects malformed questions
  • Coordinator - Stores the quiz in your library

[bold]Supported files:[/bold] .pdf .xlsx .xls .png .jpg .jpeg .webp .heic

[bold]Model:[/bold] {settings.model_name}
[bold]Library:[/bold] {settings.library_path}
    """
    console.print(Panel(info_text, title="Quiz Info", border_style="cyan"))


def display_config(file: Path, config: GenerationConfig) -> None:
    """Display the generation settings before starting."""
    table = Table(title="Quiz Configuration", show_header=False, border_style="cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("File", file.name)
    table.add_row("Questions", str(config.question_count))
    table.add_row("Difficulty", config.difficulty.value)

    console.print()
    console.print(table)


def format_last_score(quiz: Quiz) -> str:
    if quiz.score is None or not quiz.total_questions:
        return "-"
    return f"{percentage(quiz.score, quiz.total_questions)}%"


def display_quiz_summary(quiz: Quiz) -> None:
    """Display a summary of a quiz."""
    table = Table(title="Quiz Summary", border_style="green")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("ID", quiz.id)
    table.add_row("Title", quiz.title)
    table.add_row("Source", quiz.source_file_name)
    table.add_row("Created", quiz.created_at.astimezone().strftime("%Y-%m-%d %H:%M"))
    table.add_row("Total Questions", str(quiz.total_questions))
    if quiz.score is not None:
        table.add_row("Last Score", f"{quiz.score}/{quiz.total_questions}")

    console.print()
    console.print(table)


def resolve_answer(question: Question, raw: str) -> str | None:
    """
    Map typed input to an answer.

    Choice questions accept the option number or the option text; True/False
    also accepts t/f. Returns None when the input matches no choice.
    """
    choices = question.choices
    if choices is None:
        return raw

    text = raw.strip()
    if text.isdigit() and 1 <= int(text) <= len(choices):
        return choices[int(text) - 1]
    for choice in choices:
        if choice.casefold() == text.casefold():
            return choice
    if len(text) == 1:
        initials = [c for c in choices if c[:1].casefold() == text.casefold()]
        if len(initials) == 1:
            return initials[0]
    return None


def render_question(session: QuizSession) -> None:
    question = session.current_question
    current = session.current_answer
    lines = [f"[bold]{question.question}[/bold]", ""]

    if question.choices is not None:
        for number, choice in enumerate(question.choices, start=1):
            marker = "[green]●[/green]" if choice == current else "○"
            lines.append(f"  {marker} {number}. {choice}")
    elif current is not None:
        lines.append(f"  Your answer: [cyan]{current}[/cyan]")

    if session.show_feedback:
        lines.append("")
        if is_correct(question, current):
            lines.append("[green]Correct![/green]")
        else:
            lines.append(f"[red]Not quite.[/red] Correct answer: {question.correct_answer}")
            if question.explanation:
                lines.append(f"[dim]{question.explanation}[/dim]")

    title = (
        f"{session.quiz.title} - Question {session.current_question_index + 1} "
        f"of {session.total_questions} ({question.type.replace('_', ' ').title()})"
    )
    console.print()
    console.print(Panel("\n".join(lines), title=title, border_style="cyan"))


def render_results(session: QuizSession) -> None:
    console.print()
    console.print(
        Panel(
            f"[bold]{session.quiz.title}[/bold]\n\n"
            f"You scored {session.score} out of {session.total_questions} "
            f"([bold]{session.percentage}%[/bold])",
            title="Quiz Completed!",
            border_style="green",
        )
    )

    table = Table(title="Review Answers", border_style="cyan", show_lines=True)
    table.add_column("#", justify="right")
    table.add_column("Question", style="white")
    table.add_column("Your Answer")
    table.add_column("Correct Answer", style="white")
    table.add_column("Explanation", style="dim")

    for number, item in enumerate(session.review(), start=1):
        style = "green" if item.is_correct else "red"
        table.add_row(
            str(number),
            item.question.question,
            f"[{style}]{item.user_answer}[/{style}]",
            item.correct_answer,
            item.explanation or "",
        )

    console.print(table)


async def play_session(session: QuizSession) -> None:
    """Prompt through a session until it finishes or the user quits."""
    console.print(NAVIGATION_HELP)

    while session.is_active:
        render_question(session)
        raw = await asyncio.to_thread(
            Prompt.ask, "Answer", console=console, default="", show_default=False
        )
        command = raw.strip().lower()

        if command in (":q", ":quit"):
            session.exit()
            console.print("[yellow]Quiz abandoned.[/yellow]")
            return
        if command in (":p", ":prev"):
            if not session.go_previous():
                console.print("[yellow]Already at the first question.[/yellow]")
            continue
        if command in (":c", ":check"):
            if not session.reveal_feedback():
                console.print("[yellow]Answer the question first.[/yellow]")
            continue
        if command in ("", ":n", ":next"):
            if not session.go_next():
                console.print("[yellow]Answer the question before moving on.[/yellow]")
            continue

        if session.show_feedback:
            console.print("[yellow]Answer locked; move on with :n.[/yellow]")
            continue

        answer = resolve_answer(session.current_question, raw)
        if answer is None:
            console.print("[yellow]Pick one of the listed options.[/yellow]")
            continue
        session.submit_answer(session.current_question.id, answer)

        # Let a scheduled auto-advance fire before prompting again
        while session.has_pending_advance:
            await asyncio.sleep(0.05)


def run_session(quiz: Quiz, library: QuizLibrary, settings: Settings) -> None:
    """Take a quiz interactively and store the score when it finishes."""
    if not quiz.questions:
        fail("This quiz has no questions.")

    async def _run() -> QuizSession:
        session = QuizSession(
            quiz,
            on_complete=library.on_session_complete,
            auto_advance_delay=settings.auto_advance_delay,
        )
        try:
            await play_session(session)
        finally:
            session.exit()
        return session

    session = asyncio.run(_run())
    if session.is_finished:
        render_results(session)


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    quizgen - Turn documents into quizzes and take them.
    """
    configure_logging("DEBUG" if verbose else get_settings().log_level)


if __name__ == "__main__":
    app()
