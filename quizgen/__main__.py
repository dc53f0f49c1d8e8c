"""Allow ``python -m quizgen``."""

from quizgen.cli.app import app

app(prog_name="quizgen")
