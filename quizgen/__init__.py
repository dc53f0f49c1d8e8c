"""quizgen - turn documents into quizzes and take them."""

__version__ = "0.1.0"
