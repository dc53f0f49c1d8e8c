"""Local persistence for the quiz library."""

from .library import LIBRARY_KEY, JsonFileStore, KeyValueStore, QuizLibrary

__all__ = ["LIBRARY_KEY", "JsonFileStore", "KeyValueStore", "QuizLibrary"]
