"""Quiz library persisted as a JSON array in a key-value store."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import TypeAdapter, ValidationError

from quizgen.models.quiz import Quiz, QuizAttempt

logger = logging.getLogger(__name__)

LIBRARY_KEY = "quizgen_quizzes"

_raw_list = TypeAdapter(list[Any])


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class JsonFileStore:
    """
    String key-value store kept in a single JSON object on disk.

    Example:
        >>> store = JsonFileStore(Path("library.json"))
        >>> store.set("quizgen_quizzes", "[]")
        >>> store.get("quizgen_quizzes")
        '[]'
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Could not read store file %s", self.path)
            return {}
        if not isinstance(data, dict):
            logger.error("Store file %s does not hold a JSON object", self.path)
            return {}
        return data

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        tmp_path.replace(self.path)


class QuizLibrary:
    """
    The user's quizzes, newest first.

    Call load() once at startup; every change is saved straight back to the
    store.
    """

    def __init__(self, store: KeyValueStore, key: str = LIBRARY_KEY):
        self.store = store
        self.key = key
        self._quizzes: list[Quiz] = []
        self._unreadable: list[Any] = []

    @property
    def quizzes(self) -> list[Quiz]:
        return list(self._quizzes)

    def __len__(self) -> int:
        return len(self._quizzes)

    def load(self) -> list[Quiz]:
        """
        Read the library from the store.

        Data that is not a JSON array gives an empty library. Entries that
        fail validation are logged and skipped, but kept in the store on the
        next save so they are never overwritten.
        """
        self._quizzes = []
        self._unreadable = []
        raw = self.store.get(self.key)
        if raw is None:
            return self.quizzes
        try:
            entries = _raw_list.validate_json(raw)
        except ValidationError:
            logger.exception("Failed to load quizzes")
            return self.quizzes

        for index, entry in enumerate(entries):
            try:
                self._quizzes.append(Quiz.model_validate(entry))
            except ValidationError as e:
                logger.warning(
                    "Skipping unreadable quiz at position %d: %s",
                    index,
                    e.errors()[0]["msg"],
                )
                self._unreadable.append(entry)
        logger.debug("Loaded %d quizzes", len(self._quizzes))
        return self.quizzes

    def save(self) -> None:
        entries = [q.model_dump(mode="json", by_alias=True) for q in self._quizzes]
        self.store.set(
            self.key, _raw_list.dump_json(entries + self._unreadable).decode("utf-8")
        )

    def get(self, quiz_id: str) -> Quiz | None:
        return next((q for q in self._quizzes if q.id == quiz_id), None)

    def add(self, quiz: Quiz) -> None:
        self._quizzes.insert(0, quiz)
        self.save()

    def delete(self, quiz_id: str) -> bool:
        remaining = [q for q in self._quizzes if q.id != quiz_id]
        if len(remaining) == len(self._quizzes):
            return False
        self._quizzes = remaining
        self.save()
        return True

    def record_attempt(self, quiz_id: str, attempt: QuizAttempt) -> Quiz | None:
        """Store an attempt's score on the quiz; the latest attempt wins."""
        for index, quiz in enumerate(self._quizzes):
            if quiz.id == quiz_id:
                updated = quiz.model_copy(update={"score": attempt.score})
                self._quizzes[index] = updated
                self.save()
                return updated
        logger.warning("Attempt for unknown quiz %s was not recorded", quiz_id)
        return None

    def on_session_complete(self, quiz: Quiz, attempt: QuizAttempt) -> None:
        """Completion handler for QuizSession."""
        self.record_attempt(quiz.id, attempt)
