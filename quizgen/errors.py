"""Error taxonomy for the upload-to-quiz pipeline."""


class QuizGenError(Exception):
    """Base class for errors surfaced to the user as a single message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedTypeError(QuizGenError):
    """The upload is neither an allowed media type nor an allowed extension."""


class CorruptFileError(QuizGenError):
    """The file could not be decoded by its format's reader."""


class EmptyContentError(QuizGenError):
    """The file decoded cleanly but holds no usable content."""


class GenerationError(QuizGenError):
    """The question generation service failed or returned unusable data."""


class FileReadError(QuizGenError, IOError):
    """The raw bytes of the upload could not be read."""
