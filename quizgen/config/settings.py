"""quizgen configuration, read from the environment and an optional .env file."""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

from quizgen.models.quiz import Difficulty

# Pick up a local .env before pydantic reads the environment
load_dotenv()


class Settings(BaseSettings):
    """Credentials, model choice, content limits and library location."""

    # AWS CONFIG
    aws_access_key_id: str | None = Field(
        default=None,
        description="AWS access key ID",
        validation_alias="AWS_ACCESS_KEY_ID",
    )
    aws_secret_access_key: str | None = Field(
        default=None,
        description="AWS secret access key",
        validation_alias="AWS_SECRET_ACCESS_KEY",
    )
    aws_default_region: str = Field(
        default="us-east-1",
        description="AWS API region",
        validation_alias="AWS_DEFAULT_REGION",
    )

    # Model Configuration
    model_name: str = Field(
        default="anthropic.claude-3-7-sonnet-20250219-v1:0",
        description="Model to use (AWS Bedrock model ID)",
        validation_alias="MODEL_NAME",
    )

    generation_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Temperature for question generation",
        validation_alias="GENERATION_TEMPERATURE",
    )

    # Content Settings
    max_content_chars: int = Field(
        default=100_000,
        ge=1,
        description="Text sent to the generator is cut to this many characters",
        validation_alias="MAX_CONTENT_CHARS",
    )

    # Quiz Settings
    auto_advance_delay_ms: int = Field(
        default=700,
        ge=0,
        description="Delay before moving past an answered choice question",
        validation_alias="AUTO_ADVANCE_DELAY_MS",
    )

    default_question_count: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Default number of questions to generate",
        validation_alias="DEFAULT_QUESTION_COUNT",
    )

    default_difficulty: Difficulty = Field(
        default=Difficulty.MEDIUM,
        description="Default difficulty level",
        validation_alias="DEFAULT_DIFFICULTY",
    )

    # Library Settings
    library_path: Path = Field(
        default=Path.home() / ".quizgen" / "library.json",
        description="JSON file backing the quiz library",
        validation_alias="QUIZGEN_LIBRARY_PATH",
    )

    library_key: str = Field(
        default="quizgen_quizzes",
        description="Key the quiz list is stored under",
        validation_alias="QUIZGEN_LIBRARY_KEY",
    )

    log_level: str = Field(
        default="WARNING",
        description="Root log level",
        validation_alias="LOG_LEVEL",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "protected_namespaces": ("settings_",),
    }

    @property
    def has_aws_credentials(self) -> bool:
        return bool(self.aws_access_key_id and self.aws_secret_access_key)

    @property
    def auto_advance_delay(self) -> float:
        """Auto-advance delay in seconds."""
        return self.auto_advance_delay_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """Settings for this process; call cache_clear() to re-read the environment."""
    return Settings()
