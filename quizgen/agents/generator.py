"""Quiz Generator Agent - Writes quiz questions from document content using AI."""

import logging

from langchain_aws import ChatBedrock
from langchain_core.messages import HumanMessage, SystemMessage

from quizgen.config.settings import Settings, get_settings
from quizgen.errors import GenerationError
from quizgen.models.content import ImagePayload, NormalizedContent, TextPayload
from quizgen.models.quiz import GeneratedQuiz, GenerationConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert educational content creator and quiz master.
Analyze the provided document or image content and generate a quiz.

If the content is an image, perform OCR and visual analysis to extract relevant educational information before creating the quiz."""


def build_instructions(config: GenerationConfig) -> str:
    """Requirements block sent ahead of the content."""
    return f"""Requirements:
1. Generate exactly {config.question_count} questions.
2. Difficulty level: {config.difficulty.value}.
3. Mix of Question Types: MULTIPLE_CHOICE, TRUE_FALSE, SHORT_ANSWER.
4. For MULTIPLE_CHOICE, provide 4 options; correctAnswer must be one of them, written exactly.
5. For TRUE_FALSE, correctAnswer is "True" or "False" and options is empty.
6. Give every question a unique id like q1, q2.
7. Provide a short, concise explanation for the correct answer.
8. Generate a catchy title for this quiz based on the content."""


def build_messages(content: NormalizedContent, config: GenerationConfig) -> list:
    """
    Build the chat messages for one generation request.

    Args:
        content: Normalized text or image content
        config: Question count and difficulty

    Returns:
        System and human messages for the model
    """
    instructions = build_instructions(config)

    if isinstance(content, TextPayload):
        human = HumanMessage(
            content=f"{instructions}\n\nDocument Content:\n{content.text}"
        )
    elif isinstance(content, ImagePayload):
        human = HumanMessage(
            content=[
                {"type": "text", "text": instructions},
                {
                    "type": "image_url",
                    "image_url": {
                        "url": f"data:{content.mime_type};base64,{content.data}"
                    },
                },
            ]
        )
    else:
        raise TypeError(f"Unknown content payload: {type(content).__name__}")

    return [SystemMessage(content=SYSTEM_PROMPT), human]


def create_llm(settings: Settings) -> ChatBedrock:
    """Create the Bedrock chat model from settings."""
    if not settings.has_aws_credentials:
        raise GenerationError(
            "AWS credentials are missing. Set AWS_ACCESS_KEY_ID and "
            "AWS_SECRET_ACCESS_KEY in your environment or .env file."
        )
    return ChatBedrock(
        model=settings.model_name,
        temperature=settings.generation_temperature,
        region_name=settings.aws_default_region,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
    )


def generate_quiz(
    content: NormalizedContent,
    config: GenerationConfig,
    settings: Settings | None = None,
) -> GeneratedQuiz:
    """
    Generator Agent: ask the model for a titled quiz about the content.

    One attempt, no retries. Whatever goes wrong surfaces as a single
    GenerationError carrying the upstream message.

    Args:
        content: Normalized text or image content
        config: Question count and difficulty
        settings: Settings to use, the cached settings if omitted

    Returns:
        The raw generated quiz, not yet validated
    """
    settings = settings or get_settings()
    llm = create_llm(settings)

    # Use structured output to automatically generate and validate the schema
    llm_with_structure = llm.with_structured_output(GeneratedQuiz)
    messages = build_messages(content, config)

    try:
        generated = llm_with_structure.invoke(messages)
    except Exception as e:
        logger.error("Quiz generation failed: %s", e)
        raise GenerationError(str(e) or "Failed to generate valid quiz data.") from e

    if generated is None:
        raise GenerationError("No response received from the model.")

    logger.info(
        "Generated %d questions titled %r", len(generated.questions), generated.title
    )
    return generated
