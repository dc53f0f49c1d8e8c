"""Models for uploaded files and the content extracted from them."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class SourceFile(BaseModel):
    """An uploaded file: its name, declared media type and raw bytes."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., min_length=1)
    media_type: str = Field(
        default="",
        description="Declared MIME type, empty when the uploader gave none",
    )
    data: bytes | None = Field(
        default=None,
        repr=False,
        description="Raw file contents, None when they could not be read",
    )


class ExtractedText(BaseModel):
    """Text pulled out of a document."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    content: str


class ExtractedImage(BaseModel):
    """An image carried through as base64 for the generator to read."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["image"] = "image"
    mime_type: str
    base64_data: str = Field(..., repr=False)


ExtractedContent = Annotated[
    Union[ExtractedText, ExtractedImage], Field(discriminator="kind")
]


class TextPayload(BaseModel):
    """Normalized text content handed to the generator."""

    model_config = ConfigDict(frozen=True)

    tag: Literal["text"] = "text"
    text: str


class ImagePayload(BaseModel):
    """Normalized inline image handed to the generator."""

    model_config = ConfigDict(frozen=True)

    tag: Literal["image"] = "image"
    mime_type: str
    data: str = Field(..., repr=False)


NormalizedContent = Annotated[
    Union[TextPayload, ImagePayload], Field(discriminator="tag")
]
