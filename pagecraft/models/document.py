"""
Document request models.

Defines the payloads submitted for transformation and the chunk slices the
pipeline cuts them into.

Dependencies: pydantic
System role: Request-scoped document schemas
"""

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


DocumentType = Literal["article", "academic", "business", "newsletter", "report", "calendar"]
OutputFormat = Literal["pdf", "html"]
RefinementTarget = Literal["pdf", "website"]


class CamelModel(BaseModel):
    """Base model accepting camelCase keys on the wire and snake_case in code."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _require_text(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must be a non-empty string")
    return value


class ImageAttachment(CamelModel):
    """
    Image embedded in a document.

    Either a remote URL or inline base64 data with its mime type.

    Attributes:
        src: Remote image URL
        data: Base64 image payload
        mime_type: Mime type of the base64 payload
        caption: Alt text or description
    """

    src: str | None = None
    data: str | None = None
    mime_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("mimeType", "mime_type", "type"),
        serialization_alias="mimeType",
    )
    caption: str | None = Field(
        default=None,
        validation_alias=AliasChoices("caption", "alt", "description"),
        serialization_alias="caption",
    )

    @model_validator(mode="after")
    def check_source(self) -> "ImageAttachment":
        if not self.src and not self.data:
            raise ValueError("image requires either src or data")
        if self.data and not self.mime_type:
            self.mime_type = "image/png"
        return self

    def as_src(self) -> str:
        """Return a value usable as an <img> src attribute."""
        if self.data:
            return f"data:{self.mime_type};base64,{self.data}"
        return self.src or ""


class Margins(CamelModel):
    top: float = 20
    right: float = 20
    bottom: float = 20
    left: float = 20


class StylingPreferences(CamelModel):
    """Typography preferences declared by the caller."""

    font_size: float | None = None
    font_family: str | None = None
    line_height: float | None = None
    margins: Margins | None = None


class TypesettingRequest(CamelModel):
    """Webpage content to typeset into a print-ready document."""

    content: str
    document_type: DocumentType = "article"
    output_format: OutputFormat = "pdf"
    images: list[ImageAttachment] = Field(default_factory=list)
    screenshot: str | None = None
    styling: StylingPreferences | None = None

    @field_validator("content")
    @classmethod
    def check_content(cls, value: str) -> str:
        return _require_text(value)


class StructureRequest(CamelModel):
    """Unstructured content to organise into semantic HTML."""

    content: str
    document_type: DocumentType | None = None
    images: list[ImageAttachment] = Field(default_factory=list)
    screenshot: str | None = None

    @field_validator("content")
    @classmethod
    def check_content(cls, value: str) -> str:
        return _require_text(value)


class WebsiteRequest(CamelModel):
    """Extracted document content to turn into a website."""

    content: str
    website_type: str = "landing"
    images: list[ImageAttachment] = Field(default_factory=list)
    styling: dict[str, Any] = Field(default_factory=dict)
    special_requirements: str | None = None

    @field_validator("content")
    @classmethod
    def check_content(cls, value: str) -> str:
        return _require_text(value)


class RefinementRequest(CamelModel):
    """Generated output plus user feedback to apply to it."""

    current_content: str
    current_css: str | None = Field(default=None, alias="currentCSS")
    user_feedback: str
    content_type: RefinementTarget

    @field_validator("current_content", "user_feedback")
    @classmethod
    def check_text(cls, value: str) -> str:
        return _require_text(value)


class Chunk(BaseModel):
    """
    Token-bounded slice of a document's text.

    Attributes:
        index: Zero-based position in the document
        text: Chunk text
        is_final: Whether this is the last chunk of the document
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    text: str
    is_final: bool
