"""
Model task result schemas.

Each schema doubles as the JSON contract sent to the model and the shape
returned to API callers. Wire keys are camelCase; legacy key spellings the
model sometimes produces are accepted on input.

Dependencies: pydantic
System role: Result schemas for the model tasks
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Styling(BaseModel):
    """CSS and a short layout description for a typeset document."""

    model_config = ConfigDict(populate_by_name=True)

    css: str = Field(default="", description="Complete CSS styles for the document")
    layout: str = Field(default="", description="Layout description and recommendations")


class TypesettingResult(BaseModel):
    """
    Typeset document.

    Attributes:
        formatted_content: Improved HTML content with semantic markup
        styling: CSS and layout notes
        suggestions: Improvement suggestions
    """

    model_config = ConfigDict(populate_by_name=True)

    formatted_content: str = Field(
        validation_alias=AliasChoices("formattedContent", "content", "formatted_content"),
        serialization_alias="formattedContent",
        description="Improved HTML content with semantic markup",
    )
    styling: Styling = Field(default_factory=Styling)
    suggestions: list[str] = Field(default_factory=list, description="List of improvement suggestions")


class StructureResult(BaseModel):
    """
    Semantically structured HTML document.

    Attributes:
        structured_content: Well-structured HTML content
        title: Extracted or generated title
        summary: Brief summary of the content structure
        suggestions: Improvement suggestions
    """

    model_config = ConfigDict(populate_by_name=True)

    structured_content: str = Field(
        validation_alias=AliasChoices("structuredContent", "html", "content", "structured_content"),
        serialization_alias="structuredContent",
        description="Well-structured HTML content with semantic markup",
    )
    title: str = Field(default="", description="Extracted or generated title for the content")
    summary: str = Field(default="", description="Brief summary of the content structure")
    suggestions: list[str] = Field(default_factory=list)


class WebsiteResult(BaseModel):
    """Generated website markup and stylesheet."""

    model_config = ConfigDict(populate_by_name=True)

    html: str = Field(description="Complete HTML structure with content-specific design")
    css: str = Field(default="", description="Comprehensive CSS with theme-appropriate styling")
    suggestions: list[str] = Field(default_factory=list)


class RefinementResult(BaseModel):
    """
    Content revised according to user feedback.

    Attributes:
        refined_content: Updated HTML content
        refined_css: Updated CSS, empty when unchanged
        changes: Changes that were applied
        suggestions: Further improvement suggestions
        explanation: Short explanation of the revision
    """

    model_config = ConfigDict(populate_by_name=True)

    refined_content: str = Field(
        validation_alias=AliasChoices("refinedContent", "content", "refined_content"),
        serialization_alias="refinedContent",
        description="Updated HTML content with the feedback applied",
    )
    refined_css: str = Field(
        default="",
        validation_alias=AliasChoices("refinedCSS", "refinedCss", "css", "refined_css"),
        serialization_alias="refinedCSS",
    )
    changes: list[str] = Field(default_factory=list, description="Changes that were applied")
    suggestions: list[str] = Field(default_factory=list)
    explanation: str = Field(default="")
