"""
Typesetting prompts.

System and user templates for turning webpage content into a print-ready
document, with document-type-specific guidance.

Dependencies: langchain_core.prompts
System role: Prompt templates for the typesetting task
"""

from langchain_core.prompts import ChatPromptTemplate

from pagecraft.models.document import ImageAttachment

SYSTEM_PROMPT = """You are an expert typesetter and document designer. Analyze content and provide optimal formatting, layout suggestions, and CSS styling for professional documents. Focus on readability, visual hierarchy, and print-friendly layouts.
{continuation}"""

USER_PROMPT = """Improve the formatting of this {document_type} content for {output_format}:

{content}
{type_instructions}
{image_instructions}

Please provide:
1. Enhanced HTML with proper semantic structure and embedded images
2. Professional CSS styling for {document_type} documents with image support
3. Brief suggestions for improvement

Focus on readability and professional appearance. Keep CSS concise and avoid complex rules. For images, use URLs directly; the PDF renderer resolves them server-side."""

TYPESETTING_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", USER_PROMPT),
])

DOCUMENT_TYPE_INSTRUCTIONS = {
    "calendar": """
For calendar documents, focus on:
- Clear date formatting with proper visual hierarchy
- Table layouts for calendar grids when appropriate
- Consistent spacing and alignment for events
- Color coding or visual distinction for different event types
- Professional typography suitable for scheduling content
- Easy-to-scan layout with clear date headers""",
    "academic": """
For academic documents, focus on:
- Formal typography with proper citation styling
- Clear section hierarchies
- Professional margins and spacing
- Scientific notation and formula formatting when present""",
    "business": """
For business documents, focus on:
- Corporate-style formatting
- Professional color scheme
- Clear headings and bullet points
- Executive summary styling when present""",
}


def image_instructions(images: list[ImageAttachment], screenshot: str | None) -> str:
    """List images and the screenshot the document should embed."""
    text = ""
    if images:
        listed = "\n".join(
            f"{i}. {image.src or '[inline image]'} ({image.caption or 'No description'})"
            for i, image in enumerate(images, start=1)
        )
        text += (
            f"\nImages to include in the document:\n{listed}\n"
            "\nInstructions for images:\n"
            "- Include images with proper styling and captions\n"
            "- Ensure images are responsive and print-friendly\n"
            "- Position images contextually within the content"
        )
    if screenshot:
        text += (
            "\n\nA webpage screenshot is available. "
            "Include it prominently as a visual representation of the source page."
        )
    return text
