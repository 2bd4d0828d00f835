"""
Content structure prompts.

Dependencies: langchain_core.prompts
System role: Prompt templates for the content structure task
"""

from langchain_core.prompts import ChatPromptTemplate

from pagecraft.models.document import ImageAttachment

SYSTEM_PROMPT = """You are a content structure expert. Analyze unstructured content and create well-organized, hierarchical HTML structure with proper headings, sections, and semantic markup.
{continuation}

When including images:
- Use the exact image URLs provided
- Place images contextually where they make sense in the content
- Include proper alt attributes for accessibility
- Use responsive image styling"""

USER_PROMPT = """Please structure this content with proper HTML semantics{continuation_suffix}:

{content}{image_context}"""

STRUCTURE_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", USER_PROMPT),
])


def image_context(images: list[ImageAttachment], screenshot: str | None) -> str:
    text = ""
    if images:
        listed = "\n".join(
            f"{i}. {image.as_src()} (Alt: {image.caption or 'No description'})"
            for i, image in enumerate(images, start=1)
            if image.src
        )
        if listed:
            text += (
                f"\n\nImages found in the content:\n{listed}\n"
                "\nPlease include these images in appropriate places within the structured content "
                "using <img> tags with the original URLs."
            )
    if screenshot:
        text += (
            "\n\nA screenshot of the webpage is available. Include it at the beginning of the content "
            "as a representative image of the webpage."
        )
    return text
