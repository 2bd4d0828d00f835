"""
Website generation prompts.

Dependencies: langchain_core.prompts
System role: Prompt templates for the website generation task
"""

import json
from typing import Any

from langchain_core.prompts import ChatPromptTemplate

SYSTEM_PROMPT = """You are an expert web designer and content analyst. Your task is to analyze the provided content and create a beautiful, unique website that reflects the actual content, theme, and purpose of the document.
{continuation}

IMPORTANT INSTRUCTIONS:
1. Analyze the content to understand its theme, purpose, and key elements
2. Extract meaningful titles, headings, and structure from the actual content
3. Create a website design that matches the content's tone and purpose
4. DO NOT use generic titles like "Generated Website" or "Generated from PDF"
5. Use actual content to create meaningful headers, navigation, and sections
6. Design should be modern, responsive, and creative
7. Color scheme and styling should match the content's theme and purpose

OUTPUT REQUIREMENTS:
- Include complete HTML structure with semantic markup
- Include comprehensive CSS with modern design
- Create content-specific navigation and sections
- Use actual content themes for design decisions"""

USER_PROMPT = """Analyze this content and create a unique, creative website that reflects its actual theme and purpose:

CONTENT TO ANALYZE:
{content}

WEBSITE TYPE: {website_type}

REQUIREMENTS:
1. Extract the main theme/topic from the content
2. Create appropriate titles and headers based on actual content
3. Design a color scheme that matches the content's theme
4. Structure the website logically based on the content hierarchy
5. Make it modern, responsive, and visually appealing
6. Include navigation that makes sense for this specific content
{styling_preferences}{special_requirements}
{image_note}"""

WEBSITE_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", USER_PROMPT),
])


def image_note(image_count: int) -> str:
    """Tell the model how to reference the supplied images."""
    if not image_count:
        return "No images available"
    placeholders = ", ".join(f"[IMAGE_{i}]" for i in range(1, image_count + 1))
    return (
        f"IMAGES AVAILABLE: {image_count} images that should be incorporated into the design. "
        f"Reference them with the placeholders {placeholders} where each image should appear."
    )


def styling_preferences(styling: dict[str, Any]) -> str:
    if not styling:
        return ""
    return f"\nSTYLING PREFERENCES: {json.dumps(styling)}"


def special_requirements(requirements: str | None) -> str:
    if not requirements or not requirements.strip():
        return ""
    return f"\nSPECIAL REQUIREMENTS: {requirements.strip()}"
