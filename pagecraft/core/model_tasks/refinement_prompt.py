"""
Refinement prompts.

Dependencies: langchain_core.prompts
System role: Prompt templates for the refinement task
"""

from langchain_core.prompts import ChatPromptTemplate

SYSTEM_PROMPT = """You are an expert editor for {target_description}. Apply the user's feedback to the provided HTML and CSS precisely, changing only what the feedback asks for and preserving everything else, including images, links and semantic structure.
{continuation}

Return the complete revised HTML in refinedContent. Return the complete revised CSS in refinedCSS, or an empty string if the CSS needs no change. List each change you made in changes and explain the revision briefly in explanation."""

USER_PROMPT = """USER FEEDBACK:
{user_feedback}

CURRENT HTML:
{content}
{css_block}"""

REFINEMENT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", USER_PROMPT),
])

TARGET_DESCRIPTIONS = {
    "pdf": "print-ready documents that will be rendered to PDF",
    "website": "responsive websites",
}


def css_block(css: str | None) -> str:
    if not css or not css.strip():
        return ""
    return f"\nCURRENT CSS:\n{css}"
