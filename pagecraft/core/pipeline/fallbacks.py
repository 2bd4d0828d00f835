"""
Deterministic fallback results.

Used when the model service is not configured, and when every chunk of a run
failed and the pipeline is set to degrade rather than error. Each generator is
a pure function of its request: it never raises, never calls the network, and
always produces a result that validates against the task's schema. Every
fallback result says so in its suggestions via FALLBACK_NOTICE.

Dependencies: pagecraft.models
System role: Fallback Generators of the model task pipeline
"""

import re

from pagecraft.models.document import (
    ImageAttachment,
    RefinementRequest,
    StructureRequest,
    TypesettingRequest,
    WebsiteRequest,
)
from pagecraft.models.results import (
    RefinementResult,
    StructureResult,
    Styling,
    TypesettingResult,
    WebsiteResult,
)

FALLBACK_NOTICE = "AI model service unavailable - using fallback formatting (non-AI result)"

DEFAULT_FONT_FAMILY = "'Times New Roman', serif"
DEFAULT_FONT_SIZE = 12
DEFAULT_LINE_HEIGHT = 1.6
DEFAULT_PADDING = 20

TITLE_DECORATION = re.compile(r"[=#*\-]")

DOCUMENT_TYPE_CSS = {
    "academic": """
h1 { text-align: center; margin-bottom: 2em; }
p { text-indent: 1.5em; }
""",
    "business": """
h1, h2 { color: #2c3e50; }
p { margin-bottom: 1.2em; }
""",
    "calendar": """
h1 { text-align: center; color: #1e40af; margin-bottom: 1.5em; }
h2 { color: #374151; border-bottom: 2px solid #e5e7eb; padding-bottom: 0.5em; }
table { width: 100%; border-collapse: collapse; margin: 1em 0; }
th, td { border: 1px solid #d1d5db; padding: 0.5em; text-align: center; }
th { background-color: #f3f4f6; font-weight: bold; }
.date { font-weight: bold; }
.event { font-style: italic; color: #6b7280; }
""",
}

WEBSITE_CSS = """
* { margin: 0; padding: 0; box-sizing: border-box; }

body {
  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
  font-size: clamp(1rem, 0.95rem + 0.25vw, 1.125rem);
  line-height: 1.6;
  color: #333;
}

.container { max-width: 1200px; margin: 0 auto; padding: 0 2rem; }

.hero-section {
  background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
  color: white;
  padding: 4rem 0;
  text-align: center;
}

.hero-title { font-size: clamp(2rem, 1.5rem + 2.5vw, 3rem); font-weight: 700; margin-bottom: 1rem; }
.hero-subtitle { font-size: clamp(1rem, 0.9rem + 0.5vw, 1.25rem); opacity: 0.9; }

.main-content { padding: 4rem 0; }
.content-section { max-width: 800px; margin: 0 auto; }

.image-gallery {
  display: grid;
  grid-template-columns: repeat(auto-fit, minmax(300px, 1fr));
  gap: 2rem;
  margin: 3rem 0;
}

.gallery-image {
  width: 100%;
  height: auto;
  border-radius: 12px;
  box-shadow: 0 8px 24px rgba(0, 0, 0, 0.1);
}

h1, h2, h3 { margin-bottom: 1.5rem; color: #2c3e50; }

h2 {
  font-size: clamp(1.5rem, 1.25rem + 1vw, 2rem);
  border-bottom: 3px solid #667eea;
  padding-bottom: 0.5rem;
  margin-top: 3rem;
}

p { margin-bottom: 1.5rem; }

.site-footer { background: #2c3e50; color: white; padding: 2rem 0; text-align: center; }

@media (max-width: 768px) {
  .container { padding: 0 1rem; }
  .main-content { padding: 2.5rem 0; }
  .image-gallery { grid-template-columns: repeat(auto-fit, minmax(220px, 1fr)); gap: 1.25rem; }
}

@media (max-width: 480px) {
  .hero-section { padding: 2.5rem 0; }
  .image-gallery { grid-template-columns: 1fr; }
  .site-footer { padding: 1.5rem 0; }
}
"""


def paragraphs(content: str) -> list[str]:
    """Split text on blank lines, dropping whitespace-only paragraphs."""
    return [part.strip() for part in content.split("\n\n") if part.strip()]


def looks_like_heading(paragraph: str) -> bool:
    """Short, single-line text without terminal punctuation reads as a heading."""
    return len(paragraph) < 100 and not paragraph.endswith((".", "!", "?")) and "\n" not in paragraph


def basic_css(request: TypesettingRequest) -> str:
    """
    Static print stylesheet parameterised by the request's typography.

    Args:
        request: Typesetting request carrying optional styling preferences

    Returns:
        str: CSS text
    """
    styling = request.styling
    font_family = (styling and styling.font_family) or DEFAULT_FONT_FAMILY
    font_size = (styling and styling.font_size) or DEFAULT_FONT_SIZE
    line_height = (styling and styling.line_height) or DEFAULT_LINE_HEIGHT
    padding = styling.margins.top if styling and styling.margins else DEFAULT_PADDING

    return f"""
body {{
  font-family: {font_family};
  font-size: {font_size:g}px;
  line-height: {line_height:g};
  color: #333;
  max-width: 800px;
  margin: 0 auto;
  padding: {padding:g}px;
}}

h1, h2, h3, h4, h5, h6 {{ font-weight: bold; margin-top: 1.5em; margin-bottom: 0.5em; }}
h1 {{ font-size: 24px; }}
h2 {{ font-size: 20px; }}
h3 {{ font-size: 16px; }}

p {{ margin-bottom: 1em; text-align: justify; }}
"""


def fallback_typesetting(request: TypesettingRequest) -> TypesettingResult:
    """Wrap each paragraph in <p> and apply the basic stylesheet for the document type."""
    html = "\n".join(f"<p>{paragraph}</p>" for paragraph in paragraphs(request.content))
    css = basic_css(request) + DOCUMENT_TYPE_CSS.get(request.document_type, "")

    return TypesettingResult(
        formatted_content=html,
        styling=Styling(css=css, layout=f"Basic {request.document_type} layout with proper typography"),
        suggestions=[
            "Basic formatting applied",
            "Consider customizing fonts and spacing for better appearance",
            FALLBACK_NOTICE,
        ],
    )


def _image_block(images: list[ImageAttachment], screenshot: str | None) -> str:
    parts: list[str] = []
    if screenshot:
        parts.append(
            '<div class="webpage-screenshot">\n'
            f'  <img src="{screenshot}" alt="Screenshot of the webpage" '
            'style="max-width: 100%; height: auto; border: 1px solid #ddd; margin-bottom: 1em;" />\n'
            "</div>"
        )
    if images:
        tags = "\n".join(
            f'  <img src="{image.as_src()}" alt="{image.caption or "Content image"}" '
            'style="max-width: 100%; height: auto; margin: 0.5em 0;" />'
            for image in images
        )
        parts.append(f'<div class="content-images">\n{tags}\n</div>')
    return "\n".join(parts)


def structure_markup(content: str, images: list[ImageAttachment] | None = None, screenshot: str | None = None) -> str:
    """
    Heading/paragraph markup for raw text inside the generic document skeleton.

    Args:
        content: Raw text
        images: Images to list ahead of the text
        screenshot: Screenshot URL placed first

    Returns:
        str: <article> document
    """
    body = "\n".join(
        f"<h2>{paragraph}</h2>" if looks_like_heading(paragraph) else f"<p>{paragraph}</p>"
        for paragraph in paragraphs(content)
    )
    block = _image_block(images or [], screenshot)
    inner = f"{block}\n{body}" if block else body
    return (
        "<article>\n"
        "  <header>\n"
        "    <h1>Document</h1>\n"
        "  </header>\n"
        "  <main>\n"
        f"{inner}\n"
        "  </main>\n"
        "</article>"
    )


def fallback_structure(request: StructureRequest) -> StructureResult:
    return StructureResult(
        structured_content=structure_markup(request.content, request.images, request.screenshot),
        title="Document",
        summary="Basic structure derived from paragraph breaks",
        suggestions=[FALLBACK_NOTICE],
    )


def derive_title(content: str) -> str:
    """
    Title from the first non-blank line when it is short enough.

    Decoration characters (=, #, *, -) are removed. Defaults to "Document".
    """
    first_line = next((line for line in content.split("\n") if line.strip()), "")
    if 5 < len(first_line) < 100:
        title = TITLE_DECORATION.sub("", first_line).strip()
        if title:
            return title
    return "Document"


def fallback_website(request: WebsiteRequest) -> WebsiteResult:
    """
    Hero, content and footer skeleton with a responsive image gallery.

    Args:
        request: Website request

    Returns:
        WebsiteResult: Static site markup and stylesheet
    """
    title = derive_title(request.content)
    sections = "\n".join(
        f"<h2>{section}</h2>" if len(section) < 100 and not section.endswith(".") else f"<p>{section}</p>"
        for section in paragraphs(request.content)
    )

    gallery = ""
    if request.images:
        tags = "\n".join(
            f'<img src="{image.as_src()}" alt="{image.caption or f"Image {i}"}" class="gallery-image">'
            for i, image in enumerate(request.images, start=1)
        )
        gallery = f'<div class="image-gallery">\n{tags}\n</div>\n'

    html = f"""<div class="website-container">
  <header class="hero-section">
    <div class="container">
      <h1 class="hero-title">{title}</h1>
      <p class="hero-subtitle">Discover the content within</p>
    </div>
  </header>
  <main class="main-content">
    <div class="container">
{gallery}      <div class="content-section">
{sections}
      </div>
    </div>
  </main>
  <footer class="site-footer">
    <div class="container">
      <p>Crafted with care</p>
    </div>
  </footer>
</div>"""

    return WebsiteResult(
        html=html,
        css=WEBSITE_CSS,
        suggestions=[
            "Images are displayed in a responsive gallery layout",
            "Typography scales fluidly across screen sizes",
            FALLBACK_NOTICE,
        ],
    )


def fallback_refinement(request: RefinementRequest) -> RefinementResult:
    """Return the current content unchanged; feedback cannot be applied without the model."""
    return RefinementResult(
        refined_content=request.current_content,
        refined_css=request.current_css or "",
        changes=[],
        suggestions=[FALLBACK_NOTICE],
        explanation=f"Feedback was not applied because the model is unavailable: {request.user_feedback}",
    )
