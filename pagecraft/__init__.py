"""
pagecraft backend.

Chunked language-model pipeline behind the typesetting, content structure,
website generation and refinement APIs.
"""
