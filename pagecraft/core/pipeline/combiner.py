"""
Result combination helpers.

Shared building blocks for merging per-chunk model results back into one
document: ordered concatenation, HTML wrapper stripping, suggestion
deduplication and the empty-input contract check.

Dependencies: html, re (stdlib), pagecraft.core.exceptions
System role: Result Combiner stage of the model task pipeline
"""

import html
import re
from collections.abc import Iterable, Sequence
from typing import TypeVar

from pagecraft.core.exceptions import NothingToCombineError

T = TypeVar("T")

CONTENT_SEPARATOR = "\n\n"

MAIN_BLOCK = re.compile(r"<main[^>]*>([\s\S]*?)</main>", re.IGNORECASE)
ARTICLE_TAG = re.compile(r"</?article[^>]*>", re.IGNORECASE)
HEADER_BLOCK = re.compile(r"<header[^>]*>[\s\S]*?</header>", re.IGNORECASE)
MAIN_TAG = re.compile(r"</?main[^>]*>", re.IGNORECASE)


def require_results(results: Sequence[T], task: str | None = None) -> Sequence[T]:
    """
    Reject an empty result list.

    Args:
        results: Per-chunk results that survived processing
        task: Task name for error context

    Returns:
        Sequence: The same results

    Raises:
        NothingToCombineError: If results is empty
    """
    if not results:
        raise NothingToCombineError(task=task)
    return results


def concatenate(parts: Iterable[str]) -> str:
    """Join content parts in chunk order with a blank line."""
    return CONTENT_SEPARATOR.join(parts)


def strip_document_wrappers(fragment: str) -> str:
    """
    Reduce an HTML fragment to its inner content.

    Prefers the content of a <main> element; otherwise drops <article> tags,
    whole <header> blocks and bare <main> tags.
    """
    main = MAIN_BLOCK.search(fragment)
    if main:
        return main.group(1).strip()
    stripped = ARTICLE_TAG.sub("", fragment)
    stripped = HEADER_BLOCK.sub("", stripped)
    stripped = MAIN_TAG.sub("", stripped)
    return stripped.strip()


def wrap_document(inner: str, title: str = "Document") -> str:
    """Wrap inner HTML in a single article/header/main skeleton with an escaped title."""
    return (
        "<article>\n"
        "  <header>\n"
        f"    <h1>{html.escape(title, quote=False)}</h1>\n"
        "  </header>\n"
        "  <main>\n"
        f"{inner}\n"
        "  </main>\n"
        "</article>"
    )


def merge_unique(groups: Iterable[Iterable[str]]) -> list[str]:
    """Flatten string lists, dropping exact duplicates and keeping first-seen order."""
    return list(dict.fromkeys(item for group in groups for item in group))


def chunk_note(chunk_count: int) -> str:
    return f"Content was processed in {chunk_count} chunks due to size"


def merge_suggestions(groups: Iterable[Iterable[str]], chunk_count: int) -> list[str]:
    """
    Deduplicate suggestions across chunks and note the chunk count.

    Args:
        groups: Suggestion lists in chunk order
        chunk_count: Number of chunk results being combined

    Returns:
        list[str]: Unique suggestions followed by the chunk note
    """
    merged = merge_unique(groups)
    note = chunk_note(chunk_count)
    if note not in merged:
        merged.append(note)
    return merged


def annotate_layout(layout: str, chunk_count: int) -> str:
    return f"{layout} (processed in {chunk_count} chunks)"
