"""
Paragraph-aware chunk splitter.

Splits oversized documents into token-bounded chunks along blank-line
paragraph boundaries. Most documents fit in one chunk and take the unsplit
fast path.

Dependencies: pagecraft.core.pipeline.token_estimator, pagecraft.models.document
System role: Chunking stage of the model task pipeline
"""

import logging
import re

from pagecraft.core.pipeline.token_estimator import DEFAULT_CHARS_PER_TOKEN, estimate_tokens
from pagecraft.models.document import Chunk

logger = logging.getLogger(__name__)

PARAGRAPH_SEPARATOR = "\n\n"
# One or more blank or whitespace-only lines; indentation of the next line is kept
PARAGRAPH_BOUNDARY = re.compile(r"\n(?:[ \t]*\n)+")


class ChunkSplitter:
    """
    Greedy paragraph accumulator with a hard character fallback.

    Attributes:
        max_tokens: Maximum estimated tokens per chunk
        chars_per_token: Estimator ratio
        hard_split_chars: Piece size for hard character splits
    """

    def __init__(
        self,
        max_tokens: int = 7000,
        chars_per_token: int = DEFAULT_CHARS_PER_TOKEN,
        hard_split_chars_per_token: float = 3.5,
    ) -> None:
        if max_tokens <= 0:
            raise ValueError("max_tokens must be positive")
        self.max_tokens = max_tokens
        self.chars_per_token = chars_per_token
        self.hard_split_chars = max(1, int(max_tokens * hard_split_chars_per_token))

    def _estimate(self, text: str) -> int:
        return estimate_tokens(text, self.chars_per_token)

    def split(self, text: str) -> list[str]:
        """
        Split text into ordered chunk strings.

        Args:
            text: Document text

        Returns:
            list[str]: Chunks in document order
        """
        if self._estimate(text) <= self.max_tokens:
            return [text]

        paragraphs = [p for p in PARAGRAPH_BOUNDARY.split(text) if p.strip()]

        chunks: list[str] = []
        current = ""

        for paragraph in paragraphs:
            if self._estimate(paragraph) > self.max_tokens:
                # Oversized paragraph: flush and hard split it on its own
                if current:
                    chunks.append(current)
                    current = ""
                chunks.extend(self._hard_split(paragraph))
                continue

            candidate = f"{current}{PARAGRAPH_SEPARATOR}{paragraph}" if current else paragraph
            if current and self._estimate(candidate) > self.max_tokens:
                chunks.append(current)
                current = paragraph
            else:
                current = candidate

        if current.strip():
            chunks.append(current)

        if not chunks:
            chunks = self._hard_split(text)

        logger.info(
            f"{__name__}:split - Content split into {len(chunks)} chunks",
            extra={"chunk_count": len(chunks), "content_length": len(text)},
        )
        return chunks

    def split_chunks(self, text: str) -> list[Chunk]:
        """Split text and tag each piece with its index and final flag."""
        pieces = self.split(text)
        last = len(pieces) - 1
        return [
            Chunk(index=i, text=piece, is_final=i == last)
            for i, piece in enumerate(pieces)
        ]

    def _hard_split(self, text: str) -> list[str]:
        size = self.hard_split_chars
        return [text[i:i + size] for i in range(0, len(text), size)]
