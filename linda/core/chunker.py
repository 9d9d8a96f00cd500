"""Message chunking for chat platform length limits."""

from __future__ import annotations

import re

_PARAGRAPH_RE = re.compile(r"\n{2,}")
_SENTENCE_RE = re.compile(r"(?<=[.!?])\s+")


def chunk_message(text: str, limit: int = 4096) -> list[str]:
    """Split text into chunks no longer than ``limit``.

    Prefers paragraph boundaries, then sentence boundaries, then words. A
    single word longer than the limit is hard-cut.
    """
    if len(text) <= limit:
        return [text]

    paragraphs: list[str] = []
    for paragraph in _PARAGRAPH_RE.split(text):
        if not paragraph.strip():
            continue
        if len(paragraph) <= limit:
            paragraphs.append(paragraph)
            continue
        pieces = [
            piece
            for sentence in _SENTENCE_RE.split(paragraph)
            for piece in (
                [sentence] if len(sentence) <= limit else _split_by_words(sentence, limit)
            )
        ]
        # Pieces of one paragraph rejoin with a space, paragraphs with a blank line
        paragraphs.extend(_recombine(pieces, limit, " "))

    return _recombine(paragraphs, limit, "\n\n")


def _split_by_words(text: str, limit: int) -> list[str]:
    """Last-resort split by word boundaries."""
    chunks: list[str] = []
    current = ""
    for word in text.split():
        while len(word) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(word[:limit])
            word = word[limit:]
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= limit:
            current = candidate
        else:
            chunks.append(current)
            current = word
    if current:
        chunks.append(current)
    return chunks


def _recombine(parts: list[str], limit: int, separator: str) -> list[str]:
    """Greedily pack parts back together within the limit."""
    chunks: list[str] = []
    current = ""
    for part in parts:
        candidate = f"{current}{separator}{part}" if current else part
        if len(candidate) <= limit:
            current = candidate
        else:
            if current:
                chunks.append(current)
            current = part
    if current:
        chunks.append(current)
    return chunks
