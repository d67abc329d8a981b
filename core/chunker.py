# core/chunker.py
import re
from typing import Iterator, List, Tuple

_CRLF_RE = re.compile(r"\r\n?")
_TRAILING_WS_RE = re.compile(r"[ \t]+\n")
_BLANK_LINES_RE = re.compile(r"\n{3,}")
_SPACES_RE = re.compile(r" {2,}")
_SENTENCE_END_RE = re.compile(r"[.!?](?=\s)")

PARAGRAPH_SEP = "\n\n"


def normalize(text: str) -> str:
    """
    Whitespace normalization applied before chunking:
    line endings -> LF, trailing blanks dropped, 3+ newlines -> 2, 2+ spaces -> 1.
    """
    text = _CRLF_RE.sub("\n", text or "")
    text = _TRAILING_WS_RE.sub("\n", text)
    text = _BLANK_LINES_RE.sub(PARAGRAPH_SEP, text)
    text = _SPACES_RE.sub(" ", text)
    return text.strip()


def _sentence_spans(paragraph: str) -> List[Tuple[int, int]]:
    """
    (start, end) spans of sentences; the whitespace between two spans is the
    separator and belongs to neither.
    """
    spans: List[Tuple[int, int]] = []
    start = 0
    for m in _SENTENCE_END_RE.finditer(paragraph):
        end = m.end()
        spans.append((start, end))
        start = end
        while start < len(paragraph) and paragraph[start].isspace():
            start += 1
    if start < len(paragraph):
        spans.append((start, len(paragraph)))
    return spans


def _split_sentences(paragraph: str, target_size: int) -> Iterator[str]:
    buf_start: int | None = None
    buf_end = 0
    for start, end in _sentence_spans(paragraph):
        if buf_start is not None and end - buf_start > target_size:
            yield paragraph[buf_start:buf_end]
            buf_start = start
        elif buf_start is None:
            buf_start = start
        buf_end = end
    if buf_start is not None:
        yield paragraph[buf_start:buf_end]


def _group_paragraphs(paragraphs: List[str], target_size: int) -> Iterator[str]:
    buf: List[str] = []
    size = 0
    for p in paragraphs:
        added = len(p) + (len(PARAGRAPH_SEP) if buf else 0)
        if buf and size + added > target_size:
            yield PARAGRAPH_SEP.join(buf)
            buf, size = [p], len(p)
        else:
            buf.append(p)
            size += added
    if buf:
        yield PARAGRAPH_SEP.join(buf)


def chunk_text(text: str, target_size: int) -> Iterator[str]:
    """
    Yield paragraph-coherent chunks of at most `target_size` characters.

    Paragraphs are packed greedily; a chunk that is still too long (one long
    paragraph) is re-packed at sentence boundaries. Chunks are exact slices of
    the normalized text in document order, so nothing is lost or repeated. A
    single sentence longer than `target_size` is yielded whole.
    """
    if target_size <= 0:
        raise ValueError("target_size must be positive")
    normalized = normalize(text)
    if not normalized:
        return
    for chunk in _group_paragraphs(normalized.split(PARAGRAPH_SEP), target_size):
        if len(chunk) <= target_size:
            yield chunk
        else:
            yield from _split_sentences(chunk, target_size)
