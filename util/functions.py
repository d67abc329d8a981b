# util/functions.py
import hashlib
import re
from typing import List
from util.constants import (
    CONTENT_HASH_PREFIX_CHARS,
    KEYWORD_LIMIT,
    KEYWORD_MIN_LENGTH,
    STOP_WORDS,
)

_TOKEN_RE = re.compile(r"[a-z0-9]+(?:[-'][a-z0-9]+)*")


def clip_chars(text: str, max_chars: int = 150) -> str:
    """
    - Trim 'text' to at most `max_chars` characters.
    - No ellipsis; excerpts are shown verbatim.
    """
    return text if len(text) <= max_chars else text[:max_chars]


def content_fingerprint(content: str) -> str:
    # Change-detection aid only; two documents may share a fingerprint.
    prefix = content[:CONTENT_HASH_PREFIX_CHARS].encode("utf-8")
    return hashlib.sha256(prefix).hexdigest()[:16]


def tokenize(text: str) -> List[str]:
    """Lowercased word tokens, hyphenated words kept whole, stop words removed."""
    return [t for t in _TOKEN_RE.findall(text.lower()) if t not in STOP_WORDS]


def extract_keywords(query: str, limit: int = KEYWORD_LIMIT) -> List[str]:
    """
    - Tokens of length >= KEYWORD_MIN_LENGTH, lowercased.
    - Order of first appearance, no frequency ranking.
    """
    out: List[str] = []
    for token in query.lower().split():
        word = token.strip(".,;:!?\"'()[]{}")
        if len(word) < KEYWORD_MIN_LENGTH or word in out:
            continue
        out.append(word)
        if len(out) >= limit:
            break
    return out


def strip_code_fences(raw: str) -> str:
    raw = (raw or "").strip()
    if raw.startswith("```"):
        raw = raw.strip("`").strip()
        if raw.lower().startswith("json"):
            raw = raw[4:].strip()
    return raw


def lower_same_length(text: str) -> str:
    # str.lower() can grow some characters ("İ" -> "i̇"); keep offsets aligned with `text`
    return "".join(ch.lower() if len(ch.lower()) == 1 else ch for ch in text)


def locate_exact(text: str, phrase: str) -> str | None:
    """
    Return the slice of `text` matching `phrase` case-insensitively, or None.
    """
    phrase = (phrase or "").strip()
    if not phrase:
        return None
    idx = lower_same_length(text).find(lower_same_length(phrase))
    if idx < 0:
        return None
    return text[idx : idx + len(phrase)]
