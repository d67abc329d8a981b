# core/pattern_verifier.py
import re
import string
from dataclasses import dataclass
from typing import Final, List, Optional, Sequence, Tuple
from model.corpus import Chunk
from model.verdict import FlaggedPhrase, SupportedClaim, Verdict
from util.constants import (
    CONTEXT_RADIUS,
    EVIDENCE_EXCERPT_CHARS,
    PARAGRAPH_MIN_CHARS,
    PARAGRAPH_SUPPORT_RATIO,
    PARAGRAPH_WORD_MIN_CHARS,
)
from util.enums import AnalysisMethod, RiskLevel
from util.functions import clip_chars, lower_same_length

# Order matters: earlier terms claim their context windows first.
GREEN_TERMS: Final[Tuple[str, ...]] = (
    "eco-friendly",
    "environmentally friendly",
    "earth-friendly",
    "planet-friendly",
    "carbon neutral",
    "carbon-neutral",
    "net-zero",
    "net zero",
    "climate positive",
    "low carbon",
    "zero waste",
    "plastic-free",
    "plant-based",
    "biodegradable",
    "compostable",
    "recyclable",
    "recycled",
    "renewable",
    "sustainable",
    "sustainably",
    "organic",
    "natural",
    "non-toxic",
    "toxin-free",
    "chemical-free",
    "eco-safe",
    "low-impact",
    "responsibly sourced",
    "ethically sourced",
    "green",
    "clean",
    "pure",
)

UNVALIDATED_JUSTIFICATION: Final[str] = (
    "claim could not be validated against the reference corpus"
)
UNVALIDATED_SUGGESTION: Final[str] = "provide specific evidence or metrics"

_PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")
_WORD_STRIP = string.punctuation + "“”‘’…"


@dataclass(frozen=True)
class _Match:
    term: str
    start: int
    end: int


def _trim(text: str, start: int, end: int) -> Tuple[int, int]:
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return start, end


def _paragraph_bounds(text: str) -> List[Tuple[int, int]]:
    spans: List[Tuple[int, int]] = []
    pos = 0
    for m in _PARAGRAPH_BREAK_RE.finditer(text):
        spans.append(_trim(text, pos, m.start()))
        pos = m.end()
    spans.append(_trim(text, pos, len(text)))
    return spans


def _paragraph_spans(text: str) -> List[Tuple[int, int]]:
    return [(s, e) for s, e in _paragraph_bounds(text) if e - s > PARAGRAPH_MIN_CHARS]


def _words(paragraph: str) -> List[str]:
    out: List[str] = []
    for raw in paragraph.split():
        word = raw.strip(_WORD_STRIP).lower()
        if len(word) > PARAGRAPH_WORD_MIN_CHARS:
            out.append(word)
    return out


class LocalPatternVerifier:
    """
    Deterministic, dependency-free verifier used when the remote model is
    unavailable.

    Every dictionary term occurrence becomes a candidate phrase: the match plus
    up to CONTEXT_RADIUS characters on each side, clipped to its paragraph and
    to the neighbouring matches. Candidates that are substrings of an accepted
    phrase (or contain one) are dropped, so the recorded phrase set is
    overlap-free. A candidate is supported when some context chunk mentions the
    term; otherwise it is flagged. Paragraphs mostly covered by the context
    vocabulary are added as supported claims.
    """

    method = AnalysisMethod.LOCAL_PATTERN

    def __init__(self, terms: Sequence[str] = GREEN_TERMS) -> None:
        self._terms = tuple(t.lower() for t in terms if t.strip())

    def is_available(self) -> bool:
        return True

    async def verify(self, text: str, context: Sequence[Chunk]) -> Verdict:
        return self.local_verify(text, context)

    def _matches(self, lower: str) -> List[_Match]:
        out: List[_Match] = []
        for term in self._terms:
            pos = 0
            while True:
                idx = lower.find(term, pos)
                if idx < 0:
                    break
                out.append(_Match(term, idx, idx + len(term)))
                pos = idx + len(term)
        return out

    @staticmethod
    def _window(
        text: str,
        match: _Match,
        matches: Sequence[_Match],
        paragraphs: Sequence[Tuple[int, int]],
    ) -> Tuple[int, int]:
        left, right = 0, len(text)
        for p_start, p_end in paragraphs:
            if p_start <= match.start < p_end:
                left, right = p_start, p_end
                break
        for other in matches:
            if other.end <= match.start:
                left = max(left, other.end)
            elif other.start >= match.end:
                right = min(right, other.start)
        start = max(match.start - CONTEXT_RADIUS, left)
        end = min(match.end + CONTEXT_RADIUS, right)
        return _trim(text, start, end)

    @staticmethod
    def _overlaps(candidate: str, accepted: Sequence[str]) -> bool:
        return any(candidate in p or p in candidate for p in accepted)

    @staticmethod
    def _evidence_for_term(term: str, context: Sequence[Chunk]) -> Optional[str]:
        for chunk in context:
            if term in chunk.content.lower():
                return clip_chars(chunk.content, EVIDENCE_EXCERPT_CHARS)
        return None

    @staticmethod
    def _paragraph_evidence(
        words: Sequence[str], context: Sequence[Chunk]
    ) -> Optional[str]:
        combined = "\n".join(c.content.lower() for c in context)
        matched = [w for w in words if w in combined]
        if not words or len(matched) / len(words) < PARAGRAPH_SUPPORT_RATIO:
            return None
        best: Optional[Chunk] = None
        best_hits = 0
        for chunk in context:
            lowered = chunk.content.lower()
            hits = sum(1 for w in matched if w in lowered)
            if hits > best_hits:
                best, best_hits = chunk, hits
        if best is None:
            best = context[0]
        return clip_chars(best.content, EVIDENCE_EXCERPT_CHARS)

    def local_verify(self, text: str, context: Sequence[Chunk]) -> Verdict:
        lower = lower_same_length(text)
        matches = self._matches(lower)
        paragraphs = _paragraph_bounds(text)

        accepted: List[str] = []
        spans: List[Tuple[int, int]] = []
        flagged: List[FlaggedPhrase] = []
        supported: List[SupportedClaim] = []

        for match in matches:
            start, end = self._window(text, match, matches, paragraphs)
            phrase = text[start:end]
            if not phrase or self._overlaps(phrase, accepted):
                continue
            accepted.append(phrase)
            spans.append((start, end))

            evidence = self._evidence_for_term(match.term, context)
            if evidence is not None:
                supported.append(
                    SupportedClaim(phrase=phrase, supporting_evidence=evidence)
                )
            else:
                flagged.append(
                    FlaggedPhrase(
                        phrase=phrase,
                        risk_level=RiskLevel.medium,
                        justification=UNVALIDATED_JUSTIFICATION,
                        suggestion=UNVALIDATED_SUGGESTION,
                    )
                )

        if context:
            for p_start, p_end in _paragraph_spans(text):
                if any(s < p_end and p_start < e for s, e in spans):
                    continue
                paragraph = text[p_start:p_end]
                if self._overlaps(paragraph, accepted):
                    continue
                evidence = self._paragraph_evidence(_words(paragraph), context)
                if evidence is None:
                    continue
                accepted.append(paragraph)
                spans.append((p_start, p_end))
                supported.append(
                    SupportedClaim(phrase=paragraph, supporting_evidence=evidence)
                )

        label = _label_for(len(flagged))
        references = list(dict.fromkeys(c.supporting_evidence for c in supported))
        return Verdict(
            label=label,
            justification=(
                f"Local pattern analysis: {len(flagged)} environmental claim(s) "
                f"not found in the reference corpus, {len(supported)} supported."
            ),
            flagged_phrases=flagged,
            supported_claims=supported,
            pg_references=references,
        )


def _label_for(flagged_count: int) -> RiskLevel:
    if flagged_count > 3:
        return RiskLevel.high
    if flagged_count > 0:
        return RiskLevel.medium
    return RiskLevel.low
