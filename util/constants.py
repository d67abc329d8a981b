# util/constants.py
from typing import Final


class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    DETECT = V1 + "/detect"
    PROCESS_DOCUMENT = V1 + "/process-document"
    ADAPT = V1 + "/adapt"
    SEED = V1 + "/seed"


# Retrieval
KEYWORD_MIN_LENGTH: Final[int] = 4
KEYWORD_LIMIT: Final[int] = 5
KEYWORD_RESULTS_PER_TERM: Final[int] = 3
SAMPLE_LIMIT: Final[int] = 5

# Local pattern verification
CONTEXT_RADIUS: Final[int] = 30
EVIDENCE_EXCERPT_CHARS: Final[int] = 150
PARAGRAPH_MIN_CHARS: Final[int] = 15
PARAGRAPH_WORD_MIN_CHARS: Final[int] = 4
PARAGRAPH_SUPPORT_RATIO: Final[float] = 0.7

# Ingestion
CONTENT_HASH_PREFIX_CHARS: Final[int] = 2000

# Fixed display scores for model-assigned labels.
RISK_SCORES: Final[dict[str, int]] = {"high": 85, "medium": 50, "low": 20}

STOP_WORDS: Final[frozenset[str]] = frozenset(
    {
        "a", "about", "all", "an", "and", "are", "as", "at", "be", "been", "but",
        "by", "can", "for", "from", "has", "have", "in", "into", "is", "it",
        "its", "of", "on", "or", "our", "so", "that", "the", "their", "this",
        "to", "us", "was", "we", "were", "what", "which", "will", "with", "you",
        "your",
    }
)
