# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class LlmProvider(str, Enum):
    OPENAI = "openai"  # OpenAI-compatible chat completions (Groq, OpenAI, ...)
    ANTHROPIC = "anthropic"


class RiskLevel(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class AnalysisMethod(str, Enum):
    RAG_LLM = "rag_llm"
    LOCAL_PATTERN = "local_pattern"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    EMPTY_TEXT = ErrorInfo("Text is required", status.HTTP_400_BAD_REQUEST)
    EMPTY_CONTENT = ErrorInfo(
        "Document content is required", status.HTTP_400_BAD_REQUEST
    )
    INVALID_REQUEST = ErrorInfo("Invalid request", status.HTTP_400_BAD_REQUEST)
    INGESTION_FAILED = ErrorInfo(
        "Failed to process reference document",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    INTERNAL_ERROR = ErrorInfo("Internal Error", status.HTTP_502_BAD_GATEWAY)
