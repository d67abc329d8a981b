# core/entities.py
from dataclasses import dataclass
from util.enums import LlmProvider


@dataclass(frozen=True)
class LlmConfig:
    """
    Remote-LLM settings injected into verifiers at construction time.
    An empty `api_key` means the remote path is unavailable.
    """

    provider: LlmProvider
    api_url: str
    model: str
    api_key: str | None = None
    anthropic_version: str = "2023-06-01"
    timeout_seconds: float = 30.0
    temperature: float = 0.1
    max_tokens: int = 1500

    @property
    def configured(self) -> bool:
        return bool((self.api_key or "").strip())


@dataclass
class IngestResult:
    document_id: str
    chunks_created: int
    content_length: int
    chunks_total: int = 0
