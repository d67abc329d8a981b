"""
Shared fixtures and in-memory doubles for the test suite.

Settings are read from the environment at import time, so the defaults below
must be in place before any application module is imported.
"""

import asyncio
import os
from typing import Dict, List, Optional, Set

import pytest

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("ALLOWED_ORIGIN", "http://localhost:5173")
os.environ.setdefault("RATE_LIMIT_TIMES", "1000")
os.environ.setdefault("RATE_LIMIT_SECONDS", "60")
os.environ.setdefault("TRUST_PROXY", "false")
os.environ["LLM_API_KEY"] = ""

from core.entities import LlmConfig  # noqa: E402
from model.corpus import Chunk, ChunkMetadata, Document  # noqa: E402
from model.verdict import DetectionRecord  # noqa: E402
from util.enums import LlmProvider  # noqa: E402
from util.functions import tokenize  # noqa: E402


class StoreFailure(RuntimeError):
    pass


class InMemoryCorpusStore:
    """
    Dict-backed CorpusStore.

    - `fail_on` names operations that raise StoreFailure.
    - `fail_chunk_indices` makes insert_chunk fail for those chunk indices.
    - `fulltext_enabled=False` makes full-text search always come back empty.
    """

    def __init__(
        self,
        *,
        fail_on: Optional[Set[str]] = None,
        fail_chunk_indices: Optional[Set[int]] = None,
        fulltext_enabled: bool = True,
    ) -> None:
        self.documents: Dict[str, Document] = {}
        self.chunks: Dict[str, List[Chunk]] = {}
        self.fail_on = fail_on or set()
        self.fail_chunk_indices = fail_chunk_indices or set()
        self.fulltext_enabled = fulltext_enabled
        self.substring_queries: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def _check(self, op: str) -> None:
        if op in self.fail_on:
            raise StoreFailure(f"{op} failed")

    def _ordered(self, source_tag: str) -> List[Chunk]:
        return sorted(self.chunks.get(source_tag, []), key=lambda c: c.metadata.chunk_index)

    async def delete_chunks_by_source(self, source_tag: str) -> int:
        self._check("delete_chunks_by_source")
        return len(self.chunks.pop(source_tag, []))

    async def delete_document(self, source_tag: str) -> int:
        self._check("delete_document")
        return 1 if self.documents.pop(source_tag, None) else 0

    async def insert_document(self, document: Document) -> Document:
        self._check("insert_document")
        self.documents[document.doc_id] = document
        return document

    async def get_document(self, source_tag: str) -> Optional[Document]:
        self._check("get_document")
        return self.documents.get(source_tag)

    async def insert_chunk(self, chunk: Chunk) -> Chunk:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            self._check("insert_chunk")
            if chunk.metadata.chunk_index in self.fail_chunk_indices:
                raise StoreFailure(f"chunk {chunk.metadata.chunk_index} rejected")
            self.chunks.setdefault(chunk.metadata.source, []).append(chunk)
            return chunk
        finally:
            self.in_flight -= 1

    async def full_text_search(self, query: str, source_tag: str, limit: int) -> List[Chunk]:
        self._check("full_text_search")
        if not self.fulltext_enabled:
            return []
        terms = set(tokenize(query))
        if not terms:
            return []
        hits = [c for c in self._ordered(source_tag) if terms <= set(tokenize(c.content))]
        return hits[:limit]

    async def substring_search(self, needle: str, source_tag: str, limit: int) -> List[Chunk]:
        self._check("substring_search")
        self.substring_queries.append(needle)
        hits = [c for c in self._ordered(source_tag) if needle.lower() in c.content.lower()]
        return hits[:limit]

    async def sample_chunks(self, source_tag: str, limit: int) -> List[Chunk]:
        self._check("sample_chunks")
        return self._ordered(source_tag)[:limit]

    def add(self, source_tag: str, *contents: str) -> List[Chunk]:
        existing = len(self.chunks.get(source_tag, []))
        added = [
            make_chunk(text, index=existing + i, source=source_tag)
            for i, text in enumerate(contents)
        ]
        self.chunks.setdefault(source_tag, []).extend(added)
        return added


class InMemoryDetectionLog:
    def __init__(self, fail: bool = False) -> None:
        self.records: List[DetectionRecord] = []
        self.fail = fail

    async def append(self, record: DetectionRecord) -> None:
        if self.fail:
            raise StoreFailure("audit log unavailable")
        self.records.append(record)


def make_chunk(content: str, index: int = 0, source: str = "TEST", total: int = 1) -> Chunk:
    return Chunk(
        id=f"{source}-{index}",
        document_id=f"doc-{source}",
        content=content,
        metadata=ChunkMetadata(chunk_index=index, source=source, total_chunks=total),
    )


# ── Fixtures ────────────────────────────────────────────────────


@pytest.fixture
def store() -> InMemoryCorpusStore:
    return InMemoryCorpusStore()


@pytest.fixture
def detection_log() -> InMemoryDetectionLog:
    return InMemoryDetectionLog()


@pytest.fixture
def llm_config() -> LlmConfig:
    return LlmConfig(
        provider=LlmProvider.OPENAI,
        api_url="https://llm.test/v1/chat/completions",
        model="test-model",
        api_key="sk-test",
        timeout_seconds=5.0,
    )


@pytest.fixture
def offline_llm_config(llm_config: LlmConfig) -> LlmConfig:
    return LlmConfig(
        provider=llm_config.provider,
        api_url=llm_config.api_url,
        model=llm_config.model,
        api_key=None,
    )
