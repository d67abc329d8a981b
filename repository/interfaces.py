# repository/interfaces.py
from typing import List, Optional, Protocol
from model.corpus import Chunk, Document
from model.verdict import DetectionRecord


class CorpusStore(Protocol):
    """Operations the retrieval and ingestion core consume from the store."""

    async def delete_chunks_by_source(self, source_tag: str) -> int: ...

    async def delete_document(self, source_tag: str) -> int: ...

    async def insert_document(self, document: Document) -> Document: ...

    async def get_document(self, source_tag: str) -> Optional[Document]: ...

    async def insert_chunk(self, chunk: Chunk) -> Chunk: ...

    async def full_text_search(
        self, query: str, source_tag: str, limit: int
    ) -> List[Chunk]: ...

    async def substring_search(
        self, needle: str, source_tag: str, limit: int
    ) -> List[Chunk]: ...

    async def sample_chunks(self, source_tag: str, limit: int) -> List[Chunk]: ...


class DetectionLog(Protocol):
    async def append(self, record: DetectionRecord) -> None: ...
