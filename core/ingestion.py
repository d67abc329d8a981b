# core/ingestion.py
import asyncio
import logging
from datetime import datetime, timezone
from typing import List
from uuid import uuid4
from core.chunker import chunk_text
from core.entities import IngestResult
from model.corpus import Chunk, ChunkMetadata, Document, DocumentMetadata
from repository.interfaces import CorpusStore
from util.errors import IngestionError
from util.functions import content_fingerprint
from util.timing import timed

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """
    Replace the reference corpus for one source tag.

    Steps: purge chunks -> purge document -> insert document -> chunk ->
    insert chunks in batches (concurrent inside a batch, sequential across
    batches). Failures before chunk insertion raise IngestionError; a failed
    chunk insert is logged and left out of the count.

    The replace is not atomic: a concurrent reader can see an empty or
    partially filled corpus while it runs.
    """

    def __init__(
        self,
        store: CorpusStore,
        *,
        display_name: str,
        year: int | None,
        chunk_size: int = 1500,
        batch_size: int = 50,
    ) -> None:
        self._store = store
        self._display_name = display_name
        self._year = year
        self._chunk_size = chunk_size
        self._batch_size = max(1, batch_size)

    async def ingest(
        self, content: str, filename: str, source_tag: str, *, name: str | None = None
    ) -> IngestResult:
        logger.info(
            "ingest.start source=%s file=%s chars=%d", source_tag, filename, len(content)
        )
        with timed(logger, "ingest", source=source_tag):
            try:
                removed = await self._store.delete_chunks_by_source(source_tag)
            except Exception as e:
                logger.error("ingest.purge_chunks.error source=%s", source_tag)
                raise IngestionError("Failed to delete existing chunks", str(e)) from e

            try:
                await self._store.delete_document(source_tag)
            except Exception as e:
                logger.error("ingest.purge_document.error source=%s", source_tag)
                raise IngestionError("Failed to delete existing document", str(e)) from e

            document = Document(
                id=str(uuid4()),
                doc_id=source_tag,
                name=name or f"{self._display_name} - {filename}",
                content=content,
                metadata=DocumentMetadata(
                    year=self._year,
                    filename=filename,
                    content_hash=content_fingerprint(content),
                    processed_at=datetime.now(timezone.utc).isoformat(),
                ),
            )
            try:
                document = await self._store.insert_document(document)
            except Exception as e:
                logger.error("ingest.insert_document.error source=%s", source_tag)
                raise IngestionError("Failed to insert document", str(e)) from e
            logger.info(
                "ingest.document id=%s purged_chunks=%d", document.id, removed
            )

            with timed(logger, "ingest.chunk", size=self._chunk_size):
                pieces = list(chunk_text(content, self._chunk_size))

            inserted = await self._insert_chunks(document.id, source_tag, pieces)

        logger.info(
            "ingest.done source=%s chunks=%d of %d", source_tag, inserted, len(pieces)
        )
        return IngestResult(
            document_id=document.id,
            chunks_created=inserted,
            content_length=len(content),
            chunks_total=len(pieces),
        )

    async def _insert_chunks(
        self, document_id: str, source_tag: str, pieces: List[str]
    ) -> int:
        total = len(pieces)
        chunks = [
            Chunk(
                id=str(uuid4()),
                document_id=document_id,
                content=piece,
                metadata=ChunkMetadata(
                    chunk_index=i, source=source_tag, total_chunks=total
                ),
            )
            for i, piece in enumerate(pieces)
        ]

        inserted = 0
        for offset in range(0, total, self._batch_size):
            batch = chunks[offset : offset + self._batch_size]
            results = await asyncio.gather(
                *(self._store.insert_chunk(c) for c in batch), return_exceptions=True
            )
            ok = 0
            for chunk, res in zip(batch, results):
                if isinstance(res, BaseException):
                    logger.error(
                        "ingest.chunk.insert.error index=%d err=%s",
                        chunk.metadata.chunk_index,
                        type(res).__name__,
                    )
                else:
                    ok += 1
            inserted += ok
            logger.info(
                "ingest.batch offset=%d size=%d inserted=%d", offset, len(batch), ok
            )
        return inserted
