# service/document_service.py
import logging
from core.ingestion import IngestionPipeline
from core.seed_corpus import SEED_FILENAME, SEED_REPORT
from model.api import ProcessDocumentResponse, SeedResponse
from repository.interfaces import CorpusStore
from util.enums import ErrorMessage
from util.errors import IngestionError, InputError

logger = logging.getLogger(__name__)


class DocumentService:
    def __init__(
        self,
        store: CorpusStore,
        pipeline: IngestionPipeline,
        *,
        default_source_tag: str,
        display_name: str,
    ) -> None:
        self._store = store
        self._pipeline = pipeline
        self._default_source_tag = default_source_tag
        self._display_name = display_name

    async def process_document(
        self, content: str, filename: str, source_tag: str | None = None
    ) -> ProcessDocumentResponse:
        """
        Replace the reference corpus with `content`. Partial chunk inserts are
        still a success; the response reports how many chunks landed.
        """
        if not content or not content.strip():
            raise InputError(ErrorMessage.EMPTY_CONTENT)
        tag = source_tag or self._default_source_tag
        result = await self._pipeline.ingest(content, filename, tag)
        return ProcessDocumentResponse(
            message=f"{self._display_name} processed successfully",
            document_id=result.document_id,
            chunks_created=result.chunks_created,
            content_length=result.content_length,
            filename=filename,
        )

    async def seed(self) -> SeedResponse:
        try:
            existing = await self._store.get_document(self._default_source_tag)
        except Exception as e:
            logger.error("seed.lookup.error source=%s", self._default_source_tag)
            raise IngestionError("Failed to read existing document", str(e)) from e
        if existing is not None:
            logger.info("seed.skip source=%s id=%s", self._default_source_tag, existing.id)
            return SeedResponse(status="already_seeded", document_id=existing.id)

        result = await self._pipeline.ingest(
            SEED_REPORT,
            SEED_FILENAME,
            self._default_source_tag,
            name=self._display_name,
        )
        logger.info("seed.ok source=%s chunks=%d", self._default_source_tag, result.chunks_created)
        return SeedResponse(
            status="seeded",
            document_id=result.document_id,
            chunks_created=result.chunks_created,
        )
