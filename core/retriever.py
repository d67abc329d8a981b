# core/retriever.py
import asyncio
import logging
from typing import List
from model.corpus import Chunk
from repository.interfaces import CorpusStore
from util.constants import KEYWORD_RESULTS_PER_TERM, SAMPLE_LIMIT
from util.errors import RetrievalError
from util.functions import extract_keywords
from util.timing import timed

logger = logging.getLogger(__name__)


class Retriever:
    """
    Tiered passage retrieval for one source tag:
      1) full-text search ranked by the store
      2) per-keyword substring search, merged and deduplicated by content
      3) a bounded sample of the corpus, so the prompt never goes out empty
    The first tier that returns anything wins. Store failures raise RetrievalError.
    """

    def __init__(self, store: CorpusStore) -> None:
        self._store = store

    async def retrieve(
        self, query: str, source_tag: str, limit: int = 10
    ) -> List[Chunk]:
        with timed(logger, "retrieve", source=source_tag):
            chunks = await self._full_text(query, source_tag, limit)
            if chunks:
                logger.info("retrieve.tier tier=fulltext count=%d", len(chunks))
                return chunks

            chunks = await self._keywords(query, source_tag)
            if chunks:
                logger.info("retrieve.tier tier=keyword count=%d", len(chunks))
                return chunks

            chunks = await self._sample(source_tag)
            logger.info("retrieve.tier tier=sample count=%d", len(chunks))
            return chunks

    async def _full_text(self, query: str, source_tag: str, limit: int) -> List[Chunk]:
        try:
            return await self._store.full_text_search(query, source_tag, limit)
        except Exception as e:
            logger.error("retrieve.fulltext.error err=%s", type(e).__name__)
            raise RetrievalError("fulltext", str(e)) from e

    async def _keywords(self, query: str, source_tag: str) -> List[Chunk]:
        keywords = extract_keywords(query)
        if not keywords:
            return []
        try:
            results = await asyncio.gather(
                *(
                    self._store.substring_search(
                        kw, source_tag, KEYWORD_RESULTS_PER_TERM
                    )
                    for kw in keywords
                )
            )
        except Exception as e:
            logger.error("retrieve.keyword.error err=%s", type(e).__name__)
            raise RetrievalError("keyword", str(e)) from e

        seen: set[str] = set()
        merged: List[Chunk] = []
        for hits in results:
            for ch in hits:
                # Identical text from two chunks counts once
                if ch.content in seen:
                    continue
                seen.add(ch.content)
                merged.append(ch)
        logger.debug("retrieve.keyword keywords=%d merged=%d", len(keywords), len(merged))
        return merged

    async def _sample(self, source_tag: str) -> List[Chunk]:
        try:
            return await self._store.sample_chunks(source_tag, SAMPLE_LIMIT)
        except Exception as e:
            logger.error("retrieve.sample.error err=%s", type(e).__name__)
            raise RetrievalError("sample", str(e)) from e
