# repository/corpus_repository.py
import json
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence
from redis.asyncio import Redis
from config.cache import get_redis
from model.corpus import Chunk, ChunkMetadata, Document, DocumentMetadata
from repository.namespaces import CHUNKS, DOCUMENTS, SOURCES
from util.functions import tokenize


class CorpusRepository:
    """
    Redis-backed reference corpus.

    Layout per source tag:
    - documents:<tag>              hash, the current Document
    - chunks:<chunk_id>            hash, one Chunk
    - sources:<tag>:chunks         sorted set of chunk ids scored by chunk_index
    - sources:<tag>:term:<token>   set of chunk ids containing <token>
    - sources:<tag>:terms          set of the term keys above (for purge)

    Full-text search intersects the term sets of the query tokens and ranks
    the hits by how often those tokens occur in each chunk.
    """

    @staticmethod
    async def _client() -> Redis:
        return await get_redis()

    @staticmethod
    def _doc_key(source_tag: str) -> str:
        return f"{DOCUMENTS}:{source_tag}"

    @staticmethod
    def _chunk_key(chunk_id: str) -> str:
        return f"{CHUNKS}:{chunk_id}"

    @staticmethod
    def _order_key(source_tag: str) -> str:
        return f"{SOURCES}:{source_tag}:chunks"

    @staticmethod
    def _term_key(source_tag: str, token: str) -> str:
        return f"{SOURCES}:{source_tag}:term:{token}"

    @staticmethod
    def _terms_key(source_tag: str) -> str:
        return f"{SOURCES}:{source_tag}:terms"

    # ---------------- Documents ----------------

    async def delete_document(self, source_tag: str) -> int:
        r = await self._client()
        return int(await r.delete(self._doc_key(source_tag)))

    async def insert_document(self, document: Document) -> Document:
        r = await self._client()
        created = document.created_at or datetime.now(timezone.utc).isoformat()
        stored = document.model_copy(update={"created_at": created})
        await r.hset(
            self._doc_key(stored.doc_id),
            mapping={
                "id": stored.id,
                "doc_id": stored.doc_id,
                "name": stored.name,
                "content": stored.content,
                "metadata": stored.metadata.model_dump_json(),
                "public_read": "1" if stored.public_read else "0",
                "created_at": created,
            },
        )
        return stored

    async def get_document(self, source_tag: str) -> Optional[Document]:
        r = await self._client()
        h = await r.hgetall(self._doc_key(source_tag))
        if not h:
            return None
        return Document(
            id=h["id"],
            doc_id=h["doc_id"],
            name=h.get("name", ""),
            content=h.get("content", ""),
            metadata=DocumentMetadata.model_validate_json(h.get("metadata") or "{}"),
            public_read=h.get("public_read", "1") == "1",
            created_at=h.get("created_at"),
        )

    # ---------------- Chunks ----------------

    async def delete_chunks_by_source(self, source_tag: str) -> int:
        r = await self._client()
        ids = await r.zrange(self._order_key(source_tag), 0, -1)
        term_keys = await r.smembers(self._terms_key(source_tag))
        keys = [self._chunk_key(cid) for cid in ids or []]
        keys.extend(term_keys or [])
        keys.extend([self._order_key(source_tag), self._terms_key(source_tag)])
        await r.delete(*keys)
        return len(ids or [])

    async def insert_chunk(self, chunk: Chunk) -> Chunk:
        r = await self._client()
        source_tag = chunk.metadata.source
        term_keys = [self._term_key(source_tag, t) for t in set(tokenize(chunk.content))]
        async with r.pipeline(transaction=True) as pipe:
            pipe.hset(
                self._chunk_key(chunk.id),
                mapping={
                    "id": chunk.id,
                    "document_id": chunk.document_id,
                    "content": chunk.content,
                    "metadata": chunk.metadata.model_dump_json(),
                },
            )
            pipe.zadd(
                self._order_key(source_tag), {chunk.id: chunk.metadata.chunk_index}
            )
            for key in term_keys:
                pipe.sadd(key, chunk.id)
            if term_keys:
                pipe.sadd(self._terms_key(source_tag), *term_keys)
            await pipe.execute()
        return chunk

    async def _load_chunks(self, r: Redis, ids: Sequence[str]) -> List[Chunk]:
        if not ids:
            return []
        async with r.pipeline(transaction=False) as pipe:
            for cid in ids:
                pipe.hgetall(self._chunk_key(cid))
            rows: List[Dict[str, str]] = await pipe.execute()
        out: List[Chunk] = []
        for h in rows:
            # Skip ids whose hash vanished during a concurrent re-ingest
            if not h:
                continue
            out.append(
                Chunk(
                    id=h["id"],
                    document_id=h["document_id"],
                    content=h.get("content", ""),
                    metadata=ChunkMetadata.model_validate(json.loads(h["metadata"])),
                )
            )
        return out

    # ---------------- Retrieval ----------------

    async def full_text_search(
        self, query: str, source_tag: str, limit: int
    ) -> List[Chunk]:
        terms = list(dict.fromkeys(tokenize(query)))
        if not terms or limit <= 0:
            return []
        r = await self._client()
        ids = await r.sinter([self._term_key(source_tag, t) for t in terms])
        chunks = await self._load_chunks(r, sorted(ids or []))

        def _rank(ch: Chunk) -> tuple[int, int]:
            text = ch.content.lower()
            return (-sum(text.count(t) for t in terms), ch.metadata.chunk_index)

        return sorted(chunks, key=_rank)[:limit]

    async def substring_search(
        self, needle: str, source_tag: str, limit: int
    ) -> List[Chunk]:
        needle = needle.lower()
        if not needle or limit <= 0:
            return []
        r = await self._client()
        ids = await r.zrange(self._order_key(source_tag), 0, -1)
        out: List[Chunk] = []
        for ch in await self._load_chunks(r, ids or []):
            if needle in ch.content.lower():
                out.append(ch)
                if len(out) >= limit:
                    break
        return out

    async def sample_chunks(self, source_tag: str, limit: int) -> List[Chunk]:
        if limit <= 0:
            return []
        r = await self._client()
        ids = await r.zrange(self._order_key(source_tag), 0, limit - 1)
        return await self._load_chunks(r, ids or [])
