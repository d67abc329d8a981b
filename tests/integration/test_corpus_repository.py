"""
Redis corpus store and audit log against fakeredis: term-index purge on
re-ingest, full-text ranking, substring and sample tiers.
"""

import asyncio
from datetime import datetime, timezone

import pytest
from fakeredis.aioredis import FakeRedis

from core.ingestion import IngestionPipeline
from model.verdict import DetectionRecord, Verdict
from repository import corpus_repository, detection_repository
from repository.corpus_repository import CorpusRepository
from repository.detection_repository import DetectionRepository
from repository.namespaces import CHUNKS, DETECTIONS, SOURCES
from util.enums import AnalysisMethod, RiskLevel

TAG = "PG_AR_2024"
REPORT = "\n\n".join(
    [
        "Packaging recyclable by 2030.",
        "Recyclable packaging, recyclable caps and recyclable labels.",
        "Water use fell.",
    ]
)


def _run(monkeypatch, body):
    async def main():
        r = FakeRedis(decode_responses=True)
        await r.flushall()

        async def _get_redis():
            return r

        monkeypatch.setattr(corpus_repository, "get_redis", _get_redis)
        monkeypatch.setattr(detection_repository, "get_redis", _get_redis)
        try:
            return await body(r)
        finally:
            await r.aclose()

    return asyncio.run(main())


def _pipeline(repo: CorpusRepository) -> IngestionPipeline:
    return IngestionPipeline(repo, display_name="Annual Report", year=2024, chunk_size=40)


@pytest.mark.integration
class TestSearch:
    def test_full_text_ranks_by_term_occurrences(self, monkeypatch):
        async def body(r):
            repo = CorpusRepository()
            await _pipeline(repo).ingest(REPORT, "ar.txt", TAG)
            hits = await repo.full_text_search("recyclable packaging", TAG, 10)
            top = await repo.full_text_search("recyclable packaging", TAG, 1)
            none = await repo.full_text_search("recyclable water", TAG, 10)
            return hits, top, none

        hits, top, none = _run(monkeypatch, body)
        assert [c.metadata.chunk_index for c in hits] == [1, 0]
        assert [c.metadata.chunk_index for c in top] == [1]
        assert none == []

    def test_substring_search_in_chunk_order(self, monkeypatch):
        async def body(r):
            repo = CorpusRepository()
            await _pipeline(repo).ingest(REPORT, "ar.txt", TAG)
            return (
                await repo.substring_search("RECYCLABLE", TAG, 5),
                await repo.substring_search("recyclable", TAG, 1),
                await repo.substring_search("2030", TAG, 5),
            )

        both, first, year = _run(monkeypatch, body)
        assert [c.metadata.chunk_index for c in both] == [0, 1]
        assert [c.metadata.chunk_index for c in first] == [0]
        assert [c.content for c in year] == ["Packaging recyclable by 2030."]

    def test_sample_and_scoping(self, monkeypatch):
        async def body(r):
            repo = CorpusRepository()
            await _pipeline(repo).ingest(REPORT, "ar.txt", TAG)
            await _pipeline(repo).ingest("Recyclable trays.", "other.txt", "OTHER")
            return (
                await repo.sample_chunks(TAG, 2),
                await repo.substring_search("trays", TAG, 5),
                await repo.full_text_search("recyclable", "OTHER", 5),
            )

        sample, leaked, other = _run(monkeypatch, body)
        assert [c.metadata.chunk_index for c in sample] == [0, 1]
        assert all(c.metadata.total_chunks == 3 for c in sample)
        assert leaked == []
        assert [c.content for c in other] == ["Recyclable trays."]


@pytest.mark.integration
class TestReplace:
    def test_reingest_purges_chunks_and_terms(self, monkeypatch):
        async def body(r):
            repo = CorpusRepository()
            await _pipeline(repo).ingest("Alpha wind farms.\n\nAlpha solar roofs.", "a.txt", TAG)
            second = await _pipeline(repo).ingest("Beta heat pumps.", "b.txt", TAG)
            return (
                second,
                await repo.full_text_search("alpha", TAG, 5),
                await r.keys(f"{SOURCES}:{TAG}:term:alpha"),
                await r.keys(f"{CHUNKS}:*"),
                await repo.sample_chunks(TAG, 10),
                await repo.get_document(TAG),
            )

        second, alpha_hits, alpha_keys, chunk_keys, chunks, doc = _run(monkeypatch, body)
        assert alpha_hits == []
        assert alpha_keys == []
        assert len(chunk_keys) == second.chunks_created == 1
        assert [c.content for c in chunks] == ["Beta heat pumps."]
        assert doc.id == second.document_id
        assert doc.metadata.filename == "b.txt"
        assert doc.public_read is True

    def test_missing_document(self, monkeypatch):
        async def body(r):
            return await CorpusRepository().get_document("NOPE")

        assert _run(monkeypatch, body) is None


@pytest.mark.integration
class TestDetectionLog:
    def test_append_only(self, monkeypatch):
        record = DetectionRecord(
            id="d-1",
            text_content="Our eco-friendly packaging is 100% natural.",
            risk_level=RiskLevel.medium,
            analysis_method=AnalysisMethod.LOCAL_PATTERN,
            detection_result=Verdict(label=RiskLevel.medium, justification="x"),
            created_at=datetime.now(timezone.utc).isoformat(),
        )

        async def body(r):
            log = DetectionRepository()
            await log.append(record)
            await log.append(record)
            return await r.lrange(DETECTIONS, 0, -1)

        rows = _run(monkeypatch, body)
        assert len(rows) == 2
        assert DetectionRecord.model_validate_json(rows[0]).id == "d-1"
