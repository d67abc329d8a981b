# service/detection_service.py
import logging
from datetime import datetime, timezone
from uuid import uuid4
from core.retriever import Retriever
from core.verification_pipeline import FallbackVerifier
from model.api import DetectResponse
from model.corpus import Chunk
from model.verdict import DetectionRecord
from repository.interfaces import DetectionLog
from util.errors import InputError, RetrievalError

logger = logging.getLogger(__name__)


class DetectionService:
    def __init__(
        self,
        retriever: Retriever,
        verifier: FallbackVerifier,
        detections: DetectionLog,
        *,
        default_source_tag: str,
        retrieval_limit: int = 10,
    ) -> None:
        self._retriever = retriever
        self._verifier = verifier
        self._detections = detections
        self._default_source_tag = default_source_tag
        self._retrieval_limit = retrieval_limit

    async def detect(self, text: str, source_tag: str | None = None) -> DetectResponse:
        """
        Retrieve evidence, verify (remote first, local fallback), audit, respond.
        Retrieval and audit failures degrade the response; they never fail it.
        Logs: sizes, tiers and labels only (no payloads).
        """
        if not text or not text.strip():
            raise InputError()
        tag = source_tag or self._default_source_tag
        warnings: list[str] = []

        try:
            context: list[Chunk] = await self._retriever.retrieve(
                text, tag, limit=self._retrieval_limit
            )
        except RetrievalError as e:
            logger.warning("detect.retrieve.degraded stage=%s err=%s", e.stage, e)
            warnings.append("Reference corpus unavailable; analyzed without evidence.")
            context = []

        verdict, method = await self._verifier.verify(text, context)

        record = DetectionRecord(
            id=str(uuid4()),
            text_content=text,
            risk_level=verdict.label,
            analysis_method=method,
            detection_result=verdict,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        try:
            await self._detections.append(record)
        except Exception as e:
            logger.warning("detect.audit.error err=%s", type(e).__name__)
            warnings.append("Detection could not be written to the audit log.")

        logger.info(
            "detect.ok source=%s ctx=%d method=%s label=%s flagged=%d",
            tag,
            len(context),
            method.value,
            verdict.label.value,
            len(verdict.flagged_phrases),
        )
        return DetectResponse(
            label=verdict.label,
            justification=verdict.justification,
            flagged_phrases=verdict.flagged_phrases,
            supported_claims=verdict.supported_claims,
            pg_references=verdict.pg_references,
            risk_score=verdict.risk_score,
            pg_context_used=len(context),
            analysis_method=method,
            warnings=warnings,
        )
