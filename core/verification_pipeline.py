# core/verification_pipeline.py
import logging
from typing import Protocol, Sequence, Tuple
from model.corpus import Chunk
from model.verdict import Verdict
from util.enums import AnalysisMethod
from util.errors import RemoteVerifierError
from util.timing import timed

logger = logging.getLogger(__name__)


class ClaimVerifier(Protocol):
    method: AnalysisMethod

    def is_available(self) -> bool: ...

    async def verify(self, text: str, context: Sequence[Chunk]) -> Verdict: ...


class FallbackVerifier:
    """
    Two-tier strategy: the primary verifier when it reports itself available,
    the fallback when it is not or when it fails with RemoteVerifierError.
    Both tiers share the verify(text, context) contract.
    """

    def __init__(self, primary: ClaimVerifier, fallback: ClaimVerifier) -> None:
        self._primary = primary
        self._fallback = fallback

    async def verify(
        self, text: str, context: Sequence[Chunk]
    ) -> Tuple[Verdict, AnalysisMethod]:
        if self._primary.is_available():
            try:
                with timed(logger, "verify.primary", method=self._primary.method.value):
                    verdict = await self._primary.verify(text, context)
                return verdict, self._primary.method
            except RemoteVerifierError as e:
                logger.warning(
                    "verify.primary.failed stage=remote err=%s msg=%s",
                    type(e).__name__,
                    str(e)[:200],
                )
        else:
            logger.info("verify.primary.unavailable method=%s", self._primary.method.value)

        with timed(logger, "verify.fallback", method=self._fallback.method.value):
            verdict = await self._fallback.verify(text, context)
        return verdict, self._fallback.method
