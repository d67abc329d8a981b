"""
Fallback strategy tests: primary selection by capability, typed recovery.
"""

import asyncio

import pytest

from core.pattern_verifier import LocalPatternVerifier
from core.verification_pipeline import FallbackVerifier
from model.verdict import Verdict
from util.enums import AnalysisMethod, RiskLevel
from util.errors import InvalidResponseError, ParseFailureError, RemoteHttpError, RemoteTimeoutError

TEXT = "Our eco-friendly packaging is 100% natural."


class StubPrimary:
    method = AnalysisMethod.RAG_LLM

    def __init__(self, available=True, error=None):
        self.available = available
        self.error = error
        self.calls = 0

    def is_available(self):
        return self.available

    async def verify(self, text, context):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return Verdict(label=RiskLevel.high, justification="remote verdict")


class TestFallbackVerifier:
    def test_primary_used_when_available(self):
        primary = StubPrimary()
        verdict, method = asyncio.run(
            FallbackVerifier(primary, LocalPatternVerifier()).verify(TEXT, [])
        )
        assert method == AnalysisMethod.RAG_LLM
        assert verdict.justification == "remote verdict"

    def test_unavailable_primary_is_not_called(self):
        primary = StubPrimary(available=False)
        verdict, method = asyncio.run(
            FallbackVerifier(primary, LocalPatternVerifier()).verify(TEXT, [])
        )
        assert primary.calls == 0
        assert method == AnalysisMethod.LOCAL_PATTERN
        assert verdict.label == RiskLevel.medium

    @pytest.mark.parametrize(
        "error",
        [
            RemoteHttpError(500, "boom"),
            InvalidResponseError("no choices"),
            ParseFailureError("not json"),
            RemoteTimeoutError("slow"),
        ],
    )
    def test_remote_failures_fall_back(self, error):
        primary = StubPrimary(error=error)
        verdict, method = asyncio.run(
            FallbackVerifier(primary, LocalPatternVerifier()).verify(TEXT, [])
        )
        assert primary.calls == 1
        assert method == AnalysisMethod.LOCAL_PATTERN
        assert len(verdict.flagged_phrases) == 2

    def test_unexpected_errors_propagate(self):
        primary = StubPrimary(error=RuntimeError("bug"))
        with pytest.raises(RuntimeError):
            asyncio.run(FallbackVerifier(primary, LocalPatternVerifier()).verify(TEXT, []))
