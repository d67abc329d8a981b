"""
Remote verifier tests against an httpx.MockTransport: prompt contract,
response normalization, and the typed failure family.
"""

import asyncio
import json
from dataclasses import replace

import httpx
import pytest

from conftest import make_chunk
from core.llm_verifier import RemoteClaimVerifier
from util.enums import LlmProvider, RiskLevel
from util.errors import (
    InvalidResponseError,
    ParseFailureError,
    RemoteHttpError,
    RemoteTimeoutError,
    RemoteVerifierError,
)

TEXT = "Our eco-friendly packaging is 100% natural."
SYSTEM = "system prompt"
CONTEXT = [make_chunk("Packaging uses eco-friendly materials certified by an independent lab.")]

MODEL_OUTPUT = {
    "label": "Medium",
    "justification": "One claim lacks evidence.",
    "flagged_phrases": [
        {
            "phrase": "100% NATURAL",
            "risk_level": "High",
            "justification": "No evidence for natural origin.",
            "suggestion": "Name the natural ingredients.",
        },
        {
            "phrase": "carbon negative forever",
            "risk_level": "high",
            "justification": "Not in text.",
            "suggestion": "-",
        },
        {
            "phrase": "eco-friendly packaging",
            "risk_level": "low",
            "justification": "Also reported as supported.",
            "suggestion": "-",
        },
    ],
    "supported_claims": [
        {
            "phrase": "eco-friendly packaging",
            "supporting_evidence": "Packaging uses eco-friendly materials",
        }
    ],
    "pg_references": ["Packaging uses eco-friendly materials"],
}


def _openai_body(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _verifier(config, handler) -> RemoteClaimVerifier:
    return RemoteClaimVerifier(config, SYSTEM, transport=httpx.MockTransport(handler))


class TestRemoteVerifierSuccess:
    def test_request_carries_evidence_and_text(self, llm_config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_openai_body(json.dumps(MODEL_OUTPUT)))

        asyncio.run(_verifier(llm_config, handler).verify(TEXT, CONTEXT))

        body = seen["body"]
        assert seen["auth"] == "Bearer sk-test"
        assert body["model"] == "test-model"
        assert body["messages"][0] == {"role": "system", "content": SYSTEM}
        user = body["messages"][1]["content"]
        assert CONTEXT[0].content in user
        assert TEXT in user

    def test_verdict_is_normalized(self, llm_config):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_openai_body(json.dumps(MODEL_OUTPUT)))

        verdict = asyncio.run(_verifier(llm_config, handler).verify(TEXT, CONTEXT))

        assert verdict.label == RiskLevel.medium
        assert verdict.risk_score == 50
        # exact input slice, unknown phrase dropped, supported wins over flagged
        assert [f.phrase for f in verdict.flagged_phrases] == ["100% natural"]
        assert verdict.flagged_phrases[0].risk_level == RiskLevel.high
        assert [s.phrase for s in verdict.supported_claims] == ["eco-friendly packaging"]
        assert verdict.pg_references == ["Packaging uses eco-friendly materials"]

    def test_phrases_anchored_after_dotted_capital_i(self, llm_config):
        text = "İstanbul stores sell our eco-friendly bottle."
        output = {
            "label": "medium",
            "justification": "Vague claim.",
            "flagged_phrases": [
                {
                    "phrase": "ECO-FRIENDLY bottle",
                    "risk_level": "medium",
                    "justification": "No evidence.",
                    "suggestion": "Cite a certification.",
                }
            ],
        }

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_openai_body(json.dumps(output)))

        verdict = asyncio.run(_verifier(llm_config, handler).verify(text, []))
        phrase = verdict.flagged_phrases[0].phrase
        assert phrase == "eco-friendly bottle"
        assert phrase in text

    def test_empty_context_still_prompts(self, llm_config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["user"] = json.loads(request.content)["messages"][1]["content"]
            return httpx.Response(200, json=_openai_body(json.dumps(MODEL_OUTPUT)))

        asyncio.run(_verifier(llm_config, handler).verify(TEXT, []))
        assert "(no reference evidence available)" in seen["user"]

    def test_anthropic_format_with_code_fence(self, llm_config):
        config = replace(llm_config, provider=LlmProvider.ANTHROPIC)
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            fenced = "```json\n" + json.dumps(MODEL_OUTPUT) + "\n```"
            return httpx.Response(200, json={"content": [{"type": "text", "text": fenced}]})

        verdict = asyncio.run(_verifier(config, handler).verify(TEXT, CONTEXT))
        assert verdict.label == RiskLevel.medium
        assert seen["headers"]["x-api-key"] == "sk-test"
        assert seen["body"]["system"] == SYSTEM


class TestRemoteVerifierFailures:
    def test_non_success_status(self, llm_config):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="upstream overloaded")

        with pytest.raises(RemoteHttpError) as info:
            asyncio.run(_verifier(llm_config, handler).verify(TEXT, CONTEXT))
        assert info.value.status_code == 503
        assert "upstream overloaded" in str(info.value)

    def test_transport_error(self, llm_config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RemoteHttpError):
            asyncio.run(_verifier(llm_config, handler).verify(TEXT, CONTEXT))

    @pytest.mark.parametrize(
        "body",
        [{}, {"choices": []}, {"choices": [{"message": {}}]}, _openai_body("  ")],
    )
    def test_missing_message_is_invalid_response(self, llm_config, body):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=body)

        with pytest.raises(InvalidResponseError):
            asyncio.run(_verifier(llm_config, handler).verify(TEXT, CONTEXT))

    def test_non_json_body_is_invalid_response(self, llm_config):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(InvalidResponseError):
            asyncio.run(_verifier(llm_config, handler).verify(TEXT, CONTEXT))

    @pytest.mark.parametrize(
        "content",
        [
            "I think this text is greenwashing.",
            json.dumps(["not", "an", "object"]),
            json.dumps({"label": "extreme", "justification": "?"}),
            json.dumps({"label": "low"}),
        ],
    )
    def test_unparsable_model_output(self, llm_config, content):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_openai_body(content))

        with pytest.raises(ParseFailureError):
            asyncio.run(_verifier(llm_config, handler).verify(TEXT, CONTEXT))

    def test_timeout(self, llm_config):
        config = replace(llm_config, timeout_seconds=0.05)

        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200, json=_openai_body(json.dumps(MODEL_OUTPUT)))

        with pytest.raises(RemoteTimeoutError):
            asyncio.run(_verifier(config, handler).verify(TEXT, CONTEXT))

    def test_all_failures_share_base_class(self):
        for cls in (RemoteHttpError, InvalidResponseError, ParseFailureError, RemoteTimeoutError):
            assert issubclass(cls, RemoteVerifierError)


class TestAvailability:
    def test_available_with_key(self, llm_config):
        assert RemoteClaimVerifier(llm_config, SYSTEM).is_available()

    def test_unavailable_without_key(self, offline_llm_config):
        assert not RemoteClaimVerifier(offline_llm_config, SYSTEM).is_available()
