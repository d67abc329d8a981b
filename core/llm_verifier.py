# core/llm_verifier.py
import logging
from typing import Any, Dict, List, Sequence
import httpx
from pydantic import ValidationError
from core.entities import LlmConfig
from core.llm_client import complete, parse_json_object
from model.corpus import Chunk
from model.verdict import FlaggedPhrase, SupportedClaim, Verdict
from util.enums import AnalysisMethod
from util.errors import ParseFailureError
from util.functions import locate_exact

logger = logging.getLogger(__name__)

NO_EVIDENCE = "(no reference evidence available)"


def _user_prompt(text: str, context: Sequence[Chunk]) -> str:
    """
    Build the user message: reference evidence first, then the literal text.
    """
    evidence = "\n\n".join(c.content for c in context if c.content.strip())
    return (
        f"REFERENCE EVIDENCE:\n{evidence or NO_EVIDENCE}\n\n"
        f'TEXT TO ANALYZE:\n"{text}"\n\n'
        "Return the JSON object only."
    )


def _lowercase_levels(parsed: Dict[str, Any]) -> Dict[str, Any]:
    if isinstance(parsed.get("label"), str):
        parsed["label"] = parsed["label"].strip().lower()
    for item in parsed.get("flagged_phrases") or []:
        if isinstance(item, dict) and isinstance(item.get("risk_level"), str):
            item["risk_level"] = item["risk_level"].strip().lower()
    return parsed


def _anchor_phrases(text: str, verdict: Verdict) -> Verdict:
    """
    Keep only phrases that occur in the input, rewritten to the exact input slice.
    A phrase reported both ways stays supported.
    """
    supported: List[SupportedClaim] = []
    for claim in verdict.supported_claims:
        exact = locate_exact(text, claim.phrase)
        if exact is None:
            logger.warning("ai.verify.drop kind=supported reason=not_in_text")
            continue
        supported.append(claim.model_copy(update={"phrase": exact}))

    supported_keys = {c.phrase.lower() for c in supported}
    flagged: List[FlaggedPhrase] = []
    for fp in verdict.flagged_phrases:
        exact = locate_exact(text, fp.phrase)
        if exact is None:
            logger.warning("ai.verify.drop kind=flagged reason=not_in_text")
            continue
        if exact.lower() in supported_keys:
            continue
        flagged.append(fp.model_copy(update={"phrase": exact}))

    return verdict.model_copy(
        update={"flagged_phrases": flagged, "supported_claims": supported}
    )


class RemoteClaimVerifier:
    """
    RAG verifier backed by a remote chat model.

    The configuration is injected; nothing here reads global settings, so tests
    can drive it with a fixed LlmConfig and an httpx.MockTransport.
    """

    method = AnalysisMethod.RAG_LLM

    def __init__(
        self,
        config: LlmConfig,
        system_prompt: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._system_prompt = system_prompt
        self._transport = transport

    def is_available(self) -> bool:
        return self._config.configured

    async def verify(self, text: str, context: Sequence[Chunk]) -> Verdict:
        raw = await complete(
            self._config,
            system=self._system_prompt,
            user=_user_prompt(text, context),
            transport=self._transport,
        )
        parsed = _lowercase_levels(parse_json_object(raw))
        try:
            verdict = Verdict.model_validate(parsed)
        except ValidationError as e:
            raise ParseFailureError(
                f"model output does not match verdict shape ({e.error_count()} errors)"
            ) from e

        verdict = _anchor_phrases(text, verdict)
        logger.info(
            "ai.verify.result label=%s flagged=%d supported=%d ctx=%d",
            verdict.label.value,
            len(verdict.flagged_phrases),
            len(verdict.supported_claims),
            len(context),
        )
        return verdict
