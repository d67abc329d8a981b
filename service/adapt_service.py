# service/adapt_service.py
import logging
import httpx
from pydantic import ValidationError
from core.entities import LlmConfig
from core.llm_client import complete, parse_json_object
from model.api import AdaptResponse
from model.verdict import Adaptation
from util.errors import InputError, RemoteVerifierError

logger = logging.getLogger(__name__)


class AdaptService:
    """
    Rewrite marketing text without greenwashing.

    Remote failures are not request failures: the caller gets the text back
    unchanged with a score of 0 and an `error` string.
    """

    def __init__(
        self,
        config: LlmConfig,
        system_prompt: str,
        temperature: float = 0.3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._system_prompt = system_prompt
        self._temperature = temperature
        self._transport = transport

    @staticmethod
    def _unchanged(text: str, error: str) -> AdaptResponse:
        return AdaptResponse(
            before=text, after=text, changes=[], improvement_score=0, error=error
        )

    async def adapt(self, text: str) -> AdaptResponse:
        if not text or not text.strip():
            raise InputError()
        if not self._config.configured:
            logger.info("adapt.skip reason=no_api_key")
            return self._unchanged(text, "No LLM API key available")

        try:
            raw = await complete(
                self._config,
                system=self._system_prompt,
                user=f'Original text: "{text}"\n\nReturn the JSON object only.',
                temperature=self._temperature,
                transport=self._transport,
            )
            parsed = parse_json_object(raw)
            parsed["before"] = text
            parsed.setdefault("after", text)
            adaptation = Adaptation.model_validate(parsed)
        except RemoteVerifierError as e:
            logger.warning("adapt.remote.failed err=%s", type(e).__name__)
            return self._unchanged(text, str(e))
        except ValidationError as e:
            logger.warning("adapt.parse.failed errors=%d", e.error_count())
            return self._unchanged(text, "Unable to parse rewrite output")

        logger.info(
            "adapt.ok changes=%d score=%d",
            len(adaptation.changes),
            adaptation.improvement_score,
        )
        return AdaptResponse(
            before=adaptation.before,
            after=adaptation.after,
            changes=adaptation.changes,
            improvement_score=adaptation.improvement_score,
        )
