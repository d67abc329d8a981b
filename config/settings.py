# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment, LlmProvider
import logging


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(..., validation_alias="APP_ENV")
    REDIS_URL: str = Field(..., validation_alias="REDIS_URL")

    # CORS & Limits
    ALLOWED_ORIGIN: str = Field(..., validation_alias="ALLOWED_ORIGIN")
    RATE_LIMIT_TIMES: int = Field(..., validation_alias="RATE_LIMIT_TIMES")
    RATE_LIMIT_SECONDS: int = Field(..., validation_alias="RATE_LIMIT_SECONDS")
    TRUST_PROXY: bool = Field(..., validation_alias="TRUST_PROXY")

    # Remote LLM. No key means every detection runs the local pattern verifier.
    LLM_PROVIDER: LlmProvider = Field(
        default=LlmProvider.OPENAI, validation_alias="LLM_PROVIDER"
    )
    LLM_API_KEY: str | None = Field(default=None, validation_alias="LLM_API_KEY")
    LLM_API_URL: str = Field(
        default="https://api.groq.com/openai/v1/chat/completions",
        validation_alias="LLM_API_URL",
    )
    LLM_MODEL: str = Field(
        default="llama-3.1-70b-versatile", validation_alias="LLM_MODEL"
    )
    ANTHROPIC_VERSION: str = Field(
        default="2023-06-01", validation_alias="ANTHROPIC_VERSION"
    )
    LLM_TIMEOUT_SECONDS: float = Field(
        default=30.0, validation_alias="LLM_TIMEOUT_SECONDS"
    )
    LLM_TEMPERATURE: float = Field(default=0.1, validation_alias="LLM_TEMPERATURE")
    ADAPT_TEMPERATURE: float = Field(
        default=0.3, validation_alias="ADAPT_TEMPERATURE"
    )
    LLM_MAX_TOKENS: int = Field(default=1500, validation_alias="LLM_MAX_TOKENS")

    # Reference corpus
    CORPUS_SOURCE_TAG: str = Field(
        default="PG_AR_2024", validation_alias="CORPUS_SOURCE_TAG"
    )
    CORPUS_DISPLAY_NAME: str = Field(
        default="P&G Annual Report 2024", validation_alias="CORPUS_DISPLAY_NAME"
    )
    CORPUS_YEAR: int = Field(default=2024, validation_alias="CORPUS_YEAR")
    # Larger chunks favor context completeness over retrieval precision.
    CHUNK_TARGET_SIZE: int = Field(default=1500, validation_alias="CHUNK_TARGET_SIZE")
    CHUNK_INSERT_BATCH_SIZE: int = Field(
        default=50, validation_alias="CHUNK_INSERT_BATCH_SIZE"
    )
    RETRIEVAL_LIMIT: int = Field(default=10, validation_alias="RETRIEVAL_LIMIT")

    # Logging knobs
    LOGGER_NAME: str = "greenclaim"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")

    # Prompts
    DETECT_SYSTEM_PROMPT: str = (
        "You are a careful environmental-claims auditor. You check marketing text for greenwashing: "
        "environmental claims that are vague, exaggerated, or not substantiated.\n"
        "\n"
        "You are given REFERENCE EVIDENCE taken from the company's own report and a TEXT TO ANALYZE.\n"
        "\n"
        "RULES:\n"
        "- Flag ONLY claims that are NOT substantiated by the reference evidence.\n"
        "- Claims that ARE supported by the evidence must NOT appear in flagged_phrases; "
        "report them in supported_claims with the supporting excerpt.\n"
        "- Every phrase MUST be an exact, verbatim substring of the text to analyze "
        "(specific phrases, not single words where a phrase is available).\n"
        "- A phrase may appear in flagged_phrases or supported_claims, never both.\n"
        '- risk_level and label are one of "high", "medium", "low".\n'
        "\n"
        "OUTPUT: a single JSON object and nothing else. No code fences. Shape:\n"
        '{"label":"high|medium|low","justification":"<overall explanation>",'
        '"flagged_phrases":[{"phrase":"<exact phrase>","risk_level":"high|medium|low",'
        '"justification":"<why unsupported>","suggestion":"<how to improve it>"}],'
        '"supported_claims":[{"phrase":"<exact phrase>","supporting_evidence":"<excerpt>"}],'
        '"pg_references":["<relevant evidence excerpt>"]}\n'
    )

    ADAPT_SYSTEM_PROMPT: str = (
        "You rewrite marketing text to remove greenwashing while keeping its impact.\n"
        "\n"
        "GUIDELINES:\n"
        "1. Replace vague terms with specific, measurable claims.\n"
        "2. Remove unsubstantiated environmental claims.\n"
        "3. Focus on concrete benefits and actions.\n"
        "4. Keep a persuasive tone without misleading language.\n"
        "\n"
        "OUTPUT: a single JSON object and nothing else. No code fences. Shape:\n"
        '{"before":"<original text>","after":"<rewritten text>",'
        '"changes":[{"original_phrase":"...","new_phrase":"...","reason":"..."}],'
        '"improvement_score":0-100}\n'
    )

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGIN.split(",") if o.strip()]


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
