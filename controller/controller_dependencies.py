# controller/controller_dependencies.py
from fastapi_limiter.depends import RateLimiter
from config.settings import settings
from core.entities import LlmConfig
from core.ingestion import IngestionPipeline
from core.llm_verifier import RemoteClaimVerifier
from core.pattern_verifier import LocalPatternVerifier
from core.retriever import Retriever
from core.verification_pipeline import FallbackVerifier
from repository.corpus_repository import CorpusRepository
from repository.detection_repository import DetectionRepository
from service.adapt_service import AdaptService
from service.detection_service import DetectionService
from service.document_service import DocumentService

rate_limiter = RateLimiter(
    times=settings.RATE_LIMIT_TIMES, seconds=settings.RATE_LIMIT_SECONDS
)


def get_llm_config() -> LlmConfig:
    return LlmConfig(
        provider=settings.LLM_PROVIDER,
        api_url=settings.LLM_API_URL,
        model=settings.LLM_MODEL,
        api_key=settings.LLM_API_KEY,
        anthropic_version=settings.ANTHROPIC_VERSION,
        timeout_seconds=settings.LLM_TIMEOUT_SECONDS,
        temperature=settings.LLM_TEMPERATURE,
        max_tokens=settings.LLM_MAX_TOKENS,
    )


def _ingestion_pipeline(store: CorpusRepository) -> IngestionPipeline:
    return IngestionPipeline(
        store,
        display_name=settings.CORPUS_DISPLAY_NAME,
        year=settings.CORPUS_YEAR,
        chunk_size=settings.CHUNK_TARGET_SIZE,
        batch_size=settings.CHUNK_INSERT_BATCH_SIZE,
    )


def get_detection_service() -> DetectionService:
    _store = CorpusRepository()
    _verifier = FallbackVerifier(
        primary=RemoteClaimVerifier(get_llm_config(), settings.DETECT_SYSTEM_PROMPT),
        fallback=LocalPatternVerifier(),
    )
    return DetectionService(
        Retriever(_store),
        _verifier,
        DetectionRepository(),
        default_source_tag=settings.CORPUS_SOURCE_TAG,
        retrieval_limit=settings.RETRIEVAL_LIMIT,
    )


def get_document_service() -> DocumentService:
    _store = CorpusRepository()
    return DocumentService(
        _store,
        _ingestion_pipeline(_store),
        default_source_tag=settings.CORPUS_SOURCE_TAG,
        display_name=settings.CORPUS_DISPLAY_NAME,
    )


def get_adapt_service() -> AdaptService:
    return AdaptService(
        get_llm_config(),
        settings.ADAPT_SYSTEM_PROMPT,
        temperature=settings.ADAPT_TEMPERATURE,
    )
