# util/errors.py
from fastapi import HTTPException, status
from util.enums import ErrorMessage


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self,
        message: str,
        http_status: int = status.HTTP_400_BAD_REQUEST,
        details: str | None = None,
    ) -> None:
        super().__init__(status_code=http_status, detail=message)
        self.message = message
        self.details = details


class InputError(AppError):
    """Empty or missing user input; user-correctable."""

    def __init__(
        self, info: ErrorMessage = ErrorMessage.EMPTY_TEXT, details: str | None = None
    ) -> None:
        super().__init__(info.value.message, info.value.http_status, details)


class IngestionError(AppError):
    """Store write failure while replacing the reference corpus."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(
            f"{stage}: {message}",
            ErrorMessage.INGESTION_FAILED.value.http_status,
            ErrorMessage.INGESTION_FAILED.value.message,
        )
        self.stage = stage


class RetrievalError(Exception):
    """Corpus store unreachable or query failed. Recovered with empty context."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage}: {message}")
        self.stage = stage


class RemoteVerifierError(Exception):
    """Any failure of the remote LLM path. Recovered by the local verifier."""


class RemoteHttpError(RemoteVerifierError):
    def __init__(self, status_code: int | None, body: str) -> None:
        label = status_code if status_code is not None else "transport"
        super().__init__(f"LLM API error: {label} - {body[:500]}")
        self.status_code = status_code
        self.body = body


class InvalidResponseError(RemoteVerifierError):
    """Response envelope missing or malformed (no choices / content)."""


class ParseFailureError(RemoteVerifierError):
    """Model text is not JSON or does not match the verdict shape."""


class RemoteTimeoutError(RemoteVerifierError):
    """Remote call exceeded its time budget."""
