# model/api.py
from typing import Literal
from pydantic import BaseModel, Field
from model.verdict import AdaptChange, FlaggedPhrase, SupportedClaim
from util.enums import AnalysisMethod, RiskLevel


class DetectRequest(BaseModel):
    text: str
    source_tag: str | None = None


class DetectResponse(BaseModel):
    label: RiskLevel
    justification: str
    flagged_phrases: list[FlaggedPhrase]
    supported_claims: list[SupportedClaim]
    pg_references: list[str]
    risk_score: int
    pg_context_used: int
    analysis_method: AnalysisMethod
    warnings: list[str] = Field(default_factory=list)


class ProcessDocumentRequest(BaseModel):
    content: str
    filename: str = Field(min_length=1)
    source_tag: str | None = None


class ProcessDocumentResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str
    document_id: str
    chunks_created: int
    content_length: int
    filename: str


class AdaptRequest(BaseModel):
    text: str


class AdaptResponse(BaseModel):
    before: str
    after: str
    changes: list[AdaptChange]
    improvement_score: int
    error: str | None = None


class SeedResponse(BaseModel):
    status: Literal["seeded", "already_seeded"]
    document_id: str
    chunks_created: int | None = None


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
