# model/verdict.py
from pydantic import BaseModel, Field, computed_field
from util.constants import RISK_SCORES
from util.enums import AnalysisMethod, RiskLevel


class FlaggedPhrase(BaseModel):
    phrase: str
    risk_level: RiskLevel
    justification: str
    suggestion: str


class SupportedClaim(BaseModel):
    phrase: str
    supporting_evidence: str


class Verdict(BaseModel):
    label: RiskLevel
    justification: str
    flagged_phrases: list[FlaggedPhrase] = Field(default_factory=list)
    supported_claims: list[SupportedClaim] = Field(default_factory=list)
    pg_references: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def risk_score(self) -> int:
        return RISK_SCORES[self.label.value]


class DetectionRecord(BaseModel):
    """Append-only audit entry for one verification call."""

    id: str
    text_content: str
    risk_level: RiskLevel
    analysis_method: AnalysisMethod
    detection_result: Verdict
    created_at: str


class AdaptChange(BaseModel):
    original_phrase: str
    new_phrase: str
    reason: str = ""


class Adaptation(BaseModel):
    before: str
    after: str
    changes: list[AdaptChange] = Field(default_factory=list)
    improvement_score: int = Field(default=0, ge=0, le=100)
    error: str | None = None
