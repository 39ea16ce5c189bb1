"""Image quality and assembled analysis result models."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from phytoscan.models.disease import DiseaseInfo, DiseaseStage
from phytoscan.models.history import HistoryItem, UserFeedback


class QualityReport(BaseModel):
    """Four independent photo quality flags."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    is_too_dark: bool = False
    has_shadows: bool = False
    is_low_res: bool = False
    has_overexposure: bool = False


class QualityIssues(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    too_dark: bool = False
    shadows: bool = False
    low_res: bool = False
    overexposed: bool = False

    @classmethod
    def from_report(cls, report: QualityReport) -> Optional["QualityIssues"]:
        """Return issues for a report, or None when every flag is clear."""
        if not (
            report.is_too_dark
            or report.has_shadows
            or report.is_low_res
            or report.has_overexposure
        ):
            return None
        return cls(
            too_dark=report.is_too_dark,
            shadows=report.has_shadows,
            low_res=report.is_low_res,
            overexposed=report.has_overexposure,
        )

    def flagged(self) -> list[str]:
        return [name for name, value in self.model_dump(by_alias=True).items() if value]


class AnalysisResult(BaseModel):
    """
    One completed diagnosis.

    Immutable: attaching feedback goes through with_feedback(), which returns
    a new copy carrying the feedback.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    stage: DiseaseStage
    confidence: float = Field(ge=0, le=1)
    disease: DiseaseInfo
    lesion_count: int = Field(ge=0)
    avg_lesion_size: float = Field(ge=0)
    severity_score: int = Field(ge=0, le=100)
    timestamp: str
    quality_issues: Optional[QualityIssues] = None
    ai_explanation: str = ""
    reasoning_for_farmer: str = ""
    detected_symptoms: list[str] = []
    visual_evidence_regions: str = ""
    user_feedback: Optional[UserFeedback] = None

    def with_feedback(self, feedback: UserFeedback) -> "AnalysisResult":
        return self.model_copy(update={"user_feedback": feedback})

    def to_history_item(self) -> HistoryItem:
        return HistoryItem(
            id=self.id,
            timestamp=self.timestamp,
            stage=self.stage,
            disease_name=self.disease.name,
            confidence=self.confidence,
            severity_score=self.severity_score,
            user_feedback=self.user_feedback,
        )
