"""History log entries, user feedback and derived reliability stats."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from phytoscan.models.disease import DiseaseStage


class UserFeedback(BaseModel):
    """A user's correctness judgement on exactly one diagnosis."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    analysis_id: str
    is_correct: bool
    user_suggested_stage: Optional[DiseaseStage] = None
    timestamp: str

    @model_validator(mode="after")
    def _confirmed_has_no_suggestion(self):
        if self.is_correct and self.user_suggested_stage is not None:
            raise ValueError("confirmed feedback cannot carry a suggested stage")
        return self


class HistoryItem(BaseModel):
    """Summary of one diagnosis as kept in the persisted history log."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    timestamp: str
    stage: DiseaseStage
    disease_name: str
    confidence: float = Field(ge=0, le=1)
    severity_score: int = Field(ge=0, le=100)
    user_feedback: Optional[UserFeedback] = None


class ReliabilityStats(BaseModel):
    total: int = 0
    confirmed: int = 0
    corrected: int = 0
    accuracy: int = 0
