"""Disease stage codes and reference database entry models."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DiseaseStage(str, Enum):
    """Closed set of stage codes the classifier may return."""

    HEALTHY = "H0"
    NO_DISEASE = "N0"
    EARLY = "S1"
    SPREADING = "S2"
    ADVANCED = "S3"

    @property
    def is_disease_free(self) -> bool:
        return self in NO_DISEASE_STAGES


NO_DISEASE_STAGES = frozenset({DiseaseStage.HEALTHY, DiseaseStage.NO_DISEASE})


class TreatmentCategory(str, Enum):
    IMMEDIATE = "immediate"
    CHEMICAL = "chemical"
    CULTURAL = "cultural"
    PREVENTIVE = "preventive"
    NUTRITIONAL = "nutritional"
    RECOVERY = "recovery"
    PHOTOGRAPHY_TIPS = "photographyTips"
    TIPS = "tips"

    @property
    def label(self) -> str:
        return TREATMENT_LABELS[self]


TREATMENT_LABELS = {
    TreatmentCategory.IMMEDIATE: "Immediate Actions",
    TreatmentCategory.CHEMICAL: "Chemical Control",
    TreatmentCategory.CULTURAL: "Cultural Practices",
    TreatmentCategory.PREVENTIVE: "Prevention Strategy",
    TreatmentCategory.NUTRITIONAL: "Nutritional Support",
    TreatmentCategory.RECOVERY: "Recovery Phase",
    TreatmentCategory.PHOTOGRAPHY_TIPS: "Photography Tips",
    TreatmentCategory.TIPS: "Expert Tips",
}

# Keys outside TreatmentCategory fail validation when the database loads
TreatmentProtocol = dict[TreatmentCategory, list[str]]

SEVERITY_TIER_LABELS = [
    "Healthy / No Disease",
    "Low Severity",
    "Medium Severity",
    "High Severity",
]


class DiseaseInfo(BaseModel):
    """Reference entry for one stage code."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    severity: int = Field(ge=0, le=3)
    symptoms: list[str] = []
    treatment: TreatmentProtocol = {}
    visual_description: str = ""
    biological_interpretation: str = ""
    prognosis: Optional[str] = None

    @property
    def severity_label(self) -> str:
        return SEVERITY_TIER_LABELS[self.severity]

    def treatment_sections(self) -> list[tuple[str, list[str]]]:
        """(label, steps) pairs in protocol order, skipping empty categories."""
        return [
            (category.label, steps)
            for category, steps in self.treatment.items()
            if steps
        ]
