"""
Pydantic models for validating structured JSON responses from Claude AI.

Used by _call_with_schema_retry() in ai_service.py for validation + retry.
"""

from pydantic import BaseModel, Field

from phytoscan.models.disease import DiseaseStage


# --- Leaf Classification (classify_leaf_image) ---


class LeafClassificationSchema(BaseModel):
    stage: DiseaseStage
    confidence: float = Field(ge=0, le=1)
    lesion_count: int = Field(ge=0, default=0)
    avg_lesion_size: float = Field(ge=0, default=0)
    explanation: str = ""
    reasoning_for_farmer: str = ""
    detected_symptoms: list[str] = []
    visual_evidence_regions: str = ""
