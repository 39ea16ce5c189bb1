"""Disease reference database endpoints."""
from fastapi import APIRouter, HTTPException

from phytoscan.models.disease import DiseaseStage
from phytoscan.services.disease_database import DISEASE_DATABASE

router = APIRouter(prefix="/diseases", tags=["diseases"])


def _disease_payload(stage: DiseaseStage) -> dict:
    disease = DISEASE_DATABASE[stage]
    payload = disease.model_dump(mode="json", by_alias=True, exclude_none=True)
    payload["stage"] = stage.value
    payload["severityLabel"] = disease.severity_label
    payload["treatmentSections"] = [
        {"label": label, "steps": steps}
        for label, steps in disease.treatment_sections()
    ]
    return payload


@router.get("")
async def list_diseases():
    return [_disease_payload(stage) for stage in DISEASE_DATABASE]


@router.get("/{stage}")
async def get_disease(stage: str):
    try:
        stage_code = DiseaseStage(stage.upper())
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown stage: {stage}")
    return _disease_payload(stage_code)
