"""Scanner API endpoints: run a diagnosis and submit feedback on it."""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from phytoscan.api.dependencies import get_file_service, get_session
from phytoscan.models.disease import DiseaseStage
from phytoscan.services.file_service import FileService
from phytoscan.services.session_service import (
    AnalysisFailedError,
    AnalysisInProgressError,
    DiagnosisSession,
)
from phytoscan.services.severity import confidence_label

router = APIRouter(prefix="/diagnosis", tags=["diagnosis"])


def _result_payload(session: DiagnosisSession) -> dict:
    result = session.get_result()
    payload = result.model_dump(mode="json", by_alias=True)
    payload["confidenceLabel"] = confidence_label(result.confidence)
    payload["feedbackSubmitted"] = session.feedback_submitted
    return payload


@router.post("")
async def run_diagnosis(
    image: UploadFile = File(...),
    session: DiagnosisSession = Depends(get_session),
    files: FileService = Depends(get_file_service),
):
    """
    Upload a leaf photo and diagnose it.

    Returns the full analysis result. The image is removed once analyzed.
    """
    if session.busy:
        raise HTTPException(status_code=409, detail="An analysis is already running")

    try:
        image_path = await files.save_leaf_image(image)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        await session.run_diagnosis(image_path)
    except AnalysisInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except AnalysisFailedError as e:
        raise HTTPException(status_code=502, detail=str(e))
    finally:
        files.delete_file(image_path)

    return _result_payload(session)


@router.get("/current")
async def get_current_result(session: DiagnosisSession = Depends(get_session)):
    """Return the displayed result."""
    if session.get_result() is None:
        raise HTTPException(status_code=404, detail="No current result")
    return _result_payload(session)


@router.post("/feedback")
async def submit_feedback(
    is_correct: bool = Form(...),
    suggested_stage: Optional[DiseaseStage] = Form(None),
    session: DiagnosisSession = Depends(get_session),
):
    """
    Confirm or correct the displayed result.

    A suggested stage is only kept on corrections. Submitting again
    overwrites the earlier feedback.
    """
    updated = session.record_feedback(is_correct, suggested_stage)
    if updated is None:
        raise HTTPException(status_code=404, detail="No current result")
    return _result_payload(session)


@router.delete("/current")
async def reset_scanner(session: DiagnosisSession = Depends(get_session)):
    """Forget the displayed result before scanning a new image."""
    session.reset()
    return {"message": "Scanner reset"}
