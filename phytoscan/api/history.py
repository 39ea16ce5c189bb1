"""History and reliability API endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from phytoscan.api.dependencies import get_session
from phytoscan.services.session_service import DiagnosisSession

router = APIRouter(prefix="/history", tags=["history"])


@router.get("")
async def list_history(session: DiagnosisSession = Depends(get_session)):
    """Newest-first history entries with their feedback."""
    return {
        "items": [
            item.model_dump(mode="json", by_alias=True, exclude_none=True)
            for item in session.get_history()
        ],
        "persisted": session.history.persistence_available,
    }


@router.get("/stats")
async def get_stats(session: DiagnosisSession = Depends(get_session)):
    return session.get_stats().model_dump()


@router.delete("")
async def clear_history(
    confirm: bool = False,
    session: DiagnosisSession = Depends(get_session),
):
    """
    Delete all records and feedback stats.

    Irreversible, so the caller must pass confirm=true.
    """
    if not session.clear_history(confirmed=confirm):
        raise HTTPException(
            status_code=400,
            detail="Clearing history requires confirm=true",
        )
    return {"message": "History cleared"}
