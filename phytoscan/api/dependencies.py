"""FastAPI dependencies shared by the PhytoScan routers."""
from typing import Optional

from phytoscan.services.ai_service import ClaudeService
from phytoscan.services.file_service import FileService
from phytoscan.services.history_service import HistoryStore
from phytoscan.services.session_service import DiagnosisSession
from phytoscan.services.storage import create_store

_session: Optional[DiagnosisSession] = None
_file_service: Optional[FileService] = None


def build_session() -> DiagnosisSession:
    """Create a session with the configured storage and a loaded history."""
    history = HistoryStore(create_store())
    history.load()
    return DiagnosisSession(history=history, classifier=ClaudeService())


def get_session() -> DiagnosisSession:
    global _session
    if _session is None:
        _session = build_session()
    return _session


def get_file_service() -> FileService:
    global _file_service
    if _file_service is None:
        _file_service = FileService()
    return _file_service
