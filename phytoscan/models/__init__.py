"""
Models for PhytoScan.

Pydantic models for the diagnosis domain plus the SQLAlchemy KVEntry table.
"""

from phytoscan.models.disease import (
    DiseaseStage,
    DiseaseInfo,
    TreatmentCategory,
    TreatmentProtocol,
    NO_DISEASE_STAGES,
)
from phytoscan.models.history import UserFeedback, HistoryItem, ReliabilityStats
from phytoscan.models.analysis import QualityReport, QualityIssues, AnalysisResult
from phytoscan.models.kv_entry import KVEntry

__all__ = [
    "DiseaseStage",
    "DiseaseInfo",
    "TreatmentCategory",
    "TreatmentProtocol",
    "NO_DISEASE_STAGES",
    "UserFeedback",
    "HistoryItem",
    "ReliabilityStats",
    "QualityReport",
    "QualityIssues",
    "AnalysisResult",
    "KVEntry",
]
