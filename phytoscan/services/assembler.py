"""Builds the immutable AnalysisResult from collaborator outputs."""
import uuid
from datetime import datetime
from typing import Callable, Optional

from phytoscan.models.analysis import AnalysisResult, QualityIssues, QualityReport
from phytoscan.models.disease import DiseaseInfo, DiseaseStage
from phytoscan.services.ai_schemas import LeafClassificationSchema
from phytoscan.services.disease_database import DISEASE_DATABASE
from phytoscan.services.severity import calculate_severity

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def assemble_result(
    classification: LeafClassificationSchema,
    quality: QualityReport,
    database: Optional[dict[DiseaseStage, DiseaseInfo]] = None,
    severity: Callable[[DiseaseStage, int, float], int] = calculate_severity,
) -> AnalysisResult:
    """
    Combine a classification, a quality report and the reference entry.

    Severity is scored from the classifier's raw lesion metrics; the metrics
    stored on the result are zeroed for disease-free stages.
    """
    database = database if database is not None else DISEASE_DATABASE
    stage = classification.stage
    disease_free = stage.is_disease_free

    return AnalysisResult(
        id=str(uuid.uuid4()),
        stage=stage,
        confidence=classification.confidence,
        disease=database[stage],
        lesion_count=0 if disease_free else classification.lesion_count,
        avg_lesion_size=0 if disease_free else classification.avg_lesion_size,
        severity_score=severity(
            stage, classification.lesion_count, classification.avg_lesion_size
        ),
        timestamp=datetime.now().strftime(TIMESTAMP_FORMAT),
        quality_issues=QualityIssues.from_report(quality),
        ai_explanation=classification.explanation,
        reasoning_for_farmer=classification.reasoning_for_farmer,
        detected_symptoms=list(classification.detected_symptoms),
        visual_evidence_regions=classification.visual_evidence_regions,
    )
