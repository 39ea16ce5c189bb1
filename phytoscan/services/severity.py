"""Severity scoring and display labels for diagnoses."""

from phytoscan.models.disease import DiseaseStage

# Base score per disease stage before lesion metrics are added
STAGE_BASE_SCORE = {
    DiseaseStage.EARLY: 10,
    DiseaseStage.SPREADING: 35,
    DiseaseStage.ADVANCED: 65,
}

MAX_LESION_COUNT_POINTS = 20
MAX_LESION_SIZE_POINTS = 15
LESION_SIZE_WEIGHT = 3


def calculate_severity(
    stage: DiseaseStage, lesion_count: int, avg_lesion_size: float
) -> int:
    """
    Score lesion extent as an integer percentage.

    Disease-free stages always score 0 regardless of the lesion metrics.
    Negative metrics are treated as 0.

    Returns:
        Integer in [0, 100]
    """
    stage = DiseaseStage(stage)
    if stage.is_disease_free:
        return 0

    count_points = min(MAX_LESION_COUNT_POINTS, max(0, lesion_count))
    size_points = min(
        MAX_LESION_SIZE_POINTS, max(0.0, avg_lesion_size) * LESION_SIZE_WEIGHT
    )
    score = STAGE_BASE_SCORE[stage] + count_points + size_points
    return int(round(max(0, min(100, score))))


def confidence_label(confidence: float) -> str:
    """High (>=85%), Medium (>=70%) or Low."""
    percentage = round(confidence * 100)
    if percentage >= 85:
        return "High Confidence"
    if percentage >= 70:
        return "Medium Confidence"
    return "Low Confidence"
