"""
Diagnosis session: the single owner of history and the displayed result.

One analysis may be in flight at a time. A failed analysis leaves history
and the displayed result untouched.
"""

import logging
from typing import Awaitable, Callable, Optional

from phytoscan.models.analysis import AnalysisResult, QualityReport
from phytoscan.models.disease import DiseaseStage
from phytoscan.models.history import HistoryItem, ReliabilityStats
from phytoscan.services.ai_schemas import LeafClassificationSchema
from phytoscan.services.assembler import assemble_result
from phytoscan.services.feedback_service import FeedbackRecorder
from phytoscan.services.history_service import HistoryStore
from phytoscan.services.image_quality import analyze_image_quality
from phytoscan.services.reliability_service import compute_reliability_stats

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "Analysis failed. Please check your network."


class DiagnosisSession:
    """State and operations behind the scanner, history and stats views."""

    def __init__(
        self,
        history: HistoryStore,
        classifier,
        quality_analyzer: Callable[[str], Awaitable[QualityReport]] = analyze_image_quality,
    ):
        """
        Args:
            history: Loaded history store, shared by reference
            classifier: Object with an async classify_leaf_image(image_path)
            quality_analyzer: Async callable returning a QualityReport
        """
        self.history = history
        self.classifier = classifier
        self.quality_analyzer = quality_analyzer
        self.recorder = FeedbackRecorder(history)

        self.busy = False
        self.current_result: Optional[AnalysisResult] = None
        self.quality_report: Optional[QualityReport] = None
        self.feedback_submitted = False

    async def run_diagnosis(self, image_path: str) -> AnalysisResult:
        """
        Analyze a leaf photo and append the result to history.

        Raises:
            AnalysisInProgressError: another analysis is still running
            AnalysisFailedError: quality check or classification failed
        """
        if self.busy:
            raise AnalysisInProgressError("An analysis is already running")

        self.busy = True
        self.feedback_submitted = False
        try:
            quality = await self.quality_analyzer(image_path)
            raw = await self.classifier.classify_leaf_image(image_path)
            classification = LeafClassificationSchema.model_validate(raw)
            result = assemble_result(classification, quality)
        except Exception as e:
            logger.error("Analysis of %s failed: %s", image_path, e, exc_info=True)
            raise AnalysisFailedError(ANALYSIS_FAILED_MESSAGE) from e
        finally:
            self.busy = False

        self.current_result = result
        self.quality_report = quality
        self.history.append(result.to_history_item())
        logger.info(
            "Diagnosis %s: %s (confidence %.2f, severity %d)",
            result.id,
            result.stage.value,
            result.confidence,
            result.severity_score,
        )
        return result

    def record_feedback(
        self, is_correct: bool, suggested_stage: Optional[DiseaseStage] = None
    ) -> Optional[AnalysisResult]:
        """Attach feedback to the displayed result. No-op without one."""
        updated = self.recorder.submit(self.current_result, is_correct, suggested_stage)
        if updated is None:
            return None
        self.current_result = updated
        self.feedback_submitted = True
        return updated

    def get_result(self) -> Optional[AnalysisResult]:
        return self.current_result

    def get_history(self) -> list[HistoryItem]:
        return list(self.history.items)

    def get_stats(self) -> ReliabilityStats:
        return compute_reliability_stats(self.history.items)

    def clear_history(self, confirmed: bool) -> bool:
        """Wipe all records and feedback. Does nothing unless confirmed."""
        if not confirmed:
            return False
        self.history.clear()
        logger.info("History cleared")
        return True

    def reset(self) -> None:
        """Forget the displayed result, e.g. when a new image is chosen."""
        self.current_result = None
        self.quality_report = None
        self.feedback_submitted = False


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class AnalysisInProgressError(Exception):
    """A second analysis was started while one is pending."""

    pass


class AnalysisFailedError(Exception):
    """Quality analysis or classification failed; nothing was recorded."""

    pass
