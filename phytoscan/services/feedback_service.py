"""Records a user's correctness judgement on the displayed diagnosis."""
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from phytoscan.models.analysis import AnalysisResult
from phytoscan.models.disease import DiseaseStage
from phytoscan.models.history import UserFeedback
from phytoscan.services.history_service import HistoryStore

logger = logging.getLogger(__name__)


class FeedbackRecorder:
    """Binds feedback to the current result and its history entry."""

    def __init__(self, history: HistoryStore):
        self.history = history

    def submit(
        self,
        current_result: Optional[AnalysisResult],
        is_correct: bool,
        suggested_stage: Optional[DiseaseStage] = None,
    ) -> Optional[AnalysisResult]:
        """
        Attach feedback to current_result.

        A suggested stage only applies to a correction; on a confirmation it
        is dropped. Submitting again for the same result overwrites.

        Returns:
            The result carrying the new feedback, or None when there is no
            current result.
        """
        if current_result is None:
            logger.debug("Feedback ignored: no current result")
            return None

        if is_correct and suggested_stage is not None:
            logger.warning(
                "Dropping suggested stage %s from confirmation of %s",
                DiseaseStage(suggested_stage).value,
                current_result.id,
            )
            suggested_stage = None

        feedback = UserFeedback(
            id=str(uuid.uuid4()),
            analysis_id=current_result.id,
            is_correct=is_correct,
            user_suggested_stage=suggested_stage,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        updated = current_result.with_feedback(feedback)
        self.history.attach_feedback(current_result.id, feedback)
        return updated
