"""Agreement statistics between AI diagnoses and user feedback."""
from typing import Iterable

from phytoscan.models.history import HistoryItem, ReliabilityStats


def compute_reliability_stats(items: Iterable[HistoryItem]) -> ReliabilityStats:
    """
    Count confirmed and corrected diagnoses in a history snapshot.

    accuracy is the rounded percentage of confirmations among entries that
    have feedback, and 0 when no entry has feedback yet.
    """
    items = list(items)
    if not items:
        return ReliabilityStats()

    confirmed = sum(
        1 for item in items if item.user_feedback and item.user_feedback.is_correct
    )
    corrected = sum(
        1
        for item in items
        if item.user_feedback and not item.user_feedback.is_correct
    )
    with_feedback = confirmed + corrected
    # Half-up rounding
    accuracy = int(confirmed * 100 / with_feedback + 0.5) if with_feedback else 0

    return ReliabilityStats(
        total=len(items),
        confirmed=confirmed,
        corrected=corrected,
        accuracy=accuracy,
    )
