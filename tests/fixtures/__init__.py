"""Test fixtures for PhytoScan."""

from tests.fixtures.mocks import (
    MockClaudeService,
    MockQualityAnalyzer,
    FailingKeyValueStore,
)

__all__ = [
    "MockClaudeService",
    "MockQualityAnalyzer",
    "FailingKeyValueStore",
]
