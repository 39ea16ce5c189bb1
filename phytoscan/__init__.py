"""PhytoScan: leaf photo disease diagnosis with a feedback-tracked history."""

__version__ = "0.1.0"
