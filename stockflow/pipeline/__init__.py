from stockflow.pipeline.classifier import classify
from stockflow.pipeline.composer import compose, fallback_summary
from stockflow.pipeline.cycle import (
    AnnouncementOutcome,
    CycleDependencies,
    CycleResult,
    process_announcement,
    run_cycle,
)
from stockflow.pipeline.extractor import DocumentExtractor

__all__ = [
    "AnnouncementOutcome",
    "CycleDependencies",
    "CycleResult",
    "DocumentExtractor",
    "classify",
    "compose",
    "fallback_summary",
    "process_announcement",
    "run_cycle",
]
