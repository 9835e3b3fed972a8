"""Assemble the final analysis report."""

from .aggregator import Aggregates
from .models import AnalysisReport


def assemble_report(
    *,
    aggregates: Aggregates,
    source_kind: str,
    processing_time_ms: int,
    truncated: bool = False,
) -> AnalysisReport:
    """Wrap aggregation results with run metadata.

    Args:
        aggregates: Output of the aggregation engine.
        source_kind: Declared kind of the raw input.
        processing_time_ms: Elapsed wall-clock time for the run.
        truncated: Whether the parser discarded items beyond its cap.

    Returns:
        AnalysisReport: The immutable report.
    """
    return AnalysisReport(
        summary=aggregates.summary,
        high_risk_segments=aggregates.high_risk_segments,
        improvement_suggestions=aggregates.improvement_suggestions,
        emotion_timeline=aggregates.emotion_timeline,
        source_kind=str(source_kind),
        processing_time_ms=max(0, int(processing_time_ms)),
        truncated=truncated,
    )
