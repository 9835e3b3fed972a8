"""Transcript emotion analysis package."""

from .aggregator import aggregate
from .analyzer import AnalysisRun, TranscriptAnalyzer
from .classifiers import (
    ClassificationResult,
    ClassifierConfig,
    LocalZeroShotClassifier,
    RemoteZeroShotClassifier,
)
from .models import AnalysisReport, ClassifiedUtterance, LabelScore, Utterance
from .orchestrator import ClassificationOrchestrator
from .parsers import detect_source_kind, parse_transcript
from .report import assemble_report
from .storage import ReportStorage

__all__ = [
    "AnalysisReport",
    "AnalysisRun",
    "ClassificationOrchestrator",
    "ClassificationResult",
    "ClassifiedUtterance",
    "ClassifierConfig",
    "LabelScore",
    "LocalZeroShotClassifier",
    "RemoteZeroShotClassifier",
    "ReportStorage",
    "TranscriptAnalyzer",
    "Utterance",
    "aggregate",
    "assemble_report",
    "detect_source_kind",
    "parse_transcript",
]
