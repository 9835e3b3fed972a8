"""Run a full transcript analysis: parse, classify, aggregate, assemble."""

import time
from dataclasses import dataclass

from loguru import logger

from .aggregator import aggregate
from .classifiers.base import ZeroShotClassifier
from .constants import MIN_TEXT_LENGTH, MS_PER_SECOND, LogMessage
from .errors import TranscriptParseError
from .models import AnalysisReport, ClassifiedUtterance, Utterance
from .orchestrator import (
    INTERACTIVE_FALLBACKS,
    ClassificationOrchestrator,
    ProgressCallback,
)
from .parsers import parse_transcript
from .parsers.base import is_usable_text
from .report import assemble_report


@dataclass(frozen=True)
class AnalysisRun:
    """A report together with the classified utterances it was built from."""

    report: AnalysisReport
    utterances: tuple[ClassifiedUtterance, ...]


class TranscriptAnalyzer:
    """Analyzes transcripts for sentiment, emotion, urgency and topics.

    Each call is an independent run: nothing is cached between runs, and a
    fatal input error (unknown kind, missing CSV text column, invalid JSON)
    propagates without producing a partial report.

    Attributes:
        classifier: Zero-shot classifier shared by both orchestrators.
        orchestrator: Batch orchestrator (urgency fallback ``low``).
        interactive_orchestrator: Single-text orchestrator (urgency fallback ``medium``).
    """

    def __init__(self, *, classifier: ZeroShotClassifier):
        self.classifier = classifier
        self.orchestrator = ClassificationOrchestrator(classifier=classifier)
        self.interactive_orchestrator = ClassificationOrchestrator(
            classifier=classifier, fallbacks=INTERACTIVE_FALLBACKS
        )

    async def run_async(
        self,
        *,
        raw: bytes | str,
        source_kind: str,
        progress_callback: ProgressCallback | None = None,
    ) -> AnalysisRun:
        """Analyze raw input and keep the per-utterance classifications.

        Args:
            raw: Raw file bytes or pasted text.
            source_kind: One of csv, json, plain-text, chat-text.
            progress_callback: Receives processed/total after each utterance.

        Returns:
            AnalysisRun: The report plus the classified utterances.
        """
        started = time.perf_counter()

        parsed = parse_transcript(raw, source_kind)
        classified = await self.orchestrator.classify_all(
            utterances=parsed.utterances, progress_callback=progress_callback
        )
        aggregates = aggregate(classified)

        elapsed_ms = round((time.perf_counter() - started) * MS_PER_SECOND)
        report = assemble_report(
            aggregates=aggregates,
            source_kind=source_kind,
            processing_time_ms=elapsed_ms,
            truncated=parsed.truncated,
        )
        logger.success(LogMessage.REPORT_READY.format(len(classified), elapsed_ms))

        return AnalysisRun(report=report, utterances=classified)

    async def analyze_async(
        self,
        *,
        raw: bytes | str,
        source_kind: str,
        progress_callback: ProgressCallback | None = None,
    ) -> AnalysisReport:
        """Analyze raw input and return only the report."""
        run = await self.run_async(
            raw=raw, source_kind=source_kind, progress_callback=progress_callback
        )
        return run.report

    async def classify_text(self, *, text: str) -> ClassifiedUtterance:
        """Classify a single pasted snippet as one utterance.

        Args:
            text: Text to classify.

        Returns:
            ClassifiedUtterance: Classification with the interactive fallbacks.

        Raises:
            TranscriptParseError: If the text is shorter than three characters.
        """
        if not is_usable_text(text):
            raise TranscriptParseError(
                f"Text must be at least {MIN_TEXT_LENGTH} characters long"
            )
        utterance = Utterance(text=text.strip(), index=0)
        return await self.interactive_orchestrator.classify_utterance(
            utterance=utterance
        )
