"""Export analysis reports and classified utterances to disk."""

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import polars as pl
from loguru import logger

from .constants import JSON_INDENT, LogMessage, UtteranceColumn
from .models import AnalysisReport, ClassifiedUtterance


class ReportStorage:
    """Handles writing analysis results to files on request."""

    def save_report(self, *, report: AnalysisReport, filepath: Path | str) -> None:
        """Save an analysis report to a JSON file.

        Args:
            report: Report to save.
            filepath: Path where the JSON file should be saved.
        """
        filepath = Path(filepath)

        with filepath.open("w") as f:
            json.dump(report.to_dict(), f, indent=JSON_INDENT, default=str)

        logger.success(LogMessage.SAVED_REPORT.format(filepath))

    def save_utterances_csv(
        self,
        *,
        utterances: Sequence[ClassifiedUtterance],
        filepath: Path | str,
    ) -> None:
        """Save classified utterances to a CSV file using Polars.

        One row per utterance; topics are joined with ``|``.

        Args:
            utterances: Classified utterances in conversation order.
            filepath: Path where the CSV file should be saved.
        """
        filepath = Path(filepath)

        rows: list[dict[str, Any]] = [
            {
                UtteranceColumn.INDEX.value: item.index,
                UtteranceColumn.SPEAKER.value: item.utterance.speaker,
                UtteranceColumn.TIMESTAMP.value: item.timestamp,
                UtteranceColumn.TEXT.value: item.utterance.text,
                UtteranceColumn.SENTIMENT.value: str(item.sentiment.label),
                UtteranceColumn.SENTIMENT_SCORE.value: item.sentiment.score,
                UtteranceColumn.EMOTION.value: str(item.emotion.label),
                UtteranceColumn.EMOTION_SCORE.value: item.emotion.score,
                UtteranceColumn.URGENCY.value: str(item.urgency.label),
                UtteranceColumn.URGENCY_SCORE.value: item.urgency.score,
                UtteranceColumn.TOPICS.value: "|".join(item.topic_labels),
            }
            for item in utterances
        ]

        if not rows:
            logger.warning("No classified utterances to save to CSV")
            return

        df = pl.DataFrame(rows)
        df.write_csv(filepath)

        logger.success(LogMessage.SAVED_UTTERANCES.format(len(df), filepath))
