"""Presentation helpers: percentages and terminal tables for analysis results."""

from collections.abc import Mapping

from rich.console import Console
from rich.table import Table

from .models import AnalysisReport, ClassifiedUtterance


def to_percentages(counts: Mapping[str, int], total: int) -> dict[str, float]:
    """Convert label counts to percentages of total, rounded to one decimal.

    Args:
        counts: Count per label.
        total: Number of utterances the counts were taken over.

    Returns:
        dict[str, float]: Percentage per label (all zero when total is zero).
    """
    if total <= 0:
        return {label: 0.0 for label in counts}
    return {label: round(count * 100 / total, 1) for label, count in counts.items()}


def _distribution_table(title: str, counts: Mapping[str, int], total: int) -> Table:
    table = Table(title=title)
    table.add_column("Label")
    table.add_column("Count", justify="right")
    table.add_column("%", justify="right")

    percentages = to_percentages(counts, total)
    for label, count in counts.items():
        table.add_row(label, str(count), f"{percentages[label]:.1f}")
    return table


def render_report(report: AnalysisReport, console: Console) -> None:
    """Print a report as summary tables, risks, suggestions and timeline."""
    summary = report.summary
    console.print(
        f"[bold]{summary.total}[/bold] utterances from {report.source_kind} "
        f"input in {report.processing_time_ms} ms"
    )

    console.print(_distribution_table("Sentiment", summary.sentiment, summary.total))
    console.print(_distribution_table("Emotion", summary.emotion, summary.total))
    console.print(_distribution_table("Urgency", summary.urgency, summary.total))
    if summary.topics:
        console.print(_distribution_table("Topics", summary.topics, summary.total))

    if report.high_risk_segments:
        risks = Table(title="High-Risk Segments")
        risks.add_column("When")
        risks.add_column("Tone %", justify="right")
        risks.add_column("Urgency")
        risks.add_column("Topics")
        risks.add_column("Suggested Action")
        for segment in report.high_risk_segments:
            risks.add_row(
                f"{segment.start_time} - {segment.end_time}",
                str(segment.negative_tone),
                segment.urgency_level,
                ", ".join(segment.affected_topics),
                segment.suggested_action,
            )
        console.print(risks)

    timeline = Table(title="Emotion Timeline")
    timeline.add_column("Time")
    timeline.add_column("Positive", justify="right")
    timeline.add_column("Negative", justify="right")
    timeline.add_column("Neutral", justify="right")
    timeline.add_column("Anger", justify="right")
    timeline.add_column("Joy", justify="right")
    for bucket in report.emotion_timeline:
        timeline.add_row(
            bucket.time,
            str(bucket.sentiment.get("positive", 0)),
            str(bucket.sentiment.get("negative", 0)),
            str(bucket.sentiment.get("neutral", 0)),
            str(bucket.emotion.get("anger", 0)),
            str(bucket.emotion.get("joy", 0)),
        )
    console.print(timeline)

    console.print("[bold]Improvement Suggestions[/bold]")
    for suggestion in report.improvement_suggestions:
        console.print(f"  • {suggestion}")


def render_classification(item: ClassifiedUtterance, console: Console) -> None:
    """Print the four classifications of a single utterance."""
    table = Table(title="Classification")
    table.add_column("Dimension")
    table.add_column("Label")
    table.add_column("Score", justify="right")

    table.add_row("sentiment", item.sentiment.label, f"{item.sentiment.score:.2f}")
    table.add_row("emotion", item.emotion.label, f"{item.emotion.score:.2f}")
    table.add_row("urgency", item.urgency.label, f"{item.urgency.score:.2f}")
    for topic in item.topics:
        table.add_row("topic", topic.label, f"{topic.score:.2f}")

    console.print(table)
