"""Aggregate classified utterances into summary counts, risks, suggestions and a timeline."""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from loguru import logger

from .constants import (
    ANGER_RATIO_THRESHOLD,
    EMOTION_LABELS,
    HIGH_URGENCY_RATIO_THRESHOLD,
    MAX_HIGH_RISK_SEGMENTS,
    NEGATIVE_RATIO_THRESHOLD,
    SENTIMENT_LABELS,
    TIMELINE_BUCKETS,
    URGENCY_LABELS,
    Emotion,
    ItemLabel,
    LogMessage,
    Sentiment,
    SuggestedAction,
    Suggestion,
    Urgency,
)
from .models import ClassifiedUtterance, HighRiskSegment, SummaryMetrics, TimelineBucket


@dataclass(frozen=True)
class Aggregates:
    """Everything the aggregation engine derives from one run."""

    summary: SummaryMetrics
    high_risk_segments: tuple[HighRiskSegment, ...]
    improvement_suggestions: tuple[str, ...]
    emotion_timeline: tuple[TimelineBucket, ...]


def count_labels(labels: Iterable[str], keys: Sequence[str] = ()) -> dict[str, int]:
    """Tally labels, starting every key in ``keys`` at zero.

    Labels outside ``keys`` are added in first-seen order.
    """
    counts = {key: 0 for key in keys}
    for label in labels:
        counts[label] = counts.get(label, 0) + 1
    return counts


def summarize(classified: Sequence[ClassifiedUtterance]) -> SummaryMetrics:
    """Count sentiment, emotion, urgency and topic labels across all utterances.

    Every topic in an utterance's topic list is counted, not only the top one.
    """
    return SummaryMetrics(
        total=len(classified),
        sentiment=count_labels((c.sentiment.label for c in classified), SENTIMENT_LABELS),
        emotion=count_labels((c.emotion.label for c in classified), EMOTION_LABELS),
        urgency=count_labels((c.urgency.label for c in classified), URGENCY_LABELS),
        topics=count_labels(label for c in classified for label in c.topic_labels),
    )


def is_high_risk(item: ClassifiedUtterance) -> bool:
    return (
        item.sentiment.label == Sentiment.NEGATIVE
        or item.emotion.label == Emotion.ANGER
        or item.urgency.label == Urgency.HIGH
    )


def suggest_action(item: ClassifiedUtterance) -> str:
    """Pick a remediation by strict priority: urgency, then anger, then sentiment."""
    if item.urgency.label == Urgency.HIGH:
        return SuggestedAction.ESCALATE.value
    if item.emotion.label == Emotion.ANGER:
        return SuggestedAction.ACKNOWLEDGE_FRUSTRATION.value
    if item.sentiment.label == Sentiment.NEGATIVE:
        return SuggestedAction.ADDRESS_CONCERNS.value
    return SuggestedAction.MONITOR.value


def to_percent(score: float) -> int:
    """Convert a 0-1 score to a 0-100 integer, rounding halves up."""
    return math.floor(score * 100 + 0.5)


def select_high_risk(
    classified: Sequence[ClassifiedUtterance],
) -> tuple[HighRiskSegment, ...]:
    """Build segments for the first five high-risk utterances, in conversation order.

    Args:
        classified: Classified utterances in conversation order.

    Returns:
        tuple[HighRiskSegment, ...]: At most five segments.
    """
    flagged = [item for item in classified if is_high_risk(item)]

    segments: list[HighRiskSegment] = []
    for item in flagged[:MAX_HIGH_RISK_SEGMENTS]:
        if item.timestamp:
            start_time = end_time = item.timestamp
        else:
            start_time = ItemLabel.ITEM.format(item.index)
            end_time = ItemLabel.ITEM.format(item.index + 1)

        segments.append(
            HighRiskSegment(
                start_time=start_time,
                end_time=end_time,
                negative_tone=to_percent(item.sentiment.score),
                urgency_level=item.urgency.label,
                affected_topics=tuple(item.topic_labels),
                suggested_action=suggest_action(item),
                utterance_indices=(item.index,),
                excerpt=item.utterance.text,
            )
        )

    return tuple(segments)


def improvement_suggestions(summary: SummaryMetrics) -> tuple[str, ...]:
    """Derive suggestions from conversation-wide label ratios.

    Each threshold is checked independently and in a fixed order; if none
    trigger, a single positive message is returned.

    Args:
        summary: Label counts for the run.

    Returns:
        tuple[str, ...]: One or more suggestions.
    """
    total = summary.total
    if total == 0:
        return (Suggestion.LOOKS_GOOD.value,)

    negative_ratio = summary.sentiment.get(Sentiment.NEGATIVE, 0) / total
    anger_ratio = summary.emotion.get(Emotion.ANGER, 0) / total
    high_urgency_ratio = summary.urgency.get(Urgency.HIGH, 0) / total

    suggestions: list[str] = []
    if negative_ratio > NEGATIVE_RATIO_THRESHOLD:
        suggestions.append(Suggestion.SENTIMENT_REVIEW.value)
    if anger_ratio > ANGER_RATIO_THRESHOLD:
        suggestions.append(Suggestion.DEESCALATION_TRAINING.value)
    if high_urgency_ratio > HIGH_URGENCY_RATIO_THRESHOLD:
        suggestions.append(Suggestion.WORKFLOW_OPTIMIZATION.value)

    return tuple(suggestions) or (Suggestion.LOOKS_GOOD.value,)


def emotion_timeline(
    classified: Sequence[ClassifiedUtterance],
) -> tuple[TimelineBucket, ...]:
    """Partition the conversation into at most ten contiguous buckets.

    Buckets advance by a fixed stride of ``max(1, total // 10)`` from the
    start; the last bucket absorbs any remainder.

    Args:
        classified: Classified utterances in conversation order.

    Returns:
        tuple[TimelineBucket, ...]: Buckets with sentiment and emotion counts.
    """
    total = len(classified)
    stride = max(1, total // TIMELINE_BUCKETS)
    bucket_count = min(TIMELINE_BUCKETS, total)

    buckets: list[TimelineBucket] = []
    for bucket_index in range(bucket_count):
        start = bucket_index * stride
        end = total if bucket_index == bucket_count - 1 else start + stride
        chunk = classified[start:end]

        buckets.append(
            TimelineBucket(
                time=chunk[0].timestamp or ItemLabel.PERCENT.format(bucket_index * 10),
                start_index=start,
                size=len(chunk),
                sentiment=count_labels((c.sentiment.label for c in chunk), SENTIMENT_LABELS),
                emotion=count_labels((c.emotion.label for c in chunk), EMOTION_LABELS),
            )
        )

    return tuple(buckets)


def aggregate(classified: Sequence[ClassifiedUtterance]) -> Aggregates:
    """Run every aggregation over the classified utterances.

    Pure function of its input: identical utterances give identical aggregates.

    Args:
        classified: Classified utterances in conversation order.

    Returns:
        Aggregates: Summary, high-risk segments, suggestions and timeline.
    """
    logger.info(LogMessage.AGGREGATING.format(len(classified)))

    summary = summarize(classified)
    return Aggregates(
        summary=summary,
        high_risk_segments=select_high_risk(classified),
        improvement_suggestions=improvement_suggestions(summary),
        emotion_timeline=emotion_timeline(classified),
    )
