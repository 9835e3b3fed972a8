"""Data models for transcript emotion analysis."""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from types import MappingProxyType
from typing import Any

from .constants import ReportKey


@dataclass(frozen=True)
class Utterance:
    """One unit of conversation to be classified.

    Attributes:
        text: Trimmed utterance text, at least three characters long.
        index: Position of the utterance in the source input.
        speaker: Speaker name, when the input carries one.
        timestamp: Timestamp exactly as written in the input, when present.
    """

    text: str
    index: int
    speaker: str | None = None
    timestamp: str | None = None


@dataclass(frozen=True)
class ParseResult:
    """Utterances parsed from one input plus whether the input was capped.

    Attributes:
        utterances: Parsed utterances in input order.
        truncated: True when items beyond the parse cap were discarded.
    """

    utterances: tuple[Utterance, ...]
    truncated: bool = False


@dataclass(frozen=True)
class LabelScore:
    """A single label with its classifier confidence."""

    label: str
    score: float


@dataclass(frozen=True)
class ClassifiedUtterance:
    """An utterance together with its four classification outcomes.

    Attributes:
        utterance: The source utterance.
        sentiment: Top sentiment label (positive, negative, neutral).
        emotion: Top emotion label (joy, anger, fear, sadness, surprise, neutral).
        urgency: Top urgency label (high, medium, low).
        topics: Up to three topics in descending score order.
    """

    utterance: Utterance
    sentiment: LabelScore
    emotion: LabelScore
    urgency: LabelScore
    topics: tuple[LabelScore, ...]

    @property
    def index(self) -> int:
        return self.utterance.index

    @property
    def timestamp(self) -> str | None:
        return self.utterance.timestamp

    @property
    def topic_labels(self) -> list[str]:
        return [topic.label for topic in self.topics]

    def to_dict(self) -> dict[str, Any]:
        """Convert the classified utterance to a dictionary for serialization."""
        return asdict(self)


@dataclass(frozen=True)
class HighRiskSegment:
    """A conversation excerpt flagged for negative tone, anger or high urgency.

    Attributes:
        start_time: Utterance timestamp, or a synthetic "Item N" label.
        end_time: Utterance timestamp, or a synthetic "Item N+1" label.
        negative_tone: Sentiment confidence as a 0-100 integer.
        urgency_level: Urgency label of the utterance.
        affected_topics: All topic labels of the utterance.
        suggested_action: Remediation message.
        utterance_indices: Indices of the source utterances.
        excerpt: Utterance text.
    """

    start_time: str
    end_time: str
    negative_tone: int
    urgency_level: str
    affected_topics: tuple[str, ...]
    suggested_action: str
    utterance_indices: tuple[int, ...]
    excerpt: str


def _freeze_counts(instance: Any, *names: str) -> None:
    """Replace count mappings on a frozen dataclass with read-only copies."""
    for name in names:
        object.__setattr__(instance, name, MappingProxyType(dict(getattr(instance, name))))


def _counts_to_dict(instance: Any) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for f in fields(instance):
        value = getattr(instance, f.name)
        data[f.name] = dict(value) if isinstance(value, Mapping) else value
    return data


@dataclass(frozen=True)
class TimelineBucket:
    """Sentiment and emotion counts for a contiguous chunk of utterances.

    Attributes:
        time: First utterance timestamp, or a synthetic percentage marker.
        start_index: Position of the bucket's first utterance in the run.
        size: Number of utterances in the bucket.
        sentiment: Count per sentiment label.
        emotion: Count per emotion label.
    """

    time: str
    start_index: int
    size: int
    sentiment: Mapping[str, int]
    emotion: Mapping[str, int]

    def __post_init__(self) -> None:
        _freeze_counts(self, "sentiment", "emotion")

    def to_dict(self) -> dict[str, Any]:
        return _counts_to_dict(self)


@dataclass(frozen=True)
class SummaryMetrics:
    """Label counts across the whole conversation.

    Counts are raw tallies held in read-only mappings; percentage
    conversion happens when presenting.
    """

    total: int
    sentiment: Mapping[str, int]
    emotion: Mapping[str, int]
    urgency: Mapping[str, int]
    topics: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _freeze_counts(self, "sentiment", "emotion", "urgency", "topics")

    def to_dict(self) -> dict[str, Any]:
        return _counts_to_dict(self)


@dataclass(frozen=True)
class AnalysisReport:
    """Final aggregate of one analysis run.

    Attributes:
        summary: Label counts across all utterances.
        high_risk_segments: Up to five flagged segments in conversation order.
        improvement_suggestions: Heuristic suggestions in fixed order.
        emotion_timeline: Contiguous buckets of sentiment/emotion counts.
        source_kind: Declared kind of the raw input.
        processing_time_ms: Wall-clock time for parse, classify and aggregate.
        truncated: True when the parser discarded items beyond its cap.
    """

    summary: SummaryMetrics
    high_risk_segments: tuple[HighRiskSegment, ...]
    improvement_suggestions: tuple[str, ...]
    emotion_timeline: tuple[TimelineBucket, ...]
    source_kind: str
    processing_time_ms: int
    truncated: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert the report to plain JSON-serializable data.

        Returns:
            dict[str, Any]: Dictionary representation of the report.
        """
        return {
            ReportKey.SUMMARY: self.summary.to_dict(),
            ReportKey.HIGH_RISK_SEGMENTS: [
                asdict(segment) for segment in self.high_risk_segments
            ],
            ReportKey.IMPROVEMENT_SUGGESTIONS: list(self.improvement_suggestions),
            ReportKey.EMOTION_TIMELINE: [
                bucket.to_dict() for bucket in self.emotion_timeline
            ],
            ReportKey.SOURCE_KIND: self.source_kind,
            ReportKey.PROCESSING_TIME_MS: self.processing_time_ms,
            ReportKey.TRUNCATED: self.truncated,
        }
