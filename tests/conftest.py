"""
Shared test fixtures.

Provides a scripted zero-shot classifier and factories for building
classified utterances without a model.
"""

import asyncio
from collections.abc import Callable, Sequence
from typing import Any

import pytest

from emotion_insights.classifiers.base import ClassificationResult
from emotion_insights.constants import (
    EMOTION_LABELS,
    SENTIMENT_LABELS,
    TOPIC_LABELS,
    URGENCY_LABELS,
)
from emotion_insights.models import ClassifiedUtterance, LabelScore, Utterance


def ranked(candidate_labels: Sequence[str], top: str, score: float = 0.9) -> dict[str, Any]:
    """Build a raw classifier response with ``top`` ranked first."""
    rest = [label for label in candidate_labels if label != top]
    remainder = (1.0 - score) / len(rest) if rest else 0.0
    return {"labels": [top, *rest], "scores": [score, *([remainder] * len(rest))]}


def keyword_script(text: str, candidate_labels: Sequence[str]) -> dict[str, Any]:
    """Classify by keywords so tests can predict every label."""
    lowered = text.lower()
    labels = tuple(candidate_labels)

    if labels == SENTIMENT_LABELS:
        if any(word in lowered for word in ("upset", "angry", "terrible", "broken")):
            return ranked(labels, "negative", 0.8)
        if any(word in lowered for word in ("thanks", "great", "love")):
            return ranked(labels, "positive")
        return ranked(labels, "neutral", 0.6)
    if labels == EMOTION_LABELS:
        if "angry" in lowered or "furious" in lowered:
            return ranked(labels, "anger")
        if "great" in lowered or "love" in lowered:
            return ranked(labels, "joy")
        if "upset" in lowered:
            return ranked(labels, "sadness")
        return ranked(labels, "neutral")
    if labels == URGENCY_LABELS:
        if "urgent" in lowered or "right now" in lowered:
            return ranked(labels, "high")
        return ranked(labels, "low")
    if labels == TOPIC_LABELS:
        if "bill" in lowered or "charge" in lowered:
            return ranked(labels, "billing", 0.7)
        return ranked(labels, "question", 0.5)
    raise AssertionError(f"Unexpected label set {labels}")


class FakeClassifier:
    """Zero-shot classifier driven by a script function.

    The script receives (text, candidate_labels) and returns a raw result
    or raises. Calls are recorded, and the peak number of concurrent calls
    is tracked.
    """

    def __init__(self, script: Callable[[str, Sequence[str]], Any] = keyword_script):
        self.script = script
        self.calls: list[tuple[str, tuple[str, ...]]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.entered = False
        self.exited = False

    async def classify(self, text: str, candidate_labels: Sequence[str]) -> Any:
        self.calls.append((text, tuple(candidate_labels)))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            raw = self.script(text, candidate_labels)
            if isinstance(raw, dict):
                return ClassificationResult.from_raw(raw)
            return raw
        finally:
            self.in_flight -= 1

    async def __aenter__(self) -> "FakeClassifier":
        self.entered = True
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.exited = True


@pytest.fixture
def fake_classifier():
    """A classifier that labels text by keywords."""
    return FakeClassifier()


@pytest.fixture
def failing_classifier():
    """A classifier whose every call raises."""

    def script(text: str, candidate_labels: Sequence[str]) -> Any:
        raise RuntimeError("model unavailable")

    return FakeClassifier(script)


@pytest.fixture
def make_classified():
    """Factory for ClassifiedUtterance objects with chosen labels."""

    def factory(
        index: int,
        *,
        sentiment: str = "neutral",
        emotion: str = "neutral",
        urgency: str = "low",
        topics: Sequence[str] = ("question",),
        timestamp: str | None = None,
        sentiment_score: float = 0.8,
        text: str | None = None,
    ) -> ClassifiedUtterance:
        return ClassifiedUtterance(
            utterance=Utterance(
                text=text or f"message number {index}",
                index=index,
                timestamp=timestamp,
            ),
            sentiment=LabelScore(label=sentiment, score=sentiment_score),
            emotion=LabelScore(label=emotion, score=0.7),
            urgency=LabelScore(label=urgency, score=0.6),
            topics=tuple(
                LabelScore(label=topic, score=0.5 - position * 0.1)
                for position, topic in enumerate(topics)
            ),
        )

    return factory
