"""Per-utterance orchestration of the four zero-shot classification calls."""

import asyncio
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from loguru import logger

from .classifiers.base import ClassificationResult, ZeroShotClassifier
from .constants import (
    EMOTION_LABELS,
    FALLBACK_SCORE,
    GENERAL_TOPIC,
    MAX_TOPICS_PER_UTTERANCE,
    MS_PER_SECOND,
    SENTIMENT_LABELS,
    TOPIC_LABELS,
    URGENCY_LABELS,
    ClassificationRole,
    Emotion,
    LogMessage,
    Sentiment,
    Urgency,
)
from .errors import ClassifierResponseError
from .models import ClassifiedUtterance, LabelScore, Utterance

ProgressCallback = Callable[[float], None]

# Candidate labels and how many ranked labels to keep, per role
ROLE_LABELS: dict[ClassificationRole, tuple[tuple[str, ...], int]] = {
    ClassificationRole.SENTIMENT: (SENTIMENT_LABELS, 1),
    ClassificationRole.EMOTION: (EMOTION_LABELS, 1),
    ClassificationRole.URGENCY: (URGENCY_LABELS, 1),
    ClassificationRole.TOPIC: (TOPIC_LABELS, MAX_TOPICS_PER_UTTERANCE),
}


@dataclass(frozen=True)
class FallbackPolicy:
    """Fixed low-confidence results substituted when a classification call fails."""

    sentiment: LabelScore
    emotion: LabelScore
    urgency: LabelScore
    topic: LabelScore

    def for_role(self, role: ClassificationRole) -> LabelScore:
        return getattr(self, role.value)


BATCH_FALLBACKS = FallbackPolicy(
    sentiment=LabelScore(label=Sentiment.NEUTRAL.value, score=FALLBACK_SCORE),
    emotion=LabelScore(label=Emotion.NEUTRAL.value, score=FALLBACK_SCORE),
    urgency=LabelScore(label=Urgency.LOW.value, score=FALLBACK_SCORE),
    topic=LabelScore(label=GENERAL_TOPIC, score=FALLBACK_SCORE),
)

# Single-text submissions treat an unknown urgency as medium rather than low.
INTERACTIVE_FALLBACKS = FallbackPolicy(
    sentiment=BATCH_FALLBACKS.sentiment,
    emotion=BATCH_FALLBACKS.emotion,
    urgency=LabelScore(label=Urgency.MEDIUM.value, score=FALLBACK_SCORE),
    topic=BATCH_FALLBACKS.topic,
)


class ClassificationOrchestrator:
    """Classifies utterances one at a time against a zero-shot classifier.

    Each utterance gets four concurrent calls (sentiment, emotion, urgency,
    topic) that are joined before the next utterance starts, so at most four
    calls are in flight. Every call is guarded independently: an exception
    or a malformed response is replaced by the role's fallback, and no
    utterance is ever dropped.

    Attributes:
        classifier: The zero-shot classifier to call.
        fallbacks: Results substituted for failed calls.
    """

    def __init__(
        self,
        *,
        classifier: ZeroShotClassifier,
        fallbacks: FallbackPolicy = BATCH_FALLBACKS,
    ):
        self.classifier = classifier
        self.fallbacks = fallbacks

    async def _classify_role(
        self, *, utterance: Utterance, role: ClassificationRole
    ) -> list[LabelScore]:
        """Run one classification call, substituting the fallback on failure.

        Args:
            utterance: Utterance to classify.
            role: Which label set to request.

        Returns:
            list[LabelScore]: Ranked labels kept for the role (never empty).
        """
        candidate_labels, keep = ROLE_LABELS[role]
        started = time.perf_counter()
        try:
            result = await self.classifier.classify(utterance.text, candidate_labels)
            logger.trace(
                LogMessage.CALL_TIMING.format(
                    role,
                    utterance.index,
                    round((time.perf_counter() - started) * MS_PER_SECOND),
                )
            )
            if not isinstance(result, ClassificationResult):
                result = ClassificationResult.from_raw(result)
            ranked = result.top_n(keep)
            unknown = [item.label for item in ranked if item.label not in candidate_labels]
            if unknown:
                raise ClassifierResponseError(f"Unexpected labels {unknown}")
        except Exception as e:
            logger.warning(LogMessage.FALLBACK.format(role, utterance.index, e))
            return [self.fallbacks.for_role(role)]

        return ranked

    async def classify_utterance(self, *, utterance: Utterance) -> ClassifiedUtterance:
        """Classify one utterance with its four calls issued concurrently.

        Args:
            utterance: Utterance to classify.

        Returns:
            ClassifiedUtterance: Utterance with sentiment, emotion, urgency and topics.
        """
        sentiment, emotion, urgency, topics = await asyncio.gather(
            self._classify_role(utterance=utterance, role=ClassificationRole.SENTIMENT),
            self._classify_role(utterance=utterance, role=ClassificationRole.EMOTION),
            self._classify_role(utterance=utterance, role=ClassificationRole.URGENCY),
            self._classify_role(utterance=utterance, role=ClassificationRole.TOPIC),
        )

        return ClassifiedUtterance(
            utterance=utterance,
            sentiment=sentiment[0],
            emotion=emotion[0],
            urgency=urgency[0],
            topics=tuple(topics),
        )

    async def classify_all(
        self,
        *,
        utterances: Sequence[Utterance],
        progress_callback: ProgressCallback | None = None,
    ) -> tuple[ClassifiedUtterance, ...]:
        """Classify utterances strictly in order.

        Args:
            utterances: Utterances in conversation order.
            progress_callback: Called with processed/total after each utterance.

        Returns:
            tuple[ClassifiedUtterance, ...]: One result per utterance, same order.
        """
        total = len(utterances)
        logger.info(LogMessage.CLASSIFYING.format(total, len(ROLE_LABELS)))

        classified: list[ClassifiedUtterance] = []
        for utterance in utterances:
            classified.append(await self.classify_utterance(utterance=utterance))
            logger.debug(
                LogMessage.CLASSIFIED.format(utterance.index, len(classified), total)
            )
            if progress_callback is not None:
                progress_callback(len(classified) / total)

        return tuple(classified)
