"""Tests for ClassificationOrchestrator."""

import asyncio

import pytest

from emotion_insights.constants import (
    EMOTION_LABELS,
    SENTIMENT_LABELS,
    TOPIC_LABELS,
    URGENCY_LABELS,
)
from emotion_insights.models import Utterance
from emotion_insights.orchestrator import (
    BATCH_FALLBACKS,
    INTERACTIVE_FALLBACKS,
    ClassificationOrchestrator,
)

from .conftest import FakeClassifier, keyword_script, ranked


def _utterances(*texts: str) -> list[Utterance]:
    return [Utterance(text=text, index=i) for i, text in enumerate(texts)]


async def test_classifies_all_four_dimensions(fake_classifier):
    orchestrator = ClassificationOrchestrator(classifier=fake_classifier)

    (item,) = await orchestrator.classify_all(
        utterances=_utterances("I am so angry, this bill is urgent")
    )

    assert item.sentiment.label == "negative"
    assert item.sentiment.score == pytest.approx(0.8)
    assert item.emotion.label == "anger"
    assert item.urgency.label == "high"
    assert item.topic_labels[0] == "billing"
    assert len(item.topics) == 3
    assert [t.score for t in item.topics] == sorted(
        (t.score for t in item.topics), reverse=True
    )


async def test_requests_each_fixed_label_set(fake_classifier):
    orchestrator = ClassificationOrchestrator(classifier=fake_classifier)

    await orchestrator.classify_utterance(utterance=Utterance(text="hello there", index=0))

    requested = {labels for _, labels in fake_classifier.calls}
    assert requested == {SENTIMENT_LABELS, EMOTION_LABELS, URGENCY_LABELS, TOPIC_LABELS}


async def test_preserves_order_and_limits_concurrency(fake_classifier):
    orchestrator = ClassificationOrchestrator(classifier=fake_classifier)
    texts = [f"message number {i}" for i in range(6)]

    classified = await orchestrator.classify_all(utterances=_utterances(*texts))

    assert [c.utterance.text for c in classified] == texts
    assert fake_classifier.max_in_flight == 4
    assert len(fake_classifier.calls) == 24


async def test_reports_progress_after_each_utterance(fake_classifier):
    orchestrator = ClassificationOrchestrator(classifier=fake_classifier)
    progress: list[float] = []

    await orchestrator.classify_all(
        utterances=_utterances("first one", "second one", "third one", "fourth one"),
        progress_callback=progress.append,
    )

    assert progress == [0.25, 0.5, 0.75, 1.0]


async def test_failing_classifier_yields_batch_fallbacks(failing_classifier):
    orchestrator = ClassificationOrchestrator(classifier=failing_classifier)

    classified = await orchestrator.classify_all(
        utterances=_utterances("first one", "second one")
    )

    assert len(classified) == 2
    for item in classified:
        assert item.sentiment == BATCH_FALLBACKS.sentiment
        assert (item.sentiment.label, item.sentiment.score) == ("neutral", 0.5)
        assert (item.emotion.label, item.emotion.score) == ("neutral", 0.5)
        assert (item.urgency.label, item.urgency.score) == ("low", 0.5)
        assert [(t.label, t.score) for t in item.topics] == [("general", 0.5)]


async def test_interactive_policy_uses_medium_urgency(failing_classifier):
    orchestrator = ClassificationOrchestrator(
        classifier=failing_classifier, fallbacks=INTERACTIVE_FALLBACKS
    )

    item = await orchestrator.classify_utterance(utterance=Utterance(text="help me", index=0))

    assert item.urgency.label == "medium"
    assert item.sentiment.label == "neutral"


async def test_only_the_failing_call_falls_back():
    def script(text, candidate_labels):
        if tuple(candidate_labels) == EMOTION_LABELS:
            raise TimeoutError("classifier timed out")
        return keyword_script(text, candidate_labels)

    orchestrator = ClassificationOrchestrator(classifier=FakeClassifier(script))
    item = await orchestrator.classify_utterance(
        utterance=Utterance(text="thanks, this is great", index=0)
    )

    assert item.sentiment.label == "positive"
    assert item.emotion == BATCH_FALLBACKS.emotion
    assert item.topic_labels[0] == "question"


@pytest.mark.parametrize(
    "bad_response",
    [
        {"labels": [], "scores": []},
        {"labels": ["positive"], "scores": [0.5, 0.5]},
        {"labels": ["positive"], "scores": [1.5]},
        {"sequence": "no labels here"},
        "not a mapping",
        None,
    ],
)
async def test_malformed_responses_fall_back(bad_response):
    orchestrator = ClassificationOrchestrator(
        classifier=FakeClassifier(lambda text, labels: bad_response)
    )

    item = await orchestrator.classify_utterance(utterance=Utterance(text="hello", index=0))

    assert item.sentiment == BATCH_FALLBACKS.sentiment
    assert item.urgency == BATCH_FALLBACKS.urgency


async def test_labels_outside_the_candidate_set_fall_back():
    def script(text, candidate_labels):
        labels = ["ecstatic", *candidate_labels]
        return ranked(labels, "ecstatic")

    orchestrator = ClassificationOrchestrator(classifier=FakeClassifier(script))
    item = await orchestrator.classify_utterance(utterance=Utterance(text="hello", index=0))

    assert item.sentiment == BATCH_FALLBACKS.sentiment
    assert item.topics == (BATCH_FALLBACKS.topic,)


async def test_list_wrapped_raw_result_is_accepted():
    def script(text, candidate_labels):
        return [ranked(candidate_labels, candidate_labels[-1])]

    orchestrator = ClassificationOrchestrator(classifier=FakeClassifier(script))
    item = await orchestrator.classify_utterance(utterance=Utterance(text="hello", index=0))

    assert item.sentiment.label == SENTIMENT_LABELS[-1]
    assert item.urgency.label == URGENCY_LABELS[-1]


async def test_cancellation_is_not_swallowed():
    async def hang(text, candidate_labels):
        await asyncio.sleep(10)

    class HangingClassifier:
        async def classify(self, text, candidate_labels):
            await hang(text, candidate_labels)

    orchestrator = ClassificationOrchestrator(classifier=HangingClassifier())
    task = asyncio.create_task(
        orchestrator.classify_all(utterances=_utterances("hello there"))
    )
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
