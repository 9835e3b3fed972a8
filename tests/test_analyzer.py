"""End-to-end tests for TranscriptAnalyzer with a scripted classifier."""

import json

import pytest

from emotion_insights.analyzer import TranscriptAnalyzer
from emotion_insights.constants import SuggestedAction, Suggestion
from emotion_insights.errors import (
    MalformedInputError,
    MissingColumnError,
    TranscriptParseError,
    UnsupportedFormatError,
)

CHAT_TRANSCRIPT = (
    "[09:15] Alice: I am really upset about this.\n"
    "Bob: I understand, let's fix it."
)


async def test_chat_transcript_report(fake_classifier):
    analyzer = TranscriptAnalyzer(classifier=fake_classifier)

    report = await analyzer.analyze_async(raw=CHAT_TRANSCRIPT, source_kind="chat-text")

    assert report.summary.total == 2
    assert report.summary.sentiment["negative"] == 1
    assert report.summary.sentiment["neutral"] == 1
    assert report.source_kind == "chat-text"
    assert report.processing_time_ms >= 0
    assert report.truncated is False

    (segment,) = report.high_risk_segments
    assert segment.start_time == segment.end_time == "09:15"
    assert segment.negative_tone == 80
    assert segment.suggested_action == SuggestedAction.ADDRESS_CONCERNS
    assert segment.excerpt == "I am really upset about this."

    assert [bucket.time for bucket in report.emotion_timeline] == ["09:15", "10%"]
    assert report.improvement_suggestions == (Suggestion.SENTIMENT_REVIEW,)


async def test_run_keeps_classified_utterances_in_order(fake_classifier):
    analyzer = TranscriptAnalyzer(classifier=fake_classifier)
    raw = "text\nthanks so much\nthis charge is wrong\nplease call me right now\n"

    run = await analyzer.run_async(raw=raw, source_kind="csv")

    assert [item.index for item in run.utterances] == [0, 1, 2]
    assert run.utterances[1].topic_labels[0] == "billing"
    assert run.utterances[2].urgency.label == "high"
    assert run.report.summary.urgency["high"] == 1


async def test_progress_reaches_completion(fake_classifier):
    analyzer = TranscriptAnalyzer(classifier=fake_classifier)
    progress: list[float] = []

    await analyzer.analyze_async(
        raw=json.dumps(["first message", "second message"]),
        source_kind="json",
        progress_callback=progress.append,
    )

    assert progress == [0.5, 1.0]


async def test_failing_classifier_still_produces_report(failing_classifier):
    analyzer = TranscriptAnalyzer(classifier=failing_classifier)

    report = await analyzer.analyze_async(
        raw="Where is my order? It has been two weeks.", source_kind="plain-text"
    )

    assert report.summary.total == 2
    assert report.summary.sentiment["neutral"] == 2
    assert report.summary.urgency["low"] == 2
    assert report.summary.topics == {"general": 2}
    assert report.high_risk_segments == ()
    assert report.improvement_suggestions == (Suggestion.LOOKS_GOOD,)


async def test_empty_input_produces_empty_report(fake_classifier):
    analyzer = TranscriptAnalyzer(classifier=fake_classifier)

    report = await analyzer.analyze_async(raw="\n\n", source_kind="chat-text")

    assert report.summary.total == 0
    assert report.emotion_timeline == ()
    assert report.improvement_suggestions == (Suggestion.LOOKS_GOOD,)
    assert fake_classifier.calls == []


async def test_truncation_flag_reaches_report(fake_classifier):
    analyzer = TranscriptAnalyzer(classifier=fake_classifier)
    raw = "\n".join(f"line number {i}" for i in range(105))

    report = await analyzer.analyze_async(raw=raw, source_kind="chat-text")

    assert report.summary.total == 100
    assert report.truncated is True
    assert report.to_dict()["truncated"] is True


@pytest.mark.parametrize(
    ("raw", "source_kind", "error"),
    [
        ("id,speaker\n1,Ann\n", "csv", MissingColumnError),
        ("[not json", "json", MalformedInputError),
        ("whatever", "xml", UnsupportedFormatError),
    ],
)
async def test_fatal_input_errors_propagate(fake_classifier, raw, source_kind, error):
    analyzer = TranscriptAnalyzer(classifier=fake_classifier)

    with pytest.raises(error):
        await analyzer.analyze_async(raw=raw, source_kind=source_kind)

    assert fake_classifier.calls == []


async def test_classify_text_returns_labels(fake_classifier):
    analyzer = TranscriptAnalyzer(classifier=fake_classifier)

    item = await analyzer.classify_text(text="  I am furious about this bill  ")

    assert item.utterance.text == "I am furious about this bill"
    assert item.index == 0
    assert item.emotion.label == "anger"
    assert item.topic_labels[0] == "billing"


async def test_classify_text_uses_medium_urgency_fallback(failing_classifier):
    analyzer = TranscriptAnalyzer(classifier=failing_classifier)

    item = await analyzer.classify_text(text="anything at all")

    assert item.urgency.label == "medium"


async def test_classify_text_rejects_short_text(fake_classifier):
    analyzer = TranscriptAnalyzer(classifier=fake_classifier)

    with pytest.raises(TranscriptParseError):
        await analyzer.classify_text(text=" hi ")
