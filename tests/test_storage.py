"""Tests for ReportStorage file exports."""

import json

import polars as pl

from emotion_insights.aggregator import aggregate
from emotion_insights.report import assemble_report
from emotion_insights.storage import ReportStorage


def test_save_report_writes_json(tmp_path, make_classified):
    classified = [make_classified(0, sentiment="negative", timestamp="10:00"), make_classified(1)]
    report = assemble_report(
        aggregates=aggregate(classified), source_kind="csv", processing_time_ms=12
    )
    filepath = tmp_path / "report.json"

    ReportStorage().save_report(report=report, filepath=filepath)

    data = json.loads(filepath.read_text())
    assert data["source_kind"] == "csv"
    assert data["processing_time_ms"] == 12
    assert data["summary"]["total"] == 2
    assert data["high_risk_segments"][0]["start_time"] == "10:00"
    assert data == json.loads(json.dumps(report.to_dict()))


def test_save_utterances_csv_one_row_per_utterance(tmp_path, make_classified):
    classified = [
        make_classified(3, sentiment="positive", topics=("billing", "refund")),
        make_classified(7, urgency="high", timestamp="11:30"),
    ]
    filepath = tmp_path / "utterances.csv"

    ReportStorage().save_utterances_csv(utterances=classified, filepath=filepath)

    df = pl.read_csv(filepath)
    assert df.height == 2
    assert df["index"].to_list() == [3, 7]
    assert df["sentiment"].to_list() == ["positive", "neutral"]
    assert df["urgency"].to_list() == ["low", "high"]
    assert df["topics"].to_list() == ["billing|refund", "question"]


def test_save_utterances_csv_skips_empty_runs(tmp_path):
    filepath = tmp_path / "empty.csv"

    ReportStorage().save_utterances_csv(utterances=[], filepath=filepath)

    assert not filepath.exists()
