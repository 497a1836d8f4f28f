"""Tests for the CSV export of the history."""

import pandas as pd

from gigsim.export import EXPORT_COLUMNS, export_csv, history_to_frame
from gigsim.history import SnapshotHistory


class TestHistoryToFrame:
    def test_columns(self, scenario_history):
        frame = history_to_frame(scenario_history)
        assert list(frame.columns) == EXPORT_COLUMNS
        assert EXPORT_COLUMNS[:10] == [
            "timestamp", "r", "e", "eta", "tau", "lambda",
            "competition", "innovation", "monitoring", "regulation",
        ]
        assert len(frame) == 4

    def test_precision(self, scenario_history):
        row = history_to_frame(scenario_history).iloc[0]
        snapshot = scenario_history[0].snapshot
        assert row["P"] == f"{snapshot.platform_profit:.2f}"
        assert row["gini_coefficient"] == f"{snapshot.gini_coefficient:.4f}"
        assert row["stress_probability"] == f"{snapshot.stress_probability:.4f}"
        assert len(row["D"].split(".")[1]) == 2

    def test_timestamp_iso(self, scenario_history):
        row = history_to_frame(scenario_history).iloc[1]
        assert row["timestamp"] == "2026-01-01T09:01:00"

    def test_lambda_column_uses_parameter(self, scenario_history):
        frame = history_to_frame(scenario_history)
        assert list(frame["lambda"]) == [h.params.lambda_ for h in scenario_history]

    def test_empty_history(self):
        frame = history_to_frame(SnapshotHistory())
        assert frame.empty
        assert list(frame.columns) == EXPORT_COLUMNS


class TestExportCsv:
    def test_writes_file(self, scenario_history, tmp_path):
        path = tmp_path / "history.csv"
        text = export_csv(scenario_history, path)
        assert path.read_text(encoding="utf-8") == text
        loaded = pd.read_csv(path)
        assert len(loaded) == 4
        assert loaded.columns[-1] == "stress_probability"

    def test_returns_text_without_path(self, scenario_history):
        text = export_csv(scenario_history)
        assert text.splitlines()[0].startswith("timestamp,r,e,eta,tau,lambda")
