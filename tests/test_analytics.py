"""Tests for AnalyticsRecorder and JsonAnalyticsStore."""
import json
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from conftest import FakeNow

from social_uploader.protocols import IAnalyticsSink, IAnalyticsStore
from social_uploader.services.analytics import AnalyticsRecorder
from social_uploader.services.analytics_store import JsonAnalyticsStore


@pytest.fixture
def now():
    return FakeNow(datetime(2024, 1, 1, 12, 0, 0))


class TestAnalyticsRecorder:
    def test_starts_empty(self):
        snap = AnalyticsRecorder().snapshot()
        assert snap.total_uploads == 0
        assert snap.successful_uploads == {}
        assert snap.upload_history == []

    def test_counts_and_rates(self, now):
        recorder = AnalyticsRecorder(now=now)
        recorder.record_upload("youtube", True)
        recorder.record_upload("youtube", False, "quota_exceeded")
        recorder.record_upload("youtube", False, "quota_exceeded")
        recorder.record_upload("tiktok", True)

        snap = recorder.snapshot()
        assert snap.total_uploads == 4
        assert snap.successful_uploads == {"youtube": 1, "tiktok": 1}
        assert snap.failed_uploads == {"youtube": 2}
        assert snap.total_successful == 2
        assert snap.total_failed == 2

        youtube = snap.platform_performance["youtube"]
        assert youtube["total_attempts"] == 3
        assert youtube["success_rate"] == pytest.approx(1 / 3)
        assert youtube["common_errors"] == {"quota_exceeded": 2}
        assert snap.platform_performance["tiktok"]["success_rate"] == 1.0

    def test_total_matches_success_plus_failure(self):
        recorder = AnalyticsRecorder()
        for i in range(7):
            recorder.record_upload("youtube", i % 3 == 0, "err")
        snap = recorder.snapshot()
        assert snap.total_uploads == snap.total_successful + snap.total_failed

    def test_last_success_timestamp(self, now):
        recorder = AnalyticsRecorder(now=now)
        recorder.record_upload("youtube", True)
        now.advance(minutes=5)
        recorder.record_upload("youtube", False, "boom")

        perf = recorder.snapshot().platform_performance["youtube"]
        assert perf["last_success"] == "2024-01-01T12:00:00"
        assert perf["last_upload"] == "2024-01-01T12:05:00"

    def test_snapshot_is_idempotent(self):
        recorder = AnalyticsRecorder()
        recorder.record_upload("youtube", True)
        assert recorder.snapshot() == recorder.snapshot()

    def test_snapshot_is_detached(self):
        recorder = AnalyticsRecorder()
        recorder.record_upload("youtube", True)
        snap = recorder.snapshot()

        snap.successful_uploads["youtube"] = 99
        recorder.record_upload("youtube", True)

        assert recorder.snapshot().successful_uploads["youtube"] == 2
        assert snap.total_uploads == 1

    def test_record_batch_appends_history(self, now):
        recorder = AnalyticsRecorder(now=now)
        summary = {"clips_count": 2, "results": {"youtube": ["u1"]}}
        recorder.record_batch(summary)
        summary["results"]["youtube"].append("mutated")

        history = recorder.snapshot().upload_history
        assert len(history) == 1
        assert history[0]["timestamp"] == "2024-01-01T12:00:00"
        assert history[0]["results"] == {"youtube": ["u1"]}

    def test_flushes_to_store(self):
        store = MagicMock()
        store.load.return_value = None
        recorder = AnalyticsRecorder(store=store)

        recorder.record_upload("youtube", True)
        recorder.record_batch({"clips_count": 1})

        assert store.save.call_count == 2
        saved = store.save.call_args[0][0]
        assert saved["total_uploads"] == 1

    def test_loads_from_store(self):
        store = MagicMock()
        store.load.return_value = {
            "total_uploads": 3,
            "successful_uploads": {"youtube": 3},
            "platform_performance": {"youtube": {"total_attempts": 3, "success_rate": 1.0, "extra": 1}},
        }
        recorder = AnalyticsRecorder(store=store)

        recorder.record_upload("youtube", False, "err")

        snap = recorder.snapshot()
        assert snap.total_uploads == 4
        assert snap.platform_performance["youtube"]["success_rate"] == pytest.approx(0.75)

    def test_satisfies_sink_protocol(self):
        assert isinstance(AnalyticsRecorder(), IAnalyticsSink)


class TestJsonAnalyticsStore:
    def test_missing_file(self, tmp_path):
        assert JsonAnalyticsStore(tmp_path / "none.json").load() is None

    def test_round_trip_through_recorder(self, tmp_path):
        path = tmp_path / "nested" / "analytics.json"
        recorder = AnalyticsRecorder(store=JsonAnalyticsStore(path))
        recorder.record_upload("youtube", True)
        recorder.record_upload("tiktok", False, "quota_exceeded")

        reloaded = AnalyticsRecorder(store=JsonAnalyticsStore(path)).snapshot()

        assert reloaded == recorder.snapshot()
        assert json.loads(path.read_text())["total_uploads"] == 2

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "analytics.json"
        path.write_text("{not json")
        assert JsonAnalyticsStore(path).load() is None

    def test_non_object_file(self, tmp_path):
        path = tmp_path / "analytics.json"
        path.write_text("[1, 2, 3]")
        assert JsonAnalyticsStore(path).load() is None

    def test_unserializable_data_is_logged(self, tmp_path):
        store = JsonAnalyticsStore(tmp_path / "analytics.json")
        store.save({"bad": object()})

    def test_satisfies_store_protocol(self, tmp_path):
        assert isinstance(JsonAnalyticsStore(tmp_path / "a.json"), IAnalyticsStore)
