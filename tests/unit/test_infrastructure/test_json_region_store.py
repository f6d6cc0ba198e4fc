"""
Unit tests for the JSON region store.
"""
import asyncio
import json

import pytest
from conftest import RecordingLogger

from answerlens.domain.common.errors import ErrorCategory
from answerlens.domain.logic.region_transform import transform
from answerlens.domain.models.geometry import LogicalRect, PhysicalRect, WindowOrigin
from answerlens.infrastructure.config.json_region_store import JsonRegionStore


class TestJsonRegionStore:

    def test_file_name_is_keyed_by_category(self, tmp_path):
        store = JsonRegionStore(str(tmp_path), RecordingLogger())

        assert store.path_for("exam").endswith("exam-region-data.json")

    def test_saved_region_survives_restart(self, tmp_path):
        rect = PhysicalRect(240, 120, 400, 160)
        first = JsonRegionStore(str(tmp_path), RecordingLogger())
        assert asyncio.run(first.save("exam", rect)).value == rect

        restarted = JsonRegionStore(str(tmp_path), RecordingLogger())
        assert restarted.get("exam") is None
        loaded = asyncio.run(restarted.load("exam"))

        assert loaded.value == rect
        assert restarted.get("exam") == rect

    def test_writes_plain_json_object(self, tmp_path):
        store = JsonRegionStore(str(tmp_path), RecordingLogger())
        store.save_sync("maze", PhysicalRect(1, 2, 3, 4))

        with open(tmp_path / "maze-region-data.json", encoding="utf-8") as f:
            assert json.load(f) == {"x": 1, "y": 2, "width": 3, "height": 4}

    def test_missing_file_means_no_region(self, tmp_path):
        store = JsonRegionStore(str(tmp_path), RecordingLogger())

        result = store.load_sync("exam")

        assert result.is_success
        assert result.value is None

    def test_corrupt_file_means_no_region(self, tmp_path):
        (tmp_path / "exam-region-data.json").write_text("{not json", encoding="utf-8")
        logger = RecordingLogger()
        store = JsonRegionStore(str(tmp_path), logger)

        result = store.load_sync("exam")

        assert result.is_success
        assert result.value is None
        assert logger.messages("warning")

    @pytest.mark.parametrize("content", [
        '{"x": 0, "y": 0, "width": -10, "height": 10}',
        '{"x": 1e999, "y": 0, "width": 10, "height": 10}',
        '{"x": 0, "y": Infinity, "width": 10, "height": 10}',
        '{"x": 0, "y": 0, "width": NaN, "height": 10}',
    ])
    def test_invalid_values_mean_no_region(self, tmp_path, content):
        (tmp_path / "exam-region-data.json").write_text(content, encoding="utf-8")
        logger = RecordingLogger()
        store = JsonRegionStore(str(tmp_path), logger)

        result = asyncio.run(store.load("exam"))

        assert result.is_success
        assert result.value is None
        assert store.get("exam") is None
        assert logger.messages("warning")

    def test_left_monitor_region_survives_restart(self, tmp_path):
        rect = transform(LogicalRect(20, 10, 200, 80), WindowOrigin(-1920, 0), 1.0)
        assert rect.left < 0
        assert JsonRegionStore(str(tmp_path), RecordingLogger()).save_sync("exam", rect).is_success

        restarted = JsonRegionStore(str(tmp_path), RecordingLogger())

        assert asyncio.run(restarted.load("exam")).value == rect

    def test_write_failure_leaves_cache_untouched(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        store = JsonRegionStore(str(blocker), RecordingLogger())

        result = store.save_sync("exam", PhysicalRect(1, 2, 3, 4))

        assert result.is_failure
        assert result.error.category == ErrorCategory.PERSISTENCE
        assert store.get("exam") is None
