"""Tests for MergedSettings overrides."""

from __future__ import annotations

import json

from workvisor import settings as default_settings
from workvisor.local.config import MergedSettings


class TestMergedSettings:
    def test_defaults_without_overrides_file(self, tmp_path):
        merged = MergedSettings(overrides_path=tmp_path / "missing.json")

        assert merged.SUPERVISOR_PORT == default_settings.SUPERVISOR_PORT
        assert merged.OUTPUT_READ_CHUNK_SIZE == default_settings.OUTPUT_READ_CHUNK_SIZE

    def test_whitelisted_overrides_are_coerced(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text(json.dumps({
            "AUTOSTART": "false",
            "OUTPUT_READ_CHUNK_SIZE": "8192",
            "LOKI_URL": "http://loki:3100",
        }))

        merged = MergedSettings(overrides_path=path)

        assert merged.AUTOSTART is False
        assert merged.OUTPUT_READ_CHUNK_SIZE == 8192
        assert merged.LOKI_URL == "http://loki:3100"

    def test_non_modifiable_and_unknown_keys_are_ignored(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text(json.dumps({"SUPERVISOR_PORT": 1, "NOT_A_SETTING": True}))

        merged = MergedSettings(overrides_path=path)

        assert merged.SUPERVISOR_PORT == default_settings.SUPERVISOR_PORT
        assert not hasattr(merged, "NOT_A_SETTING")

    def test_unconvertible_value_keeps_default(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text(json.dumps({"OUTPUT_READ_CHUNK_SIZE": "lots"}))

        merged = MergedSettings(overrides_path=path)

        assert merged.OUTPUT_READ_CHUNK_SIZE == default_settings.OUTPUT_READ_CHUNK_SIZE

    def test_malformed_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text("{not json")

        merged = MergedSettings(overrides_path=path)

        assert merged.AUTOSTART == default_settings.AUTOSTART

    def test_as_dict_lists_uppercase_settings(self, tmp_path):
        settings = MergedSettings(overrides_path=tmp_path / "missing.json").as_dict()

        assert "SUPERVISOR_HOST" in settings
        assert all(key.isupper() for key in settings)
