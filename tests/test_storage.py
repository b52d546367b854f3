"""
Tests for JSON input and output helpers.
"""

import json
import os

import pytest

from instmatch.env import load_env
from instmatch.storage import load_rows, save_results


class TestLoadRows:

    def test_missing_file(self, tmp_path):
        assert load_rows(tmp_path / "nope.json") == []

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("  \n", encoding="utf-8")
        assert load_rows(path) == []

    def test_list(self, devices_file, device_rows):
        assert load_rows(devices_file) == device_rows

    def test_single_object_wrapped(self, tmp_path):
        path = tmp_path / "one.json"
        path.write_text('{"name": "강남구보건소"}', encoding="utf-8")
        assert load_rows(path) == [{"name": "강남구보건소"}]

    def test_scalar_rejected(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("42", encoding="utf-8")
        with pytest.raises(ValueError):
            load_rows(path)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_rows(path)


class TestSaveResults:

    def test_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "out" / "nested" / "matches.json"
        save_results(path, {"T-1": {"matches": []}})
        assert json.loads(path.read_text(encoding="utf-8")) == {"T-1": {"matches": []}}

    def test_korean_not_escaped(self, tmp_path):
        path = tmp_path / "matches.json"
        save_results(path, {"name": "강남구보건소"})
        assert "강남구보건소" in path.read_text(encoding="utf-8")


class TestLoadEnv:

    def test_missing_file(self, tmp_path):
        assert load_env(tmp_path / ".env") is False

    def test_existing_environment_wins(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("INSTMATCH_TOP_N=3\n", encoding="utf-8")
        monkeypatch.setenv("INSTMATCH_TOP_N", "7")

        load_env(env_file)

        assert os.environ["INSTMATCH_TOP_N"] == "7"

    def test_loads_new_values(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("INSTMATCH_CANDIDATE_LIMIT=25\n", encoding="utf-8")
        # Registers the variable for restore; load_dotenv only fills unset keys
        monkeypatch.setenv("INSTMATCH_CANDIDATE_LIMIT", "")
        monkeypatch.delenv("INSTMATCH_CANDIDATE_LIMIT")

        assert load_env(env_file) is True

        assert os.environ["INSTMATCH_CANDIDATE_LIMIT"] == "25"

    def test_default_path_is_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_env() is False
