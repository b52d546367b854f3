"""
Tests for configuration defaults and environment overrides.
"""

import dataclasses

import pytest

from instmatch.config import DEFAULT_CONFIG, ConfigError, MatchConfig, load_config


class TestDefaults:

    def test_thresholds(self):
        assert DEFAULT_CONFIG.address_mode.threshold == 50
        assert DEFAULT_CONFIG.no_address_mode.threshold == 70

    def test_weights(self):
        mode = DEFAULT_CONFIG.address_mode
        assert (mode.name_weight, mode.address_weight, mode.region_weight) == (15, 70, 15)
        mode = DEFAULT_CONFIG.no_address_mode
        assert (mode.name_weight, mode.address_weight, mode.region_weight) == (60, 0, 40)

    def test_suffix_order(self):
        suffixes = DEFAULT_CONFIG.institution_suffixes
        assert suffixes.index("보건지소") < suffixes.index("보건소")

    def test_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.top_n = 3


class TestLoadConfig:

    def test_no_overrides(self):
        assert load_config({}) == DEFAULT_CONFIG

    def test_threshold_overrides(self):
        config = load_config({
            "INSTMATCH_ADDRESS_THRESHOLD": "55",
            "INSTMATCH_NAME_REGION_THRESHOLD": " 75 ",
        })
        assert config.address_mode.threshold == 55
        assert config.address_mode.address_weight == 70
        assert config.no_address_mode.threshold == 75
        # Defaults untouched
        assert DEFAULT_CONFIG.address_mode.threshold == 50

    def test_simple_overrides(self):
        config = load_config({
            "INSTMATCH_BONUS_MIN_ADDRESS_SCORE": "40",
            "INSTMATCH_CANDIDATE_LIMIT": "20",
            "INSTMATCH_TOP_N": "3",
            "INSTMATCH_MAX_WORKERS": "8",
        })
        assert config.bonus_min_address_score == 40
        assert config.candidate_limit == 20
        assert config.top_n == 3
        assert config.max_workers == 8

    def test_blank_value_ignored(self):
        assert load_config({"INSTMATCH_TOP_N": ""}) == DEFAULT_CONFIG

    def test_custom_base(self):
        base = MatchConfig(top_n=5)
        assert load_config({}, base=base).top_n == 5

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("INSTMATCH_TOP_N", "4")
        assert load_config().top_n == 4

    def test_not_an_integer(self):
        with pytest.raises(ConfigError, match="INSTMATCH_TOP_N"):
            load_config({"INSTMATCH_TOP_N": "ten"})

    def test_negative(self):
        with pytest.raises(ConfigError):
            load_config({"INSTMATCH_ADDRESS_THRESHOLD": "-1"})

    def test_zero_workers(self):
        with pytest.raises(ConfigError):
            load_config({"INSTMATCH_MAX_WORKERS": "0"})
