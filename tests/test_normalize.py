"""
Tests for administrative text normalization.
"""

from instmatch.config import MatchConfig
from instmatch.normalize import (
    abbreviate_admin_units,
    normalize_admin_text,
    strip_institution_suffix,
    strip_whitespace,
)


class TestAbbreviation:
    """Administrative unit abbreviation."""

    def test_metropolitan_city(self):
        assert abbreviate_admin_units("대구광역시 중구") == "대구광시 중구"

    def test_special_city(self):
        assert abbreviate_admin_units("서울특별시 강남구") == "서울특시 강남구"

    def test_self_governing_province(self):
        assert abbreviate_admin_units("강원특별자치도") == "강원특별도"

    def test_no_admin_unit(self):
        assert abbreviate_admin_units("강남구보건소") == "강남구보건소"


class TestSuffixStripping:
    """Single-pass institutional suffix removal."""

    def test_health_center(self):
        assert strip_institution_suffix("강남구보건소") == "강남구"

    def test_branch_health_center_before_health_center(self):
        assert strip_institution_suffix("의흥면보건지소") == "의흥면"

    def test_only_one_suffix_removed(self):
        """Stacked suffixes are only partially stripped."""
        assert strip_institution_suffix("강남구보건소센터") == "강남구보건소"

    def test_earlier_suffix_wins(self):
        """센터 is listed before 주민센터, so only 센터 goes."""
        assert strip_institution_suffix("역삼동주민센터") == "역삼동주민"

    def test_suffix_must_be_at_end(self):
        assert strip_institution_suffix("보건소앞약국") == "보건소앞약국"

    def test_custom_suffix_list(self):
        config = MatchConfig(institution_suffixes=("약국",))
        assert strip_institution_suffix("보건소앞약국", config) == "보건소앞"


class TestNormalizeAdminText:
    """Full normalization pipeline."""

    def test_full_pipeline(self):
        assert normalize_admin_text("대구광역시 중구 보건소") == "대구광시중구"

    def test_special_city_without_spaces(self):
        assert normalize_admin_text("서울특별시강남구보건소") == "서울특시강남구"

    def test_punctuation_removed(self):
        assert normalize_admin_text("서울 (강남) 센터") == "서울강남"
        assert normalize_admin_text("중앙·서부 병원") == "중앙서부"

    def test_empty_and_none(self):
        assert normalize_admin_text("") == ""
        assert normalize_admin_text(None) == ""

    def test_abbreviation_does_not_equate_short_form(self):
        """
        "대구중구보건소" and "대구광역시중구보건소" stay different after
        normalization. Current behavior, pending product clarification.
        """
        short = normalize_admin_text("대구중구보건소")
        full = normalize_admin_text("대구광역시중구보건소")
        assert short == "대구중구"
        assert full == "대구광시중구"
        assert short != full


class TestStripWhitespace:

    def test_all_whitespace_removed(self):
        assert strip_whitespace(" 서울 강남구\t역삼동\n") == "서울강남구역삼동"

    def test_none(self):
        assert strip_whitespace(None) == ""
