"""
Tests for schema validation.
"""

import pytest
from instmatch.models import InstitutionRecord
from instmatch.schema import record_from_dict, validate_record


@pytest.fixture
def valid_record_data():
    return {
        "name": "강남구보건소",
        "address": "서울 강남구 역삼동",
        "province_code": "11",
        "district_code": "11680",
    }


class TestValidateRecord:
    """Test basic validation function."""

    def test_valid_record(self, valid_record_data):
        """Valid record should have no errors."""
        assert validate_record(valid_record_data) == []

    def test_valid_record_minimal(self):
        assert validate_record({"name": "강남구보건소"}) == []

    def test_missing_name(self):
        errors = validate_record({"address": "서울 강남구"})
        assert errors == ["Missing required field: name"]

    def test_empty_name(self):
        """Whitespace-only name should error."""
        errors = validate_record({"name": "   "})
        assert len(errors) == 1
        assert "name" in errors[0]

    def test_optional_fields_may_be_null(self):
        data = {"name": "강남구보건소", "address": None, "province_code": None, "district_code": None}
        assert validate_record(data) == []

    def test_optional_fields_must_be_strings(self):
        """Region codes must be given as strings."""
        errors = validate_record({"name": "강남구보건소", "province_code": 11, "district_code": 11680})
        assert len(errors) == 2
        assert any("province_code" in err for err in errors)
        assert any("district_code" in err for err in errors)

    def test_not_an_object(self):
        assert validate_record(["강남구보건소"]) == ["Record must be a JSON object"]


class TestRecordFromDict:

    def test_builds_record(self, valid_record_data):
        record = record_from_dict(valid_record_data)
        assert record == InstitutionRecord("강남구보건소", "서울 강남구 역삼동", "11", "11680")

    def test_values_trimmed(self):
        record = record_from_dict({"name": " 강남구보건소 ", "address": "  ", "province_code": " 11 "})
        assert record.name == "강남구보건소"
        assert record.address is None
        assert record.province_code == "11"
        assert record.district_code is None

    def test_extra_fields_ignored(self, valid_record_data):
        valid_record_data["target_key"] = "T-1"
        assert record_from_dict(valid_record_data).name == "강남구보건소"

    def test_invalid_raises(self):
        with pytest.raises(ValueError, match="name"):
            record_from_dict({"address": "서울 강남구"})
