"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
from pathlib import Path
from typing import Any, Dict, List

from instmatch.models import InstitutionRecord
from instmatch.resolution.candidate_selector import build_candidates


@pytest.fixture
def gangnam_target() -> InstitutionRecord:
    """Target institution: a district health center with full region data."""
    return InstitutionRecord(
        name="강남구보건소",
        address="서울 강남구 역삼동",
        province_code="11",
        district_code="11680",
    )


@pytest.fixture
def device_rows() -> List[Dict[str, Any]]:
    """Device rows as exported from the installation registry."""
    return [
        {
            "management_number": "M-001",
            "institution_name": "강남구보건소",
            "address": "서울 강남구 역삼동",
            "province_code": "11",
            "district_code": "11680",
            "equipment_serial": "S-1",
        },
        {
            "management_number": "M-001",
            "institution_name": "강남구보건소",
            "address": "서울 강남구 역삼동",
            "province_code": "11",
            "district_code": "11680",
            "equipment_serial": "S-2",
        },
        {
            # Branch of the target
            "management_number": "M-002",
            "institution_name": "강남구보건소역삼보건지소",
            "address": "서울 강남구 역삼동",
            "province_code": "11",
            "district_code": "11680",
            "equipment_serial": "S-3",
        },
        {
            "management_number": "M-003",
            "institution_name": "강남구 보건소",
            "address": "서울 강남구 역삼동 123",
            "province_code": "11",
            "district_code": "11680",
            "equipment_serial": "S-4",
            "matched_to": "T-OLD",
        },
        {
            # Other district
            "management_number": "M-004",
            "institution_name": "서초구보건소",
            "address": "서울 서초구 서초동",
            "province_code": "11",
            "district_code": "11650",
            "equipment_serial": "S-5",
        },
        {
            # Other province
            "management_number": "M-005",
            "institution_name": "강남구보건소",
            "address": "부산 해운대구 우동",
            "province_code": "26",
            "district_code": "26350",
            "equipment_serial": "S-6",
        },
        {
            "management_number": "M-006",
            "institution_name": "역삼1동주민센터",
            "address": "서울 강남구 역삼동",
            "province_code": "11",
            "district_code": "11680",
            "equipment_serial": "S-7",
        },
        {
            # No management number: never a candidate
            "management_number": None,
            "institution_name": "강남구보건소",
            "address": "서울 강남구 역삼동",
            "province_code": "11",
            "district_code": "11680",
            "equipment_serial": "S-8",
        },
    ]


@pytest.fixture
def candidates(device_rows):
    return build_candidates(device_rows)


@pytest.fixture
def devices_file(tmp_path, device_rows) -> Path:
    path = tmp_path / "devices.json"
    path.write_text(json.dumps(device_rows, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def target_file(tmp_path) -> Path:
    path = tmp_path / "target.json"
    data = [
        {
            "target_key": "T-GANGNAM",
            "name": "강남구보건소",
            "address": "서울 강남구 역삼동",
            "province_code": "11",
            "district_code": "11680",
        }
    ]
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path
