from typing import Any, Dict, List

from .models import InstitutionRecord

REQUIRED_STR_FIELDS = ["name"]
OPTIONAL_STR_FIELDS = [
    "address",
    "province_code",
    "district_code",
]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def validate_record(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    if not isinstance(data, dict):
        return ["Record must be a JSON object"]

    errors: List[str] = []

    # Required string fields
    for f in REQUIRED_STR_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    # Optional strings: if present, must be strings or null
    for f in OPTIONAL_STR_FIELDS:
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    return errors


def _optional(data: Dict[str, Any], key: str):
    value = data.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def record_from_dict(data: Dict[str, Any]) -> InstitutionRecord:
    """
    Build an InstitutionRecord from a validated dict.

    Raises:
        ValueError: If the dict fails validate_record
    """
    errors = validate_record(data)
    if errors:
        raise ValueError("; ".join(errors))
    return InstitutionRecord(
        name=data["name"].strip(),
        address=_optional(data, "address"),
        province_code=_optional(data, "province_code"),
        district_code=_optional(data, "district_code"),
    )
