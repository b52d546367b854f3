"""
Feature Extraction for Institution Matching.

Responsibilities:
- Compute the individual name, address and region signals.
- Compute the keyword bonus for a pair.

Non-Responsibilities:
- No weighting logic.
- No threshold logic.
- No subsidiary veto.

Invariant:
Missing data never raises: an absent address or region code
contributes a zero signal.
"""

from typing import Optional

from ..address import compare_addresses, extract_street_token
from ..config import DEFAULT_CONFIG, MatchConfig
from ..models import InstitutionRecord
from ..normalize import normalize_admin_text, strip_whitespace
from ..similarity import similarity_score


def name_score(name_a: str, name_b: str, config: MatchConfig = DEFAULT_CONFIG) -> int:
    """
    Name similarity on a 0-100 scale.

    Containment gets a fixed, discounted score: "강남구보건소" inside
    "강남구보건소건강증진센터" alone is weak evidence of identity.
    """
    a = strip_whitespace(name_a)
    b = strip_whitespace(name_b)

    if a == b:
        return config.name_exact_score
    if a in b or b in a:
        return config.name_containment_score

    norm_a = normalize_admin_text(name_a, config)
    norm_b = normalize_admin_text(name_b, config)
    if norm_a == norm_b:
        return config.name_normalized_score
    return similarity_score(norm_a, norm_b)


def address_score(
    record_a: InstitutionRecord,
    record_b: InstitutionRecord,
    config: MatchConfig = DEFAULT_CONFIG,
) -> int:
    # Both sides must carry an address; one-sided data is no signal.
    if not record_a.address or not record_b.address:
        return 0
    return compare_addresses(record_a.address, record_b.address, config)


def _same_code(a: Optional[str], b: Optional[str]) -> bool:
    return bool(a) and bool(b) and a == b


def region_score(
    record_a: InstitutionRecord,
    record_b: InstitutionRecord,
    config: MatchConfig = DEFAULT_CONFIG,
) -> int:
    if _same_code(record_a.province_code, record_b.province_code):
        return config.region_match_score
    return 0


def keyword_bonus(
    record_a: InstitutionRecord,
    record_b: InstitutionRecord,
    address_score_value: int,
    config: MatchConfig = DEFAULT_CONFIG,
) -> int:
    """
    Bonus points for shared keywords and codes.

    Only granted when the addresses already agree reasonably well
    (address score >= bonus_min_address_score).
    """
    if address_score_value < config.bonus_min_address_score:
        return 0

    bonus = 0
    name_a = record_a.name or ""
    name_b = record_b.name or ""

    keyword = config.health_center_keyword
    if keyword in name_a and keyword in name_b:
        bonus += config.health_center_bonus

    if _same_code(record_a.district_code, record_b.district_code):
        bonus += config.district_bonus

    street_a = extract_street_token(record_a.address)
    street_b = extract_street_token(record_b.address)
    if street_a and street_b and street_a == street_b:
        bonus += config.street_token_bonus

    if any(k in name_a and k in name_b for k in config.medical_keywords):
        bonus += config.medical_keyword_bonus

    return bonus
