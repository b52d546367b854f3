"""
Hierarchical address comparison.

Korean addresses are compared at three tiers: province (시/도),
district (시/군/구) and sub-district (읍/면/동/가/리). Province and
district come in as already-normalized region codes; the sub-district
is pulled out of the free-text address.
"""

import re
from typing import Optional

from .config import DEFAULT_CONFIG, MatchConfig
from .normalize import strip_whitespace
from .similarity import similarity_score

SUB_DISTRICT_PATTERN = re.compile(r"([가-힣]+(?:읍|면|동|가|리))")
STREET_TOKEN_PATTERN = re.compile(r"[가-힣]+동|[가-힣]+로|[가-힣]+가")

LEVEL_NONE = 0
LEVEL_PROVINCE = 1
LEVEL_DISTRICT = 2
LEVEL_SUB_DISTRICT = 3


def extract_sub_district_token(address: Optional[str]) -> Optional[str]:
    """
    First run of Hangul followed by 읍/면/동/가/리.

    Example:
        "대구 군위군 의흥면 읍내리" -> "의흥면"
    """
    if not address:
        return None
    match = SUB_DISTRICT_PATTERN.search(address)
    return match.group(1) if match else None


def extract_street_token(address: Optional[str]) -> Optional[str]:
    """First dong/ro/ga-suffixed token, e.g. "역삼동" or "테헤란로"."""
    if not address:
        return None
    match = STREET_TOKEN_PATTERN.search(address)
    return match.group(0) if match else None


def _present_and_equal(a: Optional[str], b: Optional[str]) -> bool:
    return bool(a) and bool(b) and a == b


def address_match_level(
    addr_a: Optional[str],
    addr_b: Optional[str],
    prov_a: Optional[str],
    prov_b: Optional[str],
    dist_a: Optional[str],
    dist_b: Optional[str],
) -> int:
    """
    How far down the region hierarchy two records agree.

    Returns:
        0 - province missing or different
        1 - same province, district missing or different
        2 - same province and district
        3 - same province, district and sub-district token
    """
    if not _present_and_equal(prov_a, prov_b):
        return LEVEL_NONE
    if not _present_and_equal(dist_a, dist_b):
        return LEVEL_PROVINCE

    token_a = extract_sub_district_token(addr_a)
    token_b = extract_sub_district_token(addr_b)
    if _present_and_equal(token_a, token_b):
        return LEVEL_SUB_DISTRICT
    return LEVEL_DISTRICT


def compare_addresses(
    addr_a: Optional[str],
    addr_b: Optional[str],
    config: MatchConfig = DEFAULT_CONFIG,
) -> int:
    """
    Score two free-text addresses on a 0-100 scale.

    A shared prefix alone is not trusted: when the sub-district tokens
    differ, or only one address is specific enough to carry one, the
    score is capped low before any containment check runs.

    Args:
        addr_a: First address
        addr_b: Second address
        config: Score constants

    Returns:
        100 exact, 30 different sub-districts, 40 one-sided sub-district,
        90 containment, the edit similarity if >= 80, else 0
    """
    if not addr_a or not addr_b:
        return 0

    norm_a = strip_whitespace(addr_a)
    norm_b = strip_whitespace(addr_b)

    if norm_a == norm_b:
        return config.address_exact_score

    token_a = extract_sub_district_token(addr_a)
    token_b = extract_sub_district_token(addr_b)

    if token_a and token_b and token_a != token_b:
        return config.address_sub_district_mismatch_score
    if bool(token_a) != bool(token_b):
        return config.address_one_sided_token_score

    if norm_a in norm_b or norm_b in norm_a:
        return config.address_containment_score

    similarity = similarity_score(norm_a, norm_b)
    return similarity if similarity >= config.address_min_similarity else 0
