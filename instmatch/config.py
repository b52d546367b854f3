"""
Matching configuration.

All tunable values of the matching engine live in one immutable
MatchConfig value: abbreviation and suffix lists, score constants,
the two weighting modes with their thresholds, keyword bonuses and
batch sizing. Overrides come from INSTMATCH_* environment variables.
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Tuple

from .similarity import round_half_up


class ConfigError(ValueError):
    """Raised when an environment override cannot be applied."""
    pass


@dataclass(frozen=True)
class WeightingMode:
    """
    One branch of the confidence blend.

    The address-present and address-absent cases each carry their own
    weight tuple and acceptance threshold. Weights are in percent and
    must sum to 100.
    """

    name: str
    name_weight: int
    address_weight: int
    region_weight: int
    threshold: int

    def blend(self, name_score: int, address_score: int, region_score: int) -> int:
        """Weighted average of the three signals, rounded half up."""
        weighted = (
            name_score * self.name_weight
            + address_score * self.address_weight
            + region_score * self.region_weight
        )
        return round_half_up(weighted, 100)


ADDRESS_MODE = WeightingMode(
    name="address",
    name_weight=15,
    address_weight=70,
    region_weight=15,
    threshold=50,
)

NAME_REGION_MODE = WeightingMode(
    name="name_region",
    name_weight=60,
    address_weight=0,
    region_weight=40,
    threshold=70,
)


@dataclass(frozen=True)
class MatchConfig:
    # Normalization
    abbreviations: Tuple[Tuple[str, str], ...] = (
        ("광역시", "광시"),
        ("특별시", "특시"),
        ("자치도", "도"),
    )
    # Order matters: the first suffix the name ends with is the one removed.
    institution_suffixes: Tuple[str, ...] = (
        "보건지소",
        "보건소",
        "센터",
        "지소",
        "의료원",
        "병원",
        "의원",
        "주민센터",
        "행정복지센터",
    )
    punctuation: str = "(),.-·"
    branch_suffixes: Tuple[str, ...] = ("보건지소", "분소", "출장소", "지소", "지부", "분원")

    # Name scores
    name_exact_score: int = 100
    name_containment_score: int = 75
    name_normalized_score: int = 95

    # Address scores
    address_exact_score: int = 100
    address_sub_district_mismatch_score: int = 30
    address_one_sided_token_score: int = 40
    address_containment_score: int = 90
    address_min_similarity: int = 80

    region_match_score: int = 100

    # Blend
    address_mode: WeightingMode = ADDRESS_MODE
    no_address_mode: WeightingMode = NAME_REGION_MODE
    max_confidence: int = 100

    # Keyword bonus
    bonus_min_address_score: int = 50
    health_center_keyword: str = "보건소"
    health_center_bonus: int = 3
    district_bonus: int = 5
    street_token_bonus: int = 2
    medical_keywords: Tuple[str, ...] = ("센터", "의료원")
    medical_keyword_bonus: int = 2

    # Candidate selection
    candidate_limit: int = 100
    top_n: int = 10
    max_workers: int = 4

    def mode_for(self, address_score: int) -> WeightingMode:
        """Pick the weighting mode for an address score."""
        if address_score > 0:
            return self.address_mode
        return self.no_address_mode


DEFAULT_CONFIG = MatchConfig()


def _int_override(environ: Mapping[str, str], key: str) -> Optional[int]:
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}")
    if value < 0:
        raise ConfigError(f"{key} must not be negative, got {value}")
    return value


def load_config(environ: Optional[Mapping[str, str]] = None, base: MatchConfig = DEFAULT_CONFIG) -> MatchConfig:
    """
    Build a MatchConfig from environment overrides.

    Args:
        environ: Mapping to read overrides from (default: os.environ)
        base: Config the overrides are applied on top of

    Returns:
        New MatchConfig (base is returned unchanged when nothing is set)

    Raises:
        ConfigError: If an override is not a non-negative integer
    """
    if environ is None:
        environ = os.environ

    config = base

    address_threshold = _int_override(environ, "INSTMATCH_ADDRESS_THRESHOLD")
    if address_threshold is not None:
        config = replace(config, address_mode=replace(config.address_mode, threshold=address_threshold))

    name_region_threshold = _int_override(environ, "INSTMATCH_NAME_REGION_THRESHOLD")
    if name_region_threshold is not None:
        config = replace(
            config,
            no_address_mode=replace(config.no_address_mode, threshold=name_region_threshold),
        )

    simple_fields = {
        "INSTMATCH_BONUS_MIN_ADDRESS_SCORE": "bonus_min_address_score",
        "INSTMATCH_CANDIDATE_LIMIT": "candidate_limit",
        "INSTMATCH_TOP_N": "top_n",
        "INSTMATCH_MAX_WORKERS": "max_workers",
    }
    for key, attr in simple_fields.items():
        value = _int_override(environ, key)
        if value is not None:
            config = replace(config, **{attr: value})

    if config.max_workers < 1:
        raise ConfigError("INSTMATCH_MAX_WORKERS must be at least 1")

    return config
