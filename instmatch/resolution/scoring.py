"""
Scoring Logic for Institution Matching.

Responsibilities:
- Blend name, address and region signals with the weighting mode
  selected by the address signal.
- Apply the keyword bonus and the confidence cap.
- Apply the acceptance threshold of the selected mode.

Non-Responsibilities:
- No feature computation.
- No candidate selection.

Invariant:
An accepted confidence is never below the threshold of the mode
that produced it.
"""

from dataclasses import dataclass
from typing import Optional

from ..config import DEFAULT_CONFIG, MatchConfig, WeightingMode


@dataclass(frozen=True)
class ScoreOutcome:
    mode: WeightingMode
    raw_confidence: int
    confidence: Optional[int]

    @property
    def accepted(self) -> bool:
        return self.confidence is not None


def blend_confidence(
    name_score: int,
    address_score: int,
    region_score: int,
    bonus: int,
    config: MatchConfig = DEFAULT_CONFIG,
) -> int:
    """Weighted confidence plus bonus, capped at max_confidence."""
    mode = config.mode_for(address_score)
    confidence = mode.blend(name_score, address_score, region_score)
    return min(config.max_confidence, confidence + bonus)


def apply_threshold(confidence: int, mode: WeightingMode) -> Optional[int]:
    return confidence if confidence >= mode.threshold else None


def score_pair(
    name_score: int,
    address_score: int,
    region_score: int,
    bonus: int,
    config: MatchConfig = DEFAULT_CONFIG,
) -> ScoreOutcome:
    """
    Compute the final confidence for a pair of signals.

    Args:
        name_score: 0-100 name signal
        address_score: 0-100 address signal (0 selects the no-address mode)
        region_score: 0 or 100 province signal
        bonus: Keyword bonus (already gated on the address score)
        config: Weighting modes and cap

    Returns:
        ScoreOutcome with the mode used, the capped confidence and the
        gated confidence (None when below the mode threshold)
    """
    mode = config.mode_for(address_score)
    raw = blend_confidence(name_score, address_score, region_score, bonus, config)
    return ScoreOutcome(mode=mode, raw_confidence=raw, confidence=apply_threshold(raw, mode))
