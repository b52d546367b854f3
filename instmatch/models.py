from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional

REJECT_MISSING_NAME = "missing_name"
REJECT_SUBSIDIARY = "subsidiary"
REJECT_BELOW_THRESHOLD = "below_threshold"


@dataclass(frozen=True)
class InstitutionRecord:
    """One side of a comparison: a device-installation or target record."""

    name: str
    address: Optional[str] = None
    province_code: Optional[str] = None
    district_code: Optional[str] = None


@dataclass(frozen=True)
class MatchResult:
    """Score breakdown for one record pair. confidence is None for "no match"."""

    name_score: int = 0
    address_score: int = 0
    region_score: int = 0
    keyword_bonus: int = 0
    confidence: Optional[int] = None
    match_level: int = 0
    mode: Optional[str] = None
    rejection: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.confidence is not None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Candidate:
    """A device group (one management number) that may match a target."""

    candidate_id: str
    record: InstitutionRecord
    equipment_count: int = 0
    matched_to: Optional[str] = None


@dataclass(frozen=True)
class RankedCandidate:
    candidate_id: str
    confidence: int
    match_level: int
    equipment_count: int
    result: MatchResult
    source: str = "scored"  # scored, cached, precomputed
    matched_to: Optional[str] = None

    @property
    def is_matched(self) -> bool:
        """True when the device group is already linked to some target."""
        return self.matched_to is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidate_id": self.candidate_id,
            "confidence": self.confidence,
            "match_level": self.match_level,
            "equipment_count": self.equipment_count,
            "source": self.source,
            "is_matched": self.is_matched,
            "matched_to": self.matched_to,
            "scores": self.result.to_dict(),
        }


@dataclass
class CandidateSelection:
    """Ranked matches for one target plus the candidates that were rejected."""

    target_id: str
    scope: str
    considered: int = 0
    matches: List[RankedCandidate] = field(default_factory=list)
    unmatched: List[str] = field(default_factory=list)

    @property
    def best(self) -> Optional[RankedCandidate]:
        return self.matches[0] if self.matches else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_id": self.target_id,
            "scope": self.scope,
            "considered": self.considered,
            "matches": [m.to_dict() for m in self.matches],
            "unmatched": list(self.unmatched),
        }
