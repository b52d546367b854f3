"""Institution record-linkage engine for device-installation and target records."""

__version__ = "0.1.0"

from .models import Candidate, CandidateSelection, InstitutionRecord, MatchResult, RankedCandidate
from .resolution import calculate_confidence, match_institutions, resolve_batch, select_candidates

__all__ = [
    "__version__",
    "Candidate",
    "CandidateSelection",
    "InstitutionRecord",
    "MatchResult",
    "RankedCandidate",
    "calculate_confidence",
    "match_institutions",
    "resolve_batch",
    "select_candidates",
]
