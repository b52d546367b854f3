"""
Candidate Selection Logic.

Responsibilities:
- Group device rows into candidates (one per management number).
- Apply hard geographic filters (province/district codes).
- Bound the candidate set with a cheap substring pre-screen.

Non-Responsibilities:
- No confidence scoring.
- No ranking of final results.

Invariant:
Candidate selection never excludes a candidate in the target's
region unless the bound is exceeded; when it is, candidates with
the weakest pre-screen score are dropped first.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config import DEFAULT_CONFIG, MatchConfig
from ..models import Candidate, InstitutionRecord
from ..normalize import strip_whitespace

SCOPE_DISTRICT = "district"
SCOPE_PROVINCE = "province"
SCOPE_ALL = "all"
SCOPE_NONE = "none"


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def build_candidates(rows: Iterable[Dict[str, Any]]) -> List[Candidate]:
    """
    Group device rows by management number.

    The first row of a group supplies the institution record; the
    group size is the equipment count. Rows without a management
    number are skipped.
    """
    groups: Dict[str, Dict[str, Any]] = {}
    for row in rows:
        management_number = _clean(row.get("management_number"))
        if management_number is None:
            continue
        group = groups.get(management_number)
        if group is None:
            groups[management_number] = {"row": row, "count": 1}
        else:
            group["count"] += 1

    candidates = []
    for management_number, group in groups.items():
        row = group["row"]
        record = InstitutionRecord(
            name=_clean(row.get("institution_name")) or "",
            address=_clean(row.get("address")),
            province_code=_clean(row.get("province_code")),
            district_code=_clean(row.get("district_code")),
        )
        candidates.append(
            Candidate(
                candidate_id=management_number,
                record=record,
                equipment_count=group["count"],
                matched_to=_clean(row.get("matched_to")),
            )
        )
    return candidates


def select_scope(target: InstitutionRecord, include_all_region: bool = False) -> str:
    if include_all_region:
        return SCOPE_ALL
    if target.province_code and target.district_code:
        return SCOPE_DISTRICT
    if target.province_code:
        return SCOPE_PROVINCE
    # No region signal: nothing to compare against
    return SCOPE_NONE


def geographic_prefilter(
    target: InstitutionRecord,
    candidates: Iterable[Candidate],
    scope: str,
) -> List[Candidate]:
    if scope == SCOPE_ALL:
        return list(candidates)
    if scope == SCOPE_NONE:
        return []

    selected = []
    for candidate in candidates:
        record = candidate.record
        if record.province_code != target.province_code:
            continue
        if scope == SCOPE_DISTRICT and record.district_code != target.district_code:
            continue
        selected.append(candidate)
    return selected


def prescreen_score(target_name: str, candidate_name: str) -> int:
    """
    Substring pre-screen on whitespace-stripped names.

    100 equal, 90 candidate contains target, 85 target contains
    candidate, else 0.
    """
    target = strip_whitespace(target_name)
    candidate = strip_whitespace(candidate_name)
    if not target or not candidate:
        return 0
    if target == candidate:
        return 100
    if target in candidate:
        return 90
    if candidate in target:
        return 85
    return 0


def bound_candidates(
    target: InstitutionRecord,
    candidates: List[Candidate],
    limit: int,
) -> List[Candidate]:
    """Keep at most limit candidates, best pre-screen score and largest groups first."""
    if len(candidates) <= limit:
        return candidates
    ordered = sorted(
        candidates,
        key=lambda c: (prescreen_score(target.name, c.record.name), c.equipment_count),
        reverse=True,
    )
    return ordered[:limit]


def select_bounded_candidates(
    target: InstitutionRecord,
    candidates: Iterable[Candidate],
    include_all_region: bool = False,
    config: MatchConfig = DEFAULT_CONFIG,
) -> Tuple[str, List[Candidate]]:
    """
    Run the full selection stage.

    Returns:
        Tuple of (scope, bounded candidate list)
    """
    scope = select_scope(target, include_all_region)
    local = geographic_prefilter(target, candidates, scope)
    return scope, bound_candidates(target, local, config.candidate_limit)
