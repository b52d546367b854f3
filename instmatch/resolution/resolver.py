"""
Institution Matching Orchestrator.

Responsibilities:
- Guard against unusable input and apply the subsidiary veto.
- Invoke feature extraction and scoring for a record pair.
- Score, filter and rank a target's candidates.
- Fan batches of targets out over a worker pool.

Non-Responsibilities:
- No file or database access.
- No feature computation.
- No region-code derivation.

Invariant:
match_institutions is deterministic given the same inputs and
configuration, and never raises for well-typed records.
"""

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..address import address_match_level
from ..cache import ResultCache, pair_key
from ..config import DEFAULT_CONFIG, MatchConfig
from ..logger import get_logger
from ..models import (
    REJECT_BELOW_THRESHOLD,
    REJECT_MISSING_NAME,
    REJECT_SUBSIDIARY,
    Candidate,
    CandidateSelection,
    InstitutionRecord,
    MatchResult,
    RankedCandidate,
)
from ..subsidiary import is_subsidiary_pair
from . import features
from .candidate_selector import select_bounded_candidates
from .scoring import apply_threshold, score_pair

logger = get_logger()


def _match_level(record_a: InstitutionRecord, record_b: InstitutionRecord) -> int:
    return address_match_level(
        record_a.address,
        record_b.address,
        record_a.province_code,
        record_b.province_code,
        record_a.district_code,
        record_b.district_code,
    )


def _veto(
    record_a: InstitutionRecord,
    record_b: InstitutionRecord,
    level: int,
    config: MatchConfig,
) -> Optional[MatchResult]:
    """Rejection for a pair that can never match, or None."""
    if not (record_a.name or "").strip() or not (record_b.name or "").strip():
        return MatchResult(match_level=level, rejection=REJECT_MISSING_NAME)

    if is_subsidiary_pair(record_a.name, record_b.name, config):
        logger.debug("Subsidiary pair vetoed", name_a=record_a.name, name_b=record_b.name)
        return MatchResult(match_level=level, rejection=REJECT_SUBSIDIARY)

    return None


def match_institutions(
    record_a: InstitutionRecord,
    record_b: InstitutionRecord,
    config: MatchConfig = DEFAULT_CONFIG,
) -> MatchResult:
    """
    Decide whether two records describe the same institution.

    Args:
        record_a: Device-installation record
        record_b: Target institution record
        config: Weights, thresholds and keyword lists

    Returns:
        MatchResult; confidence is None when the pair is rejected, with
        the reason in rejection
    """
    level = _match_level(record_a, record_b)
    vetoed = _veto(record_a, record_b, level, config)
    if vetoed is not None:
        return vetoed

    name = features.name_score(record_a.name, record_b.name, config)
    address = features.address_score(record_a, record_b, config)
    region = features.region_score(record_a, record_b, config)
    bonus = features.keyword_bonus(record_a, record_b, address, config)

    outcome = score_pair(name, address, region, bonus, config)
    result = MatchResult(
        name_score=name,
        address_score=address,
        region_score=region,
        keyword_bonus=bonus,
        confidence=outcome.confidence,
        match_level=level,
        mode=outcome.mode.name,
        rejection=None if outcome.accepted else REJECT_BELOW_THRESHOLD,
    )

    logger.debug(
        "Scored pair",
        name_a=record_a.name,
        name_b=record_b.name,
        mode=result.mode,
        raw_confidence=outcome.raw_confidence,
        confidence=result.confidence,
    )
    return result


def calculate_confidence(
    record_a: InstitutionRecord,
    record_b: InstitutionRecord,
    config: MatchConfig = DEFAULT_CONFIG,
) -> Optional[int]:
    """Confidence for a pair, or None for no match."""
    return match_institutions(record_a, record_b, config).confidence


def _precomputed_result(
    target: InstitutionRecord,
    candidate: Candidate,
    confidence: Optional[int],
    config: MatchConfig,
) -> MatchResult:
    """
    Wrap a confidence from an earlier run.

    The missing-name guard and subsidiary veto still apply, and the value
    must clear the threshold of the mode the pair's address score selects.
    A zero or missing confidence is no match.
    """
    level = _match_level(target, candidate.record)
    vetoed = _veto(target, candidate.record, level, config)
    if vetoed is not None:
        return vetoed

    address = features.address_score(target, candidate.record, config)
    mode = config.mode_for(address)
    gated = None
    if confidence:
        gated = apply_threshold(min(int(confidence), config.max_confidence), mode)

    return MatchResult(
        address_score=address,
        confidence=gated,
        match_level=level,
        mode=mode.name,
        rejection=None if gated is not None else REJECT_BELOW_THRESHOLD,
    )


def _score_candidate(
    target: InstitutionRecord,
    candidate: Candidate,
    cache: Optional[ResultCache],
    config: MatchConfig,
) -> Tuple[MatchResult, str]:
    if cache is None:
        return match_institutions(target, candidate.record, config), "scored"

    key = pair_key(target, candidate.record, config)
    cached = cache.get(key)
    if cached is not None:
        return cached, "cached"

    result = match_institutions(target, candidate.record, config)
    cache.set(key, result)
    return result, "scored"


def select_candidates(
    target_id: str,
    target: InstitutionRecord,
    candidates: Iterable[Candidate],
    include_all_region: bool = False,
    precomputed: Optional[Mapping[str, int]] = None,
    cache: Optional[ResultCache] = None,
    config: MatchConfig = DEFAULT_CONFIG,
    top_n: Optional[int] = None,
) -> CandidateSelection:
    """
    Rank the candidates that plausibly match a target.

    Candidates are filtered to the target's region and bounded before
    the full scorer runs. A precomputed confidence for a candidate id
    replaces the score but still goes through the vetoes and the
    threshold gate. Rejected candidates are reported in unmatched.

    Args:
        target_id: Identifier of the target (for reporting)
        target: Target institution record
        candidates: Candidate device groups
        include_all_region: Skip the geographic filter
        precomputed: candidate_id -> confidence from an earlier run
        cache: Request-scoped result cache
        config: Matching configuration
        top_n: Maximum number of matches returned (default config.top_n)

    Returns:
        CandidateSelection with matches sorted by confidence, then
        equipment count, both descending
    """
    if top_n is None:
        top_n = config.top_n

    scope, bounded = select_bounded_candidates(target, candidates, include_all_region, config)
    selection = CandidateSelection(target_id=target_id, scope=scope, considered=len(bounded))

    ranked: List[RankedCandidate] = []
    for candidate in bounded:
        if precomputed and candidate.candidate_id in precomputed:
            result = _precomputed_result(target, candidate, precomputed[candidate.candidate_id], config)
            source = "precomputed"
        else:
            result, source = _score_candidate(target, candidate, cache, config)
            logger.record_comparison(result.mode, result.rejection)

        if result.confidence is None:
            selection.unmatched.append(candidate.candidate_id)
            continue

        ranked.append(
            RankedCandidate(
                candidate_id=candidate.candidate_id,
                confidence=result.confidence,
                match_level=result.match_level,
                equipment_count=candidate.equipment_count,
                result=result,
                source=source,
                matched_to=candidate.matched_to,
            )
        )

    ranked.sort(key=lambda r: (r.confidence, r.equipment_count), reverse=True)
    selection.matches = ranked[:top_n]
    logger.record_target_resolved()

    logger.debug(
        "Selected candidates",
        target_id=target_id,
        scope=scope,
        considered=selection.considered,
        matches=len(selection.matches),
        unmatched=len(selection.unmatched),
    )
    return selection


def resolve_batch(
    targets: Sequence[Tuple[str, InstitutionRecord]],
    candidates: Sequence[Candidate],
    include_all_region: bool = False,
    precomputed: Optional[Mapping[str, int]] = None,
    cache: Optional[ResultCache] = None,
    config: MatchConfig = DEFAULT_CONFIG,
    max_workers: Optional[int] = None,
    top_n: Optional[int] = None,
) -> Dict[str, CandidateSelection]:
    """
    Select candidates for many targets on a thread pool.

    Each target is independent; worker exceptions propagate to the
    caller when results are collected.

    Returns:
        Mapping of target_id to CandidateSelection, in input order

    Raises:
        ValueError: If a target_id appears more than once
    """
    duplicates = sorted(tid for tid, count in Counter(tid for tid, _ in targets).items() if count > 1)
    if duplicates:
        logger.error("Duplicate target ids in batch", target_ids=duplicates)
        raise ValueError(f"Duplicate target ids: {', '.join(duplicates)}")

    if max_workers is None:
        max_workers = config.max_workers

    logger.info("Resolving batch", targets=len(targets), candidates=len(candidates), workers=max_workers)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(
                select_candidates,
                target_id,
                target,
                candidates,
                include_all_region=include_all_region,
                precomputed=precomputed,
                cache=cache,
                config=config,
                top_n=top_n,
            )
            for target_id, target in targets
        ]
        results = {target_id: future.result() for (target_id, _), future in zip(targets, futures)}

    matched = sum(1 for selection in results.values() if selection.matches)
    logger.info("Batch resolved", targets=len(results), with_matches=matched)
    return results
