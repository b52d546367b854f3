from .resolver import calculate_confidence, match_institutions, resolve_batch, select_candidates

__all__ = [
    "calculate_confidence",
    "match_institutions",
    "resolve_batch",
    "select_candidates",
]
