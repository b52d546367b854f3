from typing import Optional

from .config import DEFAULT_CONFIG, MatchConfig
from .normalize import strip_whitespace


def branch_suffix(name: Optional[str], config: MatchConfig = DEFAULT_CONFIG) -> Optional[str]:
    """Return the branch-type suffix a name ends with, if any."""
    if not name:
        return None
    for suffix in config.branch_suffixes:
        if name.endswith(suffix):
            return suffix
    return None


def is_subsidiary_pair(
    name_a: Optional[str],
    name_b: Optional[str],
    config: MatchConfig = DEFAULT_CONFIG,
) -> bool:
    """
    Detect a parent/branch naming relationship in either direction.

    "군위군보건소" and "군위군보건소의흥면보건지소" are a pair: the longer
    name contains the shorter one and ends with a branch suffix. Such
    pairs are different institutions no matter how similar they look.
    Identical names count as containment, so two identical branch
    names are vetoed as well.
    """
    a = strip_whitespace(name_a)
    b = strip_whitespace(name_b)
    if not a or not b:
        return False

    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    return shorter in longer and branch_suffix(longer, config) is not None
