"""
Edit distance and normalized similarity scores.
"""


def round_half_up(numerator: int, denominator: int) -> int:
    """Round numerator/denominator (both non-negative) with .5 going up, in exact integer math."""
    return (2 * numerator + denominator) // (2 * denominator)


def levenshtein_distance(a: str, b: str) -> int:
    """
    Minimum number of single-character inserts, deletes and substitutions
    turning a into b.

    Args:
        a: First string
        b: Second string

    Returns:
        Edit distance (0 means identical)
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                current[j] = previous[j - 1]
            else:
                current[j] = 1 + min(
                    previous[j],      # delete
                    current[j - 1],   # insert
                    previous[j - 1],  # substitute
                )
        previous = current

    return previous[len(b)]


def similarity_score(a: str, b: str) -> int:
    """
    Similarity on a 0-100 scale derived from edit distance.

    Two empty strings are fully similar.
    """
    if a == b:
        return 100

    max_len = max(len(a), len(b))
    if max_len == 0:
        return 100

    # 100 - distance / max_len * 100
    distance = levenshtein_distance(a, b)
    return round_half_up(100 * (max_len - distance), max_len)
