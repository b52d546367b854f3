#!/usr/bin/env python3
"""
Evaluate the matcher against hand-labelled record pairs.

Each pair in the input file looks like:
    {"a": {...record...}, "b": {...record...}, "expected": true}

Usage:
    python scripts/evaluate_matches.py --pairs data/labelled_pairs.json
"""

import argparse
import json
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from instmatch.resolution import match_institutions
from instmatch.schema import record_from_dict


def evaluate(pairs_path: Path, show: int = 5):
    """
    Score every labelled pair and compare with the expected outcome.

    Returns True if every pair is classified as expected, False otherwise.
    """
    print(f"Loading labelled pairs from {pairs_path}...")
    with open(pairs_path, encoding="utf-8") as f:
        pairs = json.load(f)
    print(f"  {len(pairs)} pairs")

    true_pos = false_pos = true_neg = false_neg = 0
    errors = []

    for i, pair in enumerate(pairs):
        record_a = record_from_dict(pair["a"])
        record_b = record_from_dict(pair["b"])
        expected = bool(pair["expected"])
        result = match_institutions(record_a, record_b)

        if result.matched and expected:
            true_pos += 1
        elif result.matched and not expected:
            false_pos += 1
            errors.append((i, "false positive", record_a, record_b, result))
        elif not result.matched and expected:
            false_neg += 1
            errors.append((i, "false negative", record_a, record_b, result))
        else:
            true_neg += 1

    precision = true_pos / (true_pos + false_pos) if (true_pos + false_pos) else 1.0
    recall = true_pos / (true_pos + false_neg) if (true_pos + false_neg) else 1.0

    print(f"\nTP={true_pos} FP={false_pos} TN={true_neg} FN={false_neg}")
    print(f"Precision: {precision:.3f}")
    print(f"Recall:    {recall:.3f}")

    if errors:
        print(f"\n❌ MISCLASSIFIED: {len(errors)} pairs")
        for i, kind, record_a, record_b, result in errors[:show]:
            print(f"   - #{i} {kind}: '{record_a.name}' vs '{record_b.name}'")
            print(f"     name={result.name_score} address={result.address_score} "
                  f"region={result.region_score} bonus={result.keyword_bonus} "
                  f"confidence={result.confidence} rejection={result.rejection}")
        if len(errors) > show:
            print(f"   ... and {len(errors) - show} more")
        return False

    print("\n✅ All pairs classified as expected!")
    return True


def main():
    parser = argparse.ArgumentParser(description="Evaluate matcher precision/recall on labelled pairs")
    parser.add_argument("--pairs", type=Path, default=Path("data/labelled_pairs.json"),
                       help="Path to labelled pairs JSON file")
    parser.add_argument("--show", type=int, default=5,
                       help="Number of misclassified pairs to print")

    args = parser.parse_args()

    if not args.pairs.exists():
        print(f"❌ Pairs file not found: {args.pairs}")
        sys.exit(1)

    success = evaluate(args.pairs, args.show)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
