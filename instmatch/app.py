import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

from . import __version__
from .cache import ResultCache
from .config import ConfigError, load_config
from .env import load_env
from .logger import get_logger
from .models import InstitutionRecord
from .resolution import match_institutions, resolve_batch, select_candidates
from .resolution.candidate_selector import build_candidates
from .schema import record_from_dict, validate_record
from .storage import load_rows, save_results


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _load_or_exit(path_str: str) -> List[Dict[str, Any]]:
    path = Path(path_str)
    if not path.exists():
        raise SystemExit(f"Input file not found: {path}")
    try:
        return load_rows(path)
    except (ValueError, json.JSONDecodeError) as e:
        raise SystemExit(f"Could not read {path}: {e}")


def _record_or_exit(data: Dict[str, Any], label: str) -> InstitutionRecord:
    try:
        return record_from_dict(data)
    except ValueError as e:
        raise SystemExit(f"Invalid {label}: {e}")


def _targets_from_rows(rows: List[Dict[str, Any]]) -> List[Tuple[str, InstitutionRecord]]:
    targets = []
    for i, row in enumerate(rows):
        target_id = str(row.get("target_key") or i)
        targets.append((target_id, _record_or_exit(row, f"target {target_id}")))
    return targets


def _precomputed_or_exit(path_str: str) -> Dict[str, int]:
    precomputed = {}
    for i, row in enumerate(_load_or_exit(path_str)):
        if not row.get("management_number") or row.get("confidence") is None:
            continue
        try:
            precomputed[str(row["management_number"])] = int(row["confidence"])
        except (TypeError, ValueError):
            raise SystemExit(f"Invalid confidence in {path_str} row {i}: {row['confidence']!r}")
    return precomputed


def cmd_match(args: argparse.Namespace) -> None:
    config = args.config
    record_a = _record_or_exit(
        {"name": args.a_name, "address": args.a_address, "province_code": args.a_province, "district_code": args.a_district},
        "record A",
    )
    record_b = _record_or_exit(
        {"name": args.b_name, "address": args.b_address, "province_code": args.b_province, "district_code": args.b_district},
        "record B",
    )
    result = match_institutions(record_a, record_b, config)
    _print_json(result.to_dict())


def cmd_candidates(args: argparse.Namespace) -> None:
    config = args.config
    targets = _targets_from_rows(_load_or_exit(args.target))
    if len(targets) != 1:
        raise SystemExit(f"Expected exactly one target in {args.target}, found {len(targets)}")
    target_id, target = targets[0]
    candidates = build_candidates(_load_or_exit(args.devices))

    selection = select_candidates(
        target_id,
        target,
        candidates,
        include_all_region=args.include_all_region,
        config=config,
        top_n=args.top,
    )
    _print_json(selection.to_dict())


def cmd_batch(args: argparse.Namespace) -> None:
    config = args.config
    logger = get_logger()
    targets = _targets_from_rows(_load_or_exit(args.targets))
    candidates = build_candidates(_load_or_exit(args.devices))
    if not targets:
        print("No targets to resolve.")
        return

    precomputed = None
    if args.precomputed:
        precomputed = _precomputed_or_exit(args.precomputed)

    try:
        results = resolve_batch(
            targets,
            candidates,
            include_all_region=args.include_all_region,
            precomputed=precomputed,
            cache=ResultCache(),
            config=config,
            max_workers=args.workers,
            top_n=args.top,
        )
    except ValueError as e:
        raise SystemExit(f"Invalid batch: {e}")
    save_results(Path(args.output), {tid: selection.to_dict() for tid, selection in results.items()})

    matched = sum(1 for selection in results.values() if selection.matches)
    print(f"Done. targets={len(results)} matched={matched} unmatched={len(results) - matched}")
    logger.log_metrics_summary()


def cmd_validate(args: argparse.Namespace) -> None:
    rows = _load_or_exit(args.input)
    invalid = 0
    for i, row in enumerate(rows):
        errors = validate_record(row)
        if errors:
            invalid += 1
            print(f"Record {i}:")
            for e in errors:
                print(f" - {e}")
    if invalid:
        print(f"Invalid: {invalid}/{len(rows)} records")
        raise SystemExit(2)
    print(f"Valid ({len(rows)} records)")


def _add_record_args(parser: argparse.ArgumentParser, side: str) -> None:
    label = side.upper()
    parser.add_argument(f"--{side}-name", required=True, help=f"Institution name of record {label}")
    parser.add_argument(f"--{side}-address", help=f"Address of record {label}")
    parser.add_argument(f"--{side}-province", help=f"Province code of record {label}")
    parser.add_argument(f"--{side}-district", help=f"District code of record {label}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="instmatch", description="Institution record-linkage CLI")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")

    mat = subparsers.add_parser("match", help="Score a single pair of institution records")
    _add_record_args(mat, "a")
    _add_record_args(mat, "b")
    mat.set_defaults(func=cmd_match)

    cand = subparsers.add_parser("candidates", help="Rank device groups for one target institution")
    cand.add_argument("--target", required=True, help="JSON file with the target record")
    cand.add_argument("--devices", required=True, help="JSON file with device rows")
    cand.add_argument("--include-all-region", action="store_true", help="Do not filter candidates by region")
    cand.add_argument("--top", type=int, help="Maximum number of matches to return")
    cand.set_defaults(func=cmd_candidates)

    bat = subparsers.add_parser("batch", help="Rank device groups for every target in a file")
    bat.add_argument("--targets", required=True, help="JSON file with target records (target_key + record fields)")
    bat.add_argument("--devices", required=True, help="JSON file with device rows")
    bat.add_argument("--output", default="data/matches.json", help="Output JSON path (default: data/matches.json)")
    bat.add_argument("--precomputed", help="JSON file with management_number/confidence rows from an earlier run")
    bat.add_argument("--include-all-region", action="store_true", help="Do not filter candidates by region")
    bat.add_argument("--workers", type=int, help="Worker threads (default: INSTMATCH_MAX_WORKERS or 4)")
    bat.add_argument("--top", type=int, help="Maximum number of matches per target")
    bat.set_defaults(func=cmd_batch)

    val = subparsers.add_parser("validate", help="Validate a JSON list of institution records")
    val.add_argument("--input", required=True, help="Path to records JSON")
    val.set_defaults(func=cmd_validate)

    return parser


def main(argv=None):
    # Load .env if present (INSTMATCH_* overrides)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    try:
        args.config = load_config()
    except ConfigError as e:
        raise SystemExit(f"Configuration error: {e}")

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
