"""
BrickMatch — Batch Reconciliation Script
Reads a JSON file of set rosters (and optionally a previous global
mapping), runs the full reconciliation, and writes the report as JSON.

Usage:
  python scripts/reconcile_rosters.py rosters.json -o report.json
  python scripts/reconcile_rosters.py rosters.json --existing mapping.json

rosters.json is a list of objects shaped like SetRoster:
  [{"set_id": "70618-1", "catalog_a": [...], "catalog_b": [...]}, ...]
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from brickmatch.core.pipeline import reconcile_async
from brickmatch.exceptions import RosterValidationError
from brickmatch.models.catalog import SetRoster
from brickmatch.models.mapping import GlobalMapping
from brickmatch.utils.logger import configure_logging, get_logger

log = get_logger(__name__)

_ROSTER_LIST = TypeAdapter(list[SetRoster])


def _load_rosters(path: Path) -> list[SetRoster]:
    return _ROSTER_LIST.validate_json(path.read_bytes())


def _load_mapping(path: Path) -> GlobalMapping:
    return GlobalMapping.model_validate_json(path.read_bytes())


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Reconcile minifigure catalogs per set.")
    parser.add_argument("rosters", type=Path, help="JSON list of set rosters")
    parser.add_argument("--existing", type=Path, default=None,
                        help="Previous global mapping JSON (manual approvals are kept)")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="Report path (default: stdout)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Parallel per-set workers (default: BATCH_MAX_WORKERS)")
    args = parser.parse_args(argv)

    configure_logging()

    try:
        rosters = _load_rosters(args.rosters)
        existing = _load_mapping(args.existing) if args.existing else None
    except (OSError, ValidationError) as exc:
        log.error("input_load_failed", error=str(exc))
        return 2

    try:
        report = asyncio.run(
            reconcile_async(rosters, existing=existing, max_workers=args.workers)
        )
    except RosterValidationError as exc:
        log.error("roster_validation_failed", error=str(exc))
        return 2

    payload = json.dumps(report.model_dump(mode="json"), indent=2)
    if args.output is None:
        sys.stdout.write(payload + "\n")
    else:
        args.output.write_text(payload, encoding="utf-8")
        log.info("report_written", path=str(args.output), sets=report.total_sets)

    return 0


if __name__ == "__main__":
    sys.exit(main())
