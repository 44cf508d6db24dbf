# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Reconciliation Pipeline
Batch driver wiring the per-set matcher and the cross-set resolver.

Execution order:
  1. Set-scoped matching — one independent run per roster, optionally
     in parallel worker threads
  2. Barrier — every per-set result collected
  3. Cross-set conflict resolution
  4. Review flagging + confidence stats

All external data (rosters, image comparator) must be resolved before
the call; nothing in here performs I/O.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from brickmatch.config import get_settings
from brickmatch.exceptions import RosterValidationError
from brickmatch.models.catalog import SetRoster
from brickmatch.models.mapping import GlobalMapping
from brickmatch.models.pairing import Pairing, SetMatchResult
from brickmatch.models.report import ReconciliationReport, UnmatchedSummary
from brickmatch.modules.matching.confidence_scorer import (
    compute_confidence_stats,
    flag_for_review,
)
from brickmatch.modules.matching.set_matcher import match_set
from brickmatch.modules.resolution.conflict_resolver import resolve
from brickmatch.modules.scoring.scorer import ImageComparator
from brickmatch.utils.logger import get_logger

log = get_logger(__name__)


def _index_rosters(rosters: list[SetRoster]) -> dict[str, SetRoster]:
    by_id: dict[str, SetRoster] = {}
    for roster in rosters:
        if roster.set_id in by_id:
            raise RosterValidationError(
                f"Duplicate roster for set {roster.set_id}; "
                "merge inventory variants before reconciling."
            )
        by_id[roster.set_id] = roster
    return by_id


def _match_one(roster: SetRoster, comparator: Optional[ImageComparator]) -> SetMatchResult:
    with structlog.contextvars.bound_contextvars(set_id=roster.set_id):
        return match_set(roster, comparator)


# ─── Per-set stage ───────────────────────────────────────────────────────────

def match_all_sets(
    rosters: list[SetRoster],
    comparator: Optional[ImageComparator] = None,
) -> list[SetMatchResult]:
    """Match every roster sequentially. Results are in roster order."""
    _index_rosters(rosters)
    return [_match_one(r, comparator) for r in rosters]


async def match_all_sets_async(
    rosters: list[SetRoster],
    comparator: Optional[ImageComparator] = None,
    max_workers: Optional[int] = None,
) -> list[SetMatchResult]:
    """
    Match every roster in worker threads, at most max_workers at a time.
    Per-set runs share no state, so ordering between them is irrelevant;
    results still come back in roster order.
    """
    _index_rosters(rosters)
    if max_workers is None:
        max_workers = get_settings().batch_max_workers
    semaphore = asyncio.Semaphore(max_workers)

    async def _run(roster: SetRoster) -> SetMatchResult:
        async with semaphore:
            return await asyncio.to_thread(_match_one, roster, comparator)

    return list(await asyncio.gather(*(_run(r) for r in rosters)))


# ─── Join + resolve ──────────────────────────────────────────────────────────

def _finish(
    set_results: list[SetMatchResult],
    rosters: list[SetRoster],
    existing: Optional[GlobalMapping],
    comparator: Optional[ImageComparator],
) -> ReconciliationReport:
    all_pairings: list[Pairing] = [p for r in set_results for p in r.pairings]

    log.info(
        "stage_start",
        stage="conflict_resolution",
        sets=len(set_results),
        pairings=len(all_pairings),
    )

    resolution = resolve(
        all_pairings,
        rosters=_index_rosters(rosters),
        existing=existing,
        comparator=comparator,
    )

    # Flag both the per-set pairings and the resolved global entries
    flag_for_review(all_pairings)
    final_pairings = [
        Pairing(
            catalog_a_id=e.catalog_a_id,
            catalog_b_id=e.catalog_b_id,
            confidence=e.confidence,
            source=e.source,
            set_id=e.set_id,
        )
        for e in resolution.mapping.entries.values()
    ]
    stats = compute_confidence_stats(flag_for_review(final_pairings))

    # Entries the post-resolution fallbacks placed are no longer unmatched
    mapping = resolution.mapping
    claimed = mapping.claimed_b_ids()
    unmatched = []
    for r in set_results:
        open_a = [a for a in r.unmatched_a if not (a.is_valid and a.id in mapping)]
        open_b = [b for b in r.unmatched_b if not (b.is_valid and b.id in claimed)]
        if open_a or open_b:
            unmatched.append(UnmatchedSummary(set_id=r.set_id, catalog_a=open_a, catalog_b=open_b))

    report = ReconciliationReport(
        set_results=set_results,
        mapping=resolution.mapping,
        conflicts=resolution.conflicts,
        unmapped_a_ids=resolution.unmapped_a_ids,
        unmatched=unmatched,
        stats=stats,
    )

    log.info(
        "reconciliation_complete",
        sets=report.total_sets,
        mapped=len(report.mapping),
        conflicts=len(report.conflicts),
        incomplete_sets=len(unmatched),
        mean_confidence=round(stats.mean, 3),
    )
    return report


def reconcile(
    rosters: list[SetRoster],
    existing: Optional[GlobalMapping] = None,
    comparator: Optional[ImageComparator] = None,
) -> ReconciliationReport:
    """
    Full reconciliation of a batch of sets.

    Args:
        rosters:    One roster per set (duplicate set ids are rejected)
        existing:   Previous global mapping; manual approvals are preserved
        comparator: Optional image-similarity collaborator

    Raises:
        RosterValidationError: two rosters share a set id.
    """
    log.info("stage_start", stage="set_matching", sets=len(rosters))
    set_results = match_all_sets(rosters, comparator)
    return _finish(set_results, rosters, existing, comparator)


async def reconcile_async(
    rosters: list[SetRoster],
    existing: Optional[GlobalMapping] = None,
    comparator: Optional[ImageComparator] = None,
    max_workers: Optional[int] = None,
) -> ReconciliationReport:
    """reconcile() with per-set matching fanned out across worker threads."""
    log.info("stage_start", stage="set_matching", sets=len(rosters))
    set_results = await match_all_sets_async(rosters, comparator, max_workers)
    return await asyncio.to_thread(_finish, set_results, rosters, existing, comparator)
