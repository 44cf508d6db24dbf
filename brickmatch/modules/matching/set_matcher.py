# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Set-Scoped Matcher
Wires the six matching stages into the per-set pipeline:

  Stage 1: exact normalised-name match
  Stage 2: unique part-count match
  Stage 3: combined similarity (threshold + gap)
  Stage 4: greedy fallback on a balanced residual
  Stage 5: process-of-elimination boost
  Stage 6: single-remainder match

A pure function of the roster: no state survives between calls, so sets
can be matched in any order or in parallel. Called per set by
core.pipeline, and directly by callers matching one set on demand.
"""

from __future__ import annotations

from typing import Callable, Optional

import structlog

from brickmatch.models.catalog import CatalogAEntry, CatalogBEntry, SetRoster
from brickmatch.models.pairing import MatchStage, SetMatchResult
from brickmatch.modules.matching.stages import (
    MatchState,
    apply_elimination_boost,
    match_combined_similarity,
    match_exact_names,
    match_greedy_fallback,
    match_single_remainder,
    match_unique_part_counts,
)
from brickmatch.modules.scoring.scorer import ImageComparator
from brickmatch.utils.logger import get_logger

log = get_logger(__name__)

_STAGES: list[tuple[MatchStage, Callable[[MatchState], int]]] = [
    (MatchStage.NAME_NORMALIZED, match_exact_names),
    (MatchStage.UNIQUE_PART_COUNT, match_unique_part_counts),
    (MatchStage.COMBINED_SIMILARITY, match_combined_similarity),
    (MatchStage.GREEDY_FALLBACK, match_greedy_fallback),
    (MatchStage.ELIMINATION, apply_elimination_boost),
    (MatchStage.SINGLE_FIG, match_single_remainder),
]


def _dedupe_by_id(entries: list, side: str, set_id: str) -> tuple[list, list]:
    """First occurrence of each id, and the later repeats set aside."""
    seen: set[str] = set()
    unique, repeats = [], []
    for e in entries:
        if e.id in seen:
            log.warning("duplicate_entry_excluded", set_id=set_id, side=side, id=e.id)
            repeats.append(e)
            continue
        seen.add(e.id)
        unique.append(e)
    return unique, repeats


def match_set(
    roster: SetRoster,
    comparator: Optional[ImageComparator] = None,
) -> SetMatchResult:
    """
    Run the full matching pipeline over one set's roster.

    Args:
        roster:     All catalog-A (every inventory variant) and catalog-B
                    figures for the set
        comparator: Optional image-similarity collaborator

    Returns:
        SetMatchResult with disjoint pairings in stage order, plus every
        entry left unmatched. Malformed entries (no id) and repeated ids
        are never matched and appear in the unmatched lists.
    """
    malformed_a: list[CatalogAEntry] = [e for e in roster.catalog_a if not e.is_valid]
    malformed_b: list[CatalogBEntry] = [e for e in roster.catalog_b if not e.is_valid]
    if malformed_a or malformed_b:
        log.warning(
            "malformed_entries_excluded",
            set_id=roster.set_id,
            catalog_a=len(malformed_a),
            catalog_b=len(malformed_b),
        )

    valid_a, repeat_a = _dedupe_by_id(roster.valid_catalog_a, "catalog_a", roster.set_id)
    valid_b, repeat_b = _dedupe_by_id(roster.valid_catalog_b, "catalog_b", roster.set_id)
    total_figures = max(len(valid_a), len(valid_b))

    state = MatchState(
        set_id=roster.set_id,
        remaining_a=list(valid_a),
        remaining_b=list(valid_b),
        total_figures=total_figures,
        balanced=len(valid_a) == len(valid_b),
        comparator=comparator,
        all_a=valid_a,
        all_b=valid_b,
    )

    log.debug(
        "set_match_start",
        set_id=roster.set_id,
        catalog_a=len(valid_a),
        catalog_b=len(valid_b),
    )

    if not state.balanced:
        # Usually a missing inventory variant on the catalog-A side
        log.warning(
            "roster_count_mismatch",
            set_id=roster.set_id,
            catalog_a=len(valid_a),
            catalog_b=len(valid_b),
        )

    for stage, stage_fn in _STAGES:
        with structlog.contextvars.bound_contextvars(stage=stage):
            changed = stage_fn(state)
            if changed:
                log.debug("stage_complete", set_id=roster.set_id, changed=changed)

    result = SetMatchResult(
        set_id=roster.set_id,
        pairings=state.pairings,
        unmatched_a=state.remaining_a + repeat_a + malformed_a,
        unmatched_b=state.remaining_b + repeat_b + malformed_b,
        total_figures=total_figures,
    )

    log.info(
        "set_match_complete",
        set_id=roster.set_id,
        paired=len(result.pairings),
        unmatched_a=len(result.unmatched_a),
        unmatched_b=len(result.unmatched_b),
    )
    return result
