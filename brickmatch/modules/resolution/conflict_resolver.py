# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Cross-Set Conflict Resolver
Reconciles pairings discovered independently per set into one global
best pairing per catalog-A id.

A marketplace entry denotes one physical figure, so two different
catalog-A ids claiming the same catalog-B id is a genuine data conflict.
Resolution is deterministic:

  1. Manually approved entries are immutable, pinned at 1.0, and win.
  2. Repeated claims for one catalog-A id collapse to the most confident;
     a collapsed claim naming a different catalog-B id is reported.
  3. Per catalog-B id, the most confident claim wins (first seen on ties).
  4. Each rejected catalog-A id is re-scored against the catalog-B entries
     of its own set that nothing in the mapping has claimed yet. The best
     alternative above the re-match threshold becomes a new pairing;
     otherwise the id stays open.
  5. Open ids get the post-resolution fallbacks (part fingerprint, then
     cross-set elimination). Ids still open after that are unresolved.

Every rejected claim is reported. Must run only after every per-set run
has finished.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Optional

from brickmatch.config import get_settings
from brickmatch.exceptions import ManualApprovalViolationError, check_unit_interval
from brickmatch.models.catalog import SetRoster
from brickmatch.models.mapping import (
    ConflictKind,
    ConflictReport,
    GlobalMapping,
    GlobalMappingEntry,
    ResolutionResult,
)
from brickmatch.models.pairing import MatchStage, Pairing
from brickmatch.modules.matching.stages import rank_candidates
from brickmatch.modules.normalization.name_normalizer import normalize_fig_id
from brickmatch.modules.resolution.fallback_matcher import (
    eliminate_across_sets,
    match_by_fingerprint,
)
from brickmatch.modules.scoring.scorer import ImageComparator
from brickmatch.modules.scoring.size_boost import boosted_confidence
from brickmatch.utils.logger import get_logger

log = get_logger(__name__)


def _carried_forward(
    existing: Optional[GlobalMapping], pairings: list[Pairing]
) -> list[Pairing]:
    """Automated entries from a previous run that this run did not revisit."""
    if existing is None:
        return []
    revisited = {normalize_fig_id(p.catalog_a_id) for p in pairings}
    carried: list[Pairing] = []
    for entry in existing.entries.values():
        if entry.manually_approved or normalize_fig_id(entry.catalog_a_id) in revisited:
            continue
        carried.append(Pairing(
            catalog_a_id=entry.catalog_a_id,
            catalog_b_id=entry.catalog_b_id,
            confidence=entry.confidence,
            source=entry.source,
            set_id=entry.set_id,
        ))
    return carried


def _best_per_catalog_a(
    claims: list[Pairing],
) -> tuple[list[Pairing], list[tuple[Pairing, Pairing]]]:
    """
    Most confident claim per catalog-A id (first seen on ties), plus
    (collapsed, kept) for every collapsed claim naming another catalog-B id.
    """
    best: dict[str, Pairing] = {}
    for p in claims:
        key = normalize_fig_id(p.catalog_a_id)
        current = best.get(key)
        if current is None or p.confidence > current.confidence:
            best[key] = p

    collapsed: list[tuple[Pairing, Pairing]] = []
    for p in claims:
        kept = best[normalize_fig_id(p.catalog_a_id)]
        if p is not kept and p.catalog_b_id != kept.catalog_b_id:
            collapsed.append((p, kept))
    return list(best.values()), collapsed


def resolve(
    pairings: list[Pairing],
    rosters: Optional[dict[str, SetRoster]] = None,
    existing: Optional[GlobalMapping] = None,
    comparator: Optional[ImageComparator] = None,
    rematch_min_score: Optional[float] = None,
) -> ResolutionResult:
    """
    Build the global mapping from accumulated per-set pairings.

    Args:
        pairings:          Pairings from every per-set run
        rosters:           set_id → roster, used to re-match rejected claims.
                           Without it rejected claims are left unmapped.
        existing:          Previous mapping; its manual approvals are kept
                           verbatim and its other entries carried forward
                           unless this run produced a pairing for the same id
        comparator:        Optional image-similarity collaborator
        rematch_min_score: Defaults to config REMATCH_MIN_SCORE.

    Returns:
        ResolutionResult with the mapping, every conflict report, and the
        catalog-A ids left unmapped.

    Raises:
        InvalidConfidenceError: a pairing carries a confidence outside [0, 1].
    """
    if rematch_min_score is None:
        rematch_min_score = get_settings().rematch_min_score
    rosters = rosters or {}

    mapping = GlobalMapping()
    conflicts: list[ConflictReport] = []
    unmapped: list[str] = []

    if existing is not None:
        for entry in existing.manually_approved():
            mapping.upsert(entry)

    claims = list(pairings) + _carried_forward(existing, pairings)
    for p in claims:
        check_unit_interval(p.confidence, f"pairing {p.catalog_a_id}->{p.catalog_b_id}")

    log.info(
        "conflict_resolution_start",
        claims=len(claims),
        manual=len(mapping),
        sets=len(rosters),
    )

    # ── One claim per catalog-A id ───────────────────────────────────────────
    best_claims, collapsed = _best_per_catalog_a(claims)
    for p, kept in collapsed:
        log.warning(
            "duplicate_catalog_a_claim",
            catalog_a_id=p.catalog_a_id,
            kept_b_id=kept.catalog_b_id,
            kept_set_id=kept.set_id,
            dropped_b_id=p.catalog_b_id,
            dropped_set_id=p.set_id,
        )
        conflicts.append(ConflictReport(
            kind=ConflictKind.DUPLICATE_CATALOG_A,
            catalog_b_id=p.catalog_b_id,
            winning_a_id=kept.catalog_a_id,
            winning_confidence=kept.confidence,
            rejected_a_id=p.catalog_a_id,
            rejected_confidence=p.confidence,
            set_id=p.set_id,
            detail=f"kept {kept.catalog_b_id} from set {kept.set_id}",
        ))

    # ── Manual approvals win outright ────────────────────────────────────────
    automated: list[Pairing] = []
    for p in best_claims:
        approved = mapping.get(p.catalog_a_id)
        if approved is None or not approved.manually_approved:
            automated.append(p)
            continue
        try:
            mapping.upsert(GlobalMappingEntry.from_pairing(p))
        except ManualApprovalViolationError as exc:
            log.warning(
                "manual_approval_violation",
                catalog_a_id=p.catalog_a_id,
                approved_b_id=exc.approved_b_id,
                proposed_b_id=exc.proposed_b_id,
            )
            conflicts.append(ConflictReport(
                kind=ConflictKind.MANUAL_APPROVAL_VIOLATION,
                catalog_b_id=p.catalog_b_id,
                winning_a_id=approved.catalog_a_id,
                winning_confidence=approved.confidence,
                rejected_a_id=p.catalog_a_id,
                rejected_confidence=p.confidence,
                set_id=p.set_id,
                detail=str(exc),
            ))

    # ── One catalog-A id per catalog-B id ────────────────────────────────────
    manual_owner = {e.catalog_b_id: e for e in mapping.manually_approved()}
    by_catalog_b: dict[str, list[Pairing]] = defaultdict(list)
    for p in automated:
        by_catalog_b[p.catalog_b_id].append(p)

    rejected: list[tuple[Pairing, str, float]] = []
    for b_id, group in by_catalog_b.items():
        owner = manual_owner.get(b_id)
        if owner is not None:
            winner_id, winner_conf = owner.catalog_a_id, owner.confidence
            losers = group
        else:
            winner = max(group, key=lambda p: p.confidence)
            mapping.upsert(GlobalMappingEntry.from_pairing(winner))
            winner_id, winner_conf = winner.catalog_a_id, winner.confidence
            losers = [p for p in group if p is not winner]

        for p in losers:
            log.warning(
                "conflict_detected",
                catalog_b_id=b_id,
                winning_a_id=winner_id,
                winning_confidence=round(winner_conf, 3),
                rejected_a_id=p.catalog_a_id,
                rejected_confidence=round(p.confidence, 3),
            )
            rejected.append((p, winner_id, winner_conf))

    # ── Re-match rejected claims within their own set ────────────────────────
    rejected.sort(key=lambda r: r[0].confidence, reverse=True)
    still_open: list[tuple[Pairing, ConflictReport]] = []
    for p, winner_id, winner_conf in rejected:
        replacement = _rematch(p, rosters.get(p.set_id or ""), mapping, comparator, rematch_min_score)
        if replacement is not None:
            mapping.upsert(GlobalMappingEntry.from_pairing(replacement))

        report = ConflictReport(
            kind=ConflictKind.CLAIM_CONFLICT,
            catalog_b_id=p.catalog_b_id,
            winning_a_id=winner_id,
            winning_confidence=winner_conf,
            rejected_a_id=p.catalog_a_id,
            rejected_confidence=p.confidence,
            set_id=p.set_id,
            replacement=replacement,
        )
        conflicts.append(report)
        if replacement is None:
            still_open.append((p, report))

    # ── Fallbacks for ids nothing else could place ───────────────────────────
    fallback: dict[str, Pairing] = {}
    if rosters:
        for p in match_by_fingerprint(mapping, rosters) + eliminate_across_sets(mapping, rosters):
            fallback[normalize_fig_id(p.catalog_a_id)] = p

    for p, report in still_open:
        replacement = fallback.get(normalize_fig_id(p.catalog_a_id))
        if replacement is not None:
            report.replacement = replacement
            continue
        unmapped.append(p.catalog_a_id)
        conflicts.append(ConflictReport(
            kind=ConflictKind.UNRESOLVED,
            catalog_b_id=p.catalog_b_id,
            rejected_a_id=p.catalog_a_id,
            rejected_confidence=p.confidence,
            set_id=p.set_id,
            detail="no unclaimed alternative in set roster",
        ))

    log.info(
        "conflict_resolution_complete",
        mapped=len(mapping),
        conflicts=len(conflicts),
        unmapped=len(unmapped),
    )

    return ResolutionResult(mapping=mapping, conflicts=conflicts, unmapped_a_ids=unmapped)


def _rematch(
    rejected: Pairing,
    roster: Optional[SetRoster],
    mapping: GlobalMapping,
    comparator: Optional[ImageComparator],
    min_score: float,
) -> Optional[Pairing]:
    """Best unclaimed alternative for a rejected claim, or None."""
    if roster is None:
        return None

    a_entry = next(
        (a for a in roster.valid_catalog_a if a.id == rejected.catalog_a_id), None
    )
    if a_entry is None:
        return None

    claimed = mapping.claimed_b_ids()
    candidates = [
        b for b in roster.valid_catalog_b
        if b.id not in claimed and b.id != rejected.catalog_b_id
    ]
    if not candidates:
        return None

    best_score, best_b = rank_candidates(a_entry, candidates, comparator)[0]
    if best_score <= min_score:
        return None

    replacement = Pairing(
        catalog_a_id=a_entry.id,
        catalog_b_id=best_b.id,
        confidence=boosted_confidence(roster.total_figures, best_score),
        source=MatchStage.CONFLICT_REMATCH,
        set_id=roster.set_id,
    )
    log.info(
        "conflict_rematch",
        catalog_a_id=a_entry.id,
        catalog_b_id=best_b.id,
        score=round(best_score, 3),
        confidence=round(replacement.confidence, 3),
    )
    return replacement
