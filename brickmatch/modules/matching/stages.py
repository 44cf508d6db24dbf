# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Set-Scoped Matching Stages
Each stage operates only on entries no earlier stage has consumed, and a
pairing removes both sides from further consideration: a marketplace
entry denotes one physical figure and is used at most once per set.

  1. name-normalized      exact normalised-name match, unambiguous only
  2. unique-part-count    part count unique on both sides + name sanity guard
  3. combined-similarity  weighted score with a best-vs-second gap
  4. greedy-fallback      balanced residual, longest names first
  5. elimination          lift 1–2 stragglers in an otherwise confident set
  6. single-fig           one left on each side
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Optional

from brickmatch.models.catalog import CatalogAEntry, CatalogBEntry
from brickmatch.models.pairing import MatchStage, Pairing
from brickmatch.modules.normalization.name_normalizer import normalize
from brickmatch.modules.scoring.scorer import ImageComparator, name_similarity, score
from brickmatch.modules.scoring.size_boost import boosted_confidence
from brickmatch.utils.logger import get_logger

log = get_logger(__name__)

# ─── Stage constants ─────────────────────────────────────────────────────────

EXACT_NAME_CONFIDENCE = 1.0

UNIQUE_PART_COUNT_CONFIDENCE = 0.95
# Guards against two unrelated figures that happen to share a part count
PART_COUNT_NAME_GUARD = 0.2

COMBINED_MIN_SCORE = 0.25
COMBINED_MIN_GAP = 0.10

# Process-of-elimination thresholds, empirically tuned
ELIMINATION_HIGH_CONFIDENCE = 0.7
ELIMINATION_MIN_HIGH_FRACTION = 0.75
ELIMINATION_MIN_LOW_PAIRINGS = 1
ELIMINATION_MAX_LOW_PAIRINGS = 2
ELIMINATION_ALTERNATIVE_CEILING = 0.3
ELIMINATION_CONFIDENCE = 0.90

SINGLE_FIG_CONFIDENCE = 0.5


@dataclass
class MatchState:
    """Working state of one set-scoped run. Never shared between sets."""
    set_id: str
    remaining_a: list[CatalogAEntry]
    remaining_b: list[CatalogBEntry]
    total_figures: int
    # Equal valid catalog-A / catalog-B counts, so every figure is accounted for
    balanced: bool
    comparator: Optional[ImageComparator] = None
    all_a: list[CatalogAEntry] = field(default_factory=list)
    all_b: list[CatalogBEntry] = field(default_factory=list)
    pairings: list[Pairing] = field(default_factory=list)

    def pair(
        self,
        a: CatalogAEntry,
        b: CatalogBEntry,
        confidence: float,
        stage: MatchStage,
    ) -> Pairing:
        pairing = Pairing(
            catalog_a_id=a.id,
            catalog_b_id=b.id,
            confidence=confidence,
            source=stage,
            set_id=self.set_id,
        )
        self.pairings.append(pairing)
        self.remaining_a = [e for e in self.remaining_a if e is not a]
        self.remaining_b = [e for e in self.remaining_b if e is not b]
        log.debug(
            "pairing_created",
            catalog_a_id=a.id,
            catalog_b_id=b.id,
            confidence=round(confidence, 3),
            stage=stage.value,
        )
        return pairing


def rank_candidates(
    a: CatalogAEntry,
    candidates: list[CatalogBEntry],
    comparator: Optional[ImageComparator] = None,
) -> list[tuple[float, CatalogBEntry]]:
    """
    Score a against every candidate, best first.
    Sort is stable, so equal scores keep roster order.
    """
    scored = [(score(a, b, comparator=comparator), b) for b in candidates]
    scored.sort(key=lambda x: x[0], reverse=True)
    return scored


# ─── Stage 1 ─────────────────────────────────────────────────────────────────

def match_exact_names(state: MatchState) -> int:
    """
    Pair entries whose normalised names are identical and unique on both
    sides. A name shared by two figures on either side is ambiguous and
    left to later stages.
    """
    b_by_name: dict[str, list[CatalogBEntry]] = defaultdict(list)
    for b in state.remaining_b:
        norm = normalize(b.display_name)
        if norm:
            b_by_name[norm].append(b)

    a_name_counts: dict[str, int] = defaultdict(int)
    for a in state.remaining_a:
        a_name_counts[normalize(a.display_name)] += 1

    paired = 0
    for a in list(state.remaining_a):
        norm = normalize(a.display_name)
        if not norm or a_name_counts[norm] != 1:
            continue
        candidates = b_by_name.get(norm, [])
        if len(candidates) != 1:
            continue
        state.pair(a, candidates[0], EXACT_NAME_CONFIDENCE, MatchStage.NAME_NORMALIZED)
        paired += 1
    return paired


# ─── Stage 2 ─────────────────────────────────────────────────────────────────

def match_unique_part_counts(state: MatchState) -> int:
    a_by_count: dict[int, list[CatalogAEntry]] = defaultdict(list)
    b_by_count: dict[int, list[CatalogBEntry]] = defaultdict(list)
    for a in state.remaining_a:
        if a.part_count is not None:
            a_by_count[a.part_count].append(a)
    for b in state.remaining_b:
        if b.part_count is not None:
            b_by_count[b.part_count].append(b)

    paired = 0
    for count, a_list in a_by_count.items():
        b_list = b_by_count.get(count, [])
        if len(a_list) != 1 or len(b_list) != 1:
            continue
        a, b = a_list[0], b_list[0]
        guard = name_similarity(a, b)
        if guard <= PART_COUNT_NAME_GUARD:
            log.debug(
                "part_count_collision_rejected",
                catalog_a_id=a.id,
                catalog_b_id=b.id,
                part_count=count,
                name_similarity=round(guard, 3),
            )
            continue
        state.pair(a, b, UNIQUE_PART_COUNT_CONFIDENCE, MatchStage.UNIQUE_PART_COUNT)
        paired += 1
    return paired


# ─── Stage 3 ─────────────────────────────────────────────────────────────────

def match_combined_similarity(state: MatchState) -> int:
    """
    Accept a catalog-A entry's best candidate only if it is both good
    enough and clearly better than the runner-up; weak ties stay open.
    """
    paired = 0
    for a in list(state.remaining_a):
        if not state.remaining_b:
            break
        ranked = rank_candidates(a, state.remaining_b, state.comparator)
        best_score, best_b = ranked[0]
        second_score = ranked[1][0] if len(ranked) > 1 else 0.0

        if best_score < COMBINED_MIN_SCORE:
            continue
        if best_score - second_score < COMBINED_MIN_GAP:
            log.debug(
                "combined_similarity_ambiguous",
                catalog_a_id=a.id,
                best=round(best_score, 3),
                second=round(second_score, 3),
            )
            continue

        confidence = boosted_confidence(state.total_figures, best_score)
        state.pair(a, best_b, confidence, MatchStage.COMBINED_SIMILARITY)
        paired += 1
    return paired


# ─── Stage 4 ─────────────────────────────────────────────────────────────────

def match_greedy_fallback(state: MatchState) -> int:
    """
    Complete-but-unresolved residual: every remaining catalog-A entry has
    a counterpart somewhere, so pair greedily without a threshold.
    Longer names are more specific, so they choose first.

    A lone leftover pair in a balanced multi-figure set is paired here too,
    never below the single-fig confidence. A set of one, or a 1×1 residual
    of an unbalanced set, is left to the single-fig stage.
    """
    n_a = len(state.remaining_a)
    if n_a == 0 or n_a != len(state.remaining_b):
        return 0
    sole_remainder = n_a == 1
    if sole_remainder and (not state.balanced or state.total_figures < 2):
        return 0

    ordered = sorted(state.remaining_a, key=lambda a: len(a.display_name), reverse=True)
    paired = 0
    for a in ordered:
        if not state.remaining_b:
            break
        best_score, best_b = rank_candidates(a, state.remaining_b, state.comparator)[0]
        confidence = boosted_confidence(state.total_figures, best_score)
        if sole_remainder:
            confidence = max(confidence, SINGLE_FIG_CONFIDENCE)
        state.pair(a, best_b, confidence, MatchStage.GREEDY_FALLBACK)
        paired += 1
    return paired


# ─── Stage 5 ─────────────────────────────────────────────────────────────────

def apply_elimination_boost(state: MatchState) -> int:
    """
    When a fully accounted-for set is already mostly confident, its one or
    two weak pairings are what is left after elimination. Raise them if
    no other catalog-B entry is a plausible alternative.
    """
    if not state.balanced or not state.pairings:
        return 0

    low = [
        i for i, p in enumerate(state.pairings)
        if p.confidence < ELIMINATION_HIGH_CONFIDENCE
    ]
    n_total = len(state.pairings)
    high_fraction = (n_total - len(low)) / n_total

    if high_fraction < ELIMINATION_MIN_HIGH_FRACTION:
        return 0
    if not (ELIMINATION_MIN_LOW_PAIRINGS <= len(low) <= ELIMINATION_MAX_LOW_PAIRINGS):
        return 0

    a_by_id = {a.id: a for a in state.all_a}
    boosted = 0
    for idx in low:
        pairing = state.pairings[idx]
        a = a_by_id.get(pairing.catalog_a_id)
        if a is None:
            continue

        alternatives = [b for b in state.all_b if b.id != pairing.catalog_b_id]
        best_alternative = max(
            (score(a, b, comparator=state.comparator) for b in alternatives),
            default=0.0,
        )
        if best_alternative > ELIMINATION_ALTERNATIVE_CEILING:
            continue

        state.pairings[idx] = pairing.model_copy(
            update={
                "confidence": ELIMINATION_CONFIDENCE,
                "source": MatchStage.ELIMINATION,
            }
        )
        log.debug(
            "elimination_boost_applied",
            catalog_a_id=pairing.catalog_a_id,
            catalog_b_id=pairing.catalog_b_id,
            previous=round(pairing.confidence, 3),
            best_alternative=round(best_alternative, 3),
        )
        boosted += 1
    return boosted


# ─── Stage 6 ─────────────────────────────────────────────────────────────────

def match_single_remainder(state: MatchState) -> int:
    if len(state.remaining_a) != 1 or len(state.remaining_b) != 1:
        return 0
    state.pair(
        state.remaining_a[0],
        state.remaining_b[0],
        SINGLE_FIG_CONFIDENCE,
        MatchStage.SINGLE_FIG,
    )
    return 1
