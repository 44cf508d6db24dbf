# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Set-Scoped Matching Module
Public API for the per-set staged matching pipeline.
"""

from brickmatch.modules.matching.confidence_scorer import (
    compute_confidence_stats,
    flag_for_review,
)
from brickmatch.modules.matching.set_matcher import match_set
from brickmatch.modules.matching.stages import (
    MatchState,
    apply_elimination_boost,
    match_combined_similarity,
    match_exact_names,
    match_greedy_fallback,
    match_single_remainder,
    match_unique_part_counts,
    rank_candidates,
)

__all__ = [
    # Stages
    "MatchState",
    "rank_candidates",
    "match_exact_names",
    "match_unique_part_counts",
    "match_combined_similarity",
    "match_greedy_fallback",
    "apply_elimination_boost",
    "match_single_remainder",
    # Review
    "flag_for_review",
    "compute_confidence_stats",
    # Orchestrator
    "match_set",
]
