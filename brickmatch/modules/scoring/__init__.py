# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Scoring Module
Public API for pair similarity and set-size confidence boosting.
"""

from brickmatch.modules.scoring.scorer import (
    WEIGHTS_WITH_IMAGE,
    WEIGHTS_WITHOUT_IMAGE,
    ImageComparator,
    SimilarityBreakdown,
    SimilarityWeights,
    name_similarity,
    score,
    score_breakdown,
)
from brickmatch.modules.scoring.similarity import (
    key_identifier_match,
    lcs_ratio,
    longest_common_substring,
    part_count_similarity,
    token_jaccard,
)
from brickmatch.modules.scoring.size_boost import boost, boosted_confidence

__all__ = [
    # Signals
    "token_jaccard",
    "longest_common_substring",
    "lcs_ratio",
    "key_identifier_match",
    "part_count_similarity",
    # Weighted scorer
    "SimilarityWeights",
    "SimilarityBreakdown",
    "ImageComparator",
    "WEIGHTS_WITH_IMAGE",
    "WEIGHTS_WITHOUT_IMAGE",
    "score",
    "score_breakdown",
    "name_similarity",
    # Booster
    "boost",
    "boosted_confidence",
]
