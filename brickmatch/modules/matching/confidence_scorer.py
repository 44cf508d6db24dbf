# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Review Flagging and Confidence Stats
Post-resolution: flags pairings whose confidence falls below the review
threshold so the manual review UI can surface them first.

Also computes summary statistics for the reconciliation report.
"""

from __future__ import annotations

from collections import Counter

import numpy as np

from brickmatch.config import get_settings
from brickmatch.models.pairing import Pairing
from brickmatch.models.report import ConfidenceStats
from brickmatch.utils.logger import get_logger

log = get_logger(__name__)


def flag_for_review(
    pairings: list[Pairing],
    threshold: float | None = None,
) -> list[Pairing]:
    """
    Mark pairings with confidence below threshold as flagged.
    Modifies pairings in-place and returns the list.

    Args:
        pairings:  Pairings from the set matcher or conflict resolver
        threshold: Defaults to config REVIEW_CONFIDENCE_THRESHOLD.
    """
    if threshold is None:
        threshold = get_settings().review_confidence_threshold

    n_flagged = 0
    for p in pairings:
        p.flagged = p.confidence < threshold
        if p.flagged:
            n_flagged += 1

    log.info(
        "review_flagging_complete",
        total=len(pairings),
        flagged=n_flagged,
        threshold=threshold,
    )

    return pairings


def compute_confidence_stats(pairings: list[Pairing]) -> ConfidenceStats:
    if not pairings:
        return ConfidenceStats()

    scores = np.array([p.confidence for p in pairings], dtype=np.float64)
    flagged = sum(1 for p in pairings if p.flagged)
    by_stage = Counter(p.source.value for p in pairings)

    stats = ConfidenceStats(
        mean=float(scores.mean()),
        min=float(scores.min()),
        max=float(scores.max()),
        std=float(scores.std()),
        flagged_count=flagged,
        flagged_fraction=flagged / len(pairings),
        by_stage=dict(by_stage),
    )

    log.info(
        "confidence_stats",
        mean=round(stats.mean, 3),
        min=round(stats.min, 3),
        max=round(stats.max, 3),
        flagged=flagged,
        total=len(pairings),
    )

    return stats
