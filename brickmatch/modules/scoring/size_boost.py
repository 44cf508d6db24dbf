# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Set-Size Confidence Booster
Fewer figures in a set mechanically lowers the chance that a given
similarity is a false positive, so raw similarity counts for more.

  figures   boost (added to base before clamping at 1.0)
  ≤1        1.0 - base          (certainty)
  2         0.10 + 0.20 × base
  3         0.05 + 0.15 × base
  4–5       0.04 + 0.03 × base
  ≥6        0.00 + 0.03 × base

Within a band a higher base earns a larger boost: a so-so score among
only two options is still fairly informative.
"""

from __future__ import annotations

from brickmatch.exceptions import check_unit_interval

# figures upper bound → (floor, span)
_BOOST_BANDS: list[tuple[int, float, float]] = [
    (2, 0.10, 0.20),
    (3, 0.05, 0.15),
    (5, 0.04, 0.03),
]
_LARGE_SET_BOOST = (0.0, 0.03)


def boost(total_figures_in_set: int, base_similarity: float) -> float:
    check_unit_interval(base_similarity, "size boost base")

    if total_figures_in_set <= 1:
        return 1.0 - base_similarity

    for upper, floor, span in _BOOST_BANDS:
        if total_figures_in_set <= upper:
            return floor + span * base_similarity

    floor, span = _LARGE_SET_BOOST
    return floor + span * base_similarity


def boosted_confidence(total_figures_in_set: int, base_similarity: float) -> float:
    """Final confidence for a similarity-derived pairing."""
    return min(1.0, base_similarity + boost(total_figures_in_set, base_similarity))
