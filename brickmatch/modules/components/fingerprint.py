# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Part Fingerprint Comparator
Compares two minifigures by their part inventories instead of their names.

A fingerprint is the multiset of (part id, colour) keys with quantities.
Overlap is the sum of per-key minimum quantities over the larger of the
two totals, so an extra or missing part lowers the score on either side.

  overlap ≥ 0.95                      → 0.95
  overlap ≥ 0.80                      → 0.80 + (overlap - 0.80) × 0.75
  overlap ≥ 0.70, parts-only ≥ 0.75   → 0.70 + (overlap - 0.70) × 0.50
  otherwise                           → no match

Colour ids on both sides must already be in one colour space.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Optional

from brickmatch.models.parts import ComponentPart

EXACT_OVERLAP = 0.95
EXACT_CONFIDENCE = 0.95

STRONG_OVERLAP = 0.80
STRONG_SLOPE = 0.75

FUZZY_OVERLAP = 0.70
FUZZY_PARTS_ONLY_MIN = 0.75
FUZZY_SLOPE = 0.50


@dataclass
class FingerprintMatch:
    score: float
    matched_parts: int
    total_parts: int


def normalize_part_id(part_id: str) -> str:
    """
    Collapse print/pattern suffixes that the two catalogs number differently.
    Hips-and-legs assemblies ("970c11", "970cm01pr0001") share a base mould.
    """
    if part_id.startswith("970cm") and not part_id.startswith("970cm00"):
        return "970cm00"
    if part_id.startswith("970c") and not part_id.startswith("970cm"):
        if part_id[4:].isdigit():
            return "970c00"
    return part_id


def _fingerprint(parts: list[ComponentPart], match_color: bool) -> Counter:
    counts: Counter = Counter()
    for part in parts:
        key = normalize_part_id(part.part_id)
        if match_color:
            key = f"{key}:{part.color_id}"
        counts[key] += part.quantity
    return counts


def compare_fingerprints(
    a_parts: list[ComponentPart],
    b_parts: list[ComponentPart],
    match_color: bool = True,
) -> FingerprintMatch:
    """Overlap of two part inventories. Score is 0.0 if either is empty."""
    fp_a = _fingerprint(a_parts, match_color)
    fp_b = _fingerprint(b_parts, match_color)
    total = max(sum(fp_a.values()), sum(fp_b.values()))
    if not fp_a or not fp_b:
        return FingerprintMatch(score=0.0, matched_parts=0, total_parts=total)

    matched = sum((fp_a & fp_b).values())
    return FingerprintMatch(score=matched / total, matched_parts=matched, total_parts=total)


def fingerprint_confidence(
    a_parts: list[ComponentPart],
    b_parts: list[ComponentPart],
) -> Optional[float]:
    """Pairing confidence from part overlap, or None below the fuzzy band."""
    overlap = compare_fingerprints(a_parts, b_parts).score

    if overlap >= EXACT_OVERLAP:
        return EXACT_CONFIDENCE
    if overlap >= STRONG_OVERLAP:
        return STRONG_OVERLAP + (overlap - STRONG_OVERLAP) * STRONG_SLOPE
    if overlap >= FUZZY_OVERLAP:
        parts_only = compare_fingerprints(a_parts, b_parts, match_color=False).score
        if parts_only >= FUZZY_PARTS_ONLY_MIN:
            return FUZZY_OVERLAP + (overlap - FUZZY_OVERLAP) * FUZZY_SLOPE
    return None
