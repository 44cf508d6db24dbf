# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Minifig Part Categorizer
Buckets a component part by its name so parts of a paired figure are only
compared with parts that occupy the same body position.
"""

from __future__ import annotations

from typing import Optional

from brickmatch.models.parts import PartCategory

# Checked in order; the first rule whose keywords appear wins
_RULES: list[tuple[PartCategory, tuple[str, ...]]] = [
    (PartCategory.HEAD, ("head", "face")),
    (PartCategory.TORSO, ("torso", "body")),
]


def categorize_part(name: Optional[str]) -> PartCategory:
    if not name:
        return PartCategory.OTHER
    lower = name.lower()

    for category, keywords in _RULES:
        if any(k in lower for k in keywords):
            return category

    # "Hips and Legs" is a legs assembly only if it does not name the hips
    if "leg" in lower and "hips" not in lower:
        return PartCategory.LEGS
    if "hips" in lower:
        return PartCategory.HIPS
    if "arm" in lower:
        return PartCategory.ARMS
    if "hand" in lower:
        return PartCategory.HANDS
    return PartCategory.ACCESSORY
