# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Component Parts Module
Public API for mapping the parts of an already-paired minifigure, and for
comparing two minifigures by part inventory.
"""

from brickmatch.modules.components.component_mapper import map_component_parts
from brickmatch.modules.components.fingerprint import (
    FingerprintMatch,
    compare_fingerprints,
    fingerprint_confidence,
    normalize_part_id,
)
from brickmatch.modules.components.part_categorizer import categorize_part

__all__ = [
    "FingerprintMatch",
    "categorize_part",
    "compare_fingerprints",
    "fingerprint_confidence",
    "map_component_parts",
    "normalize_part_id",
]
