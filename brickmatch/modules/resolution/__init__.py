# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Resolution Module
Public API for cross-set conflict resolution and the fallbacks that run
on whatever it leaves unmapped.
"""

from brickmatch.modules.resolution.conflict_resolver import resolve
from brickmatch.modules.resolution.fallback_matcher import (
    eliminate_across_sets,
    match_by_fingerprint,
)

__all__ = [
    "eliminate_across_sets",
    "match_by_fingerprint",
    "resolve",
]
