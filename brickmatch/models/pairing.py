# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Pairing Models
A Pairing is one proposed catalog-A ↔ catalog-B identity with its
confidence and the stage that produced it. SetMatchResult is the full
output of one set-scoped matcher run.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from brickmatch.models.catalog import CatalogAEntry, CatalogBEntry


class MatchStage(str, Enum):
    """Audit labels only — never consulted by scoring logic."""
    NAME_NORMALIZED = "name-normalized"
    UNIQUE_PART_COUNT = "unique-part-count"
    COMBINED_SIMILARITY = "combined-similarity"
    GREEDY_FALLBACK = "greedy-fallback"
    ELIMINATION = "elimination"
    SINGLE_FIG = "single-fig"
    CONFLICT_REMATCH = "conflict-rematch"
    PART_FINGERPRINT = "part-fingerprint"
    CROSS_SET_ELIMINATION = "cross-set-elimination"
    MANUAL = "manual"


class Pairing(BaseModel):
    catalog_a_id: str
    catalog_b_id: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    source: MatchStage
    set_id: Optional[str] = None
    flagged: bool = Field(False, description="True if confidence below review threshold")


class SetMatchResult(BaseModel):
    """
    Output of one set-scoped matcher run. Unmatched lists include
    malformed entries and repeated ids, so nothing supplied by the caller
    disappears.
    """
    set_id: str
    pairings: list[Pairing] = Field(default_factory=list)
    unmatched_a: list[CatalogAEntry] = Field(default_factory=list)
    unmatched_b: list[CatalogBEntry] = Field(default_factory=list)
    total_figures: int = 0

    @property
    def is_complete(self) -> bool:
        return not self.unmatched_a and not self.unmatched_b
