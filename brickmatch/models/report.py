# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Reconciliation Report
The complete output of one batch run, consumed by the persistence and
review collaborators. Serialise with model_dump(mode="json").
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from brickmatch.models.catalog import CatalogAEntry, CatalogBEntry
from brickmatch.models.mapping import ConflictReport, GlobalMapping
from brickmatch.models.pairing import SetMatchResult


class ConfidenceStats(BaseModel):
    mean: float = 0.0
    min: float = 0.0
    max: float = 0.0
    std: float = 0.0
    flagged_count: int = 0
    flagged_fraction: float = 0.0
    # MatchStage value → number of pairings it produced
    by_stage: dict[str, int] = Field(default_factory=dict)


class UnmatchedSummary(BaseModel):
    """Per-set leftovers, surfaced explicitly rather than dropped."""
    set_id: str
    catalog_a: list[CatalogAEntry] = Field(default_factory=list)
    catalog_b: list[CatalogBEntry] = Field(default_factory=list)


class ReconciliationReport(BaseModel):
    set_results: list[SetMatchResult] = Field(default_factory=list)
    mapping: GlobalMapping = Field(default_factory=GlobalMapping)
    conflicts: list[ConflictReport] = Field(default_factory=list)
    unmapped_a_ids: list[str] = Field(default_factory=list)
    unmatched: list[UnmatchedSummary] = Field(default_factory=list)
    stats: ConfidenceStats = Field(default_factory=ConfidenceStats)

    @property
    def total_sets(self) -> int:
        return len(self.set_results)
