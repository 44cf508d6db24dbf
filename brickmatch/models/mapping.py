# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Global Mapping Models
The deduplicated, conflict-resolved table of one pairing per catalog-A id,
plus the conflict reports produced while building it.

Manually approved entries are owned by the review collaborator. The
mapping itself refuses to let an automated entry replace one.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from brickmatch.exceptions import ManualApprovalViolationError
from brickmatch.models.pairing import MatchStage, Pairing
from brickmatch.modules.normalization.name_normalizer import normalize_fig_id


class GlobalMappingEntry(BaseModel):
    catalog_a_id: str
    catalog_b_id: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    source: MatchStage
    set_id: Optional[str] = None
    manually_approved: bool = False

    @classmethod
    def from_pairing(cls, pairing: Pairing) -> "GlobalMappingEntry":
        return cls(
            catalog_a_id=pairing.catalog_a_id,
            catalog_b_id=pairing.catalog_b_id,
            confidence=pairing.confidence,
            source=pairing.source,
            set_id=pairing.set_id,
        )

    @classmethod
    def manual(
        cls, catalog_a_id: str, catalog_b_id: str, set_id: Optional[str] = None
    ) -> "GlobalMappingEntry":
        return cls(
            catalog_a_id=catalog_a_id,
            catalog_b_id=catalog_b_id,
            confidence=1.0,
            source=MatchStage.MANUAL,
            set_id=set_id,
            manually_approved=True,
        )


class GlobalMapping(BaseModel):
    """
    One entry per catalog-A id, keyed by the normalised id
    (trimmed, lower-cased) so lookups are insensitive to id formatting.
    """
    entries: dict[str, GlobalMappingEntry] = Field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, catalog_a_id: str) -> bool:
        return normalize_fig_id(catalog_a_id) in self.entries

    def get(self, catalog_a_id: str) -> Optional[GlobalMappingEntry]:
        return self.entries.get(normalize_fig_id(catalog_a_id))

    def lookup_b(self, catalog_a_id: str) -> Optional[str]:
        """Catalog-A id → catalog-B id, or None if unmapped."""
        entry = self.get(catalog_a_id)
        return entry.catalog_b_id if entry else None

    def lookup_a(self, catalog_b_id: str) -> Optional[str]:
        """
        Reverse lookup: catalog-B id → catalog-A id.
        Manually approved entries take precedence if several share the id.
        """
        key = normalize_fig_id(catalog_b_id)
        found: Optional[GlobalMappingEntry] = None
        for entry in self.entries.values():
            if normalize_fig_id(entry.catalog_b_id) != key:
                continue
            if entry.manually_approved:
                return entry.catalog_a_id
            if found is None:
                found = entry
        return found.catalog_a_id if found else None

    def claimed_b_ids(self) -> set[str]:
        return {e.catalog_b_id for e in self.entries.values()}

    def manually_approved(self) -> list[GlobalMappingEntry]:
        return [e for e in self.entries.values() if e.manually_approved]

    def upsert(self, entry: GlobalMappingEntry) -> bool:
        """
        Insert or replace the entry for entry.catalog_a_id.

        Returns False when an automated entry agrees with an existing
        manual approval (the manual entry is kept untouched).
        Raises ManualApprovalViolationError when an automated entry
        would point a manually approved id at a different catalog-B id.
        """
        key = normalize_fig_id(entry.catalog_a_id)
        existing = self.entries.get(key)
        if existing is not None and existing.manually_approved and not entry.manually_approved:
            if existing.catalog_b_id != entry.catalog_b_id:
                raise ManualApprovalViolationError(
                    existing.catalog_a_id, existing.catalog_b_id, entry.catalog_b_id
                )
            return False
        if entry.manually_approved and entry.confidence != 1.0:
            entry = entry.model_copy(update={"confidence": 1.0})
        self.entries[key] = entry
        return True


class ConflictKind(str, Enum):
    CLAIM_CONFLICT = "claim-conflict"
    MANUAL_APPROVAL_VIOLATION = "manual-approval-violation"
    UNRESOLVED = "unresolved"
    # One catalog-A id paired with different catalog-B ids in different sets
    DUPLICATE_CATALOG_A = "duplicate-catalog-a"


class ConflictReport(BaseModel):
    """
    One rejected claim, for the review UI.
    replacement is set when the rejected catalog-A id was re-matched
    to a different catalog-B entry from its own set.
    """
    kind: ConflictKind
    catalog_b_id: Optional[str] = None
    winning_a_id: Optional[str] = None
    winning_confidence: Optional[float] = None
    rejected_a_id: str
    rejected_confidence: Optional[float] = None
    set_id: Optional[str] = None
    replacement: Optional[Pairing] = None
    detail: str = ""


class ResolutionResult(BaseModel):
    mapping: GlobalMapping = Field(default_factory=GlobalMapping)
    conflicts: list[ConflictReport] = Field(default_factory=list)
    unmapped_a_ids: list[str] = Field(default_factory=list)

    @property
    def violations(self) -> list[ConflictReport]:
        return [
            c for c in self.conflicts
            if c.kind == ConflictKind.MANUAL_APPROVAL_VIOLATION
        ]
