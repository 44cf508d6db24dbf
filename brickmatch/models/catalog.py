# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Catalog Data Models
Minifigure records from the two catalogs being reconciled, and the
per-set roster that groups them. Supplied by the ingestion collaborator;
immutable for the duration of a matching run.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from brickmatch.models.parts import ComponentPart


class CatalogAEntry(BaseModel):
    """A parts-database minifigure (e.g. a Rebrickable fig_num)."""
    model_config = ConfigDict(frozen=True)

    # None or blank marks a malformed record, excluded from matching
    id: Optional[str] = Field(None, description="Stable catalog-A identity")
    display_name: str = Field("", description="Free-text figure name")
    part_count: Optional[int] = Field(None, ge=0)
    image_ref: Optional[str] = None
    # Part inventory, when the catalog publishes one
    parts: list[ComponentPart] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return bool(self.id and self.id.strip())


class CatalogBEntry(BaseModel):
    """A marketplace minifigure (e.g. a BrickLink item number)."""
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(None, description="Stable catalog-B identity")
    display_name: Optional[str] = Field(None, description="Free-text figure name")
    quantity_in_set: int = Field(1, ge=1)
    part_count: Optional[int] = Field(None, ge=0)
    # Opaque handle passed to the external image comparator
    image_ref: Optional[str] = None
    parts: list[ComponentPart] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return bool(self.id and self.id.strip())


class SetRoster(BaseModel):
    """
    Every catalog-A and catalog-B figure believed to belong to one set.
    catalog_a must already be the union of all known inventory variants;
    see brickmatch.modules.roster.roster_builder.
    """
    model_config = ConfigDict(frozen=True)

    set_id: str = Field(..., min_length=1)
    catalog_a: list[CatalogAEntry] = Field(default_factory=list)
    catalog_b: list[CatalogBEntry] = Field(default_factory=list)

    @property
    def valid_catalog_a(self) -> list[CatalogAEntry]:
        return [e for e in self.catalog_a if e.is_valid]

    @property
    def valid_catalog_b(self) -> list[CatalogBEntry]:
        return [e for e in self.catalog_b if e.is_valid]

    @property
    def total_figures(self) -> int:
        """Roster size used by the set-size booster."""
        return max(len(self.valid_catalog_a), len(self.valid_catalog_b))


class InventoryVariant(BaseModel):
    """One historical catalog-A inventory revision of a set."""
    version: int = Field(1, ge=1)
    figures: list[CatalogAEntry] = Field(default_factory=list)
