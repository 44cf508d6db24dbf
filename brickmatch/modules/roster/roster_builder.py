# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Roster Builder
Builds a SetRoster whose catalog-A side is the union of every inventory
variant of the set.

Matching against the latest variant only misses figures that exist solely
in older revisions; the marketplace catalog lists them, so they end up
unmatched or paired with the wrong figure. The matcher treats the roster
as flat, so the union has to happen here.
"""

from __future__ import annotations

from brickmatch.models.catalog import CatalogAEntry, CatalogBEntry, InventoryVariant, SetRoster
from brickmatch.modules.normalization.name_normalizer import normalize_fig_id
from brickmatch.utils.logger import get_logger

log = get_logger(__name__)


def _merge(first: CatalogAEntry, later: CatalogAEntry) -> CatalogAEntry:
    """Fill gaps in the first-seen record from a later variant."""
    update = {}
    if not first.display_name and later.display_name:
        update["display_name"] = later.display_name
    if first.part_count is None and later.part_count is not None:
        update["part_count"] = later.part_count
    if first.image_ref is None and later.image_ref is not None:
        update["image_ref"] = later.image_ref
    return first.model_copy(update=update) if update else first


def merge_inventory_variants(variants: list[InventoryVariant]) -> list[CatalogAEntry]:
    """
    Union of figures across variants, oldest version first.
    Figures are identified by normalised id; malformed figures are kept
    as-is so the matcher can report them.
    """
    merged: dict[str, CatalogAEntry] = {}
    malformed: list[CatalogAEntry] = []

    for variant in sorted(variants, key=lambda v: v.version):
        for fig in variant.figures:
            if not fig.is_valid:
                malformed.append(fig)
                continue
            key = normalize_fig_id(fig.id)
            current = merged.get(key)
            merged[key] = fig if current is None else _merge(current, fig)

    return list(merged.values()) + malformed


def build_roster(
    set_id: str,
    variants: list[InventoryVariant],
    catalog_b: list[CatalogBEntry],
) -> SetRoster:
    catalog_a = merge_inventory_variants(variants)

    if len(variants) > 1:
        latest = max(variants, key=lambda v: v.version)
        latest_ids = {normalize_fig_id(f.id) for f in latest.figures if f.is_valid}
        older_only = [
            a.id for a in catalog_a
            if a.is_valid and normalize_fig_id(a.id) not in latest_ids
        ]
        log.info(
            "inventory_variants_merged",
            set_id=set_id,
            variants=len(variants),
            figures=len(catalog_a),
            older_variant_only=len(older_only),
        )

    return SetRoster(set_id=set_id, catalog_a=catalog_a, catalog_b=catalog_b)
