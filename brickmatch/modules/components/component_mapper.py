# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Minifig Component Mapper
Once a catalog-A figure is paired with a catalog-B figure, map their
component parts to each other by body position and colour.

  same category + same colour         → 0.9
  sole remaining part in the category → 0.7

Each catalog-B part is used at most once. Parts with no unambiguous
counterpart are left unmapped.
"""

from __future__ import annotations

from collections import defaultdict

from brickmatch.models.parts import ComponentPart, PartCategory, PartMapping
from brickmatch.modules.components.part_categorizer import categorize_part
from brickmatch.utils.logger import get_logger

log = get_logger(__name__)

COLOR_MATCH_CONFIDENCE = 0.9
CATEGORY_ONLY_CONFIDENCE = 0.7


def map_component_parts(
    a_parts: list[ComponentPart],
    b_parts: list[ComponentPart],
) -> list[PartMapping]:
    if not a_parts or not b_parts:
        return []

    b_by_category: dict[PartCategory, list[ComponentPart]] = defaultdict(list)
    for part in b_parts:
        b_by_category[categorize_part(part.name)].append(part)

    used_b: set[str] = set()
    mappings: list[PartMapping] = []

    for a_part in a_parts:
        category = categorize_part(a_part.name)
        available = [
            p for p in b_by_category.get(category, [])
            if p.part_id not in used_b
        ]
        if not available:
            continue

        matched = next((p for p in available if p.color_id == a_part.color_id), None)
        if matched is None and len(available) == 1:
            matched = available[0]
        if matched is None:
            continue

        color_match = matched.color_id == a_part.color_id
        mappings.append(PartMapping(
            catalog_a_part_id=a_part.part_id,
            catalog_b_part_id=matched.part_id,
            category=category,
            color_match=color_match,
            confidence=COLOR_MATCH_CONFIDENCE if color_match else CATEGORY_ONLY_CONFIDENCE,
        ))
        used_b.add(matched.part_id)

    log.debug(
        "component_parts_mapped",
        catalog_a_parts=len(a_parts),
        catalog_b_parts=len(b_parts),
        mapped=len(mappings),
    )
    return mappings
